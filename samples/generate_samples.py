#!/usr/bin/env python3
"""
Generate example fixtures from the football schema.

Writes full-graph team samples and a query-shaped fixture to ./fixtures.
"""

from pathlib import Path

from schema_synth import Sampler, compile_schema
from schema_synth.loader import load_config, load_schema
from schema_synth.output import FixtureWriter
from schema_synth.query import compile_query

SAMPLES_DIR = Path(__file__).parent

TEAMS_QUERY = """
query Standings {
  teams {
    wins
    squad: players { name position }
  }
}
"""


def build_generators(schema, config):
    """Compile the schema with every generation limit from the config."""
    return compile_schema(
        schema,
        depth=config.depth,
        width=config.width,
        scalars=config.scalars,
        default_depth=config.default_depth,
    )


def main(output_dir: Path = SAMPLES_DIR / "fixtures") -> Path:
    schema = load_schema(SAMPLES_DIR / "football.yaml")
    config = load_config(SAMPLES_DIR / "football_config.yaml", output_dir=output_dir, count=5)

    generators = build_generators(schema, config)
    sampler = Sampler(seed=config.seed, default_max_size=config.default_list_size)
    writer = FixtureWriter(config)

    for type_name in ("player", "team"):
        writer.write(type_name, sampler.sample(generators(type_name), config.count))

    standings = compile_query(generators, TEAMS_QUERY)
    writer.write("standings", sampler.sample(standings, config.count), source=TEAMS_QUERY)

    manifest = writer.write_manifest()
    print(f"Fixtures written to {manifest.parent}")
    return manifest


if __name__ == "__main__":
    main()
