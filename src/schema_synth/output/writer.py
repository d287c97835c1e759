"""
Fixture Writer - writes drawn samples to JSON or YAML fixture files.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from schema_synth.models import GenerationConfig

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("json", "yaml")


class FixtureWriter:
    """
    Writes fixtures for a generation run.

    Output Structure:
        <output_dir>/<run_id>/
        ├── player.json        # one file per fixture, a list of samples
        ├── teams_query.json
        └── manifest.json      # run metadata
    """

    def __init__(self, config: GenerationConfig):
        if config.output_format not in SUPPORTED_FORMATS:
            raise ValueError(
                f"Unsupported output format {config.output_format!r}; use one of {SUPPORTED_FORMATS}"
            )
        self.config = config
        self.output_dir = config.output_dir / config.run_id
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self._written: Dict[str, Dict[str, Any]] = {}

    def get_output_dir(self) -> Path:
        """Return the output directory path."""
        return self.output_dir

    def write(self, name: str, samples: List[Any], source: Optional[str] = None) -> Path:
        """
        Write one fixture file.

        Args:
            name: Fixture name (file stem)
            samples: Drawn values
            source: What the samples were drawn from (type name or query text)

        Returns:
            Path of the written file
        """
        output_path = self.output_dir / f"{name}.{self.config.output_format}"

        with open(output_path, "w", encoding="utf-8") as f:
            f.write(render(samples, self.config.output_format))

        self._written[name] = {
            "file": output_path.name,
            "samples": len(samples),
            "source": source or name,
        }
        logger.info(f"Wrote {len(samples)} samples to {output_path}")
        return output_path

    def write_manifest(self) -> Path:
        """Write generation manifest."""
        manifest = {
            "generated_at": datetime.now().isoformat(),
            "run_id": self.config.run_id,
            "seed": self.config.seed,
            "format": self.config.output_format,
            "depth": self.config.depth,
            "width": self.config.width,
            "fixtures": self._written,
        }

        manifest_path = self.output_dir / "manifest.json"
        with open(manifest_path, "w") as f:
            json.dump(manifest, f, indent=2, default=str)

        logger.info(f"Wrote manifest to {manifest_path}")
        return manifest_path


def render(samples: Any, output_format: str = "json") -> str:
    """
    Serialize samples as JSON or YAML text.

    Values JSON cannot represent (dates, Decimals, UUIDs from Faker
    providers) are written as their string form in both formats.
    """
    text = json.dumps(samples, indent=2, ensure_ascii=False, default=str)
    if output_format == "yaml":
        return yaml.safe_dump(json.loads(text), sort_keys=False, allow_unicode=True)
    return text + "\n"
