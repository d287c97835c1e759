"""
Loading of schema and generation config files (YAML or JSON).
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from faker import Faker

from schema_synth.errors import InvalidConfigError, InvalidSchemaError
from schema_synth.models import GenerationConfig, Schema
from schema_synth.strategies import (
    FakerValue,
    Floats,
    Integers,
    Just,
    Pattern,
    SampledFrom,
    Strategy,
    Text,
)

logger = logging.getLogger(__name__)

_faker_reference: Optional[Faker] = None


def _read_data(path: Path) -> Any:
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        if path.suffix.lower() == ".json":
            return json.load(f)
        return yaml.safe_load(f)


def load_schema(path: Path) -> Schema:
    """Load a schema from a YAML or JSON file."""
    path = Path(path)
    try:
        data = _read_data(path)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise InvalidSchemaError(f"Could not parse schema file {path}: {e}") from e

    schema = Schema.from_dict(data or {})
    logger.info(
        f"Loaded schema from {path}: {len(schema.objects)} objects, "
        f"{len(schema.enums)} enums, {len(schema.queries)} queries"
    )
    return schema


def load_config(path: Path, **overrides: Any) -> GenerationConfig:
    """
    Load a generation config from a YAML or JSON file.

    Layout:
        depth: {team: 2}
        width: {player: 3}
        scalars:
          Email: {faker: email}
          Rating: {integers: {min: 1, max: 5}}
        seed: 42
        default_list_size: 5
    """
    path = Path(path)
    try:
        data = _read_data(path) or {}
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise InvalidConfigError(f"Could not parse config file {path}: {e}") from e

    if not isinstance(data, Mapping):
        raise InvalidConfigError(f"Config file {path} must contain a mapping")

    config = config_from_dict(data, **overrides)
    logger.info(f"Loaded config from {path}")
    return config


def config_from_dict(data: Mapping[str, Any], **overrides: Any) -> GenerationConfig:
    """Create a GenerationConfig from plain data; keyword overrides win."""
    known = {
        "depth", "width", "scalars", "default_depth", "default_list_size",
        "seed", "count", "output_format", "output_dir", "run_id",
    }
    unknown = set(data) - known
    if unknown:
        raise InvalidConfigError(f"Unknown config keys: {sorted(unknown)}")

    kwargs: Dict[str, Any] = dict(data)
    kwargs["depth"] = dict(data.get("depth") or {})
    kwargs["width"] = dict(data.get("width") or {})
    kwargs["scalars"] = {
        str(name): strategy_from_spec(spec, name=str(name))
        for name, spec in (data.get("scalars") or {}).items()
    }
    kwargs.update({k: v for k, v in overrides.items() if v is not None})
    return GenerationConfig(**kwargs)


def strategy_from_spec(spec: Any, name: str = "<scalar>") -> Strategy:
    """
    Build a strategy from a config spec.

    Supported specs:
        {faker: email, args: {...}}   Faker provider
        {constant: 42}                always the same value
        {choice: [a, b, c]}           uniform choice
        {integers: {min: 0, max: 9}}  bounded integers
        {floats: {min: 0, max: 1}}    bounded floats
        {text: {min_size, max_size}}  random text
        {pattern: "XX-9999"}          format pattern
    """
    if isinstance(spec, Strategy):
        return spec
    if not isinstance(spec, Mapping) or not spec:
        raise InvalidConfigError(f"Strategy spec for {name!r} must be a non-empty mapping, got {spec!r}")

    try:
        if "faker" in spec:
            provider = spec["faker"]
            if not hasattr(_faker(), provider):
                raise InvalidConfigError(f"Unknown Faker provider for {name!r}: {provider!r}")
            return FakerValue.of(provider, **(spec.get("args") or {}))
        if "constant" in spec:
            return Just(spec["constant"])
        if "choice" in spec:
            return SampledFrom(tuple(spec["choice"]))
        if "integers" in spec:
            bounds = spec["integers"] or {}
            return Integers(**_bounds(bounds))
        if "floats" in spec:
            bounds = spec["floats"] or {}
            return Floats(**_bounds(bounds))
        if "text" in spec:
            return Text(**(spec["text"] or {}))
        if "pattern" in spec:
            return Pattern(str(spec["pattern"]))
    except (TypeError, ValueError) as e:
        raise InvalidConfigError(f"Invalid strategy spec for {name!r}: {e}") from e

    raise InvalidConfigError(f"Unknown strategy spec for {name!r}: {sorted(spec)}")


def _bounds(bounds: Mapping[str, Any]) -> Dict[str, Any]:
    kwargs: Dict[str, Any] = {}
    if "min" in bounds:
        kwargs["min_value"] = bounds["min"]
    if "max" in bounds:
        kwargs["max_value"] = bounds["max"]
    return kwargs


def _faker() -> Faker:
    global _faker_reference
    if _faker_reference is None:
        _faker_reference = Faker()
    return _faker_reference
