"""
Scalar strategy resolution: built-in defaults plus caller overrides.
"""

from __future__ import annotations

import logging
from typing import Dict, Mapping, Optional

from schema_synth.errors import InvalidPolicyError, MissingScalarStrategyError
from schema_synth.strategies import Booleans, FakerValue, Floats, Integers, Strategy, Text

logger = logging.getLogger(__name__)


def default_scalar_strategies() -> Dict[str, Strategy]:
    """Default strategies for the built-in scalar kinds."""
    return {
        "Int": Integers(),
        "Float": Floats(),
        "String": Text(),
        "Boolean": Booleans(),
        "ID": FakerValue("uuid4"),
    }


class ScalarGeneratorResolver:
    """
    Maps scalar names to strategies.

    Overrides take precedence over built-ins and are the only source of
    strategies for custom scalars.
    """

    def __init__(self, overrides: Optional[Mapping[str, Strategy]] = None):
        overrides = dict(overrides or {})
        for name, strategy in overrides.items():
            if not isinstance(strategy, Strategy):
                raise InvalidPolicyError(
                    f"Scalar override for {name!r} must be a Strategy, got {type(strategy).__name__}"
                )
        self.overrides = overrides
        self._builtins = default_scalar_strategies()

    def strategy_for(self, scalar_name: str) -> Strategy:
        if scalar_name in self.overrides:
            return self.overrides[scalar_name]
        if scalar_name in self._builtins:
            return self._builtins[scalar_name]
        raise MissingScalarStrategyError(scalar_name)

    def has_strategy(self, scalar_name: str) -> bool:
        return scalar_name in self.overrides or scalar_name in self._builtins
