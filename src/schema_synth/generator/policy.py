"""
Depth and width policy for recursive generation.

Depth: an object type with budget d may be entered while already present
up to d times on the current descent path. Width: caps the length of lists
whose (innermost) element type is the given type.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Dict, Mapping, Optional, Sequence, Tuple

from schema_synth.errors import InvalidPolicyError

logger = logging.getLogger(__name__)

DepthState = Tuple[Tuple[str, int], ...]


def _validate_limits(kind: str, values: Optional[Mapping[str, int]]) -> Dict[str, int]:
    validated: Dict[str, int] = {}
    for name, value in (values or {}).items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidPolicyError(f"{kind} for {name!r} must be an integer, got {value!r}")
        if value < 0:
            raise InvalidPolicyError(f"{kind} for {name!r} must be non-negative, got {value}")
        validated[str(name)] = value
    return validated


class DepthWidthPolicy:
    """Per-type recursion budgets and list width caps with global defaults."""

    def __init__(
        self,
        depth: Optional[Mapping[str, int]] = None,
        width: Optional[Mapping[str, int]] = None,
        default_depth: int = 1,
        default_width: Optional[int] = None,
    ):
        self.depth = _validate_limits("Depth", depth)
        self.width = _validate_limits("Width", width)
        self.default_depth = _validate_limits("Default depth", {"*": default_depth})["*"]
        self.default_width = (
            None if default_width is None
            else _validate_limits("Default width", {"*": default_width})["*"]
        )

    def budget(self, type_name: str) -> int:
        return self.depth.get(type_name, self.default_depth)

    def remaining_depth(self, type_name: str, path: Sequence[str]) -> int:
        """
        Re-entries of `type_name` still allowed below `path`.

        Negative means entering the type now would exceed its budget.
        """
        return self.budget(type_name) - list(path).count(type_name)

    def may_enter(self, type_name: str, path: Sequence[str]) -> bool:
        return self.remaining_depth(type_name, path) >= 0

    def max_width(self, type_name: str) -> Optional[int]:
        """Max list length for lists of `type_name`, None when unspecified."""
        return self.width.get(type_name, self.default_width)

    def depth_state(self, path: Sequence[str]) -> DepthState:
        """Remaining-depth vector of every type on the path; order-independent."""
        counts = Counter(path)
        return tuple(sorted((name, self.budget(name) - n) for name, n in counts.items()))
