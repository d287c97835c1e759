"""
Composable value strategies and the sampler that draws from them.

A strategy is an immutable description of how to draw a random value; it
holds no random state. All randomness comes from the Sampler passed to
`draw`, which owns a numpy Generator and a Faker instance. Compiled strategy
trees can therefore be shared freely between threads, each thread drawing
through its own Sampler.
"""

from __future__ import annotations

import copy
import logging
import string
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np
from faker import Faker

logger = logging.getLogger(__name__)

INT_MIN = -(2 ** 31)
INT_MAX = 2 ** 31 - 1
FLOAT_RANGE = 1e6
DEFAULT_TEXT_SIZE = 20
DEFAULT_LIST_SIZE = 5

# Probability of drawing a boundary value instead of a uniform one
EDGE_CASE_PROBABILITY = 0.1

DEFAULT_ALPHABET = (
    string.ascii_letters
    + string.digits
    + string.punctuation
    + " "
    + "äöüßéèñçøåæ"
    + "ΩπλΣ"
    + "中文日本語"
    + "✓★"
)


class Sampler:
    """
    Draws concrete values from strategies.

    Same seed and same strategy yield identical draws.
    """

    def __init__(
        self,
        seed: Optional[int] = None,
        default_max_size: int = DEFAULT_LIST_SIZE,
        locale: Optional[str] = None,
    ):
        if default_max_size < 0:
            raise ValueError(f"default_max_size must be non-negative, got {default_max_size}")
        self.seed = seed
        self.default_max_size = default_max_size
        self.rng = np.random.default_rng(seed)
        self.faker = Faker(locale)
        if seed is not None:
            self.faker.seed_instance(seed)

    def example(self, strategy: Strategy) -> Any:
        """Draw a single value."""
        return strategy.draw(self)

    def sample(self, strategy: Strategy, n: int = 1) -> List[Any]:
        """Draw `n` independent values."""
        if n < 0:
            raise ValueError(f"Sample count must be non-negative, got {n}")
        return [strategy.draw(self) for _ in range(n)]

    def chance(self, probability: float) -> bool:
        return bool(self.rng.random() < probability)

    def integer(self, low: int, high: int) -> int:
        """Uniform integer in [low, high]."""
        return int(self.rng.integers(low, high, endpoint=True))


class Strategy(ABC):
    """Immutable description of how to draw one random value."""

    @abstractmethod
    def draw(self, sampler: Sampler) -> Any:
        ...

    def map(self, fn: Callable[[Any], Any]) -> Strategy:
        return Mapped(self, fn)


@dataclass(frozen=True)
class Just(Strategy):
    """Always draws (a copy of) the same value."""
    value: Any

    def draw(self, sampler: Sampler) -> Any:
        return copy.deepcopy(self.value)


@dataclass(frozen=True)
class Integers(Strategy):
    """Integers in a bounded signed range, biased towards zero and the bounds."""
    min_value: int = INT_MIN
    max_value: int = INT_MAX

    def __post_init__(self):
        if self.min_value > self.max_value:
            raise ValueError(f"Empty integer range [{self.min_value}, {self.max_value}]")

    def draw(self, sampler: Sampler) -> int:
        if sampler.chance(EDGE_CASE_PROBABILITY):
            edges = [
                v for v in (0, -1, 1, self.min_value, self.max_value)
                if self.min_value <= v <= self.max_value
            ]
            return edges[sampler.integer(0, len(edges) - 1)]
        return sampler.integer(self.min_value, self.max_value)


@dataclass(frozen=True)
class Floats(Strategy):
    """Finite floats in a bounded range, occasionally exactly zero or a bound."""
    min_value: float = -FLOAT_RANGE
    max_value: float = FLOAT_RANGE

    def __post_init__(self):
        if self.min_value > self.max_value:
            raise ValueError(f"Empty float range [{self.min_value}, {self.max_value}]")

    def draw(self, sampler: Sampler) -> float:
        if sampler.chance(EDGE_CASE_PROBABILITY):
            edges = [
                v for v in (0.0, float(self.min_value), float(self.max_value))
                if self.min_value <= v <= self.max_value
            ]
            return edges[sampler.integer(0, len(edges) - 1)]
        return float(sampler.rng.uniform(self.min_value, self.max_value))


@dataclass(frozen=True)
class Booleans(Strategy):

    def draw(self, sampler: Sampler) -> bool:
        return sampler.chance(0.5)


@dataclass(frozen=True)
class Text(Strategy):
    """Strings over an alphabet, including the empty string."""
    min_size: int = 0
    max_size: int = DEFAULT_TEXT_SIZE
    alphabet: str = DEFAULT_ALPHABET

    def __post_init__(self):
        if not 0 <= self.min_size <= self.max_size:
            raise ValueError(f"Invalid text size range [{self.min_size}, {self.max_size}]")
        if not self.alphabet and self.max_size > 0:
            raise ValueError("Text alphabet must not be empty")

    def draw(self, sampler: Sampler) -> str:
        length = sampler.integer(self.min_size, self.max_size)
        if length == 0:
            return ""
        indices = sampler.rng.integers(0, len(self.alphabet), size=length)
        return "".join(self.alphabet[i] for i in indices)


@dataclass(frozen=True)
class FakerValue(Strategy):
    """Draws from a Faker provider, e.g. FakerValue("email")."""
    provider: str
    kwargs: Tuple[Tuple[str, Any], ...] = ()

    @classmethod
    def of(cls, provider: str, **kwargs: Any) -> FakerValue:
        return cls(provider, tuple(sorted(kwargs.items())))

    def draw(self, sampler: Sampler) -> Any:
        return getattr(sampler.faker, self.provider)(**dict(self.kwargs))


@dataclass(frozen=True)
class Pattern(Strategy):
    """
    Strings matching a simple format pattern.

    X: uppercase letter, x: lowercase letter, 9 or #: digit, anything else literal.
    """
    pattern: str

    def draw(self, sampler: Sampler) -> str:
        result = []
        for c in self.pattern:
            if c == "X":
                result.append(string.ascii_uppercase[sampler.integer(0, 25)])
            elif c == "x":
                result.append(string.ascii_lowercase[sampler.integer(0, 25)])
            elif c in ("9", "#"):
                result.append(string.digits[sampler.integer(0, 9)])
            else:
                result.append(c)
        return "".join(result)


@dataclass(frozen=True)
class SampledFrom(Strategy):
    """Uniform choice from a fixed, non-empty sequence of values."""
    values: Tuple[Any, ...]

    def __post_init__(self):
        if not self.values:
            raise ValueError("SampledFrom requires at least one value")

    def draw(self, sampler: Sampler) -> Any:
        return copy.deepcopy(self.values[sampler.integer(0, len(self.values) - 1)])


@dataclass(frozen=True)
class Lists(Strategy):
    """
    Lists of independently drawn elements.

    Length is uniform in [min_size, max_size]; a max_size of None defers to
    the sampler's default list size.
    """
    elements: Strategy
    max_size: Optional[int] = None
    min_size: int = 0

    def draw(self, sampler: Sampler) -> List[Any]:
        max_size = sampler.default_max_size if self.max_size is None else self.max_size
        length = sampler.integer(min(self.min_size, max_size), max_size)
        return [self.elements.draw(sampler) for _ in range(length)]


@dataclass(frozen=True)
class FixedDict(Strategy):
    """Records drawing every entry, in order, keyed by entry name."""
    entries: Tuple[Tuple[str, Strategy], ...] = ()

    @property
    def keys(self) -> List[str]:
        return [key for key, _ in self.entries]

    def draw(self, sampler: Sampler) -> Dict[str, Any]:
        return {key: strategy.draw(sampler) for key, strategy in self.entries}


@dataclass(frozen=True)
class Mapped(Strategy):
    """Applies a function to each value drawn from another strategy."""
    strategy: Strategy
    fn: Callable[[Any], Any] = field(compare=False)

    def draw(self, sampler: Sampler) -> Any:
        return self.fn(self.strategy.draw(sampler))


def just(value: Any) -> Strategy:
    return Just(value)


def sampled_from(values: Sequence[Any]) -> Strategy:
    return SampledFrom(tuple(values))


def fixed_dict(entries: Mapping[str, Strategy]) -> Strategy:
    return FixedDict(tuple(entries.items()))


EMPTY_LIST = Just([])
