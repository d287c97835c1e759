"""Exceptions raised while loading schemas, compiling generators and projecting queries."""

from __future__ import annotations

from typing import Iterable


class SchemaSynthError(Exception):
    """Base exception for schema_synth."""

    pass


class InvalidSchemaError(SchemaSynthError):
    """Raised when schema input is malformed."""

    pass


class InvalidConfigError(SchemaSynthError):
    """Raised when a config file or scalar strategy spec is malformed."""

    pass


class UnknownTypeError(SchemaSynthError):
    """Raised when a type name is absent from the registry."""

    def __init__(self, kind: str, name: str):
        self.kind = kind
        self.name = name
        super().__init__(f"Unknown {kind} type: {name!r}")


class AmbiguousTypeError(SchemaSynthError):
    """Raised when a bare type reference names definitions of several kinds."""

    def __init__(self, name: str, kinds: Iterable[str]):
        self.name = name
        self.kinds = tuple(kinds)
        super().__init__(
            f"Type reference {name!r} is ambiguous, declared as: {', '.join(self.kinds)}"
        )


class MissingScalarStrategyError(SchemaSynthError):
    """Raised when a custom scalar is reached without a generation strategy."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(
            f"No generation strategy for custom scalar {name!r}; supply one via scalars={{...}}"
        )


class UnknownFieldError(SchemaSynthError):
    """Raised when a selection names a field not declared on its type."""

    def __init__(self, type_name: str, field_name: str):
        self.type_name = type_name
        self.field_name = field_name
        super().__init__(f"Type {type_name!r} has no field {field_name!r}")


class InvalidSelectionError(SchemaSynthError):
    """Raised when a leaf field is given a nested selection."""

    pass


class InvalidPolicyError(SchemaSynthError, ValueError):
    """Raised when a depth, width or scalar override value is invalid."""

    pass


class QueryParseError(SchemaSynthError):
    """Raised when query text cannot be turned into a selection set."""

    pass
