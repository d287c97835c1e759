"""
Type registry: a flat, name-indexed view of a schema.

Lookups are always qualified by kind, so an object and a scalar sharing a
name can never be confused with each other.
"""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Union

from schema_synth.errors import AmbiguousTypeError, UnknownTypeError
from schema_synth.models import BUILTIN_SCALARS, NamedRef, ScalarType, Schema, TypeKind

logger = logging.getLogger(__name__)

# Kinds a field's type reference can point at. Queries live in their own namespace.
_TYPE_KINDS = (TypeKind.ENUM, TypeKind.OBJECT, TypeKind.SCALAR)


class TypeRegistry:
    """Resolves definitions by (kind, name) for a single schema."""

    def __init__(self, schema: Union[Schema, Mapping[str, Any]]):
        if not isinstance(schema, Schema):
            schema = Schema.from_dict(schema)
        self.schema = schema
        self._builtin_scalars = {
            name: ScalarType(name=name)
            for name in BUILTIN_SCALARS
            if name not in schema.scalars
        }

        logger.debug(
            f"Registry: {len(schema.enums)} enums, {len(schema.objects)} objects, "
            f"{len(schema.scalars)} scalars, {len(schema.queries)} queries"
        )

    def _definitions(self, kind: TypeKind) -> Mapping[str, Any]:
        if kind is TypeKind.SCALAR:
            return {**self._builtin_scalars, **self.schema.scalars}
        return self.schema.definitions(kind)

    def has(self, kind: Union[TypeKind, str], name: str) -> bool:
        return name in self._definitions(TypeKind(kind))

    def resolve(self, kind: Union[TypeKind, str], name: str) -> Any:
        """Return the definition of `name` in the `kind` namespace."""
        kind = TypeKind(kind)
        definitions = self._definitions(kind)
        try:
            return definitions[name]
        except KeyError:
            raise UnknownTypeError(kind.value, name) from None

    def kinds_of(self, name: str) -> List[TypeKind]:
        """All type kinds (enum/object/scalar) declaring `name`."""
        return [kind for kind in _TYPE_KINDS if name in self._definitions(kind)]

    def kind_of(self, ref: Union[NamedRef, str]) -> TypeKind:
        """
        Classify a bare type reference.

        Raises:
            UnknownTypeError: no enum, object or scalar has this name
            AmbiguousTypeError: more than one kind declares this name
        """
        name = ref.name if isinstance(ref, NamedRef) else ref
        kinds = self.kinds_of(name)
        if not kinds:
            raise UnknownTypeError("type", name)
        if len(kinds) > 1:
            raise AmbiguousTypeError(name, [k.value for k in kinds])
        return kinds[0]

    @property
    def builtin_scalar_names(self) -> List[str]:
        return list(self._builtin_scalars)
