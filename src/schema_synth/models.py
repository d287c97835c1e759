"""
Core data models for the schema_synth package.

Defines the normalized schema (enums, objects, scalars, queries), type
references, parsed selection sets and the generation configuration.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Tuple, Union

from schema_synth.errors import InvalidConfigError, InvalidSchemaError


class TypeKind(str, Enum):
    """The four definition namespaces of a schema."""
    ENUM = "enum"
    OBJECT = "object"
    SCALAR = "scalar"
    QUERY = "query"


BUILTIN_SCALARS = ("Int", "Float", "String", "Boolean", "ID")


@dataclass(frozen=True)
class NamedRef:
    """Reference to a scalar, enum or object type by name."""
    name: str

    @property
    def element_name(self) -> str:
        return self.name

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class ListRef:
    """List-of wrapper around another type reference (lists may nest)."""
    of: "TypeRef"

    @property
    def element_name(self) -> str:
        """Name of the innermost named type."""
        return self.of.element_name

    def __str__(self) -> str:
        return f"[{self.of}]"


TypeRef = Union[NamedRef, ListRef]


def parse_type_ref(raw: Any) -> TypeRef:
    """
    Parse a raw type reference into a NamedRef/ListRef tree.

    Accepted forms:
        "player"                     named type
        ["player"]                   single-element list wrapper (nestable)
        {"list": "player"}           explicit list wrapper
        {"non-null": "player"}       non-null marker (dropped)
        "[player!]!"                 GraphQL notation
    """
    if isinstance(raw, (NamedRef, ListRef)):
        return raw

    if isinstance(raw, str):
        text = raw.strip()
        if text.endswith("!"):
            text = text[:-1].rstrip()
        if text.startswith("[") and text.endswith("]"):
            return ListRef(parse_type_ref(text[1:-1]))
        if not text or any(c in text for c in "[]! "):
            raise InvalidSchemaError(f"Malformed type reference: {raw!r}")
        return NamedRef(text)

    if isinstance(raw, (list, tuple)):
        if len(raw) != 1:
            raise InvalidSchemaError(
                f"List type reference must wrap exactly one type, got {len(raw)}: {raw!r}"
            )
        return ListRef(parse_type_ref(raw[0]))

    if isinstance(raw, Mapping) and len(raw) == 1:
        (key, inner), = raw.items()
        if key == "list":
            return ListRef(parse_type_ref(inner))
        if key in ("non-null", "non_null"):
            return parse_type_ref(inner)

    raise InvalidSchemaError(f"Malformed type reference: {raw!r}")


def type_ref_to_data(ref: TypeRef) -> Any:
    """Render a type reference back to the list-wrapper form."""
    if isinstance(ref, ListRef):
        return [type_ref_to_data(ref.of)]
    return ref.name


@dataclass(frozen=True)
class EnumType:
    """An enumeration with a set of unique symbolic values."""
    name: str
    values: Tuple[str, ...]
    description: Optional[str] = None

    def __post_init__(self):
        if not self.values:
            raise InvalidSchemaError(f"Enum {self.name!r} declares no values")
        seen = set()
        for value in self.values:
            if value in seen:
                raise InvalidSchemaError(f"Enum {self.name!r} repeats value {value!r}")
            seen.add(value)

    @classmethod
    def from_dict(cls, name: str, data: Any) -> EnumType:
        if isinstance(data, Mapping):
            values = data.get("values")
            description = data.get("description")
        else:
            values = data
            description = None
        if not isinstance(values, (list, tuple)):
            raise InvalidSchemaError(f"Enum {name!r} must declare a list of values")
        return cls(name=name, values=tuple(str(v) for v in values), description=description)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"values": list(self.values)}
        if self.description:
            data["description"] = self.description
        return data


@dataclass(frozen=True)
class FieldDef:
    """A single field of an object type."""
    name: str
    type: TypeRef
    description: Optional[str] = None

    @classmethod
    def from_dict(cls, name: str, data: Any) -> FieldDef:
        if isinstance(data, Mapping) and "type" in data:
            return cls(
                name=name,
                type=parse_type_ref(data["type"]),
                description=data.get("description"),
            )
        return cls(name=name, type=parse_type_ref(data))

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": type_ref_to_data(self.type)}
        if self.description:
            data["description"] = self.description
        return data


@dataclass(frozen=True)
class ObjectType:
    """An object type: an ordered mapping of field name to field definition."""
    name: str
    fields: Tuple[FieldDef, ...]
    description: Optional[str] = None

    @property
    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]

    def get_field(self, name: str) -> Optional[FieldDef]:
        """Get field by name (case-sensitive)."""
        for f in self.fields:
            if f.name == name:
                return f
        return None

    @classmethod
    def from_dict(cls, name: str, data: Any) -> ObjectType:
        if not isinstance(data, Mapping) or not isinstance(data.get("fields"), Mapping):
            raise InvalidSchemaError(f"Object {name!r} must declare a 'fields' mapping")
        return cls(
            name=name,
            fields=tuple(FieldDef.from_dict(str(k), v) for k, v in data["fields"].items()),
            description=data.get("description"),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"fields": {f.name: f.to_dict() for f in self.fields}}
        if self.description:
            data["description"] = self.description
        return data


@dataclass(frozen=True)
class ScalarType:
    """A scalar type. Only the name is used to pick a generation strategy."""
    name: str
    parse: Optional[Callable[[Any], Any]] = None
    serialize: Optional[Callable[[Any], Any]] = None
    description: Optional[str] = None

    @classmethod
    def from_dict(cls, name: str, data: Any) -> ScalarType:
        data = data if isinstance(data, Mapping) else {}
        return cls(
            name=name,
            parse=data.get("parse"),
            serialize=data.get("serialize"),
            description=data.get("description"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"description": self.description} if self.description else {}


@dataclass(frozen=True)
class QueryDef:
    """A root query field. The resolver is carried but never called."""
    name: str
    type: TypeRef
    resolve: Optional[Any] = None
    args: Mapping[str, Any] = field(default_factory=dict)
    description: Optional[str] = None

    @classmethod
    def from_dict(cls, name: str, data: Any) -> QueryDef:
        if isinstance(data, Mapping) and "type" in data:
            return cls(
                name=name,
                type=parse_type_ref(data["type"]),
                resolve=data.get("resolve"),
                args=dict(data.get("args") or {}),
                description=data.get("description"),
            )
        return cls(name=name, type=parse_type_ref(data))

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": type_ref_to_data(self.type)}
        if self.args:
            data["args"] = dict(self.args)
        if self.description:
            data["description"] = self.description
        return data


@dataclass(frozen=True)
class Schema:
    """
    Declarative schema: enum, object, scalar and query definitions by name.

    Immutable once built; the compiler only reads it.
    """
    enums: Mapping[str, EnumType] = field(default_factory=dict)
    objects: Mapping[str, ObjectType] = field(default_factory=dict)
    scalars: Mapping[str, ScalarType] = field(default_factory=dict)
    queries: Mapping[str, QueryDef] = field(default_factory=dict)

    def definitions(self, kind: TypeKind) -> Mapping[str, Any]:
        """Return the name -> definition mapping for one kind."""
        return {
            TypeKind.ENUM: self.enums,
            TypeKind.OBJECT: self.objects,
            TypeKind.SCALAR: self.scalars,
            TypeKind.QUERY: self.queries,
        }[TypeKind(kind)]

    @property
    def type_names(self) -> List[str]:
        """Names of every declared enum, object and scalar type."""
        return [*self.enums, *self.objects, *self.scalars]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Schema:
        """Create from the nested mapping layout (enums/objects/scalars/queries)."""
        if not isinstance(data, Mapping):
            raise InvalidSchemaError("Schema must be a mapping")
        unknown = set(data) - {"enums", "objects", "scalars", "queries"}
        if unknown:
            raise InvalidSchemaError(f"Unknown schema sections: {sorted(unknown)}")

        def section(key: str) -> Mapping[str, Any]:
            value = data.get(key) or {}
            if not isinstance(value, Mapping):
                raise InvalidSchemaError(f"Schema section {key!r} must be a mapping")
            return value

        return cls(
            enums={str(k): EnumType.from_dict(str(k), v) for k, v in section("enums").items()},
            objects={str(k): ObjectType.from_dict(str(k), v) for k, v in section("objects").items()},
            scalars={str(k): ScalarType.from_dict(str(k), v) for k, v in section("scalars").items()},
            queries={str(k): QueryDef.from_dict(str(k), v) for k, v in section("queries").items()},
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to plain data for serialization."""
        return {
            "enums": {k: v.to_dict() for k, v in self.enums.items()},
            "objects": {k: v.to_dict() for k, v in self.objects.items()},
            "scalars": {k: v.to_dict() for k, v in self.scalars.items()},
            "queries": {k: v.to_dict() for k, v in self.queries.items()},
        }


@dataclass(frozen=True)
class Selection:
    """A selected field, optionally aliased, with an optional nested selection."""
    name: str
    alias: Optional[str] = None
    selections: Optional["SelectionSet"] = None

    @property
    def output_key(self) -> str:
        return self.alias or self.name


@dataclass(frozen=True)
class SelectionSet:
    """Ordered sequence of selections, as produced by a query parser."""
    selections: Tuple[Selection, ...] = ()

    def __iter__(self) -> Iterator[Selection]:
        return iter(self.selections)

    def __len__(self) -> int:
        return len(self.selections)

    def __bool__(self) -> bool:
        return bool(self.selections)

    @property
    def output_keys(self) -> List[str]:
        return [s.output_key for s in self.selections]

    @classmethod
    def from_list(cls, items: Any) -> SelectionSet:
        """
        Build a selection set from plain data.

        Strings select a leaf field; a single-key mapping selects a field with
        a nested selection. "alias:name" aliases a field:

            SelectionSet.from_list(["wins", {"squad:players": ["name"]}])
        """
        selections = []
        for item in items:
            if isinstance(item, Selection):
                selections.append(item)
            elif isinstance(item, str):
                selections.append(_selection_from_key(item, None))
            elif isinstance(item, Mapping):
                for key, nested in item.items():
                    selections.append(_selection_from_key(key, cls.from_list(nested)))
            else:
                raise InvalidSchemaError(f"Malformed selection: {item!r}")
        return cls(tuple(selections))


def _selection_from_key(key: str, nested: Optional[SelectionSet]) -> Selection:
    if ":" in key:
        alias, name = (part.strip() for part in key.split(":", 1))
        return Selection(name=name, alias=alias, selections=nested)
    return Selection(name=key.strip(), selections=nested)


@dataclass
class GenerationConfig:
    """Configuration for a generation run."""
    depth: Dict[str, int] = field(default_factory=dict)
    width: Dict[str, int] = field(default_factory=dict)
    scalars: Dict[str, Any] = field(default_factory=dict)  # name -> Strategy
    default_depth: int = 1
    default_list_size: int = 5
    seed: Optional[int] = None
    count: int = 1
    output_format: str = "json"
    output_dir: Path = field(default_factory=lambda: Path("fixtures"))
    run_id: Optional[str] = None

    def __post_init__(self):
        if self.run_id is None:
            self.run_id = datetime.now().strftime("%Y%m%d_%H%M%S")
        if isinstance(self.output_dir, str):
            self.output_dir = Path(self.output_dir)
        for name in ("default_depth", "default_list_size", "count"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise InvalidConfigError(f"{name} must be a non-negative integer, got {value!r}")
