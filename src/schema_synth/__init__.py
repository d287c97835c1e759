"""
Schema Synth - Random fixture generators compiled from type schemas

Compiles a declarative schema (enums, object types, scalars and queries)
into composable strategies that draw realistic-shaped test fixtures.

Features:
- Terminating generation over self- and mutually-referential object types
- Per-type recursion depth budgets and per-element-type list width caps
- Caller-supplied strategies for custom scalars
- Query mode: results shaped exactly like a GraphQL selection set
"""

__version__ = "0.1.0"
__author__ = "DDG Team"

from schema_synth.errors import (
    AmbiguousTypeError,
    InvalidConfigError,
    InvalidPolicyError,
    InvalidSchemaError,
    InvalidSelectionError,
    MissingScalarStrategyError,
    QueryParseError,
    SchemaSynthError,
    UnknownFieldError,
    UnknownTypeError,
)
from schema_synth.models import (
    EnumType,
    FieldDef,
    GenerationConfig,
    ListRef,
    NamedRef,
    ObjectType,
    QueryDef,
    ScalarType,
    Schema,
    Selection,
    SelectionSet,
    TypeKind,
)
from schema_synth.registry import TypeRegistry
from schema_synth.strategies import Sampler, Strategy

# Import generator module
from schema_synth.generator import (
    CompiledGenerators,
    DepthWidthPolicy,
    GeneratorCompiler,
    ScalarGeneratorResolver,
    compile_schema,
)

# Import query module
from schema_synth.query import QueryParser, QueryProjector, compile_query, parse_query

__all__ = [
    # Errors
    "SchemaSynthError",
    "InvalidSchemaError",
    "InvalidConfigError",
    "UnknownTypeError",
    "AmbiguousTypeError",
    "MissingScalarStrategyError",
    "UnknownFieldError",
    "InvalidSelectionError",
    "InvalidPolicyError",
    "QueryParseError",
    # Core models
    "Schema",
    "EnumType",
    "ObjectType",
    "FieldDef",
    "ScalarType",
    "QueryDef",
    "NamedRef",
    "ListRef",
    "TypeKind",
    "Selection",
    "SelectionSet",
    "GenerationConfig",
    "TypeRegistry",
    # Sampling
    "Strategy",
    "Sampler",
    # Generator
    "CompiledGenerators",
    "DepthWidthPolicy",
    "GeneratorCompiler",
    "ScalarGeneratorResolver",
    "compile_schema",
    # Query
    "QueryParser",
    "QueryProjector",
    "compile_query",
    "parse_query",
]
