"""
Generator compiler: turns a possibly-cyclic schema into finite strategies.

Handles:
- Recursive descent over NamedRef/ListRef trees with an explicit type path
- Depth exhaustion (recursive list fields become empty, object fields are omitted)
- Width caps per list element type
- Memoization per (type name, remaining-depth vector)

Termination: entering object type T appends T to the path, and T can be
entered only while it occurs at most budget(T) times on the path. Every
path is therefore shorter than the sum of (budget + 1) over all object
types, so the descent always bottoms out.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple, Union

from schema_synth.generator.policy import DepthState, DepthWidthPolicy
from schema_synth.generator.scalars import ScalarGeneratorResolver
from schema_synth.models import ListRef, NamedRef, ObjectType, Schema, TypeKind, TypeRef
from schema_synth.registry import TypeRegistry
from schema_synth.strategies import EMPTY_LIST, FixedDict, Lists, SampledFrom, Strategy

logger = logging.getLogger(__name__)

Path = Tuple[str, ...]


class GeneratorCompiler:
    """
    Compiles type references into strategies for one compilation session.

    The memo cache is local to this instance, so independent sessions can
    compile concurrently.
    """

    def __init__(
        self,
        registry: TypeRegistry,
        policy: Optional[DepthWidthPolicy] = None,
        scalar_resolver: Optional[ScalarGeneratorResolver] = None,
    ):
        self.registry = registry
        self.policy = policy or DepthWidthPolicy()
        self.scalar_resolver = scalar_resolver or ScalarGeneratorResolver()

        # (type name, depth state) -> compiled strategy
        self._cache: Dict[Tuple[str, DepthState], Strategy] = {}

        for name in self.scalar_resolver.overrides:
            if not registry.has(TypeKind.SCALAR, name):
                logger.warning(f"Scalar override {name!r} does not name a scalar in the schema")

    @property
    def compiled_states(self) -> int:
        """Number of distinct (type, depth state) strategies built so far."""
        return len(self._cache)

    def compile_type(self, type_name: str) -> Strategy:
        """
        Compile a named enum, object or scalar type from an empty path.

        Every type is enterable from the empty path, whatever its depth
        budget, so a strategy is always returned.
        """
        kind = self.registry.kind_of(type_name)
        if kind is TypeKind.OBJECT:
            return self._compile_cached(type_name, (), lambda name: self._compile_object(name, ()))
        return self._compile_leaf(kind, type_name)

    def compile_list(self, ref: ListRef, path: Path) -> Strategy:
        """Compile a list reference below `path`; EMPTY_LIST when its element type is exhausted."""
        elements = self.compile_ref(ref.of, path)
        if elements is None:
            return EMPTY_LIST
        return Lists(elements, max_size=self.policy.max_width(ref.element_name))

    def compile_field_type(self, ref: TypeRef, path: Path) -> Optional[Strategy]:
        """
        Compile a field's type reference below `path`.

        Returns EMPTY_LIST for a list field whose element type is exhausted,
        and None for a singular object field that must be omitted.
        """
        if isinstance(ref, ListRef):
            return self.compile_list(ref, path)
        return self.compile_ref(ref, path)

    def compile_ref(self, ref: TypeRef, path: Path) -> Optional[Strategy]:
        """
        Compile a type reference below `path`.

        Returns None when the reference bottoms out in an object type whose
        depth budget is exhausted on this path.
        """
        if isinstance(ref, ListRef):
            elements = self.compile_ref(ref.of, path)
            if elements is None:
                return None
            return Lists(elements, max_size=self.policy.max_width(ref.element_name))

        kind = self.registry.kind_of(ref)
        if kind is not TypeKind.OBJECT:
            return self._compile_leaf(kind, ref.name)

        if not self.policy.may_enter(ref.name, path):
            logger.debug(f"Depth budget of {ref.name!r} exhausted at {' > '.join(path)}")
            return None

        return self._compile_cached(
            ref.name,
            self.policy.depth_state(path),
            lambda name: self._compile_object(name, path),
        )

    def _compile_cached(self, name: str, state: DepthState, build) -> Strategy:
        key = (name, state)
        cached = self._cache.get(key)
        if cached is not None:
            return cached
        strategy = build(name)
        self._cache[key] = strategy
        return strategy

    def _compile_leaf(self, kind: TypeKind, name: str) -> Strategy:
        if kind is TypeKind.ENUM:
            return self._compile_cached(name, (), self._compile_enum)
        return self._compile_cached(name, (), self._compile_scalar)

    def _compile_enum(self, name: str) -> Strategy:
        enum = self.registry.resolve(TypeKind.ENUM, name)
        return SampledFrom(enum.values)

    def _compile_scalar(self, name: str) -> Strategy:
        return self.scalar_resolver.strategy_for(name)

    def _compile_object(self, name: str, path: Path) -> Strategy:
        obj: ObjectType = self.registry.resolve(TypeKind.OBJECT, name)
        inner_path = path + (name,)

        entries = []
        for field_def in obj.fields:
            strategy = self.compile_field_type(field_def.type, inner_path)
            if strategy is None:
                logger.debug(f"Omitting {name}.{field_def.name}: depth exhausted")
                continue
            entries.append((field_def.name, strategy))

        return FixedDict(tuple(entries))


class CompiledGenerators:
    """
    Mapping from type name to a ready strategy, produced by compile_schema.

    Strategies are compiled on first request and memoized; every schema or
    policy error for the requested type surfaces on that first request,
    before any sampling. First requests add to the memo cache, so call
    compile_all() before sharing one instance between threads; afterwards
    every lookup is a read.
    """

    def __init__(self, compiler: GeneratorCompiler):
        self.compiler = compiler

    @property
    def registry(self) -> TypeRegistry:
        return self.compiler.registry

    @property
    def schema(self) -> Schema:
        return self.compiler.registry.schema

    @property
    def compiled_states(self) -> int:
        return self.compiler.compiled_states

    def __call__(self, type_name: str) -> Strategy:
        return self.compiler.compile_type(type_name)

    def __getitem__(self, type_name: str) -> Strategy:
        return self.compiler.compile_type(type_name)

    def __contains__(self, type_name: object) -> bool:
        return isinstance(type_name, str) and bool(self.registry.kinds_of(type_name))

    def __iter__(self) -> Iterator[str]:
        return iter(self.schema.type_names)

    def query(self, query_name: str) -> Strategy:
        """Full-graph strategy for a query's result type."""
        query = self.registry.resolve(TypeKind.QUERY, query_name)
        if isinstance(query.type, ListRef):
            return self.compiler.compile_list(query.type, ())
        return self.compiler.compile_type(query.type.name)

    def compile_all(self) -> Dict[str, Strategy]:
        """
        Compile every declared enum, object and scalar type eagerly.

        Later lookups of declared types and queries then only read the memo
        cache.
        """
        strategies = {name: self(name) for name in self.schema.type_names}
        logger.info(
            f"Compiled {len(strategies)} types into {self.compiled_states} strategies"
        )
        return strategies


def compile_schema(
    schema: Union[Schema, Mapping[str, Any]],
    depth: Optional[Mapping[str, int]] = None,
    width: Optional[Mapping[str, int]] = None,
    scalars: Optional[Mapping[str, Strategy]] = None,
    default_depth: int = 1,
) -> CompiledGenerators:
    """
    Compile a schema into a type name -> strategy mapping.

    Args:
        schema: Schema or the nested mapping layout (enums/objects/scalars/queries)
        depth: Per-object-type recursion budgets (default_depth otherwise)
        width: Per-element-type max list lengths (sampler default otherwise)
        scalars: Strategies for custom scalars, overriding built-ins

    Raises:
        InvalidPolicyError: a depth or width value is negative, or an
            override is not a Strategy
    """
    registry = TypeRegistry(schema)
    policy = DepthWidthPolicy(depth=depth, width=width, default_depth=default_depth)
    compiler = GeneratorCompiler(registry, policy, ScalarGeneratorResolver(scalars))
    return CompiledGenerators(compiler)
