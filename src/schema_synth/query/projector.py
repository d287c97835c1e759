"""
Query projection: restricts compiled generators to a selection set.

Only selected fields are ever drawn; unselected fields are not drawn and
discarded, they are simply absent from the projected strategy. Results are
wrapped in the query-result envelope {"data": {...}}.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from schema_synth.errors import InvalidSelectionError, UnknownFieldError
from schema_synth.generator.compiler import CompiledGenerators
from schema_synth.models import ListRef, ObjectType, SelectionSet, TypeKind, TypeRef
from schema_synth.query.parser import QueryParser
from schema_synth.strategies import FixedDict, Just, Lists, Strategy

logger = logging.getLogger(__name__)

DATA_KEY = "data"
TYPENAME_FIELD = "__typename"
QUERY_ROOT_NAME = "Query"


class QueryProjector:
    """
    Builds query-shaped strategies from a set of compiled generators.

    Leaf fields (scalars and enums) reuse the compiled strategies unchanged;
    object fields are rebuilt from their nested selections.
    """

    def __init__(self, generators: CompiledGenerators):
        self.generators = generators
        self.registry = generators.registry
        self.compiler = generators.compiler

    def project(
        self,
        query_name: str,
        selection_set: Optional[SelectionSet] = None,
        alias: Optional[str] = None,
    ) -> Strategy:
        """
        Strategy for a single root query field, wrapped in the envelope.

        Args:
            query_name: Root query field name
            selection_set: Selection on the query's result type
            alias: Output key for the query field (defaults to query_name)
        """
        value = self.project_field(query_name, selection_set)
        return FixedDict(((DATA_KEY, FixedDict(((alias or query_name, value),))),))

    def project_operation(self, selection_set: SelectionSet) -> Strategy:
        """Strategy for every root field of an operation, wrapped in the envelope."""
        entries = []
        for selection in selection_set:
            if selection.name == TYPENAME_FIELD:
                entries.append((selection.output_key, Just(QUERY_ROOT_NAME)))
                continue
            entries.append(
                (selection.output_key, self.project_field(selection.name, selection.selections))
            )
        logger.debug(f"Projected operation with root fields {selection_set.output_keys}")
        return FixedDict(((DATA_KEY, FixedDict(tuple(entries))),))

    def project_field(self, query_name: str, selection_set: Optional[SelectionSet]) -> Strategy:
        """Unwrapped strategy for a root query field's value."""
        if not self.registry.has(TypeKind.QUERY, query_name):
            raise UnknownFieldError(QUERY_ROOT_NAME, query_name)
        query = self.registry.resolve(TypeKind.QUERY, query_name)
        return self._project_ref(query.type, selection_set, owner=f"{QUERY_ROOT_NAME}.{query_name}")

    def _project_ref(
        self,
        ref: TypeRef,
        selection_set: Optional[SelectionSet],
        owner: str,
    ) -> Strategy:
        if isinstance(ref, ListRef):
            return Lists(
                self._project_ref(ref.of, selection_set, owner),
                max_size=self.compiler.policy.max_width(ref.element_name),
            )

        kind = self.registry.kind_of(ref)

        if kind is not TypeKind.OBJECT:
            if selection_set:
                raise InvalidSelectionError(
                    f"{owner} is of {kind.value} type {ref.name!r} and cannot have a nested selection"
                )
            return self.compiler.compile_type(ref.name)

        if not selection_set:
            # No nested selection: the whole object, as in full-graph mode
            return self.compiler.compile_type(ref.name)

        obj: ObjectType = self.registry.resolve(TypeKind.OBJECT, ref.name)
        return self._project_object(obj, selection_set)

    def _project_object(self, obj: ObjectType, selection_set: SelectionSet) -> Strategy:
        entries = []
        for selection in selection_set:
            if selection.name == TYPENAME_FIELD:
                entries.append((selection.output_key, Just(obj.name)))
                continue

            field_def = obj.get_field(selection.name)
            if field_def is None:
                raise UnknownFieldError(obj.name, selection.name)

            entries.append((
                selection.output_key,
                self._project_ref(field_def.type, selection.selections, owner=f"{obj.name}.{field_def.name}"),
            ))

        return FixedDict(tuple(entries))


def compile_query(
    generators: CompiledGenerators,
    query: str,
    variables: Optional[Mapping[str, Any]] = None,
    operation_name: Optional[str] = None,
) -> Strategy:
    """
    Strategy whose draws are plausible results of `query`.

    Variables are accepted for call-site compatibility; they never change
    the shape of the result.
    """
    parsed = QueryParser().parse(query, operation_name)
    if variables:
        logger.debug(f"Ignoring {len(variables)} variable values")
    return QueryProjector(generators).project_operation(parsed.selection_set)
