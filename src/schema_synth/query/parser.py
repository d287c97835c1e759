"""
GraphQL query parser producing selection sets.

Parses query text with graphql-core and flattens it into the SelectionSet
model consumed by the projector: aliases are kept, fragments are inlined
and repeated selections of the same output key are merged. Arguments and
variables never affect the generated shape and are ignored.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import graphql
from graphql.language import (
    FieldNode,
    FragmentDefinitionNode,
    FragmentSpreadNode,
    InlineFragmentNode,
    OperationDefinitionNode,
    OperationType,
    SelectionSetNode,
)

from schema_synth.errors import QueryParseError
from schema_synth.models import Selection, SelectionSet

logger = logging.getLogger(__name__)


@dataclass
class ParsedQuery:
    """Result of parsing a query document."""
    operation_name: Optional[str]
    selection_set: SelectionSet
    variables: List[str] = field(default_factory=list)  # declared variable names

    @property
    def root_fields(self) -> List[str]:
        return [s.name for s in self.selection_set]


class QueryParser:
    """
    Parses GraphQL query text into a SelectionSet.

    Supports:
    - Aliases and nested selections
    - Named fragment spreads and inline fragments (flattened)
    - Anonymous and named query operations
    """

    def parse(self, query: str, operation_name: Optional[str] = None) -> ParsedQuery:
        """
        Parse query text.

        Args:
            query: GraphQL query document
            operation_name: Operation to use when the document holds several

        Returns:
            ParsedQuery with the operation's root selection set
        """
        try:
            document = graphql.parse(query)
        except graphql.GraphQLError as e:
            raise QueryParseError(f"Invalid query: {e.message}") from e

        operations: List[OperationDefinitionNode] = []
        fragments: Dict[str, FragmentDefinitionNode] = {}
        for definition in document.definitions:
            if isinstance(definition, OperationDefinitionNode):
                operations.append(definition)
            elif isinstance(definition, FragmentDefinitionNode):
                fragments[definition.name.value] = definition

        operation = self._select_operation(operations, operation_name)
        if operation.operation is not OperationType.QUERY:
            raise QueryParseError(
                f"Only query operations can be generated, got {operation.operation.value}"
            )

        variables = [v.variable.name.value for v in operation.variable_definitions or ()]
        if variables:
            logger.debug(f"Ignoring variables {variables}: they do not affect generated shape")

        selection_set = self._convert(operation.selection_set, fragments, ())
        name = operation.name.value if operation.name else None
        logger.debug(f"Parsed operation {name or '<anonymous>'} with {len(selection_set)} root fields")

        return ParsedQuery(operation_name=name, selection_set=selection_set, variables=variables)

    def _select_operation(
        self,
        operations: List[OperationDefinitionNode],
        operation_name: Optional[str],
    ) -> OperationDefinitionNode:
        if not operations:
            raise QueryParseError("Query document contains no operation")

        if operation_name is None:
            if len(operations) > 1:
                raise QueryParseError("Document has several operations; an operation name is required")
            return operations[0]

        for operation in operations:
            if operation.name and operation.name.value == operation_name:
                return operation
        raise QueryParseError(f"Unknown operation: {operation_name!r}")

    def _convert(
        self,
        node: SelectionSetNode,
        fragments: Dict[str, FragmentDefinitionNode],
        spread_path: Tuple[str, ...],
    ) -> SelectionSet:
        merged: Dict[str, Selection] = {}

        for selection, selection_path in self._flatten(node, fragments, spread_path):
            name = selection.name.value
            alias = selection.alias.value if selection.alias else None
            nested = (
                self._convert(selection.selection_set, fragments, selection_path)
                if selection.selection_set
                else None
            )
            key = alias or name

            existing = merged.get(key)
            if existing is None:
                merged[key] = Selection(name=name, alias=alias, selections=nested)
                continue
            if existing.name != name:
                raise QueryParseError(f"Output key {key!r} selects both {existing.name!r} and {name!r}")
            merged[key] = Selection(
                name=name,
                alias=alias,
                selections=_merge(existing.selections, nested),
            )

        return SelectionSet(tuple(merged.values()))

    def _flatten(
        self,
        node: SelectionSetNode,
        fragments: Dict[str, FragmentDefinitionNode],
        spread_path: Tuple[str, ...],
    ) -> List[Tuple[FieldNode, Tuple[str, ...]]]:
        fields: List[Tuple[FieldNode, Tuple[str, ...]]] = []
        for selection in node.selections:
            if isinstance(selection, FieldNode):
                fields.append((selection, spread_path))
            elif isinstance(selection, InlineFragmentNode):
                fields.extend(self._flatten(selection.selection_set, fragments, spread_path))
            elif isinstance(selection, FragmentSpreadNode):
                name = selection.name.value
                if name in spread_path:
                    raise QueryParseError(f"Fragment {name!r} spreads itself")
                if name not in fragments:
                    raise QueryParseError(f"Unknown fragment: {name!r}")
                fields.extend(
                    self._flatten(fragments[name].selection_set, fragments, spread_path + (name,))
                )
        return fields


def _merge(first: Optional[SelectionSet], second: Optional[SelectionSet]) -> Optional[SelectionSet]:
    if first is None:
        return second
    if second is None:
        return first

    merged: Dict[str, Selection] = {}
    for selection in (*first, *second):
        existing = merged.get(selection.output_key)
        if existing is None:
            merged[selection.output_key] = selection
        else:
            merged[selection.output_key] = Selection(
                name=selection.name,
                alias=selection.alias,
                selections=_merge(existing.selections, selection.selections),
            )
    return SelectionSet(tuple(merged.values()))


def parse_query(query: str, operation_name: Optional[str] = None) -> SelectionSet:
    """Parse query text and return the operation's root selection set."""
    return QueryParser().parse(query, operation_name).selection_set
