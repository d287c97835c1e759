"""
Query module: parse query text into selection sets and project compiled
generators onto them.

Usage:
    from schema_synth import compile_schema
    from schema_synth.query import compile_query

    generators = compile_schema(schema)
    strategy = compile_query(generators, "{ teams { wins players { name } } }")
"""

from schema_synth.query.parser import ParsedQuery, QueryParser, parse_query
from schema_synth.query.projector import QueryProjector, compile_query

__all__ = [
    "ParsedQuery",
    "QueryParser",
    "parse_query",
    "QueryProjector",
    "compile_query",
]
