"""
Generator module for compiling schemas into composable strategies.

Handles type-graph recursion, depth/width policy and scalar strategy lookup.
"""

from schema_synth.generator.compiler import CompiledGenerators, GeneratorCompiler, compile_schema
from schema_synth.generator.policy import DepthWidthPolicy
from schema_synth.generator.scalars import ScalarGeneratorResolver, default_scalar_strategies

__all__ = [
    "CompiledGenerators",
    "GeneratorCompiler",
    "compile_schema",
    "DepthWidthPolicy",
    "ScalarGeneratorResolver",
    "default_scalar_strategies",
]
