"""
Output module for writing generated fixtures to JSON or YAML files.
"""

from schema_synth.output.writer import FixtureWriter, render

__all__ = [
    "FixtureWriter",
    "render",
]
