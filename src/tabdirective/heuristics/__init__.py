"""Indentation heuristics over read-only text snapshots."""

from tabdirective.heuristics.engine import (
    IndentHeuristics,
    IndentObservation,
    analyze,
)
from tabdirective.heuristics.snapshot import Line, SnapshotSource, TextSnapshot

__all__ = [
    "IndentHeuristics",
    "IndentObservation",
    "Line",
    "SnapshotSource",
    "TextSnapshot",
    "analyze",
]
