"""Indentation heuristics and hierarchical tab directive resolution."""

__version__ = "0.1.0"
