"""Service layer for building the note graph."""

from brain_graph.services.graph_builder import (
    BuildResult,
    GraphBuilder,
    assemble_graph,
    attach_backlinks,
)

__all__ = [
    "BuildResult",
    "GraphBuilder",
    "assemble_graph",
    "attach_backlinks",
]
