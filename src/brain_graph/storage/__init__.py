"""Storage layer: reading the vault, image assets, and writing the graph."""

from brain_graph.storage.graph_writer import write_graph
from brain_graph.storage.image_store import ImageStore, resolve_images
from brain_graph.storage.markdown_parser import MarkdownParser, ParsedHeader
from brain_graph.storage.vault_scanner import (
    filter_included,
    find_markdown_files,
    is_excluded,
    read_document,
)

__all__ = [
    "ImageStore",
    "MarkdownParser",
    "ParsedHeader",
    "filter_included",
    "find_markdown_files",
    "is_excluded",
    "read_document",
    "resolve_images",
    "write_graph",
]
