"""
Brain Graph - turns an Obsidian-style note vault into a link-resolved note graph.

Documents are read from a vault directory, given stable timestamp ids,
classified, and rewritten so that title-based wikilinks become id-based
references. The result is exported as a single JSON document for
downstream visualization.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("brain-graph")
except PackageNotFoundError:
    __version__ = "0.3.0"
