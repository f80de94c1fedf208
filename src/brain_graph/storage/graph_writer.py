"""Writes the exported graph to disk."""
import logging
import os
from pathlib import Path

from brain_graph.exceptions import ExportError
from brain_graph.models.schema import Graph

logger = logging.getLogger(__name__)


def write_graph(graph: Graph, output_path: Path, indent: int = 2) -> Path:
    """Write ``graph`` as JSON, replacing any previous export.

    The file is written to a temp sibling first and renamed into place, so a
    reader never sees a half-written export.

    Raises:
        ExportError: If the output directory or file cannot be written.
    """
    temp_file = output_path.with_suffix(output_path.suffix + ".tmp")
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(temp_file, "w", encoding="utf-8") as f:
            f.write(graph.to_json(indent=indent))
            f.write("\n")
        os.replace(temp_file, output_path)
    except OSError as e:
        try:
            temp_file.unlink()
        except OSError:
            pass
        raise ExportError(
            f"Failed to write graph to {output_path}",
            path=str(output_path),
            original_error=e,
        )
    logger.debug(f"Wrote {graph.metadata.note_count} notes to {output_path}")
    return output_path
