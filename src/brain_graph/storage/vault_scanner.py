"""Vault discovery and document loading."""
import logging
from pathlib import Path
from typing import Iterable, List

from brain_graph.exceptions import DocumentError, ErrorCode
from brain_graph.models.schema import Document

logger = logging.getLogger(__name__)

MARKDOWN_SUFFIX = ".md"


def find_markdown_files(vault_dir: Path) -> List[Path]:
    """Recursively list every markdown document under ``vault_dir``.

    Paths are sorted so that discovery order (and with it the first-wins
    id collision policy) does not depend on directory-listing order.
    """
    files = [
        p for p in vault_dir.rglob(f"*{MARKDOWN_SUFFIX}")
        if p.is_file()
    ]
    files.sort(key=lambda p: p.relative_to(vault_dir).parts)
    return files


def is_excluded(path: Path, vault_dir: Path, excluded_folders: Iterable[str]) -> bool:
    """Check whether a document lives under an excluded top-level folder."""
    excluded = {name.lower() for name in excluded_folders}
    if not excluded:
        return False
    rel_parts = path.relative_to(vault_dir).parts
    # Only folders count, not a root-level file that happens to share the name
    return len(rel_parts) > 1 and rel_parts[0].lower() in excluded


def filter_included(
    paths: Iterable[Path], vault_dir: Path, excluded_folders: Iterable[str]
) -> List[Path]:
    """Drop documents under excluded top-level folders, keeping order."""
    excluded = list(excluded_folders)
    included = [p for p in paths if not is_excluded(p, vault_dir, excluded)]
    return included


def read_document(path: Path, vault_dir: Path) -> Document:
    """Read one document from disk.

    Raises:
        DocumentError: If the file cannot be stat'ed, read, or decoded.
    """
    rel_path = path.relative_to(vault_dir)
    try:
        mtime = path.stat().st_mtime
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise DocumentError(
            f"Cannot read document {rel_path.as_posix()}",
            path=rel_path.as_posix(),
            code=ErrorCode.DOCUMENT_READ_FAILED,
            original_error=e,
        )
    # Normalize Windows line endings so line-1 header detection works
    text = text.replace("\r\n", "\n")
    return Document(path=path, rel_path=rel_path, text=text, mtime=mtime)
