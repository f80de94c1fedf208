"""Timestamp id assignment for vault documents.

Ids come from file modification times, so touching a file changes its id on
the next run.
"""
import logging
from pathlib import Path
from typing import Callable, Dict, Iterable, Optional

from brain_graph.models.schema import collision_suffix, timestamp_id

logger = logging.getLogger(__name__)


def _stat_mtime(path: Path) -> float:
    return path.stat().st_mtime


def assign_ids(
    paths: Iterable[Path],
    mtime_of: Optional[Callable[[Path], float]] = None,
) -> Dict[Path, str]:
    """Assign an id to every path, in order.

    The first document with a given timestamp keeps the bare 14-digit id.
    Later documents with the same timestamp get ``-xxxx``, where ``xxxx`` is
    a short hash of their own path.

    Documents whose mtime cannot be read get no id and are left out of the
    result; the builder reports them as failed.

    Args:
        paths: Documents in discovery order.
        mtime_of: Override for reading modification times (tests).

    Returns:
        Mapping of path to id, in the same order as ``paths``.
    """
    mtime_of = mtime_of or _stat_mtime
    path_to_id: Dict[Path, str] = {}
    id_to_path: Dict[str, Path] = {}

    for path in paths:
        try:
            note_id = timestamp_id(mtime_of(path))
        except OSError as e:
            logger.error(f"Cannot stat {path}: {e}")
            continue

        owner = id_to_path.get(note_id)
        if owner is not None and owner != path:
            note_id = f"{note_id}-{collision_suffix(path)}"
            if note_id in id_to_path:
                # Two paths hashing to the same suffix within one second.
                # Left as-is: the suffix scheme has no second tier.
                logger.warning(
                    f"Id {note_id} for {path} also collides with "
                    f"{id_to_path[note_id]}"
                )
            else:
                id_to_path[note_id] = path
        else:
            id_to_path[note_id] = path
        path_to_id[path] = note_id

    return path_to_id
