"""Read-only title/id lookup shared by the resolution stages.

Built once from every discovered document (excluded folders included) so
that links into excluded folders still resolve to a real id.
"""
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Tuple


@dataclass(frozen=True)
class TitleIndex:
    """Title -> id lookup (case-sensitive and case-insensitive) plus id -> title.

    When two documents share a title, the one discovered last wins in
    both title maps.
    """

    title_to_id: Mapping[str, str]
    title_to_id_ci: Mapping[str, str]
    id_to_title: Mapping[str, str]

    @classmethod
    def build(cls, path_ids: Iterable[Tuple[Path, str]]) -> "TitleIndex":
        """Build all three maps from one pass over ``(path, id)`` pairs."""
        title_to_id: Dict[str, str] = {}
        title_to_id_ci: Dict[str, str] = {}
        id_to_title: Dict[str, str] = {}
        for path, note_id in path_ids:
            title = path.stem
            title_to_id[title] = note_id
            title_to_id_ci[title.lower()] = note_id
            id_to_title[note_id] = title
        return cls(
            title_to_id=MappingProxyType(title_to_id),
            title_to_id_ci=MappingProxyType(title_to_id_ci),
            id_to_title=MappingProxyType(id_to_title),
        )

    def lookup(self, title: str) -> Optional[str]:
        """Find the id for a title, exact match first, then ignoring case."""
        note_id = self.title_to_id.get(title)
        if note_id is None:
            note_id = self.title_to_id_ci.get(title.lower())
        return note_id

    def title_for(self, note_id: str) -> Optional[str]:
        """Title of the note with ``note_id``, or None."""
        return self.id_to_title.get(note_id)

    def __len__(self) -> int:
        return len(self.id_to_title)
