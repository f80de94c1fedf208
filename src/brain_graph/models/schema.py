"""Data models for the note graph."""

import datetime
import hashlib
import re
from datetime import timezone
from pathlib import Path
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# Timestamp id, optionally followed by a 4-hex collision suffix
NOTE_ID_PATTERN = re.compile(r"^\d{14}(?:-[a-f0-9]{4})?$")
# Same shape, for embedding inside larger patterns
NOTE_ID_FRAGMENT = r"\d{14}(?:-[a-f0-9]{4})?"

ID_TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"


def utc_now() -> datetime.datetime:
    """Get current UTC time as timezone-aware datetime."""
    return datetime.datetime.now(timezone.utc)


def timestamp_id(mtime: float) -> str:
    """Format a modification time as a 14-digit id in local time.

    Resolution is one second, so files saved within the same second
    share an id. See :func:`collision_suffix`.

    Example:
        2024-01-02 03:04:05 (local) -> "20240102030405"
    """
    return datetime.datetime.fromtimestamp(mtime).strftime(ID_TIMESTAMP_FORMAT)


def collision_suffix(path: Path) -> str:
    """Short hash of a document path used to disambiguate colliding ids."""
    return hashlib.md5(str(path).encode("utf-8")).hexdigest()[:4]


class _CamelModel(BaseModel):
    """Base for exported models: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Document(BaseModel):
    """A source document read from the vault. Lives for one run only."""

    path: Path = Field(..., description="Absolute path to the document")
    rel_path: Path = Field(..., description="Path relative to the vault root")
    text: str = Field(..., description="Raw document body")
    mtime: float = Field(..., description="Modification time (epoch seconds)")

    model_config = {"frozen": True}

    @property
    def title(self) -> str:
        """Title is the file name without its extension."""
        return self.path.stem


class NoteLink(_CamelModel):
    """An id-based reference from one note to another."""

    target_id: str = Field(..., description="ID of the referenced note")
    display_text: str = Field(..., description="Text shown for the link")

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )


class Note(_CamelModel):
    """A resolved note, ready for export."""

    id: str = Field(..., description="Timestamp id of the note")
    title: str = Field(..., description="Title derived from the file name")
    type: str = Field(..., description="Category label")
    tags: List[str] = Field(default_factory=list, description="Tags, primary first")
    path: str = Field(..., description="POSIX path relative to the vault root")
    content: str = Field(default="", description="Rendered, link-resolved body")
    links: List[NoteLink] = Field(default_factory=list, description="Outgoing links")
    backlinks: List[str] = Field(
        default_factory=list, description="Titles of notes linking here"
    )

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        """Validate that the ID has the timestamp shape."""
        if not NOTE_ID_PATTERN.match(v):
            raise ValueError(f"Note ID '{v}' is not a 14-digit timestamp id")
        return v

    def linked_ids(self) -> List[str]:
        """IDs this note links to, in link order (duplicates kept)."""
        return [link.target_id for link in self.links]


class NoteIndexEntry(_CamelModel):
    """The id/title projection of a note."""

    id: str
    title: str


class GraphMetadata(_CamelModel):
    """Export metadata."""

    generated_at: str = Field(default_factory=lambda: utc_now().isoformat())
    note_count: int = 0
    excluded_folders: List[str] = Field(default_factory=list)


class Graph(_CamelModel):
    """The exported note graph."""

    metadata: GraphMetadata = Field(default_factory=GraphMetadata)
    note_index: List[NoteIndexEntry] = Field(default_factory=list)
    notes: List[Note] = Field(default_factory=list)

    def to_json(self, indent: int = 2) -> str:
        """Serialize with camelCase field names."""
        return self.model_dump_json(by_alias=True, indent=indent)
