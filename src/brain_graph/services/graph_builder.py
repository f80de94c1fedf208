"""Service layer: builds the note graph from a vault.

Pipeline order is fixed:

    discover -> assign ids -> title index -> (per document)
    parse header -> resolve links -> add category links -> extract links
    -> scrub tag links -> resolve images -> render
    -> backlinks (after every note is done) -> assemble graph

The title index is built to completion before any document is resolved and
is read-only afterwards.
"""
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from brain_graph.config import BrainGraphConfig
from brain_graph.exceptions import DocumentError
from brain_graph.models.schema import (
    Graph,
    GraphMetadata,
    Note,
    NoteIndexEntry,
    utc_now,
)
from brain_graph.models.title_index import TitleIndex
from brain_graph.observability import metrics, timed_operation
from brain_graph.services.categories import (
    add_category_links,
    classify_note,
    remove_leading_tag_links,
)
from brain_graph.services.identity import assign_ids
from brain_graph.services.link_resolver import (
    extract_links,
    render_readable,
    resolve_links,
)
from brain_graph.storage.image_store import ImageStore, resolve_images
from brain_graph.storage.markdown_parser import MarkdownParser
from brain_graph.storage.vault_scanner import (
    filter_included,
    find_markdown_files,
    read_document,
)

logger = logging.getLogger(__name__)


@dataclass
class BuildResult:
    """Outcome of one build.

    Attributes:
        graph: The assembled graph.
        failed: ``(relative path, reason)`` for each skipped document.
        discovered_count: Documents found, excluded folders included.
        excluded_count: Documents left out because of excluded folders.
    """

    graph: Graph
    failed: List[Tuple[str, str]] = field(default_factory=list)
    discovered_count: int = 0
    excluded_count: int = 0

    @property
    def note_count(self) -> int:
        return len(self.graph.notes)


def attach_backlinks(notes: Sequence[Note]) -> List[Note]:
    """Return copies of ``notes`` with ``backlinks`` filled in.

    A note's backlinks are the titles of every other note in ``notes`` that
    links to it, once per link. Self-links do not count.
    """
    incoming: Dict[str, List[str]] = {}
    for note in notes:
        for target_id in note.linked_ids():
            if target_id == note.id:
                continue
            incoming.setdefault(target_id, []).append(note.title)

    return [
        note.model_copy(update={"backlinks": list(incoming.get(note.id, []))})
        for note in notes
    ]


def assemble_graph(
    notes: Sequence[Note],
    excluded_folders: Iterable[str],
    generated_at: Optional[str] = None,
) -> Graph:
    """Combine notes and run metadata into the exported structure."""
    metadata = GraphMetadata(
        generated_at=generated_at or utc_now().isoformat(),
        note_count=len(notes),
        excluded_folders=list(excluded_folders),
    )
    return Graph(
        metadata=metadata,
        note_index=[NoteIndexEntry(id=n.id, title=n.title) for n in notes],
        notes=list(notes),
    )


class GraphBuilder:
    """Builds a link-resolved note graph from an Obsidian-style vault.

    Args:
        vault_dir: Absolute vault root. Must exist.
        excluded_folders: Lower-case top-level folder names to leave out.
        image_store: Resolver for image embeds; None drops all embeds.
        root_tag: Tag (and title) of the root note.
        tag_line_prefix: Prefix of the line-1 tag declaration.
        link_prefix: Marker that triggers tag-link scrubbing.
        default_type: Type for untagged notes in the vault root.
    """

    def __init__(
        self,
        vault_dir: Path,
        excluded_folders: Sequence[str] = (),
        image_store: Optional[ImageStore] = None,
        root_tag: str = "Second Brain",
        tag_line_prefix: str = "Tags:",
        link_prefix: str = "Link:",
        default_type: str = "note",
    ) -> None:
        self.vault_dir = vault_dir
        self.excluded_folders = list(excluded_folders)
        self.image_store = image_store
        self.root_tag = root_tag
        self.link_prefix = link_prefix
        self.default_type = default_type
        self.parser = MarkdownParser(tag_line_prefix=tag_line_prefix)

    @classmethod
    def from_config(cls, cfg: BrainGraphConfig) -> "GraphBuilder":
        """Create a builder from configuration.

        Raises:
            ConfigurationError: If the vault directory is missing or invalid.
        """
        vault_dir = cfg.require_vault_dir()
        images_dir = cfg.get_images_dir()
        image_store = None
        if images_dir is not None:
            image_store = ImageStore(
                images_dir,
                cfg.get_images_output_dir(),
                url_prefix=cfg.images_url_prefix,
            )
        return cls(
            vault_dir=vault_dir,
            excluded_folders=cfg.excluded_folders,
            image_store=image_store,
            root_tag=cfg.root_tag,
            tag_line_prefix=cfg.tag_line_prefix,
            link_prefix=cfg.link_prefix,
            default_type=cfg.default_type,
        )

    def build(self) -> BuildResult:
        """Run the whole pipeline once, from scratch."""
        metrics.reset()

        with timed_operation("discover", vault=self.vault_dir) as op:
            all_paths = find_markdown_files(self.vault_dir)
            included = filter_included(all_paths, self.vault_dir, self.excluded_folders)
            op["file_count"] = len(all_paths)

        with timed_operation("assign_ids") as op:
            path_to_id = assign_ids(all_paths)
            index = TitleIndex.build(path_to_id.items())
            op["id_count"] = len(path_to_id)
            op["title_count"] = len(index)

        notes: List[Note] = []
        failed: List[Tuple[str, str]] = []
        with timed_operation("resolve") as op:
            for path in included:
                rel = path.relative_to(self.vault_dir).as_posix()
                note_id = path_to_id.get(path)
                if note_id is None:
                    failed.append((rel, "modification time unavailable"))
                    continue
                try:
                    notes.append(self.build_note(path, note_id, index))
                except DocumentError as e:
                    logger.error(f"Skipping {rel}: {e}")
                    failed.append((rel, e.message))
            op["note_count"] = len(notes)

        with timed_operation("backlinks"):
            notes = attach_backlinks(notes)

        graph = assemble_graph(notes, self.excluded_folders)
        logger.info(
            f"Built {len(notes)} notes from {len(all_paths)} documents "
            f"({len(all_paths) - len(included)} excluded, {len(failed)} failed) "
            f"[{metrics.format_summary()}]"
        )
        return BuildResult(
            graph=graph,
            failed=failed,
            discovered_count=len(all_paths),
            excluded_count=len(all_paths) - len(included),
        )

    def build_note(self, path: Path, note_id: str, index: TitleIndex) -> Note:
        """Read and resolve a single document.

        Raises:
            DocumentError: If the document cannot be read or parsed.
        """
        doc = read_document(path, self.vault_dir)
        rel = doc.rel_path.as_posix()
        header = self.parser.parse_header(doc.text, source=rel)

        content = resolve_links(header.body, index)
        content = add_category_links(content, header.tags, note_id, index, self.root_tag)
        links = extract_links(content)
        content = remove_leading_tag_links(content, self.link_prefix)
        content = resolve_images(content, self.image_store)

        note_type = classify_note(
            header.tags,
            doc.rel_path,
            self.root_tag,
            self.default_type,
            declared_type=header.declared_type,
        )
        return Note(
            id=note_id,
            title=doc.title,
            type=note_type,
            tags=header.tags,
            path=rel,
            content=render_readable(content, index),
            links=links,
        )
