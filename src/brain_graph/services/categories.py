"""Note classification and canonical hierarchy links.

Three text/label stages that run after link resolution:

1. ``classify_note`` derives the category label.
2. ``add_category_links`` prepends links to the root note and to the note
   of the primary tag.
3. ``remove_leading_tag_links`` drops legacy tag-link runs that precede a
   ``Link:`` marker.
"""
import logging
import re
from pathlib import PurePath
from typing import List, Optional, Sequence

from brain_graph.models.title_index import TitleIndex
from brain_graph.utils import slugify_type

logger = logging.getLogger(__name__)

LEADING_LINKS = re.compile(r"^(?:\[\[[^\]]+\]\]\s*)+")


def classify_note(
    tags: Sequence[str],
    rel_path: PurePath,
    root_tag: str,
    default_type: str,
    declared_type: Optional[str] = None,
) -> str:
    """Derive a note's category label.

    Precedence: a type declared in frontmatter, then the primary tag (unless
    it is the root tag), then the immediate parent folder. Notes directly in
    the vault root fall back to ``default_type``.
    """
    if declared_type:
        return declared_type
    if tags and tags[0] != root_tag:
        return slugify_type(tags[0])
    parts = rel_path.parts
    if len(parts) > 1:
        return slugify_type(parts[-2])
    return default_type


def has_link_to(content: str, note_id: str) -> bool:
    """Check whether ``content`` already references ``note_id``."""
    return re.search(rf"\[\[{re.escape(note_id)}(?=[|\]])", content) is not None


def add_category_links(
    content: str,
    tags: Sequence[str],
    note_id: str,
    index: TitleIndex,
    root_tag: str,
) -> str:
    """Prepend canonical links to the root note and the primary-tag note.

    A link is only added when its target exists, is not the note itself,
    and is not already referenced in the body. When anything is added the
    result is ``<links joined by a space>\\n\\n<trimmed body>``.
    """
    links_to_add: List[str] = []

    if root_tag in tags:
        root_id = index.lookup(root_tag)
        if root_id and root_id != note_id and not has_link_to(content, root_id):
            links_to_add.append(f"[[{root_id}|{root_tag}]]")

    if tags and tags[0] != root_tag:
        category_tag = tags[0]
        category_id = index.lookup(category_tag)
        if category_id and category_id != note_id and not has_link_to(content, category_id):
            category_title = index.title_for(category_id) or category_tag
            links_to_add.append(f"[[{category_id}|{category_title}]]")

    if links_to_add:
        return f"{' '.join(links_to_add)}\n\n{content.strip()}"
    return content


def remove_leading_tag_links(content: str, link_prefix: str = "Link:") -> str:
    """Drop a leading run of wikilinks when it is followed by ``link_prefix``.

    Only the remainder, starting at the marker, is kept. Bodies that do not
    match are returned unchanged.
    """
    match = LEADING_LINKS.match(content)
    if match:
        after = content[match.end():].strip()
        if after.startswith(link_prefix):
            return after
    return content
