"""Wikilink resolution.

Title-based ``[[Target]]`` / ``[[Target|Text]]`` references are rewritten to
id-based ``[[id|Text]]`` references using the shared TitleIndex. Each stage
here is a pure ``str -> str`` (or ``str -> list``) function.
"""
import logging
import os
import re
from typing import List, Optional, Tuple

from brain_graph.models.schema import NOTE_ID_FRAGMENT, NoteLink
from brain_graph.models.title_index import TitleIndex

logger = logging.getLogger(__name__)

# Group 1: "!" for image embeds, group 2: link body
WIKILINK = re.compile(r"(!?)\[\[([^\]]+)\]\]")
# Id-form links; group 1: "!" marker, group 2: id, group 3: display text
ID_LINK = re.compile(rf"(!?)\[\[({NOTE_ID_FRAGMENT})(?:\|([^\]]+))?\]\]")


def split_link(inner: str) -> Tuple[str, Optional[str]]:
    """Split ``target|display`` into its parts; display is None if absent.

    Only the first two ``|``-separated parts count, so ``[[A|B|C]]`` shows ``B``.
    """
    parts = inner.split("|")
    display = parts[1].strip() if len(parts) > 1 else ""
    return parts[0].strip(), (display or None)


def target_candidates(target: str) -> List[str]:
    """Names to try when matching a link target against note titles.

    Heading (``#``) and block (``^``) anchors and any folder path are
    dropped. The base name is tried as written, then without its extension.

    Examples:
        "projects/Foo.md#Intro" -> ["Foo.md", "Foo"]
        "v1.2 notes"            -> ["v1.2 notes", "v1"]
    """
    name = target.split("#", 1)[0].split("^", 1)[0]
    name = re.split(r"[/\\]", name)[-1].strip()
    if not name:
        return []
    candidates = [name]
    stem, ext = os.path.splitext(name)
    if ext and stem:
        candidates.append(stem)
    return candidates


def resolve_target(target: str, index: TitleIndex) -> Optional[Tuple[str, str]]:
    """Return ``(id, matched_name)`` for a link target, or None."""
    for candidate in target_candidates(target):
        note_id = index.lookup(candidate)
        if note_id is not None:
            return note_id, candidate
    return None


def resolve_links(content: str, index: TitleIndex) -> str:
    """Rewrite every resolvable title link in ``content`` to its id form.

    Image embeds and unresolvable links are left exactly as written.
    """
    def _replace(match: re.Match) -> str:
        if match.group(1):
            return match.group(0)
        target, display = split_link(match.group(2))
        resolved = resolve_target(target, index)
        if resolved is None:
            logger.debug(f"Unresolved link: {match.group(0)}")
            return match.group(0)
        note_id, matched_name = resolved
        return f"[[{note_id}|{display or matched_name}]]"

    return WIKILINK.sub(_replace, content)


def extract_links(content: str) -> List[NoteLink]:
    """Collect the id-form links of ``content`` in order, duplicates kept.

    Image embeds are skipped. A link without display text uses its id.
    """
    links: List[NoteLink] = []
    for match in ID_LINK.finditer(content):
        if match.group(1):
            continue
        note_id = match.group(2)
        links.append(NoteLink(target_id=note_id, display_text=match.group(3) or note_id))
    return links


def render_readable(content: str, index: TitleIndex) -> str:
    """Render id-form links as ``[text](#n-id)`` anchors for display.

    Leftover image embeds in id form are dropped, runs of blank lines are
    collapsed, and the result is trimmed.
    """
    def _replace(match: re.Match) -> str:
        if match.group(1):
            return ""
        note_id = match.group(2)
        text = match.group(3) or index.title_for(note_id) or note_id
        return f"[{text}](#n-{note_id})"

    rendered = ID_LINK.sub(_replace, content)
    return re.sub(r"\n{3,}", "\n\n", rendered).strip()
