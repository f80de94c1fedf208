"""Header parsing for vault documents.

A document may declare its tags in two ways, both only at the very top:

* a YAML frontmatter block (``---`` delimited) with a ``tags`` key, and
* a first line such as ``Tags: [[Second Brain]] [[DevOps]]``.

The parser returns the ordered tag list, an optional explicit type from
the frontmatter, and the body with the header removed.
"""
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import yaml
from frontmatter.default_handlers import YAMLHandler

from brain_graph.exceptions import DocumentError, ErrorCode

logger = logging.getLogger(__name__)

TAG_REFERENCE = re.compile(r"\[\[([^\]]+)\]\]")
FRONTMATTER_BLOCK = re.compile(r"\A---[ \t]*\n.*?\n---[ \t]*(?:\n|\Z)", re.DOTALL)


@dataclass
class ParsedHeader:
    """Result of header parsing."""

    tags: List[str] = field(default_factory=list)
    body: str = ""
    declared_type: Optional[str] = None


class MarkdownParser:
    """Extracts tag declarations and frontmatter from document text."""

    def __init__(self, tag_line_prefix: str = "Tags:") -> None:
        self.tag_line_prefix = tag_line_prefix

    def parse_header(self, text: str, source: str = "") -> ParsedHeader:
        """Split a document into its tags, declared type and body.

        Args:
            text: Raw document text.
            source: Relative path, used in error messages.

        Returns:
            A ParsedHeader. For a document without any header the tag list
            is empty and the body is ``text`` unchanged.

        Raises:
            DocumentError: If a frontmatter block is present but not valid YAML.
        """
        metadata, body = self._split_frontmatter(text, source)

        tags = self._frontmatter_tags(metadata.get("tags"))
        line_tags, body = self.extract_tag_line(body)
        # Repeats within the tag line are kept; only frontmatter names are skipped
        from_frontmatter = set(tags)
        tags.extend(tag for tag in line_tags if tag not in from_frontmatter)

        declared_type = metadata.get("type")
        if not isinstance(declared_type, str) or not declared_type.strip():
            declared_type = None
        else:
            declared_type = declared_type.strip()

        return ParsedHeader(tags=tags, body=body, declared_type=declared_type)

    def extract_tag_line(self, body: str) -> Tuple[List[str], str]:
        """Pull bracketed tags off line 1 if it is a tag declaration.

        The prefix is matched case-sensitively and only on the first line.
        The declaration line and any blank lines right after it are removed.
        Tag names are kept verbatim; for ``[[Name|alias]]`` the name is used.
        """
        first_line, _, rest = body.partition("\n")
        if not first_line.startswith(self.tag_line_prefix):
            return [], body
        references = TAG_REFERENCE.findall(first_line)
        if not references:
            return [], body
        tags = [ref.split("|", 1)[0].strip() for ref in references]
        tags = [tag for tag in tags if tag]
        return tags, rest.lstrip("\n")

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _split_frontmatter(text: str, source: str) -> Tuple[Dict[str, Any], str]:
        """Return ``(metadata, body)``; metadata is empty without a block."""
        if not FRONTMATTER_BLOCK.match(text):
            return {}, text
        handler = YAMLHandler()
        try:
            raw, content = handler.split(text)
            metadata = handler.load(raw)
        except ValueError:
            return {}, text
        except yaml.YAMLError as e:
            raise DocumentError(
                f"Invalid frontmatter in {source or 'document'}",
                path=source or None,
                code=ErrorCode.DOCUMENT_PARSE_FAILED,
                original_error=e,
            )
        if not isinstance(metadata, dict):
            # Prose or a list between two horizontal rules, not a header
            return {}, text
        return metadata, content.strip()

    @staticmethod
    def _frontmatter_tags(raw: Any) -> List[str]:
        """Normalize a frontmatter ``tags`` value into a list of names."""
        if raw is None:
            return []
        if isinstance(raw, str):
            raw = [raw]
        elif not isinstance(raw, list):
            logger.debug(f"Ignoring frontmatter tags of type {type(raw).__name__}")
            return []
        tags: List[str] = []
        for item in raw:
            name = str(item).strip()
            if name and name not in tags:
                tags.append(name)
        return tags
