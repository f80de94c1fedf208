"""Image asset resolution for ``![[name]]`` embeds.

Embeds are matched against a separate asset directory, copied into the
export's asset folder, and replaced by an ``<img>`` tag. Embeds that cannot
be resolved are removed from the body, never left as raw wikilinks.
"""
import html
import logging
import re
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Set

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = (".png", ".webp", ".jpg", ".jpeg", ".gif", ".svg")

IMAGE_EMBED = re.compile(r"!\[\[([^\]]+)\]\]")
# "400x200", "400x", "x200", or a bare "400" (width only)
SIZE_SPEC = re.compile(r"^\s*(\d*)\s*(?:[xX]\s*(\d*))?\s*$")


@dataclass(frozen=True)
class ImageSize:
    """Optional width/height constraints in pixels."""

    width: Optional[int] = None
    height: Optional[int] = None

    def to_style(self) -> str:
        """Render as an inline style, or an empty string without constraints."""
        rules = []
        if self.width is not None:
            rules.append(f"max-width: min({self.width}px, 100%)")
        if self.height is not None:
            rules.append(f"max-height: min({self.height}px, 100%)")
        return "; ".join(rules)


def parse_size(spec: Optional[str]) -> ImageSize:
    """Parse an Obsidian ``WxH`` size suffix.

    Examples:
        "400x200" -> width=400, height=200
        "400"     -> width=400
        "x200"    -> height=200
        "caption" -> no constraints
    """
    if not spec:
        return ImageSize()
    match = SIZE_SPEC.match(spec)
    if not match:
        return ImageSize()
    width, height = match.group(1), match.group(2)
    return ImageSize(
        width=int(width) if width else None,
        height=int(height) if height else None,
    )


def find_image_files(images_dir: Path) -> List[Path]:
    """Recursively list image assets, sorted for deterministic name mapping."""
    files = [
        p for p in images_dir.rglob("*")
        if p.is_file() and p.suffix.lower() in IMAGE_EXTENSIONS
    ]
    files.sort(key=lambda p: p.relative_to(images_dir).parts)
    return files


class ImageStore:
    """Maps embed names to asset files and publishes them to the output dir.

    Args:
        images_dir: Directory holding the source assets.
        output_dir: Directory resolved assets are copied into.
        url_prefix: URL path the front end serves ``output_dir`` under.
    """

    def __init__(self, images_dir: Path, output_dir: Path, url_prefix: str = "/dist/images") -> None:
        self.images_dir = images_dir
        self.output_dir = output_dir
        self.url_prefix = url_prefix.rstrip("/")
        self._by_name = self._build_name_map(find_image_files(images_dir))
        self._copied: Set[Path] = set()
        logger.debug(f"Indexed {len(self._by_name)} image names under {images_dir}")

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def resolve(self, ref: str) -> Optional[Path]:
        """Find the asset for an embed name: exact name, then name + extension."""
        name = ref.strip()
        if name in self._by_name:
            return self._by_name[name]
        for ext in IMAGE_EXTENSIONS:
            candidate = self._by_name.get(name + ext)
            if candidate is not None:
                return candidate
        return None

    def render_embed(self, inner: str) -> str:
        """Turn the inside of one ``![[...]]`` embed into an ``<img>`` tag.

        Returns an empty string when the asset cannot be found or copied.
        """
        parts = inner.split("|")
        name_part = parts[0]
        size_part = parts[1] if len(parts) > 1 else ""
        name = re.split(r"[/\\]", name_part.strip())[-1]
        src_path = self.resolve(name)
        if src_path is None:
            logger.debug(f"Unresolved image embed: {inner}")
            return ""
        try:
            dest_name = self.publish(src_path)
        except OSError as e:
            logger.warning(f"Failed to copy image {src_path.name}: {e}")
            return ""

        alt = html.escape(Path(dest_name).stem, quote=True)
        style = parse_size(size_part).to_style()
        style_attr = f' style="{style}"' if style else ""
        return f'<img src="{self.url_prefix}/{dest_name}" alt="{alt}"{style_attr}>'

    def publish(self, src_path: Path) -> str:
        """Copy an asset into the output dir (once per run); return its file name."""
        dest = self.output_dir / src_path.name
        if src_path not in self._copied:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            # An asset already at its destination is served in place
            if dest.resolve() != src_path.resolve():
                shutil.copy2(src_path, dest)
            self._copied.add(src_path)
        return dest.name

    @property
    def copied_count(self) -> int:
        return len(self._copied)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _build_name_map(files: List[Path]) -> Dict[str, Path]:
        by_name: Dict[str, Path] = {}
        for path in files:
            by_name[path.name] = path
            # Stem fallback: first file wins
            by_name.setdefault(path.stem, path)
        return by_name


def resolve_images(content: str, store: Optional[ImageStore]) -> str:
    """Replace every image embed in ``content``.

    Without a store (no asset directory configured) every embed is removed.
    """
    if store is None:
        return IMAGE_EMBED.sub("", content)
    return IMAGE_EMBED.sub(lambda m: store.render_embed(m.group(1)), content)
