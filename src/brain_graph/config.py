"""Configuration module for the note graph builder."""

import logging
import os
from pathlib import Path
from typing import List, Optional, Union

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator, model_validator

from brain_graph.exceptions import ConfigurationError, ErrorCode

# Load environment variables from a .env in the working directory
load_dotenv(Path.cwd() / ".env")

# User-level config, shared across checkouts
_USER_ENV = Path.home() / ".brain-graph" / ".env"
load_dotenv(_USER_ENV)


logger = logging.getLogger(__name__)


def _optional_path(env_var: str) -> Optional[Path]:
    value = os.getenv(env_var)
    return Path(value) if value else None


def parse_folder_list(value: Union[str, List[str], None]) -> List[str]:
    """Normalize a comma-separated (or already split) folder list.

    Entries are trimmed and lower-cased; empty entries are dropped.

    Examples:
        "Me, Archive,," -> ["me", "archive"]
    """
    if value is None:
        return []
    items = value.split(",") if isinstance(value, str) else value
    return [item.strip().lower() for item in items if item and item.strip()]


class BrainGraphConfig(BaseModel):
    """Configuration for a graph export run."""

    # Base directory that relative paths are resolved against
    base_dir: Path = Field(
        default_factory=lambda: Path(os.getenv("BRAIN_BASE_DIR", "."))
    )
    # Vault (source documents) configuration
    vault_path: Optional[Path] = Field(
        default_factory=lambda: _optional_path("BRAIN_PATH")
    )
    # Top-level folders left out of the export (case-insensitive)
    excluded_folders: List[str] = Field(
        default_factory=lambda: parse_folder_list(os.getenv("EXCLUDED_FOLDERS", ""))
    )
    # Image assets (optional). When unset, image embeds are dropped.
    images_path: Optional[Path] = Field(
        default_factory=lambda: _optional_path("BRAIN_IMAGES_PATH")
    )
    # Output configuration
    output_path: Path = Field(
        default_factory=lambda: Path(os.getenv("BRAIN_OUTPUT_PATH", "dist/brain.json"))
    )
    images_output_dir: Path = Field(
        default_factory=lambda: Path(
            os.getenv("BRAIN_IMAGES_OUTPUT_DIR", "dist/images")
        )
    )
    images_url_prefix: str = Field(
        default_factory=lambda: os.getenv("BRAIN_IMAGES_URL_PREFIX", "/dist/images")
    )
    # Vault conventions
    root_tag: str = Field(
        default_factory=lambda: os.getenv("BRAIN_ROOT_TAG", "Second Brain")
    )
    tag_line_prefix: str = Field(
        default_factory=lambda: os.getenv("BRAIN_TAG_LINE_PREFIX", "Tags:")
    )
    link_prefix: str = Field(
        default_factory=lambda: os.getenv("BRAIN_LINK_PREFIX", "Link:")
    )
    default_type: str = Field(
        default_factory=lambda: os.getenv("BRAIN_DEFAULT_TYPE", "note")
    )

    model_config = {"validate_assignment": True}

    @field_validator("excluded_folders", mode="before")
    @classmethod
    def _normalize_excluded(cls, v: Union[str, List[str], None]) -> List[str]:
        """Accept a comma-separated string or a list; always lower-case."""
        return parse_folder_list(v)

    @model_validator(mode="after")
    def _validate_conventions(self) -> "BrainGraphConfig":
        """Reject empty vault conventions, which would match every line."""
        for field_name in ("root_tag", "tag_line_prefix", "link_prefix"):
            if not getattr(self, field_name).strip():
                raise ValueError(f"{field_name} cannot be empty")
        if not self.default_type.strip():
            raise ValueError("default_type cannot be empty")
        return self

    def get_absolute_path(self, path: Path) -> Path:
        """Convert a relative path to an absolute path based on base_dir."""
        if path.is_absolute():
            return path
        return (self.base_dir / path).resolve()

    def require_vault_dir(self) -> Path:
        """Return the absolute vault directory or raise a fatal error.

        Raises:
            ConfigurationError: If the vault path is unset, missing, or
                not a directory.
        """
        if self.vault_path is None:
            raise ConfigurationError(
                "Missing BRAIN_PATH. Set it in .env or pass the vault directory "
                "on the command line.",
                config_key="BRAIN_PATH",
                code=ErrorCode.CONFIG_MISSING,
            )
        vault_dir = self.get_absolute_path(self.vault_path)
        if not vault_dir.exists():
            raise ConfigurationError(
                f"Folder does not exist: {vault_dir}",
                config_key="BRAIN_PATH",
                path=str(vault_dir),
                code=ErrorCode.VAULT_NOT_FOUND,
            )
        if not vault_dir.is_dir():
            raise ConfigurationError(
                f"Path is not a directory: {vault_dir}",
                config_key="BRAIN_PATH",
                path=str(vault_dir),
                code=ErrorCode.VAULT_NOT_A_DIRECTORY,
            )
        return vault_dir

    def get_images_dir(self) -> Optional[Path]:
        """Get the absolute image asset directory, or None if not usable.

        A configured but missing directory only disables image resolution;
        it is not fatal.
        """
        if self.images_path is None:
            return None
        images_dir = self.get_absolute_path(self.images_path)
        if not images_dir.is_dir():
            logger.warning(
                f"Image directory {images_dir} not found, image embeds will be dropped"
            )
            return None
        return images_dir

    def get_output_path(self) -> Path:
        """Get the absolute path of the exported graph file."""
        return self.get_absolute_path(self.output_path)

    def get_images_output_dir(self) -> Path:
        """Get the absolute directory resolved image assets are copied into."""
        return self.get_absolute_path(self.images_output_dir)


# Create a global config instance
config = BrainGraphConfig()
