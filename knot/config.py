"""Notes root resolution and the process-wide configuration for KNOT."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from knot.fileio import read_yaml

log = logging.getLogger(__name__)

CONFIG_FILENAME = ".knot.yaml"
DEFAULT_ROOT = Path.home() / ".knot_vault"
DEFAULT_EDITOR = "vim"
DEFAULT_WORDS_PER_MINUTE = 200
DEFAULT_PALETTE = ("cyan", "magenta", "green", "yellow", "blue", "red")
PALETTE_SIZE = 6


def notes_root(override: str | os.PathLike | None = None) -> Path:
    """Get the notes root directory (one sub-directory per category)."""
    raw = override or os.environ.get("KNOT_ROOT", str(DEFAULT_ROOT))
    return Path(raw).expanduser().resolve()


def config_path(root: Path | None = None) -> Path:
    if root is None:
        root = notes_root()
    return root / CONFIG_FILENAME


def default_editor() -> str:
    return os.environ.get("VISUAL") or os.environ.get("EDITOR") or DEFAULT_EDITOR


@dataclass
class Config:
    """Settings shared by every component; built once at startup."""

    root: Path
    editor: str = field(default_factory=default_editor)
    words_per_minute: int = DEFAULT_WORDS_PER_MINUTE
    palette: tuple[str, ...] = DEFAULT_PALETTE
    note_extension: str = ".md"
    note_template: str = "# {title}\n\n"
    strict_editor_exit: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, root: Path, d: dict[str, Any]) -> Config:
        if not d or not isinstance(d, dict):
            return cls(root=root)

        wpm = d.get("words_per_minute", DEFAULT_WORDS_PER_MINUTE)
        try:
            wpm = int(wpm)
        except (TypeError, ValueError):
            wpm = DEFAULT_WORDS_PER_MINUTE
        if wpm <= 0:
            wpm = DEFAULT_WORDS_PER_MINUTE

        palette = d.get("palette")
        if (
            isinstance(palette, list)
            and len(palette) == PALETTE_SIZE
            and all(isinstance(c, str) and c.strip() for c in palette)
        ):
            palette = tuple(c.strip() for c in palette)
        else:
            palette = DEFAULT_PALETTE

        ext = str(d.get("note_extension", ".md") or ".md").strip()
        if not ext.startswith("."):
            ext = "." + ext

        return cls(
            root=root,
            editor=str(d.get("editor") or default_editor()),
            words_per_minute=wpm,
            palette=palette,
            note_extension=ext,
            note_template=str(d.get("note_template", "# {title}\n\n")),
            strict_editor_exit=bool(d.get("strict_editor_exit", False)),
            log_level=str(d.get("log_level", "INFO")).upper(),
        )

    def color_for(self, index: int) -> str:
        """Palette colour for the category at ``index`` in listing order."""
        return self.palette[index % len(self.palette)]


def load_config(root: Path | None = None) -> Config:
    """Load ``<root>/.knot.yaml``, falling back to defaults for anything missing."""
    if root is None:
        root = notes_root()
    path = config_path(root)
    try:
        data = read_yaml(path)
    except (OSError, yaml.YAMLError) as e:
        log.warning("Ignoring unreadable config %s: %s", path, e)
        data = {}
    return Config.from_dict(root, data)
