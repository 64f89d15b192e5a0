"""Loader for the image-mapping file stored next to a Markdown document.

Each line is either ``base-bath: <url>`` or ``<name>: <WxH>:<id>``. The
``base-bath`` key keeps its historical spelling so existing files still load.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable

from .errors import ConfigParseError
from .models import ConversionConfig, ImageMapping
from .utils import read_text

BASE_PATH_KEY = "base-bath"
BASE_PATH_LINE = re.compile(re.escape(BASE_PATH_KEY) + r": (.*)")
MAPPING_LINE = re.compile(r"(.+?): ([0-9x]*):([0-9]*)")


def parse_image_mappings(lines: Iterable[str], source: str = "<sidecar>") -> ConversionConfig:
    base_path: str | None = None
    images: dict[str, ImageMapping] = {}
    for line_number, raw in enumerate(lines, start=1):
        line = raw.rstrip("\r\n")
        if not line.strip():
            continue
        base_match = BASE_PATH_LINE.fullmatch(line)
        if base_match:
            base_path = base_match.group(1)
            continue
        mapping_match = MAPPING_LINE.fullmatch(line)
        if mapping_match is None:
            raise ConfigParseError(line_number, line, source)
        name, resolution, image_id = mapping_match.groups()
        images[name] = ImageMapping(name=name, resolution=resolution, id=image_id)
    return ConversionConfig(base_path=base_path, images=images)


def load_image_mappings(path: Path) -> ConversionConfig:
    """Read a sidecar file; a missing file yields an empty configuration."""

    if not path.exists():
        return ConversionConfig()
    text = read_text(path)
    return parse_image_mappings(text.splitlines(), source=str(path))


def dump_image_mappings(config: ConversionConfig) -> str:
    lines: list[str] = []
    if config.base_path is not None:
        lines.append(f"{BASE_PATH_KEY}: {config.base_path}")
    for mapping in config.images.values():
        lines.append(f"{mapping.name}: {mapping.resolution}:{mapping.id}")
    return "\n".join(lines) + ("\n" if lines else "")


__all__ = [
    "BASE_PATH_KEY",
    "dump_image_mappings",
    "load_image_mappings",
    "parse_image_mappings",
]
