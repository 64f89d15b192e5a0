"""Domain models for markdown-to-html conversion."""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

from .logging import BatchSummary

RESOLUTION_RE = re.compile(r"[0-9x]*")
IMAGE_ID_RE = re.compile(r"[0-9]*")


@dataclass(frozen=True, slots=True)
class ImageMapping:
    """Hosted rendition of an image referenced as ``img/<name>.png``."""

    name: str
    resolution: str
    id: str

    def __post_init__(self) -> None:
        if not RESOLUTION_RE.fullmatch(self.resolution):
            raise ValueError(f"Invalid resolution for {self.name}: {self.resolution!r}")
        if not IMAGE_ID_RE.fullmatch(self.id):
            raise ValueError(f"Invalid image id for {self.name}: {self.id!r}")

    @property
    def alt(self) -> str:
        return self.name.replace("-", " ")


def _freeze(images: Mapping[str, ImageMapping]) -> Mapping[str, ImageMapping]:
    return MappingProxyType(dict(images))


@dataclass(frozen=True, slots=True)
class ConversionConfig:
    """Immutable inputs of a conversion besides the document text.

    ``with_*`` methods return updated copies, so a config handed to a running
    conversion never changes underneath it.
    """

    base_path: str | None = None
    images: Mapping[str, ImageMapping] = field(default_factory=lambda: _freeze({}))

    def __post_init__(self) -> None:
        if not isinstance(self.images, MappingProxyType):
            object.__setattr__(self, "images", _freeze(self.images))

    def with_base_path(self, base_path: str) -> ConversionConfig:
        return replace(self, base_path=base_path)

    def with_image(self, name: str, resolution: str, image_id: str) -> ConversionConfig:
        images = dict(self.images)
        images[name] = ImageMapping(name=name, resolution=resolution, id=image_id)
        return replace(self, images=_freeze(images))

    def merged(self, other: ConversionConfig) -> ConversionConfig:
        """Layer ``other`` on top: its base path and image entries win."""

        images = dict(self.images)
        images.update(other.images)
        return ConversionConfig(
            base_path=other.base_path if other.base_path is not None else self.base_path,
            images=images,
        )


@dataclass(slots=True)
class ConversionResult:
    """Result metadata for an individual file conversion."""

    run_id: str
    source_path: Path
    output_path: Path | None
    html: str
    summary: str
    prose_segments: int = 0
    code_segments: int = 0


@dataclass(slots=True)
class BatchConversionResult:
    """Aggregate results for a batch conversion request."""

    runs: list[ConversionResult]
    summary: BatchSummary


__all__ = [
    "ImageMapping",
    "ConversionConfig",
    "ConversionResult",
    "BatchConversionResult",
]
