"""Markdown to HTML conversion for blog README documents."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence, TextIO

from .errors import ConfigurationFrozenError
from .models import ConversionConfig
from .rules import render_code, render_prose
from .segments import FENCE, Segment, segment
from .sidecar import load_image_mappings
from .utils import read_text

DEFAULT_SIDECAR_SUFFIX = ".images"


def convert_markdown(text: str, config: ConversionConfig | None = None) -> str:
    """Convert ``text`` to HTML.

    Pure function of its arguments: prose segments go through the substitution
    chain, code segments become ``<pre>`` blocks, and the results are joined in
    their original order. Any error aborts the whole conversion.
    """

    return render_segments(segment(text, FENCE), config)


def render_segments(segments: Sequence[Segment], config: ConversionConfig | None = None) -> str:
    config = config or ConversionConfig()
    return "".join(
        render_code(part.text) if part.is_code else render_prose(part.text, config)
        for part in segments
    )


class MarkdownDocument:
    """A document plus the image configuration it is converted with.

    ``set_base_path`` and ``add_image_mapping`` may only be called before the
    first ``convert()``; afterwards they raise ``ConfigurationFrozenError``.
    """

    def __init__(self, text: str, config: ConversionConfig | None = None) -> None:
        self._text = text
        self._config = config or ConversionConfig()
        self._converted = False

    @classmethod
    def from_path(
        cls, path: Path, *, sidecar_suffix: str = DEFAULT_SIDECAR_SUFFIX
    ) -> MarkdownDocument:
        text = read_text(path)
        return cls(text, load_image_mappings(path.with_suffix(sidecar_suffix)))

    @classmethod
    def from_reader(cls, reader: TextIO, config: ConversionConfig | None = None) -> MarkdownDocument:
        return cls(reader.read(), config)

    @property
    def text(self) -> str:
        return self._text

    @property
    def config(self) -> ConversionConfig:
        return self._config

    def set_base_path(self, base_path: str) -> MarkdownDocument:
        self._ensure_mutable("set the base path")
        self._config = self._config.with_base_path(base_path)
        return self

    def add_image_mapping(self, name: str, resolution: str, image_id: str) -> MarkdownDocument:
        self._ensure_mutable(f"map image {name}")
        self._config = self._config.with_image(name, resolution, image_id)
        return self

    def convert(self) -> str:
        html = convert_markdown(self._text, self._config)
        self._converted = True
        return html

    def _ensure_mutable(self, operation: str) -> None:
        if self._converted:
            raise ConfigurationFrozenError(operation)


__all__ = ["DEFAULT_SIDECAR_SUFFIX", "MarkdownDocument", "convert_markdown", "render_segments"]
