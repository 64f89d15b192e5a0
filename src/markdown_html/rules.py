"""Substitution rules turning prose and code segments into HTML.

Prose goes through an ordered chain of regex rules, each applied globally to
the output of the previous one. Code segments only get wrapped in ``<pre>``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Mapping, Sequence

from .errors import BasePathUnsetError, MissingImageMappingError
from .models import ConversionConfig, ImageMapping

Replacement = str | Callable[[re.Match[str]], str]

TITLE_LINE = re.compile(r"\A# .*\n\n")
SINGLE_NEW_LINE = re.compile(r"(?<=[^\n])\n(?=[^\n])")
IMAGE = re.compile(r"!\[(.*?)\]\(img/(.*?)\.png\)")
LINK = re.compile(r"\[(.*?)\]\((.*?)\)")
CODE_SPAN = re.compile(r"`(.*?)`")
EMPHASIS = re.compile(r"\*(.*?)\*")

JAVA_PREFIX = "java"


def heading_pattern(level: int) -> re.Pattern[str]:
    return re.compile(r"\n" + "#" * level + r" ([^\n]*)\n\n")


@dataclass(frozen=True, slots=True)
class Rule:
    name: str
    pattern: re.Pattern[str]
    replacement: Replacement

    def apply(self, text: str) -> str:
        return self.pattern.sub(self.replacement, text)


def render_image(name: str, images: Mapping[str, ImageMapping], base_path: str | None) -> str:
    mapping = images.get(name)
    if mapping is None:
        raise MissingImageMappingError(name)
    if base_path is None:
        raise BasePathUnsetError(name)
    return (
        f'<a href="{base_path}/{name}.png">'
        f'<img src="{base_path}/{name}-{mapping.resolution}.png" alt="{mapping.alt}"'
        f' class="alignnone size-medium wp-image-{mapping.id}" />'
        "</a>"
    )


def render_code(text: str) -> str:
    if text.startswith(JAVA_PREFIX):
        return f'<pre lang="java5">{text[len(JAVA_PREFIX):]}</pre>'
    return f"<pre>{text}</pre>"


def prose_rules(config: ConversionConfig) -> tuple[Rule, ...]:
    """Build the prose chain; order matters, later rules see earlier output."""

    def image(match: re.Match[str]) -> str:
        return render_image(match.group(2), config.images, config.base_path)

    headings = tuple(
        Rule(f"h{level}", heading_pattern(level), rf"\n<h{level}>\1</h{level}>\n\n")
        for level in range(1, 5)
    )
    return (
        Rule("title", TITLE_LINE, ""),
        *headings,
        Rule("join-lines", SINGLE_NEW_LINE, " "),
        Rule("image", IMAGE, image),
        Rule("link", LINK, r'<a href="\2" rel="noopener" target="_blank">\1</a>'),
        Rule("code-span", CODE_SPAN, r"<tt>\1</tt>"),
        Rule("emphasis", EMPHASIS, r"<em>\1</em>"),
    )


def apply_rules(text: str, rules: Sequence[Rule]) -> str:
    for rule in rules:
        text = rule.apply(text)
    return text


def render_prose(text: str, config: ConversionConfig) -> str:
    return apply_rules(text, prose_rules(config))


__all__ = [
    "Rule",
    "apply_rules",
    "heading_pattern",
    "prose_rules",
    "render_code",
    "render_image",
    "render_prose",
]
