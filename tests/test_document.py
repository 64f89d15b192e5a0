import io
from pathlib import Path

import pytest

from markdown_html.converter import MarkdownDocument, convert_markdown, render_segments
from markdown_html.errors import (
    ConfigurationFrozenError,
    ConversionError,
    MalformedInputError,
    MissingImageMappingError,
)
from markdown_html.models import ConversionConfig
from markdown_html.segments import segment

DUMMY_BASE_PATH = "dummy-base-path"


def convert(text: str, **images: tuple[str, str]) -> str:
    document = MarkdownDocument(text).set_base_path(DUMMY_BASE_PATH)
    for name, (resolution, image_id) in images.items():
        document.add_image_mapping(name.replace("_", "-"), resolution, image_id)
    return document.convert()


def test_prose_only_has_no_pre() -> None:
    html = convert("# Title\n\nsome\ntext\n\n## Part\n\nmore *text*\n")
    assert "<pre" not in html
    assert html == "some text\n\n<h2>Part</h2>\n\nmore <em>text</em>\n"


def test_java_block() -> None:
    text = "before\n\n```java\ncode1\ncode2\n```\n\nafter"
    assert convert(text) == 'before\n\n<pre lang="java5">\ncode1\ncode2\n</pre>\n\nafter'


def test_non_java_block() -> None:
    text = "before\n\n```\ncode1\ncode2\n```\n\nafter"
    assert convert(text) == "before\n\n<pre>\ncode1\ncode2\n</pre>\n\nafter"


def test_java_within_java_block_is_kept() -> None:
    text = "before\n\n```java\ncode1\njava\ncode2\n```\n\nafter"
    assert convert(text) == 'before\n\n<pre lang="java5">\ncode1\njava\ncode2\n</pre>\n\nafter'


def test_java_within_non_java_block_is_kept() -> None:
    text = "before\n\n```\ncode1\njava\ncode2\n```\n\nafter"
    assert convert(text) == "before\n\n<pre>\ncode1\njava\ncode2\n</pre>\n\nafter"


def test_code_block_content_is_not_substituted() -> None:
    text = "a\n\n```\n*not em*\n[x](y)\n```\n\nb"
    assert convert(text) == "a\n\n<pre>\n*not em*\n[x](y)\n</pre>\n\nb"


def test_unterminated_fence() -> None:
    with pytest.raises(MalformedInputError):
        convert("before\n\n```java\ncode\n")


def test_image_with_mapping() -> None:
    html = convert("hi ![label](img/image-name.png) ho\n", image_name=("250x300", "1234"))
    assert html == (
        'hi <a href="dummy-base-path/image-name.png">'
        '<img src="dummy-base-path/image-name-250x300.png" alt="image name"'
        ' class="alignnone size-medium wp-image-1234" /></a> ho\n'
    )


def test_missing_image_aborts_conversion() -> None:
    with pytest.raises(MissingImageMappingError) as exc:
        convert("ok\n\n```\ncode\n```\n\n![x](img/not-there.png)\n")
    assert "not-there" in str(exc.value)


def test_convert_is_deterministic() -> None:
    document = MarkdownDocument("# T\n\nhi\nho `x`\n\n```java\ny\n```\n")
    document.set_base_path(DUMMY_BASE_PATH)
    assert document.convert() == document.convert()


def test_configuration_frozen_after_convert() -> None:
    document = MarkdownDocument("hi\n").set_base_path(DUMMY_BASE_PATH)
    document.convert()
    with pytest.raises(ConfigurationFrozenError):
        document.set_base_path("elsewhere")
    with pytest.raises(ConfigurationFrozenError):
        document.add_image_mapping("a", "1x1", "1")


def test_convert_markdown_does_not_mutate_config() -> None:
    config = ConversionConfig(base_path=DUMMY_BASE_PATH)
    updated = config.with_image("a", "1x1", "1")
    assert "a" not in config.images
    assert convert_markdown("![a](img/a.png)\n", updated).count("wp-image-1") == 1


def test_from_reader() -> None:
    document = MarkdownDocument.from_reader(io.StringIO("hi\nho\n"))
    assert document.convert() == "hi ho\n"


def test_from_path_loads_sidecar(tmp_path: Path) -> None:
    source = tmp_path / "README.md"
    source.write_text("# Title\n\n![x](img/shot.png)\n", encoding="utf-8")
    (tmp_path / "README.images").write_text(
        "base-bath: https://host/files\nshot: 250x223:56176\n", encoding="utf-8"
    )
    html = MarkdownDocument.from_path(source).convert()
    assert html == (
        '<a href="https://host/files/shot.png">'
        '<img src="https://host/files/shot-250x223.png" alt="shot"'
        ' class="alignnone size-medium wp-image-56176" /></a>\n'
    )


def test_from_path_without_sidecar(tmp_path: Path) -> None:
    source = tmp_path / "README.md"
    source.write_text("![x](img/shot.png)\n", encoding="utf-8")
    document = MarkdownDocument.from_path(source)
    assert document.config.base_path is None
    with pytest.raises(MissingImageMappingError):
        document.convert()


def test_from_path_undecodable_source(tmp_path: Path) -> None:
    source = tmp_path / "README.md"
    source.write_bytes(b"\xff\xfe bad\n")
    with pytest.raises(ConversionError) as exc:
        MarkdownDocument.from_path(source)
    assert exc.value.code == "READ_ERROR"


def test_render_segments_matches_convert_markdown() -> None:
    text = "a\nb\n\n```java\nx\n```\n"
    config = ConversionConfig()
    assert render_segments(segment(text), config) == convert_markdown(text, config)
