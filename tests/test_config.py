from pathlib import Path

import pytest

from markdown_html.config import AppConfig, dump_config, load_config
from markdown_html.errors import ConfigParseError
from markdown_html.models import ConversionConfig, ImageMapping
from markdown_html.settings import Settings, resolve_config
from markdown_html.sidecar import dump_image_mappings, load_image_mappings, parse_image_mappings


def test_parse_image_mappings() -> None:
    config = parse_image_mappings(
        ["base-bath: https://blog/files/2018/09\n", "structured-test-run: 250x223:56176\n"]
    )
    assert config.base_path == "https://blog/files/2018/09"
    mapping = config.images["structured-test-run"]
    assert mapping == ImageMapping("structured-test-run", "250x223", "56176")
    assert mapping.alt == "structured test run"


def test_parse_image_mappings_rejects_unknown_line() -> None:
    with pytest.raises(ConfigParseError) as exc:
        parse_image_mappings(["shot: 250x223:1\n", "base-path: https://x\n"])
    assert exc.value.line_number == 2
    assert exc.value.code == "CONFIG_PARSE"


def test_parse_image_mappings_rejects_bad_id() -> None:
    with pytest.raises(ConfigParseError):
        parse_image_mappings(["shot: 250x223:abc"])


def test_load_missing_sidecar(tmp_path: Path) -> None:
    config = load_image_mappings(tmp_path / "nothing.images")
    assert config.base_path is None
    assert dict(config.images) == {}


def test_dump_image_mappings_round_trips() -> None:
    config = ConversionConfig(base_path="b").with_image("a-b", "1x2", "3")
    assert dump_image_mappings(config) == "base-bath: b\na-b: 1x2:3\n"


def test_image_mapping_validates_resolution() -> None:
    with pytest.raises(ValueError):
        ImageMapping("a", "large", "1")


def test_merged_prefers_other() -> None:
    base = ConversionConfig(base_path="one").with_image("a", "1x1", "1")
    other = ConversionConfig().with_image("a", "2x2", "2")
    merged = base.merged(other)
    assert merged.base_path == "one"
    assert merged.images["a"].id == "2"


def test_load_config_defaults(tmp_path: Path) -> None:
    config = load_config(tmp_path / "config.toml")
    assert isinstance(config, AppConfig)
    assert config.runtime.output_dir is None
    assert config.runtime.sidecar_suffix == ".images"
    assert config.images.base_path is None


def test_load_config_from_toml(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text(
        '[runtime]\noutput_dir = "out"\nparallelism = 3\nsidecar_suffix = ".map"\n'
        '[images]\nbase_path = "https://host"\n',
        encoding="utf-8",
    )
    config = load_config(path)
    assert config.runtime.output_dir == Path("out")
    assert config.runtime.parallelism == 3
    assert config.runtime.sidecar_suffix == ".map"
    assert config.images.base_path == "https://host"
    assert '"base_path": "https://host"' in dump_config(config)


def test_resolve_config_applies_env_base_path(tmp_path: Path) -> None:
    settings = Settings(config_path=tmp_path / "config.toml", base_path="https://env")
    config = resolve_config(settings=settings)
    assert config.images.base_path == "https://env"
