from __future__ import annotations

import json
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping


CONFIG_FILE = Path("config.toml")


@dataclass(slots=True)
class RuntimeConfig:
    output_dir: Path | None = None
    log_file: Path = Path("runs/log.jsonl")
    summary_csv: Path = Path("runs/summary.csv")
    parallelism: int = 1
    sidecar_suffix: str = ".images"


@dataclass(slots=True)
class ImagesConfig:
    base_path: str | None = None


@dataclass(slots=True)
class AppConfig:
    runtime: RuntimeConfig = field(default_factory=RuntimeConfig)
    images: ImagesConfig = field(default_factory=ImagesConfig)


def _read_toml(path: Path) -> Mapping[str, object]:
    if not path.exists():
        return {}
    with path.open("rb") as handle:
        return tomllib.load(handle)


def _optional_path(value: object | None) -> Path | None:
    if value is None or value == "":
        return None
    return Path(str(value))


def _build_runtime(data: Mapping[str, object] | None) -> RuntimeConfig:
    if not data:
        return RuntimeConfig()
    defaults = RuntimeConfig()
    return RuntimeConfig(
        output_dir=_optional_path(data.get("output_dir")),
        log_file=Path(str(data.get("log_file", defaults.log_file))),
        summary_csv=Path(str(data.get("summary_csv", defaults.summary_csv))),
        parallelism=max(1, int(data.get("parallelism", 1))),
        sidecar_suffix=str(data.get("sidecar_suffix", defaults.sidecar_suffix)),
    )


def _build_images(data: Mapping[str, object] | None) -> ImagesConfig:
    if not data:
        return ImagesConfig()
    base_path = data.get("base_path")
    return ImagesConfig(base_path=str(base_path) if base_path else None)


def load_config(path: Path | None = None) -> AppConfig:
    path = path or CONFIG_FILE
    raw = _read_toml(path)
    runtime_data = raw.get("runtime") if isinstance(raw, Mapping) else None
    images_data = raw.get("images") if isinstance(raw, Mapping) else None
    runtime = _build_runtime(runtime_data if isinstance(runtime_data, Mapping) else None)
    images = _build_images(images_data if isinstance(images_data, Mapping) else None)
    return AppConfig(runtime=runtime, images=images)


def dump_config(config: AppConfig) -> str:
    payload = {
        "runtime": {
            "output_dir": str(config.runtime.output_dir) if config.runtime.output_dir else "",
            "log_file": str(config.runtime.log_file),
            "summary_csv": str(config.runtime.summary_csv),
            "parallelism": config.runtime.parallelism,
            "sidecar_suffix": config.runtime.sidecar_suffix,
        },
        "images": {
            "base_path": config.images.base_path or "",
        },
    }
    return json.dumps(payload, indent=2)
