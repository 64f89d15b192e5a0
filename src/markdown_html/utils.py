from __future__ import annotations

import hashlib
import os
import tempfile
import time
from collections.abc import Iterable
from pathlib import Path
from typing import Iterator

from .errors import ConversionError

MARKDOWN_SUFFIXES = frozenset({".md", ".markdown"})


def generate_run_id(prefix: str = "run") -> str:
    epoch_ms = int(time.time() * 1000)
    random_bits = hashlib.sha256(os.urandom(16)).hexdigest()[:8]
    return f"{prefix}-{epoch_ms}-{random_bits}"


def atomic_write(path: Path, data: str, encoding: str = "utf-8") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    # newline="" keeps "\n" as written; the converter never emits "\r\n" itself
    with tempfile.NamedTemporaryFile(
        "w", delete=False, dir=path.parent, encoding=encoding, newline=""
    ) as tmp:
        tmp.write(data)
        tmp.flush()
        os.fsync(tmp.fileno())
    os.replace(tmp.name, path)


def read_text(path: Path, encoding: str = "utf-8") -> str:
    try:
        return path.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as exc:
        raise ConversionError("READ_ERROR", f"Cannot read {path}: {exc}") from exc


def iter_markdown_files(paths: Iterable[Path]) -> Iterator[Path]:
    for path in paths:
        if path.is_file():
            yield path
        elif path.is_dir():
            for file_path in sorted(path.rglob("*")):
                if file_path.is_file() and file_path.suffix.lower() in MARKDOWN_SUFFIXES:
                    yield file_path


def sidecar_path(source: Path, suffix: str) -> Path:
    return source.with_suffix(suffix)


def html_path(source: Path, output_dir: Path | None = None) -> Path:
    target = source.with_suffix(".html")
    if output_dir is not None:
        return output_dir / target.name
    return target
