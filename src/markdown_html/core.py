from __future__ import annotations

import concurrent.futures
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from .config import AppConfig
from .converter import render_segments
from .errors import ConversionError
from .logging import BatchSummary, RunLogEntry, RunLogger, StageTimings, append_summary_row
from .models import BatchConversionResult, ConversionConfig, ConversionResult
from .segments import FENCE, segment
from .sidecar import load_image_mappings
from .utils import (
    atomic_write,
    generate_run_id,
    html_path,
    iter_markdown_files,
    read_text,
    sidecar_path,
)


@dataclass(slots=True)
class _ConversionContext:
    run_id: str
    source: Path
    output: Path | None
    config: ConversionConfig
    logger: RunLogger


class ConversionService:
    def __init__(self, config: AppConfig) -> None:
        self._config = config
        self._logger = RunLogger(config.runtime.log_file)

    def resolve_images(
        self,
        path: Path,
        *,
        base_path: str | None = None,
        mappings: ConversionConfig | None = None,
    ) -> ConversionConfig:
        """Layer configured defaults, the sidecar file and explicit overrides."""

        resolved = ConversionConfig(base_path=self._config.images.base_path)
        resolved = resolved.merged(
            load_image_mappings(sidecar_path(path, self._config.runtime.sidecar_suffix))
        )
        if mappings is not None:
            resolved = resolved.merged(mappings)
        if base_path is not None:
            resolved = resolved.with_base_path(base_path)
        return resolved

    def convert_file(
        self,
        path: Path,
        *,
        output: Path | None = None,
        base_path: str | None = None,
        mappings: ConversionConfig | None = None,
        run_id: str | None = None,
        write_output: bool = True,
    ) -> ConversionResult:
        run_id = run_id or generate_run_id()
        output = output or html_path(path, self._config.runtime.output_dir)
        start = time.perf_counter()
        try:
            if not path.exists():
                raise ConversionError("NOT_FOUND", f"Source file does not exist: {path}")
            images = self.resolve_images(path, base_path=base_path, mappings=mappings)
            context = _ConversionContext(
                run_id=run_id,
                source=path,
                output=output if write_output else None,
                config=images,
                logger=self._logger,
            )
            result = self._convert_internal(context)
        except ConversionError as exc:
            self._log_failure(run_id, path, exc)
            raise
        elapsed = time.perf_counter() - start
        target = output if write_output else "stdout"
        result.summary = f"Converted {path.name} -> {target} in {elapsed:.2f}s"
        return result

    def _convert_internal(self, context: _ConversionContext) -> ConversionResult:
        read_start = time.perf_counter()
        text = read_text(context.source)
        read_ms = (time.perf_counter() - read_start) * 1000

        convert_start = time.perf_counter()
        segments = segment(text, FENCE)
        html = render_segments(segments, context.config)
        convert_ms = (time.perf_counter() - convert_start) * 1000

        write_start = time.perf_counter()
        if context.output is not None:
            self._write_output(context.output, html)
        write_ms = (time.perf_counter() - write_start) * 1000

        code_segments = sum(1 for part in segments if part.is_code)
        prose_segments = len(segments) - code_segments
        context.logger.append(
            RunLogEntry(
                run_id=context.run_id,
                source=str(context.source),
                status="success",
                error_code=None,
                error_message=None,
                timings=StageTimings(read_ms=read_ms, convert_ms=convert_ms, write_ms=write_ms),
                output_path=str(context.output) if context.output is not None else None,
                prose_segments=prose_segments,
                code_segments=code_segments,
                images=len(context.config.images),
            )
        )
        return ConversionResult(
            run_id=context.run_id,
            source_path=context.source,
            output_path=context.output,
            html=html,
            summary="",
            prose_segments=prose_segments,
            code_segments=code_segments,
        )

    def _write_output(self, output: Path, html: str) -> None:
        try:
            atomic_write(output, html)
        except OSError as exc:
            raise ConversionError("WRITE_ERROR", f"Cannot write {output}: {exc}") from exc

    def _log_failure(self, run_id: str, path: Path, exc: ConversionError) -> None:
        self._logger.append(
            RunLogEntry(
                run_id=run_id,
                source=str(path),
                status="failure",
                error_code=exc.code,
                error_message=str(exc),
                timings=StageTimings(0, 0, 0),
                output_path=None,
                prose_segments=0,
                code_segments=0,
                images=0,
            )
        )

    def batch_convert(
        self,
        inputs: Sequence[Path],
        *,
        parallelism: int | None = None,
    ) -> BatchConversionResult:
        paths = list(iter_markdown_files(inputs))
        summary = BatchSummary()
        parallelism = max(1, parallelism or self._config.runtime.parallelism)

        if parallelism == 1:
            results = self._run_sequential_batch(paths, summary)
        else:
            results = self._run_parallel_batch(paths, summary, parallelism)

        summary.total = len(paths)
        if paths:
            append_summary_row(self._config.runtime.summary_csv, summary, generate_run_id("batch"))
        return BatchConversionResult(runs=results, summary=summary)

    def _run_sequential_batch(
        self, paths: Sequence[Path], summary: BatchSummary
    ) -> list[ConversionResult]:
        results: list[ConversionResult] = []
        for path in paths:
            try:
                result = self.convert_file(path)
            except ConversionError as exc:
                summary.record_failure(exc.code)
                continue
            results.append(result)
            summary.successes += 1
        return results

    def _run_parallel_batch(
        self, paths: Sequence[Path], summary: BatchSummary, parallelism: int
    ) -> list[ConversionResult]:
        results: list[ConversionResult] = []
        with concurrent.futures.ThreadPoolExecutor(max_workers=parallelism) as executor:
            future_map = {executor.submit(self.convert_file, path): path for path in paths}
            for future in concurrent.futures.as_completed(future_map):
                try:
                    result = future.result()
                except ConversionError as exc:
                    summary.record_failure(exc.code)
                    continue
                results.append(result)
                summary.successes += 1
        results.sort(key=lambda item: paths.index(item.source_path))
        return results


__all__ = [
    "ConversionService",
    "ConversionResult",
    "ConversionError",
    "BatchConversionResult",
]
