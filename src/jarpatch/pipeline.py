# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Orchestrate resolve, extract, patch, merge and cleanup for one patch run."""

from __future__ import annotations

import shutil
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor, wait
from functools import partial
from pathlib import Path
from typing import TypeVar

from .checks import check_bundle_exists, check_input_exists
from .cleanup import execute_cleanup, plan_cleanup
from .config import PatcherConfig
from .errors import FileOperationError, PatchError
from .extract import expand_delta_bundle, extract_members
from .logging import PatchLogger
from .merge import apply_patches
from .models import PipelineResult, PipelineStage
from .patching import apply_delta
from .tools.archive import JarArchiveTool, ZipfileArchiveTool
from .tools.base import ArchiveTool, DiffTool
from .tools.diff import Bsdiff4DiffTool, Xdelta3DiffTool
from .tools.resolver import ToolReference, ToolResolver, Which

T = TypeVar("T")


class PatchPipeline:
    """Run the patch stages in order, concurrently where they are independent.

    ``RESOLVE_TOOLS -> EXTRACT -> PATCH -> MERGE -> CLEANUP -> DONE``. Any
    failure moves straight to ``FAILED`` and re-raises; cleanup is skipped so
    the intermediate files stay on disk for diagnosis.
    """

    def __init__(
        self,
        config: PatcherConfig,
        *,
        logger: PatchLogger,
        resolver: ToolResolver | None = None,
        archive_tool: ArchiveTool | None = None,
        diff_tool: DiffTool | None = None,
        which: Which = shutil.which,
    ) -> None:
        self._config = config
        self._logger = logger
        self._workdir = config.workdir.absolute()
        self._resolver = resolver or ToolResolver(self._workdir, logger=logger, which=which)
        self._archive_tool = archive_tool
        self._diff_tool = diff_tool
        self._stage = PipelineStage.RESOLVE_TOOLS

    @property
    def stage(self) -> PipelineStage:
        """Return the stage the pipeline is in, or ended in."""

        return self._stage

    def run(self, input_archive: Path, output_archive: Path) -> PipelineResult:
        """Patch *input_archive* into a new archive at *output_archive*.

        Args:
            input_archive: Unmodified container archive.
            output_archive: Destination of the patched copy.

        Returns:
            PipelineResult: Summary of the successful run.

        Raises:
            PatchError: On the first failing stage, with ``stage`` populated.
        """

        source = input_archive.absolute()
        target = output_archive.absolute()
        try:
            self._stage = PipelineStage.RESOLVE_TOOLS
            archive_tool, diff_tool = self._resolve(source, target)

            self._stage = PipelineStage.EXTRACT
            delta_files = self._extract(archive_tool, source)

            self._stage = PipelineStage.PATCH
            self._patch(diff_tool, source, target)

            self._stage = PipelineStage.MERGE
            self._merge(archive_tool, target)

            self._stage = PipelineStage.CLEANUP
            plan = plan_cleanup(
                self._config.patch_set.members,
                delta_files,
                self._workdir,
                protected=(source, target, self._bundle),
            )
            removed = execute_cleanup(plan, logger=self._logger)
        except PatchError as exc:
            if exc.stage is None:
                exc.stage = self._stage
            self._stage = PipelineStage.FAILED
            raise

        self._stage = PipelineStage.DONE
        return PipelineResult(
            output=target,
            patched=tuple(member.path for member in self._config.patch_set.members),
            removed=tuple(removed),
        )

    @property
    def _bundle(self) -> Path:
        return self._config.bundle_path.absolute()

    def _resolve(self, source: Path, target: Path) -> tuple[ArchiveTool, DiffTool]:
        if source == target:
            message = f'Output path "{target}" must differ from the input archive.'
            self._logger.fail(message)
            raise PatchError(message, stage=PipelineStage.RESOLVE_TOOLS)

        tools = self._config.tools
        injected = {
            name
            for name, delegate in ((tools.archive_tool, self._archive_tool), (tools.diff_tool, self._diff_tool))
            if delegate is not None
        }
        names = [name for name in tools.required_executables() if name not in injected]

        tasks: list[Callable[[], object]] = [
            partial(check_input_exists, source, logger=self._logger),
            partial(check_bundle_exists, self._bundle, logger=self._logger),
        ]
        tasks.extend(partial(self._resolver.resolve, name) for name in names)
        results = self._run_concurrently(tasks)
        references = {ref.name: ref for ref in results[2:] if isinstance(ref, ToolReference)}

        archive_tool = self._archive_tool
        if archive_tool is None:
            archive_tool = (
                JarArchiveTool(references[tools.archive_tool])
                if tools.archive_backend == "jar"
                else ZipfileArchiveTool()
            )
        diff_tool = self._diff_tool
        if diff_tool is None:
            diff_tool = (
                Xdelta3DiffTool(references[tools.diff_tool]) if tools.diff_backend == "xdelta3" else Bsdiff4DiffTool()
            )
        return archive_tool, diff_tool

    def _extract(self, archive_tool: ArchiveTool, source: Path) -> list[Path]:
        members = self._config.patch_set.members
        delta_files, _ = self._run_concurrently(
            [
                partial(expand_delta_bundle, self._bundle, self._workdir, logger=self._logger),
                partial(extract_members, archive_tool, source, members, self._workdir, logger=self._logger),
            ]
        )
        expected = {member.delta_path(self._workdir) for member in members}
        unused = [path for path in delta_files if path not in expected]
        if unused:
            names = ", ".join(path.relative_to(self._workdir).as_posix() for path in unused)
            self._logger.warn(f"Patch bundle contains deltas no member uses: {names}")
        return delta_files

    def _patch(self, diff_tool: DiffTool, source: Path, target: Path) -> None:
        tasks: list[Callable[[], object]] = [
            partial(apply_delta, member, diff_tool, self._workdir, logger=self._logger)
            for member in self._config.patch_set.members
        ]
        tasks.append(partial(self._copy_archive, source, target))
        try:
            self._run_concurrently(tasks)
        except PatchError:
            target.unlink(missing_ok=True)
            raise

    def _copy_archive(self, source: Path, target: Path) -> Path:
        try:
            shutil.copyfile(source, target)
        except OSError as exc:
            message = f'Failed to copy "{source}" to "{target}": {exc}'
            self._logger.fail(message)
            raise FileOperationError(message, path=target, operation="copy", stage=PipelineStage.PATCH) from exc
        return target

    def _merge(self, archive_tool: ArchiveTool, target: Path) -> None:
        patch_set = self._config.patch_set
        metadata = patch_set.metadata_member
        apply_patches(
            archive_tool,
            target,
            [member.os_path for member in patch_set.ordinary_members],
            metadata.os_path if metadata is not None else None,
            workdir=self._workdir,
            logger=self._logger,
        )

    def _run_concurrently(self, tasks: Sequence[Callable[[], T]]) -> list[T]:
        """Run *tasks* on a thread pool, waiting for all before reporting failure.

        The first failure in submission order is re-raised once every task
        has finished, so no stage starts while work from the previous one is
        still in flight.
        """

        workers = max(1, min(self._config.jobs, len(tasks)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(task) for task in tasks]
            wait(futures)
        for future in futures:
            error = future.exception()
            if error is not None:
                raise error
        return [future.result() for future in futures]


def run_pipeline(
    config: PatcherConfig,
    input_archive: Path,
    output_archive: Path,
    *,
    logger: PatchLogger,
) -> PipelineResult:
    """Convenience wrapper building a :class:`PatchPipeline` and running it."""

    return PatchPipeline(config, logger=logger).run(input_archive, output_archive)


__all__ = ["PatchPipeline", "run_pipeline"]
