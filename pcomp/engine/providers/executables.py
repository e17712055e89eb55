"""Executables found in the working directory and on the search path."""

from __future__ import annotations

from typing import Optional

import structlog

from ...runtime.config import CompletionConfig
from ...runtime.fs import FileSystem
from ..candidates import CandidateKind, CandidateSet
from ..context import CompletionContext
from .base import Provider, scan_directory, split_stub

logger = structlog.get_logger(__name__)


class ExecutableProvider(Provider):
    """Command names from the filesystem.

    The working directory is scanned first and may contribute subdirectories;
    search-path directories only contribute runnable files.
    """

    name = "executables"

    def __init__(self, config: CompletionConfig, fs: Optional[FileSystem] = None):
        super().__init__(config)
        self.fs = fs or FileSystem(executable_suffixes=config.executable_suffixes)

    def applies(self, context: CompletionContext) -> bool:
        return context.is_command_position

    def generate(self, context: CompletionContext) -> CandidateSet:
        candidates = CandidateSet()
        stub = context.stub

        if "/" in stub:
            directory, prefix = split_stub(stub)
            self._scan(candidates, directory, prefix, allow_dirs=True)
            return candidates

        self._scan(candidates, "", stub, allow_dirs=True)
        for directory in self.config.search_dirs():
            self._scan(candidates, directory, stub, allow_dirs=False)

        logger.debug("provider.executables", stub=stub, count=len(candidates))
        return candidates

    def _scan(self, candidates: CandidateSet, directory: str, prefix: str, allow_dirs: bool) -> None:
        # Search-path entries are offered bare; path-qualified stubs keep their directory.
        keep_directory = directory if allow_dirs else ""
        for name, path, is_dir in scan_directory(self.fs, directory, prefix, self.config):
            if is_dir:
                if allow_dirs:
                    candidates.add(keep_directory + name, CandidateKind.DIRECTORY)
            elif self._runnable(path):
                candidates.add(keep_directory + name, CandidateKind.EXECUTABLE)

    def _runnable(self, path: str) -> bool:
        if self.config.force_execution:
            return self.fs.is_readable(path)
        return self.fs.is_executable(path)
