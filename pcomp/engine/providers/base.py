"""Base class and shared directory scanning for candidate providers."""

from __future__ import annotations

import posixpath
from typing import Iterator, Tuple

import structlog

from ...errors import Inaccessible
from ...runtime.config import CompletionConfig
from ...runtime.fs import FileSystem
from ..candidates import CandidateSet, is_ignored, is_visible
from ..context import CompletionContext

logger = structlog.get_logger(__name__)


class Provider:
    """A source of completion candidates."""

    name = "provider"

    def __init__(self, config: CompletionConfig):
        self.config = config

    def applies(self, context: CompletionContext) -> bool:
        return True

    def generate(self, context: CompletionContext) -> CandidateSet:
        raise NotImplementedError


def split_stub(stub: str) -> Tuple[str, str]:
    """Split ``src/fo`` into the directory part ``src/`` and the name prefix ``fo``."""
    directory, prefix = posixpath.split(stub)
    if directory and not directory.endswith("/"):
        directory += "/"
    return directory, prefix


def scan_directory(
    fs: FileSystem, directory: str, prefix: str, config: CompletionConfig
) -> Iterator[Tuple[str, str, bool]]:
    """Yield ``(name, path, is_dir)`` for visible, non-ignored entries matching ``prefix``.

    An inaccessible directory yields nothing.
    """
    try:
        names = fs.listdir(directory)
    except Inaccessible as exc:
        logger.debug("provider.dir.inaccessible", path=exc.path, reason=exc.reason)
        return

    for name in names:
        if not config.matches(name, prefix) or not is_visible(name, prefix):
            continue
        path = posixpath.join(directory, name) if directory else name
        is_dir = fs.is_dir(path)
        if is_ignored(name, is_dir, config):
            continue
        yield name, path, is_dir
