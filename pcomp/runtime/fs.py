"""Filesystem access used by the candidate providers."""

import os
from typing import List, Optional, Sequence

from ..errors import Inaccessible


class FileSystem:
    """Directory listing and file predicates, relative to a working directory."""

    def __init__(self, cwd: Optional[str] = None, executable_suffixes: Sequence[str] = ()):
        self._cwd = cwd
        self.executable_suffixes = tuple(suffix.lower() for suffix in executable_suffixes)

    @property
    def cwd(self) -> str:
        return self._cwd if self._cwd is not None else os.getcwd()

    def chdir(self, path: str) -> str:
        """Move the working directory used for relative paths."""
        target = os.path.normpath(self.resolve(path))
        if not os.path.isdir(target):
            raise Inaccessible(path, "not a directory")
        self._cwd = target
        return target

    def resolve(self, path: str) -> str:
        path = os.path.expanduser(path)
        return path if os.path.isabs(path) else os.path.join(self.cwd, path)

    def listdir(self, path: str) -> List[str]:
        """Entry names of ``path`` in sorted order; raises Inaccessible."""
        try:
            return sorted(os.listdir(self.resolve(path or ".")))
        except OSError as exc:
            raise Inaccessible(path, exc.strerror or str(exc)) from exc

    def is_dir(self, path: str) -> bool:
        return os.path.isdir(self.resolve(path))

    def is_readable(self, path: str) -> bool:
        return os.access(self.resolve(path), os.R_OK)

    def is_executable(self, path: str) -> bool:
        full = self.resolve(path)
        if os.name == "nt" and self.executable_suffixes:
            return os.path.splitext(full)[1].lower() in self.executable_suffixes
        return os.access(full, os.X_OK)
