"""
Template loaders.

A loader is any callable taking a resolved template path and returning its
text, either directly or as an awaitable.
"""
import asyncio
import os

from inkcore.errors import LoadError


class FileLoader:
    """Loads templates from a base directory on disk."""

    def __init__(self, basedir=None, encoding="utf-8"):
        self.basedir = basedir or os.getcwd()
        self.encoding = encoding

    def _read(self, path):
        full_path = os.path.join(self.basedir, path)
        if not os.path.isfile(full_path):
            raise LoadError(f"Template not found: {path} (resolved to {full_path})", file=path)
        try:
            with open(full_path, 'r', encoding=self.encoding) as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise LoadError(f"Cannot read template: {e}", file=path) from e

    async def __call__(self, path):
        return await asyncio.to_thread(self._read, path)

    def __repr__(self):
        return f"FileLoader({self.basedir!r})"


class DictLoader:
    """Serves templates from an in-memory mapping of path to text."""

    def __init__(self, templates):
        self.templates = dict(templates)

    async def __call__(self, path):
        try:
            return self.templates[path]
        except KeyError:
            raise LoadError(f"Template not found: {path}", file=path) from None
