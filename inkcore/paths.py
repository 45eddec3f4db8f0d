"""
Path resolution for template references.

Every path used as a cache or lookup key is relative to the base directory,
normalized, and never climbs above the base directory.
"""
import posixpath
import re

_LEADING_UP = re.compile(r'^(?:\.{1,2}/+)+')


def local_path(relative_to, file):
    """
    Resolve a template reference.

    Args:
        relative_to: The including file ('' for the root template).
        file: The reference as written in the template.

    Returns:
        Normalized path relative to the base directory.
    """
    file = file.replace("\\", "/")
    if file.startswith("/"):
        return posixpath.normpath(file).lstrip("/")
    joined = posixpath.join(posixpath.dirname(relative_to.replace("\\", "/")), file)
    return _strip_leading_up(posixpath.normpath(joined))


def _strip_leading_up(path):
    stripped = _LEADING_UP.sub("", path)
    if stripped in (".", ".."):
        return ""
    return stripped
