# ==========================================
# BINDING ENVIRONMENT
# ==========================================
from collections.abc import Mapping

_MISSING = object()


class Scope(Mapping):
    """
    Nested binding environment.

    Reads fall through to the parent (any mapping, e.g. the bindings a render
    was called with); writes always land in this scope's own map, so they are
    invisible to the parent once the nested scope is discarded.
    """

    __slots__ = ("_vars", "_parent")

    def __init__(self, parent=None, bindings=None):
        self._vars = dict(bindings) if bindings else {}
        self._parent = parent

    @property
    def parent(self):
        return self._parent

    def child(self):
        return Scope(parent=self)

    def get(self, name, default=None):
        value = self._vars.get(name, _MISSING)
        if value is not _MISSING:
            return value
        if self._parent is None:
            return default
        return self._parent.get(name, default)

    def __getitem__(self, name):
        value = self.get(name, _MISSING)
        if value is _MISSING:
            raise KeyError(name)
        return value

    def __setitem__(self, name, value):
        self._vars[name] = value

    def __contains__(self, name):
        return self.get(name, _MISSING) is not _MISSING

    def __iter__(self):
        return iter(self.to_dict())

    def __len__(self):
        return len(self.to_dict())

    def to_dict(self):
        """Flatten the visible bindings, innermost winning."""
        merged = dict(self._parent) if self._parent is not None else {}
        merged.update(self._vars)
        return merged

    def __repr__(self):
        return f"Scope({self._vars!r}, parent={self._parent!r})"
