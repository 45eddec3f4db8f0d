# Inkwell Runtime Components
"""
Runtime support linked into every assembled program: the output accumulator,
the escaping primitive and the nested binding environment.
"""

from .escape import escape_html, to_text
from .output import Output
from .scope import Scope


class Runtime:
    """The primitives an assembled program runs against."""

    __slots__ = ("escape", "output")

    def __init__(self, escape=None, output=None):
        self.escape = escape or escape_html
        self.output = output or Output


__all__ = ['Runtime', 'Output', 'Scope', 'escape_html', 'to_text']
