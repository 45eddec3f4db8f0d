"""
Inkwell expression engine.

A small angular-style expression language. Sources are parsed once with Lark
and turned into a tree of Python closures; evaluating an expression is then a
plain function call against a binding set.
"""
import json
import re
from collections.abc import Mapping, Sequence

from lark import Lark, Transformer, v_args
from lark.exceptions import UnexpectedInput, VisitError

from inkcore.errors import ExpressionError
from inkcore.grammar import expression_grammar
from inkcore.runtime.escape import to_text


def _default(value, fallback=""):
    return fallback if value is None or value == "" else value


def _join(value, separator=","):
    if value is None:
        return ""
    return separator.join(to_text(item) for item in value)


DEFAULT_FILTERS = {
    "upper": lambda value: to_text(value).upper(),
    "lower": lambda value: to_text(value).lower(),
    "trim": lambda value: to_text(value).strip(),
    "length": lambda value: 0 if value is None else len(value),
    "default": _default,
    "join": _join,
    "json": lambda value: json.dumps(value, default=str),
}


def get_member(obj, key):
    """Member or index access that yields None instead of failing on missing values."""
    if obj is None:
        return None
    if isinstance(obj, Mapping):
        return obj.get(key)
    if isinstance(obj, Sequence) and not isinstance(obj, str) and isinstance(key, int):
        return obj[key] if -len(obj) <= key < len(obj) else None
    if isinstance(obj, str) and isinstance(key, int):
        return obj[key] if -len(obj) <= key < len(obj) else None
    return getattr(obj, str(key), None)


def _add(left, right):
    if left is None:
        return right
    if right is None:
        return left
    if isinstance(left, str) or isinstance(right, str):
        return to_text(left) + to_text(right)
    return left + right


def _ordered(op):
    def compare(left, right):
        try:
            return op(left, right)
        except TypeError:
            return False
    return compare


_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f", "v": "\v", "0": "\0"}
_ESCAPE = re.compile(r'\\(?:u([0-9a-fA-F]{4})|x([0-9a-fA-F]{2})|([\s\S]))')


def _unescape(match):
    code = match.group(1) or match.group(2)
    if code:
        return chr(int(code, 16))
    char = match.group(3)
    # Unknown escapes keep the character itself
    return _ESCAPES.get(char, char)


def _unquote(token):
    return _ESCAPE.sub(_unescape, token[1:-1])


@v_args(inline=True)
class ClosureBuilder(Transformer):
    """
    Transforms an expression parse tree into a single closure taking bindings.

    Bindings are any mapping; writes (assignments) go through item assignment,
    so passing a Scope writes into its innermost environment.
    """

    def __init__(self, filters):
        super().__init__()
        self.filters = filters

    # --- Literals ---
    def number(self, token):
        text = str(token)
        value = float(text) if any(c in text for c in ".eE") else int(text)
        return lambda scope: value

    def string(self, token):
        value = _unquote(str(token))
        return lambda scope: value

    def true(self):
        return lambda scope: True

    def false(self):
        return lambda scope: False

    def null(self):
        return lambda scope: None

    def array(self, items=None):
        items = items or []
        return lambda scope: [item(scope) for item in items]

    def object(self, pairs=None):
        pairs = pairs or []
        return lambda scope: {key: value(scope) for key, value in pairs}

    def arguments(self, *items):
        return list(items)

    def pairs(self, *items):
        return list(items)

    def pair(self, key, value):
        key = str(key)
        if key[0] in "\"'":
            key = _unquote(key)
        return (key, value)

    # --- Access ---
    def var(self, name):
        name = str(name)
        return lambda scope: scope.get(name)

    def member(self, obj, name):
        name = str(name)
        return lambda scope: get_member(obj(scope), name)

    def index(self, obj, key):
        return lambda scope: get_member(obj(scope), key(scope))

    def call(self, target, args=None):
        args = args or []

        def invoke(scope):
            fn = target(scope)
            if fn is None:
                return None
            return fn(*[arg(scope) for arg in args])
        return invoke

    def assign(self, name, value):
        name = str(name)

        def write(scope):
            result = value(scope)
            scope[name] = result
            return result
        return write

    def filter(self, value, name, args):
        name = str(name)
        if name not in self.filters:
            raise ExpressionError(f"Unknown filter '{name}'")
        fn = self.filters[name]
        return lambda scope: fn(value(scope), *[arg(scope) for arg in args])

    def filter_args(self, *args):
        return list(args)

    # --- Operators ---
    def conditional(self, test, then, otherwise):
        return lambda scope: then(scope) if test(scope) else otherwise(scope)

    def or_(self, left, right):
        return lambda scope: left(scope) or right(scope)

    def and_(self, left, right):
        return lambda scope: left(scope) and right(scope)

    def not_(self, operand):
        return lambda scope: not operand(scope)

    def neg(self, operand):
        return lambda scope: -(operand(scope) or 0)

    def pos(self, operand):
        return lambda scope: +(operand(scope) or 0)

    def eq(self, left, right):
        return lambda scope: left(scope) == right(scope)

    def ne(self, left, right):
        return lambda scope: left(scope) != right(scope)

    def lt(self, left, right):
        compare = _ordered(lambda a, b: a < b)
        return lambda scope: compare(left(scope), right(scope))

    def le(self, left, right):
        compare = _ordered(lambda a, b: a <= b)
        return lambda scope: compare(left(scope), right(scope))

    def gt(self, left, right):
        compare = _ordered(lambda a, b: a > b)
        return lambda scope: compare(left(scope), right(scope))

    def ge(self, left, right):
        compare = _ordered(lambda a, b: a >= b)
        return lambda scope: compare(left(scope), right(scope))

    def add(self, left, right):
        return lambda scope: _add(left(scope), right(scope))

    def sub(self, left, right):
        return lambda scope: (left(scope) or 0) - (right(scope) or 0)

    def mul(self, left, right):
        return lambda scope: (left(scope) or 0) * (right(scope) or 0)

    def div(self, left, right):
        return lambda scope: (left(scope) or 0) / right(scope)

    def mod(self, left, right):
        return lambda scope: (left(scope) or 0) % right(scope)


class Evaluator:
    """A compiled expression. Call it with a binding set to get its value."""

    __slots__ = ("source", "_fn")

    def __init__(self, source, fn):
        self.source = source
        self._fn = fn

    def __call__(self, bindings=None):
        return self._fn({} if bindings is None else bindings)

    def __repr__(self):
        return f"Evaluator({self.source!r})"


class ExpressionEngine:
    """Compiles expression sources into evaluators."""

    def __init__(self, filters=None):
        self.filters = dict(DEFAULT_FILTERS)
        if filters:
            self.filters.update(filters)
        self._lark = Lark(expression_grammar, parser='lalr')

    def compile(self, source):
        """
        Compile an expression.

        Raises:
            ExpressionError: If the source is malformed or names an unknown filter.
        """
        if not source or not source.strip():
            raise ExpressionError("Empty expression", source=source)
        try:
            tree = self._lark.parse(source)
        except UnexpectedInput as e:
            raise ExpressionError(
                "Syntax error in expression",
                source=source,
                column=e.column if isinstance(e.column, int) and e.column > 0 else None,
                suggestion="Check operators and brackets",
            )
        try:
            fn = ClosureBuilder(self.filters).transform(tree)
        except VisitError as e:
            if isinstance(e.orig_exc, ExpressionError):
                e.orig_exc.source = source
                e.orig_exc.context = source
                raise e.orig_exc
            raise ExpressionError(
                f"Invalid expression: {e.orig_exc}",
                source=source,
            ) from e.orig_exc
        return Evaluator(source, fn)
