"""
Inkwell template parser.

Turns raw template text into an ordered list of nodes. The Lark grammar lexes
every tag as a single token; the NodeBuilder transformer then picks the tag
arguments apart and builds the node models.
"""
import re

from lark import Lark, Transformer
from lark.exceptions import UnexpectedInput, VisitError

from inkcore.errors import ParseError, get_line_context, detect_common_error_patterns
from inkcore.grammar import template_grammar
from inkcore.nodes import Block, Definition, Expression, Include, Mode, PlainText, VarBinding

_VAR_TAG = re.compile(r'\{%\s*var\s+([A-Za-z_$][\w$]*)\s*=([\s\S]*?)%\}')
_BLOCK_TAG = re.compile(r'\{%\s*block\s+([\w.-]+)\s*%\}')
_DEF_TAG = re.compile(r'\{%\s*def\s+([\w.-]+)(?:\s+(override|append|prepend))?\s*%\}')
_CLOSE_TAG = re.compile(r'\{%\s*end\w+(?:\s+([\w.-]+))?\s*%\}')
_INCLUDE_TAG = re.compile(r'\{%\s*include\s+(?:"([^"]*)"|\'([^\']*)\')')


def _closing_name(token):
    return _CLOSE_TAG.match(token).group(1)


def _position(value):
    # lark reports -1 or "?" when the position is unknown
    return value if isinstance(value, int) and value > 0 else None


class NodeBuilder(Transformer):
    """
    Transforms the template parse tree into node models.

    Comments become None and are dropped by the enclosing rule.
    """

    def start(self, items):
        return [i for i in items if i is not None]

    def text(self, args):
        return PlainText(text=str(args[0]))

    def comment(self, args):
        return None

    def output(self, args):
        return Expression(source=str(args[0])[2:-2].strip(), buffered=True, escape=True)

    def raw_output(self, args):
        return Expression(source=str(args[0])[3:-2].strip(), buffered=True, escape=False)

    def silent(self, args):
        return Expression(source=str(args[0])[3:-2].strip(), buffered=False, escape=False)

    def var_stmt(self, args):
        name, source = _VAR_TAG.match(args[0]).groups()
        return VarBinding(name=name, source=source.strip())

    def block(self, args):
        opener, *body, closer = args
        name = _BLOCK_TAG.match(opener).group(1)
        self._check_closing(name, closer, "endblock")
        return Block(name=name, body=[n for n in body if n is not None])

    def definition(self, args):
        opener, *body, closer = args
        name, mode = _DEF_TAG.match(opener).groups()
        self._check_closing(name, closer, "enddef")
        return Definition(name=name, mode=mode or Mode.OVERRIDE, body=[n for n in body if n is not None])

    def include(self, args):
        opener, *body = args
        match = _INCLUDE_TAG.match(opener)
        file = match.group(1) if match.group(1) is not None else match.group(2)
        overrides = []
        # body ends with the INCLUDE_CLOSE token when the tag has a "with" section
        for node in body[:-1]:
            if node is None or isinstance(node, Definition):
                if node is not None:
                    overrides.append(node)
            elif isinstance(node, PlainText) and not node.text.strip():
                continue
            else:
                raise ParseError(
                    f"Only 'def' tags are allowed inside 'include \"{file}\" with'",
                    line_number=opener.line,
                    column=opener.column,
                    suggestion="Move text and expressions into a '{% def %}' tag",
                )
        return Include(file=file, overrides=overrides)

    def _check_closing(self, name, closer, keyword):
        closing = _closing_name(closer)
        if closing is not None and closing != name:
            raise ParseError(
                f"'{keyword} {closing}' does not match '{name}'",
                line_number=closer.line,
                column=closer.column,
                suggestion=f"Close the tag with '{{% {keyword} {name} %}}'",
            )


class TemplateParser:
    """Parses template text into nodes."""

    def __init__(self):
        self._lark = Lark(template_grammar, parser='lalr')

    def parse(self, content):
        """
        Parse template source.

        Args:
            content: Raw template text.

        Returns:
            List of nodes in source order.

        Raises:
            ParseError: On malformed template syntax.
        """
        try:
            tree = self._lark.parse(content)
        except UnexpectedInput as e:
            line_number = _position(e.line)
            column = _position(e.column)
            suggestion = detect_common_error_patterns(content) or "Check tag syntax around this line"
            raise ParseError(
                message="Unexpected input",
                line_number=line_number,
                column=column,
                context=get_line_context(content, line_number),
                suggestion=suggestion,
            )

        try:
            return NodeBuilder().transform(tree)
        except VisitError as e:
            if isinstance(e.orig_exc, ParseError):
                if e.orig_exc.context is None:
                    e.orig_exc.context = get_line_context(content, e.orig_exc.line_number)
                raise e.orig_exc
            raise
