"""
Error handling utilities for the Inkwell compiler.
"""
import re


class TemplateError(Exception):
    """Base exception for template compilation errors with file, position and hints."""

    title = "Template Error"

    def __init__(self, message, file=None, line_number=None, column=None, context=None, suggestion=None):
        self.message = message
        self.file = file
        self.line_number = line_number
        self.column = column
        self.context = context  # The offending line
        self.suggestion = suggestion  # How to fix it
        super().__init__(message)

    def __str__(self):
        return self._format_error()

    def _format_error(self):
        """Format the error message with location, context and suggestion."""
        lines = [f"\n❌ {self.title}"]
        if self.file:
            lines.append(f" in {self.file}")
        if self.line_number:
            lines.append(f" at line {self.line_number}")
            if self.column:
                lines.append(f", column {self.column}")
        lines.append(":\n")

        lines.append(f"   {self.message}\n")

        if self.context:
            lines.append(f"   > {self.context}\n")

        if self.suggestion:
            lines.append(f"   💡 {self.suggestion}\n")

        return "".join(lines)


class LoadError(TemplateError):
    """A template file could not be loaded."""
    title = "Load Error"


class ParseError(TemplateError):
    """Malformed template syntax."""
    title = "Syntax Error"


class ExpressionError(TemplateError):
    """Malformed expression source."""
    title = "Expression Error"

    def __init__(self, message, source=None, **kwargs):
        self.source = source
        kwargs.setdefault("context", source)
        super().__init__(message, **kwargs)


class CircularIncludeError(TemplateError):
    """A template includes itself, directly or through other templates."""
    title = "Include Error"

    def __init__(self, chain):
        self.chain = list(chain)
        super().__init__(
            "Circular include: " + " -> ".join(self.chain),
            file=self.chain[0] if self.chain else None,
            suggestion="Remove one of the includes to break the cycle",
        )


def get_line_context(source_code, line_number):
    """Extract the line of code from source by line number (1-based)."""
    if not source_code or line_number is None:
        return None
    source_lines = source_code.split('\n')
    if 0 < line_number <= len(source_lines):
        return source_lines[line_number - 1].strip()
    return None


_PAIRED_TAGS = (
    ("block", "endblock"),
    ("def", "enddef"),
)


def detect_common_error_patterns(source_code):
    """Detect common template mistakes and return a helpful suggestion."""
    for opener, closer in _PAIRED_TAGS:
        opened = len(re.findall(r'\{%\s*' + opener + r'\s', source_code))
        closed = len(re.findall(r'\{%\s*' + closer + r'\b', source_code))
        if opened != closed:
            return f"Unbalanced tags: found {opened} '{{% {opener} %}}' but {closed} '{{% {closer} %}}'"

    opened = len(re.findall(r'\{%\s*include\s+(?:"[^"]*"|\'[^\']*\')\s+with\s*%\}', source_code))
    closed = len(re.findall(r'\{%\s*endinclude\b', source_code))
    if opened != closed:
        return f"Unbalanced tags: found {opened} '{{% include ... with %}}' but {closed} '{{% endinclude %}}'"

    if source_code.count('{{') != source_code.count('}}'):
        return "Unterminated output tag: every '{{' needs a matching '}}'"

    return None
