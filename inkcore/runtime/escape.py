# ==========================================
# TEXT CONVERSION & ESCAPING
# ==========================================
import html


def to_text(value):
    """Convert an expression value to output text."""
    if value is None:
        return ""
    if value is True:
        return "true"
    if value is False:
        return "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def escape_html(value):
    """Escape & < > " and ' in the text form of a value."""
    return html.escape(to_text(value), quote=True)
