# ==========================================
# OUTPUT ACCUMULATOR
# ==========================================


class Output:
    """Collects rendered pieces; one instance per render call."""

    __slots__ = ("_parts",)

    def __init__(self):
        self._parts = []

    def push(self, text):
        self._parts.append(text)

    def getvalue(self):
        return "".join(self._parts)
