"""
Inkwell program IR.

A compiled template is a flat sequence of typed operations. Fragments compose
by ordered concatenation only; a Scoped operation is the boundary placed
around an include so its writes do not leak into the enclosing bindings.
"""
import json
from collections.abc import Mapping
from typing import Tuple, Union

from pydantic import BaseModel, ConfigDict

from inkcore.runtime import Runtime, Scope, to_text


class Frame:
    """Per-render execution state."""

    __slots__ = ("out", "scope", "expressions", "runtime")

    def __init__(self, out, scope, expressions, runtime):
        self.out = out
        self.scope = scope
        self.expressions = expressions
        self.runtime = runtime

    def nested(self):
        return Frame(self.out, self.scope.child(), self.expressions, self.runtime)


class Op(BaseModel):
    model_config = ConfigDict(frozen=True)

    def execute(self, frame):
        raise NotImplementedError

    def dump(self, indent=0):
        raise NotImplementedError


class EmitLiteral(Op):
    text: str

    def execute(self, frame):
        frame.out.push(self.text)

    def dump(self, indent=0):
        return [" " * indent + "emit " + json.dumps(self.text)]


class EmitExpr(Op):
    index: int
    escape: bool = True

    def execute(self, frame):
        value = frame.expressions[self.index](frame.scope)
        if self.escape:
            frame.out.push(frame.runtime.escape(value))
        else:
            frame.out.push(to_text(value))

    def dump(self, indent=0):
        verb = "emit-escaped" if self.escape else "emit-raw"
        return [" " * indent + f"{verb} $${self.index}"]


class EvalExpr(Op):
    index: int

    def execute(self, frame):
        frame.expressions[self.index](frame.scope)

    def dump(self, indent=0):
        return [" " * indent + f"eval $${self.index}"]


class AssignBinding(Op):
    name: str
    index: int

    def execute(self, frame):
        frame.scope[self.name] = frame.expressions[self.index](frame.scope)

    def dump(self, indent=0):
        return [" " * indent + f"set {self.name} = $${self.index}"]


class RunSequence(Op):
    ops: Tuple["AnyOp", ...] = ()

    def execute(self, frame):
        for op in self.ops:
            op.execute(frame)

    def dump(self, indent=0):
        lines = []
        for op in self.ops:
            lines.extend(op.dump(indent))
        return lines


class Scoped(RunSequence):
    def execute(self, frame):
        super().execute(frame.nested())

    def dump(self, indent=0):
        return [" " * indent + "scope {"] + super().dump(indent + 2) + [" " * indent + "}"]


AnyOp = Union[EmitLiteral, EmitExpr, EvalExpr, AssignBinding, Scoped, RunSequence]
RunSequence.model_rebuild()
Scoped.model_rebuild()

# A fragment is an ordered tuple of operations
Fragment = Tuple[Op, ...]


def sequence(*fragments):
    """Join fragments in order."""
    ops = []
    for fragment in fragments:
        ops.extend(fragment)
    return tuple(ops)


class Renderer:
    """
    The callable produced by a successful compile.

    Holds the assembled program and the expression table it references by
    index. Both are read-only, so one renderer may be called repeatedly and
    from several threads at once.
    """

    def __init__(self, program, expressions, runtime=None):
        self.program = program
        self.expressions = tuple(expressions)
        self.runtime = runtime or Runtime()

    def __call__(self, bindings=None):
        if bindings is None:
            bindings = {}
        if not isinstance(bindings, Mapping):
            raise TypeError(f"Bindings must be a mapping, not {type(bindings).__name__}")
        out = self.runtime.output()
        # Top-level writes go into a fresh scope, never into the caller's mapping
        frame = Frame(out, Scope(parent=bindings), self.expressions, self.runtime)
        self.program.execute(frame)
        return out.getvalue()

    render = __call__

    def dump(self):
        """Readable listing of the program and its expression table."""
        lines = [f"$${i} = {expr.source}" for i, expr in enumerate(self.expressions)]
        if lines:
            lines.append("")
        lines.extend(self.program.dump())
        return "\n".join(lines)


def assemble(root_fragment, expressions, runtime=None):
    """Wrap the root fragment into a program and bind it to the expression table."""
    return Renderer(RunSequence(ops=tuple(root_fragment)), expressions, runtime)
