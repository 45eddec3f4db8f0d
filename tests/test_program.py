"""
Unit tests for the program IR and renderer assembly.
"""
import pytest

from inkcore.expressions import ExpressionEngine
from inkcore.program import (
    AssignBinding,
    EmitExpr,
    EmitLiteral,
    EvalExpr,
    Renderer,
    RunSequence,
    Scoped,
    assemble,
    sequence,
)
from inkcore.runtime import Runtime


@pytest.fixture
def table():
    """A small expression table."""
    engine = ExpressionEngine()
    return [engine.compile(s) for s in ["'outer'", "'inner'", "x", "'<i>'"]]


class TestSequence:
    """Tests for fragment composition."""

    def test_sequence_preserves_order(self):
        a, b, c = EmitLiteral(text="a"), EmitLiteral(text="b"), EmitLiteral(text="c")
        assert sequence((a,), (), (b, c)) == (a, b, c)

    def test_empty_sequence(self):
        assert sequence() == ()


class TestRenderer:
    """Tests for executing assembled programs."""

    def test_scoped_writes_are_isolated(self, table):
        """Writes inside a Scoped op should not be visible after it."""
        fragment = (
            EmitLiteral(text="a"),
            AssignBinding(name="x", index=0),
            Scoped(ops=(AssignBinding(name="x", index=1), EmitExpr(index=2))),
            EmitLiteral(text="|"),
            EmitExpr(index=2),
        )
        assert assemble(fragment, table)() == "ainner|outer"

    def test_escape_flag(self, table):
        fragment = (EmitExpr(index=3, escape=True), EmitExpr(index=3, escape=False))
        assert assemble(fragment, table)() == "&lt;i&gt;<i>"

    def test_eval_emits_nothing(self, table):
        assert assemble((EvalExpr(index=3),), table)() == ""

    def test_custom_runtime_escape(self, table):
        """The runtime's escape primitive should be used for escaped output."""
        renderer = assemble((EmitExpr(index=3),), table, Runtime(escape=lambda v: "*"))
        assert renderer() == "*"

    def test_bindings_must_be_mapping(self, table):
        with pytest.raises(TypeError):
            assemble((), table)(["not", "a", "mapping"])

    def test_expression_table_is_frozen(self, table):
        """Later changes to the source list should not affect the renderer."""
        renderer = assemble((EmitExpr(index=0),), table)
        table.clear()
        assert renderer() == "outer"

    def test_render_alias(self, table):
        renderer = assemble((EmitLiteral(text="x"),), table)
        assert isinstance(renderer, Renderer)
        assert renderer.render() == renderer() == "x"


class TestDump:
    """Tests for the program listing."""

    def test_dump_lists_table_and_ops(self, table):
        renderer = assemble(
            (EmitLiteral(text='say "hi"\n'), Scoped(ops=(EmitExpr(index=2, escape=False),))),
            table[:3],
        )
        listing = renderer.dump()
        assert "$$2 = x" in listing
        assert 'emit "say \\"hi\\"\\n"' in listing
        assert "scope {" in listing
        assert "  emit-raw $$2" in listing

    def test_nested_run_sequence(self):
        program = RunSequence(ops=(RunSequence(ops=(EmitLiteral(text="a"),)), EmitLiteral(text="b")))
        assert program.dump() == ['emit "a"', 'emit "b"']
