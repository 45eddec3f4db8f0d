import asyncio
import inspect
import sys

from inkcore.context import CompiledDefinition, Context
from inkcore.errors import CircularIncludeError, LoadError, ParseError, TemplateError
from inkcore.expressions import ExpressionEngine
from inkcore.loader import FileLoader
from inkcore.nodes import Mode, NodeKind, PlainText, coerce_nodes
from inkcore.parser import TemplateParser
from inkcore.paths import local_path
from inkcore.program import (
    AssignBinding,
    EmitExpr,
    EmitLiteral,
    EvalExpr,
    Scoped,
    assemble,
    sequence,
)

# Global verbose flag
_VERBOSE = False


def set_verbose(value):
    """Set the global verbose flag."""
    global _VERBOSE
    _VERBOSE = value


def debug_log(message):
    """Log a debug message to stderr if verbose mode is enabled."""
    if _VERBOSE:
        print(f"\033[94mDEBUG:\033[0m {message}", file=sys.stderr)


# ==========================================
# 1. THE COMPILER
# ==========================================
class Compiler:
    """
    Compiles template files into renderers.

    Args:
        basedir: Directory template paths are relative to. Defaults to the
            current working directory.
        load: Loader callable ``load(path) -> str | Awaitable[str]``. Defaults
            to a FileLoader over basedir.
        parser: Object with ``parse(content) -> nodes``.
        engine: Expression engine with ``compile(source) -> evaluator``.
        runtime: Runtime primitives linked into every renderer.
    """

    def __init__(self, basedir=None, load=None, parser=None, engine=None, runtime=None, encoding="utf-8"):
        self.basedir = basedir
        self.load = load if callable(load) else FileLoader(basedir, encoding=encoding)
        self.parser = parser or TemplateParser()
        self.engine = engine or ExpressionEngine()
        self.runtime = runtime

    async def compile(self, file):
        """Compile the template at file into a renderer."""
        return await Job(self, file).compile()

    def compile_sync(self, file):
        """Blocking variant of compile() for callers without an event loop."""
        return asyncio.run(self.compile(file))


async def compile_template(file, **options):
    """Compile a template with a one-off Compiler built from options."""
    return await Compiler(**options).compile(file)


# ==========================================
# 2. THE JOB
# ==========================================
class Job:
    """
    One compile request.

    Owns the parsed-node cache and the expression table, both mutated in place
    while compiling, so a Job serves exactly one compile() call.
    """

    def __init__(self, compiler, file):
        self.compiler = compiler
        self.file = file
        self.expressions = []
        self.cached_nodes = {}
        self._files = []
        self._started = False
        self._handlers = {
            NodeKind.TEXT: self._process_plain,
            NodeKind.DEF: self._process_def,
            NodeKind.BLOCK: self._process_block,
            NodeKind.INCLUDE: self._process_include,
            NodeKind.EXPR: self._process_expr,
            NodeKind.VAR: self._process_var,
        }

    async def compile(self):
        if self._started:
            raise RuntimeError("A Job compiles once; create a new Job per request")
        self._started = True
        debug_log(f"Compiling template: {self.file}")
        ctx = Context(current_file=local_path('', self.file))
        code = await self._process_file(self.file, ctx)
        debug_log(f"Compiled {self.file}: {len(self.cached_nodes)} file(s), {len(self.expressions)} expression(s)")
        return assemble(code, self.expressions, self.compiler.runtime)

    async def _load(self, file):
        try:
            content = self.compiler.load(file)
            if inspect.isawaitable(content):
                content = await content
        except TemplateError:
            raise
        except Exception as e:
            raise LoadError(f"Cannot load template: {e}", file=file) from e
        if not isinstance(content, str):
            raise LoadError(f"Loader returned {type(content).__name__}, expected text", file=file)
        return content

    def _parse(self, file, content):
        try:
            return coerce_nodes(self.compiler.parser.parse(content))
        except TemplateError as e:
            if e.file is None:
                e.file = file
            raise
        except Exception as e:
            raise ParseError(str(e), file=file) from e

    async def _process_file(self, file, ctx):
        parent_file = ctx.parent.current_file if ctx.parent else ''
        file = local_path(parent_file, file)
        if file in self._files:
            raise CircularIncludeError(self._files[self._files.index(file):] + [file])

        # Check cache for parsed nodes
        nodes = self.cached_nodes.get(file)
        if nodes is None:
            debug_log(f"Loading {file}")
            nodes = self._parse(file, await self._load(file))
            self.cached_nodes[file] = nodes
        else:
            debug_log(f"Reusing parsed nodes for {file}")

        self._files.append(file)
        try:
            return await self._process_nodes(nodes, ctx)
        finally:
            self._files.pop()

    async def _process_nodes(self, nodes, ctx):
        # Strictly sequential: definitions must be registered before later blocks run
        fragments = []
        for node in nodes:
            if isinstance(node, str):
                node = PlainText(text=node)
            handler = self._handlers[NodeKind(node.kind)]
            fragments.append(await handler(node, ctx))
        return sequence(*fragments)

    async def _process_plain(self, node, ctx):
        return (EmitLiteral(text=node.text),)

    async def _process_def(self, node, ctx):
        code = await self._process_nodes(node.body, ctx)
        ctx.definitions[node.name] = CompiledDefinition(mode=node.mode, code=code)
        return ()

    async def _process_block(self, node, ctx):
        definition = ctx.find_definition(node.name)
        code = await self._process_nodes(node.body, ctx)
        if definition is None:
            return code
        if definition.mode == Mode.APPEND:
            return sequence(code, definition.code)
        # prepend, like override, drops the block's own content
        return definition.code

    async def _process_include(self, node, ctx):
        inner = ctx.nested(local_path(ctx.current_file, node.file))
        debug_log(f"Including {inner.current_file} from {ctx.current_file}")
        overrides = await self._process_nodes(node.overrides, inner)
        body = await self._process_file(node.file, inner)
        return (Scoped(ops=sequence(overrides, body)),)

    async def _process_expr(self, node, ctx):
        index = self._compile_expression(node.source)
        if not node.buffered:
            return (EvalExpr(index=index),)
        return (EmitExpr(index=index, escape=node.escape),)

    async def _process_var(self, node, ctx):
        index = self._compile_expression(node.source)
        return (AssignBinding(name=node.name, index=index),)

    def _compile_expression(self, source):
        try:
            evaluator = self.compiler.engine.compile(source)
        except TemplateError as e:
            if e.file is None and self._files:
                e.file = self._files[-1]
            raise
        self.expressions.append(evaluator)
        return len(self.expressions) - 1
