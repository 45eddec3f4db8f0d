# Inkwell - Core Compiler Components
"""
Core modules for the Inkwell template compiler:
- errors: Error types and formatting utilities
- grammar: Lark grammars for templates and expressions
- nodes: Parsed template node models
- parser: Template text to nodes
- expressions: Expression engine
- paths: Template path resolution
- loader: File and in-memory template loaders
- context: Compile-time definition scopes
- program: Program IR, interpreter and renderer assembly
- runtime: Output, escaping and binding environments used while rendering
- introspection: Structure reports for parsed templates
- config: Configuration loading
"""

from .errors import TemplateError, LoadError, ParseError, ExpressionError, CircularIncludeError
from .nodes import Node, NodeKind, Mode, coerce_nodes
from .parser import TemplateParser
from .expressions import ExpressionEngine
from .loader import FileLoader, DictLoader
from .paths import local_path
from .program import Renderer, assemble
from .introspection import TemplateInspector

__all__ = [
    'TemplateError',
    'LoadError',
    'ParseError',
    'ExpressionError',
    'CircularIncludeError',
    'Node',
    'NodeKind',
    'Mode',
    'coerce_nodes',
    'TemplateParser',
    'ExpressionEngine',
    'FileLoader',
    'DictLoader',
    'local_path',
    'Renderer',
    'assemble',
    'TemplateInspector',
]
