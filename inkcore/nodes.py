"""
Inkwell template nodes.

Parsed templates are ordered sequences of these nodes. They are produced once
by a parser and never mutated afterwards.
"""
from enum import Enum
from typing import Annotated, Any, Literal, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from inkcore.errors import ParseError


class NodeKind(str, Enum):
    TEXT = "text"
    DEF = "def"
    BLOCK = "block"
    INCLUDE = "include"
    EXPR = "expr"
    VAR = "var"


class Mode(str, Enum):
    """Merge policy applied when a definition targets a block."""
    OVERRIDE = "override"
    APPEND = "append"
    PREPEND = "prepend"


def _text_to_node(item):
    # Parsers may hand out plain text as bare strings
    if isinstance(item, str):
        return {"kind": NodeKind.TEXT.value, "text": item}
    return item


class BaseNode(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class PlainText(BaseNode):
    kind: Literal["text"] = "text"
    text: str


class Definition(BaseNode):
    kind: Literal["def"] = "def"
    name: str
    mode: Mode = Mode.OVERRIDE
    body: Tuple["Node", ...] = Field(default=(), alias="nodes")

    @field_validator("mode", mode="before")
    @classmethod
    def _default_mode(cls, value):
        return Mode.OVERRIDE if value is None else value

    @field_validator("body", mode="before")
    @classmethod
    def _wrap_text(cls, value):
        return [_text_to_node(item) for item in value or ()]


class Block(BaseNode):
    kind: Literal["block"] = "block"
    name: str
    body: Tuple["Node", ...] = Field(default=(), alias="nodes")

    @field_validator("body", mode="before")
    @classmethod
    def _wrap_text(cls, value):
        return [_text_to_node(item) for item in value or ()]


class Include(BaseNode):
    kind: Literal["include"] = "include"
    file: str
    overrides: Tuple[Definition, ...] = Field(default=(), alias="nodes")


class Expression(BaseNode):
    kind: Literal["expr"] = "expr"
    source: str = Field(alias="expr")
    buffered: bool = Field(default=True, alias="buffer")
    escape: bool = True


class VarBinding(BaseNode):
    kind: Literal["var"] = "var"
    name: str
    source: str = Field(alias="expr")


Node = Annotated[
    Union[PlainText, Definition, Block, Include, Expression, VarBinding],
    Field(discriminator="kind"),
]

Definition.model_rebuild()
Block.model_rebuild()
Include.model_rebuild()

_node_list = TypeAdapter(Tuple[Node, ...])


def coerce_nodes(items: Any) -> Tuple[BaseNode, ...]:
    """
    Normalize a parser result into a tuple of node models.

    Accepts node models, bare strings (plain text) and the dict shapes
    ``{"kind": "def", "name": ..., "mode": ..., "nodes": [...]}`` etc.

    Raises:
        ParseError: If an item is not a valid node.
    """
    try:
        return _node_list.validate_python([_text_to_node(item) for item in items])
    except (ValidationError, TypeError) as e:
        raise ParseError(
            f"Invalid template node: {e}",
            suggestion="Parsers must return strings or node mappings with a 'kind' field",
        )
