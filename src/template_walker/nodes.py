"""
Template Syntax Tree Nodes.

This module defines the structural node schema produced by a markup parser for
component templates. Every node carries a ``type`` tag (see ``NodeKind``).
The traversal engine understands a small set of generic fields and treats the
rest as opaque data:

- ``children``: ordered list of nested nodes.
- ``else_``: the single optional alternative branch of a block.
- ``attributes``: ordered list of attribute and directive nodes.
- ``expression``: an embedded Python expression (a LibCST node). Other
  expression-valued fields (an each block's ``key``) are declared with
  ``expression_field()``.
- ``identifiers``: ordered list of LibCST expressions (``{@debug a, b}``).
- any other node or list of nodes, such as an attribute's ``value`` or an
  await block's ``then`` branch.

The host script region is held separately as a LibCST ``Module``.
"""

from dataclasses import Field, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Type, Union

import libcst as cst


class NodeKind(str, Enum):
  """Structural node tags."""

  FRAGMENT = "Fragment"
  ELEMENT = "Element"
  INLINE_COMPONENT = "InlineComponent"
  SLOT_TEMPLATE = "SlotTemplate"
  TITLE = "Title"
  SLOT = "Slot"
  HEAD = "Head"
  OPTIONS = "Options"
  WINDOW = "Window"
  DOCUMENT = "Document"
  BODY = "Body"
  TEXT = "Text"
  COMMENT = "Comment"
  MUSTACHE_TAG = "MustacheTag"
  RAW_MUSTACHE_TAG = "RawMustacheTag"
  CONST_TAG = "ConstTag"
  DEBUG_TAG = "DebugTag"
  IF_BLOCK = "IfBlock"
  ELSE_BLOCK = "ElseBlock"
  EACH_BLOCK = "EachBlock"
  KEY_BLOCK = "KeyBlock"
  AWAIT_BLOCK = "AwaitBlock"
  PENDING_BLOCK = "PendingBlock"
  THEN_BLOCK = "ThenBlock"
  CATCH_BLOCK = "CatchBlock"
  ATTRIBUTE = "Attribute"
  SPREAD = "Spread"
  SPREAD_ATTRIBUTE = "SpreadAttribute"
  ACTION = "Action"
  ANIMATION = "Animation"
  BINDING = "Binding"
  CLASS = "Class"
  EVENT_HANDLER = "EventHandler"
  LET = "Let"
  REF = "Ref"
  STYLE_DIRECTIVE = "StyleDirective"
  TRANSITION = "Transition"


ELEMENT_KINDS = (
  NodeKind.ELEMENT,
  NodeKind.INLINE_COMPONENT,
  NodeKind.SLOT_TEMPLATE,
  NodeKind.TITLE,
  NodeKind.SLOT,
  NodeKind.HEAD,
  NodeKind.OPTIONS,
  NodeKind.WINDOW,
  NodeKind.DOCUMENT,
  NodeKind.BODY,
)

DIRECTIVE_KINDS = (
  NodeKind.ACTION,
  NodeKind.ANIMATION,
  NodeKind.BINDING,
  NodeKind.CLASS,
  NodeKind.EVENT_HANDLER,
  NodeKind.LET,
  NodeKind.REF,
  NodeKind.STYLE_DIRECTIVE,
  NodeKind.TRANSITION,
)


# Field metadata key marking values the loader parses as Python expressions.
EXPRESSION_METADATA = "expression"


def expression_field() -> Any:
  """Declares an optional field holding an embedded LibCST expression."""
  return field(default=None, metadata={EXPRESSION_METADATA: True})


def is_expression_field(f: Field) -> bool:
  return bool(f.metadata.get(EXPRESSION_METADATA))


@dataclass(eq=False)
class TemplateNode:
  """
  Base class for all structural nodes.

  Attributes:
      type (str): The node tag.
      start (int): Source offset where the node begins (-1 when synthetic).
      end (int): Source offset where the node ends (-1 when synthetic).
  """

  type: str
  start: int = -1
  end: int = -1


@dataclass(eq=False)
class Fragment(TemplateNode):
  """Root container of the markup region."""

  type: str = NodeKind.FRAGMENT.value
  children: List[TemplateNode] = field(default_factory=list)


@dataclass(eq=False)
class Element(TemplateNode):
  """
  An HTML element, a component, or a special element (``<svelte:head>`` style).

  Attributes:
      name (str): Tag name as written in the source.
      attributes (List[TemplateNode]): Attributes, spreads and directives in source order.
      children (List[TemplateNode]): Nested content.
      expression (Optional[cst.BaseExpression]): Dynamic component target, if any.
  """

  type: str = NodeKind.ELEMENT.value
  name: str = ""
  attributes: List[TemplateNode] = field(default_factory=list)
  children: List[TemplateNode] = field(default_factory=list)
  expression: Optional[cst.BaseExpression] = expression_field()


@dataclass(eq=False)
class Text(TemplateNode):
  type: str = NodeKind.TEXT.value
  data: str = ""
  raw: str = ""


@dataclass(eq=False)
class Comment(TemplateNode):
  type: str = NodeKind.COMMENT.value
  data: str = ""
  ignores: List[str] = field(default_factory=list)


@dataclass(eq=False)
class MustacheTag(TemplateNode):
  """An interpolation such as ``{a + b}`` (or ``{@html ...}`` when raw)."""

  type: str = NodeKind.MUSTACHE_TAG.value
  expression: Optional[cst.BaseExpression] = expression_field()


@dataclass(eq=False)
class ConstTag(TemplateNode):
  """A ``{@const ...}`` binding; the expression is usually a ``NamedExpr``."""

  type: str = NodeKind.CONST_TAG.value
  expression: Optional[cst.BaseExpression] = expression_field()


@dataclass(eq=False)
class DebugTag(TemplateNode):
  """A ``{@debug a, b}`` tag listing the names to inspect."""

  type: str = NodeKind.DEBUG_TAG.value
  identifiers: List[cst.BaseExpression] = field(default_factory=list)


@dataclass(eq=False)
class ElseBlock(TemplateNode):
  type: str = NodeKind.ELSE_BLOCK.value
  children: List[TemplateNode] = field(default_factory=list)


@dataclass(eq=False)
class IfBlock(TemplateNode):
  """
  A ``{#if}`` block.

  Attributes:
      expression (Optional[cst.BaseExpression]): The condition.
      children (List[TemplateNode]): Content of the true branch.
      else_ (Optional[ElseBlock]): The alternative branch, if any.
  """

  type: str = NodeKind.IF_BLOCK.value
  expression: Optional[cst.BaseExpression] = expression_field()
  children: List[TemplateNode] = field(default_factory=list)
  else_: Optional[TemplateNode] = None


@dataclass(eq=False)
class EachBlock(TemplateNode):
  """
  A ``{#each items as item, i (key)}`` loop block.

  ``context`` and ``index`` are the loop binding names, kept as plain text.
  """

  type: str = NodeKind.EACH_BLOCK.value
  expression: Optional[cst.BaseExpression] = expression_field()
  context: Optional[str] = None
  index: Optional[str] = None
  key: Optional[cst.BaseExpression] = expression_field()
  children: List[TemplateNode] = field(default_factory=list)
  else_: Optional[TemplateNode] = None


@dataclass(eq=False)
class KeyBlock(TemplateNode):
  type: str = NodeKind.KEY_BLOCK.value
  expression: Optional[cst.BaseExpression] = expression_field()
  children: List[TemplateNode] = field(default_factory=list)


@dataclass(eq=False)
class AwaitBlock(TemplateNode):
  """
  A ``{#await promise}`` block.

  Attributes:
      expression (Optional[cst.BaseExpression]): The awaited value.
      value (Optional[cst.BaseExpression]): Binding target of ``{:then value}``.
      error (Optional[cst.BaseExpression]): Binding target of ``{:catch error}``.
      pending (Optional[TemplateNode]): Content shown while waiting.
      then (Optional[TemplateNode]): Content shown on success.
      catch (Optional[TemplateNode]): Content shown on failure.
  """

  type: str = NodeKind.AWAIT_BLOCK.value
  expression: Optional[cst.BaseExpression] = expression_field()
  value: Optional[cst.BaseExpression] = expression_field()
  error: Optional[cst.BaseExpression] = expression_field()
  pending: Optional[TemplateNode] = None
  then: Optional[TemplateNode] = None
  catch: Optional[TemplateNode] = None


@dataclass(eq=False)
class AwaitBranch(TemplateNode):
  """The ``PendingBlock``, ``ThenBlock`` or ``CatchBlock`` of an await block."""

  type: str = NodeKind.THEN_BLOCK.value
  children: List[TemplateNode] = field(default_factory=list)


@dataclass(eq=False)
class GenericNode(TemplateNode):
  """
  A node whose tag is outside ``NodeKind``.

  Only the generic structural fields are kept, so default descent still
  reaches whatever the parser nested inside it.
  """

  children: Optional[List[TemplateNode]] = None
  else_: Optional[TemplateNode] = None
  attributes: Optional[List[TemplateNode]] = None
  expression: Optional[cst.BaseExpression] = expression_field()
  identifiers: Optional[List[cst.BaseExpression]] = None


@dataclass(eq=False)
class Attribute(TemplateNode):
  """
  A plain attribute.

  Attributes:
      name (str): Attribute name.
      value (Union[bool, List[TemplateNode]]): ``True`` for a bare boolean
          attribute, otherwise the ``Text`` / ``MustacheTag`` parts.
  """

  type: str = NodeKind.ATTRIBUTE.value
  name: str = ""
  value: Union[bool, List[TemplateNode]] = True


@dataclass(eq=False)
class SpreadAttribute(TemplateNode):
  type: str = NodeKind.SPREAD.value
  expression: Optional[cst.BaseExpression] = expression_field()


@dataclass(eq=False)
class Directive(TemplateNode):
  """
  A directive such as ``on:click``, ``bind:value``, ``use:action`` or ``transition:fade``.

  Attributes:
      name (str): The directive argument (``click`` in ``on:click``).
      expression (Optional[cst.BaseExpression]): The directive value, if any.
      modifiers (List[str]): ``|once``-style modifiers.
      value (List[TemplateNode]): Parts of a ``style:`` directive value.
      intro (bool): Transition runs on enter.
      outro (bool): Transition runs on leave.
  """

  type: str = NodeKind.ACTION.value
  name: str = ""
  expression: Optional[cst.BaseExpression] = expression_field()
  modifiers: List[str] = field(default_factory=list)
  value: List[TemplateNode] = field(default_factory=list)
  intro: bool = False
  outro: bool = False


@dataclass(eq=False)
class Script:
  """
  The host script region.

  Attributes:
      context (str): ``"default"`` for the instance script.
      content (cst.Module): The parsed script body.
  """

  content: cst.Module
  context: str = "default"


@dataclass(eq=False)
class TemplateAst:
  """
  Parser output for a whole component file.

  Attributes:
      html (Optional[Fragment]): The markup region.
      instance (Optional[Script]): The host script region.
  """

  html: Optional[TemplateNode] = None
  instance: Optional[Script] = None


NODE_CLASSES: Dict[str, Type[TemplateNode]] = {
  NodeKind.FRAGMENT.value: Fragment,
  NodeKind.TEXT.value: Text,
  NodeKind.COMMENT.value: Comment,
  NodeKind.MUSTACHE_TAG.value: MustacheTag,
  NodeKind.RAW_MUSTACHE_TAG.value: MustacheTag,
  NodeKind.CONST_TAG.value: ConstTag,
  NodeKind.DEBUG_TAG.value: DebugTag,
  NodeKind.IF_BLOCK.value: IfBlock,
  NodeKind.ELSE_BLOCK.value: ElseBlock,
  NodeKind.EACH_BLOCK.value: EachBlock,
  NodeKind.KEY_BLOCK.value: KeyBlock,
  NodeKind.AWAIT_BLOCK.value: AwaitBlock,
  NodeKind.PENDING_BLOCK.value: AwaitBranch,
  NodeKind.THEN_BLOCK.value: AwaitBranch,
  NodeKind.CATCH_BLOCK.value: AwaitBranch,
  NodeKind.ATTRIBUTE.value: Attribute,
  NodeKind.SPREAD.value: SpreadAttribute,
  NodeKind.SPREAD_ATTRIBUTE.value: SpreadAttribute,
  **{kind.value: Element for kind in ELEMENT_KINDS},
  **{kind.value: Directive for kind in DIRECTIVE_KINDS},
}
