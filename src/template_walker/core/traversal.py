"""
Structural Traversal Engine.

Drives a depth-first, pre-order walk over the markup tree:

1.  **Dispatch**: each node's tag is looked up in the ``DispatchTable``.
2.  **Contract**: a handler must either call ``context.traverse(path)`` or return
    ``False``. Both or neither raises ``ContractViolation``.
3.  **Default descent**: with no handler, or when a handler asks for it, the
    node's recognised fields are descended in a fixed order:
    ``children`` -> ``else_`` -> ``attributes`` -> ``expression`` ->
    ``identifiers`` -> every other field holding an expression (``key``), a
    node (an await block's ``then``) or a list of nodes (``value``), in
    declaration order.
4.  **Deferred pruning**: nodes pruned from a collection are removed only after
    every element of that collection has been visited, and their own descent
    still runs.

Recursion depth follows the nesting depth of the tree with no guard of its own;
extremely deep input surfaces as ``RecursionError``.
"""

import dataclasses
from typing import Any, Dict, List, Optional, Tuple

import libcst as cst
from rich.markup import escape

from template_walker.config import WalkerConfig
from template_walker.core.bridge import visit_expression
from template_walker.core.dispatch import DispatchTable
from template_walker.core.path import CollectionSlot, FieldSlot, TemplatePath
from template_walker.core.tracer import TraceLogger
from template_walker.exceptions import ContractViolation
from template_walker.nodes import NodeKind, TemplateNode
from template_walker.utils.console import log_info, log_warning

SUPPRESS = False

# Fields descended explicitly, in this order, before any remaining node lists.
CHILDREN_FIELD = "children"
ELSE_FIELD = "else_"
ATTRIBUTES_FIELD = "attributes"
EXPRESSION_FIELD = "expression"
IDENTIFIERS_FIELD = "identifiers"

_EXPLICIT_FIELDS = frozenset({CHILDREN_FIELD, ELSE_FIELD, ATTRIBUTES_FIELD, EXPRESSION_FIELD, IDENTIFIERS_FIELD})
_KNOWN_KINDS = frozenset(kind.value for kind in NodeKind)


class TraversalContext:
  """
  Invocation context handed to a structural handler.

  Records whether the handler asked for default descent.
  """

  def __init__(self, walker: "TemplateWalker"):
    self._walker = walker
    self.traversed = False

  def traverse(self, path: TemplatePath) -> None:
    """
    Performs default structural descent below ``path``.

    Args:
        path: Usually the handler's own path.
    """
    self.traversed = True
    self._walker.traverse_all_children(path)


class TemplateWalker:
  """
  Walks one markup region on behalf of one visitor.
  """

  def __init__(self, visitor: Any, config: Optional[WalkerConfig] = None, tracer: Optional[TraceLogger] = None):
    """
    Args:
        visitor: The caller's visitor (structural and expression handlers).
        config: Runtime options; defaults are used when omitted.
        tracer: Optional trace recorder.
    """
    self.visitor = visitor
    self.config = config or WalkerConfig()
    self.tracer = tracer
    self.dispatch = DispatchTable.for_visitor(visitor, self.config.handler_prefix)

  def walk(self, root: TemplateNode) -> None:
    """Visits ``root`` through a synthetic root path."""
    self.visit_node(TemplatePath.root(root, tracer=self.tracer))

  def visit_node(self, path: TemplatePath) -> None:
    """
    Visits a single node: runs its handler (checking the contract) or
    falls back to default descent.

    Args:
        path: The path positioned on the node.

    Raises:
        ContractViolation: If the handler broke the continue/suppress contract.
    """
    node = path.node
    kind = getattr(node, "type", type(node).__name__)
    if isinstance(kind, NodeKind):
      kind = kind.value
    handler = self.dispatch.resolve(node)
    self._report_visit(path, kind, handler is not None)

    try:
      if handler is None:
        self.traverse_all_children(path)
        return

      context = TraversalContext(self)
      suppressed = handler(path, context) is SUPPRESS
      if context.traversed == suppressed:
        raise ContractViolation(kind, context.traversed, suppressed)
    finally:
      path.release()

  def traverse_all_children(self, path: TemplatePath) -> None:
    """
    Default structural descent over every recognised field of ``path.node``.

    Args:
        path: The path whose node is descended.
    """
    node = path.node

    children = getattr(node, CHILDREN_FIELD, None)
    if isinstance(children, list):
      self.traverse_collection(children, path)

    alternative = getattr(node, ELSE_FIELD, None)
    if isinstance(alternative, TemplateNode):
      self.visit_node(TemplatePath(alternative, parent=path, slot=FieldSlot(node, ELSE_FIELD), tracer=self.tracer))

    attributes = getattr(node, ATTRIBUTES_FIELD, None)
    if isinstance(attributes, list):
      self.traverse_collection(attributes, path)

    expression = getattr(node, EXPRESSION_FIELD, None)
    if isinstance(expression, cst.CSTNode):
      self._traverse_expression(path, EXPRESSION_FIELD)

    identifiers = getattr(node, IDENTIFIERS_FIELD, None)
    if isinstance(identifiers, list):
      self._traverse_identifiers(identifiers, path)

    for name, value in self._remaining_fields(node):
      if isinstance(value, cst.CSTNode):
        self._traverse_expression(path, name)
      elif isinstance(value, TemplateNode):
        self.visit_node(TemplatePath(value, parent=path, slot=FieldSlot(node, name), tracer=self.tracer))
      else:
        self.traverse_collection(value, path)

  def traverse_collection(self, collection: List[TemplateNode], parent: TemplatePath) -> None:
    """
    Visits each element of an ordered collection, then drops pruned elements.

    The element count is taken up front; elements appended during the walk
    are kept but not visited. Survivors keep their relative order and the
    list is rewritten in place.

    Args:
        collection: The list field to traverse.
        parent: The path of the node owning ``collection``.
    """
    removals: Dict[int, TemplateNode] = {}

    for i in range(len(collection)):
      slot = CollectionSlot(collection, i, removals)
      self.visit_node(TemplatePath(collection[i], parent=parent, slot=slot, tracer=self.tracer))

    if removals:
      collection[:] = [child for child in collection if id(child) not in removals]

  def _traverse_expression(self, path: TemplatePath, name: str) -> None:
    node = path.node
    result = visit_expression(getattr(node, name), self.visitor, boundary=path, tracer=self.tracer)
    setattr(node, name, _single_expression(result))

  def _traverse_identifiers(self, identifiers: List[Any], path: TemplatePath) -> None:
    survivors = []
    for identifier in list(identifiers):
      if not isinstance(identifier, cst.CSTNode):
        survivors.append(identifier)
        continue
      result = _single_expression(visit_expression(identifier, self.visitor, boundary=path, tracer=self.tracer))
      if result is not None:
        survivors.append(result)
    identifiers[:] = survivors

  def _remaining_fields(self, node: TemplateNode) -> List[Tuple[str, Any]]:
    """Other fields holding an expression, a node or a non-empty list of nodes, in declaration order."""
    if not dataclasses.is_dataclass(node):
      return []
    found = []
    for f in dataclasses.fields(node):
      if f.name in _EXPLICIT_FIELDS:
        continue
      value = getattr(node, f.name, None)
      if isinstance(value, (cst.CSTNode, TemplateNode)):
        found.append((f.name, value))
      elif isinstance(value, list) and value and all(isinstance(item, TemplateNode) for item in value):
        found.append((f.name, value))
    return found

  def _report_visit(self, path: TemplatePath, kind: Any, handled: bool) -> None:
    if self.config.log_visits:
      log_info(f"Visiting [kind]{escape(str(kind))}[/kind] at depth {path.depth}")
    if self.config.warn_unknown_kinds and kind not in _KNOWN_KINDS:
      log_warning(f"Unknown node kind '{escape(str(kind))}'")
      if self.tracer:
        self.tracer.log_warning(f"Unknown node kind '{kind}'")
    if self.tracer:
      self.tracer.log_visit(str(kind), path.depth, handled)


def _single_expression(result: Any) -> Optional[cst.CSTNode]:
  """Maps a LibCST traversal result back onto a single-expression slot."""
  if isinstance(result, cst.RemovalSentinel):
    return None
  if isinstance(result, cst.FlattenSentinel):
    raise TypeError("An embedded expression cannot be flattened into several nodes")
  return result
