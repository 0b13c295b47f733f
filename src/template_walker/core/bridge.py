"""
Context Bridge between structural nodes and embedded expressions.

Embedded expressions are LibCST trees and are walked by LibCST itself, using the
caller's visitor unchanged. LibCST does not hand parents to visitor callbacks,
so the bridge keeps the chain of expression nodes being visited in an
``ExpressionScope``. Inside that chain each node's parent is the node above it;
the topmost node has no expression parent, and for it alone the scope answers
with the enclosing structural ``TemplatePath`` (the *boundary*).

For the host script region the boundary is ``None``: the module is a root
expression tree and nothing structural encloses it.
"""

from typing import Any, List, Optional, Union

import libcst as cst

from template_walker.core.path import TemplatePath
from template_walker.core.tracer import TraceLogger
from template_walker.utils.node_diff import expression_change

ParentRef = Union[cst.CSTNode, TemplatePath, None]


class ExpressionScope:
  """
  Parent linkage for one bridged expression traversal.

  Attributes:
      boundary (Optional[TemplatePath]): Nearest enclosing structural path.
  """

  def __init__(self, boundary: Optional[TemplatePath] = None):
    self.boundary = boundary
    self._chain: List[cst.CSTNode] = []

  def enter(self, node: cst.CSTNode) -> None:
    self._chain.append(node)

  def leave(self, node: cst.CSTNode) -> None:
    if self._chain and self._chain[-1] is node:
      self._chain.pop()

  @property
  def current(self) -> Optional[cst.CSTNode]:
    """The expression node currently being visited."""
    return self._chain[-1] if self._chain else None

  @property
  def parent(self) -> ParentRef:
    """Parent of the current node (see ``parent_of``)."""
    if not self._chain:
      return None
    return self.parent_of(self._chain[-1])

  parent_path = parent

  def parent_of(self, node: cst.CSTNode) -> ParentRef:
    """
    Resolves the parent of a node on the active chain.

    Args:
        node: An expression node currently being visited (matched by identity).

    Returns:
        The enclosing expression node, the boundary path for the topmost node,
        or None if ``node`` is not on the active chain.
    """
    for i in range(len(self._chain) - 1, -1, -1):
      if self._chain[i] is node:
        return self._chain[i - 1] if i > 0 else self.boundary
    return None

  def __len__(self) -> int:
    return len(self._chain)


class ExpressionBridge(cst.CSTTransformer):
  """
  Transformer that forwards every LibCST callback to the caller's visitor
  while maintaining an ``ExpressionScope``.
  """

  def __init__(self, visitor: Any, scope: ExpressionScope):
    """
    Args:
        visitor: The caller's visitor. LibCST transformers and visitors receive
            every callback; any other object is walked without callbacks.
        scope: The scope to maintain.
    """
    super().__init__()
    self.visitor = visitor
    self.scope = scope

  def on_visit(self, node: cst.CSTNode) -> bool:
    self.scope.enter(node)
    if isinstance(self.visitor, (cst.CSTTransformer, cst.CSTVisitor)):
      return self.visitor.on_visit(node)
    return True

  def on_leave(self, original_node: cst.CSTNode, updated_node: cst.CSTNode) -> Any:
    try:
      if isinstance(self.visitor, cst.CSTTransformer):
        return self.visitor.on_leave(original_node, updated_node)
      if isinstance(self.visitor, cst.CSTVisitor):
        self.visitor.on_leave(original_node)
      return updated_node
    finally:
      self.scope.leave(original_node)

  def on_visit_attribute(self, node: cst.CSTNode, attribute: str) -> None:
    if isinstance(self.visitor, (cst.CSTTransformer, cst.CSTVisitor)):
      self.visitor.on_visit_attribute(node, attribute)

  def on_leave_attribute(self, original_node: cst.CSTNode, attribute: str) -> None:
    if isinstance(self.visitor, (cst.CSTTransformer, cst.CSTVisitor)):
      self.visitor.on_leave_attribute(original_node, attribute)


def visit_expression(
  expression: cst.CSTNode,
  visitor: Any,
  boundary: Optional[TemplatePath] = None,
  tracer: Optional[TraceLogger] = None,
) -> Any:
  """
  Runs one bridged LibCST traversal over an expression tree.

  Args:
      expression: The expression (or script module) to walk.
      visitor: The caller's visitor.
      boundary: The structural path enclosing the expression, if any.
      tracer: Optional trace recorder; rewrites are logged as mutations.

  Returns:
      The transformed tree, or a LibCST sentinel if the visitor removed or
      flattened the topmost node.
  """
  scope = ExpressionScope(boundary)
  bridge = ExpressionBridge(visitor, scope)

  push = getattr(visitor, "push_expression_scope", None)
  if push:
    push(scope)
  try:
    result = expression.visit(bridge)
  finally:
    if push:
      visitor.pop_expression_scope()

  if tracer and isinstance(result, cst.CSTNode):
    change = expression_change(expression, result)
    if change:
      owner = getattr(boundary.node, "type", "script") if boundary else "script"
      tracer.log_mutation(owner, *change)
  return result
