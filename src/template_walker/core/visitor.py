"""
Visitor Base Class.

``TemplateVisitor`` is a LibCST transformer, so expression handlers are written
exactly as for LibCST (``visit_Name``, ``leave_Call``...). Structural handlers
sit next to them, named ``visit_Template<Kind>``::

    class DropElse(TemplateVisitor):
      def visit_TemplateElseBlock(self, path, context):
        path.prune()
        return False

      def visit_TemplateAttribute(self, path, context):
        context.traverse(path)

      def visit_Name(self, node):
        parent = self.get_parent(node)  # TemplatePath for `{name}`
        ...

A structural handler must either call ``context.traverse(path)`` or return
``False``, never both.
"""

from typing import List, Optional

import libcst as cst

from template_walker.core.bridge import ExpressionScope, ParentRef


class TemplateVisitor(cst.CSTTransformer):
  """
  Base class for visitors over a template tree and its embedded expressions.
  """

  @property
  def _expression_scopes(self) -> List[ExpressionScope]:
    # Lazily created so subclasses need not call super().__init__().
    return self.__dict__.setdefault("_scope_stack", [])

  def push_expression_scope(self, scope: ExpressionScope) -> None:
    self._expression_scopes.append(scope)

  def pop_expression_scope(self) -> Optional[ExpressionScope]:
    if self._expression_scopes:
      return self._expression_scopes.pop()
    return None

  @property
  def expression_scope(self) -> Optional[ExpressionScope]:
    """The scope of the expression traversal in progress, if any."""
    scopes = self._expression_scopes
    return scopes[-1] if scopes else None

  def get_parent(self, node: cst.CSTNode) -> ParentRef:
    """
    Returns the parent of an expression node being visited.

    For the outermost node of an expression embedded in markup this is the
    enclosing structural ``TemplatePath``; for nested nodes it is the LibCST
    parent node. Outside an expression traversal, or for a node that is not
    on the active chain (such as ``updated_node`` in a ``leave_`` callback),
    returns None.

    Args:
        node: The expression node (``original_node`` in ``leave_`` callbacks).

    Returns:
        The parent LibCST node, the boundary TemplatePath, or None.
    """
    scope = self.expression_scope
    if scope is None:
      return None
    return scope.parent_of(node)

  get_parent_path = get_parent
