"""
Expression Rendering for Trace Output.

Embedded expressions are detached LibCST nodes, so they are rendered against an
empty module to get their source text. Used to record what a visitor did to an
expression without printing the whole template.
"""

from typing import Any, Optional, Tuple

import libcst as cst

_EMPTY_MODULE = cst.parse_module("")


def render_expression(node: Any) -> str:
  """
  Args:
      node: A LibCST node (a module renders as its own code).

  Returns:
      str: Its source text, or a placeholder naming the type for anything else.
  """
  if isinstance(node, cst.Module):
    return node.code
  if isinstance(node, cst.CSTNode):
    return _EMPTY_MODULE.code_for_node(node)
  return f"<Unrepresentable Node: {type(node).__name__}>"


def expression_change(before: Any, after: Any) -> Optional[Tuple[str, str]]:
  """
  Compares the source of an expression before and after a visit.

  Rebuilt but textually identical trees (LibCST copies nodes on every
  ``with_changes``) count as unchanged.

  Args:
      before: The expression handed to LibCST.
      after: What the traversal returned.

  Returns:
      Optional[Tuple[str, str]]: ``(before_source, after_source)``, or None if
      the source text is the same.
  """
  if after is before:
    return None
  old, new = render_expression(before), render_expression(after)
  if old.strip() == new.strip():
    return None
  return old, new
