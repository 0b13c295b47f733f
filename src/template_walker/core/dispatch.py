"""
Handler Dispatch.

Maps a structural node's tag to the visitor member that handles it. The
visitor is scanned once per visit for every tag in ``NodeKind``, so resolving a
node during traversal is a dictionary lookup. Tags with no member, and tags
outside the catalog, resolve to ``None`` which means "default descent".
"""

from typing import Any, Callable, Dict, Optional

from template_walker.nodes import NodeKind, TemplateNode

DEFAULT_HANDLER_PREFIX = "visit_Template"

Handler = Callable[..., Optional[bool]]


def handler_name(kind: str, prefix: str = DEFAULT_HANDLER_PREFIX) -> str:
  """
  Builds the member name for a tag.

  Args:
      kind: The node tag (e.g. 'IfBlock').
      prefix: The configured handler prefix.

  Returns:
      str: e.g. 'visit_TemplateIfBlock'.
  """
  return f"{prefix}{kind}"


class DispatchTable:
  """
  Static tag -> handler table for one visitor.
  """

  def __init__(self, handlers: Dict[str, Handler]):
    self._handlers = handlers

  @classmethod
  def for_visitor(cls, visitor: Any, prefix: str = DEFAULT_HANDLER_PREFIX) -> "DispatchTable":
    """
    Scans a visitor for structural handlers.

    Args:
        visitor: Object whose members follow the ``<prefix><Kind>`` convention.
        prefix: Handler name prefix.

    Returns:
        DispatchTable: The resolved table.
    """
    handlers: Dict[str, Handler] = {}
    for kind in NodeKind:
      method = getattr(visitor, handler_name(kind.value, prefix), None)
      if callable(method):
        handlers[kind.value] = method
    return cls(handlers)

  def resolve(self, node: TemplateNode) -> Optional[Handler]:
    """Returns the handler for ``node.type`` or None."""
    tag = getattr(node, "type", None)
    if isinstance(tag, NodeKind):
      tag = tag.value
    return self._handlers.get(tag)


def resolve_handler(node: TemplateNode, visitor: Any, prefix: str = DEFAULT_HANDLER_PREFIX) -> Optional[Handler]:
  """
  Resolves a single node's handler without building a table.

  Only tags in ``NodeKind`` are dispatched.

  Args:
      node: The structural node.
      visitor: The caller's visitor.
      prefix: Handler name prefix.

  Returns:
      Optional[Handler]: The bound handler, or None.
  """
  return DispatchTable.for_visitor(visitor, prefix).resolve(node)
