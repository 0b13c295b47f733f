"""
Exception Hierarchy.

All failures raised by the traversal engine derive from ``TemplateWalkerError``.
None of them are recoverable inside a single ``visit`` call: the engine never
catches them, so the first one raised aborts the whole visit and the tree keeps
whatever mutations were already committed.
"""

from typing import Optional


class TemplateWalkerError(Exception):
  """Base exception for all template traversal errors."""

  pass


class ContractViolation(TemplateWalkerError):
  """
  Raised when a structural handler breaks the continue/suppress contract.

  A handler must either call ``context.traverse(path)`` or return ``False``.
  Doing both, or neither, is a violation.
  """

  def __init__(self, node_kind: str, traversed: bool, suppressed: bool):
    """
    Initialize the exception.

    Args:
        node_kind: The ``type`` tag of the node whose handler misbehaved.
        traversed: Whether the handler called ``traverse()``.
        suppressed: Whether the handler returned the suppress signal.
    """
    self.node_kind = node_kind
    self.traversed = traversed
    self.suppressed = suppressed
    if traversed and suppressed:
      detail = "called traverse() and also returned False"
    else:
      detail = "neither called traverse() nor returned False"
    super().__init__(f"Handler for '{node_kind}' {detail}; it should return False or call context.traverse()")


class UnsupportedRootOperation(TemplateWalkerError):
  """Raised when ``replace`` or ``prune`` is called on the synthetic root path."""

  def __init__(self, operation: str):
    """
    Initialize the exception.

    Args:
        operation: The capability that was invoked ('replace' or 'prune').
    """
    self.operation = operation
    super().__init__(f"{operation} is not supported at the root")


class StalePathOperation(TemplateWalkerError):
  """Raised when a path capability is used after the engine has left that node."""

  def __init__(self, operation: str, node_kind: Optional[str] = None):
    """
    Initialize the exception.

    Args:
        operation: The capability that was invoked ('replace' or 'prune').
        node_kind: The tag of the node the path was bound to.
    """
    self.operation = operation
    self.node_kind = node_kind
    where = f" for '{node_kind}'" if node_kind else ""
    super().__init__(f"{operation} called on a released path{where}")


class TemplateLoadError(TemplateWalkerError):
  """Raised when parser output cannot be turned into template nodes."""

  def __init__(self, reason: str, location: Optional[str] = None):
    """
    Initialize the exception.

    Args:
        reason: Why the input was rejected.
        location: Dotted location of the offending node within the input.
    """
    self.reason = reason
    self.location = location
    prefix = f"at {location}: " if location else ""
    super().__init__(f"Cannot load template {prefix}{reason}")
