"""
Interface definition for Visit Passes.

This module defines the abstract base class that every pass over a template
must implement to be run by the ``VisitPipeline``.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from template_walker.config import WalkerConfig
from template_walker.core.tracer import TraceLogger
from template_walker.nodes import TemplateAst


class VisitPass(ABC):
  """
  Abstract contract for one pass over one region of a template.

  Passes share nothing but the tree and the visitor; each mutates the tree in
  place and returns nothing.
  """

  name: str = "pass"

  @abstractmethod
  def run(self, tree: TemplateAst, visitor: Any, config: WalkerConfig, tracer: Optional[TraceLogger] = None) -> None:
    """
    Executes the pass.

    Args:
        tree: The parsed template, mutated in place.
        visitor: The caller's visitor.
        config: The runtime configuration.
        tracer: Optional trace recorder.
    """
    pass
