"""
Orchestration logic for executing sequential visit passes.

The ``VisitPipeline`` runs its passes in order over the same tree. A failure in
any pass propagates at once: later passes do not run and earlier mutations are
kept.
"""

from contextlib import nullcontext
from typing import Any, List, Optional

from rich.markup import escape

from template_walker.config import WalkerConfig
from template_walker.core.interface import VisitPass
from template_walker.core.tracer import TraceLogger
from template_walker.exceptions import TemplateWalkerError
from template_walker.nodes import TemplateAst
from template_walker.utils.console import log_debug, log_error


class VisitPipeline:
  """
  Manages a sequence of passes and executes them in order.
  """

  def __init__(self, passes: List[VisitPass]) -> None:
    """
    Initializes the pipeline with a list of passes.

    Args:
        passes: Sequenced list of passes to execute.
    """
    self.passes = passes

  def run(self, tree: TemplateAst, visitor: Any, config: WalkerConfig, tracer: Optional[TraceLogger] = None) -> None:
    """
    Executes all registered passes sequentially on the tree.

    Args:
        tree: The parsed template, mutated in place.
        visitor: The caller's visitor.
        config: The runtime configuration.
        tracer: Optional trace recorder.

    Raises:
        TemplateWalkerError: Re-raised unchanged from the failing pass.
    """
    for pass_instance in self.passes:
      log_debug(f"Starting {pass_instance.name} pass")
      phase = tracer.phase(f"{pass_instance.name.capitalize()} Pass") if tracer else nullcontext()
      with phase:
        try:
          pass_instance.run(tree, visitor, config, tracer)
        except TemplateWalkerError as e:
          log_error(f"{pass_instance.name} pass aborted: {escape(str(e))}")
          raise
