"""
Region Passes.

- ``ScriptPass``: hands the host script module straight to LibCST with the
  caller's visitor. There is no structural path above it.
- ``MarkupPass``: walks the markup region with the ``TemplateWalker``, starting
  from a synthetic root path.
"""

from typing import Any, Optional

import libcst as cst

from template_walker.config import WalkerConfig
from template_walker.core.bridge import visit_expression
from template_walker.core.interface import VisitPass
from template_walker.core.traversal import TemplateWalker
from template_walker.core.tracer import TraceLogger
from template_walker.nodes import TemplateAst


class ScriptPass(VisitPass):
  """Visits the host script region, if present."""

  name = "script"

  def run(self, tree: TemplateAst, visitor: Any, config: WalkerConfig, tracer: Optional[TraceLogger] = None) -> None:
    script = tree.instance
    if script is None or script.content is None:
      return

    result = visit_expression(script.content, visitor, boundary=None, tracer=tracer)
    if isinstance(result, cst.Module):
      script.content = result


class MarkupPass(VisitPass):
  """Visits the markup region, if present."""

  name = "markup"

  def run(self, tree: TemplateAst, visitor: Any, config: WalkerConfig, tracer: Optional[TraceLogger] = None) -> None:
    if tree.html is None:
      return

    TemplateWalker(visitor, config=config, tracer=tracer).walk(tree.html)
