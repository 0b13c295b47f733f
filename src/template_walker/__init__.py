"""
template-walker Package.

Visitor-driven traversal and in-place mutation of component-template syntax
trees: a markup tree (elements, text, blocks, attributes, directives) with
embedded Python expressions held as LibCST nodes, plus a host script region.

Usage
-----

.. code-block:: python

    import libcst as cst
    from template_walker import TemplateVisitor, load_template, visit

    tree = load_template(parser_output)

    class StripAttributes(TemplateVisitor):
      def visit_TemplateAttribute(self, path, context):
        path.prune()
        return False

      def leave_Name(self, original_node, updated_node):
        return updated_node.with_changes(value=updated_node.value.upper())

    visit(tree, StripAttributes())
"""

from typing import Any, Optional

from template_walker.config import WalkerConfig
from template_walker.core.passes import MarkupPass, ScriptPass
from template_walker.core.path import TemplatePath
from template_walker.core.pipeline import VisitPipeline
from template_walker.core.tracer import get_tracer
from template_walker.core.traversal import SUPPRESS, TraversalContext
from template_walker.core.visitor import TemplateVisitor
from template_walker.exceptions import (
  ContractViolation,
  StalePathOperation,
  TemplateLoadError,
  TemplateWalkerError,
  UnsupportedRootOperation,
)
from template_walker.loader import load_node, load_template
from template_walker.nodes import NodeKind, TemplateAst, TemplateNode

__version__ = "0.0.1"


def visit(tree: TemplateAst, visitor: Any, config: Optional[WalkerConfig] = None) -> None:
  """
  Visits a parsed template in place: the script region first, then the markup.

  Args:
      tree (TemplateAst): The parser output. Mutated in place.
      visitor (Any): Usually a ``TemplateVisitor`` subclass. Structural handlers
          are named ``<handler_prefix><Kind>``; expression handlers follow LibCST.
      config (WalkerConfig, optional): Runtime options. Defaults apply if None.

  Raises:
      ContractViolation: A structural handler neither traversed nor suppressed, or did both.
      UnsupportedRootOperation: ``replace``/``prune`` was called on the root path.
  """
  config = config or WalkerConfig()
  tracer = get_tracer() if config.trace else None
  VisitPipeline([ScriptPass(), MarkupPass()]).run(tree, visitor, config, tracer)


__all__ = [
  "ContractViolation",
  "NodeKind",
  "StalePathOperation",
  "SUPPRESS",
  "TemplateAst",
  "TemplateLoadError",
  "TemplateNode",
  "TemplatePath",
  "TemplateVisitor",
  "TemplateWalkerError",
  "TraversalContext",
  "UnsupportedRootOperation",
  "WalkerConfig",
  "load_node",
  "load_template",
  "visit",
  "__version__",
]
