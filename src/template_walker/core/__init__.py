"""
Traversal Core Package.

This package provides the pieces composed by ``template_walker.visit``:
- Path: ``TemplatePath`` and its mutation slots.
- Dispatch: ``DispatchTable`` mapping node tags to handlers.
- Traversal: ``TemplateWalker`` and ``TraversalContext``.
- Bridge: ``ExpressionScope`` threading structural parents into LibCST walks.
- Passes: ``ScriptPass`` and ``MarkupPass`` run by the ``VisitPipeline``.
"""

from template_walker.core.bridge import ExpressionBridge, ExpressionScope, visit_expression
from template_walker.core.dispatch import DispatchTable, resolve_handler
from template_walker.core.passes import MarkupPass, ScriptPass
from template_walker.core.path import TemplatePath
from template_walker.core.pipeline import VisitPipeline
from template_walker.core.traversal import TemplateWalker, TraversalContext
from template_walker.core.visitor import TemplateVisitor

__all__ = [
  "DispatchTable",
  "ExpressionBridge",
  "ExpressionScope",
  "MarkupPass",
  "ScriptPass",
  "TemplatePath",
  "TemplateVisitor",
  "TemplateWalker",
  "TraversalContext",
  "VisitPipeline",
  "resolve_handler",
  "visit_expression",
]
