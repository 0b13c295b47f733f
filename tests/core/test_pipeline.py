"""
Tests for the Visit Pipeline and the region passes.
"""

from unittest.mock import MagicMock

import libcst as cst
import pytest

from template_walker.config import WalkerConfig
from template_walker.core.interface import VisitPass
from template_walker.core.passes import MarkupPass, ScriptPass
from template_walker.core.pipeline import VisitPipeline
from template_walker.core.tracer import TraceEventType, TraceLogger
from template_walker.core.visitor import TemplateVisitor
from template_walker.exceptions import UnsupportedRootOperation
from template_walker.nodes import Fragment, Script, TemplateAst, Text


class MockPass(VisitPass):
  """Records its label on the visitor mock to verify execution order."""

  def __init__(self, label):
    self.name = label

  def run(self, tree, visitor, config, tracer=None):
    visitor.calls.append(self.name)


def test_pipeline_execution_sequence():
  visitor = MagicMock()
  visitor.calls = []
  VisitPipeline([MockPass("a"), MockPass("b")]).run(TemplateAst(), visitor, WalkerConfig())
  assert visitor.calls == ["a", "b"]


def test_pipeline_traces_phases():
  tracer = TraceLogger()
  visitor = MagicMock()
  visitor.calls = []
  VisitPipeline([MockPass("script")]).run(TemplateAst(), visitor, WalkerConfig(), tracer)

  events = tracer.export()
  assert [e["type"] for e in events] == [TraceEventType.PHASE_START, TraceEventType.PHASE_END]
  assert events[0]["description"] == "Script Pass"


def test_script_pass_writes_back_module():
  tree = TemplateAst(instance=Script(content=cst.parse_module("b = 1\n")))

  class Rename(TemplateVisitor):
    def leave_Name(self, original_node, updated_node):
      return updated_node.with_changes(value="c")

  ScriptPass().run(tree, Rename(), WalkerConfig())
  assert tree.instance.content.code == "c = 1\n"


def test_passes_skip_missing_regions():
  visitor = TemplateVisitor()
  tree = TemplateAst()
  ScriptPass().run(tree, visitor, WalkerConfig())
  MarkupPass().run(tree, visitor, WalkerConfig())
  assert tree.html is None and tree.instance is None


def test_script_runs_before_markup():
  order = []

  class Ordered(TemplateVisitor):
    def visit_Module(self, node):
      order.append("script")

    def visit_TemplateFragment(self, path, context):
      order.append("markup")
      context.traverse(path)

  tree = TemplateAst(html=Fragment(children=[Text()]), instance=Script(content=cst.parse_module("x = 1\n")))
  VisitPipeline([ScriptPass(), MarkupPass()]).run(tree, Ordered(), WalkerConfig())

  assert order == ["script", "markup"]


def test_first_pass_failure_skips_second():
  markup_calls = []

  class Exploding(TemplateVisitor):
    def visit_Name(self, node):
      raise RuntimeError("boom")

    def visit_TemplateFragment(self, path, context):
      markup_calls.append(path)
      return False

  tree = TemplateAst(html=Fragment(), instance=Script(content=cst.parse_module("x = 1\n")))
  with pytest.raises(RuntimeError):
    VisitPipeline([ScriptPass(), MarkupPass()]).run(tree, Exploding(), WalkerConfig())

  assert markup_calls == []


def test_second_pass_failure_keeps_first_pass_mutations():
  class RenameThenFail(TemplateVisitor):
    def leave_Name(self, original_node, updated_node):
      return updated_node.with_changes(value="y")

    def visit_TemplateFragment(self, path, context):
      path.prune()
      return False

  tree = TemplateAst(html=Fragment(), instance=Script(content=cst.parse_module("x = 1\n")))
  with pytest.raises(UnsupportedRootOperation):
    VisitPipeline([ScriptPass(), MarkupPass()]).run(tree, RenameThenFail(), WalkerConfig())

  assert tree.instance.content.code == "y = 1\n"
