"""
Tests for the Context Bridge between structural nodes and LibCST expressions.
"""

import libcst as cst

from template_walker.core.bridge import ExpressionBridge, ExpressionScope, visit_expression
from template_walker.core.path import TemplatePath
from template_walker.core.tracer import TraceEventType, TraceLogger
from template_walker.core.traversal import TemplateWalker
from template_walker.core.visitor import TemplateVisitor
from template_walker.nodes import Fragment, MustacheTag


class ParentRecorder(TemplateVisitor):
  """Records the parent reported for each Name."""

  def __init__(self):
    super().__init__()
    self.parents = {}

  def visit_Name(self, node):
    self.parents[node.value] = self.get_parent(node)


def test_outermost_expression_parent_is_structural_path():
  """The topmost expression node sees the enclosing structural path."""
  tag = MustacheTag(expression=cst.parse_expression("a"))
  recorder = ParentRecorder()

  TemplateWalker(recorder).walk(Fragment(children=[tag]))

  parent = recorder.parents["a"]
  assert isinstance(parent, TemplatePath)
  assert parent.node is tag
  assert parent.parent.node.type == "Fragment"


def test_nested_expression_parent_is_expression_node():
  """Nested expression nodes keep their own LibCST parent."""
  tag = MustacheTag(expression=cst.parse_expression("x + y"))
  recorder = ParentRecorder()

  TemplateWalker(recorder).walk(Fragment(children=[tag]))

  assert isinstance(recorder.parents["x"], cst.BinaryOperation)
  assert recorder.parents["y"] is recorder.parents["x"]


def test_parent_path_alias():
  seen = {}

  class ParentLookup(TemplateVisitor):
    def visit_Name(self, node):
      seen["parent"] = self.get_parent(node)
      seen["parent_path"] = self.get_parent_path(node)
      seen["scope_parent"] = self.expression_scope.parent
      seen["scope_parent_path"] = self.expression_scope.parent_path

  tag = MustacheTag(expression=cst.parse_expression("z"))
  TemplateWalker(ParentLookup()).walk(Fragment(children=[tag]))

  assert seen["parent"] is seen["parent_path"] is seen["scope_parent"] is seen["scope_parent_path"]


def test_script_region_has_no_structural_boundary():
  """Without a boundary the topmost node has no parent at all."""
  module = cst.parse_module("b = 1\n")
  module_parent = {}

  class ModuleRecorder(ParentRecorder):
    def visit_Module(self, node):
      module_parent["value"] = self.get_parent(node)

  recorder = ModuleRecorder()
  visit_expression(module, recorder)

  assert module_parent["value"] is None
  assert isinstance(recorder.parents["b"], cst.AssignTarget)


def test_scope_released_after_traversal():
  recorder = ParentRecorder()
  visit_expression(cst.parse_expression("q"), recorder, boundary=TemplatePath.root(Fragment()))

  assert recorder.expression_scope is None
  assert recorder.get_parent(cst.Name("q")) is None


def test_scope_parent_of_unknown_node():
  scope = ExpressionScope(boundary=None)
  outer = cst.Name("outer")
  scope.enter(outer)

  assert scope.current is outer
  assert scope.parent_of(cst.Name("stranger")) is None
  assert len(scope) == 1

  scope.leave(outer)
  assert scope.current is None
  assert scope.parent is None


def test_bridge_forwards_to_plain_libcst_visitor():
  """Read-only LibCST visitors receive callbacks and leave the tree untouched."""
  names = []

  class Collect(cst.CSTVisitor):
    def visit_Name(self, node):
      names.append(node.value)

    def leave_Call(self, original_node):
      names.append("call")

  expression = cst.parse_expression("f(a)")
  result = expression.visit(ExpressionBridge(Collect(), ExpressionScope()))

  assert names == ["f", "a", "call"]
  assert result.deep_equals(expression)


def test_bridge_without_libcst_visitor_is_passthrough():
  expression = cst.parse_expression("a.b")
  result = visit_expression(expression, object())
  assert result.deep_equals(expression)


def test_attribute_callbacks_forwarded():
  fields = []

  class Attrs(TemplateVisitor):
    def visit_Attribute_attr(self, node):
      fields.append("attr")

    def leave_Attribute_value(self, node):
      fields.append("value")

  visit_expression(cst.parse_expression("a.b"), Attrs())
  assert fields == ["value", "attr"]


def test_expression_mutation_traced():
  tracer = TraceLogger()
  boundary = TemplatePath.root(MustacheTag())

  class Rename(TemplateVisitor):
    def leave_Name(self, original_node, updated_node):
      return updated_node.with_changes(value="renamed")

  result = visit_expression(cst.parse_expression("old"), Rename(), boundary=boundary, tracer=tracer)

  assert result.value == "renamed"
  events = tracer.export()
  assert events[0]["type"] == TraceEventType.EXPRESSION_MUTATION
  assert events[0]["metadata"] == {"before": "old", "after": "renamed"}
  assert "MustacheTag" in events[0]["description"]
