"""
Template Loader.

Builds the node schema from the JSON-shaped output of a markup parser. The
parser itself is external: this module only maps its nested mappings onto the
dataclasses in ``template_walker.nodes``. Embedded expressions arrive as Python
source text and are parsed with LibCST.

Input shape::

    {
      "html": {"type": "Fragment", "children": [
        {"type": "IfBlock", "expression": "ready", "children": [...],
         "else": {"type": "ElseBlock", "children": [...]}},
      ]},
      "instance": {"context": "default", "content": "count = 0\n"},
    }
"""

import dataclasses
from typing import Any, Dict, List, Mapping

import libcst as cst

from template_walker.exceptions import TemplateLoadError
from template_walker.nodes import NODE_CLASSES, GenericNode, Script, TemplateAst, TemplateNode, is_expression_field

_IDENTIFIER_FIELD = "identifiers"

# Parser keys that are Python keywords.
_RENAMED_KEYS = {"else": "else_"}


def load_template(data: Mapping[str, Any]) -> TemplateAst:
  """
  Loads a whole component file.

  Args:
      data: Mapping with optional ``html`` (a markup node) and ``instance``
          (``{"content": <python source>, "context": ...}``) keys.

  Returns:
      TemplateAst: The loaded tree.

  Raises:
      TemplateLoadError: If any part of the input is malformed.
  """
  if not isinstance(data, Mapping):
    raise TemplateLoadError(f"expected a mapping, got {type(data).__name__}")

  html = data.get("html")
  instance = data.get("instance")
  return TemplateAst(
    html=load_node(html, "html") if html is not None else None,
    instance=_load_script(instance) if instance is not None else None,
  )


def load_node(data: Mapping[str, Any], location: str = "node") -> TemplateNode:
  """
  Loads a single markup node and its descendants.

  Tags outside the node catalog become ``GenericNode`` instances that keep
  only the generic structural keys (``children``, ``else``, ``attributes``,
  ``expression``, ``identifiers``) and the source offsets.

  Args:
      data: The parser's mapping for the node.
      location: Dotted location used in error messages.

  Returns:
      TemplateNode: The loaded node.

  Raises:
      TemplateLoadError: If the node is not a mapping, has no ``type`` or
          holds an expression LibCST cannot parse.
  """
  if not isinstance(data, Mapping):
    raise TemplateLoadError(f"expected a node mapping, got {type(data).__name__}", location)
  kind = data.get("type")
  if not isinstance(kind, str) or not kind:
    raise TemplateLoadError("node has no 'type' tag", location)

  node_cls = NODE_CLASSES.get(kind, GenericNode)
  fields = {f.name: f for f in dataclasses.fields(node_cls)}

  kwargs: Dict[str, Any] = {"type": kind}
  for raw_key, value in data.items():
    key = _RENAMED_KEYS.get(raw_key, raw_key)
    if key == "type" or key not in fields:
      continue
    kwargs[key] = _load_field(fields[key], value, f"{location}.{raw_key}")

  return node_cls(**kwargs)


def _load_field(f: dataclasses.Field, value: Any, location: str) -> Any:
  if is_expression_field(f):
    return _parse_expression(value, location) if value is not None else None
  if f.name == _IDENTIFIER_FIELD:
    return [_parse_expression(v, f"{location}[{i}]") for i, v in enumerate(_as_list(value, location))]
  if isinstance(value, Mapping) and "type" in value:
    return load_node(value, location)
  if isinstance(value, list) and any(isinstance(v, Mapping) for v in value):
    return [load_node(v, f"{location}[{i}]") for i, v in enumerate(value)]
  return value


def _load_script(data: Mapping[str, Any]) -> Script:
  if not isinstance(data, Mapping):
    raise TemplateLoadError(f"expected a script mapping, got {type(data).__name__}", "instance")
  source = data.get("content", "")
  if not isinstance(source, str):
    raise TemplateLoadError("script content must be Python source text", "instance.content")
  try:
    module = cst.parse_module(source)
  except cst.ParserSyntaxError as e:
    raise TemplateLoadError(f"invalid script: {e.message}", "instance.content") from e
  return Script(content=module, context=data.get("context", "default"))


def _parse_expression(source: Any, location: str) -> cst.BaseExpression:
  if isinstance(source, cst.BaseExpression):
    return source
  if not isinstance(source, str):
    raise TemplateLoadError(f"expression must be Python source text, got {type(source).__name__}", location)
  try:
    return cst.parse_expression(source)
  except cst.ParserSyntaxError as e:
    raise TemplateLoadError(f"invalid expression {source!r}: {e.message}", location) from e


def _as_list(value: Any, location: str) -> List[Any]:
  if not isinstance(value, list):
    raise TemplateLoadError(f"expected a list, got {type(value).__name__}", location)
  return value
