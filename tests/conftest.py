"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- Global tracer/console isolation between tests.
- A sample component tree mirroring a small real template.
"""

import sys
from pathlib import Path

import pytest

# Add src to path so we can import 'template_walker' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from template_walker.core.tracer import reset_tracer  # noqa: E402
from template_walker.loader import load_template  # noqa: E402
from template_walker.utils.console import reset_console  # noqa: E402

SAMPLE_TEMPLATE = {
  "html": {
    "type": "Fragment",
    "children": [
      {"type": "Comment", "data": " This is a comment "},
      {"type": "Text", "data": "some text", "raw": "some text"},
      {
        "type": "IfBlock",
        "expression": "True",
        "children": [
          {
            "type": "Element",
            "name": "span",
            "attributes": [],
            "children": [{"type": "MustacheTag", "expression": "a + b"}],
          }
        ],
        "else": {
          "type": "ElseBlock",
          "children": [
            {
              "type": "Element",
              "name": "span",
              "attributes": [],
              "children": [{"type": "MustacheTag", "expression": "hura"}],
            }
          ],
        },
      },
      {
        "type": "InlineComponent",
        "name": "MyComponent",
        "attributes": [
          {"type": "Attribute", "name": "first", "value": [{"type": "Text", "data": "123", "raw": "123"}]},
          {"type": "Attribute", "name": "second", "value": True},
          {"type": "Action", "name": "aaa", "modifiers": []},
          {"type": "Attribute", "name": "bbb", "value": [{"type": "MustacheTag", "expression": "bbb"}]},
        ],
        "children": [],
      },
    ],
  },
  "instance": {"context": "default", "content": "b = 1\n"},
}


@pytest.fixture(autouse=True)
def isolate_globals():
  """Fresh tracer and console for every test."""
  reset_tracer()
  reset_console()
  yield
  reset_tracer()
  reset_console()


@pytest.fixture
def sample_tree():
  """The sample component, freshly loaded."""
  return load_template(SAMPLE_TEMPLATE)


@pytest.fixture
def make_sample_tree():
  """Factory returning independent copies of the sample component."""
  return lambda: load_template(SAMPLE_TEMPLATE)
