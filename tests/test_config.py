"""
Tests for runtime configuration loading.
"""

import pytest
from pydantic import ValidationError

from template_walker.config import WalkerConfig, _load_toml_settings


def test_defaults():
  config = WalkerConfig()
  assert config.handler_prefix == "visit_Template"
  assert not config.log_visits
  assert not config.warn_unknown_kinds
  assert not config.trace


@pytest.mark.parametrize("prefix", ["", "   ", "visit-Template", "1visit"])
def test_invalid_prefix(prefix):
  with pytest.raises(ValidationError):
    WalkerConfig(handler_prefix=prefix)


def test_prefix_is_stripped():
  assert WalkerConfig(handler_prefix=" on_ ").handler_prefix == "on_"


def test_load_from_pyproject(tmp_path):
  (tmp_path / "pyproject.toml").write_text(
    '[tool.template_walker]\nhandler_prefix = "on_"\ntrace = true\nunrelated = 1\n', encoding="utf-8"
  )
  nested = tmp_path / "src" / "pkg"
  nested.mkdir(parents=True)

  config = WalkerConfig.load(search_path=nested)
  assert config.handler_prefix == "on_"
  assert config.trace is True


def test_overrides_win_over_toml(tmp_path):
  (tmp_path / "pyproject.toml").write_text('[tool.template_walker]\nlog_visits = true\n', encoding="utf-8")

  config = WalkerConfig.load(log_visits=False, search_path=tmp_path)
  assert config.log_visits is False


def test_section_missing(tmp_path):
  (tmp_path / "pyproject.toml").write_text("[project]\nname = 'x'\n", encoding="utf-8")
  settings, found_in = _load_toml_settings(tmp_path)
  assert settings == {}
  assert found_in == tmp_path.resolve()


def test_broken_toml_is_ignored(tmp_path):
  (tmp_path / "pyproject.toml").write_text("[tool.template_walker\n", encoding="utf-8")
  assert WalkerConfig.load(search_path=tmp_path) == WalkerConfig()
