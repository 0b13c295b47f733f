"""
Runtime Configuration Store.

Holds the options that shape a traversal: the handler naming prefix and the
diagnostics switches. Values can be declared in ``pyproject.toml`` under
``[tool.template_walker]`` and overridden per call.
"""

import sys
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

if sys.version_info >= (3, 11):
  import tomllib
else:
  import tomli as tomllib


class WalkerConfig(BaseModel):
  """
  Configuration container for the traversal engine.
  """

  handler_prefix: str = Field(
    "visit_Template",
    description="Prefix joined with a node tag to name its structural handler (e.g. 'visit_TemplateElement').",
  )
  log_visits: bool = Field(False, description="If True, log every structural node as it is visited.")
  warn_unknown_kinds: bool = Field(False, description="If True, log a warning for tags outside the node catalog.")
  trace: bool = Field(False, description="If True, record traversal events on the global TraceLogger.")

  @field_validator("handler_prefix")
  @classmethod
  def validate_prefix(cls, v: str) -> str:
    """
    Ensures the prefix can start a Python attribute name.

    Args:
        v (str): The raw prefix.

    Returns:
        str: The stripped prefix.

    Raises:
        ValueError: If the prefix is empty or not identifier-like.
    """
    clean = v.strip()
    if not clean or not clean.isidentifier():
      raise ValueError(f"Invalid handler prefix: '{v}'. It must be a valid identifier prefix.")
    return clean

  @classmethod
  def load(
    cls,
    handler_prefix: Optional[str] = None,
    log_visits: Optional[bool] = None,
    warn_unknown_kinds: Optional[bool] = None,
    trace: Optional[bool] = None,
    search_path: Optional[Path] = None,
  ) -> "WalkerConfig":
    """
    Loads configuration from pyproject.toml and applies explicit overrides.

    Args:
        handler_prefix (Optional[str]): Override for the handler prefix.
        log_visits (Optional[bool]): Override for per-node logging.
        warn_unknown_kinds (Optional[bool]): Override for unknown tag warnings.
        trace (Optional[bool]): Override for event tracing.
        search_path (Optional[Path]): Directory to start searching for TOML config.

    Returns:
        WalkerConfig: The fully resolved configuration object.
    """
    start_dir = search_path or Path.cwd()
    toml_config, _ = _load_toml_settings(start_dir)

    overrides = {
      "handler_prefix": handler_prefix,
      "log_visits": log_visits,
      "warn_unknown_kinds": warn_unknown_kinds,
      "trace": trace,
    }
    merged: Dict[str, Any] = {k: v for k, v in toml_config.items() if k in cls.model_fields}
    merged.update({k: v for k, v in overrides.items() if v is not None})
    return cls(**merged)


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Searches the directory and its parents for 'pyproject.toml' and extracts config.

  Args:
      start_path (Path): Directory to start search from.

  Returns:
      Tuple[Dict, Optional[Path]]: The config dict and the directory it was found in.
  """
  current = start_path.resolve()

  for parent in [current, *current.parents]:
    toml_path = parent / "pyproject.toml"
    if toml_path.exists() and toml_path.is_file():
      try:
        with open(toml_path, "rb") as f:
          data = tomllib.load(f)
      except (OSError, tomllib.TOMLDecodeError):
        return {}, None

      tool_section = data.get("tool", {})
      return tool_section.get("template_walker", {}), parent

  return {}, None
