"""
Diagnostics Output.

The engine reports through the ``template_walker`` logger. A single
``RichHandler`` is attached to that logger and renders to a Rich Console held
behind a proxy, so callers can redirect diagnostics (to a recorder, a file, a
web response) with ``set_console`` while modules keep importing the same
``console`` object.

Attributes:
    LOGGER_NAME (str): Name of the package logger.
    console (_ConsoleProxy): Stable reference to the active Rich Console.
"""

import logging
from typing import Any, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

LOGGER_NAME = "template_walker"

_THEME = Theme(
  {
    "info": "dim cyan",
    "warning": "yellow",
    "error": "bold red",
    "kind": "bold blue",
    "code": "bold magenta",
  }
)

logger = logging.getLogger(LOGGER_NAME)


class _ConsoleProxy:
  """
  Forwards attribute access to a swappable Rich Console and keeps the package
  logger's handler bound to it.
  """

  def __init__(self) -> None:
    self._backend: Console = Console(theme=_THEME)
    self._handler: Optional[RichHandler] = None
    self._bind_handler()

  @property
  def backend(self) -> Console:
    return self._backend

  def set_backend(self, new_console: Console) -> None:
    """
    Renders future diagnostics to ``new_console``.

    Args:
        new_console (Console): The console to render to.
    """
    self._backend = new_console
    self._bind_handler()

  def reset(self) -> None:
    """Goes back to a fresh standard output console."""
    self.set_backend(Console(theme=_THEME))

  def _bind_handler(self) -> None:
    if self._handler is not None:
      logger.removeHandler(self._handler)

    self._handler = RichHandler(
      console=self._backend,
      show_time=False,
      show_path=False,
      markup=True,
      rich_tracebacks=True,
    )
    logger.addHandler(self._handler)
    if logger.level == logging.NOTSET:
      logger.setLevel(logging.INFO)

  def __getattr__(self, name: str) -> Any:
    return getattr(self._backend, name)


console = _ConsoleProxy()


def set_console(new_console: Console) -> None:
  """
  Redirects diagnostics to another console.

  Args:
      new_console (Console): e.g. ``Console(record=True)`` to capture output.
  """
  console.set_backend(new_console)


def reset_console() -> None:
  console.reset()


def get_console() -> Console:
  """
  Returns:
      Console: The console diagnostics are currently rendered to.
  """
  return console.backend


def log_debug(msg: str) -> None:
  """Pass boundaries and other chatter. Hidden at the default INFO level."""
  logger.debug(msg, extra={"markup": True})


def log_info(msg: str) -> None:
  logger.info(f"ℹ️  {msg}", extra={"markup": True})


def log_warning(msg: str) -> None:
  logger.warning(f"⚠️  {msg}", extra={"markup": True})


def log_error(msg: str) -> None:
  """
  Reports a failure that is about to propagate.

  Args:
      msg (str): The message. May contain rich markup such as ``[kind]``.
  """
  logger.error(f"❌ {msg}", extra={"markup": True})
