"""
Tests for the diagnostics console proxy.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

from template_walker.utils.console import (
  LOGGER_NAME,
  console,
  get_console,
  log_debug,
  log_error,
  log_info,
  log_warning,
  reset_console,
  set_console,
)


def test_proxy_forwards_to_backend():
  assert isinstance(get_console(), Console)
  assert console.width == get_console().width


def test_injected_console_captures_logs():
  capture = Console(record=True, file=None, width=200)
  set_console(capture)

  log_info("Visiting Element")
  log_warning("Unknown node kind")
  log_error("markup pass aborted")

  output = capture.export_text()
  assert "ℹ️" in output and "Visiting Element" in output
  assert "⚠️" in output
  assert "❌" in output


def test_debug_hidden_at_info_level():
  capture = Console(record=True, file=None, width=200)
  set_console(capture)

  log_debug("Starting markup pass")
  assert "Starting markup pass" not in capture.export_text()


def test_single_handler_after_reset():
  set_console(Console(record=True, file=None))
  reset_console()

  handlers = [h for h in logging.getLogger(LOGGER_NAME).handlers if isinstance(h, RichHandler)]
  assert len(handlers) == 1
  assert handlers[0].console is get_console()


def test_root_logger_untouched():
  reset_console()
  assert not any(isinstance(h, RichHandler) for h in logging.getLogger().handlers)
