"""
Tests for the console proxy and logging helpers.
"""

import io
import logging

from rich.console import Console

from mlir_cast_migrator.utils.console import (
  console,
  log_success,
  log_warning,
  print_diagnostic,
  redirect_to_stderr,
  set_console,
  set_verbose,
)


def _capture() -> io.StringIO:
  buf = io.StringIO()
  set_console(Console(file=buf, width=200, force_terminal=False))
  return buf


def test_logs_routed_to_injected_console():
  buf = _capture()
  log_warning("overlapping edit skipped")
  log_success("done")

  text = buf.getvalue()
  assert "overlapping edit skipped" in text
  assert "done" in text


def test_print_diagnostic_format():
  buf = _capture()
  print_diagnostic("lib/Foo.cpp", 3, 7, "Casting call is using methods", "misc-mlir-cast")
  assert buf.getvalue().strip() == "lib/Foo.cpp:3:7: warning: Casting call is using methods [misc-mlir-cast]"


def test_verbose_switches_level():
  set_verbose(True)
  assert logging.getLogger().level == logging.DEBUG
  set_verbose(False)
  assert logging.getLogger().level == logging.INFO


def test_proxy_forwards_attributes():
  _capture()
  assert console.width == 200


def test_redirect_to_stderr_moves_stdout_console(capsys):
  with redirect_to_stderr():
    log_warning("kept off stdout")
  captured = capsys.readouterr()
  assert "kept off stdout" not in captured.out
  assert "kept off stdout" in captured.err


def test_redirect_to_stderr_keeps_injected_console():
  buf = _capture()
  with redirect_to_stderr():
    log_warning("still captured")
  assert "still captured" in buf.getvalue()
