"""
Central Logging and Console Utilities.

Routes the application's output through the Python standard `logging` library,
formatted by `rich`.

1.  **Standard Logging Integration**: a `RichHandler` on the root logger, plus
    helper functions (`log_info`, `log_success`, `log_warning`, `log_error`).
2.  **Swappable Console**: a proxy around the Rich Console, so tests and
    embedding tools can redirect all output into a buffer via `set_console`.
3.  **Diagnostics**: `print_diagnostic` renders warnings in the
    `file:line:col: warning: message [check]` shape compilers and linters use.

Attributes:
    console (_ConsoleProxy): A global, stable reference to the active Rich Console.
"""

import logging
import sys
from contextlib import contextmanager
from typing import Any, Iterator

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.theme import Theme

SUCCESS_LEVEL_NUM = 25
logging.addLevelName(SUCCESS_LEVEL_NUM, "SUCCESS")

_THEME = Theme(
  {
    "logging.level.success": "green",
    "info": "dim cyan",
    "warning": "yellow",
    "error": "bold red",
    "success": "green",
    "path": "bold blue",
    "code": "bold magenta",
    "check": "dim",
  }
)


class _ConsoleProxy:
  """
  A Proxy wrapper around `rich.console.Console`.

  Printing is forwarded to a backend Console which can be replaced at runtime
  (e.g. with one writing to `io.StringIO`) while modules keep importing the same
  `console` object. Swapping the backend also re-points the logging handler.

  Attributes:
      _backend (Console): The active Rich Console instance.
  """

  def __init__(self) -> None:
    self._backend: Console = Console(theme=_THEME)
    self._level = logging.INFO
    self._configure_logging()

  def set_backend(self, new_console: Console) -> None:
    """
    Injects a new Console backend and updates logging handlers.

    Args:
        new_console (Console): The new Rich Console instance to use.
    """
    self._backend = new_console
    self._configure_logging()

  def reset(self) -> None:
    """Resets the proxy to a fresh standard output console."""
    self._backend = Console(theme=_THEME)
    self._level = logging.INFO
    self._configure_logging()

  def set_level(self, level: int) -> None:
    self._level = level
    self._configure_logging()

  @property
  def backend(self) -> Console:
    return self._backend

  def _configure_logging(self) -> None:
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
      if isinstance(handler, RichHandler):
        root_logger.removeHandler(handler)

    rich_handler = RichHandler(
      console=self._backend,
      show_time=False,
      omit_repeated_times=False,
      show_path=False,
      markup=True,
      rich_tracebacks=True,
    )

    root_logger.setLevel(self._level)
    root_logger.addHandler(rich_handler)

  def print(self, *args: Any, **kwargs: Any) -> None:
    self._backend.print(*args, **kwargs)

  def __getattr__(self, name: str) -> Any:
    return getattr(self._backend, name)


console = _ConsoleProxy()


def set_console(new_console: Console) -> None:
  """
  Global helper to inject a specific console instance.

  Args:
      new_console (Console): The configured Rich console to use globally.
  """
  console.set_backend(new_console)


def reset_console() -> None:
  """Global helper to reset logging and console to standard output."""
  console.reset()


def set_verbose(verbose: bool) -> None:
  """Switches the root logger between INFO and DEBUG."""
  console.set_level(logging.DEBUG if verbose else logging.INFO)


def get_console() -> Console:
  return console.backend


@contextmanager
def redirect_to_stderr() -> Iterator[None]:
  """
  Routes console and log output to stderr while stdout carries data.

  A backend that does not write to stdout (e.g. one injected by a test or an
  embedding tool) is left in place.
  """
  previous = console.backend
  if previous.file is not sys.stdout:
    yield
    return
  console.set_backend(Console(theme=_THEME, stderr=True))
  try:
    yield
  finally:
    console.set_backend(previous)


def log_info(msg: str) -> None:
  logging.info(f"ℹ️  {msg}", extra={"markup": True})


def log_success(msg: str) -> None:
  logging.log(SUCCESS_LEVEL_NUM, f"✅ {msg}", extra={"markup": True})


def log_warning(msg: str) -> None:
  logging.warning(f"⚠️  {msg}", extra={"markup": True})


def log_error(msg: str) -> None:
  logging.error(f"❌ {msg}", extra={"markup": True})


def print_diagnostic(path: str, line: int, column: int, message: str, check_name: str) -> None:
  """
  Prints a located warning in linter format.

  Args:
      path (str): Source file name.
      line (int): 1-based line.
      column (int): 1-based column.
      message (str): Diagnostic text.
      check_name (str): Check identifier shown in brackets.
  """
  console.print(
    f"[path]{escape(path)}[/path]:{line}:{column}: [warning]warning:[/warning] {escape(message)} "
    f"[check]\\[{escape(check_name)}][/check]",
    soft_wrap=True,
  )
