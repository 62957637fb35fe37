"""
Rewrite Command Handler.

Implements `mlir-cast-migrator rewrite TEXT`: rewrites a single call given on
the command line and prints the free-function form.
"""

from typing import Optional

from mlir_cast_migrator.config import RuntimeConfig
from mlir_cast_migrator.core.engine import MigrationEngine
from mlir_cast_migrator.core.splitter import infer_arrow
from mlir_cast_migrator.utils.console import log_error


def handle_rewrite(call_text: str, arrow: Optional[bool], family: Optional[str], config: RuntimeConfig) -> int:
  """
  Handles the 'rewrite' command execution.

  Args:
      call_text: The method-style call, e.g. `Ptr->dyn_cast<Bar>()`.
      arrow: Access style; inferred from the text when None.
      family: Receiver family name; the configured default when None.
      config: Resolved runtime configuration.

  Returns:
      int: Exit code (0 for success, 1 for failure).
  """
  is_arrow = infer_arrow(call_text) if arrow is None else arrow
  engine = MigrationEngine(config)
  try:
    replacement = engine.rewrite_text(call_text, is_arrow=is_arrow, family=family)
  except ValueError as e:
    log_error(str(e))
    return 1

  print(replacement)
  return 0
