"""
CLI Command Handlers Facade.

Re-exports handlers from `mlir_cast_migrator.cli.handlers` so the dispatcher
(and tests patching it) have a single module to target.
"""

from mlir_cast_migrator.cli.handlers.fix import (
  handle_fix,
  _fix_single_file,
  _print_batch_summary,
)
from mlir_cast_migrator.cli.handlers.rewrite import handle_rewrite
from mlir_cast_migrator.cli.handlers.families import handle_families

__all__ = [
  "_fix_single_file",
  "_print_batch_summary",
  "handle_families",
  "handle_fix",
  "handle_rewrite",
]
