"""
Main Entry Point for mlir-cast-migrator CLI.

This module handles argument parsing and dispatches to specific command
handlers defined in `mlir_cast_migrator.cli.commands`.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from mlir_cast_migrator.config import RuntimeConfig, parse_cli_key_values
from mlir_cast_migrator.cli import commands
from mlir_cast_migrator.utils.console import log_error, set_verbose
from mlir_cast_migrator import __version__


def _add_config_arguments(cmd: argparse.ArgumentParser) -> None:
  cmd.add_argument("--namespace", default=None, help="Qualifier for free functions (default: from toml, else llvm::)")
  cmd.add_argument(
    "--family",
    default=None,
    help="Family assigned to receivers by default (e.g. Value, Type, PointerUnion)",
  )
  cmd.add_argument(
    "--generic-pointer-receiver",
    action="append",
    default=None,
    metavar="REGEX",
    help="Receivers matching REGEX belong to the generic-pointer family (repeatable)",
  )
  cmd.add_argument(
    "--config",
    nargs="*",
    help="Configuration overrides in key=value format (e.g. max_passes=2)",
  )


def main(argv: Optional[List[str]] = None) -> int:
  """
  Main CLI entry point.

  Parses arguments via argparse and calls the appropriate handler function.

  Args:
      argv: Optional list of command line arguments (defaults to sys.argv).

  Returns:
      int: Exit code (0 for success, non-zero for failure).
  """
  parser = argparse.ArgumentParser(description="mlir-cast-migrator: method-style cast to free-function rewriter")
  parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
  parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

  subparsers = parser.add_subparsers(dest="command", required=True)

  # --- Command: FIX ---
  cmd_fix = subparsers.add_parser("fix", help="Rewrite deprecated cast calls in a C++ file or directory")
  cmd_fix.add_argument("path", type=Path, help="Input source file or directory")
  cmd_fix.add_argument("--out", type=Path, help="Output destination (file or dir)")
  cmd_fix.add_argument("--in-place", action="store_true", help="Overwrite input files")
  cmd_fix.add_argument(
    "--matches",
    type=Path,
    default=None,
    help="JSON matches recorded by an AST front end (single file only); default: lexical scan",
  )
  cmd_fix.add_argument("--diff", action="store_true", help="Print a unified diff per changed file")
  cmd_fix.add_argument("--export-fixes", type=Path, default=None, help="Write all edits and diagnostics to JSON")
  cmd_fix.add_argument("--json-trace", type=Path, default=None, help="Dump the execution trace to a JSON file")
  _add_config_arguments(cmd_fix)

  # --- Command: REWRITE ---
  cmd_rw = subparsers.add_parser("rewrite", help="Rewrite a single call given as text")
  cmd_rw.add_argument("text", help="Method-style call, e.g. 'Op.dyn_cast<Foo>()'")
  style = cmd_rw.add_mutually_exclusive_group()
  style.add_argument("--arrow", dest="arrow", action="store_const", const=True, default=None, help="Force '->' access")
  style.add_argument("--dot", dest="arrow", action="store_const", const=False, help="Force '.' access")
  _add_config_arguments(cmd_rw)

  # --- Command: FAMILIES ---
  subparsers.add_parser("families", help="Show the tracked type families")

  args = parser.parse_args(argv)
  set_verbose(args.verbose)

  if args.command == "families":
    return commands.handle_families()

  search_path = None
  if args.command == "fix":
    search_path = args.path if args.path.is_dir() else args.path.parent

  try:
    config = RuntimeConfig.load(
      namespace_prefix=args.namespace,
      generic_pointer_receivers=args.generic_pointer_receiver,
      default_family=args.family,
      overrides=parse_cli_key_values(args.config),
      search_path=search_path,
    )
  except (ValidationError, ValueError) as e:
    log_error(f"Invalid configuration: {e}")
    return 1

  if args.command == "fix":
    return commands.handle_fix(
      args.path,
      args.out,
      config,
      matches_path=args.matches,
      in_place=args.in_place,
      show_diff=args.diff,
      export_fixes_path=args.export_fixes,
      json_trace_path=args.json_trace,
    )

  elif args.command == "rewrite":
    return commands.handle_rewrite(args.text, args.arrow, args.family, config)

  return 0


if __name__ == "__main__":
  sys.exit(main())
