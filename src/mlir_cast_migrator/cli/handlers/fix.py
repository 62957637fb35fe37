"""
Fix Command Handler.

This module implements the logic for the `mlir-cast-migrator fix` command.
It orchestrates:
1. Detector selection (recorded matches from JSON, or the lexical scanner).
2. Running the Migration Engine over a file or a directory of C++ sources.
3. Reporting diagnostics in linter format, optional unified diffs.
4. Output writing (new location or in place), fix export and trace logging.
"""

import contextlib
import difflib
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich.syntax import Syntax
from rich.table import Table

from mlir_cast_migrator.config import RuntimeConfig
from mlir_cast_migrator.core.detector import CallSiteMatcher, RecordedMatches
from mlir_cast_migrator.core.engine import MigrationEngine, MigrationResult
from mlir_cast_migrator.utils.console import (
  console,
  log_error,
  log_info,
  log_success,
  log_warning,
  print_diagnostic,
  redirect_to_stderr,
)

CPP_SUFFIXES = (".cpp", ".cc", ".cxx", ".c++", ".h", ".hh", ".hpp", ".hxx", ".inc")


def handle_fix(
  input_path: Path,
  output_path: Optional[Path],
  config: RuntimeConfig,
  matches_path: Optional[Path] = None,
  in_place: bool = False,
  show_diff: bool = False,
  export_fixes_path: Optional[Path] = None,
  json_trace_path: Optional[Path] = None,
) -> int:
  """
  Handles the 'fix' command execution.

  Args:
      input_path: Source file or directory.
      output_path: Destination file or directory. Without it (and without
          `in_place`) rewritten code is only reported, not written.
      config: Resolved runtime configuration.
      matches_path: JSON file of matches recorded by an external front end.
          Only valid for a single input file.
      in_place: Overwrite the input files.
      show_diff: Print a unified diff per changed file.
      export_fixes_path: Write all edits and diagnostics to this JSON file.
      json_trace_path: Dump the execution trace of the last file to JSON.

  Returns:
      int: Exit code (0 for success, 1 for failure).
  """
  if not input_path.exists():
    log_error(f"Input not found: {input_path}")
    return 1

  if in_place and output_path:
    log_error("--in-place and --out are mutually exclusive.")
    return 1

  engine = MigrationEngine(config)
  matcher: Optional[CallSiteMatcher] = None
  if matches_path:
    if input_path.is_dir():
      log_error("--matches requires a single input file.")
      return 1
    try:
      matcher = RecordedMatches.from_json(matches_path, engine.families)
    except (OSError, ValueError) as e:
      log_error(f"Failed to load matches from {matches_path}: {e}")
      return 1

  to_stdout = input_path.is_file() and not in_place and output_path is None and not show_diff
  # Rewritten code owns stdout; diagnostics and logs move to stderr.
  with redirect_to_stderr() if to_stdout else contextlib.nullcontext():
    return _run_fix(input_path, output_path, engine, matcher, in_place, show_diff, export_fixes_path, json_trace_path)


def _run_fix(
  input_path: Path,
  output_path: Optional[Path],
  engine: MigrationEngine,
  matcher: Optional[CallSiteMatcher],
  in_place: bool,
  show_diff: bool,
  export_fixes_path: Optional[Path],
  json_trace_path: Optional[Path],
) -> int:
  batch_results: Dict[str, MigrationResult] = {}

  if input_path.is_file():
    dest = input_path if in_place else output_path
    result = _fix_single_file(input_path, dest, engine, matcher, show_diff)
    batch_results[input_path.name] = result
    if dest is None and not show_diff and result.success:
      print(result.code, end="")

  else:
    if not output_path and not in_place:
      log_warning("No --out or --in-place given; reporting diagnostics only.")

    sources = sorted(p for p in input_path.rglob("*") if p.is_file() and p.suffix in CPP_SUFFIXES)
    if not sources:
      log_warning(f"No C++ sources found in {input_path}")
      return 0

    log_info(f"Processing {len(sources)} files from {input_path}...")
    for src_file in sources:
      rel_path = src_file.relative_to(input_path)
      if in_place:
        dest = src_file
      elif output_path:
        dest = output_path / rel_path
      else:
        dest = None
      batch_results[str(rel_path)] = _fix_single_file(src_file, dest, engine, None, show_diff)

  if export_fixes_path:
    _export_fixes(export_fixes_path, batch_results)

  if json_trace_path:
    _write_trace(json_trace_path, batch_results)

  _print_batch_summary(batch_results)
  return 0 if all(r.success for r in batch_results.values()) else 1


def _fix_single_file(
  input_path: Path,
  output_path: Optional[Path],
  engine: MigrationEngine,
  matcher: Optional[CallSiteMatcher],
  show_diff: bool,
) -> MigrationResult:
  """
  Helper to execute the migration on a single file.

  Args:
      input_path: Source file path.
      output_path: Destination file path (may equal `input_path`).
      engine: Configured engine.
      matcher: Detector, or None for the engine's lexical scanner.
      show_diff: Whether to print a unified diff.

  Returns:
      MigrationResult: Result object containing status and code.
  """
  try:
    with open(input_path, "rt", encoding="utf-8") as f:
      code = f.read()
    result = engine.run(code, matcher)
  except (OSError, UnicodeDecodeError, ValueError) as e:
    log_error(f"Failed to migrate {input_path}: {e}")
    return MigrationResult(success=False, errors=[str(e)])

  for diag in result.diagnostics:
    print_diagnostic(str(input_path), diag.line or 0, diag.column or 0, diag.message, diag.check_name)

  for err in result.errors:
    log_warning(f"{input_path}: {err}")

  if show_diff and result.changed:
    diff = "".join(
      difflib.unified_diff(
        code.splitlines(keepends=True),
        result.code.splitlines(keepends=True),
        fromfile=f"a/{input_path}",
        tofile=f"b/{input_path}",
      )
    )
    console.print(Syntax(diff, "diff", background_color="default"))

  if output_path and (result.changed or output_path != input_path):
    try:
      output_path.parent.mkdir(parents=True, exist_ok=True)
      with open(output_path, "wt", encoding="utf-8") as f:
        f.write(result.code)
    except OSError as e:
      log_error(f"Failed to write {output_path}: {e}")
      result.success = False
      result.errors.append(str(e))
      return result
    if result.changed:
      log_success(f"Rewrote {len(result.fixits)} call(s): [path]{input_path}[/path] -> [path]{output_path}[/path]")

  return result


def _export_fixes(path: Path, results: Dict[str, MigrationResult]) -> None:
  """
  Writes edits and diagnostics of every file to a JSON document.
  """
  payload: Dict[str, Any] = {"files": {}}
  for filename, res in results.items():
    payload["files"][filename] = {
      "passes": [[fixit.model_dump() for fixit in edits] for edits in res.edit_passes],
      "diagnostics": [diag.model_dump() for diag in res.diagnostics],
      "errors": res.errors,
    }

  try:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "wt", encoding="utf-8") as f:
      json.dump(payload, f, indent=2)
    log_info(f"Fixes exported to [path]{path}[/path]")
  except OSError as e:
    log_error(f"Failed to export fixes: {e}")


def _write_trace(path: Path, results: Dict[str, MigrationResult]) -> None:
  events: List[Dict[str, Any]] = []
  for filename, res in results.items():
    events.append({"file": filename, "events": res.trace_events})

  try:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "wt", encoding="utf-8") as f:
      json.dump(events, f, indent=2)
    log_info(f"Trace saved to [path]{path}[/path]")
  except OSError as e:
    log_error(f"Failed to write trace: {e}")


def _print_batch_summary(results: Dict[str, MigrationResult]) -> None:
  """
  Renders a summary table of migration results to the console.

  Args:
      results: Dictionary mapping filenames to migration results.
  """
  total = len(results)
  rewritten = sum(len(r.fixits) for r in results.values())
  issues = {name: r for name, r in results.items() if not r.success or r.has_errors}

  if not issues:
    log_success(f"Batch Complete: {rewritten} call(s) rewritten across {total} file(s).")
    return

  table = Table(title="Migration Report")
  table.add_column("File", style="cyan")
  table.add_column("Status", justify="center")
  table.add_column("Issues", style="red")

  for filename, res in issues.items():
    status = "❌ Failed" if not res.success else "⚠️ Warnings"
    table.add_row(filename, status, "; ".join(res.errors) if res.errors else "Unknown Error")

  console.print(table)
  console.print(f"\n[bold]Summary:[/bold] {rewritten} call(s) rewritten, {len(issues)} file(s) with issues.")
