"""
Orchestration Engine for Cast Migrations.

This module provides the `MigrationEngine`, which drives a detector over a
source buffer and applies the resulting edits.

The pipeline for one buffer:

1.  **Matching**: the `CallSiteMatcher` reports deprecated cast calls.
2.  **Rewriting**: each match is handed to the `PatchEmitter`, independently
    and statelessly, producing one `FixIt` and one `Diagnostic`.
3.  **Applying**: edits are applied outermost-first. An edit overlapping one
    already accepted in the same pass is skipped; the emitter never coalesces
    nested matches.
4.  **Re-scanning**: when the matcher can re-scan rewritten text, steps 1-3
    repeat until no match remains (or `max_passes` is reached), so nested
    calls such as `a.cast<B>().dyn_cast<C>()` converge in a few passes.
"""

from typing import Any, Dict, List, Optional, Tuple
from pydantic import BaseModel, Field

from mlir_cast_migrator.config import RuntimeConfig
from mlir_cast_migrator.core.detector import CallSiteMatcher, collect
from mlir_cast_migrator.core.emitter import PatchEmitter
from mlir_cast_migrator.core.normalizers import FunctionNormalizer
from mlir_cast_migrator.core.scanner import LexicalCallScanner
from mlir_cast_migrator.core.tracer import get_tracer, reset_tracer
from mlir_cast_migrator.families import DEFAULT_FAMILIES, FamilyTable
from mlir_cast_migrator.schema import Diagnostic, FixIt, MatchedCall, SourceRange
from mlir_cast_migrator.utils.locations import LineIndex


class MigrationResult(BaseModel):
  """
  Structured result of migrating a single buffer.
  """

  code: str = Field(default="", description="The rewritten source code.")
  edit_passes: List[List[FixIt]] = Field(
    default_factory=list,
    description="Accepted edits per pass; offsets refer to the buffer at the start of that pass.",
  )
  diagnostics: List[Diagnostic] = Field(default_factory=list)
  errors: List[str] = Field(default_factory=list, description="Warnings about edits that were not applied.")
  success: bool = Field(default=True)
  trace_events: List[Dict[str, Any]] = Field(default_factory=list)

  @property
  def fixits(self) -> List[FixIt]:
    return [fixit for edits in self.edit_passes for fixit in edits]

  @property
  def changed(self) -> bool:
    return bool(self.fixits)

  @property
  def has_errors(self) -> bool:
    return len(self.errors) > 0


def apply_fixits(source: str, fixits: List[FixIt]) -> Tuple[str, List[FixIt], List[FixIt]]:
  """
  Applies non-overlapping edits to a buffer.

  Edits are considered in (begin, longest-first) order so that an outer call
  wins over calls nested in its receiver.

  Args:
      source (str): Original buffer.
      fixits (List[FixIt]): Candidate edits with offsets into `source`.

  Returns:
      Tuple[str, List[FixIt], List[FixIt]]: New buffer, accepted edits, skipped edits.
  """
  accepted: List[FixIt] = []
  skipped: List[FixIt] = []
  for fixit in sorted(fixits, key=lambda f: (f.range.begin, -f.range.end)):
    if any(fixit.range.overlaps(other.range) for other in accepted):
      skipped.append(fixit)
      continue
    accepted.append(fixit)

  pieces: List[str] = []
  cursor = 0
  for fixit in accepted:
    pieces.append(source[cursor : fixit.range.begin])
    pieces.append(fixit.replacement)
    cursor = fixit.range.end
  pieces.append(source[cursor:])
  return "".join(pieces), accepted, skipped


class MigrationEngine:
  """
  The main migration unit.

  Owns the emitter (built from the family table and configuration) and runs
  matchers over buffers.
  """

  def __init__(self, config: Optional[RuntimeConfig] = None, families: Optional[FamilyTable] = None):
    """
    Initializes the Engine.

    Args:
        config (RuntimeConfig, optional): Runtime settings. Defaults are used if None.
        families (FamilyTable, optional): Tracked families. Defaults to the built-in table.
    """
    self.config = config or RuntimeConfig()
    self.families = families or DEFAULT_FAMILIES
    normalizer = FunctionNormalizer(self.families, self.config.namespace_prefix)
    self.emitter = PatchEmitter(normalizer, check_name=self.config.check_name)

  def default_matcher(self) -> LexicalCallScanner:
    return LexicalCallScanner(
      families=self.families,
      default_family=self.config.default_family,
      generic_pointer_receivers=self.config.generic_pointer_receivers,
    )

  def rewrite_call(self, match: MatchedCall) -> Tuple[FixIt, Diagnostic]:
    return self.emitter.emit(match)

  def rewrite_text(self, call_text: str, is_arrow: bool = False, family: Optional[str] = None) -> str:
    """
    Rewrites a single call given as text.

    Args:
        call_text (str): e.g. `Ptr->dyn_cast<Bar>()`.
        is_arrow (bool): Whether the call uses `->`.
        family (str, optional): Receiver family name. Defaults to the configured default.

    Returns:
        str: The free-function form.

    Raises:
        ValueError: If the family is unknown.
    """
    entry = self.families.require(family or self.config.default_family)
    match = MatchedCall(
      full_range=SourceRange(begin=0, end=len(call_text)),
      call_text=call_text,
      member_name="",
      is_arrow_access=is_arrow,
      is_generic_pointer_family=entry.generic_pointer,
      family=entry.name,
    )
    fixit, _ = self.rewrite_call(match)
    return fixit.replacement

  def run(self, source: str, matcher: Optional[CallSiteMatcher] = None) -> MigrationResult:
    """
    Migrates every matched call in a buffer.

    Args:
        source (str): The source buffer.
        matcher (CallSiteMatcher, optional): Detector. Defaults to the lexical scanner.

    Returns:
        MigrationResult: Rewritten code, applied edits, diagnostics and warnings.
    """
    reset_tracer()
    tracer = get_tracer()
    matcher = matcher or self.default_matcher()
    max_passes = self.config.max_passes if matcher.rescannable else 1

    result = MigrationResult(code=source)
    code = source

    for pass_index in range(max_passes):
      tracer.start_phase(f"Pass {pass_index + 1}")
      matches = collect(matcher, code)
      if not matches:
        tracer.end_phase()
        break

      emitted = [self.rewrite_call(m) for m in matches]
      new_code, accepted, skipped = apply_fixits(code, [fixit for fixit, _ in emitted])

      index = LineIndex(code)
      accepted_ids = {id(f) for f in accepted}
      for fixit, diagnostic in emitted:
        if id(fixit) not in accepted_ids:
          continue
        line, column = index.locate(diagnostic.range.begin)
        result.diagnostics.append(diagnostic.model_copy(update={"line": line, "column": column}))

      for fixit in skipped:
        tracer.log_skip(fixit.replacement, fixit.range.begin, fixit.range.end, "overlaps an accepted edit")
        if not matcher.rescannable:
          line, column = index.locate(fixit.range.begin)
          result.errors.append(f"{line}:{column}: overlapping edit skipped ({fixit.replacement})")

      result.edit_passes.append(accepted)
      code = new_code
      tracer.end_phase()
    else:
      pending = collect(matcher, code) if matcher.rescannable else []
      if pending:
        msg = f"Pass limit ({max_passes}) reached with {len(pending)} call(s) left unrewritten"
        tracer.log_warning(msg)
        result.errors.append(msg)

    result.code = code
    result.trace_events = tracer.export()
    return result
