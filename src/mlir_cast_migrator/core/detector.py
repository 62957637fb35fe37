"""
Detector Capability Interface.

The rewrite core does not locate call sites itself; it consumes matches from a
`CallSiteMatcher`. Two front ends ship with the package:

- `RecordedMatches` (this module): matches exported as JSON by an external
  AST-aware front end, which knows static receiver types.
- `LexicalCallScanner` (`core/scanner.py`): a best-effort text scanner for
  explicit receivers.
"""

import json
import logging
from pathlib import Path
from typing import Any, Iterable, Iterator, List, Optional, Protocol, Sequence

from pydantic import ValidationError

from mlir_cast_migrator.enums import CastMethod
from mlir_cast_migrator.families import DEFAULT_FAMILIES, FamilyTable
from mlir_cast_migrator.schema import MatchedCall, RecordedMatch, SourceRange

logger = logging.getLogger(__name__)


class CallSiteMatcher(Protocol):
  """
  Anything that can report deprecated cast calls in a source buffer.

  Attributes:
      rescannable (bool): True if matching a rewritten buffer again is meaningful.
          Offset-based recordings are only valid for the buffer they were made on.
  """

  rescannable: bool

  def match_call_sites(self, source: str) -> Iterable[MatchedCall]: ...


class RecordedMatches:
  """
  Replays matches recorded by an external front end.

  Records naming an untracked method or a receiver type outside the family table
  are dropped. Receiver types are classified by qualified-name prefix.
  """

  rescannable = False

  def __init__(self, records: Sequence[RecordedMatch], families: Optional[FamilyTable] = None):
    self.records = list(records)
    self.families = families or DEFAULT_FAMILIES

  @classmethod
  def from_data(cls, data: Any, families: Optional[FamilyTable] = None) -> "RecordedMatches":
    """
    Validates raw JSON data.

    Accepts either a list of records or an object with a `matches` list.

    Raises:
        ValueError: If the data does not describe valid match records.
    """
    if isinstance(data, dict):
      data = data.get("matches", [])
    if not isinstance(data, list):
      raise ValueError(f"Expected a list of match records, got {type(data).__name__}")

    try:
      records = [RecordedMatch.model_validate(item) for item in data]
    except ValidationError as e:
      raise ValueError(f"Invalid match record: {e}") from e
    return cls(records, families)

  @classmethod
  def from_json(cls, path: Path, families: Optional[FamilyTable] = None) -> "RecordedMatches":
    """
    Loads recorded matches from a JSON file.

    Raises:
        ValueError: If the file is not valid JSON or holds invalid records.
    """
    try:
      with open(path, "rt", encoding="utf-8") as f:
        data = json.load(f)
    except json.JSONDecodeError as e:
      raise ValueError(f"Corrupt match file {path}: {e}") from e
    return cls.from_data(data, families)

  def match_call_sites(self, source: str) -> Iterator[MatchedCall]:
    tracked = CastMethod.tracked()
    for record in self.records:
      if record.member not in tracked:
        logger.debug("Skipping untracked member '%s'", record.member)
        continue

      family = self.families.classify(record.receiver_type)
      if family is None:
        logger.debug("Skipping untracked receiver type '%s'", record.receiver_type)
        continue

      if record.end > len(source) or record.end <= record.begin:
        logger.warning("Match [%d, %d) lies outside the source buffer; skipped", record.begin, record.end)
        continue

      yield MatchedCall(
        full_range=SourceRange(begin=record.begin, end=record.end),
        call_text=source[record.begin : record.end],
        member_name=record.member,
        is_arrow_access=record.arrow,
        is_generic_pointer_family=family.generic_pointer,
        family=family.name,
      )


def collect(matcher: CallSiteMatcher, source: str) -> List[MatchedCall]:
  return list(matcher.match_call_sites(source))
