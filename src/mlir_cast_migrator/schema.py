"""
Pydantic Schemas for Matches and Edits.

This module defines the records exchanged between the detector front ends, the
rewrite core, and the patch/diagnostic layer:

- `MatchedCall`: one deprecated call site reported by a detector.
- `SplitResult`: the object and function halves of a call's literal text.
- `FixIt` / `Diagnostic`: the single edit and warning produced per match.
- `RecordedMatch`: the JSON record shape exported by external AST front ends.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class SourceRange(BaseModel):
  """
  Half-open character span `[begin, end)` within a source buffer.
  """

  model_config = ConfigDict(frozen=True)

  begin: int = Field(..., ge=0)
  end: int = Field(..., ge=0)

  @model_validator(mode="after")
  def _check_order(self) -> "SourceRange":
    if self.end < self.begin:
      raise ValueError(f"Range end ({self.end}) precedes begin ({self.begin})")
    return self

  def overlaps(self, other: "SourceRange") -> bool:
    return self.begin < other.end and other.begin < self.end


class MatchedCall(BaseModel):
  """
  A single deprecated method-style cast located by a detector.

  `call_text` is the literal source of `full_range`, closing parenthesis
  included. Matches are immutable and consumed exactly once.
  """

  model_config = ConfigDict(frozen=True)

  full_range: SourceRange
  call_text: str
  member_name: str
  is_arrow_access: bool = False
  is_generic_pointer_family: bool = False
  family: Optional[str] = Field(None, description="Qualified family name, informational only.")


class SplitResult(BaseModel):
  """
  Object and function halves of a call's literal text.
  """

  model_config = ConfigDict(frozen=True)

  object_text: str
  function_text: str


class FixIt(BaseModel):
  """
  A single text replacement over the original source.
  """

  model_config = ConfigDict(frozen=True)

  range: SourceRange
  replacement: str


class Diagnostic(BaseModel):
  """
  A warning attached to a rewritten call.

  `line` and `column` are 1-based and only populated once the diagnostic is
  located in a concrete source buffer.
  """

  model_config = ConfigDict(frozen=True)

  message: str
  range: SourceRange
  check_name: str = "misc-mlir-cast"
  line: Optional[int] = None
  column: Optional[int] = None


class RecordedMatch(BaseModel):
  """
  One match as exported by an external AST front end.

  Example:
      {"begin": 120, "end": 141, "member": "dyn_cast", "arrow": false,
       "receiver_type": "::mlir::Value"}
  """

  begin: int = Field(..., ge=0)
  end: int = Field(..., ge=0)
  member: str
  arrow: bool = False
  receiver_type: str = Field(..., description="Qualified static type of the receiver.")
