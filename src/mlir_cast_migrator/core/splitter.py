"""
Call Splitter.

Partitions the literal text of a matched call into the receiver ("object")
half and the method-call ("function") half, without parsing either.

The split point is the *rightmost* access separator (`.` or `->`). This is a
lexical heuristic: a receiver whose own text contains that separator after the
true split point (e.g. `a.b<c.d>()`) is split in the wrong place. Variadic
`isa` packs are the one recognised exception, since the pack expansion `...`
itself contains dots.

Text convention:
    The splitter works on the call text *without* its final closing
    parenthesis (`Op.dyn_cast<Foo>(`), which the patch emitter re-emits after
    the object argument. `literal_call_text` derives it from the full source
    text of the call.
"""

import logging
from typing import Optional, Tuple

from mlir_cast_migrator.enums import AccessStyle, CastMethod
from mlir_cast_migrator.schema import SplitResult

logger = logging.getLogger(__name__)

ELLIPSIS = "..."


def literal_call_text(call_text: str) -> str:
  """
  Drops the closing parenthesis of a complete call.

  Args:
      call_text (str): Full source of the call, e.g. `Op.cast<Foo>()`.

  Returns:
      str: `Op.cast<Foo>(`. Text not ending in `)` is returned unchanged.
  """
  stripped = call_text.rstrip()
  if stripped.endswith(")"):
    return stripped[:-1]
  return call_text


def _rsplit(text: str, separator: str) -> Tuple[str, str]:
  # Missing separator: everything is the object half.
  idx = text.rfind(separator)
  if idx < 0:
    return text, ""
  return text[:idx], text[idx + len(separator) :]


def split_call(text: str, is_arrow: bool, member_name: Optional[str] = None) -> SplitResult:
  """
  Splits call text into object and function halves.

  Args:
      text (str): Call text without its closing parenthesis.
      is_arrow (bool): True for `->` access, False for `.` access.
      member_name (str, optional): Matched method name, used for tracing only.

  Returns:
      SplitResult: `object_text` before the separator, `function_text` after it
      (method name, template arguments, opening parenthesis).
  """
  separator = AccessStyle.from_arrow(is_arrow).value
  isa = CastMethod.ISA.value

  if ELLIPSIS in text and isa in text:
    isa_separator = separator + isa
    if isa_separator in text:
      obj, rest = _rsplit(text, isa_separator)
      logger.debug("Variadic isa split (%s): obj=%r func=%r", member_name, obj, isa + rest)
      return SplitResult(object_text=obj, function_text=isa + rest)

  obj, function = _rsplit(text, separator)
  logger.debug("Split (%s): obj=%r func=%r", member_name, obj, function)
  return SplitResult(object_text=obj, function_text=function)


def join_split(split: SplitResult, is_arrow: bool) -> str:
  """
  Inverse of `split_call` for calls that contained a separator.
  """
  return split.object_text + AccessStyle.from_arrow(is_arrow).value + split.function_text


def infer_arrow(call_text: str) -> bool:
  """
  Guesses the access style of a call given only as text.

  The separator occurring last wins; pack expansions are ignored.
  """
  text = call_text.replace(ELLIPSIS, "")
  return text.rfind(AccessStyle.ARROW.value) > text.rfind(AccessStyle.DOT.value)
