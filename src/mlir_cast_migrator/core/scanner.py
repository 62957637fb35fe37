"""
Lexical Call-Site Scanner.

A best-effort detector for buffers without an AST front end. It finds
`receiver.member<...>(...)` and `receiver->template member<...>(...)` where
`member` is one of the tracked cast methods, and reports each as a
`MatchedCall`.

Limitations:
- Receiver types are unknown. Every receiver gets the configured default
  family unless its text matches one of the generic-pointer receiver patterns.
- Calls with an implicit `this` receiver (bare `isa<T>()` inside a class) are
  not reported.
- The receiver may not contain whitespace outside brackets, except before
  the separator itself.
- Calls containing a `...` pack expansion are skipped unless the member is
  `isa`. The splitter would take the ellipsis dot as the member separator.

Comments and string/character literals are blanked out before scanning so
matches never start inside them.
"""

import logging
import re
from typing import Iterator, Optional, Sequence

from mlir_cast_migrator.families import DEFAULT_FAMILIES, CastFamily, FamilyTable
from mlir_cast_migrator.enums import CastMethod
from mlir_cast_migrator.schema import MatchedCall, SourceRange

logger = logging.getLogger(__name__)

_CALL_HEAD = re.compile(r"(?P<sep>\.|->)\s*(?:template\s+)?(?P<member>dyn_cast_or_null|dyn_cast|cast|isa)\s*<")

_NON_CODE = re.compile(
  r"//[^\n]*|/\*.*?\*/|\"(?:\\.|[^\"\\\n])*\"|'(?:\\.|[^'\\\n])*'",
  re.DOTALL,
)

_STOP_CHARS = ";{}"
_OPENERS = {")": "(", "]": "["}


def mask_non_code(source: str) -> str:
  """
  Replaces comments and literals with spaces, keeping offsets and newlines.
  """
  return _NON_CODE.sub(lambda m: re.sub(r"[^\n]", " ", m.group(0)), source)


def _is_ident(char: str) -> bool:
  return char.isalnum() or char == "_"


def _match_back(text: str, close_idx: int) -> Optional[int]:
  """Index of the bracket opening the one at `close_idx`, or None."""
  close = text[close_idx]
  opener = _OPENERS[close]
  depth = 0
  for i in range(close_idx, -1, -1):
    char = text[i]
    if char in _STOP_CHARS:
      return None
    if char == close:
      depth += 1
    elif char == opener:
      depth -= 1
      if depth == 0:
        return i
  return None


def _match_back_angle(text: str, close_idx: int) -> Optional[int]:
  # Template-id receivers such as `getAs<Foo>()`; must sit on one line and
  # be preceded by an identifier.
  depth = 0
  for i in range(close_idx, -1, -1):
    char = text[i]
    if char in _STOP_CHARS or char == "\n":
      return None
    if char == ">" and not (i > 0 and text[i - 1] == "-"):
      depth += 1
    elif char == "<":
      depth -= 1
      if depth == 0:
        return i if i > 0 and _is_ident(text[i - 1]) else None
  return None


def find_receiver_start(text: str, sep_start: int) -> int:
  """
  Walks backwards from a member-access separator to the start of its receiver.

  Crosses identifiers, `.`, `->`, `::`, balanced `()`/`[]` and template
  argument lists. Whitespace is only allowed between the receiver and the
  separator (`value\\n    .cast<T>()`).

  Args:
      text (str): Masked source.
      sep_start (int): Offset of the `.` or `->` introducing the call.

  Returns:
      int: Offset of the receiver's first character (`sep_start` if none).
  """
  j = sep_start
  while j > 0 and text[j - 1].isspace():
    j -= 1
  anchor = j

  while j > 0:
    char = text[j - 1]
    if _is_ident(char):
      j -= 1
    elif char in _OPENERS:
      opened = _match_back(text, j - 1)
      if opened is None:
        break
      j = opened
    elif text[max(j - 2, 0) : j] in ("->", "::"):
      j -= 2
    elif char == "." and text[max(j - 2, 0) : j] != "..":
      j -= 1
    elif char == ">":
      opened = _match_back_angle(text, j - 1)
      if opened is None:
        break
      j = opened
    else:
      break
  return j if j < anchor else sep_start


def _skip_template_args(text: str, open_idx: int) -> Optional[int]:
  """Offset just past the `>` closing the `<` at `open_idx`."""
  depth = 0
  parens = 0
  i = open_idx
  while i < len(text):
    char = text[i]
    if char in _STOP_CHARS:
      return None
    if char == "(":
      parens += 1
    elif char == ")":
      parens -= 1
      if parens < 0:
        return None
    elif parens == 0 and char == "<":
      depth += 1
    elif parens == 0 and char == ">" and text[i - 1] != "-":
      depth -= 1
      if depth == 0:
        return i + 1
    i += 1
  return None


def _skip_call_args(text: str, open_idx: int) -> Optional[int]:
  """Offset just past the `)` closing the `(` at `open_idx`."""
  depth = 0
  for i in range(open_idx, len(text)):
    char = text[i]
    if char in "{}":
      return None
    if char == "(":
      depth += 1
    elif char == ")":
      depth -= 1
      if depth == 0:
        return i + 1
  return None


class LexicalCallScanner:
  """
  Regex-and-bracket scanner implementing the `CallSiteMatcher` interface.

  Args:
      families (FamilyTable, optional): Table used to resolve family names.
      default_family (str): Family assigned to receivers not matching any pattern.
      generic_pointer_receivers (Sequence[str]): Regexes selecting generic-pointer receivers.
  """

  rescannable = True

  def __init__(
    self,
    families: Optional[FamilyTable] = None,
    default_family: str = "::mlir::Value",
    generic_pointer_receivers: Sequence[str] = (),
  ):
    self.families = families or DEFAULT_FAMILIES
    self.default_family = self.families.require(default_family)
    self.generic_pointer_receivers = [re.compile(p) for p in generic_pointer_receivers]
    generic = [f for f in self.families.families if f.generic_pointer]
    self.generic_family: Optional[CastFamily] = generic[0] if generic else None

  def family_for(self, receiver: str) -> CastFamily:
    if self.generic_family and any(p.search(receiver) for p in self.generic_pointer_receivers):
      return self.generic_family
    return self.default_family

  def match_call_sites(self, source: str) -> Iterator[MatchedCall]:
    masked = mask_non_code(source)
    for head in _CALL_HEAD.finditer(masked):
      sep_start = head.start("sep")
      begin = find_receiver_start(masked, sep_start)
      if begin == sep_start:
        continue

      args_open = _skip_template_args(masked, head.end() - 1)
      if args_open is None:
        continue
      while args_open < len(masked) and masked[args_open].isspace():
        args_open += 1
      if args_open >= len(masked) or masked[args_open] != "(":
        continue
      end = _skip_call_args(masked, args_open)
      if end is None:
        continue

      member = head.group("member")
      if member != CastMethod.ISA.value and "..." in masked[begin:end]:
        logger.debug("Skipping pack expansion in %r", source[begin:end])
        continue

      receiver = source[begin:sep_start]
      family = self.family_for(receiver)
      yield MatchedCall(
        full_range=SourceRange(begin=begin, end=end),
        call_text=source[begin:end],
        member_name=member,
        is_arrow_access=head.group("sep") == "->",
        is_generic_pointer_family=family.generic_pointer,
        family=family.name,
      )
