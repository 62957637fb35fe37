"""
Object and Function Text Normalizers.

Turns the two halves produced by the splitter into the pieces of the
free-function call:

    `Ptr->template dyn_cast_or_null<Bar>(`
        object   `Ptr`                     -> `*Ptr`
        function `template dyn_cast_or_null<Bar>(` -> `llvm::dyn_cast_if_present<Bar>(`

Neither normalizer touches the contents of the template argument list or the
argument parentheses.
"""

import logging
import re
from typing import Optional

from mlir_cast_migrator.families import (
  CANONICAL_NULLABLE_CAST,
  DEFAULT_FAMILIES,
  GENERIC_POINTER_LEGACY_SPELLINGS,
  ORDINARY_LEGACY_SPELLINGS,
  FamilyTable,
)

logger = logging.getLogger(__name__)

_TEMPLATE_KEYWORD = re.compile(r"^template\s+")
DEFAULT_NAMESPACE = "llvm::"


def normalize_object(object_text: str, function_text: str, is_arrow: bool) -> str:
  """
  Produces the trailing argument of the rewritten call.

  Arrow access dereferences the receiver, since the free functions take the
  pointee. An arrow call whose function half is empty is an in-class call with
  an implicit `this`; the splitter then leaves the call text in the object half
  and the argument becomes `*this`.

  Args:
      object_text (str): Receiver half from the splitter.
      function_text (str): Method half from the splitter.
      is_arrow (bool): True for `->` access.

  Returns:
      str: Argument text for the free-function call.
  """
  if is_arrow:
    if not function_text.strip():
      return object_text + "*this"
    return "*" + object_text
  return object_text


def _is_identifier_char(char: str) -> bool:
  return char.isalnum() or char == "_"


def _starts_with_name(text: str, name: str) -> bool:
  # Whole-identifier match: `dyn_cast` must not match `dyn_cast_if_present`.
  if not text.startswith(name):
    return False
  return len(text) == len(name) or not _is_identifier_char(text[len(name)])


class FunctionNormalizer:
  """
  Canonicalizes the method half of a call into a qualified free-function head.

  Attributes:
      families (FamilyTable): Tracked families; supplies per-family rename rules.
      namespace_prefix (str): Qualifier injected before the function name.
  """

  def __init__(self, families: Optional[FamilyTable] = None, namespace_prefix: str = DEFAULT_NAMESPACE):
    self.families = families or DEFAULT_FAMILIES
    self.namespace_prefix = namespace_prefix

  def qualify(self, function_text: str) -> str:
    """Prepends the namespace prefix unless already present."""
    if self.namespace_prefix and function_text.startswith(self.namespace_prefix):
      return function_text
    return self.namespace_prefix + function_text

  def legacy_spellings(self, generic_pointer: Optional[bool], family: Optional[str] = None):
    """
    Resolves the legacy nullable-cast spellings for a match.

    The generic-pointer flag decides when given. The family name is only
    consulted when the flag is None.
    """
    if generic_pointer is None:
      entry = self.families.get(family) if family else None
      return entry.legacy_spellings if entry is not None else ORDINARY_LEGACY_SPELLINGS
    return GENERIC_POINTER_LEGACY_SPELLINGS if generic_pointer else ORDINARY_LEGACY_SPELLINGS

  def normalize(self, function_text: str, generic_pointer: Optional[bool], family: Optional[str] = None) -> str:
    """
    Strips qualifiers, renames legacy spellings and injects the namespace.

    Args:
        function_text (str): Method half, e.g. `template dyn_cast<Foo>(`.
        generic_pointer (Optional[bool]): Whether the receiver is in the generic-pointer family.
          None defers to `family`.
        family (str, optional): Family name to look up rename rules when the flag is None.

    Returns:
        str: Qualified function head, e.g. `llvm::dyn_cast_if_present<Foo>(`.
        Only the namespace prefix when no function name could be isolated.
    """
    text = _TEMPLATE_KEYWORD.sub("", function_text.lstrip()).strip()

    if self.namespace_prefix and text.startswith(self.namespace_prefix):
      bare = text[len(self.namespace_prefix) :]
    else:
      bare = text

    if not _starts_with_name(bare, CANONICAL_NULLABLE_CAST):
      for spelling in self.legacy_spellings(generic_pointer, family):
        if _starts_with_name(bare, spelling):
          renamed = CANONICAL_NULLABLE_CAST + bare[len(spelling) :]
          logger.debug("Renamed %s -> %s", spelling, CANONICAL_NULLABLE_CAST)
          return self.qualify(renamed)

    # In-class call: the name stayed in the object half, rely on the
    # qualifier plus the `*this` argument.
    if not bare:
      return self.namespace_prefix

    return self.qualify(bare)
