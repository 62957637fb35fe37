"""
Patch Emitter.

Drives one match through the splitter and normalizers and assembles the
replacement:

    replacement = normalized_function + normalized_object + ")"

The closing parenthesis closes the argument list opened inside the function
half. Exactly one `FixIt` spanning the full original call is issued per match,
paired with a fixed diagnostic. Nested or overlapping matches are not
coalesced here.
"""

import logging
from typing import Optional, Tuple

from mlir_cast_migrator.core.normalizers import FunctionNormalizer, normalize_object
from mlir_cast_migrator.core.splitter import literal_call_text, split_call
from mlir_cast_migrator.core.tracer import get_tracer
from mlir_cast_migrator.schema import Diagnostic, FixIt, MatchedCall

logger = logging.getLogger(__name__)

DIAGNOSTIC_MESSAGE = "Casting call is using methods instead of functions https://mlir.llvm.org/deprecation/"
DEFAULT_CHECK_NAME = "misc-mlir-cast"


class PatchEmitter:
  """
  Produces the edit and diagnostic for a single matched call.
  """

  def __init__(self, normalizer: Optional[FunctionNormalizer] = None, check_name: str = DEFAULT_CHECK_NAME):
    self.normalizer = normalizer or FunctionNormalizer()
    self.check_name = check_name

  def build_replacement(
    self,
    call_text: str,
    is_arrow: bool,
    generic_pointer: bool,
    member_name: Optional[str] = None,
    family: Optional[str] = None,
  ) -> str:
    """
    Rewrites the literal text of a method-style cast into free-function form.

    Args:
        call_text (str): Full call text, e.g. `Op.dyn_cast<Foo>()`.
        is_arrow (bool): Whether the receiver is accessed with `->`.
        generic_pointer (bool): Whether the receiver is in the generic-pointer family.
        member_name (str, optional): Matched method name.
        family (str, optional): Matched family name.

    Returns:
        str: e.g. `llvm::dyn_cast<Foo>(Op)`.
    """
    text = literal_call_text(call_text)
    split = split_call(text, is_arrow, member_name)
    obj = normalize_object(split.object_text, split.function_text, is_arrow)
    function = self.normalizer.normalize(split.function_text, generic_pointer, family)
    replacement = function + obj + ")"

    logger.debug("Func: %r and Obj: %r", split.function_text, split.object_text)
    get_tracer().log_rewrite(
      call_text,
      replacement,
      object_text=split.object_text,
      function_text=split.function_text,
    )
    return replacement

  def emit(self, match: MatchedCall) -> Tuple[FixIt, Diagnostic]:
    """
    Issues the edit and diagnostic for one match.

    Args:
        match (MatchedCall): Detector output.

    Returns:
        Tuple[FixIt, Diagnostic]: Replacement spanning `match.full_range` and the
        fixed deprecation warning anchored at the same range.
    """
    replacement = self.build_replacement(
      match.call_text,
      match.is_arrow_access,
      match.is_generic_pointer_family,
      member_name=match.member_name,
      family=match.family,
    )
    fixit = FixIt(range=match.full_range, replacement=replacement)
    diagnostic = Diagnostic(message=DIAGNOSTIC_MESSAGE, range=match.full_range, check_name=self.check_name)
    return fixit, diagnostic
