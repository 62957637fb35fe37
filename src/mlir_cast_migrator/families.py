"""
Tracked Type Families.

The receiver types whose cast methods are deprecated form a fixed table. Each
entry records whether the family uses generic-pointer renaming, i.e. whether
its historical "tolerant cast" spelling was `dyn_cast` (as on `PointerUnion`)
rather than `dyn_cast_or_null`.

The table is immutable and handed to the function normalizer at construction,
so alternate tables are plain test data.
"""

from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

CANONICAL_NULLABLE_CAST = "dyn_cast_if_present"

# Legacy nullable-cast spellings, longest first so `dyn_cast_or_null` is never
# consumed as `dyn_cast` followed by a stray `_or_null`.
ORDINARY_LEGACY_SPELLINGS: Tuple[str, ...] = ("dyn_cast_or_null",)
GENERIC_POINTER_LEGACY_SPELLINGS: Tuple[str, ...] = ("dyn_cast_or_null", "dyn_cast")


class CastFamily(BaseModel):
  """
  A type family supporting the functional cast free functions.
  """

  model_config = ConfigDict(frozen=True)

  name: str = Field(..., description="Fully qualified type name, e.g. '::mlir::Value'.")
  generic_pointer: bool = Field(False, description="If True, `dyn_cast` is renamed to the canonical nullable cast.")

  @property
  def short_name(self) -> str:
    """Unqualified name (`Value` for `::mlir::Value`)."""
    return self.name.rsplit("::", 1)[-1]

  @property
  def legacy_spellings(self) -> Tuple[str, ...]:
    return GENERIC_POINTER_LEGACY_SPELLINGS if self.generic_pointer else ORDINARY_LEGACY_SPELLINGS


class FamilyTable(BaseModel):
  """
  Immutable lookup table of tracked families.
  """

  model_config = ConfigDict(frozen=True)

  families: Tuple[CastFamily, ...] = Field(default_factory=tuple)

  def get(self, name: str) -> Optional[CastFamily]:
    """
    Finds a family by qualified or unqualified name.

    Args:
        name (str): '::mlir::Value', 'mlir::Value' or 'Value'.

    Returns:
        Optional[CastFamily]: The entry, or None when untracked.
    """
    needle = name.strip()
    for family in self.families:
      if needle in (family.name, family.name.lstrip(":"), family.short_name):
        return family
    return None

  def require(self, name: str) -> CastFamily:
    family = self.get(name)
    if family is None:
      known = ", ".join(f.name for f in self.families)
      raise ValueError(f"Unknown cast family: '{name}'. Known families: {known}")
    return family

  def classify(self, type_name: str) -> Optional[CastFamily]:
    """
    Classifies a receiver type by qualified-name prefix.

    Detector front ends match declarations with anchored patterns such as
    `^::mlir::Op`, so subclasses and templated names (`::mlir::OpState`,
    `::llvm::PointerUnion<A *, B *>`) belong to the family whose name they
    start with. The longest matching family name wins.

    Args:
        type_name (str): Receiver type as spelled by the front end.

    Returns:
        Optional[CastFamily]: Matching family or None.
    """
    qualified = type_name.strip()
    if not qualified.startswith("::"):
      qualified = "::" + qualified

    best: Optional[CastFamily] = None
    for family in self.families:
      if qualified.startswith(family.name):
        if best is None or len(family.name) > len(best.name):
          best = family
    return best

  def generic_pointer_names(self) -> List[str]:
    return [f.name for f in self.families if f.generic_pointer]


DEFAULT_FAMILIES = FamilyTable(
  families=(
    CastFamily(name="::mlir::Attribute"),
    CastFamily(name="::mlir::Op"),
    CastFamily(name="::mlir::Type"),
    CastFamily(name="::mlir::Value"),
    CastFamily(name="::mlir::OpFoldResult"),
    CastFamily(name="::llvm::PointerUnion", generic_pointer=True),
  )
)
