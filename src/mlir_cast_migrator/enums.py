"""
Enumerations for mlir-cast-migrator.

This module defines the method names tracked by the migration and the two
member-access styles a deprecated call can be written with.
"""

from enum import Enum


class CastMethod(str, Enum):
  """
  Member functions that have a free-function replacement.

  `DYN_CAST_OR_NULL` is a legacy spelling; it is rewritten to the canonical
  nullable cast (`dyn_cast_if_present`) rather than kept verbatim.
  """

  CAST = "cast"
  DYN_CAST = "dyn_cast"
  ISA = "isa"
  DYN_CAST_OR_NULL = "dyn_cast_or_null"

  @classmethod
  def tracked(cls) -> frozenset:
    return frozenset(m.value for m in cls)


class AccessStyle(str, Enum):
  """
  How the receiver is accessed at the call site.
  """

  DOT = "."
  ARROW = "->"

  @classmethod
  def from_arrow(cls, is_arrow: bool) -> "AccessStyle":
    return cls.ARROW if is_arrow else cls.DOT
