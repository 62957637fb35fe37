"""
Families Command Handler.

Prints the compiled-in table of tracked type families.
"""

from rich.table import Table

from mlir_cast_migrator.enums import CastMethod
from mlir_cast_migrator.families import CANONICAL_NULLABLE_CAST, DEFAULT_FAMILIES, FamilyTable
from mlir_cast_migrator.utils.console import console


def handle_families(families: FamilyTable = DEFAULT_FAMILIES) -> int:
  table = Table(title="Tracked Cast Families")
  table.add_column("Family", style="cyan")
  table.add_column("Generic Pointer", justify="center")
  table.add_column(f"Renamed to {CANONICAL_NULLABLE_CAST}", style="magenta")

  for family in families.families:
    table.add_row(
      family.name,
      "✅" if family.generic_pointer else "",
      ", ".join(family.legacy_spellings),
    )

  console.print(table)
  console.print(f"Tracked methods: {', '.join(sorted(CastMethod.tracked()))}")
  return 0
