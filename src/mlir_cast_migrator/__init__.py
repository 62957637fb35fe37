"""
mlir-cast-migrator Package.

Rewrites deprecated method-style casts on MLIR types (`obj.cast<T>()`,
`ptr->dyn_cast<T>()`, `val.isa<A, B>()`, `x.dyn_cast_or_null<T>()`) into the
free-function forms (`llvm::cast<T>(obj)`, `llvm::dyn_cast<T>(*ptr)`, ...).

Usage
-----

Single Call
^^^^^^^^^^^

.. code-block:: python

    import mlir_cast_migrator as mcm
    print(mcm.rewrite("Op.dyn_cast_or_null<Foo>()"))
    # llvm::dyn_cast_if_present<Foo>(Op)

Whole Buffer (Engine)
^^^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    from mlir_cast_migrator import MigrationEngine, RuntimeConfig

    engine = MigrationEngine(RuntimeConfig(generic_pointer_receivers=["Union$"]))
    res = engine.run(cpp_source)
    for diag in res.diagnostics:
        print(diag.line, diag.column, diag.message)
"""

from typing import Optional

from mlir_cast_migrator.config import RuntimeConfig
from mlir_cast_migrator.core.engine import MigrationEngine, MigrationResult
from mlir_cast_migrator.core.splitter import infer_arrow
from mlir_cast_migrator.families import DEFAULT_FAMILIES

__version__ = "0.1.0"


def rewrite(call_text: str, arrow: Optional[bool] = None, family: str = "::mlir::Value") -> str:
  """
  Rewrites one method-style cast call into free-function form.

  Args:
      call_text (str): The full call, e.g. `Ptr->cast<Bar>()`.
      arrow (bool, optional): Access style. If None, it is inferred from
          whichever separator (`->` or `.`) occurs last in the text.
      family (str): Receiver family name (see `DEFAULT_FAMILIES`).

  Returns:
      str: The rewritten call.

  Raises:
      ValueError: If the family is not tracked.
  """
  if arrow is None:
    arrow = infer_arrow(call_text)
  engine = MigrationEngine(RuntimeConfig(default_family=family))
  return engine.rewrite_text(call_text, is_arrow=arrow, family=family)


__all__ = [
  "DEFAULT_FAMILIES",
  "MigrationEngine",
  "MigrationResult",
  "RuntimeConfig",
  "rewrite",
  "__version__",
]
