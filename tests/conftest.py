"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- Trace and console isolation so global logging state does not leak between tests.
- Shared C++ snippets.
"""

import sys
import pytest
from pathlib import Path

# Add src to path so we can import 'mlir_cast_migrator' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from mlir_cast_migrator.core.tracer import reset_tracer  # noqa: E402
from mlir_cast_migrator.utils.console import reset_console  # noqa: E402


@pytest.fixture(autouse=True)
def isolate_global_state():
  """
  Resets the global tracer and console backend around every test.
  """
  reset_tracer()
  yield
  reset_tracer()
  reset_console()


@pytest.fixture
def cpp_source() -> str:
  """A small translation unit exercising dot, arrow and variadic forms."""
  return (
    "void f(Value v, Operation *op) {\n"
    "  auto a = v.dyn_cast<OpResult>();\n"
    "  bool b = op->isa<FooOp, BarOp>();\n"
    "}\n"
  )
