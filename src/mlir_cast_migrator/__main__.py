"""
Entry point for module execution (``python -m mlir_cast_migrator``).

This module delegates execution to the CLI handler in ``mlir_cast_migrator.cli.__main__``.
"""

import sys
from mlir_cast_migrator.cli.__main__ import main

if __name__ == "__main__":
  sys.exit(main())
