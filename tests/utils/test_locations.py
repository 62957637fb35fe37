"""
Tests for offset to line/column mapping.
"""

import pytest

from mlir_cast_migrator.utils.locations import LineIndex


@pytest.mark.parametrize(
  "offset,expected",
  [
    (0, (1, 1)),
    (2, (1, 3)),
    (3, (2, 1)),
    (5, (2, 3)),
    (6, (3, 1)),
  ],
)
def test_locate(offset, expected):
  assert LineIndex("ab\ncd\n").locate(offset) == expected


def test_single_line():
  assert LineIndex("x.cast<T>()").locate(4) == (1, 5)
