"""
Offset to line/column conversion.
"""

import bisect
from typing import List, Tuple


class LineIndex:
  """
  Maps character offsets of a buffer to 1-based (line, column) pairs.
  """

  def __init__(self, source: str):
    self._starts: List[int] = [0]
    for i, char in enumerate(source):
      if char == "\n":
        self._starts.append(i + 1)

  def locate(self, offset: int) -> Tuple[int, int]:
    line = bisect.bisect_right(self._starts, offset) - 1
    return line + 1, offset - self._starts[line] + 1
