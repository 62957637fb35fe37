"""
Migration Trace Logger.

Records the step-by-step execution of a migration run:
1. Lifecycle Phases (Scanning, Rewriting, Applying).
2. Rewrites (call text before and after, with the split halves).
3. Skipped edits (overlaps with an already accepted edit).

The output is a structured list of event dictionaries suitable for JSON serialization.
"""

import time
import uuid
from enum import Enum
from typing import Any, Dict, List, Optional
from dataclasses import dataclass, field, asdict


class TraceEventType(str, Enum):
  PHASE_START = "phase_start"
  PHASE_END = "phase_end"
  REWRITE = "rewrite"
  EDIT_SKIPPED = "edit_skipped"
  WARNING = "warning"


@dataclass
class TraceEvent:
  id: str
  type: TraceEventType
  timestamp: float
  description: str
  parent_id: Optional[str] = None
  metadata: Dict[str, Any] = field(default_factory=dict)


class TraceLogger:
  """
  Records migration events for inspection.
  Injected implicitly through `get_tracer()` into the emitter and engine.
  """

  def __init__(self):
    self._events: List[TraceEvent] = []
    self._active_phases: List[str] = []

  def start_phase(self, name: str, description: str = "") -> str:
    """Starts a nested phase (e.g., 'Pass 2'). Returns Phase ID."""
    phase_id = str(uuid.uuid4())
    parent = self._active_phases[-1] if self._active_phases else None

    self._events.append(
      TraceEvent(
        id=phase_id,
        type=TraceEventType.PHASE_START,
        timestamp=time.time(),
        description=name,
        parent_id=parent,
        metadata={"detail": description},
      )
    )
    self._active_phases.append(phase_id)
    return phase_id

  def end_phase(self):
    """Ends the current active phase."""
    if not self._active_phases:
      return

    phase_id = self._active_phases.pop()
    self._events.append(
      TraceEvent(
        id=str(uuid.uuid4()),
        type=TraceEventType.PHASE_END,
        timestamp=time.time(),
        description="End Phase",
        parent_id=phase_id,
      )
    )

  def log_rewrite(self, before: str, after: str, object_text: str = "", function_text: str = ""):
    """Logs one call rewrite."""
    self._log_simple(
      TraceEventType.REWRITE,
      f"Rewrote {before} -> {after}",
      {"before": before, "after": after, "object": object_text, "function": function_text},
    )

  def log_skip(self, replacement: str, begin: int, end: int, reason: str):
    self._log_simple(
      TraceEventType.EDIT_SKIPPED,
      f"Skipped edit at [{begin}, {end})",
      {"replacement": replacement, "begin": begin, "end": end, "reason": reason},
    )

  def log_warning(self, message: str):
    self._log_simple(TraceEventType.WARNING, message, {"level": "warning"})

  def _log_simple(self, evt_type: TraceEventType, desc: str, meta: Dict[str, Any]):
    parent = self._active_phases[-1] if self._active_phases else None
    self._events.append(
      TraceEvent(
        id=str(uuid.uuid4()), type=evt_type, timestamp=time.time(), description=desc, parent_id=parent, metadata=meta
      )
    )

  def export(self) -> List[Dict[str, Any]]:
    """Returns list of dicts for JSON serialization."""
    return [asdict(e) for e in self._events]


_GLOBAL_TRACER = TraceLogger()


def get_tracer() -> TraceLogger:
  return _GLOBAL_TRACER


def reset_tracer():
  global _GLOBAL_TRACER
  _GLOBAL_TRACER = TraceLogger()
