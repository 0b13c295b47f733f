"""
Traversal Trace Logger.

Records what a visit did, as a flat list of events grouped under phases (one
phase per pass):

- ``node_visit``: a structural node was entered, with its depth and whether a
  handler ran.
- ``node_replace`` / ``node_prune``: a path capability was used.
- ``expression_mutation``: an embedded expression or the script came back
  rewritten from LibCST.
- ``warning``: e.g. an unknown tag while ``warn_unknown_kinds`` is on.

``export()`` yields plain dictionaries suitable for JSON serialization.
"""

import time
import uuid
from collections import Counter
from contextlib import contextmanager
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional


class TraceEventType(str, Enum):
  PHASE_START = "phase_start"
  PHASE_END = "phase_end"
  NODE_VISIT = "node_visit"
  NODE_REPLACE = "node_replace"
  NODE_PRUNE = "node_prune"
  EXPRESSION_MUTATION = "expression_mutation"
  WARNING = "warning"


@dataclass
class TraceEvent:
  id: str
  type: TraceEventType
  description: str
  parent_id: Optional[str] = None
  timestamp: float = field(default_factory=time.time)
  metadata: Dict[str, Any] = field(default_factory=dict)


class TraceLogger:
  """
  Event recorder handed to the walker, the paths and the bridge when
  ``WalkerConfig.trace`` is set.
  """

  def __init__(self) -> None:
    self._events: List[TraceEvent] = []
    self._open: List[str] = []

  @property
  def current_phase(self) -> Optional[str]:
    return self._open[-1] if self._open else None

  def start_phase(self, name: str, description: str = "") -> str:
    """
    Opens a phase nested in the current one.

    Args:
        name: Label of the phase, e.g. 'Markup Pass'.
        description: Free-form detail stored in the metadata.

    Returns:
        str: The phase id, used as ``parent_id`` by events inside it.
    """
    event = self._record(TraceEventType.PHASE_START, name, {"detail": description})
    self._open.append(event.id)
    return event.id

  def end_phase(self) -> None:
    """Closes the innermost open phase. Does nothing when none is open."""
    if not self._open:
      return
    phase_id = self._open.pop()
    self._events.append(TraceEvent(id=_new_id(), type=TraceEventType.PHASE_END, description="End Phase", parent_id=phase_id))

  @contextmanager
  def phase(self, name: str, description: str = "") -> Iterator[str]:
    """Opens a phase for the duration of a ``with`` block, closing it on error too."""
    phase_id = self.start_phase(name, description)
    try:
      yield phase_id
    finally:
      self.end_phase()

  def log_visit(self, node_kind: str, depth: int, handled: bool) -> None:
    self._record(TraceEventType.NODE_VISIT, f"Visit {node_kind}", {"kind": node_kind, "depth": depth, "handled": handled})

  def log_replace(self, old_kind: str, new_kind: str) -> None:
    self._record(TraceEventType.NODE_REPLACE, f"Replaced {old_kind} with {new_kind}", {"before": old_kind, "after": new_kind})

  def log_prune(self, node_kind: str) -> None:
    self._record(TraceEventType.NODE_PRUNE, f"Pruned {node_kind}", {"kind": node_kind})

  def log_mutation(self, owner_kind: str, before: str, after: str) -> None:
    """
    Records an expression rewrite.

    Args:
        owner_kind: Tag of the structural node holding the expression, or 'script'.
        before: Source of the expression before the visit.
        after: Source after the visit.
    """
    self._record(TraceEventType.EXPRESSION_MUTATION, f"Transformed expression in {owner_kind}", {"before": before, "after": after})

  def log_warning(self, message: str) -> None:
    self._record(TraceEventType.WARNING, message, {"level": "warning"})

  def summary(self) -> Dict[str, int]:
    """
    Counts recorded events by type, phases excluded.

    Returns:
        Dict[str, int]: e.g. ``{"node_visit": 16, "node_prune": 2}``.
    """
    skip = (TraceEventType.PHASE_START, TraceEventType.PHASE_END)
    return dict(Counter(e.type.value for e in self._events if e.type not in skip))

  def export(self) -> List[Dict[str, Any]]:
    return [asdict(e) for e in self._events]

  def _record(self, evt_type: TraceEventType, desc: str, meta: Dict[str, Any]) -> TraceEvent:
    event = TraceEvent(id=_new_id(), type=evt_type, description=desc, parent_id=self.current_phase, metadata=meta)
    self._events.append(event)
    return event


def _new_id() -> str:
  return str(uuid.uuid4())


_GLOBAL_TRACER = TraceLogger()


def get_tracer() -> TraceLogger:
  """Returns the process-wide tracer used by ``visit`` when tracing is on."""
  return _GLOBAL_TRACER


def reset_tracer() -> None:
  global _GLOBAL_TRACER
  _GLOBAL_TRACER = TraceLogger()
