"""
Tests for the Tracing System.
"""

import pytest

from template_walker.core.tracer import TraceEventType, TraceLogger, get_tracer, reset_tracer


def test_phase_nesting():
  logger = TraceLogger()

  p1 = logger.start_phase("Parent")
  logger.start_phase("Child")
  logger.end_phase()  # End Child
  logger.end_phase()  # End Parent

  events = logger.export()

  # 4 events: Start P, Start C, End C, End P
  assert len(events) == 4
  assert events[0]["type"] == TraceEventType.PHASE_START
  assert events[1]["parent_id"] == p1
  assert events[2]["type"] == TraceEventType.PHASE_END


def test_end_phase_without_start_is_noop():
  logger = TraceLogger()
  logger.end_phase()
  assert logger.export() == []


def test_visit_events_attach_to_phase():
  logger = TraceLogger()
  phase = logger.start_phase("Markup Pass")
  logger.log_visit("Element", depth=2, handled=True)
  logger.log_warning("odd")

  events = logger.export()
  assert events[1]["type"] == TraceEventType.NODE_VISIT
  assert events[1]["parent_id"] == phase
  assert events[1]["metadata"] == {"kind": "Element", "depth": 2, "handled": True}
  assert events[2]["type"] == TraceEventType.WARNING


def test_global_tracer_reset():
  first = get_tracer()
  first.log_warning("x")
  reset_tracer()
  assert get_tracer() is not first
  assert get_tracer().export() == []


def test_phase_context_closes_on_error():
  logger = TraceLogger()
  with pytest.raises(ValueError):
    with logger.phase("Markup Pass"):
      logger.log_prune("Attribute")
      raise ValueError("stop")

  events = logger.export()
  assert events[-1]["type"] == TraceEventType.PHASE_END
  assert logger.current_phase is None


def test_summary_counts_by_type():
  logger = TraceLogger()
  with logger.phase("Markup Pass"):
    logger.log_visit("Fragment", 0, False)
    logger.log_visit("Text", 1, False)
    logger.log_prune("Text")

  assert logger.summary() == {"node_visit": 2, "node_prune": 1}
