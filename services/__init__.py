from __future__ import annotations  # Re-export services public API

from .conductor import ConductorTurn, IllegalTransitionError, InterviewConductor, active_interview  # noqa: F401

__all__ = ["ConductorTurn", "IllegalTransitionError", "InterviewConductor", "active_interview"]
