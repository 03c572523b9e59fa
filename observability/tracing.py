"""Timing spans recorded on any object that carries an ``events`` list."""
from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Any, Iterator

from .logger import log_event


@contextmanager
def span(holder: Any, name: str) -> Iterator[None]:
    start = time.perf_counter()
    outcome = "ok"
    try:
        yield
    except Exception:
        outcome = "error"
        raise
    finally:
        elapsed_ms = int((time.perf_counter() - start) * 1000)
        holder.events.append({"span": name, "ms": elapsed_ms, "outcome": outcome})
        log_event("span", getattr(holder, "session_id", None) or "-", node=name, ms=elapsed_ms, outcome=outcome)


__all__ = ["span"]
