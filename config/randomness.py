"""Single source of randomness for question shuffling and phrase selection."""
from __future__ import annotations

import random
from typing import Optional

_DEFAULT_RNG = random.Random()


def resolve_rng(rng: Optional[random.Random] = None) -> random.Random:
    """Return ``rng`` when given, else the process-wide entropy-seeded generator.

    Tests pass ``random.Random(seed)`` to pin question order and phrasing.
    """

    return rng if rng is not None else _DEFAULT_RNG


__all__ = ["resolve_rng"]
