from __future__ import annotations


class InsufficientResponsesError(ValueError):
    """Feedback was requested before the candidate gave enough real answers."""

    def __init__(self, answered: int, required: int) -> None:
        self.answered = answered
        self.required = required
        super().__init__(
            f"Not enough responses for feedback: {answered} answered, {required} required"
        )
