# thunee_engine/errors.py
from __future__ import annotations


class InvariantViolation(RuntimeError):
    """
    Raised when the engine is driven into a state it is never documented for,
    e.g. asking for the winner of an unfinished trick or scoring a normal
    round before all six tricks have been played.

    Rule violations (bad bid, wrong phase, not following suit) are never
    raised; they come back as a failed ValidationResult / ActionResult.
    """
