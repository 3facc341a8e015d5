# thunee_engine/seats.py
from __future__ import annotations

import enum


class Seat(enum.Enum):
    """The four table positions, declared in anti-clockwise turn order."""
    SOUTH = 0
    EAST = 1
    NORTH = 2
    WEST = 3

    @property
    def next(self) -> "Seat":
        return _ORDER[(self.value + 1) % 4]

    @property
    def partner(self) -> "Seat":
        return _ORDER[(self.value + 2) % 4]

    @property
    def team(self) -> int:
        # South/North play as team 0, East/West as team 1.
        return self.value % 2

    def is_teammate(self, other: "Seat") -> bool:
        return self.team == other.team

    def order_from(self) -> list["Seat"]:
        """All four seats starting at this one, in turn order."""
        return [_ORDER[(self.value + i) % 4] for i in range(4)]


_ORDER = [Seat.SOUTH, Seat.EAST, Seat.NORTH, Seat.WEST]


def team_seats(team: int) -> tuple[Seat, Seat]:
    return tuple(s for s in _ORDER if s.team == team)  # type: ignore[return-value]
