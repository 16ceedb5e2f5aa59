"""
Data models for the round-robin backend.
Domain objects only; no persistence or API logic.

A tournament owns its players and a fixed schedule of rounds; each round holds
pairs of players. The schedule is generated once at creation and never edited.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


# ---------- Point system ----------
class PointSystem(str, Enum):
    """Scoring system chosen at creation. Values are stored as-is."""
    FOOTBALL = "football"
    CHESS = "chess"
    BASKETBALL = "basketball"


@dataclass(frozen=True)
class PointValues:
    """Points for a win, a draw and a loss."""
    win: float
    draw: float
    loss: float
    label: str


# Labels follow the creation form: "Football (3/1/0)" etc.
POINT_VALUES: dict[PointSystem, PointValues] = {
    PointSystem.FOOTBALL: PointValues(win=3, draw=1, loss=0, label="Football (3/1/0)"),
    PointSystem.CHESS: PointValues(win=1, draw=0.5, loss=0, label="Chess (1/0,5/0)"),
    PointSystem.BASKETBALL: PointValues(win=2, draw=0, loss=1, label="Basketball (2/0/1)"),
}


def parse_point_system(value: str | None) -> PointSystem | None:
    """Return the PointSystem for value, or None if unknown."""
    if not value:
        return None
    try:
        return PointSystem(value.strip().lower())
    except ValueError:
        return None


# ---------- User ----------
@dataclass
class User:
    """
    An account that can create tournaments.
    username is unique (login); password_hash is never plain text.
    """
    id: str
    name: str
    created_at: datetime
    username: str | None = None
    password_hash: str | None = None


# ---------- Player ----------
@dataclass(frozen=True)
class Player:
    """
    A tournament participant. id is the 0-based position in the entered list
    and stays fixed for the tournament's lifetime.
    """
    id: int
    name: str
    points: float = 0

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "points": self.points}

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Player:
        return cls(id=int(d["id"]), name=str(d["name"]), points=d.get("points", 0))


# ---------- Pair ----------
@dataclass(frozen=True)
class Pair:
    """One matchup inside a round. player2 None = player1 has a bye."""
    id: int
    player1: Player
    player2: Player | None = None

    @property
    def is_bye(self) -> bool:
        return self.player2 is None

    def player_ids(self) -> tuple[int, ...]:
        if self.player2 is None:
            return (self.player1.id,)
        return (self.player1.id, self.player2.id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "player1": self.player1.to_dict(),
            "player2": self.player2.to_dict() if self.player2 is not None else None,
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Pair:
        p2 = d.get("player2")
        return cls(
            id=int(d["id"]),
            player1=Player.from_dict(d["player1"]),
            player2=Player.from_dict(p2) if p2 is not None else None,
        )


# ---------- Round ----------
@dataclass(frozen=True)
class Round:
    """1-based round number and its pairs in generation order."""
    id: int
    pairs: tuple[Pair, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "pairs": [p.to_dict() for p in self.pairs]}

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Round:
        return cls(id=int(d["id"]), pairs=tuple(Pair.from_dict(p) for p in d.get("pairs", [])))


# ---------- Tournament ----------
@dataclass
class Tournament:
    """
    Tournament record keyed by slug. timestamp is creation time in epoch
    milliseconds. rounds is empty when only the summary was loaded.
    """
    slug: str
    title: str
    user_sub: str
    point_system: str  # PointSystem value
    timestamp: int
    players: list[Player] = field(default_factory=list)
    rounds: list[Round] = field(default_factory=list)

    def to_dict(self, include_rounds: bool = True) -> dict[str, Any]:
        d: dict[str, Any] = {
            "slug": self.slug,
            "title": self.title,
            "user_sub": self.user_sub,
            "point_system": self.point_system,
            "timestamp": self.timestamp,
            "players": [p.to_dict() for p in self.players],
        }
        if include_rounds:
            d["rounds"] = [r.to_dict() for r in self.rounds]
        return d
