"""
Syntactic validation of tournament creation input.
No I/O: title uniqueness is a repository lookup composed by the caller
(TournamentService), not part of this step.
"""
from __future__ import annotations

from dataclasses import dataclass

from roundrobin.models import Player, PointSystem, parse_point_system
from roundrobin.services.slugs import slugify

TITLE_MIN_LENGTH = 3
MIN_PLAYERS = 4
MAX_PLAYERS = 8
PLAYER_SEPARATOR = ";"

TITLE_TOO_SHORT = "Tournament title must be at least 3 characters long"
TITLE_TAKEN = "Choose a different title"
PLAYERS_NOT_SEPARATED = "Players must be separated by a semicolon (;)"
PLAYERS_BAD_COUNT = "Tournament must have at least 4 players and at most 8 players"
POINT_SYSTEM_REQUIRED = "You must select a point system"


class TournamentValidationError(ValueError):
    """Input rejected before scheduling. errors maps field name -> message."""

    def __init__(self, errors: dict[str, str]) -> None:
        self.errors = dict(errors)
        super().__init__("; ".join(f"{k}: {v}" for k, v in self.errors.items()))


@dataclass(frozen=True)
class TournamentInput:
    """Clean creation input: players satisfy the scheduler's preconditions."""
    title: str
    slug: str
    players: tuple[Player, ...]
    point_system: PointSystem


def parse_players(raw: str) -> list[str]:
    """Split "John;Jane;..." into stripped names (empty entries kept as "")."""
    return [name.strip() for name in raw.split(PLAYER_SEPARATOR)]


def _check_title(title: str) -> str | None:
    if len(title) < TITLE_MIN_LENGTH:
        return TITLE_TOO_SHORT
    if not slugify(title):
        return TITLE_TAKEN
    return None


def _check_players(raw: str) -> str | None:
    if PLAYER_SEPARATOR not in raw:
        return PLAYERS_NOT_SEPARATED
    names = parse_players(raw)
    if not (MIN_PLAYERS <= len(names) <= MAX_PLAYERS) or not all(names):
        return PLAYERS_BAD_COUNT
    return None


def validate_tournament_input(
    title: str | None,
    players: str | None,
    point_system: str | None,
) -> TournamentInput:
    """
    Validate raw form values. Raises TournamentValidationError listing every
    failing field; otherwise returns players with ids 0..N-1 and zero points.
    """
    title = (title or "").strip()
    players = players or ""
    errors: dict[str, str] = {}

    title_error = _check_title(title)
    if title_error:
        errors["title"] = title_error
    players_error = _check_players(players)
    if players_error:
        errors["players"] = players_error
    system = parse_point_system(point_system)
    if system is None:
        errors["point_system"] = POINT_SYSTEM_REQUIRED

    if errors or system is None:
        raise TournamentValidationError(errors)
    return TournamentInput(
        title=title,
        slug=slugify(title),
        players=tuple(Player(id=i, name=name, points=0) for i, name in enumerate(parse_players(players))),
        point_system=system,
    )
