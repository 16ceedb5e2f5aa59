"""
Service layer: scheduling, validation and the tournament creation flow.
scheduling, slugs and validation are pure; tournament_service orchestrates persistence.
"""
from .scheduling import schedule, round_count
from .tournament_service import (
    TournamentService,
    NotAuthenticatedError,
    DuplicateTitleError,
    TournamentPersistenceError,
)
from .validation import TournamentValidationError, validate_tournament_input

__all__ = [
    "schedule",
    "round_count",
    "TournamentService",
    "NotAuthenticatedError",
    "DuplicateTitleError",
    "TournamentPersistenceError",
    "TournamentValidationError",
    "validate_tournament_input",
]
