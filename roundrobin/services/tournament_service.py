"""
Tournament creation and read-side queries.
Create: authenticate -> validate -> check title is free -> schedule -> one atomic write.
The scheduler runs to completion before anything is written.
"""
from __future__ import annotations

import logging
import sqlite3
from datetime import datetime, timezone

from roundrobin.models import Round, Tournament
from roundrobin.persistence.repositories import TournamentRepository
from roundrobin.services.scheduling import schedule
from roundrobin.services.slugs import slugify
from roundrobin.services.validation import (
    TITLE_TAKEN,
    TournamentValidationError,
    validate_tournament_input,
)

logger = logging.getLogger(__name__)

# ---------- Exceptions ----------


class NotAuthenticatedError(ValueError):
    """No acting user; tournaments can only be created when signed in."""


class DuplicateTitleError(TournamentValidationError):
    """Another tournament already uses the slug derived from this title."""

    def __init__(self, slug: str) -> None:
        self.slug = slug
        super().__init__({"title": TITLE_TAKEN})


class TournamentPersistenceError(RuntimeError):
    """The atomic write failed; nothing was stored. The caller should retry from scratch."""


def _now_millis() -> int:
    return int(datetime.now(timezone.utc).timestamp() * 1000)


# ---------- TournamentService ----------


class TournamentService:
    """
    Composes validation, the uniqueness lookup, scheduling and persistence.
    Persistence is delegated to TournamentRepository.
    """

    def __init__(self) -> None:
        self._tournament_repo = TournamentRepository()

    def is_title_available(self, conn: sqlite3.Connection, title: str) -> tuple[str, bool]:
        """Return (slug, available). An empty slug is never available."""
        slug = slugify(title or "")
        if not slug:
            return slug, False
        return slug, not self._tournament_repo.exists(conn, slug)

    def create_tournament(
        self,
        conn: sqlite3.Connection,
        user_sub: str | None,
        title: str | None,
        players: str | None,
        point_system: str | None,
    ) -> Tournament:
        """
        Create a tournament with its full round-robin schedule.
        Raises NotAuthenticatedError, TournamentValidationError (DuplicateTitleError
        for a taken title) or TournamentPersistenceError.
        """
        if not user_sub:
            raise NotAuthenticatedError("You must be logged in to create a tournament.")
        clean = validate_tournament_input(title, players, point_system)
        if self._tournament_repo.exists(conn, clean.slug):
            logger.info("Rejected tournament %r: slug %s already taken", clean.title, clean.slug)
            raise DuplicateTitleError(clean.slug)

        rounds: list[Round] = schedule(clean.players)
        tournament = Tournament(
            slug=clean.slug,
            title=clean.title,
            user_sub=user_sub,
            point_system=clean.point_system.value,
            timestamp=_now_millis(),
            players=list(clean.players),
            rounds=rounds,
        )
        try:
            self._tournament_repo.save_schedule(conn, tournament)
        except sqlite3.IntegrityError as e:
            # Lost a race with a concurrent create for the same slug
            if self._tournament_repo.exists(conn, clean.slug):
                logger.warning("Slug %s taken during write", clean.slug)
                raise DuplicateTitleError(clean.slug) from e
            logger.exception("Failed to store tournament %s", clean.slug)
            raise TournamentPersistenceError(f"Could not store tournament {clean.slug}") from e
        except sqlite3.Error as e:
            logger.exception("Failed to store tournament %s", clean.slug)
            raise TournamentPersistenceError(f"Could not store tournament {clean.slug}") from e

        logger.info(
            "Created tournament %s: %d players, %d rounds, owner %s",
            tournament.slug, len(tournament.players), len(rounds), user_sub,
        )
        return tournament

    def tournament_exists(self, conn: sqlite3.Connection, slug: str) -> bool:
        return self._tournament_repo.exists(conn, slug)

    def get_tournament(self, conn: sqlite3.Connection, slug: str) -> Tournament | None:
        return self._tournament_repo.get(conn, slug)

    def list_tournaments(self, conn: sqlite3.Connection, user_sub: str | None = None) -> list[Tournament]:
        return self._tournament_repo.list_all(conn, user_sub=user_sub)

    def get_round(self, conn: sqlite3.Connection, slug: str, round_id: int) -> Round | None:
        return self._tournament_repo.get_round(conn, slug, round_id)
