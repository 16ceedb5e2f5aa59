"""
Repository interfaces for tournament data.
No business logic: only read/write operations.
"""
from __future__ import annotations

import sqlite3
import uuid
from datetime import datetime, timezone

from roundrobin.models import Pair, Player, Round, Tournament, User


def _parse_datetime(s: str | None) -> datetime:
    if s is None:
        raise ValueError("expected datetime string")
    return datetime.fromisoformat(s.replace("Z", "+00:00"))


# ---------- UserRepository ----------


class UserRepository:
    """CRUD for users: username, password_hash for auth."""

    def create_with_password(
        self, conn: sqlite3.Connection, username: str, password_hash: str, name: str | None = None
    ) -> User:
        uid = str(uuid.uuid4())
        now = datetime.now(timezone.utc).isoformat()
        display_name = name or username
        conn.execute(
            "INSERT INTO users (id, username, password_hash, name, created_at) VALUES (?, ?, ?, ?, ?)",
            (uid, username, password_hash, display_name, now),
        )
        conn.commit()
        return User(
            id=uid, name=display_name, created_at=datetime.fromisoformat(now),
            username=username, password_hash=password_hash,
        )

    def get(self, conn: sqlite3.Connection, user_id: str) -> User | None:
        row = conn.execute(
            "SELECT id, name, created_at, username, password_hash FROM users WHERE id = ?",
            (user_id,),
        ).fetchone()
        if row is None:
            return None
        return User(
            id=row["id"],
            name=row["name"],
            created_at=_parse_datetime(row["created_at"]),
            username=row["username"],
            password_hash=row["password_hash"],
        )

    def get_by_username(self, conn: sqlite3.Connection, username: str) -> User | None:
        row = conn.execute(
            "SELECT id, name, created_at, username, password_hash FROM users WHERE username = ?",
            (username,),
        ).fetchone()
        if row is None:
            return None
        return User(
            id=row["id"],
            name=row["name"],
            created_at=_parse_datetime(row["created_at"]),
            username=row["username"],
            password_hash=row["password_hash"],
        )


# ---------- TournamentRepository ----------


class TournamentRepository:
    """
    Tournaments with their players, rounds and pairs.
    save_schedule writes everything in one transaction; nothing is visible on failure.
    """

    def exists(self, conn: sqlite3.Connection, slug: str) -> bool:
        row = conn.execute("SELECT 1 FROM tournaments WHERE slug = ?", (slug,)).fetchone()
        return row is not None

    def save_schedule(self, conn: sqlite3.Connection, tournament: Tournament) -> None:
        """
        Insert tournament, players, rounds and pairs atomically.
        Raises sqlite3.Error after rolling back (IntegrityError if the slug exists).
        """
        with conn:
            conn.execute(
                "INSERT INTO tournaments (slug, title, user_sub, point_system, timestamp) VALUES (?, ?, ?, ?, ?)",
                (
                    tournament.slug, tournament.title, tournament.user_sub,
                    tournament.point_system, tournament.timestamp,
                ),
            )
            conn.executemany(
                "INSERT INTO tournament_players (tournament_slug, id, name, points) VALUES (?, ?, ?, ?)",
                [(tournament.slug, p.id, p.name, p.points) for p in tournament.players],
            )
            for rnd in tournament.rounds:
                conn.execute(
                    "INSERT INTO rounds (tournament_slug, id) VALUES (?, ?)",
                    (tournament.slug, rnd.id),
                )
                conn.executemany(
                    "INSERT INTO pairs (tournament_slug, round_id, id, player1_id, player2_id) VALUES (?, ?, ?, ?, ?)",
                    [
                        (
                            tournament.slug, rnd.id, pair.id, pair.player1.id,
                            pair.player2.id if pair.player2 is not None else None,
                        )
                        for pair in rnd.pairs
                    ],
                )

    def get(self, conn: sqlite3.Connection, slug: str, with_rounds: bool = True) -> Tournament | None:
        row = conn.execute(
            "SELECT slug, title, user_sub, point_system, timestamp FROM tournaments WHERE slug = ?",
            (slug,),
        ).fetchone()
        if row is None:
            return None
        tournament = self._from_row(row)
        tournament.players = self.get_players(conn, slug)
        if with_rounds:
            tournament.rounds = self.get_rounds(conn, slug, tournament.players)
        return tournament

    def list_all(self, conn: sqlite3.Connection, user_sub: str | None = None) -> list[Tournament]:
        """Tournament summaries (players, no rounds), newest first."""
        if user_sub:
            rows = conn.execute(
                "SELECT slug, title, user_sub, point_system, timestamp FROM tournaments"
                " WHERE user_sub = ? ORDER BY timestamp DESC, slug",
                (user_sub,),
            ).fetchall()
        else:
            rows = conn.execute(
                "SELECT slug, title, user_sub, point_system, timestamp FROM tournaments"
                " ORDER BY timestamp DESC, slug"
            ).fetchall()
        result: list[Tournament] = []
        for r in rows:
            t = self._from_row(r)
            t.players = self.get_players(conn, t.slug)
            result.append(t)
        return result

    def get_players(self, conn: sqlite3.Connection, slug: str) -> list[Player]:
        rows = conn.execute(
            "SELECT id, name, points FROM tournament_players WHERE tournament_slug = ? ORDER BY id",
            (slug,),
        ).fetchall()
        return [Player(id=r["id"], name=r["name"], points=r["points"]) for r in rows]

    def get_rounds(
        self, conn: sqlite3.Connection, slug: str, players: list[Player] | None = None
    ) -> list[Round]:
        """All rounds in order, pairs resolved to Player objects."""
        by_id = {p.id: p for p in (players if players is not None else self.get_players(conn, slug))}
        round_ids = [
            r["id"]
            for r in conn.execute(
                "SELECT id FROM rounds WHERE tournament_slug = ? ORDER BY id", (slug,)
            ).fetchall()
        ]
        pairs_by_round: dict[int, list[Pair]] = {rid: [] for rid in round_ids}
        rows = conn.execute(
            "SELECT round_id, id, player1_id, player2_id FROM pairs"
            " WHERE tournament_slug = ? ORDER BY round_id, id",
            (slug,),
        ).fetchall()
        for r in rows:
            p2 = r["player2_id"]
            pairs_by_round.setdefault(r["round_id"], []).append(
                Pair(
                    id=r["id"],
                    player1=by_id[r["player1_id"]],
                    player2=by_id[p2] if p2 is not None else None,
                )
            )
        return [Round(id=rid, pairs=tuple(pairs_by_round[rid])) for rid in round_ids]

    def get_round(self, conn: sqlite3.Connection, slug: str, round_id: int) -> Round | None:
        """One round with its pairs; None if the round does not exist."""
        row = conn.execute(
            "SELECT id FROM rounds WHERE tournament_slug = ? AND id = ?", (slug, round_id)
        ).fetchone()
        if row is None:
            return None
        rows = conn.execute(
            "SELECT id, player1_id, player2_id FROM pairs"
            " WHERE tournament_slug = ? AND round_id = ? ORDER BY id",
            (slug, round_id),
        ).fetchall()
        wanted = {r["player1_id"] for r in rows} | {r["player2_id"] for r in rows if r["player2_id"] is not None}
        by_id = {p.id: p for p in self.get_players(conn, slug) if p.id in wanted}
        pairs = tuple(
            Pair(
                id=r["id"],
                player1=by_id[r["player1_id"]],
                player2=by_id[r["player2_id"]] if r["player2_id"] is not None else None,
            )
            for r in rows
        )
        return Round(id=row["id"], pairs=pairs)

    @staticmethod
    def _from_row(row: sqlite3.Row) -> Tournament:
        return Tournament(
            slug=row["slug"],
            title=row["title"],
            user_sub=row["user_sub"],
            point_system=row["point_system"],
            timestamp=row["timestamp"],
        )
