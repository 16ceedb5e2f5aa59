"""
SQLite schema for tournament entities.
Migration-friendly: each table created with IF NOT EXISTS.
"""
from __future__ import annotations


def users_schema() -> str:
    return """
    CREATE TABLE IF NOT EXISTS users (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        username TEXT,
        password_hash TEXT,
        created_at TEXT NOT NULL
    );
    CREATE UNIQUE INDEX IF NOT EXISTS ix_users_username ON users(username);
    """


def tournaments_schema() -> str:
    """Tournament keyed by slug. timestamp = creation time in epoch milliseconds."""
    return """
    CREATE TABLE IF NOT EXISTS tournaments (
        slug TEXT PRIMARY KEY,
        title TEXT NOT NULL,
        user_sub TEXT NOT NULL,
        point_system TEXT NOT NULL,
        timestamp INTEGER NOT NULL
    );
    CREATE INDEX IF NOT EXISTS ix_tournaments_user ON tournaments(user_sub);
    CREATE INDEX IF NOT EXISTS ix_tournaments_timestamp ON tournaments(timestamp);
    """


def tournament_players_schema() -> str:
    """Players by entry position. id is the 0-based position, stable for the tournament."""
    return """
    CREATE TABLE IF NOT EXISTS tournament_players (
        tournament_slug TEXT NOT NULL,
        id INTEGER NOT NULL,
        name TEXT NOT NULL,
        points REAL NOT NULL DEFAULT 0,
        PRIMARY KEY (tournament_slug, id),
        FOREIGN KEY (tournament_slug) REFERENCES tournaments(slug)
    );
    """


def rounds_schema() -> str:
    """1-based round numbers per tournament."""
    return """
    CREATE TABLE IF NOT EXISTS rounds (
        tournament_slug TEXT NOT NULL,
        id INTEGER NOT NULL,
        PRIMARY KEY (tournament_slug, id),
        FOREIGN KEY (tournament_slug) REFERENCES tournaments(slug)
    );
    """


def pairs_schema() -> str:
    """Pair within a round. player2_id NULL = bye."""
    return """
    CREATE TABLE IF NOT EXISTS pairs (
        tournament_slug TEXT NOT NULL,
        round_id INTEGER NOT NULL,
        id INTEGER NOT NULL,
        player1_id INTEGER NOT NULL,
        player2_id INTEGER,
        PRIMARY KEY (tournament_slug, round_id, id),
        FOREIGN KEY (tournament_slug, round_id) REFERENCES rounds(tournament_slug, id),
        FOREIGN KEY (tournament_slug, player1_id) REFERENCES tournament_players(tournament_slug, id),
        FOREIGN KEY (tournament_slug, player2_id) REFERENCES tournament_players(tournament_slug, id)
    );
    CREATE INDEX IF NOT EXISTS ix_pairs_round ON pairs(tournament_slug, round_id);
    """


def all_schema_sql() -> str:
    """Combine all schema DDL for a single execution. Order: users, tournaments, tournament_players, rounds, pairs."""
    return "\n".join([
        users_schema(),
        tournaments_schema(),
        tournament_players_schema(),
        rounds_schema(),
        pairs_schema(),
    ])
