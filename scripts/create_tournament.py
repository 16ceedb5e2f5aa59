#!/usr/bin/env python3
"""
Vertical slice: Sign up → Create tournament → Persist → Retrieve schedule.
Run from project root: python3 scripts/create_tournament.py --title "Chess Club" --players "Ann;Bob;Cid;Dee;Eve"
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Ensure project root on path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from roundrobin.auth import hash_password
from roundrobin.config import configure_logging
from roundrobin.persistence import init_db, get_connection, UserRepository
from roundrobin.persistence.db import set_db_path
from roundrobin.services.tournament_service import TournamentService
from roundrobin.services.validation import TournamentValidationError


def _print_schedule(tournament) -> None:
    print(f"\n  {tournament.title}  [{tournament.point_system}]  /tournaments/{tournament.slug}")
    print("  " + "-" * 56)
    for rnd in tournament.rounds:
        print(f"  Round {rnd.id}")
        for pair in rnd.pairs:
            if pair.is_bye:
                print(f"    {pair.player1.name}  (bye)")
            else:
                print(f"    {pair.player1.name}  vs  {pair.player2.name}")


def run(title: str, players: str, point_system: str, db_path: Path | None = None) -> None:
    # Use data/create_tournament.db for demo (distinct from app.db)
    db_path = db_path or PROJECT_ROOT / "data" / "create_tournament.db"
    set_db_path(db_path)
    init_db(db_path=db_path)

    conn = get_connection()
    try:
        user_repo = UserRepository()
        service = TournamentService()

        # 1. Ensure demo user exists
        user = user_repo.get_by_username(conn, "demo")
        if user is None:
            user = user_repo.create_with_password(conn, "demo", hash_password("demo-password"))
            print(f"Created user: {user.id}")

        # 2. Create tournament (schedule generated and stored atomically)
        try:
            tournament = service.create_tournament(conn, user.id, title, players, point_system)
        except TournamentValidationError as e:
            for field, message in e.errors.items():
                print(f"  {field}: {message}")
            raise SystemExit(1)

        # 3. Retrieve from storage
        stored = service.get_tournament(conn, tournament.slug)
        if stored is None:
            raise SystemExit(f"Tournament {tournament.slug} was not stored")
        _print_schedule(stored)
    finally:
        conn.close()


def main():
    parser = argparse.ArgumentParser(description="Create a round-robin tournament and print its schedule.")
    parser.add_argument("--title", required=True, help="Tournament title (at least 3 characters)")
    parser.add_argument("--players", required=True, help="4-8 names separated by semicolons")
    parser.add_argument("--point-system", choices=("football", "chess", "basketball"), default="chess")
    parser.add_argument("--db", type=Path, default=None, help="SQLite file to use")
    args = parser.parse_args()
    configure_logging()
    run(args.title, args.players, args.point_system, db_path=args.db)


if __name__ == "__main__":
    main()
