"""
Tests for creation input validation and slug derivation. Pure; no DB.
"""
from __future__ import annotations

from pathlib import Path

import pytest

import sys
sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

from roundrobin.models import PointSystem, parse_point_system
from roundrobin.services.slugs import slugify, tournament_url
from roundrobin.services.validation import (
    PLAYERS_BAD_COUNT,
    PLAYERS_NOT_SEPARATED,
    POINT_SYSTEM_REQUIRED,
    TITLE_TAKEN,
    TITLE_TOO_SHORT,
    TournamentValidationError,
    parse_players,
    validate_tournament_input,
)


def test_valid_input():
    clean = validate_tournament_input("Chess Club", "Ann;Bob;Cid;Dee", "chess")
    assert clean.title == "Chess Club"
    assert clean.slug == "chess-club"
    assert clean.point_system is PointSystem.CHESS
    assert [(p.id, p.name, p.points) for p in clean.players] == [
        (0, "Ann", 0), (1, "Bob", 0), (2, "Cid", 0), (3, "Dee", 0),
    ]


def test_player_names_are_stripped():
    clean = validate_tournament_input("Cup", " Ann ; Bob;Cid ;Dee", "football")
    assert [p.name for p in clean.players] == ["Ann", "Bob", "Cid", "Dee"]


@pytest.mark.parametrize("count", [4, 5, 6, 7, 8])
def test_player_count_in_bounds(count):
    raw = ";".join(f"P{i}" for i in range(count))
    assert len(validate_tournament_input("League", raw, "basketball").players) == count


@pytest.mark.parametrize("raw", ["A;B;C", "A;B;C;D;E;F;G;H;I", "A;B;;D", "A;B;C; "])
def test_player_count_or_empty_entry_rejected(raw):
    with pytest.raises(TournamentValidationError) as exc:
        validate_tournament_input("League", raw, "chess")
    assert exc.value.errors == {"players": PLAYERS_BAD_COUNT}


def test_players_without_separator():
    with pytest.raises(TournamentValidationError) as exc:
        validate_tournament_input("League", "Ann,Bob,Cid,Dee", "chess")
    assert exc.value.errors["players"] == PLAYERS_NOT_SEPARATED


def test_short_title():
    with pytest.raises(TournamentValidationError) as exc:
        validate_tournament_input("ab", "A;B;C;D", "chess")
    assert exc.value.errors == {"title": TITLE_TOO_SHORT}


def test_title_without_slug_characters():
    with pytest.raises(TournamentValidationError) as exc:
        validate_tournament_input("!!!...", "A;B;C;D", "chess")
    assert exc.value.errors == {"title": TITLE_TAKEN}


def test_unknown_point_system():
    with pytest.raises(TournamentValidationError) as exc:
        validate_tournament_input("League", "A;B;C;D", "tennis")
    assert exc.value.errors == {"point_system": POINT_SYSTEM_REQUIRED}


def test_missing_point_system_alone_is_rejected():
    with pytest.raises(TournamentValidationError) as exc:
        validate_tournament_input("League", "A;B;C;D", None)
    assert exc.value.errors == {"point_system": POINT_SYSTEM_REQUIRED}


def test_all_errors_reported_together():
    with pytest.raises(TournamentValidationError) as exc:
        validate_tournament_input("", "", None)
    assert set(exc.value.errors) == {"title", "players", "point_system"}
    assert isinstance(exc.value, ValueError)


def test_parse_players_keeps_empty_entries():
    assert parse_players("a;;b") == ["a", "", "b"]


def test_parse_point_system():
    assert parse_point_system("Football") is PointSystem.FOOTBALL
    assert parse_point_system("") is None
    assert parse_point_system("golf") is None


@pytest.mark.parametrize(
    "title,expected",
    [
        ("Chess", "chess"),
        ("Chess Club: Spring!", "chess-club-spring"),
        ("  Mr. O'Neil's  (Cup) ", "mr-oneils-cup"),
        ("a/b@c", "abc"),
        ("Summer_Open -- 2024", "summer-open-2024"),
        ("***", ""),
    ],
)
def test_slugify(title, expected):
    assert slugify(title) == expected


@pytest.mark.parametrize(
    "title,expected",
    [
        ("Café Cup", "cafe-cup"),
        ("Zürich Öpen", "zurich-open"),
        ("Турнір", "turnir"),
    ],
)
def test_slugify_transliterates_to_ascii(title, expected):
    slug = slugify(title)
    assert slug == expected
    assert slug.isascii()


def test_accented_and_plain_titles_share_a_slug():
    assert slugify("Café Cup") == slugify("Cafe Cup")


def test_slugify_is_pure():
    assert slugify("Same Title") == slugify("Same Title")


def test_tournament_url():
    assert tournament_url("chess-club") == "/tournaments/chess-club"
