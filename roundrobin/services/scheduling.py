"""
Deterministic round-robin schedule generation for tournaments.

Round-robin is used so every player meets every other player exactly once;
a tournament lasts N-1 rounds (N even) or N rounds (N odd). Each player
appears at most once per round.

BYE handling: when the number of players is odd, we add a virtual BYE. Each
round one player is paired with BYE (player2 = None) and sits out. Over the
whole schedule every player sits out exactly once.

Uses the circle method: slot 0 is fixed and faces the opposite slot N/2; the
other slots pair up outside in (i with N-i), then rotate by one each round.
Same player ordering yields the same schedule (deterministic for persistence).
"""
from __future__ import annotations

from typing import Iterable, Sequence

from roundrobin.models import Pair, Player, Round

# Sentinel for bye when number of players is odd
BYE = None


def round_count(n: int) -> int:
    """Rounds needed for n players: n-1 if n is even, n if odd."""
    if n < 2:
        return 0
    return n - 1 if n % 2 == 0 else n


def circle_slots(n: int) -> list[list[tuple[int, int]]]:
    """
    Slot index pairs per round for n entrants (n even).
    Round r is a list of (a, b) indices into the original order, fixed slot first.
    """
    order = list(range(n))
    half = n // 2
    rounds: list[list[tuple[int, int]]] = []
    for _ in range(n - 1):
        # Fixed slot faces the opposite slot, then outside in: 1 with n-1, 2 with n-2, ...
        slots = [(order[0], order[half])]
        for i in range(1, half):
            slots.append((order[i], order[n - i]))
        rounds.append(slots)
        # Rotate: keep 0, slot 1 takes slot n-1, everyone else moves up one
        order = [order[0], order[n - 1]] + order[1 : n - 1]
    return rounds


def schedule(players: Sequence[Player]) -> list[Round]:
    """
    Generate the full round-robin schedule for players (in entry order).
    A player drawn against BYE gets a Pair with player2 None in that slot.
    Deterministic; the input sequence is not modified.
    """
    entrants: list[Player | None] = list(players)
    if len(entrants) < 2:
        return []
    if len(entrants) % 2 == 1:
        entrants.append(BYE)
    rounds: list[Round] = []
    for r, slots in enumerate(circle_slots(len(entrants))):
        pairs: list[Pair] = []
        for a, b in slots:
            p1, p2 = entrants[a], entrants[b]
            if p1 is BYE:
                p1, p2 = p2, BYE
            pairs.append(Pair(id=len(pairs), player1=p1, player2=p2))
        rounds.append(Round(id=r + 1, pairs=tuple(pairs)))
    return rounds


def pairings(rounds: Iterable[Round]) -> list[frozenset[int]]:
    """All real matchups as unordered player id pairs (byes excluded), in schedule order."""
    result: list[frozenset[int]] = []
    for rnd in rounds:
        for pair in rnd.pairs:
            if pair.player2 is not None:
                result.append(frozenset((pair.player1.id, pair.player2.id)))
    return result


def byes(rounds: Iterable[Round]) -> list[tuple[int, int]]:
    """(round_id, player_id) for every bye in the schedule."""
    return [
        (rnd.id, pair.player1.id)
        for rnd in rounds
        for pair in rnd.pairs
        if pair.is_bye
    ]
