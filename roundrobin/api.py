"""
REST API for the round-robin tournament backend.
Thin wrappers around domain logic and persistence.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager, contextmanager
from typing import Any, AsyncGenerator, Generator

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, Field

from roundrobin import config
from roundrobin.auth import create_access_token, decode_token, hash_password, verify_password
from roundrobin.models import POINT_VALUES
from roundrobin.persistence import get_connection, init_db, UserRepository
from roundrobin.persistence.db import get_db_path
from roundrobin.services.slugs import tournament_url
from roundrobin.services.tournament_service import (
    DuplicateTitleError,
    NotAuthenticatedError,
    TournamentPersistenceError,
    TournamentService,
)
from roundrobin.services.validation import TournamentValidationError

logger = logging.getLogger(__name__)


@contextmanager
def db_conn() -> Generator:
    """Yield a DB connection, ensure close on exit."""
    conn = get_connection()
    try:
        yield conn
    finally:
        conn.close()


# ---------- Lifespan ----------
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    config.configure_logging()
    init_db(db_path=get_db_path())
    logger.info("Round robin API ready (db=%s)", get_db_path())
    yield


# ---------- FastAPI app ----------
app = FastAPI(
    title="Round Robin API",
    description="Create round-robin tournaments and read their pairing schedules",
    version="0.1.0",
    lifespan=lifespan,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

security = HTTPBearer(auto_error=False)
tournament_service = TournamentService()


# ---------- Request models ----------


class SignupRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=6)


class LoginRequest(BaseModel):
    username: str
    password: str


class CreateTournamentRequest(BaseModel):
    title: str = Field("", max_length=200)
    players: str = Field("", description="Player names separated by semicolons, e.g. 'John;Jane;Ann;Bob'")
    point_system: str | None = Field(None, description="One of: football, chess, basketball")


def _get_current_user_id(credentials: HTTPAuthorizationCredentials | None = Depends(security)) -> str | None:
    """Return user_id from JWT or None if no/invalid token."""
    if credentials is None:
        return None
    return decode_token(credentials.credentials)


def _tournament_out(tournament, include_rounds: bool = True) -> dict[str, Any]:
    out = tournament.to_dict(include_rounds=include_rounds)
    out["url"] = tournament_url(tournament.slug)
    return out


# ---------- Endpoints ----------


@app.post("/signup")
def signup(req: SignupRequest) -> dict[str, Any]:
    """Create account. Passwords hashed, never stored plain."""
    with db_conn() as conn:
        user_repo = UserRepository()
        if user_repo.get_by_username(conn, req.username):
            raise HTTPException(status_code=400, detail="Username already taken")
        user = user_repo.create_with_password(
            conn, req.username, hash_password(req.password), name=req.username
        )
        token = create_access_token(user.id)
        return {"user_id": user.id, "username": user.username, "token": token}


@app.post("/login")
def login(req: LoginRequest) -> dict[str, Any]:
    """Login. Returns JWT token."""
    with db_conn() as conn:
        user_repo = UserRepository()
        user = user_repo.get_by_username(conn, req.username)
        if user is None or not user.password_hash or not verify_password(req.password, user.password_hash):
            raise HTTPException(status_code=401, detail="Invalid username or password")
        token = create_access_token(user.id)
        return {"user_id": user.id, "username": user.username, "token": token}


@app.get("/point-systems")
def list_point_systems() -> dict[str, Any]:
    """Scoring systems a tournament can use (points for win/draw/loss)."""
    return {
        "point_systems": [
            {"id": system.value, "label": v.label, "win": v.win, "draw": v.draw, "loss": v.loss}
            for system, v in POINT_VALUES.items()
        ],
    }


@app.get("/slug")
def check_slug(title: str = Query(..., description="Proposed tournament title")) -> dict[str, Any]:
    """Slug derived from title and whether it is still free."""
    with db_conn() as conn:
        slug, available = tournament_service.is_title_available(conn, title)
        return {"slug": slug, "url": tournament_url(slug), "available": available}


@app.post("/tournaments")
def create_tournament(
    req: CreateTournamentRequest,
    user_id_from_token: str | None = Depends(_get_current_user_id),
) -> dict[str, Any]:
    """
    Create a tournament and its full round-robin schedule.
    Requires a bearer token. Either everything is stored or nothing is.
    """
    with db_conn() as conn:
        try:
            tournament = tournament_service.create_tournament(
                conn, user_id_from_token, req.title, req.players, req.point_system
            )
        except NotAuthenticatedError as e:
            raise HTTPException(status_code=401, detail=str(e))
        except DuplicateTitleError as e:
            raise HTTPException(status_code=409, detail={"errors": e.errors, "slug": e.slug})
        except TournamentValidationError as e:
            raise HTTPException(status_code=400, detail={"errors": e.errors})
        except TournamentPersistenceError:
            raise HTTPException(status_code=503, detail="Error creating tournament. Please try again.")
        return _tournament_out(tournament)


@app.get("/tournaments")
def list_tournaments(
    user_id: str | None = Query(None, description="Filter by owner"),
) -> dict[str, Any]:
    """List tournaments, newest first. Rounds are omitted; fetch a tournament for its schedule."""
    with db_conn() as conn:
        tournaments = tournament_service.list_tournaments(conn, user_sub=user_id)
        return {"tournaments": [_tournament_out(t, include_rounds=False) for t in tournaments]}


@app.get("/tournaments/{slug}")
def get_tournament(slug: str) -> dict[str, Any]:
    """Get a tournament with players and every round's pairs."""
    with db_conn() as conn:
        tournament = tournament_service.get_tournament(conn, slug)
        if tournament is None:
            raise HTTPException(status_code=404, detail="Tournament not found")
        return _tournament_out(tournament)


@app.get("/tournaments/{slug}/rounds/{round_id}")
def get_round(slug: str, round_id: int) -> dict[str, Any]:
    """Get one round (1-based) of a tournament."""
    with db_conn() as conn:
        if not tournament_service.tournament_exists(conn, slug):
            raise HTTPException(status_code=404, detail="Tournament not found")
        rnd = tournament_service.get_round(conn, slug, round_id)
        if rnd is None:
            raise HTTPException(status_code=404, detail="Round not found")
        return {"tournament_slug": slug, **rnd.to_dict()}
