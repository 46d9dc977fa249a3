import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .database import init_db, session_scope
from .models import TournamentRecord
from .routes import collaborators, groups, matches, players, playoffs, teams, tournaments, viewer

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

DEFAULT_CORS_ORIGINS = "http://localhost:5173,http://127.0.0.1:5173"


def parse_origins(raw: str) -> list[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def env_flag(name: str, default: str = "true") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


app = FastAPI(
    title="Carrom League API",
    version="1.0.0",
    description=(
        "Carrom league management: teams, round-robin fixtures, live coin and "
        "queen scoring, points table and a four-team playoff bracket."
    ),
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=parse_origins(os.getenv("CORS_ORIGINS", DEFAULT_CORS_ORIGINS)),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

init_db()


def seed_if_empty() -> None:
    if not env_flag("AUTO_SEED_ON_EMPTY"):
        return

    with session_scope() as db:
        if db.query(TournamentRecord.id).first() is not None:
            return

    from seed import seed

    logger.info("No tournaments found; seeding the demo league")
    seed(demo_progress=False)


seed_if_empty()


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


TOURNAMENT = "/tournaments/{tournament_id}"

app.include_router(tournaments.router, prefix="/tournaments")
app.include_router(groups.router, prefix=f"{TOURNAMENT}/groups")
app.include_router(teams.router, prefix=f"{TOURNAMENT}/teams")
app.include_router(players.router, prefix=f"{TOURNAMENT}/teams/{{team_id}}/players")
app.include_router(matches.router, prefix=f"{TOURNAMENT}/matches")
app.include_router(playoffs.router, prefix=f"{TOURNAMENT}/playoffs")
app.include_router(viewer.router, prefix=f"{TOURNAMENT}/viewer")
app.include_router(collaborators.router, prefix=f"{TOURNAMENT}/collaborators")
