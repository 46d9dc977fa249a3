from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from .. import bracket, gateway, schemas
from ..database import get_db
from .common import apply_intent, current_user_id, load_for_viewer

router = APIRouter(tags=["playoffs"])


@router.get("/", response_model=schemas.BracketView)
def get_bracket(
    tournament_id: str,
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
) -> schemas.BracketView:
    return bracket.bracket_view(load_for_viewer(db, tournament_id, user_id))


@router.post("/", response_model=schemas.Tournament)
def end_league_stage(
    tournament_id: str,
    payload: gateway.EndLeagueStage | None = Body(default=None),
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
) -> schemas.Tournament:
    return apply_intent(db, tournament_id, user_id, payload or gateway.EndLeagueStage())
