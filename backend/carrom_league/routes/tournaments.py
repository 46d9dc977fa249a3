from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.orm import Session

from .. import crud, schemas
from ..database import get_db
from ..errors import TournamentError
from ..gateway import Intent
from .common import apply_intent, current_user_id, http_error, load_for_viewer

router = APIRouter(tags=["tournaments"])


@router.get("/", response_model=list[schemas.TournamentSummary])
def list_tournaments(
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
) -> list[schemas.TournamentSummary]:
    return crud.list_tournaments_for_user(db, user_id)


@router.post("/", response_model=schemas.Tournament, status_code=status.HTTP_201_CREATED)
def create_tournament(
    payload: schemas.TournamentCreate,
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
) -> schemas.Tournament:
    try:
        return crud.create_tournament(db, user_id, payload)
    except TournamentError as exc:
        raise http_error(exc) from exc


@router.post("/join", response_model=schemas.Tournament)
def join_tournament(
    payload: schemas.JoinRequest,
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
) -> schemas.Tournament:
    try:
        return crud.join_tournament(db, user_id, payload.invite_code)
    except TournamentError as exc:
        raise http_error(exc) from exc


@router.get("/{tournament_id}", response_model=schemas.Tournament)
def get_tournament(
    tournament_id: str,
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
) -> schemas.Tournament:
    return load_for_viewer(db, tournament_id, user_id)


@router.delete("/{tournament_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_tournament(
    tournament_id: str,
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
) -> None:
    try:
        crud.delete_tournament(db, tournament_id, user_id)
    except TournamentError as exc:
        raise http_error(exc) from exc


@router.post("/{tournament_id}/intents", response_model=schemas.Tournament)
def submit_intent(
    tournament_id: str,
    intent: Intent = Body(...),
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
) -> schemas.Tournament:
    return apply_intent(db, tournament_id, user_id, intent)
