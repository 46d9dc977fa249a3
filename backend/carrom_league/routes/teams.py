from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .. import gateway, schemas
from ..database import get_db
from .common import apply_intent, current_user_id, load_for_viewer

router = APIRouter(tags=["teams"])


@router.get("/", response_model=list[schemas.Team])
def list_teams(
    tournament_id: str,
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
) -> list[schemas.Team]:
    return list(load_for_viewer(db, tournament_id, user_id).teams)


@router.post("/", response_model=schemas.Tournament, status_code=status.HTTP_201_CREATED)
def create_team(
    tournament_id: str,
    payload: gateway.AddTeam,
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
) -> schemas.Tournament:
    return apply_intent(db, tournament_id, user_id, payload)


@router.post("/batch", response_model=schemas.Tournament, status_code=status.HTTP_201_CREATED)
def create_teams_batch(
    tournament_id: str,
    payload: gateway.AddTeamsBatch,
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
) -> schemas.Tournament:
    return apply_intent(db, tournament_id, user_id, payload)


@router.patch("/{team_id}", response_model=schemas.Tournament)
def update_team(
    tournament_id: str,
    team_id: str,
    payload: schemas.TeamUpdate,
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
) -> schemas.Tournament:
    intent = gateway.EditTeam(team_id=team_id, updates=payload)
    return apply_intent(db, tournament_id, user_id, intent)


@router.delete("/{team_id}", response_model=schemas.Tournament)
def delete_team(
    tournament_id: str,
    team_id: str,
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
) -> schemas.Tournament:
    return apply_intent(db, tournament_id, user_id, gateway.DeleteTeam(team_id=team_id))
