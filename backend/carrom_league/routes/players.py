from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .. import gateway, schemas
from ..database import get_db
from .common import apply_intent, current_user_id

router = APIRouter(tags=["players"])


@router.post("/", response_model=schemas.Tournament, status_code=status.HTTP_201_CREATED)
def create_player(
    tournament_id: str,
    team_id: str,
    payload: schemas.PlayerCreate,
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
) -> schemas.Tournament:
    intent = gateway.AddPlayer(team_id=team_id, name=payload.name)
    return apply_intent(db, tournament_id, user_id, intent)


@router.patch("/{player_id}", response_model=schemas.Tournament)
def rename_player(
    tournament_id: str,
    team_id: str,
    player_id: str,
    payload: schemas.PlayerUpdate,
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
) -> schemas.Tournament:
    intent = gateway.EditPlayer(team_id=team_id, player_id=player_id, name=payload.name)
    return apply_intent(db, tournament_id, user_id, intent)


@router.delete("/{player_id}", response_model=schemas.Tournament)
def delete_player(
    tournament_id: str,
    team_id: str,
    player_id: str,
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
) -> schemas.Tournament:
    intent = gateway.DeletePlayer(team_id=team_id, player_id=player_id)
    return apply_intent(db, tournament_id, user_id, intent)
