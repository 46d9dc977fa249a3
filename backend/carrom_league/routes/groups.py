from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .. import gateway, schemas
from ..database import get_db
from .common import apply_intent, current_user_id

router = APIRouter(tags=["groups"])


@router.post("/", response_model=schemas.Tournament, status_code=status.HTTP_201_CREATED)
def create_group(
    tournament_id: str,
    payload: gateway.AddGroup,
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
) -> schemas.Tournament:
    return apply_intent(db, tournament_id, user_id, payload)


@router.patch("/{group_id}", response_model=schemas.Tournament)
def rename_group(
    tournament_id: str,
    group_id: str,
    payload: schemas.GroupUpdate,
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
) -> schemas.Tournament:
    intent = gateway.EditGroup(group_id=group_id, name=payload.name)
    return apply_intent(db, tournament_id, user_id, intent)


@router.delete("/{group_id}", response_model=schemas.Tournament)
def delete_group(
    tournament_id: str,
    group_id: str,
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
) -> schemas.Tournament:
    return apply_intent(db, tournament_id, user_id, gateway.DeleteGroup(group_id=group_id))
