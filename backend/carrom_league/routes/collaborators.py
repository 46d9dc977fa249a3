from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import gateway, schemas
from ..database import get_db
from .common import apply_intent, current_user_id, load_for_viewer

router = APIRouter(tags=["collaborators"])


@router.get("/", response_model=list[schemas.Collaborator])
def list_collaborators(
    tournament_id: str,
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
) -> list[schemas.Collaborator]:
    return list(load_for_viewer(db, tournament_id, user_id).collaborators)


@router.patch("/{member_id}", response_model=schemas.Tournament)
def update_role(
    tournament_id: str,
    member_id: str,
    payload: schemas.CollaboratorRoleUpdate,
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
) -> schemas.Tournament:
    intent = gateway.UpdateCollaboratorRole(user_id=member_id, role=payload.role)
    return apply_intent(db, tournament_id, user_id, intent)


@router.delete("/{member_id}", response_model=schemas.Tournament)
def remove_member(
    tournament_id: str,
    member_id: str,
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
) -> schemas.Tournament:
    intent = gateway.RemoveCollaborator(user_id=member_id)
    return apply_intent(db, tournament_id, user_id, intent)
