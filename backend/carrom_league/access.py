import logging
from typing import Literal

from . import schemas
from .errors import ConflictError, InvalidArgumentError, NotFoundError, PermissionDeniedError

logger = logging.getLogger(__name__)

Action = Literal["view", "team-edit", "match-edit", "result-finalize", "manage-access"]

ROLE_ACTIONS: dict[str, frozenset[str]] = {
    "owner": frozenset({"view", "team-edit", "match-edit", "result-finalize", "manage-access"}),
    "editor": frozenset({"view", "team-edit", "match-edit", "result-finalize"}),
    "viewer": frozenset({"view"}),
}


def role_of(user_id: str, tournament: schemas.Tournament) -> schemas.Role | None:
    if tournament.owner_id == user_id:
        return "owner"
    for collaborator in tournament.collaborators:
        if collaborator.user_id == user_id:
            return collaborator.role
    return None


def can_perform(user_id: str, tournament: schemas.Tournament, action: Action) -> bool:
    role = role_of(user_id, tournament)
    if role is None:
        return False
    return action in ROLE_ACTIONS[role]


def require(user_id: str, tournament: schemas.Tournament, action: Action) -> None:
    if not can_perform(user_id, tournament, action):
        logger.warning("User %s denied %s on tournament %s", user_id, action, tournament.id)
        raise PermissionDeniedError(f"You do not have permission to {action.replace('-', ' ')} in this tournament.")


def join_by_invite_code(tournament: schemas.Tournament, user_id: str) -> schemas.Tournament:
    if role_of(user_id, tournament) is not None:
        raise ConflictError("You are already a member of this tournament.")

    collaborator = schemas.Collaborator(user_id=user_id, role="viewer")
    return tournament.model_copy(update={"collaborators": tournament.collaborators + (collaborator,)})


def _get_collaborator_or_raise(tournament: schemas.Tournament, user_id: str) -> schemas.Collaborator:
    if user_id == tournament.owner_id:
        raise InvalidArgumentError("The tournament owner cannot be changed or removed.")
    for collaborator in tournament.collaborators:
        if collaborator.user_id == user_id:
            return collaborator
    raise NotFoundError("Collaborator not found.")


def update_collaborator_role(
    tournament: schemas.Tournament,
    user_id: str,
    role: schemas.CollaboratorRole,
) -> schemas.Tournament:
    if role not in ("editor", "viewer"):
        raise InvalidArgumentError("Role must be editor or viewer.")

    target = _get_collaborator_or_raise(tournament, user_id)
    collaborators = tuple(
        item.model_copy(update={"role": role}) if item is target else item for item in tournament.collaborators
    )
    return tournament.model_copy(update={"collaborators": collaborators})


def remove_collaborator(tournament: schemas.Tournament, user_id: str) -> schemas.Tournament:
    target = _get_collaborator_or_raise(tournament, user_id)
    collaborators = tuple(item for item in tournament.collaborators if item is not target)
    return tournament.model_copy(update={"collaborators": collaborators})
