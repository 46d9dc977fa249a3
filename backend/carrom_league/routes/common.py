from fastapi import Header, HTTPException, status
from sqlalchemy.orm import Session

from .. import crud, schemas
from ..errors import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    PersistenceError,
    TournamentError,
)
from ..gateway import Intent, TournamentGateway


def current_user_id(x_user_id: str | None = Header(default=None)) -> str:
    user_id = (x_user_id or "").strip()
    if not user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Sign in to continue.")
    return user_id


def http_error(exc: TournamentError) -> HTTPException:
    if isinstance(exc, NotFoundError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, ConflictError):
        code = status.HTTP_409_CONFLICT
    elif isinstance(exc, PermissionDeniedError):
        code = status.HTTP_403_FORBIDDEN
    elif isinstance(exc, PersistenceError):
        code = status.HTTP_503_SERVICE_UNAVAILABLE
    else:
        code = status.HTTP_400_BAD_REQUEST
    return HTTPException(status_code=code, detail=str(exc))


def apply_intent(db: Session, tournament_id: str, user_id: str, intent: Intent) -> schemas.Tournament:
    gateway = TournamentGateway(crud.SqlTournamentStore(db))
    try:
        return gateway.dispatch(tournament_id, user_id, intent)
    except TournamentError as exc:
        raise http_error(exc) from exc


def load_for_viewer(db: Session, tournament_id: str, user_id: str) -> schemas.Tournament:
    try:
        return crud.get_tournament_for_user(db, tournament_id, user_id)
    except TournamentError as exc:
        raise http_error(exc) from exc
