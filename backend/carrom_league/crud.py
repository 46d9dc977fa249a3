import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import access, models, schemas, serializers
from .errors import InvalidArgumentError, NotFoundError, PermissionDeniedError, PersistenceError
from .ids import IdGenerator, new_invite_code, uuid_ids

logger = logging.getLogger(__name__)


def _normalize_text(value: str) -> str:
    return " ".join(value.split())


def _get_record_or_raise(db: Session, tournament_id: str) -> models.TournamentRecord:
    record = db.get(models.TournamentRecord, tournament_id)
    if not record:
        raise NotFoundError("Tournament not found.")
    return record


def _unique_invite_code(db: Session) -> str:
    while True:
        code = new_invite_code()
        taken = db.query(models.TournamentRecord.id).filter(models.TournamentRecord.invite_code == code).first()
        if taken is None:
            return code


# ---------------------------------------------------------------------------
# Tournaments
# ---------------------------------------------------------------------------


def list_tournaments_for_user(db: Session, user_id: str) -> list[schemas.TournamentSummary]:
    records = db.query(models.TournamentRecord).order_by(models.TournamentRecord.name.asc()).all()

    summaries: list[schemas.TournamentSummary] = []
    for record in records:
        summary = serializers.tournament_to_summary(serializers.record_to_tournament(record), user_id)
        if summary is not None:
            summaries.append(summary)
    return summaries


def get_tournament_or_raise(db: Session, tournament_id: str) -> schemas.Tournament:
    return serializers.record_to_tournament(_get_record_or_raise(db, tournament_id))


def get_tournament_for_user(db: Session, tournament_id: str, user_id: str) -> schemas.Tournament:
    tournament = get_tournament_or_raise(db, tournament_id)
    access.require(user_id, tournament, "view")
    return tournament


def insert_tournament(db: Session, tournament: schemas.Tournament) -> schemas.Tournament:
    db.add(models.TournamentRecord(**serializers.tournament_to_record_values(tournament)))
    db.commit()
    return tournament


def create_tournament(
    db: Session,
    owner_id: str,
    payload: schemas.TournamentCreate,
    ids: IdGenerator = uuid_ids,
) -> schemas.Tournament:
    name = _normalize_text(payload.name)
    if not name:
        raise InvalidArgumentError("Tournament name cannot be empty.")

    tournament = schemas.Tournament(
        id=ids(),
        name=name,
        stage="league",
        owner_id=owner_id,
        invite_code=_unique_invite_code(db),
    )
    insert_tournament(db, tournament)
    logger.info("Tournament %s (%s) created by %s", tournament.id, name, owner_id)
    return tournament


def delete_tournament(db: Session, tournament_id: str, user_id: str) -> None:
    record = _get_record_or_raise(db, tournament_id)
    if record.owner_id != user_id:
        raise PermissionDeniedError("Only the tournament owner can delete it.")

    db.delete(record)
    db.commit()
    logger.info("Tournament %s deleted by %s", tournament_id, user_id)


def join_tournament(db: Session, user_id: str, invite_code: str) -> schemas.Tournament:
    code = invite_code.strip()
    record = db.query(models.TournamentRecord).filter(models.TournamentRecord.invite_code == code).first()
    if not record:
        raise NotFoundError("Invalid invite code.")

    tournament = access.join_by_invite_code(serializers.record_to_tournament(record), user_id)
    SqlTournamentStore(db).save(tournament)
    logger.info("User %s joined tournament %s as viewer", user_id, tournament.id)
    return tournament


# ---------------------------------------------------------------------------
# Gateway store
# ---------------------------------------------------------------------------


class SqlTournamentStore:
    def __init__(self, db: Session) -> None:
        self.db = db

    def load(self, tournament_id: str) -> schemas.Tournament:
        return get_tournament_or_raise(self.db, tournament_id)

    def save(self, tournament: schemas.Tournament) -> None:
        try:
            record = _get_record_or_raise(self.db, tournament.id)
            for field, value in serializers.tournament_to_record_values(tournament).items():
                setattr(record, field, value)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise PersistenceError("Could not save tournament.") from exc
