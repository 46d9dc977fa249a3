from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from .. import gateway, live_scoring, schemas
from ..database import get_db
from ..errors import TournamentError
from .common import apply_intent, current_user_id, http_error, load_for_viewer

router = APIRouter(tags=["matches"])


@router.get("/", response_model=list[schemas.Match])
def list_matches(
    tournament_id: str,
    stage: schemas.MatchStage | None = Query(default=None),
    status_filter: schemas.MatchStatus | None = Query(default=None, alias="status"),
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
) -> list[schemas.Match]:
    tournament = load_for_viewer(db, tournament_id, user_id)

    matches = list(tournament.matches)
    if stage:
        matches = [match for match in matches if match.stage == stage]
    if status_filter:
        matches = [match for match in matches if match.status == status_filter]
    matches.sort(key=lambda match: match.date)
    return matches


@router.post("/", response_model=schemas.Tournament, status_code=status.HTTP_201_CREATED)
def create_match(
    tournament_id: str,
    payload: gateway.AddMatch,
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
) -> schemas.Tournament:
    return apply_intent(db, tournament_id, user_id, payload)


@router.post("/batch", response_model=schemas.Tournament, status_code=status.HTTP_201_CREATED)
def create_matches_batch(
    tournament_id: str,
    payload: gateway.AddMatchesBatch,
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
) -> schemas.Tournament:
    return apply_intent(db, tournament_id, user_id, payload)


@router.patch("/{match_id}", response_model=schemas.Tournament)
def update_match(
    tournament_id: str,
    match_id: str,
    payload: schemas.MatchUpdate,
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
) -> schemas.Tournament:
    intent = gateway.EditMatch(match_id=match_id, updates=payload)
    return apply_intent(db, tournament_id, user_id, intent)


@router.delete("/{match_id}", response_model=schemas.Tournament)
def delete_match(
    tournament_id: str,
    match_id: str,
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
) -> schemas.Tournament:
    return apply_intent(db, tournament_id, user_id, gateway.DeleteMatch(match_id=match_id))


@router.post("/{match_id}/start", response_model=schemas.Tournament)
def start_match(
    tournament_id: str,
    match_id: str,
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
) -> schemas.Tournament:
    return apply_intent(db, tournament_id, user_id, gateway.StartMatch(match_id=match_id))


@router.post("/{match_id}/live-score", response_model=schemas.Tournament)
def update_live_score(
    tournament_id: str,
    match_id: str,
    payload: schemas.LiveScoreUpdate,
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
) -> schemas.Tournament:
    intent = gateway.UpdateLiveScore(
        match_id=match_id,
        player_id=payload.player_id,
        delta=payload.delta,
        is_queen=payload.is_queen,
    )
    return apply_intent(db, tournament_id, user_id, intent)


@router.get("/{match_id}/live", response_model=schemas.LiveBoard)
def get_live_board(
    tournament_id: str,
    match_id: str,
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
) -> schemas.LiveBoard:
    tournament = load_for_viewer(db, tournament_id, user_id)
    try:
        return live_scoring.live_board(tournament, match_id)
    except TournamentError as exc:
        raise http_error(exc) from exc


@router.post("/{match_id}/result", response_model=schemas.Tournament)
def update_match_result(
    tournament_id: str,
    match_id: str,
    payload: schemas.ResultSubmit,
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
) -> schemas.Tournament:
    intent = gateway.UpdateMatchResult(
        match_id=match_id,
        winner_id=payload.winner_id,
        winner_score=payload.winner_score,
        loser_score=payload.loser_score,
    )
    return apply_intent(db, tournament_id, user_id, intent)
