from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import schemas, standings
from ..database import get_db
from .common import current_user_id, load_for_viewer

router = APIRouter(tags=["viewer"])


@router.get("/points-table", response_model=list[schemas.StandingRow])
def points_table(
    tournament_id: str,
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
) -> list[schemas.StandingRow]:
    return standings.build_points_table(load_for_viewer(db, tournament_id, user_id))


@router.get("/super-striker", response_model=schemas.StrikerBoard)
def super_striker(
    tournament_id: str,
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
) -> schemas.StrikerBoard:
    return standings.build_striker_board(load_for_viewer(db, tournament_id, user_id))
