import logging
from datetime import datetime, time, timedelta

from . import schemas
from .errors import ConflictError, InvalidArgumentError
from .ids import IdGenerator
from .snapshot import find_playoff_match, replace_match, team_name
from .standings import PLAYOFF_SPOTS, rank_teams

logger = logging.getLogger(__name__)

PLAYOFF_ROUNDS: list[tuple[schemas.PlayoffType, str]] = [
    ("qualifier1", "Qualifier 1"),
    ("eliminator", "Eliminator"),
    ("qualifier2", "Qualifier 2"),
    ("final", "Final"),
]
DEFAULT_START_TIME = time(19, 0)


def _schedule_anchor(tournament: schemas.Tournament, now: datetime) -> datetime:
    completed_dates = [
        match.date for match in tournament.matches if match.stage == "league" and match.status == "completed"
    ]
    return max(completed_dates) if completed_dates else schemas.as_utc(now)


def generate_playoffs(
    tournament: schemas.Tournament,
    ids: IdGenerator,
    now: datetime,
    start_time: time = DEFAULT_START_TIME,
) -> schemas.Tournament:
    if tournament.stage != "league" or any(match.stage == "playoff" for match in tournament.matches):
        raise ConflictError("Playoffs have already been generated for this tournament.")

    if len(tournament.teams) < PLAYOFF_SPOTS:
        raise InvalidArgumentError(f"At least {PLAYOFF_SPOTS} teams are required to start playoffs.")

    rank1, rank2, rank3, rank4 = rank_teams(tournament.teams)[:PLAYOFF_SPOTS]
    pairings: dict[str, tuple[str, str]] = {
        "qualifier1": (rank1.id, rank2.id),
        "eliminator": (rank3.id, rank4.id),
        "qualifier2": (schemas.TBD, schemas.TBD),
        "final": (schemas.TBD, schemas.TBD),
    }

    anchor = _schedule_anchor(tournament, now)
    playoff_matches: list[schemas.Match] = []
    for offset, (playoff_type, name) in enumerate(PLAYOFF_ROUNDS, start=1):
        team1_id, team2_id = pairings[playoff_type]
        playoff_matches.append(
            schemas.Match(
                id=ids(),
                name=name,
                stage="playoff",
                playoff_type=playoff_type,
                team1_id=team1_id,
                team2_id=team2_id,
                date=datetime.combine(anchor.date() + timedelta(days=offset), start_time, tzinfo=anchor.tzinfo),
                status="upcoming",
            )
        )

    logger.info(
        "Playoffs generated for tournament %s with seeds %s",
        tournament.id,
        [team.name for team in (rank1, rank2, rank3, rank4)],
    )
    return tournament.model_copy(
        update={
            "matches": tournament.matches + tuple(playoff_matches),
            "stage": "playoffs",
        }
    )


def _fill_slot(
    tournament: schemas.Tournament,
    playoff_type: schemas.PlayoffType,
    slot: str,
    team_id: str,
) -> schemas.Tournament:
    target = find_playoff_match(tournament, playoff_type)
    if target is None:
        logger.warning("No %s match to receive team %s in tournament %s", playoff_type, team_id, tournament.id)
        return tournament
    return replace_match(tournament, target.model_copy(update={slot: team_id}))


def propagate(tournament: schemas.Tournament, match: schemas.Match) -> schemas.Tournament:
    # Qualifier 1 sends its loser to Qualifier 2; every other round advances only the winner.
    winner_id = match.winner_id
    if winner_id is None:
        return tournament
    loser_id = match.team2_id if winner_id == match.team1_id else match.team1_id

    if match.playoff_type == "qualifier1":
        tournament = _fill_slot(tournament, "final", "team1_id", winner_id)
        tournament = _fill_slot(tournament, "qualifier2", "team1_id", loser_id)
    elif match.playoff_type == "eliminator":
        tournament = _fill_slot(tournament, "qualifier2", "team2_id", winner_id)
    elif match.playoff_type == "qualifier2":
        tournament = _fill_slot(tournament, "final", "team2_id", winner_id)
    elif match.playoff_type == "final":
        logger.info("Tournament %s completed; champion %s", tournament.id, team_name(tournament, winner_id))
        tournament = tournament.model_copy(update={"stage": "completed"})

    return tournament


def champion(tournament: schemas.Tournament) -> str | None:
    if tournament.stage != "completed":
        return None
    final = find_playoff_match(tournament, "final")
    return final.winner_id if final else None


def bracket_view(tournament: schemas.Tournament) -> schemas.BracketView:
    champion_id = champion(tournament)
    return schemas.BracketView(
        stage=tournament.stage,
        qualifier1=find_playoff_match(tournament, "qualifier1"),
        eliminator=find_playoff_match(tournament, "eliminator"),
        qualifier2=find_playoff_match(tournament, "qualifier2"),
        final=find_playoff_match(tournament, "final"),
        champion_id=champion_id,
        champion=team_name(tournament, champion_id),
    )
