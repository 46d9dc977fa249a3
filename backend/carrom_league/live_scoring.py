import logging
from datetime import datetime

from . import schemas
from .errors import ConflictError, InvalidArgumentError, NotFoundError
from .snapshot import find_player, get_match_or_raise, get_team_or_raise, replace_match

logger = logging.getLogger(__name__)

QUEEN_POINTS = 3
COIN_POCKETED = 1
FOUL = -1


def player_live_points(score: schemas.LiveScore) -> int:
    return score.coins + score.queens * QUEEN_POINTS


def start_match(tournament: schemas.Tournament, match_id: str, now: datetime) -> schemas.Tournament:
    match = get_match_or_raise(tournament, match_id)

    if match.status != "upcoming":
        raise ConflictError("Only an upcoming match can be started.")
    if match.has_placeholder:
        raise ConflictError("Both teams must be decided before the match can start.")

    started = match.model_copy(
        update={
            "status": "inprogress",
            "start_time": schemas.as_utc(now),
            "live_scores": {},
            "queen_pocketed_by": None,
        }
    )
    logger.info("Match %s started in tournament %s", match_id, tournament.id)
    return replace_match(tournament, started)


def _assert_live_player(tournament: schemas.Tournament, match: schemas.Match, player_id: str) -> None:
    if match.status != "inprogress":
        raise ConflictError("Live scores can be recorded only while the match is in progress.")

    contestants = [team for team in tournament.teams if team.id in (match.team1_id, match.team2_id)]
    if find_player(contestants, player_id) is None:
        raise NotFoundError("Player is not on either team in this match.")


def record_coin(
    tournament: schemas.Tournament,
    match_id: str,
    player_id: str,
    delta: int,
) -> schemas.Tournament:
    if delta not in (COIN_POCKETED, FOUL):
        raise InvalidArgumentError("Coin delta must be +1 (pocketed) or -1 (foul).")

    match = get_match_or_raise(tournament, match_id)
    _assert_live_player(tournament, match, player_id)

    live_scores = dict(match.live_scores or {})
    current = live_scores.get(player_id, schemas.LiveScore())
    live_scores[player_id] = current.model_copy(update={"coins": max(0, current.coins + delta)})

    return replace_match(tournament, match.model_copy(update={"live_scores": live_scores}))


def record_queen(tournament: schemas.Tournament, match_id: str, player_id: str) -> schemas.Tournament:
    match = get_match_or_raise(tournament, match_id)
    _assert_live_player(tournament, match, player_id)

    if match.queen_pocketed_by:
        raise ConflictError("The queen has already been pocketed in this match.")

    live_scores = dict(match.live_scores or {})
    current = live_scores.get(player_id, schemas.LiveScore())
    live_scores[player_id] = current.model_copy(update={"queens": 1})

    updated = match.model_copy(update={"live_scores": live_scores, "queen_pocketed_by": player_id})
    return replace_match(tournament, updated)


def update_live_score(
    tournament: schemas.Tournament,
    match_id: str,
    player_id: str,
    delta: int,
    is_queen: bool,
) -> schemas.Tournament:
    if is_queen:
        return record_queen(tournament, match_id, player_id)
    return record_coin(tournament, match_id, player_id, delta)


def team_live_points(match: schemas.Match, team: schemas.Team) -> int:
    live_scores = match.live_scores or {}
    return sum(player_live_points(live_scores[player.id]) for player in team.players if player.id in live_scores)


def _team_board(match: schemas.Match, team: schemas.Team) -> schemas.LiveTeamBoard:
    live_scores = match.live_scores or {}
    rows: list[schemas.LivePlayerRow] = []
    for player in team.players:
        score = live_scores.get(player.id, schemas.LiveScore())
        rows.append(
            schemas.LivePlayerRow(
                player_id=player.id,
                player=player.name,
                coins=score.coins,
                queens=score.queens,
                points=player_live_points(score),
            )
        )
    return schemas.LiveTeamBoard(
        team_id=team.id,
        team=team.name,
        total=team_live_points(match, team),
        players=rows,
    )


def live_board(tournament: schemas.Tournament, match_id: str) -> schemas.LiveBoard:
    match = get_match_or_raise(tournament, match_id)

    boards: list[schemas.LiveTeamBoard | None] = []
    for team_id in (match.team1_id, match.team2_id):
        if team_id == schemas.TBD:
            boards.append(None)
        else:
            boards.append(_team_board(match, get_team_or_raise(tournament, team_id)))

    return schemas.LiveBoard(
        match_id=match.id,
        status=match.status,
        queen_pocketed_by=match.queen_pocketed_by,
        team1=boards[0],
        team2=boards[1],
    )
