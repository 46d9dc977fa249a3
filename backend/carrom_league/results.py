import logging
from datetime import datetime

from . import bracket, schemas
from .errors import ConflictError, InvalidArgumentError, NotFoundError
from .live_scoring import player_live_points
from .snapshot import find_player, get_match_or_raise, replace_match

logger = logging.getLogger(__name__)

WIN_POINTS = 2

TEAM_COUNTERS = ("matches_played", "wins", "losses", "points", "points_scored", "points_conceded")
PLAYER_COUNTERS = ("score", "coins", "queens", "matches_played")


def _validate_score(value: object, label: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(f"{label} must be a whole number.")
    if value < 0:
        raise InvalidArgumentError(f"{label} cannot be negative.")
    return value


def _drop_latest(form: tuple[schemas.FormResult, ...], result: schemas.FormResult) -> tuple[schemas.FormResult, ...]:
    for index in range(len(form) - 1, -1, -1):
        if form[index] == result:
            return form[:index] + form[index + 1 :]
    return form


def _apply_to_team(team: schemas.Team, delta: schemas.StatDelta, sign: int) -> schemas.Team:
    updates: dict[str, object] = {}

    team_delta = delta.teams.get(team.id)
    if team_delta is not None:
        for field in TEAM_COUNTERS:
            updates[field] = getattr(team, field) + sign * getattr(team_delta, field)
        if team_delta.form:
            if sign > 0:
                updates["recent_form"] = team.recent_form + (team_delta.form,)
            else:
                updates["recent_form"] = _drop_latest(team.recent_form, team_delta.form)

    if any(player.id in delta.players for player in team.players):
        players = []
        for player in team.players:
            player_delta = delta.players.get(player.id)
            if player_delta is None:
                players.append(player)
                continue
            players.append(
                player.model_copy(
                    update={
                        field: getattr(player, field) + sign * getattr(player_delta, field)
                        for field in PLAYER_COUNTERS
                    }
                )
            )
        updates["players"] = tuple(players)

    return team.model_copy(update=updates) if updates else team


def apply_delta(tournament: schemas.Tournament, delta: schemas.StatDelta, sign: int = 1) -> schemas.Tournament:
    teams = tuple(_apply_to_team(team, delta, sign) for team in tournament.teams)
    return tournament.model_copy(update={"teams": teams})


def _build_delta(
    match: schemas.Match,
    winner: schemas.Team,
    loser: schemas.Team,
    winner_score: int,
    loser_score: int,
) -> schemas.StatDelta:
    team_deltas: dict[str, schemas.TeamDelta] = {}

    # Playoff results never touch the league table.
    if match.stage == "league":
        team_deltas[winner.id] = schemas.TeamDelta(
            matches_played=1,
            wins=1,
            points=WIN_POINTS,
            points_scored=winner_score,
            points_conceded=loser_score,
            form="W",
        )
        team_deltas[loser.id] = schemas.TeamDelta(
            matches_played=1,
            losses=1,
            points_scored=loser_score,
            points_conceded=winner_score,
            form="L",
        )

    player_deltas: dict[str, schemas.PlayerDelta] = {}
    for player_id, live in (match.live_scores or {}).items():
        if find_player((winner, loser), player_id) is None:
            logger.warning("Skipping live score for unknown player %s in match %s", player_id, match.id)
            continue
        player_deltas[player_id] = schemas.PlayerDelta(
            score=player_live_points(live),
            coins=live.coins,
            queens=live.queens,
            matches_played=1,
        )

    return schemas.StatDelta(teams=team_deltas, players=player_deltas)


def finalize_match(
    tournament: schemas.Tournament,
    match_id: str,
    winner_id: str,
    winner_score: int,
    loser_score: int = 0,
    *,
    now: datetime,
) -> schemas.Tournament:
    match = get_match_or_raise(tournament, match_id)

    if match.status == "completed":
        raise ConflictError("Match result has already been recorded.")
    if match.has_placeholder:
        raise ConflictError("Both teams must be decided before recording a result.")
    if winner_id not in (match.team1_id, match.team2_id):
        raise InvalidArgumentError("Winner must be one of the two teams in this match.")

    winner_score = _validate_score(winner_score, "Winner score")
    loser_score = _validate_score(loser_score, "Loser score")

    loser_id = match.team2_id if winner_id == match.team1_id else match.team1_id
    teams = {team.id: team for team in tournament.teams}
    if winner_id not in teams or loser_id not in teams:
        raise NotFoundError("Team not found.")

    delta = _build_delta(match, teams[winner_id], teams[loser_id], winner_score, loser_score)
    team1_won = winner_id == match.team1_id

    completed = match.model_copy(
        update={
            "status": "completed",
            "winner_id": winner_id,
            "team1_score": winner_score if team1_won else loser_score,
            "team2_score": loser_score if team1_won else winner_score,
            "end_time": schemas.as_utc(now),
            "result_delta": delta,
        }
    )

    tournament = apply_delta(tournament, delta)
    tournament = replace_match(tournament, completed)
    logger.info(
        "Result recorded for match %s: winner %s (%d-%d)",
        match_id,
        teams[winner_id].name,
        winner_score,
        loser_score,
    )

    if completed.stage == "playoff":
        tournament = bracket.propagate(tournament, completed)

    return tournament


def revert_result(tournament: schemas.Tournament, match: schemas.Match) -> schemas.Tournament:
    # Bracket moves are not undone.
    if match.status != "completed" or match.result_delta is None:
        return tournament
    return apply_delta(tournament, match.result_delta, sign=-1)
