from collections.abc import Iterable

from . import schemas
from .errors import NotFoundError


def get_team_or_raise(tournament: schemas.Tournament, team_id: str) -> schemas.Team:
    for team in tournament.teams:
        if team.id == team_id:
            return team
    raise NotFoundError("Team not found.")


def get_group_or_raise(tournament: schemas.Tournament, group_id: str) -> schemas.Group:
    for group in tournament.groups:
        if group.id == group_id:
            return group
    raise NotFoundError("Group not found.")


def get_match_or_raise(tournament: schemas.Tournament, match_id: str) -> schemas.Match:
    for match in tournament.matches:
        if match.id == match_id:
            return match
    raise NotFoundError("Match not found.")


def find_player(teams: Iterable[schemas.Team], player_id: str) -> tuple[schemas.Team, schemas.Player] | None:
    for team in teams:
        for player in team.players:
            if player.id == player_id:
                return team, player
    return None


def find_playoff_match(tournament: schemas.Tournament, playoff_type: schemas.PlayoffType) -> schemas.Match | None:
    return next(
        (match for match in tournament.matches if match.stage == "playoff" and match.playoff_type == playoff_type),
        None,
    )


def replace_team(tournament: schemas.Tournament, team: schemas.Team) -> schemas.Tournament:
    teams = tuple(team if item.id == team.id else item for item in tournament.teams)
    return tournament.model_copy(update={"teams": teams})


def replace_match(tournament: schemas.Tournament, match: schemas.Match) -> schemas.Tournament:
    matches = tuple(match if item.id == match.id else item for item in tournament.matches)
    return tournament.model_copy(update={"matches": matches})


def team_name(tournament: schemas.Tournament, team_id: str | None) -> str | None:
    if team_id is None:
        return None
    if team_id == schemas.TBD:
        return schemas.TBD
    team = next((item for item in tournament.teams if item.id == team_id), None)
    return team.name if team else None
