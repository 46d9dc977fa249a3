from collections.abc import Iterable, Mapping
from datetime import datetime

from . import schemas
from .errors import ConflictError, InvalidArgumentError, NotFoundError
from .ids import IdGenerator
from .results import revert_result
from .snapshot import get_group_or_raise, get_match_or_raise, get_team_or_raise, replace_match, replace_team

TEAM_COLORS: list[str] = [
    "#ef4444",
    "#f97316",
    "#eab308",
    "#84cc16",
    "#22c55e",
    "#14b8a6",
    "#06b6d4",
    "#3b82f6",
    "#8b5cf6",
    "#d946ef",
    "#ec4899",
]


def _normalize_text(value: str) -> str:
    return " ".join(value.split())


def _required_name(value: str, label: str) -> str:
    name = _normalize_text(value or "")
    if not name:
        raise InvalidArgumentError(f"{label} name cannot be empty.")
    return name


# ---------------------------------------------------------------------------
# Groups
# ---------------------------------------------------------------------------


def add_group(tournament: schemas.Tournament, name: str, ids: IdGenerator) -> schemas.Tournament:
    group = schemas.Group(id=ids(), name=_required_name(name, "Group"))
    return tournament.model_copy(update={"groups": tournament.groups + (group,)})


def edit_group(tournament: schemas.Tournament, group_id: str, name: str) -> schemas.Tournament:
    group = get_group_or_raise(tournament, group_id)
    renamed = group.model_copy(update={"name": _required_name(name, "Group")})
    groups = tuple(renamed if item.id == group_id else item for item in tournament.groups)
    return tournament.model_copy(update={"groups": groups})


def delete_group(tournament: schemas.Tournament, group_id: str) -> schemas.Tournament:
    get_group_or_raise(tournament, group_id)

    # Teams in the group become unassigned; they and their matches stay.
    teams = tuple(
        team.model_copy(update={"group_id": None}) if team.group_id == group_id else team for team in tournament.teams
    )
    groups = tuple(group for group in tournament.groups if group.id != group_id)
    return tournament.model_copy(update={"groups": groups, "teams": teams})


# ---------------------------------------------------------------------------
# Teams and players
# ---------------------------------------------------------------------------


def _assert_unique_team_name(tournament: schemas.Tournament, name: str, exclude_id: str | None = None) -> None:
    for team in tournament.teams:
        if team.id != exclude_id and team.name.lower() == name.lower():
            raise ConflictError("A team with this name already exists.")


def _new_players(names: Iterable[str], ids: IdGenerator) -> tuple[schemas.Player, ...]:
    return tuple(schemas.Player(id=ids(), name=_required_name(name, "Player")) for name in names)


def add_team(
    tournament: schemas.Tournament,
    name: str,
    ids: IdGenerator,
    color: str | None = None,
    logo: str | None = None,
    group_id: str | None = None,
    player_names: Iterable[str] = (),
) -> schemas.Tournament:
    clean_name = _required_name(name, "Team")
    _assert_unique_team_name(tournament, clean_name)
    if group_id is not None:
        get_group_or_raise(tournament, group_id)

    team = schemas.Team(
        id=ids(),
        name=clean_name,
        color=color or TEAM_COLORS[len(tournament.teams) % len(TEAM_COLORS)],
        logo=logo or None,
        group_id=group_id,
        players=_new_players(player_names, ids),
    )
    return tournament.model_copy(update={"teams": tournament.teams + (team,)})


def add_teams_batch(
    tournament: schemas.Tournament,
    rows: Iterable[tuple[str, str, Iterable[str]]],
    ids: IdGenerator,
) -> schemas.Tournament:
    # Rows are (group_name, team_name, player_names); missing groups are created.
    for group_name, team_name, player_names in rows:
        clean_group = _required_name(group_name, "Group")
        group = next((item for item in tournament.groups if item.name.lower() == clean_group.lower()), None)
        if group is None:
            tournament = add_group(tournament, clean_group, ids)
            group = tournament.groups[-1]
        tournament = add_team(tournament, team_name, ids, group_id=group.id, player_names=player_names)
    return tournament


def edit_team(tournament: schemas.Tournament, team_id: str, updates: Mapping[str, object]) -> schemas.Tournament:
    team = get_team_or_raise(tournament, team_id)
    changes: dict[str, object] = {}

    if "name" in updates and updates["name"] is not None:
        clean_name = _required_name(str(updates["name"]), "Team")
        _assert_unique_team_name(tournament, clean_name, exclude_id=team_id)
        changes["name"] = clean_name
    if "color" in updates and updates["color"]:
        changes["color"] = updates["color"]
    if "logo" in updates:
        changes["logo"] = updates["logo"] or None
    if "group_id" in updates:
        group_id = updates["group_id"]
        if group_id is not None:
            get_group_or_raise(tournament, str(group_id))
        changes["group_id"] = group_id

    return replace_team(tournament, team.model_copy(update=changes))


def delete_team(tournament: schemas.Tournament, team_id: str) -> schemas.Tournament:
    get_team_or_raise(tournament, team_id)

    kept: list[schemas.Match] = []
    for match in tournament.matches:
        if team_id in (match.team1_id, match.team2_id):
            tournament = revert_result(tournament, match)
        else:
            kept.append(match)

    teams = tuple(team for team in tournament.teams if team.id != team_id)
    return tournament.model_copy(update={"teams": teams, "matches": tuple(kept)})


def add_player(tournament: schemas.Tournament, team_id: str, name: str, ids: IdGenerator) -> schemas.Tournament:
    team = get_team_or_raise(tournament, team_id)
    return replace_team(tournament, team.model_copy(update={"players": team.players + _new_players([name], ids)}))


def edit_player(tournament: schemas.Tournament, team_id: str, player_id: str, name: str) -> schemas.Tournament:
    team = get_team_or_raise(tournament, team_id)
    if not any(player.id == player_id for player in team.players):
        raise NotFoundError("Player not found.")

    clean_name = _required_name(name, "Player")
    players = tuple(
        player.model_copy(update={"name": clean_name}) if player.id == player_id else player for player in team.players
    )
    return replace_team(tournament, team.model_copy(update={"players": players}))


def delete_player(tournament: schemas.Tournament, team_id: str, player_id: str) -> schemas.Tournament:
    team = get_team_or_raise(tournament, team_id)
    if not any(player.id == player_id for player in team.players):
        raise NotFoundError("Player not found.")

    players = tuple(player for player in team.players if player.id != player_id)
    return replace_team(tournament, team.model_copy(update={"players": players}))


# ---------------------------------------------------------------------------
# Matches
# ---------------------------------------------------------------------------


def _league_fixture(
    tournament: schemas.Tournament,
    team1_id: str,
    team2_id: str,
    date: datetime | None,
    ids: IdGenerator,
) -> schemas.Match:
    if not team1_id or not team2_id:
        raise InvalidArgumentError("Both teams are required.")
    if team1_id == team2_id:
        raise InvalidArgumentError("A team cannot play against itself.")
    if date is None:
        raise InvalidArgumentError("Match date is required.")

    get_team_or_raise(tournament, team1_id)
    get_team_or_raise(tournament, team2_id)

    return schemas.Match(id=ids(), stage="league", team1_id=team1_id, team2_id=team2_id, date=date)


def add_match(
    tournament: schemas.Tournament,
    team1_id: str,
    team2_id: str,
    date: datetime | None,
    ids: IdGenerator,
) -> schemas.Tournament:
    match = _league_fixture(tournament, team1_id, team2_id, date, ids)
    return tournament.model_copy(update={"matches": tournament.matches + (match,)})


def add_matches_batch(
    tournament: schemas.Tournament,
    fixtures: Iterable[tuple[str, str, datetime | None]],
    ids: IdGenerator,
) -> schemas.Tournament:
    # Validate every fixture before adding any of them.
    new_matches = tuple(_league_fixture(tournament, team1_id, team2_id, date, ids) for team1_id, team2_id, date in fixtures)
    return tournament.model_copy(update={"matches": tournament.matches + new_matches})


def edit_match(tournament: schemas.Tournament, match_id: str, updates: Mapping[str, object]) -> schemas.Tournament:
    match = get_match_or_raise(tournament, match_id)
    changes: dict[str, object] = {}

    if updates.get("date") is not None:
        changes["date"] = schemas.as_utc(updates["date"])
    if "name" in updates:
        changes["name"] = _normalize_text(str(updates["name"] or "")) or None

    return replace_match(tournament, match.model_copy(update=changes))


def delete_match(tournament: schemas.Tournament, match_id: str) -> schemas.Tournament:
    match = get_match_or_raise(tournament, match_id)
    tournament = revert_result(tournament, match)
    matches = tuple(item for item in tournament.matches if item.id != match_id)
    return tournament.model_copy(update={"matches": matches})
