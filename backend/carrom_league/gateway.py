import logging
from collections.abc import Callable
from datetime import time
from typing import Annotated, Any, Literal, Protocol, Union

from pydantic import BaseModel, Field

from . import access, bracket, league, live_scoring, results, schemas
from .errors import PersistenceError
from .ids import Clock, IdGenerator, utc_now, uuid_ids

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Intents
# ---------------------------------------------------------------------------


class AddTeam(BaseModel):
    kind: Literal["add_team"] = "add_team"
    name: str = Field(min_length=1, max_length=100)
    color: str | None = None
    logo: str | None = None
    group_id: str | None = None
    player_names: list[str] = Field(default_factory=list)


class TeamBatchRow(BaseModel):
    group_name: str
    team_name: str
    player_names: list[str] = Field(default_factory=list)


class AddTeamsBatch(BaseModel):
    kind: Literal["add_teams_batch"] = "add_teams_batch"
    teams: list[TeamBatchRow]


class EditTeam(BaseModel):
    kind: Literal["edit_team"] = "edit_team"
    team_id: str
    updates: schemas.TeamUpdate


class DeleteTeam(BaseModel):
    kind: Literal["delete_team"] = "delete_team"
    team_id: str


class AddPlayer(BaseModel):
    kind: Literal["add_player"] = "add_player"
    team_id: str
    name: str = Field(min_length=1, max_length=100)


class EditPlayer(BaseModel):
    kind: Literal["edit_player"] = "edit_player"
    team_id: str
    player_id: str
    name: str = Field(min_length=1, max_length=100)


class DeletePlayer(BaseModel):
    kind: Literal["delete_player"] = "delete_player"
    team_id: str
    player_id: str


class AddGroup(BaseModel):
    kind: Literal["add_group"] = "add_group"
    name: str = Field(min_length=1, max_length=100)


class EditGroup(BaseModel):
    kind: Literal["edit_group"] = "edit_group"
    group_id: str
    name: str = Field(min_length=1, max_length=100)


class DeleteGroup(BaseModel):
    kind: Literal["delete_group"] = "delete_group"
    group_id: str


class AddMatch(BaseModel):
    kind: Literal["add_match"] = "add_match"
    team1_id: str
    team2_id: str
    date: schemas.UtcDateTime | None = None


class MatchFixture(BaseModel):
    team1_id: str
    team2_id: str
    date: schemas.UtcDateTime | None = None


class AddMatchesBatch(BaseModel):
    kind: Literal["add_matches_batch"] = "add_matches_batch"
    matches: list[MatchFixture]


class EditMatch(BaseModel):
    kind: Literal["edit_match"] = "edit_match"
    match_id: str
    updates: schemas.MatchUpdate


class DeleteMatch(BaseModel):
    kind: Literal["delete_match"] = "delete_match"
    match_id: str


class StartMatch(BaseModel):
    kind: Literal["start_match"] = "start_match"
    match_id: str


class UpdateLiveScore(BaseModel):
    kind: Literal["update_live_score"] = "update_live_score"
    match_id: str
    player_id: str
    delta: int = 0
    is_queen: bool = False


class UpdateMatchResult(BaseModel):
    kind: Literal["update_match_result"] = "update_match_result"
    match_id: str
    winner_id: str
    winner_score: int
    loser_score: int = 0


class EndLeagueStage(BaseModel):
    kind: Literal["end_league_stage"] = "end_league_stage"
    start_time: time | None = None


class UpdateCollaboratorRole(BaseModel):
    kind: Literal["update_collaborator_role"] = "update_collaborator_role"
    user_id: str
    role: schemas.CollaboratorRole


class RemoveCollaborator(BaseModel):
    kind: Literal["remove_collaborator"] = "remove_collaborator"
    user_id: str


Intent = Annotated[
    Union[
        AddTeam,
        AddTeamsBatch,
        EditTeam,
        DeleteTeam,
        AddPlayer,
        EditPlayer,
        DeletePlayer,
        AddGroup,
        EditGroup,
        DeleteGroup,
        AddMatch,
        AddMatchesBatch,
        EditMatch,
        DeleteMatch,
        StartMatch,
        UpdateLiveScore,
        UpdateMatchResult,
        EndLeagueStage,
        UpdateCollaboratorRole,
        RemoveCollaborator,
    ],
    Field(discriminator="kind"),
]


# ---------------------------------------------------------------------------
# Reducer
# ---------------------------------------------------------------------------


class MutationContext:
    def __init__(self, actor_id: str, ids: IdGenerator = uuid_ids, clock: Clock = utc_now) -> None:
        self.actor_id = actor_id
        self.ids = ids
        self.clock = clock


Handler = Callable[[schemas.Tournament, Any, MutationContext], schemas.Tournament]


def _end_league_stage(tournament: schemas.Tournament, intent: EndLeagueStage, ctx: MutationContext) -> schemas.Tournament:
    start_time = intent.start_time or bracket.DEFAULT_START_TIME
    return bracket.generate_playoffs(tournament, ctx.ids, ctx.clock(), start_time=start_time)


HANDLERS: dict[str, tuple[access.Action, Handler]] = {
    "add_team": (
        "team-edit",
        lambda t, i, ctx: league.add_team(
            t, i.name, ctx.ids, color=i.color, logo=i.logo, group_id=i.group_id, player_names=i.player_names
        ),
    ),
    "add_teams_batch": (
        "team-edit",
        lambda t, i, ctx: league.add_teams_batch(
            t, [(row.group_name, row.team_name, row.player_names) for row in i.teams], ctx.ids
        ),
    ),
    "edit_team": ("team-edit", lambda t, i, ctx: league.edit_team(t, i.team_id, i.updates.model_dump(exclude_unset=True))),
    "delete_team": ("team-edit", lambda t, i, ctx: league.delete_team(t, i.team_id)),
    "add_player": ("team-edit", lambda t, i, ctx: league.add_player(t, i.team_id, i.name, ctx.ids)),
    "edit_player": ("team-edit", lambda t, i, ctx: league.edit_player(t, i.team_id, i.player_id, i.name)),
    "delete_player": ("team-edit", lambda t, i, ctx: league.delete_player(t, i.team_id, i.player_id)),
    "add_group": ("team-edit", lambda t, i, ctx: league.add_group(t, i.name, ctx.ids)),
    "edit_group": ("team-edit", lambda t, i, ctx: league.edit_group(t, i.group_id, i.name)),
    "delete_group": ("team-edit", lambda t, i, ctx: league.delete_group(t, i.group_id)),
    "add_match": ("match-edit", lambda t, i, ctx: league.add_match(t, i.team1_id, i.team2_id, i.date, ctx.ids)),
    "add_matches_batch": (
        "match-edit",
        lambda t, i, ctx: league.add_matches_batch(
            t, [(fixture.team1_id, fixture.team2_id, fixture.date) for fixture in i.matches], ctx.ids
        ),
    ),
    "edit_match": ("match-edit", lambda t, i, ctx: league.edit_match(t, i.match_id, i.updates.model_dump(exclude_unset=True))),
    "delete_match": ("match-edit", lambda t, i, ctx: league.delete_match(t, i.match_id)),
    "end_league_stage": ("match-edit", _end_league_stage),
    "start_match": ("result-finalize", lambda t, i, ctx: live_scoring.start_match(t, i.match_id, ctx.clock())),
    "update_live_score": (
        "result-finalize",
        lambda t, i, ctx: live_scoring.update_live_score(t, i.match_id, i.player_id, i.delta, i.is_queen),
    ),
    "update_match_result": (
        "result-finalize",
        lambda t, i, ctx: results.finalize_match(
            t, i.match_id, i.winner_id, i.winner_score, i.loser_score, now=ctx.clock()
        ),
    ),
    "update_collaborator_role": (
        "manage-access",
        lambda t, i, ctx: access.update_collaborator_role(t, i.user_id, i.role),
    ),
    "remove_collaborator": ("manage-access", lambda t, i, ctx: access.remove_collaborator(t, i.user_id)),
}


def reduce(tournament: schemas.Tournament, intent: Intent, context: MutationContext) -> schemas.Tournament:
    action, handler = HANDLERS[intent.kind]
    access.require(context.actor_id, tournament, action)
    return handler(tournament, intent, context)


# ---------------------------------------------------------------------------
# Optimistic persistence
# ---------------------------------------------------------------------------


class TournamentStore(Protocol):
    def load(self, tournament_id: str) -> schemas.Tournament: ...

    def save(self, tournament: schemas.Tournament) -> None: ...


class TournamentGateway:
    def __init__(self, store: TournamentStore, ids: IdGenerator = uuid_ids, clock: Clock = utc_now) -> None:
        self.store = store
        self.ids = ids
        self.clock = clock
        self._snapshots: dict[str, schemas.Tournament] = {}

    def current(self, tournament_id: str) -> schemas.Tournament:
        if tournament_id not in self._snapshots:
            self._snapshots[tournament_id] = self.store.load(tournament_id)
        return self._snapshots[tournament_id]

    def dispatch(self, tournament_id: str, actor_id: str, intent: Intent) -> schemas.Tournament:
        prior = self.current(tournament_id)
        updated = reduce(prior, intent, MutationContext(actor_id, self.ids, self.clock))

        self._snapshots[tournament_id] = updated
        try:
            self.store.save(updated)
        except PersistenceError:
            self._snapshots[tournament_id] = prior
            logger.error("Write for %s on tournament %s failed; reverted", intent.kind, tournament_id)
            raise

        return updated
