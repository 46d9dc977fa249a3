from datetime import datetime, timezone
from typing import Annotated, Literal

from pydantic import AfterValidator, BaseModel, ConfigDict, Field

TBD = "TBD"


def as_utc(value: datetime) -> datetime:
    # Naive datetimes are taken as UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


UtcDateTime = Annotated[datetime, AfterValidator(as_utc)]

MatchStage = Literal["league", "playoff"]
PlayoffType = Literal["qualifier1", "eliminator", "qualifier2", "final"]
MatchStatus = Literal["upcoming", "inprogress", "completed"]
TournamentStage = Literal["league", "playoffs", "completed"]
CollaboratorRole = Literal["editor", "viewer"]
Role = Literal["owner", "editor", "viewer"]
FormResult = Literal["W", "L"]


class DomainModel(BaseModel):
    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Tournament snapshot
# ---------------------------------------------------------------------------


class Player(DomainModel):
    id: str
    name: str
    score: int = 0
    coins: int = 0
    queens: int = 0
    matches_played: int = 0


class Team(DomainModel):
    id: str
    name: str
    color: str
    logo: str | None = None
    group_id: str | None = None
    players: tuple[Player, ...] = ()

    matches_played: int = 0
    wins: int = 0
    losses: int = 0
    points: int = 0
    points_scored: int = 0
    points_conceded: int = 0
    recent_form: tuple[FormResult, ...] = ()


class Group(DomainModel):
    id: str
    name: str


class LiveScore(DomainModel):
    coins: int = 0
    # 0 or 1: the queen is claimed once per match.
    queens: int = 0


class PlayerDelta(DomainModel):
    score: int = 0
    coins: int = 0
    queens: int = 0
    matches_played: int = 0


class TeamDelta(DomainModel):
    matches_played: int = 0
    wins: int = 0
    losses: int = 0
    points: int = 0
    points_scored: int = 0
    points_conceded: int = 0
    form: FormResult | None = None


class StatDelta(DomainModel):
    teams: dict[str, TeamDelta] = Field(default_factory=dict)
    players: dict[str, PlayerDelta] = Field(default_factory=dict)


class Match(DomainModel):
    id: str
    name: str | None = None
    stage: MatchStage = "league"
    playoff_type: PlayoffType | None = None

    team1_id: str
    team2_id: str
    date: UtcDateTime
    status: MatchStatus = "upcoming"

    winner_id: str | None = None
    team1_score: int | None = None
    team2_score: int | None = None

    live_scores: dict[str, LiveScore] | None = None
    queen_pocketed_by: str | None = None

    start_time: UtcDateTime | None = None
    end_time: UtcDateTime | None = None

    result_delta: StatDelta | None = None

    @property
    def has_placeholder(self) -> bool:
        return self.team1_id == TBD or self.team2_id == TBD


class Collaborator(DomainModel):
    user_id: str
    role: CollaboratorRole


class Tournament(DomainModel):
    id: str
    name: str
    stage: TournamentStage = "league"
    owner_id: str
    invite_code: str
    collaborators: tuple[Collaborator, ...] = ()

    groups: tuple[Group, ...] = ()
    teams: tuple[Team, ...] = ()
    matches: tuple[Match, ...] = ()


# ---------------------------------------------------------------------------
# Request payloads
# ---------------------------------------------------------------------------


class TournamentCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)


class JoinRequest(BaseModel):
    invite_code: str = Field(min_length=1, max_length=32)


class TeamUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    color: str | None = None
    logo: str | None = None
    group_id: str | None = None


class PlayerCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)


class PlayerUpdate(BaseModel):
    name: str = Field(min_length=1, max_length=100)


class GroupUpdate(BaseModel):
    name: str = Field(min_length=1, max_length=100)


class MatchUpdate(BaseModel):
    date: UtcDateTime | None = None
    name: str | None = None


class LiveScoreUpdate(BaseModel):
    player_id: str
    delta: int = 0
    is_queen: bool = False


class ResultSubmit(BaseModel):
    winner_id: str
    winner_score: int
    loser_score: int = 0


class CollaboratorRoleUpdate(BaseModel):
    role: CollaboratorRole


# ---------------------------------------------------------------------------
# Read models
# ---------------------------------------------------------------------------


class TournamentSummary(BaseModel):
    id: str
    name: str
    stage: TournamentStage
    owner_id: str
    role: Role
    team_count: int
    match_count: int


class StandingRow(BaseModel):
    rank: int
    team_id: str
    team: str
    color: str
    logo: str | None = None
    group: str | None = None

    matches_played: int
    wins: int
    losses: int
    points: int
    net_score_margin: int
    points_scored: int
    points_conceded: int
    recent_form: list[FormResult] = Field(default_factory=list)
    qualifies: bool = False


class StrikerRow(BaseModel):
    rank: int
    player_id: str
    player: str
    team_id: str
    team: str
    team_color: str
    score: int
    coins: int
    queens: int
    matches_played: int


class StrikerBoard(BaseModel):
    super_striker: StrikerRow | None = None
    rankings: list[StrikerRow] = Field(default_factory=list)


class LivePlayerRow(BaseModel):
    player_id: str
    player: str
    coins: int
    queens: int
    points: int


class LiveTeamBoard(BaseModel):
    team_id: str
    team: str
    total: int
    players: list[LivePlayerRow] = Field(default_factory=list)


class LiveBoard(BaseModel):
    match_id: str
    status: MatchStatus
    queen_pocketed_by: str | None = None
    team1: LiveTeamBoard | None = None
    team2: LiveTeamBoard | None = None


class BracketView(BaseModel):
    stage: TournamentStage
    qualifier1: Match | None = None
    eliminator: Match | None = None
    qualifier2: Match | None = None
    final: Match | None = None
    champion_id: str | None = None
    champion: str | None = None
