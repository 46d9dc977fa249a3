from collections.abc import Sequence

from . import schemas

PLAYOFF_SPOTS = 4
FORM_WINDOW = 5


def net_score_margin(team: schemas.Team) -> int:
    return team.points_scored - team.points_conceded


def rank_teams(teams: Sequence[schemas.Team]) -> list[schemas.Team]:
    # sorted() is stable, so teams level on points and NSM keep their order.
    return sorted(teams, key=lambda team: (-team.points, -net_score_margin(team)))


def build_points_table(tournament: schemas.Tournament) -> list[schemas.StandingRow]:
    group_names = {group.id: group.name for group in tournament.groups}

    rows: list[schemas.StandingRow] = []
    for rank, team in enumerate(rank_teams(tournament.teams), start=1):
        rows.append(
            schemas.StandingRow(
                rank=rank,
                team_id=team.id,
                team=team.name,
                color=team.color,
                logo=team.logo,
                group=group_names.get(team.group_id) if team.group_id else None,
                matches_played=team.matches_played,
                wins=team.wins,
                losses=team.losses,
                points=team.points,
                net_score_margin=net_score_margin(team),
                points_scored=team.points_scored,
                points_conceded=team.points_conceded,
                recent_form=list(team.recent_form[-FORM_WINDOW:]),
                qualifies=rank <= PLAYOFF_SPOTS,
            )
        )
    return rows


def rank_players(tournament: schemas.Tournament) -> list[schemas.StrikerRow]:
    entries = [(team, player) for team in tournament.teams for player in team.players]
    entries.sort(key=lambda item: -item[1].score)

    return [
        schemas.StrikerRow(
            rank=rank,
            player_id=player.id,
            player=player.name,
            team_id=team.id,
            team=team.name,
            team_color=team.color,
            score=player.score,
            coins=player.coins,
            queens=player.queens,
            matches_played=player.matches_played,
        )
        for rank, (team, player) in enumerate(entries, start=1)
    ]


def build_striker_board(tournament: schemas.Tournament) -> schemas.StrikerBoard:
    rankings = rank_players(tournament)
    leader = rankings[0] if rankings and rankings[0].score > 0 else None
    return schemas.StrikerBoard(super_striker=leader, rankings=rankings)
