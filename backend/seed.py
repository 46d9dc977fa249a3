from __future__ import annotations

import argparse
from datetime import datetime, time, timedelta, timezone

from carrom_league import crud, league, live_scoring, results, schemas
from carrom_league.database import init_db, session_scope
from carrom_league.ids import SequentialIds

DEMO_OWNER_ID = "dummy-owner-user-id"
DEMO_INVITE_CODE = "carr2024"

GROUPS = ["Group A", "Group B"]

TEAM_ROSTERS = {
    "Pocket Protectors": {"group": "Group A", "color": "#ef4444", "players": ["Alice", "Bob"]},
    "Striker Kings": {"group": "Group A", "color": "#3b82f6", "players": ["Charlie", "Diana"]},
    "Queen Slayers": {"group": "Group B", "color": "#22c55e", "players": ["Eve", "Frank"]},
    "Coin Collectors": {"group": "Group B", "color": "#f97316", "players": ["Grace", "Heidi"]},
}

ROUND_ROBIN_FIXTURES = [
    {"day": 1, "team1": "Pocket Protectors", "team2": "Striker Kings"},
    {"day": 2, "team1": "Queen Slayers", "team2": "Coin Collectors"},
    {"day": 3, "team1": "Pocket Protectors", "team2": "Queen Slayers"},
    {"day": 4, "team1": "Striker Kings", "team2": "Coin Collectors"},
    {"day": 5, "team1": "Pocket Protectors", "team2": "Coin Collectors"},
    {"day": 6, "team1": "Striker Kings", "team2": "Queen Slayers"},
]

MATCH_START_TIME = time(19, 0)

# (fixture index, winning team, winner score, coins per player, queen player)
DEMO_RESULTS = [
    (0, "Pocket Protectors", 14, {"Alice": 9, "Bob": 2, "Charlie": 4}, "Alice"),
    (1, "Coin Collectors", 11, {"Grace": 5, "Heidi": 3, "Eve": 6}, "Heidi"),
]


def fixture_date(start: datetime, day: int) -> datetime:
    return datetime.combine(start.date() + timedelta(days=day), MATCH_START_TIME, tzinfo=timezone.utc)


def build_demo_tournament(now: datetime, *, demo_progress: bool = False) -> schemas.Tournament:
    ids = SequentialIds("demo")
    tournament = schemas.Tournament(
        id="carr-champ-2024",
        name="Carrom Champions 2024",
        owner_id=DEMO_OWNER_ID,
        invite_code=DEMO_INVITE_CODE,
    )

    for group_name in GROUPS:
        tournament = league.add_group(tournament, group_name, ids)
    group_ids = {group.name: group.id for group in tournament.groups}

    for team_name, roster in TEAM_ROSTERS.items():
        tournament = league.add_team(
            tournament,
            team_name,
            ids,
            color=roster["color"],
            group_id=group_ids[roster["group"]],
            player_names=roster["players"],
        )
    teams = {team.name: team for team in tournament.teams}

    tournament = league.add_matches_batch(
        tournament,
        [
            (teams[fixture["team1"]].id, teams[fixture["team2"]].id, fixture_date(now, fixture["day"]))
            for fixture in ROUND_ROBIN_FIXTURES
        ],
        ids,
    )

    if demo_progress:
        tournament = apply_demo_progress(tournament, now)

    return tournament


def apply_demo_progress(tournament: schemas.Tournament, now: datetime) -> schemas.Tournament:
    players = {player.name: player.id for team in tournament.teams for player in team.players}
    teams = {team.name: team.id for team in tournament.teams}

    for fixture_index, winner, winner_score, coins, queen_player in DEMO_RESULTS:
        match_id = tournament.matches[fixture_index].id
        tournament = live_scoring.start_match(tournament, match_id, now)

        for player_name, pocketed in coins.items():
            for _ in range(pocketed):
                tournament = live_scoring.record_coin(tournament, match_id, players[player_name], 1)
        tournament = live_scoring.record_queen(tournament, match_id, players[queen_player])

        tournament = results.finalize_match(tournament, match_id, teams[winner], winner_score, now=now)

    # Leave the third fixture live on the board.
    live_match_id = tournament.matches[2].id
    tournament = live_scoring.start_match(tournament, live_match_id, now)
    tournament = live_scoring.record_coin(tournament, live_match_id, players["Eve"], 1)
    return tournament


def seed(*, demo_progress: bool = False) -> None:
    init_db(reset=True)

    with session_scope() as db:
        now = datetime.now(timezone.utc)
        crud.insert_tournament(db, build_demo_tournament(now, demo_progress=demo_progress))


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed tournament data.")
    parser.add_argument(
        "--demo-progress",
        action="store_true",
        help="Seed with sample completed/live matches for demo screens.",
    )
    args = parser.parse_args()

    seed(demo_progress=args.demo_progress)
    mode = "demo" if args.demo_progress else "fresh"
    print(f"Seed completed ({mode})")
