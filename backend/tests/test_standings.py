from carrom_league import league, standings
from carrom_league.ids import SequentialIds

from factories import build_tournament, play, player, team, with_stats


def test_rank_teams_orders_by_points_then_net_score_margin(tournament):
    tournament = with_stats(tournament, "Alpha", points=2, points_scored=10, points_conceded=9)
    tournament = with_stats(tournament, "Bravo", points=4, points_scored=5, points_conceded=20)
    tournament = with_stats(tournament, "Charlie", points=2, points_scored=15, points_conceded=3)
    tournament = with_stats(tournament, "Delta", points=0, points_scored=40, points_conceded=0)

    ranked = [item.name for item in standings.rank_teams(tournament.teams)]

    assert ranked == ["Bravo", "Charlie", "Alpha", "Delta"]


def test_rank_teams_keeps_input_order_for_full_ties(tournament):
    tournament = with_stats(tournament, "Bravo", points=2, points_scored=7, points_conceded=2)
    tournament = with_stats(tournament, "Delta", points=2, points_scored=7, points_conceded=2)

    ranked = [item.name for item in standings.rank_teams(tournament.teams)]

    assert ranked == ["Bravo", "Delta", "Alpha", "Charlie"]


def test_rank_teams_handles_empty_list():
    assert standings.rank_teams([]) == []


def test_adjacent_rows_respect_points_then_margin():
    tournament = build_tournament(("A", "B", "C", "D", "E", "F"))
    tournament = play(tournament, "A", "B", "A", 12, 3)
    tournament = play(tournament, "C", "D", "D", 9, 8)
    tournament = play(tournament, "E", "F", "E", 4, 1)
    tournament = play(tournament, "A", "C", "C", 10, 0)
    tournament = play(tournament, "B", "F", "B", 15, 14)
    tournament = play(tournament, "D", "E", "E", 7, 6)

    ranked = standings.rank_teams(tournament.teams)
    for first, second in zip(ranked, ranked[1:]):
        assert first.points > second.points or (
            first.points == second.points
            and standings.net_score_margin(first) >= standings.net_score_margin(second)
        )


def test_points_table_rows(tournament):
    tournament = league.add_group(tournament, "Group A", SequentialIds("g"))
    group_id = tournament.groups[-1].id
    tournament = league.edit_team(tournament, team(tournament, "Alpha").id, {"group_id": group_id})

    for day in range(6):
        tournament = play(tournament, "Alpha", "Bravo", "Alpha" if day % 3 else "Bravo", 10, 4, day=day)

    rows = standings.build_points_table(tournament)

    assert [row.rank for row in rows] == [1, 2, 3, 4]
    top = rows[0]
    assert top.team == "Alpha"
    assert top.group == "Group A"
    assert top.matches_played == 6
    assert top.wins == 4
    assert top.losses == 2
    assert top.points == 8
    assert top.net_score_margin == top.points_scored - top.points_conceded
    assert top.recent_form == ["W", "W", "L", "W", "W"]
    assert all(row.qualifies for row in rows)


def test_only_top_four_qualify():
    tournament = build_tournament(("A", "B", "C", "D", "E"))
    tournament = play(tournament, "E", "A", "E", 5)

    rows = standings.build_points_table(tournament)

    assert rows[0].team == "E"
    assert [row.qualifies for row in rows] == [True, True, True, True, False]


def test_super_striker_requires_positive_score(tournament):
    board = standings.build_striker_board(tournament)

    assert board.super_striker is None
    assert len(board.rankings) == 8


def test_super_striker_is_top_scoring_player(tournament):
    star = player(tournament, "Charlie 2")
    charlie = team(tournament, "Charlie")
    boosted = star.model_copy(update={"score": 14, "coins": 11, "queens": 1, "matches_played": 2})
    players = tuple(boosted if item.id == star.id else item for item in charlie.players)
    tournament = with_stats(tournament, "Charlie", players=players)

    board = standings.build_striker_board(tournament)

    assert board.super_striker is not None
    assert board.super_striker.player == "Charlie 2"
    assert board.super_striker.team == "Charlie"
    assert board.super_striker.score == 14
    assert board.rankings[0].rank == 1
