from __future__ import annotations

from leaderboard_core import (
    Competitor,
    EventConfig,
    EventResult,
    LeaderboardFilters,
    compute_rankings,
    division_penalties,
    partition_cohorts,
    rank_event,
    strategy_for,
)


def _athlete(name, division="Rx", sex="M", age=25, **events) -> Competitor:
    results = {
        event_id: value if isinstance(value, EventResult) else EventResult(raw=value)
        for event_id, value in events.items()
    }
    return Competitor(id=name.lower(), name=name, division=division, sex=sex, age=age, results=results)


def _configs(mode="higher_is_better", *, published=True, has_tiebreaker=False):
    return {
        event_id: EventConfig(id=event_id, mode=mode, published=published, has_tiebreaker=has_tiebreaker)
        for event_id in ("w1", "w2", "w3")
    }


def _by_name(rows):
    return {row.name: row for row in rows}


def test_higher_is_better_ranks_larger_first():
    athletes = [_athlete("Low", w1=100), _athlete("High", w1=200), _athlete("Mid", w1=150)]
    rows = compute_rankings(athletes, _configs())
    assert [row.name for row in rows] == ["High", "Mid", "Low"]
    assert [row.placement("w1") for row in rows] == [1, 2, 3]
    assert [row.total_points for row in rows] == [1, 2, 3]


def test_identical_scores_share_placement_and_skip_next():
    athletes = [_athlete("A", w1=150), _athlete("B", w1=150), _athlete("C", w1=100)]
    by_name = _by_name(compute_rankings(athletes, _configs()))
    assert by_name["A"].placement("w1") == 1
    assert by_name["B"].placement("w1") == 1
    assert by_name["C"].placement("w1") == 3


def test_lower_is_better_ranks_smaller_first():
    athletes = [_athlete("Slow", w1=600), _athlete("Fast", w1=300), _athlete("Mid", w1=450)]
    rows = compute_rankings(athletes, _configs("lower_is_better"))
    assert [row.name for row in rows] == ["Fast", "Mid", "Slow"]
    assert [row.placement("w1") for row in rows] == [1, 2, 3]


def test_lower_is_better_missing_result_ranks_last():
    athletes = [_athlete("NoScore", w1=0), _athlete("Timed", w1=300)]
    by_name = _by_name(compute_rankings(athletes, _configs("lower_is_better")))
    assert by_name["Timed"].placement("w1") == 1
    assert by_name["NoScore"].placement("w1") == 2


def test_capped_completion_placements():
    configs = _configs("capped_completion")
    athletes = [
        _athlete("Capped", w1=EventResult(raw=200, capped=True)),
        _athlete("Finished", w1=500),
    ]
    by_name = _by_name(compute_rankings(athletes, configs))
    assert by_name["Finished"].placement("w1") == 1
    assert by_name["Capped"].placement("w1") == 2

    athletes = [
        _athlete("SlowTB", w1=EventResult(raw=200, capped=True, tiebreak_seconds=500)),
        _athlete("FastTB", w1=EventResult(raw=200, capped=True, tiebreak_seconds=300)),
        _athlete("LowReps", w1=EventResult(raw=150, capped=True)),
    ]
    by_name = _by_name(compute_rankings(athletes, configs))
    assert by_name["FastTB"].placement("w1") == 1
    assert by_name["SlowTB"].placement("w1") == 2
    assert by_name["LowReps"].placement("w1") == 3


def test_tiebreaker_splits_equal_reps_when_enabled():
    configs = _configs(has_tiebreaker=True)
    athletes = [
        _athlete("SlowTB", w1=EventResult(raw=150, tiebreak_seconds=500)),
        _athlete("FastTB", w1=EventResult(raw=150, tiebreak_seconds=300)),
    ]
    by_name = _by_name(compute_rankings(athletes, configs))
    assert by_name["FastTB"].placement("w1") == 1
    assert by_name["SlowTB"].placement("w1") == 2

    athletes = [
        _athlete("A", w1=EventResult(raw=150, tiebreak_seconds=300)),
        _athlete("B", w1=EventResult(raw=150, tiebreak_seconds=300)),
    ]
    by_name = _by_name(compute_rankings(athletes, configs))
    assert by_name["A"].placement("w1") == 1
    assert by_name["B"].placement("w1") == 1


def test_rx_outranks_scaled_even_with_weaker_score():
    athletes = [
        _athlete("Scaled-High", division="Scaled", w1=300),
        _athlete("Rx-Low", division="Rx", w1=100),
    ]
    rows = compute_rankings(athletes, _configs())
    by_name = _by_name(rows)
    assert by_name["Rx-Low"].placement("w1") == 1
    assert by_name["Scaled-High"].placement("w1") == 2
    assert by_name["Rx-Low"].total_points < by_name["Scaled-High"].total_points
    assert [row.name for row in rows] == ["Rx-Low", "Scaled-High"]


def test_division_offset_builds_one_ladder_per_event():
    athletes = [
        _athlete("Found-1", division="Foundations", w1=400),
        _athlete("Scaled-2", division="Scaled", w1=250),
        _athlete("Rx-2", division="Rx", w1=100),
        _athlete("Scaled-1", division="Scaled", w1=300),
        _athlete("Rx-1", division="Rx", w1=200),
    ]
    rows = compute_rankings(athletes, _configs())
    assert [row.name for row in rows] == ["Rx-1", "Rx-2", "Scaled-1", "Scaled-2", "Found-1"]
    assert [row.placement("w1") for row in rows] == [1, 2, 3, 4, 5]
    # Offset is applied once: totals equal placements.
    assert [row.total_points for row in rows] == [1, 2, 3, 4, 5]


def test_offset_counts_competitors_not_placements():
    roster = [
        _athlete("Rx-A", division="Rx", w1=0),
        _athlete("Rx-B", division="Rx", w1=0),
        _athlete("Scaled-A", division="Scaled", w1=50),
    ]
    ladders = partition_cohorts(roster)
    placements = rank_event(roster, ladders, "w1", strategy_for(EventConfig(id="w1")))
    assert placements == [1, 1, 3]


def test_missing_result_costs_division_size_plus_one():
    athletes = [
        _athlete("Complete", w1=150, w2=200, w3=100),
        _athlete("Missing", w1=150, w2=0, w3=100),
    ]
    by_name = _by_name(compute_rankings(athletes, _configs()))
    assert by_name["Complete"].total_points == 3
    assert by_name["Missing"].total_points == 5
    assert by_name["Missing"].participation == 2
    # Still placed, at the bottom, for display purposes.
    assert by_name["Missing"].placement("w2") == 2


def test_division_penalties_are_per_division():
    roster = [
        _athlete("A", division="Rx"),
        _athlete("B", division="Rx"),
        _athlete("C", division="Scaled"),
    ]
    # Scaled placements start after both Rx competitors, and so does its penalty.
    assert division_penalties(roster) == {"Rx": 3, "Scaled": 4}


def test_totals_sum_placements_over_live_events():
    athletes = [_athlete("A", w1=200, w2=100, w3=150), _athlete("B", w1=150, w2=200, w3=100)]
    by_name = _by_name(compute_rankings(athletes, _configs()))
    a, b = by_name["A"], by_name["B"]
    assert (a.placement("w1"), a.placement("w2"), a.placement("w3")) == (1, 2, 1)
    assert (b.placement("w1"), b.placement("w2"), b.placement("w3")) == (2, 1, 2)
    assert a.total_points == 4
    assert b.total_points == 5


def test_participation_sorts_before_points():
    athletes = [
        _athlete("TwoWorkouts", w1=100, w2=100, w3=0),
        _athlete("ThreeWorkouts", w1=50, w2=50, w3=50),
    ]
    rows = compute_rankings(athletes, _configs())
    assert [row.name for row in rows] == ["ThreeWorkouts", "TwoWorkouts"]
    assert [row.participation for row in rows] == [3, 2]


def test_unpublished_workouts_award_no_points():
    athletes = [_athlete("A", w1=100), _athlete("B", w1=200)]
    rows = compute_rankings(athletes, _configs(published=False))
    assert [row.total_points for row in rows] == [0, 0]
    assert [row.participation for row in rows] == [0, 0]
    # Placements are still computed.
    assert _by_name(rows)["B"].placement("w1") == 1


def test_published_event_without_results_is_not_live():
    athletes = [_athlete("A", w1=100), _athlete("B", w1=0)]
    configs = _configs()
    by_name = _by_name(compute_rankings(athletes, configs))
    # Only w1 counts: B pays one penalty, not three.
    assert by_name["A"].total_points == 1
    assert by_name["B"].total_points == 3


def test_missing_config_counts_as_unpublished():
    athletes = [_athlete("A", w1=100, w2=10), _athlete("B", w1=200, w2=20)]
    configs = {"w1": EventConfig(id="w1", published=True)}
    by_name = _by_name(compute_rankings(athletes, configs))
    assert by_name["B"].total_points == 1
    assert by_name["A"].total_points == 2
    assert by_name["A"].placement("w2") == 2


def test_sexes_pool_within_division_by_default():
    athletes = [
        _athlete("Male-Low", sex="M", w1=100),
        _athlete("Male-High", sex="M", w1=200),
        _athlete("Female-Low", sex="F", w1=150),
        _athlete("Female-High", sex="F", w1=250),
    ]
    rows = compute_rankings(athletes, _configs())
    assert [row.name for row in rows] == ["Female-High", "Male-High", "Female-Low", "Male-Low"]
    assert [row.placement("w1") for row in rows] == [1, 2, 3, 4]


def test_sex_split_ranks_separate_ladders():
    athletes = [
        _athlete("Male-Low", sex="M", w1=100),
        _athlete("Male-High", sex="M", w1=200),
        _athlete("Female-Low", sex="F", w1=150),
        _athlete("Female-High", sex="F", w1=250),
        _athlete("Female-Scaled", division="Scaled", sex="F", w1=500),
    ]
    by_name = _by_name(compute_rankings(athletes, _configs(), by_sex=True))
    assert by_name["Male-High"].placement("w1") == 1
    assert by_name["Male-Low"].placement("w1") == 2
    assert by_name["Female-High"].placement("w1") == 1
    assert by_name["Female-Low"].placement("w1") == 2
    assert by_name["Female-Scaled"].placement("w1") == 3


def test_filters_apply_after_ranking():
    athletes = [
        _athlete("Rx", division="Rx", w1=100),
        _athlete("Scaled", division="Scaled", w1=200),
    ]
    rows = compute_rankings(athletes, _configs(), LeaderboardFilters(division="Scaled"))
    assert [row.name for row in rows] == ["Scaled"]
    assert rows[0].placement("w1") == 2


def test_mixed_scoring_open_style_scenario():
    configs = {
        "w1": EventConfig(id="w1", mode="capped_completion", time_cap=900, published=True),
        "w2": EventConfig(id="w2", mode="higher_is_better", has_tiebreaker=True, published=True),
        "w3": EventConfig(id="w3", mode="lower_is_better", published=True),
    }
    athletes = [
        _athlete(
            "Mike",
            w1=EventResult(raw=480),
            w2=EventResult(raw=150, tiebreak_seconds=300),
            w3=600,
        ),
        _athlete(
            "John",
            w1=EventResult(raw=520),
            w2=EventResult(raw=150, tiebreak_seconds=360),
            w3=540,
        ),
        _athlete(
            "Dave",
            w1=EventResult(raw=245, capped=True),
            w2=180,
            w3=720,
        ),
    ]
    rows = compute_rankings(athletes, configs)
    by_name = _by_name(rows)
    assert [by_name["Mike"].placement(w) for w in ("w1", "w2", "w3")] == [1, 2, 2]
    assert [by_name["John"].placement(w) for w in ("w1", "w2", "w3")] == [2, 3, 1]
    assert [by_name["Dave"].placement(w) for w in ("w1", "w2", "w3")] == [3, 1, 3]
    assert [row.name for row in rows] == ["Mike", "John", "Dave"]
    assert [row.total_points for row in rows] == [5, 6, 7]


def test_input_roster_is_not_reordered():
    athletes = [_athlete("Low", w1=100), _athlete("High", w1=200)]
    snapshot = list(athletes)
    compute_rankings(athletes, _configs())
    assert athletes == snapshot


def test_empty_roster_and_unknown_division():
    assert compute_rankings([], _configs()) == []

    stray = Competitor(id="x", name="Stray", division="Masters", sex="M", results={"w1": EventResult(raw=10)})
    rows = compute_rankings([stray], _configs())
    assert len(rows) == 1
    assert rows[0].placement("w1") is None
    # No placement to use, so the penalty stands in.
    assert rows[0].total_points == 2


def test_missing_result_penalty_keeps_rx_ahead_of_scaled():
    athletes = [
        _athlete("R1", division="Rx", w1=300, w2=300),
        _athlete("R2", division="Rx", w1=200, w2=200),
        _athlete("R3", division="Rx", w1=100, w2=0),
        _athlete("S1", division="Scaled", w1=50, w2=0),
    ]
    rows = compute_rankings(athletes, _configs())
    by_name = _by_name(rows)
    assert by_name["R3"].placement("w1") == 3
    assert by_name["S1"].placement("w1") == 4
    assert by_name["R3"].total_points == 3 + 4
    assert by_name["S1"].total_points == 4 + 5
    assert [row.name for row in rows] == ["R1", "R2", "R3", "S1"]


def test_lower_is_better_tiebreak_follows_event_flag():
    tied = [
        _athlete("SlowTB", w1=EventResult(raw=300, tiebreak_seconds=240)),
        _athlete("FastTB", w1=EventResult(raw=300, tiebreak_seconds=180)),
    ]
    by_name = _by_name(compute_rankings(tied, _configs("lower_is_better", has_tiebreaker=True)))
    assert by_name["FastTB"].placement("w1") == 1
    assert by_name["SlowTB"].placement("w1") == 2

    by_name = _by_name(compute_rankings(tied, _configs("lower_is_better")))
    assert by_name["FastTB"].placement("w1") == 1
    assert by_name["SlowTB"].placement("w1") == 1
