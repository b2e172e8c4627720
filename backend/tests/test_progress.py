"""
Unit tests for the pure progress aggregation pipeline in liftlog.progress.
Run: python -m pytest backend/tests/test_progress.py -v
"""
import unittest
from datetime import datetime, timedelta, timezone

from liftlog.progress import (
    ALL_MUSCLE_GROUPS,
    CatalogEntry,
    ExerciseProgress,
    SessionObservation,
    SetRecord,
    Trend,
    WorkoutExerciseRecord,
    WorkoutRecord,
    aggregate,
    analyze_progress,
    best_progress,
    classify_trend,
    cutoff_for,
    extract_observations,
    in_scope,
    in_window,
    observe,
    rank_by_progress,
    resolve_period,
    select_window,
    workout_stats,
)

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)

CATALOG = [
    CatalogEntry("ex_bench", "Жим лёжа", "Грудь"),
    CatalogEntry("ex_fly", "Разводка", "Грудь"),
    CatalogEntry("ex_row", "Тяга штанги", "Спина"),
    CatalogEntry("ex_pull", "Подтягивания", "Спина"),
]
BY_ID = {c.id: c for c in CATALOG}


def days_ago(n):
    return NOW - timedelta(days=n)


def we(exercise_id, *weights, reps=10, completed=True, achieved=False):
    return WorkoutExerciseRecord(
        exercise_id=exercise_id,
        sets=tuple(SetRecord(weight=w, reps=reps, completed=completed) for w in weights),
        weight_achieved=achieved,
    )


def workout(age_days, *exercises, status="completed"):
    return WorkoutRecord(started_at=days_ago(age_days), exercises=exercises, status=status)


def sessions(*max_weights):
    return [
        SessionObservation(date=days_ago(len(max_weights) - i), max_weight=w,
                           total_volume=0, sets_completed=0, weight_taken=False)
        for i, w in enumerate(max_weights)
    ]


def summary(exercise_id, best_weight, trend=Trend.stable, count=2):
    return ExerciseProgress(exercise_id=exercise_id, exercise_name=exercise_id, muscle_group="Грудь",
                            best_weight=best_weight, sessions_count=count, trend=trend)


# --- window / filter policy ---
class TestWindowPolicy(unittest.TestCase):
    def test_resolve_known_periods(self):
        self.assertEqual(resolve_period("7"), 7)
        self.assertEqual(resolve_period(90), 90)
        self.assertEqual(resolve_period("365"), 365)

    def test_resolve_malformed_falls_back(self):
        """Garbage or unsupported selectors fail safe to the default period."""
        self.assertEqual(resolve_period("abc"), 30)
        self.assertEqual(resolve_period(None), 30)
        self.assertEqual(resolve_period("14"), 30)
        self.assertEqual(resolve_period("-7"), 30)
        self.assertEqual(resolve_period("oops", default=90), 90)

    def test_cutoff_is_inclusive(self):
        cutoff = cutoff_for(7, NOW)
        self.assertTrue(in_window(WorkoutRecord(started_at=cutoff), cutoff))
        self.assertFalse(in_window(WorkoutRecord(started_at=cutoff - timedelta(seconds=1)), cutoff))

    def test_naive_timestamps_are_utc(self):
        naive = (NOW - timedelta(days=2)).replace(tzinfo=None)
        self.assertTrue(in_window(WorkoutRecord(started_at=naive), cutoff_for(7, NOW)))

    def test_window_monotonicity(self):
        """Shorter periods select a subset of what longer periods select."""
        history = [workout(d, we("ex_bench", 50)) for d in (1, 5, 20, 60, 200, 400)]
        selected = {p: {w.started_at for w in select_window(history, p, NOW)} for p in (7, 30, 90, 365)}
        self.assertEqual(len(selected[7]), 2)
        self.assertTrue(selected[7] <= selected[30] <= selected[90] <= selected[365])
        self.assertEqual(len(selected[365]), 5)

        counts = {
            p: analyze_progress(history, CATALOG, period=p, now=NOW).exercises[0].sessions_count
            for p in (7, 30, 90, 365)
        }
        self.assertTrue(counts[7] <= counts[30] <= counts[90] <= counts[365])

    def test_in_scope(self):
        p = summary("ex_row", 80)
        p.muscle_group = "Спина"
        self.assertTrue(in_scope(p, ALL_MUSCLE_GROUPS))
        self.assertTrue(in_scope(p, "Спина"))
        self.assertFalse(in_scope(p, "Грудь"))


# --- session extractor ---
class TestSessionExtractor(unittest.TestCase):
    def test_volume_is_weight_times_reps(self):
        rec = WorkoutExerciseRecord("ex_bench", sets=(
            SetRecord(50, 10, True),
            SetRecord(60, 8, False),
            SetRecord(0, 10, True),
        ))
        obs = observe(rec, NOW)
        self.assertEqual(obs.total_volume, 50 * 10 + 60 * 8)
        self.assertEqual(obs.max_weight, 60)
        self.assertEqual(obs.sets_completed, 2)

    def test_zero_weight_contributes_nothing(self):
        for completed in (True, False):
            obs = observe(WorkoutExerciseRecord("x", sets=(SetRecord(0, 12, completed),)), NOW)
            self.assertEqual(obs.total_volume, 0)
            self.assertEqual(obs.max_weight, 0)

    def test_no_sets_gives_zero_max(self):
        obs = observe(WorkoutExerciseRecord("x", sets=()), NOW)
        self.assertEqual((obs.max_weight, obs.total_volume, obs.sets_completed), (0, 0, 0))

    def test_bare_set_count_observes_nothing(self):
        """A plan that was never executed still holds only a set count."""
        obs = observe(WorkoutExerciseRecord("x", sets=4, weight_achieved=False), NOW)
        self.assertEqual((obs.max_weight, obs.total_volume, obs.sets_completed), (0, 0, 0))

    def test_one_observation_per_exercise_in_order(self):
        w = workout(1, we("ex_row", 70), we("ex_bench", 50, achieved=True), we("ex_fly", 12))
        pairs = extract_observations(w)
        self.assertEqual([eid for eid, _ in pairs], ["ex_row", "ex_bench", "ex_fly"])
        self.assertTrue(pairs[1][1].weight_taken)
        self.assertFalse(pairs[0][1].weight_taken)
        self.assertTrue(all(obs.date == w.started_at for _, obs in pairs))


# --- aggregator ---
class TestAggregator(unittest.TestCase):
    def test_single_session_scenario(self):
        history = [workout(1, we("ex_bench", 50, reps=10, completed=True))]
        report = analyze_progress(history, CATALOG, period=30, now=NOW)
        self.assertEqual(len(report.exercises), 1)
        p = report.exercises[0]
        self.assertEqual(p.best_weight, 50)
        self.assertEqual(p.total_volume, 500)
        self.assertEqual(p.sessions_count, 1)
        self.assertEqual(p.trend, Trend.stable)
        self.assertEqual(p.exercise_name, "Жим лёжа")

    def test_unknown_exercise_is_dropped(self):
        history = [workout(1, we("ex_404", 100), we("ex_row", 70))]
        report = analyze_progress(history, CATALOG, now=NOW)
        ids = [p.exercise_id for p in report.exercises]
        self.assertEqual(ids, ["ex_row"])

    def test_folds_across_sessions(self):
        history = [
            workout(10, we("ex_bench", 40, 45)),
            workout(5, we("ex_bench", 50)),
            workout(1, we("ex_bench", 47.5)),
        ]
        p = aggregate([pair for w in history for pair in extract_observations(w)], BY_ID)["ex_bench"]
        self.assertEqual(p.sessions_count, 3)
        self.assertEqual(p.best_weight, 50)
        self.assertEqual(p.total_volume, (40 + 45 + 50 + 47.5) * 10)

    def test_sessions_sorted_but_last_performed_follows_fold_order(self):
        newest_first = [workout(1, we("ex_bench", 60)), workout(8, we("ex_bench", 50))]
        p = aggregate([pair for w in newest_first for pair in extract_observations(w)], BY_ID)["ex_bench"]
        self.assertEqual([s.max_weight for s in p.sessions], [50, 60])
        self.assertEqual(p.last_performed, days_ago(8))

    def test_same_date_sessions_keep_fold_order(self):
        same_day = days_ago(2)
        obs = [
            ("ex_row", SessionObservation(same_day, 70, 0, 0, False)),
            ("ex_row", SessionObservation(days_ago(3), 60, 0, 0, False)),
            ("ex_row", SessionObservation(same_day, 75, 0, 0, False)),
        ]
        p = aggregate(obs, BY_ID)["ex_row"]
        self.assertEqual([s.max_weight for s in p.sessions], [60, 70, 75])

    def test_best_weight_never_decreases(self):
        weights = [50, 55, 45, 60, 40]
        obs = [("ex_bench", SessionObservation(days_ago(10 - i), w, 0, 0, False)) for i, w in enumerate(weights)]
        previous = 0
        for n in range(1, len(obs) + 1):
            best = aggregate(obs[:n], BY_ID)["ex_bench"].best_weight
            self.assertGreaterEqual(best, previous)
            previous = best
        self.assertEqual(previous, 60)

    def test_idempotent_on_same_input(self):
        history = [
            workout(3, we("ex_bench", 50), we("ex_row", 70)),
            workout(9, we("ex_bench", 45), we("ex_pull", 0)),
        ]
        first = analyze_progress(history, CATALOG, now=NOW)
        second = analyze_progress(history, CATALOG, now=NOW)
        self.assertEqual(first, second)
        self.assertIsNot(first.exercises[0], second.exercises[0])

    def test_empty_inputs(self):
        report = analyze_progress([], [], now=NOW)
        self.assertEqual(report.exercises, [])
        self.assertEqual(report.best, [])
        self.assertEqual(report.stats.total_workouts, 0)
        self.assertEqual(report.stats.avg_workouts_per_week, 0.0)
        self.assertEqual(analyze_progress([workout(1, we("ex_bench", 50))], [], now=NOW).exercises, [])


# --- trend classifier ---
class TestTrend(unittest.TestCase):
    def test_fewer_than_two_sessions_is_stable(self):
        self.assertEqual(classify_trend([]), Trend.stable)
        self.assertEqual(classify_trend(sessions(100)), Trend.stable)

    def test_no_older_window_is_stable(self):
        self.assertEqual(classify_trend(sessions(50, 100)), Trend.stable)
        self.assertEqual(classify_trend(sessions(50, 80, 100)), Trend.stable)

    def test_partial_older_window(self):
        self.assertEqual(classify_trend(sessions(100, 110, 110, 110)), Trend.up)
        self.assertEqual(classify_trend(sessions(100, 90, 90, 90)), Trend.down)

    def test_boundaries_are_exclusive(self):
        def trend(recent):
            return classify_trend(sessions(100, 100, 100, recent, recent, recent))

        self.assertEqual(trend(105.000001), Trend.up)
        self.assertEqual(trend(105), Trend.stable)
        self.assertEqual(trend(104.999), Trend.stable)
        self.assertEqual(trend(104), Trend.stable)
        self.assertEqual(trend(95.0001), Trend.stable)
        self.assertEqual(trend(95), Trend.stable)
        self.assertEqual(trend(94.999), Trend.down)

    def test_only_last_two_windows_count(self):
        self.assertEqual(classify_trend(sessions(10, 10, 10, 100, 100, 100, 100, 100, 100)), Trend.stable)

    def test_policy_parameters(self):
        s = sessions(100, 100, 108, 108)
        self.assertEqual(classify_trend(s, window=2, deadband=0.05), Trend.up)
        self.assertEqual(classify_trend(s, window=2, deadband=0.10), Trend.stable)


# --- ranking ---
class TestRanking(unittest.TestCase):
    def test_up_first_then_best_weight(self):
        items = [
            summary("a", 80, Trend.stable),
            summary("b", 40, Trend.up),
            summary("c", 100, Trend.down),
            summary("d", 60, Trend.up),
        ]
        self.assertEqual([p.exercise_id for p in rank_by_progress(items)], ["d", "b", "c", "a"])

    def test_ties_keep_prior_order(self):
        items = [summary("a", 50, Trend.stable), summary("b", 50, Trend.down), summary("c", 50, Trend.stable)]
        self.assertEqual([p.exercise_id for p in rank_by_progress(items)], ["a", "b", "c"])

    def test_best_progress_needs_two_sessions_and_is_capped(self):
        items = [summary(f"e{i}", 10 * i, Trend.stable, count=2) for i in range(8)]
        items.append(summary("solo", 999, Trend.up, count=1))
        best = best_progress(items)
        self.assertEqual(len(best), 5)
        self.assertNotIn("solo", [p.exercise_id for p in best])
        self.assertEqual(best[0].exercise_id, "e7")


# --- period statistics ---
class TestWorkoutStats(unittest.TestCase):
    def test_counts_within_period(self):
        history = [
            workout(1, we("ex_bench", 50, 50), we("ex_row", 70)),
            workout(4, WorkoutExerciseRecord("ex_fly", sets=3), status="active"),
            workout(10, we("ex_pull", 0, 0, 0)),
            workout(20, we("ex_bench", 45)),
            workout(45, we("ex_bench", 40)),
        ]
        stats = workout_stats(history, 30, NOW)
        self.assertEqual(stats.total_workouts, 3)
        self.assertEqual(stats.total_exercises, 5)
        self.assertEqual(stats.total_sets, 2 + 1 + 3 + 3 + 1)
        self.assertEqual(stats.avg_workouts_per_week, 0.7)


# --- full pass ---
class TestAnalyzeProgress(unittest.TestCase):
    def setUp(self):
        self.history = [
            workout(2, we("ex_bench", 60), we("ex_row", 80)),
            workout(6, we("ex_pull", 10), we("ex_fly", 14)),
            workout(12, we("ex_row", 75), we("ex_bench", 55)),
        ]

    def test_muscle_group_filter(self):
        everything = analyze_progress(self.history, CATALOG, now=NOW)
        back = analyze_progress(self.history, CATALOG, muscle_group="Спина", now=NOW)
        self.assertTrue(all(p.muscle_group == "Спина" for p in back.exercises))
        expected = [(p.exercise_id, p.sessions_count) for p in everything.exercises if p.muscle_group == "Спина"]
        self.assertEqual([(p.exercise_id, p.sessions_count) for p in back.exercises], expected)
        self.assertEqual(len(expected), 2)

    def test_report_carries_period_and_trend(self):
        report = analyze_progress(self.history, CATALOG, period="bogus", now=NOW)
        self.assertEqual(report.period_days, 30)
        self.assertEqual(report.muscle_group, ALL_MUSCLE_GROUPS)
        self.assertTrue(all(isinstance(p.trend, Trend) for p in report.exercises))
        self.assertEqual([p.exercise_id for p in report.best], ["ex_row", "ex_bench"])


if __name__ == "__main__":
    unittest.main()
