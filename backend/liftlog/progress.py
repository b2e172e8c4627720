"""
Progress aggregation over a snapshot of a user's workout history.

Everything here is pure: functions take immutable records already fetched
from the database and return fresh result objects. Nothing is cached and
nothing is mutated outside the result being built, so a pass can be re-run
on every period or filter change.

Pipeline:
    workouts -> window (period cutoff) -> one observation per
    (exercise, workout) -> fold per exercise -> trend label -> muscle filter
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from operator import attrgetter
from typing import Hashable, Iterable, Mapping, Sequence

log = logging.getLogger(__name__)

PERIOD_DAYS = (7, 30, 90, 365)
DEFAULT_PERIOD_DAYS = 30
ALL_MUSCLE_GROUPS = "all"

TREND_WINDOW = 3
TREND_DEADBAND = 0.05


class Trend(str, Enum):
    up = "up"
    down = "down"
    stable = "stable"


# --- input records ---

@dataclass(frozen=True, slots=True)
class SetRecord:
    weight: float = 0.0
    reps: int = 0
    completed: bool = False


@dataclass(frozen=True, slots=True)
class WorkoutExerciseRecord:
    exercise_id: Hashable
    # materialised sets, or the bare planned count before execution started
    sets: Sequence[SetRecord] | int = ()
    weight_achieved: bool = False


@dataclass(frozen=True, slots=True)
class WorkoutRecord:
    started_at: datetime
    exercises: Sequence[WorkoutExerciseRecord] = ()
    status: str = "active"


@dataclass(frozen=True, slots=True)
class CatalogEntry:
    id: Hashable
    name: str
    muscle_group: str


# --- results ---

@dataclass(slots=True)
class SessionObservation:
    date: datetime
    max_weight: float
    total_volume: float
    sets_completed: int
    weight_taken: bool


@dataclass(slots=True)
class ExerciseProgress:
    exercise_id: Hashable
    exercise_name: str
    muscle_group: str
    sessions: list[SessionObservation] = field(default_factory=list)
    best_weight: float = 0.0
    total_volume: float = 0.0
    sessions_count: int = 0
    last_performed: datetime | None = None
    trend: Trend = Trend.stable


@dataclass(slots=True)
class WorkoutStats:
    total_workouts: int = 0
    total_exercises: int = 0
    total_sets: int = 0
    avg_workouts_per_week: float = 0.0


@dataclass(slots=True)
class ProgressReport:
    period_days: int
    muscle_group: str
    stats: WorkoutStats
    exercises: list[ExerciseProgress]
    best: list[ExerciseProgress]


# --- window / filter policy ---

def resolve_period(value: int | str | None, default: int = DEFAULT_PERIOD_DAYS) -> int:
    """Parse a period selector; anything unknown falls back to ``default``."""
    try:
        days = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default
    return days if days in PERIOD_DAYS else default


def as_utc(moment: datetime) -> datetime:
    # SQLite hands back naive timestamps; they are stored as UTC
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def cutoff_for(period_days: int, now: datetime) -> datetime:
    return as_utc(now) - timedelta(days=period_days)


def in_window(workout: WorkoutRecord, cutoff: datetime) -> bool:
    return as_utc(workout.started_at) >= as_utc(cutoff)


def select_window(workouts: Iterable[WorkoutRecord], period_days: int, now: datetime) -> list[WorkoutRecord]:
    cutoff = cutoff_for(period_days, now)
    return [w for w in workouts if in_window(w, cutoff)]


def in_scope(progress: ExerciseProgress, muscle_group: str) -> bool:
    return muscle_group == ALL_MUSCLE_GROUPS or progress.muscle_group == muscle_group


# --- session extractor ---

def _observed_sets(workout_exercise: WorkoutExerciseRecord) -> Sequence[SetRecord]:
    sets = workout_exercise.sets
    if isinstance(sets, int):
        # plan was never executed: nothing was observed
        return ()
    return sets


def observe(workout_exercise: WorkoutExerciseRecord, date: datetime) -> SessionObservation:
    sets = _observed_sets(workout_exercise)
    weights = [s.weight or 0 for s in sets]
    return SessionObservation(
        date=date,
        max_weight=max([0, *weights]),
        total_volume=sum((s.weight or 0) * (s.reps or 0) for s in sets),
        sets_completed=sum(1 for s in sets if s.completed),
        weight_taken=bool(workout_exercise.weight_achieved),
    )


def extract_observations(workout: WorkoutRecord) -> list[tuple[Hashable, SessionObservation]]:
    """One observation per workout-exercise, in the workout's own order."""
    return [(we.exercise_id, observe(we, workout.started_at)) for we in workout.exercises]


# --- aggregator ---

def aggregate(
    observations: Iterable[tuple[Hashable, SessionObservation]],
    catalog: Mapping[Hashable, CatalogEntry],
) -> dict[Hashable, ExerciseProgress]:
    """
    Fold observations into one summary per exercise id.

    Ids absent from ``catalog`` are stale (deleted exercises) and dropped.
    ``last_performed`` follows fold order, not the latest date, so callers
    should feed observations in a consistent chronological direction.
    """
    summaries: dict[Hashable, ExerciseProgress] = {}
    for exercise_id, obs in observations:
        entry = catalog.get(exercise_id)
        if entry is None:
            continue
        progress = summaries.get(exercise_id)
        if progress is None:
            progress = summaries[exercise_id] = ExerciseProgress(
                exercise_id=exercise_id,
                exercise_name=entry.name,
                muscle_group=entry.muscle_group,
            )
        progress.sessions.append(obs)
        progress.best_weight = max(progress.best_weight, obs.max_weight)
        progress.total_volume += obs.total_volume
        progress.sessions_count += 1
        progress.last_performed = obs.date

    for progress in summaries.values():
        # list.sort is stable: same-day sessions keep fold order
        progress.sessions.sort(key=lambda s: as_utc(s.date))
    return summaries


# --- trend classifier ---

def _mean_max_weight(sessions: Sequence[SessionObservation]) -> float:
    return sum(s.max_weight for s in sessions) / len(sessions)


def classify_trend(
    sessions: Sequence[SessionObservation],
    window: int = TREND_WINDOW,
    deadband: float = TREND_DEADBAND,
) -> Trend:
    """
    Compare the mean max weight of the last ``window`` sessions against the
    ``window`` sessions before them. Changes within ``deadband`` (a fraction
    of the older mean, exclusive at the boundary) are ``stable``.
    """
    if len(sessions) < 2:
        return Trend.stable

    recent = sessions[-window:]
    older = sessions[max(0, len(sessions) - 2 * window):max(0, len(sessions) - window)]
    if not recent or not older:
        return Trend.stable

    recent_avg = _mean_max_weight(recent)
    older_avg = _mean_max_weight(older)
    if recent_avg > older_avg * (1 + deadband):
        return Trend.up
    if recent_avg < older_avg * (1 - deadband):
        return Trend.down
    return Trend.stable


# --- ranking ---

def rank_by_progress(items: Iterable[ExerciseProgress]) -> list[ExerciseProgress]:
    """Improving exercises first, then heaviest best weight. Stable."""
    return sorted(items, key=lambda p: (p.trend is not Trend.up, -p.best_weight))


def best_progress(
    items: Iterable[ExerciseProgress],
    limit: int = 5,
    min_sessions: int = 2,
) -> list[ExerciseProgress]:
    eligible = [p for p in items if p.sessions_count >= min_sessions]
    return rank_by_progress(eligible)[:limit]


# --- period statistics ---

def _set_count(workout_exercise: WorkoutExerciseRecord) -> int:
    sets = workout_exercise.sets
    return sets if isinstance(sets, int) else len(sets)


def workout_stats(workouts: Iterable[WorkoutRecord], period_days: int, now: datetime) -> WorkoutStats:
    in_range = select_window(workouts, period_days, now)
    completed = sum(1 for w in in_range if w.status == "completed")
    return WorkoutStats(
        total_workouts=completed,
        total_exercises=sum(len(w.exercises) for w in in_range),
        total_sets=sum(_set_count(we) for w in in_range for we in w.exercises),
        avg_workouts_per_week=round(completed / period_days * 7, 1) if period_days else 0.0,
    )


# --- full pass ---

def analyze_progress(
    workouts: Sequence[WorkoutRecord],
    catalog: Iterable[CatalogEntry],
    *,
    period: int | str | None = DEFAULT_PERIOD_DAYS,
    muscle_group: str = ALL_MUSCLE_GROUPS,
    now: datetime | None = None,
    window: int = TREND_WINDOW,
    deadband: float = TREND_DEADBAND,
    best_limit: int = 5,
    best_min_sessions: int = 2,
) -> ProgressReport:
    now = now or datetime.now(timezone.utc)
    period_days = resolve_period(period)
    by_id = {entry.id: entry for entry in catalog}

    in_range = select_window(workouts, period_days, now)
    observations = [pair for workout in in_range for pair in extract_observations(workout)]
    summaries = aggregate(observations, by_id)
    for progress in summaries.values():
        progress.trend = classify_trend(progress.sessions, window=window, deadband=deadband)

    scoped = [p for p in summaries.values() if in_scope(p, muscle_group)]
    log.debug(
        "progress pass: period=%sd workouts=%d/%d observations=%d exercises=%d",
        period_days, len(in_range), len(workouts), len(observations), len(scoped),
    )
    return ProgressReport(
        period_days=period_days,
        muscle_group=muscle_group,
        stats=workout_stats(workouts, period_days, now),
        exercises=scoped,
        best=best_progress(scoped, limit=best_limit, min_sessions=best_min_sessions),
    )
