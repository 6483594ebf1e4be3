from collections import defaultdict
from datetime import date, timedelta
from typing import Dict, List, Optional, Tuple

from .models import (
    ActivityDay,
    DashboardStats,
    RecentActivity,
    TrainingGround,
    UserProgress,
    WeeklyXp,
)

# A generated practice set counts as this many points of activity.
TRAINING_XP = 10
ACTIVITY_DAYS = 365
RECENT_LIMIT = 5
REVIEW_THRESHOLD = 70.0
# (minimum daily count, level), highest first.
ACTIVITY_LEVELS = [(50, 3), (30, 2), (10, 1)]
DAY_NAMES = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


def total_xp(progress: List[UserProgress]) -> int:
    return sum(p.score for p in progress)


def daily_activity(
    progress: List[UserProgress], trainings: List[TrainingGround]
) -> Dict[date, int]:
    """Activity points per calendar day: quiz score plus a flat bonus per practice set."""
    counts: Dict[date, int] = defaultdict(int)
    for p in progress:
        counts[p.last_attempt.date()] += p.score
    for t in trainings:
        counts[t.generated_at.date()] += TRAINING_XP
    return counts


def activity_level(count: int) -> int:
    for minimum, level in ACTIVITY_LEVELS:
        if count >= minimum:
            return level
    return 0


def activity_calendar(
    progress: List[UserProgress],
    trainings: List[TrainingGround],
    today: date,
    days: int = ACTIVITY_DAYS,
) -> List[ActivityDay]:
    """One entry per day from ``days`` days ago up to today, oldest first."""
    counts = daily_activity(progress, trainings)
    calendar = []
    for offset in range(days, -1, -1):
        day = today - timedelta(days=offset)
        count = counts.get(day, 0)
        calendar.append(ActivityDay(day=day, count=count, level=activity_level(count)))
    return calendar


def streaks(calendar: List[ActivityDay]) -> Tuple[int, int]:
    """Return (current, longest) runs of consecutive active days.

    The current streak counts back from the last day of the calendar and is
    0 when that day has no activity.
    """
    current = 0
    for entry in reversed(calendar):
        if entry.count <= 0:
            break
        current += 1

    longest = run = 0
    for entry in calendar:
        run = run + 1 if entry.count > 0 else 0
        longest = max(longest, run)
    return current, longest


def recent_activity(
    progress: List[UserProgress],
    trainings: List[TrainingGround],
    subject_names: Optional[Dict[str, str]] = None,
    limit: int = RECENT_LIMIT,
) -> List[RecentActivity]:
    subject_names = subject_names or {}
    activities = []
    for p in progress:
        percentage = p.score * 100 / p.total_questions if p.total_questions else 0.0
        title = subject_names.get(p.subject_id, p.subject_id)
        activities.append(
            RecentActivity(
                title=f"Quiz: {title}",
                at=p.last_attempt,
                status="success" if percentage >= REVIEW_THRESHOLD else "needs-review",
                score_earned=p.score,
                score_total=p.total_questions,
                mastered=p.total_questions > 0 and p.score == p.total_questions,
            )
        )
    for t in trainings:
        activities.append(
            RecentActivity(title=f"AI Training: {t.topic}", at=t.generated_at, status="success")
        )
    activities.sort(key=lambda a: a.at, reverse=True)
    return activities[:limit]


def weekly_progress(
    progress: List[UserProgress], trainings: List[TrainingGround], today: date
) -> List[WeeklyXp]:
    """XP for each of the last seven days, ending today."""
    counts = daily_activity(progress, trainings)
    week = []
    for offset in range(6, -1, -1):
        day = today - timedelta(days=offset)
        week.append(WeeklyXp(day=DAY_NAMES[day.weekday()], xp=counts.get(day, 0)))
    return week


def build_dashboard(
    progress: List[UserProgress],
    trainings: List[TrainingGround],
    subject_names: Optional[Dict[str, str]] = None,
    today: Optional[date] = None,
) -> DashboardStats:
    today = today or date.today()
    calendar = activity_calendar(progress, trainings, today)
    current, longest = streaks(calendar)
    return DashboardStats(
        total_xp=total_xp(progress),
        current_streak=current,
        longest_streak=longest,
        recent_activity=recent_activity(progress, trainings, subject_names),
        activity=calendar,
        weekly_progress=weekly_progress(progress, trainings, today),
        is_empty=not progress and not trainings,
    )
