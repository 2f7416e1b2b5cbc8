"""Daily goal streak reconciliation across calendar days."""
from dataclasses import replace
from datetime import date, timedelta

from syllabus_sprint.models import DailyStat, User


def _as_date(value) -> date:
    return value if isinstance(value, date) else date.fromisoformat(value)


def needs_reconcile(user: User, today) -> bool:
    return user.last_goal_date != _as_date(today).isoformat()


def find_stat(history: list[DailyStat], day: str) -> DailyStat | None:
    for stat in history:
        if stat.date == day:
            return stat
    return None


def reconcile(user: User, history: list[DailyStat], today) -> User:
    """Carry the streak over from yesterday's tally.

    Yesterday's goal met extends the streak, a recorded day below goal resets
    it, and a day with no record at all leaves it untouched. Calling this
    again on the same day returns the user unchanged.
    """
    today = _as_date(today)
    if not needs_reconcile(user, today):
        return user
    yesterday = find_stat(history, (today - timedelta(days=1)).isoformat())
    streak = user.streak
    if yesterday is not None:
        streak = streak + 1 if yesterday.attempted >= user.daily_goal else 0
    return replace(
        user,
        streak=streak,
        best_streak=max(user.best_streak, streak),
        last_goal_date=today.isoformat(),
    )
