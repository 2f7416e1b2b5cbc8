"""Per-day attempt history."""
from dataclasses import replace
from datetime import date

from syllabus_sprint.models import DailyStat


def record(history: list[DailyStat], day, attempted_delta: int, correct_delta: int) -> list[DailyStat]:
    """Credit a completed set to the day's tally, returning a new history list."""
    key = day.isoformat() if isinstance(day, date) else str(day)
    attempted_delta = max(0, int(attempted_delta))
    correct_delta = min(attempted_delta, max(0, int(correct_delta)))
    updated = []
    found = False
    for stat in history:
        if stat.date == key and not found:
            stat = replace(
                stat,
                attempted=stat.attempted + attempted_delta,
                correct=stat.correct + correct_delta,
            )
            found = True
        updated.append(stat)
    if not found:
        updated.append(DailyStat(date=key, attempted=attempted_delta, correct=correct_delta))
    return updated


def today_progress(history: list[DailyStat], today) -> DailyStat:
    key = today.isoformat() if isinstance(today, date) else str(today)
    for stat in history:
        if stat.date == key:
            return stat
    return DailyStat(date=key)


def recent(history: list[DailyStat], days: int = 14) -> list[DailyStat]:
    return list(history[-days:]) if days > 0 else []


def accuracy(stat: DailyStat) -> float:
    if stat.attempted == 0:
        return 0.0
    return round((stat.correct / stat.attempted) * 100, 1)
