"""Adaptive difficulty driven by consecutive correct/wrong answers."""
from syllabus_sprint.models import Difficulty

PROMOTE_AFTER = 3
DEMOTE_AFTER = 2


def update_streaks(correct_streak: int, wrong_streak: int, correct: bool) -> tuple[int, int]:
    """Return the new (correct_streak, wrong_streak) after one answer.

    The opposite counter always resets, so at most one of the two is non-zero.
    """
    if correct:
        return correct_streak + 1, 0
    return 0, wrong_streak + 1


def next_difficulty(current: Difficulty, correct_streak: int, wrong_streak: int) -> Difficulty:
    """Step one rung up or down the ladder.

    Promotion is checked first; a single call never both promotes and demotes.
    """
    current = Difficulty.parse(current)
    if correct_streak >= PROMOTE_AFTER:
        return current.promote()
    if wrong_streak >= DEMOTE_AFTER:
        return current.demote()
    return current
