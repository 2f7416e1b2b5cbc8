"""Learner profiles, coin rewards and the leaderboard."""
from dataclasses import replace
from datetime import date

from syllabus_sprint.models import DEFAULT_DAILY_GOAL, User, new_id

GUEST_UID = "guest"
COINS_PER_CORRECT = 5


def guest_profile() -> User:
    return User(uid=GUEST_UID, name="Guest")


def new_profile(name: str, email: str | None = None, today=None) -> User:
    """A fresh profile. Its goal date starts at today so day one never reconciles."""
    today = today or date.today()
    return User(
        uid=new_id(),
        name=name.strip() or "Learner",
        email=email or None,
        daily_goal=DEFAULT_DAILY_GOAL,
        last_goal_date=today.isoformat() if isinstance(today, date) else str(today),
    )


def award_coins(user: User, correct: bool) -> User:
    if not correct:
        return user
    return replace(user, coins=user.coins + COINS_PER_CORRECT)


def leaderboard(users: dict[str, User] | list[User]) -> list[User]:
    """Most coins first, best streak breaks ties."""
    profiles = list(users.values()) if isinstance(users, dict) else list(users)
    return sorted(profiles, key=lambda u: (-u.coins, -u.best_streak))
