"""Data classes for the quiz domain model."""
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

DEFAULT_TOPIC = "General"
DEFAULT_DAILY_GOAL = 20
OPTION_COUNT = 4


class Difficulty(str, Enum):
    EASY = "easy"
    NORMAL = "normal"
    HARD = "hard"

    @classmethod
    def ladder(cls) -> list["Difficulty"]:
        return [cls.EASY, cls.NORMAL, cls.HARD]

    @classmethod
    def parse(cls, value) -> "Difficulty":
        """Lenient parse; anything unrecognised is easy."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.EASY

    @property
    def rank(self) -> int:
        return Difficulty.ladder().index(self)

    def promote(self) -> "Difficulty":
        ladder = Difficulty.ladder()
        return ladder[min(self.rank + 1, len(ladder) - 1)]

    def demote(self) -> "Difficulty":
        return Difficulty.ladder()[max(self.rank - 1, 0)]


def clamp_answer_index(value, upper: int = OPTION_COUNT - 1) -> int:
    try:
        index = int(float(value))
    except (TypeError, ValueError, OverflowError):
        index = 0
    return min(upper, max(0, index))


@dataclass
class Question:
    id: str
    prompt: str
    options: list[str]
    answer_index: int = 0
    explanation: str = ""
    topic: str = DEFAULT_TOPIC
    difficulty: Difficulty = Difficulty.EASY

    @property
    def answer(self) -> str:
        return self.options[self.answer_index]

    @classmethod
    def from_dict(cls, data: dict) -> "Question":
        """Build a question from persisted data, padding and clamping as needed."""
        raw_options = data.get("options")
        options = [str(o) for o in _list_or_empty(raw_options)][:OPTION_COUNT]
        options += [""] * (OPTION_COUNT - len(options))
        return cls(
            id=str(data.get("id", "")),
            prompt=str(data.get("question", "")),
            options=options,
            answer_index=clamp_answer_index(data.get("answerIndex", 0)),
            explanation=str(data.get("explanation") or ""),
            topic=str(data.get("topic") or DEFAULT_TOPIC),
            difficulty=Difficulty.parse(data.get("difficulty")),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "question": self.prompt,
            "options": list(self.options),
            "answerIndex": self.answer_index,
            "explanation": self.explanation,
            "topic": self.topic,
            "difficulty": self.difficulty.value,
        }


def _default_levels() -> dict:
    return {"easy": True, "normal": False, "hard": False}


@dataclass
class User:
    uid: str
    name: str
    email: Optional[str] = None
    coins: int = 0
    streak: int = 0
    best_streak: int = 0
    badges: list[str] = field(default_factory=list)
    level_unlocked: dict = field(default_factory=_default_levels)
    daily_goal: int = DEFAULT_DAILY_GOAL
    last_goal_date: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "User":
        levels = _default_levels()
        unlocked = data.get("levelUnlocked")
        if isinstance(unlocked, dict):
            levels.update({k: bool(v) for k, v in unlocked.items() if k in levels})
        streak = _non_negative(data.get("streak"))
        goal = _non_negative(data.get("dailyGoal"), DEFAULT_DAILY_GOAL)
        return cls(
            uid=str(data.get("uid", "")),
            name=str(data.get("name", "")),
            email=_str_or_none(data.get("email")),
            coins=_non_negative(data.get("coins")),
            streak=streak,
            best_streak=max(streak, _non_negative(data.get("bestStreak"))),
            badges=[str(b) for b in _list_or_empty(data.get("badges"))],
            level_unlocked=levels,
            daily_goal=goal if goal > 0 else DEFAULT_DAILY_GOAL,
            last_goal_date=_str_or_none(data.get("lastGoalDate")),
        )

    def to_dict(self) -> dict:
        data = {
            "uid": self.uid,
            "name": self.name,
            "coins": self.coins,
            "streak": self.streak,
            "bestStreak": self.best_streak,
            "badges": list(self.badges),
            "levelUnlocked": dict(self.level_unlocked),
            "dailyGoal": self.daily_goal,
        }
        if self.email is not None:
            data["email"] = self.email
        if self.last_goal_date is not None:
            data["lastGoalDate"] = self.last_goal_date
        return data


@dataclass
class DailyStat:
    date: str
    attempted: int = 0
    correct: int = 0

    @classmethod
    def from_dict(cls, data: dict) -> "DailyStat":
        attempted = _non_negative(data.get("attempted"))
        return cls(
            date=str(data.get("date", "")),
            attempted=attempted,
            correct=min(attempted, _non_negative(data.get("correct"))),
        )

    def to_dict(self) -> dict:
        return {"date": self.date, "attempted": self.attempted, "correct": self.correct}


@dataclass
class Settings:
    dark: bool = False
    notifications: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> "Settings":
        return cls(dark=bool(data.get("dark", False)), notifications=bool(data.get("notifications", False)))

    def to_dict(self) -> dict:
        return {"dark": self.dark, "notifications": self.notifications}


def _non_negative(value, default: int = 0) -> int:
    try:
        return max(0, int(value))
    except (TypeError, ValueError, OverflowError):
        return default


ID_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"


def new_id(rng=None, length: int = 8) -> str:
    """Short random base-36 identifier."""
    rng = rng or random.Random()
    return "".join(rng.choice(ID_ALPHABET) for _ in range(length))


def _list_or_empty(value) -> list:
    return value if isinstance(value, list) else []


def _str_or_none(value) -> Optional[str]:
    return None if value is None else str(value)
