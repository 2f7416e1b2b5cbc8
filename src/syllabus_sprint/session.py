"""Practice session selection and in-session state."""
import random
from dataclasses import dataclass, field, replace
from typing import Optional

from syllabus_sprint.adaptive import next_difficulty, update_streaks
from syllabus_sprint.models import DEFAULT_TOPIC, Difficulty, Question

ALL_TOPICS = "All"
SESSION_SIZE = 10


@dataclass
class SessionAnswer:
    question: Question
    correct: bool
    chosen_label: str


@dataclass
class SessionState:
    pool: list[Question]
    topic_filter: str = ALL_TOPICS
    active_difficulty: Difficulty = Difficulty.EASY
    index: int = 0
    answers: list[SessionAnswer] = field(default_factory=list)
    correct_streak: int = 0
    wrong_streak: int = 0


def build_session(
    bank: list[Question],
    topic_filter: str,
    difficulty: Difficulty,
    sample_size: int = SESSION_SIZE,
    rng: Optional[random.Random] = None,
) -> list[Question]:
    """Filter the bank by topic and difficulty, shuffle, and take a sample.

    An empty pool gives an empty list rather than an error.
    """
    rng = rng or random.Random()
    difficulty = Difficulty.parse(difficulty)
    pool = [
        q for q in bank
        if (topic_filter == ALL_TOPICS or q.topic == topic_filter) and q.difficulty == difficulty
    ]
    rng.shuffle(pool)
    return pool[:max(0, sample_size)]


def new_session(
    bank: list[Question],
    topic_filter: str = ALL_TOPICS,
    difficulty: Difficulty = Difficulty.EASY,
    sample_size: int = SESSION_SIZE,
    rng: Optional[random.Random] = None,
) -> SessionState:
    difficulty = Difficulty.parse(difficulty)
    return SessionState(
        pool=build_session(bank, topic_filter, difficulty, sample_size, rng),
        topic_filter=topic_filter,
        active_difficulty=difficulty,
    )


def current_question(state: SessionState) -> Question | None:
    if state.index < len(state.pool):
        return state.pool[state.index]
    return None


def is_complete(state: SessionState) -> bool:
    return bool(state.pool) and state.index >= len(state.pool)


def correct_count(state: SessionState) -> int:
    return sum(1 for a in state.answers if a.correct)


def record_answer(state: SessionState, correct: bool, chosen_label: str, adaptive: bool = True) -> SessionState:
    """Log an answer, update the streak counters and advance the cursor."""
    question = current_question(state)
    if question is None:
        return state
    correct_streak, wrong_streak = update_streaks(state.correct_streak, state.wrong_streak, correct)
    difficulty = state.active_difficulty
    if adaptive:
        difficulty = next_difficulty(difficulty, correct_streak, wrong_streak)
    return replace(
        state,
        index=state.index + 1,
        answers=state.answers + [SessionAnswer(question, correct, chosen_label)],
        correct_streak=correct_streak,
        wrong_streak=wrong_streak,
        active_difficulty=difficulty,
    )


def difficulty_changed(before: SessionState, after: SessionState) -> bool:
    return before.active_difficulty != after.active_difficulty


def topic_counts(bank: list[Question]) -> list[tuple[str, int]]:
    """Topic names with question counts, "All" first, in first-seen order."""
    counts: dict[str, int] = {}
    for q in bank:
        name = q.topic or DEFAULT_TOPIC
        counts[name] = counts.get(name, 0) + 1
    return [(ALL_TOPICS, len(bank))] + list(counts.items())
