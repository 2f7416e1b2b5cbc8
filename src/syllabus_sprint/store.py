"""Persistence of the question bank, users, session pointer, settings and stats."""
import logging
from dataclasses import replace
from datetime import date

from syllabus_sprint.db import (
    QUESTIONS_KEY, SESSION_KEY, SETTINGS_KEY, STATS_KEY, USERS_KEY, kv_get, kv_set,
)
from syllabus_sprint.models import (
    DEFAULT_TOPIC, DailyStat, Difficulty, Question, Settings, User, clamp_answer_index, new_id,
)
from syllabus_sprint.users import GUEST_UID, guest_profile, new_profile

logger = logging.getLogger(__name__)


def _records(value) -> list[dict]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


# --- Questions ---


def load_questions(db_path: str) -> list[Question]:
    return [Question.from_dict(q) for q in _records(kv_get(db_path, QUESTIONS_KEY, []))]


def save_questions(db_path: str, questions: list[Question]) -> None:
    kv_set(db_path, QUESTIONS_KEY, [q.to_dict() for q in questions])


def add_questions(db_path: str, new: list[Question]) -> list[Question]:
    """Append to the end of the bank and return the full bank."""
    bank = load_questions(db_path) + list(new)
    save_questions(db_path, bank)
    logger.info("Added %d questions (bank size %d)", len(new), len(bank))
    return bank


def add_manual_question(db_path: str, topic: str = DEFAULT_TOPIC, difficulty=Difficulty.EASY) -> Question:
    """Insert a placeholder question at the top of the bank for editing."""
    question = Question(
        id=new_id(),
        prompt="New question?",
        options=["A", "B", "C", "D"],
        answer_index=0,
        explanation="Explain here",
        topic=topic or DEFAULT_TOPIC,
        difficulty=Difficulty.parse(difficulty),
    )
    save_questions(db_path, [question] + load_questions(db_path))
    return question


def update_question(db_path: str, question_id: str, **changes) -> Question | None:
    """Apply field changes to one question. Returns None when the id is unknown."""
    bank = load_questions(db_path)
    updated = None
    for i, q in enumerate(bank):
        if q.id != question_id:
            continue
        if "answer_index" in changes:
            changes["answer_index"] = clamp_answer_index(changes["answer_index"])
        if "difficulty" in changes:
            changes["difficulty"] = Difficulty.parse(changes["difficulty"])
        if "options" in changes:
            options = [str(o) for o in changes["options"]][:4]
            changes["options"] = options + [""] * (4 - len(options))
        updated = replace(q, **changes)
        bank[i] = updated
        break
    if updated is None:
        logger.warning("No question with id %r", question_id)
        return None
    save_questions(db_path, bank)
    return updated


def delete_question(db_path: str, question_id: str) -> bool:
    bank = load_questions(db_path)
    remaining = [q for q in bank if q.id != question_id]
    if len(remaining) == len(bank):
        return False
    save_questions(db_path, remaining)
    return True


def search_questions(bank: list[Question], text: str) -> list[Question]:
    needle = (text or "").lower()
    return [q for q in bank if needle in q.prompt.lower() or needle in (q.topic or "").lower()]


# --- Users and session pointer ---


def load_users(db_path: str) -> dict[str, User]:
    raw = kv_get(db_path, USERS_KEY, {})
    if not isinstance(raw, dict):
        raw = {}
    users = {}
    for uid, data in raw.items():
        if isinstance(data, dict):
            users[uid] = User.from_dict({"uid": uid, **data})
    if GUEST_UID not in users:
        users[GUEST_UID] = guest_profile()
    return users


def save_users(db_path: str, users: dict[str, User]) -> None:
    kv_set(db_path, USERS_KEY, {uid: u.to_dict() for uid, u in users.items()})


def get_user(db_path: str, uid: str) -> User | None:
    return load_users(db_path).get(uid)


def save_user(db_path: str, user: User) -> None:
    users = load_users(db_path)
    users[user.uid] = user
    save_users(db_path, users)


def get_session_uid(db_path: str) -> str:
    pointer = kv_get(db_path, SESSION_KEY, {})
    if isinstance(pointer, dict) and pointer.get("uid"):
        return str(pointer["uid"])
    return GUEST_UID


def set_session_uid(db_path: str, uid: str) -> None:
    kv_set(db_path, SESSION_KEY, {"uid": uid})


def current_user(db_path: str) -> User:
    """The signed-in user, or the guest profile when the pointer is stale."""
    users = load_users(db_path)
    return users.get(get_session_uid(db_path)) or users[GUEST_UID]


def sign_in(db_path: str, name: str, email: str | None = None, today=None) -> User:
    profile = new_profile(name, email, today or date.today())
    save_user(db_path, profile)
    set_session_uid(db_path, profile.uid)
    logger.info("Signed in %s (%s)", profile.name, profile.uid)
    return profile


def sign_out(db_path: str) -> User:
    set_session_uid(db_path, GUEST_UID)
    return load_users(db_path)[GUEST_UID]


# --- Settings and stats ---


def load_settings(db_path: str) -> Settings:
    raw = kv_get(db_path, SETTINGS_KEY, {})
    return Settings.from_dict(raw if isinstance(raw, dict) else {})


def save_settings(db_path: str, settings: Settings) -> None:
    kv_set(db_path, SETTINGS_KEY, settings.to_dict())


def load_history(db_path: str) -> list[DailyStat]:
    raw = kv_get(db_path, STATS_KEY, {})
    history = raw.get("history") if isinstance(raw, dict) else None
    return [DailyStat.from_dict(h) for h in _records(history)]


def save_history(db_path: str, history: list[DailyStat]) -> None:
    kv_set(db_path, STATS_KEY, {"history": [h.to_dict() for h in history]})
