"""Seed the store with the starter question bank and default records."""
import json
from pathlib import Path

from syllabus_sprint.db import (
    QUESTIONS_KEY, SESSION_KEY, SETTINGS_KEY, STATS_KEY, USERS_KEY, kv_has, kv_set,
)
from syllabus_sprint.models import Question, Settings
from syllabus_sprint.users import GUEST_UID, guest_profile

CONTENT_DIR = Path(__file__).parent / "content"


def is_seeded(db_path: str) -> bool:
    """Check whether the question bank has been written at least once."""
    return kv_has(db_path, QUESTIONS_KEY)


def load_seed_questions() -> list[Question]:
    data = json.loads((CONTENT_DIR / "questions.json").read_text())
    return [Question.from_dict(q) for q in data["questions"]]


def seed_questions(db_path: str) -> None:
    kv_set(db_path, QUESTIONS_KEY, [q.to_dict() for q in load_seed_questions()])


def seed_all(db_path: str) -> None:
    """Write each missing collection; existing ones are left alone."""
    if not kv_has(db_path, QUESTIONS_KEY):
        seed_questions(db_path)
    if not kv_has(db_path, USERS_KEY):
        kv_set(db_path, USERS_KEY, {GUEST_UID: guest_profile().to_dict()})
    if not kv_has(db_path, SESSION_KEY):
        kv_set(db_path, SESSION_KEY, {"uid": GUEST_UID})
    if not kv_has(db_path, SETTINGS_KEY):
        kv_set(db_path, SETTINGS_KEY, Settings().to_dict())
    if not kv_has(db_path, STATS_KEY):
        kv_set(db_path, STATS_KEY, {"history": []})
