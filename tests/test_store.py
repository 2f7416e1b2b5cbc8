"""Tests for the question bank, user and stats repository."""
from datetime import date

from conftest import make_question

from syllabus_sprint.db import SESSION_KEY, STATS_KEY, USERS_KEY, init_db, kv_set
from syllabus_sprint.models import DailyStat, Difficulty, Settings
from syllabus_sprint.seed import seed_all
from syllabus_sprint.store import (
    add_manual_question, add_questions, current_user, delete_question, get_session_uid,
    get_user, load_history, load_questions, load_settings, load_users, save_history,
    save_questions, save_settings, save_user, search_questions, sign_in, sign_out,
    update_question,
)


def test_questions_roundtrip(tmp_db, bank):
    init_db(tmp_db)
    save_questions(tmp_db, bank)
    assert load_questions(tmp_db) == bank


def test_load_questions_empty_store(tmp_db):
    init_db(tmp_db)
    assert load_questions(tmp_db) == []


def test_load_questions_skips_garbage(tmp_db):
    init_db(tmp_db)
    kv_set(tmp_db, "questions", [{"id": "ok", "question": "Fine?", "options": ["a"], "answerIndex": 8}, "junk", 3])
    questions = load_questions(tmp_db)
    assert len(questions) == 1
    assert questions[0].answer_index == 3
    assert questions[0].topic == "General"
    assert questions[0].difficulty == Difficulty.EASY


def test_load_questions_tolerates_wrong_types(tmp_db):
    init_db(tmp_db)
    kv_set(tmp_db, "questions", [{"id": "n", "question": "Q?", "options": 5, "topic": 7, "explanation": 9}])
    (question,) = load_questions(tmp_db)
    assert question.options == ["", "", "", ""]
    assert question.topic == "7"
    assert question.explanation == "9"
    assert search_questions([question], "7") == [question]


def test_add_questions_appends(tmp_db, bank):
    init_db(tmp_db)
    save_questions(tmp_db, bank[:2])
    result = add_questions(tmp_db, bank[2:4])
    assert [q.id for q in result] == ["e1", "e2", "e3", "n1"]
    assert [q.id for q in load_questions(tmp_db)] == ["e1", "e2", "e3", "n1"]


def test_add_manual_question_prepends(tmp_db, bank):
    init_db(tmp_db)
    save_questions(tmp_db, bank)
    q = add_manual_question(tmp_db, "Web", "hard")
    stored = load_questions(tmp_db)
    assert stored[0] == q
    assert q.options == ["A", "B", "C", "D"]
    assert q.difficulty == Difficulty.HARD
    assert len(stored) == len(bank) + 1


def test_update_question_clamps_index(tmp_db, bank):
    init_db(tmp_db)
    save_questions(tmp_db, bank)
    updated = update_question(tmp_db, "e1", prompt="Edited?", answer_index=12)
    assert updated.prompt == "Edited?"
    assert updated.answer_index == 3
    assert load_questions(tmp_db)[0].answer_index == 3


def test_update_question_normalizes_options(tmp_db, bank):
    init_db(tmp_db)
    save_questions(tmp_db, bank)
    updated = update_question(tmp_db, "e2", options=["x", "y"], difficulty="normal")
    assert updated.options == ["x", "y", "", ""]
    assert updated.difficulty == Difficulty.NORMAL


def test_update_unknown_question(tmp_db, bank):
    init_db(tmp_db)
    save_questions(tmp_db, bank)
    assert update_question(tmp_db, "nope", prompt="?") is None
    assert load_questions(tmp_db) == bank


def test_delete_question(tmp_db, bank):
    init_db(tmp_db)
    save_questions(tmp_db, bank)
    assert delete_question(tmp_db, "h1") is True
    assert "h1" not in {q.id for q in load_questions(tmp_db)}
    assert delete_question(tmp_db, "h1") is False


def test_search_questions(bank):
    bank.append(make_question("z", topic="Biology"))
    assert {q.id for q in search_questions(bank, "bio")} == {"z"}
    assert {q.id for q in search_questions(bank, "PROMPT E")} == {"e1", "e2", "e3"}
    assert len(search_questions(bank, "")) == len(bank)


def test_users_always_include_guest(tmp_db):
    init_db(tmp_db)
    users = load_users(tmp_db)
    assert "guest" in users
    assert users["guest"].name == "Guest"


def test_save_and_get_user(tmp_db):
    init_db(tmp_db)
    seed_all(tmp_db)
    guest = get_user(tmp_db, "guest")
    guest.coins = 15
    save_user(tmp_db, guest)
    assert get_user(tmp_db, "guest").coins == 15


def test_current_user_falls_back_to_guest(tmp_db):
    init_db(tmp_db)
    seed_all(tmp_db)
    kv_set(tmp_db, SESSION_KEY, {"uid": "ghost"})
    assert current_user(tmp_db).uid == "guest"
    kv_set(tmp_db, SESSION_KEY, "not a dict")
    assert get_session_uid(tmp_db) == "guest"


def test_malformed_users_do_not_raise(tmp_db):
    init_db(tmp_db)
    kv_set(tmp_db, USERS_KEY, ["nonsense"])
    assert current_user(tmp_db).uid == "guest"
    kv_set(tmp_db, USERS_KEY, {"u1": {"name": "A", "badges": 3, "levelUnlocked": ["easy"], "email": 4}})
    user = load_users(tmp_db)["u1"]
    assert user.badges == []
    assert user.level_unlocked == {"easy": True, "normal": False, "hard": False}
    assert user.email == "4"


def test_sign_in_and_out(tmp_db):
    init_db(tmp_db)
    seed_all(tmp_db)
    user = sign_in(tmp_db, "Ana", "ana@example.com", date(2024, 3, 10))
    assert current_user(tmp_db).uid == user.uid
    assert user.last_goal_date == "2024-03-10"
    assert get_user(tmp_db, user.uid).email == "ana@example.com"
    guest = sign_out(tmp_db)
    assert guest.uid == "guest"
    assert current_user(tmp_db).uid == "guest"
    assert user.uid in load_users(tmp_db)


def test_settings_roundtrip(tmp_db):
    init_db(tmp_db)
    assert load_settings(tmp_db) == Settings()
    save_settings(tmp_db, Settings(dark=True, notifications=True))
    assert load_settings(tmp_db) == Settings(dark=True, notifications=True)


def test_history_roundtrip(tmp_db):
    init_db(tmp_db)
    assert load_history(tmp_db) == []
    history = [DailyStat("2024-03-09", 20, 15), DailyStat("2024-03-10", 10, 9)]
    save_history(tmp_db, history)
    assert load_history(tmp_db) == history


def test_history_tolerates_bad_shape(tmp_db):
    init_db(tmp_db)
    kv_set(tmp_db, STATS_KEY, {"history": "oops"})
    assert load_history(tmp_db) == []
    kv_set(tmp_db, STATS_KEY, [1, 2])
    assert load_history(tmp_db) == []
