"""Tests for data model classes."""
from syllabus_sprint.models import (
    DailyStat, Difficulty, Question, Settings, User, clamp_answer_index, new_id,
)


def test_difficulty_ladder_order():
    assert Difficulty.ladder() == [Difficulty.EASY, Difficulty.NORMAL, Difficulty.HARD]
    assert Difficulty.EASY.rank < Difficulty.NORMAL.rank < Difficulty.HARD.rank


def test_difficulty_promote_and_demote_saturate():
    assert Difficulty.EASY.promote() == Difficulty.NORMAL
    assert Difficulty.NORMAL.promote() == Difficulty.HARD
    assert Difficulty.HARD.promote() == Difficulty.HARD
    assert Difficulty.HARD.demote() == Difficulty.NORMAL
    assert Difficulty.NORMAL.demote() == Difficulty.EASY
    assert Difficulty.EASY.demote() == Difficulty.EASY


def test_difficulty_parse_is_lenient():
    assert Difficulty.parse("hard") == Difficulty.HARD
    assert Difficulty.parse(" Normal ") == Difficulty.NORMAL
    assert Difficulty.parse("impossible") == Difficulty.EASY
    assert Difficulty.parse(None) == Difficulty.EASY


def test_clamp_answer_index():
    assert clamp_answer_index(2) == 2
    assert clamp_answer_index(-4) == 0
    assert clamp_answer_index(9) == 3
    assert clamp_answer_index("x") == 0
    assert clamp_answer_index("3") == 3
    assert clamp_answer_index(None) == 0


def test_question_from_dict_defaults():
    q = Question.from_dict({"id": "q9", "question": "What?", "options": ["a", "b", "c", "d"], "answerIndex": 1})
    assert q.topic == "General"
    assert q.difficulty == Difficulty.EASY
    assert q.explanation == ""
    assert q.answer == "b"


def test_question_from_dict_normalizes_options_and_index():
    q = Question.from_dict({"id": "q9", "question": "What?", "options": ["a", "b"], "answerIndex": 7})
    assert q.options == ["a", "b", "", ""]
    assert q.answer_index == 3

    q = Question.from_dict({"id": "q9", "options": ["a", "b", "c", "d", "e"], "answerIndex": 1})
    assert len(q.options) == 4


def test_question_to_dict_uses_persisted_keys():
    q = Question(id="q1", prompt="Why?", options=["a", "b", "c", "d"], answer_index=2, difficulty=Difficulty.HARD)
    data = q.to_dict()
    assert data["question"] == "Why?"
    assert data["answerIndex"] == 2
    assert data["difficulty"] == "hard"
    assert Question.from_dict(data) == q


def test_user_defaults():
    u = User(uid="u1", name="Ana")
    assert u.coins == 0
    assert u.streak == 0
    assert u.best_streak == 0
    assert u.daily_goal == 20
    assert u.level_unlocked == {"easy": True, "normal": False, "hard": False}
    assert u.last_goal_date is None


def test_user_from_dict_tolerates_bad_values():
    u = User.from_dict({"uid": "u1", "name": "Ana", "coins": "oops", "streak": -2, "dailyGoal": 0})
    assert u.coins == 0
    assert u.streak == 0
    assert u.daily_goal == 20


def test_user_from_dict_restores_best_streak():
    u = User.from_dict({"uid": "u1", "name": "Ana", "streak": 6, "bestStreak": 2})
    assert u.best_streak == 6
    assert User.from_dict({"uid": "u1", "name": "Ana", "streak": 1, "bestStreak": 4}).best_streak == 4


def test_daily_stat_from_dict_caps_correct():
    stat = DailyStat.from_dict({"date": "2024-03-01", "attempted": 3, "correct": 5})
    assert stat.correct == 3


def test_settings_defaults():
    assert Settings() == Settings(dark=False, notifications=False)
    assert Settings.from_dict({"dark": True}).dark is True


def test_new_id_is_base36():
    value = new_id()
    assert len(value) == 8
    assert all(c in "0123456789abcdefghijklmnopqrstuvwxyz" for c in value)
