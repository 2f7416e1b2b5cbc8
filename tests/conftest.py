import random

import pytest

from syllabus_sprint.models import Difficulty, Question


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary SQLite database path for tests."""
    db_path = str(tmp_path / "test_sprint.db")
    return db_path


@pytest.fixture
def rng():
    return random.Random(1234)


def make_question(qid, topic="General", difficulty=Difficulty.EASY, answer_index=0):
    return Question(
        id=qid,
        prompt=f"Prompt {qid}?",
        options=["A", "B", "C", "D"],
        answer_index=answer_index,
        explanation=f"Because {qid}",
        topic=topic,
        difficulty=difficulty,
    )


@pytest.fixture
def bank():
    return [
        make_question("e1", "DSA", Difficulty.EASY),
        make_question("e2", "DSA", Difficulty.EASY),
        make_question("e3", "Web", Difficulty.EASY),
        make_question("n1", "DSA", Difficulty.NORMAL),
        make_question("n2", "Web", Difficulty.NORMAL),
        make_question("h1", "Accounting", Difficulty.HARD),
    ]
