import pandas as pd
import pytest

from adaptiq.bank import (
    DEFAULT_BANK_ID,
    BankError,
    BankManager,
    QuestionBank,
    default_bank,
    questions_from_frame,
)
from adaptiq.models import Difficulty

from conftest import make_bank, make_question


def test_questions_at_filters_in_bank_order():
    bank = make_bank(per_level=3)
    easy = bank.questions_at(Difficulty.EASY)
    assert [q.id for q in easy] == ["easy-1", "easy-2", "easy-3"]
    assert all(q.difficulty == Difficulty.EASY for q in easy)


def test_question_for_wraps_cyclically():
    bank = make_bank(per_level=3)
    assert bank.question_for(0, Difficulty.HARD).id == "hard-1"
    assert bank.question_for(4, Difficulty.HARD).id == "hard-2"
    assert bank.question_for(9, Difficulty.HARD).id == "hard-1"


def test_questions_at_returns_a_copy():
    bank = make_bank(per_level=2)
    bank.questions_at(Difficulty.EASY).clear()
    assert len(bank.questions_at(Difficulty.EASY)) == 2


def test_bank_without_a_level_fails_fast():
    questions = [
        make_question("e1", Difficulty.EASY),
        make_question("m1", Difficulty.MEDIUM),
    ]
    with pytest.raises(BankError, match="hard"):
        QuestionBank(questions)


def test_bank_rejects_duplicate_ids():
    questions = [
        make_question("x", Difficulty.EASY),
        make_question("x", Difficulty.MEDIUM),
        make_question("h", Difficulty.HARD),
    ]
    with pytest.raises(BankError, match="Duplicate"):
        QuestionBank(questions)


def test_default_bank_has_fifteen_per_level():
    bank = default_bank()
    for level in Difficulty:
        assert len(bank.questions_at(level)) == 15
    assert "Web Fundamentals" in bank.topics()


def test_question_rejects_out_of_range_answer():
    with pytest.raises(ValueError):
        make_question("bad", Difficulty.EASY, correct=4)


def _frame():
    return pd.DataFrame(
        {
            "id": ["e1", "m1", "h1"],
            "question": ["Easy?", "Medium?", "Hard?"],
            "options": ["a|b", "a|b|c", "x | y"],
            "correct_answer": [0, 2, 1],
            "difficulty": ["easy", "Medium", "HARD"],
            "topic": ["T1", "T2", "T3"],
            "explanation": ["because", None, ""],
        }
    )


def test_questions_from_frame():
    questions = questions_from_frame(_frame())
    assert [q.difficulty for q in questions] == list(Difficulty)
    assert questions[1].options == ["a", "b", "c"]
    assert questions[2].options == ["x", "y"]
    assert questions[0].explanation == "because"
    assert questions[1].explanation is None
    assert questions[2].explanation is None


def test_questions_from_frame_missing_column():
    with pytest.raises(BankError, match="topic"):
        questions_from_frame(_frame().drop(columns=["topic"]))


def test_bank_manager_loads_csv_and_skips_broken(tmp_path):
    _frame().to_csv(tmp_path / "python_basics.csv", index=False)
    _frame().drop(columns=["options"]).to_csv(tmp_path / "broken.csv", index=False)

    manager = BankManager(str(tmp_path))

    assert set(manager.banks) == {DEFAULT_BANK_ID, "python_basics"}
    assert len(manager.get_bank("python_basics")) == 3
    subjects = manager.get_subjects()
    assert [s["name"] for s in subjects] == ["Default", "Python Basics"]
    assert subjects[1]["count"] == 3


def test_bank_manager_missing_directory(tmp_path):
    manager = BankManager(str(tmp_path / "nope"))
    assert list(manager.banks) == [DEFAULT_BANK_ID]
    assert manager.get_bank("nope") is None
