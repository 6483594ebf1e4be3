from adaptiq.models import AnswerResult, Difficulty
from adaptiq.progress import ProgressStore


def _answer(qid, correct):
    return AnswerResult(
        question_id=qid,
        is_correct=correct,
        time_taken=1.0,
        difficulty=Difficulty.EASY,
        selected_answer=0,
        topic="T",
    )


def test_record_upserts_and_counts_attempts(fake_redis):
    store = ProgressStore(fake_redis)

    first = store.record("u1", "default", [_answer("a", True), _answer("b", False)])
    assert first.score == 1
    assert first.total_questions == 2
    assert first.attempts == 1
    assert first.completed_questions == ["a", "b"]

    second = store.record("u1", "default", [_answer("c", True)])
    assert second.attempts == 2
    assert second.score == 1

    progress = store.get("u1")
    assert len(progress) == 1
    assert progress[0].completed_questions == ["c"]


def test_progress_is_per_user_and_subject(fake_redis):
    store = ProgressStore(fake_redis)
    store.record("u1", "default", [_answer("a", True)])
    store.record("u1", "python", [_answer("b", True)])
    store.record("u2", "default", [_answer("c", False)])

    assert {p.subject_id for p in store.get("u1")} == {"default", "python"}
    assert store.get_subject("u2", "default").score == 0
    assert store.get_subject("u2", "python") is None
    assert store.get("nobody") == []
