from adaptiq.analysis import analyze_answers, topic_stats
from adaptiq.models import AnswerResult, Difficulty


def _answers(topic, correct, total, time_taken=1.0):
    return [
        AnswerResult(
            question_id=f"{topic}-{i}",
            is_correct=i < correct,
            time_taken=time_taken,
            difficulty=Difficulty.EASY,
            selected_answer=0,
            topic=topic,
        )
        for i in range(total)
    ]


def test_weak_and_strong_topics():
    answers = _answers("A", 1, 5) + _answers("B", 9, 10) + _answers("C", 7, 10)
    report = analyze_answers(answers)

    assert report.weak_topics == ["A"]
    assert report.strong_topics == ["B"]
    assert [t.topic for t in report.topics] == ["A", "B", "C"]
    assert report.topics[0].accuracy == 20.0
    assert report.topics[2].accuracy == 70.0
    assert report.correct_count == 17
    assert report.total_questions == 25
    assert report.score_percentage == 68


def test_exactly_eighty_is_not_strong():
    report = analyze_answers(_answers("D", 4, 5))
    assert report.strong_topics == []
    assert report.weak_topics == []


def test_average_time():
    answers = _answers("A", 1, 2, time_taken=2.0) + _answers("B", 0, 2, time_taken=4.0)
    assert analyze_answers(answers).average_time == 3.0


def test_empty_answers():
    report = analyze_answers([])
    assert report.topics == []
    assert report.score_percentage == 0
    assert report.average_time == 0.0
    assert topic_stats([]) == []
