from typing import Dict, Iterable, List

from .models import AnswerResult, PerformanceReport, TopicStats

# Accuracy (percent) strictly below this marks a topic as weak.
WEAK_TOPIC_THRESHOLD = 70.0
# Accuracy (percent) strictly above this marks a topic as strong.
STRONG_TOPIC_THRESHOLD = 80.0


def topic_stats(answers: Iterable[AnswerResult]) -> List[TopicStats]:
    """Group answers by topic, keeping the order topics first appear in."""
    totals: Dict[str, List[int]] = {}
    for answer in answers:
        counts = totals.setdefault(answer.topic, [0, 0])
        counts[1] += 1
        if answer.is_correct:
            counts[0] += 1

    return [
        TopicStats(
            topic=topic,
            correct=correct,
            total=total,
            accuracy=correct * 100 / total,
        )
        for topic, (correct, total) in totals.items()
    ]


def analyze_answers(answers: List[AnswerResult]) -> PerformanceReport:
    stats = topic_stats(answers)
    total = len(answers)
    correct = sum(1 for a in answers if a.is_correct)
    average_time = sum(a.time_taken for a in answers) / total if total else 0.0

    return PerformanceReport(
        correct_count=correct,
        total_questions=total,
        score_percentage=round(correct * 100 / total) if total > 0 else 0,
        average_time=average_time,
        topics=stats,
        weak_topics=[s.topic for s in stats if s.accuracy < WEAK_TOPIC_THRESHOLD],
        strong_topics=[
            s.topic for s in stats if s.accuracy > STRONG_TOPIC_THRESHOLD
        ],
    )
