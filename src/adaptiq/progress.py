import logging
from datetime import datetime
from typing import List, Optional

from .models import AnswerResult, UserProgress
from .redis_session import PROGRESS_PREFIX

logger = logging.getLogger(__name__)


class ProgressStore:
    """Per-user, per-subject quiz progress kept in a Redis hash."""

    def __init__(self, redis_client):
        self.redis = redis_client

    def _key(self, user_id: str) -> str:
        return f"{PROGRESS_PREFIX}{user_id}"

    def get(self, user_id: str) -> List[UserProgress]:
        raw = self.redis.hgetall(self._key(user_id)) or {}
        progress = [UserProgress.model_validate_json(v) for v in raw.values()]
        progress.sort(key=lambda p: p.last_attempt, reverse=True)
        return progress

    def get_subject(self, user_id: str, subject_id: str) -> Optional[UserProgress]:
        raw = self.redis.hget(self._key(user_id), subject_id)
        return UserProgress.model_validate_json(raw) if raw else None

    def record(
        self, user_id: str, subject_id: str, answers: List[AnswerResult]
    ) -> UserProgress:
        """Store the outcome of a finished session and bump the attempt count."""
        previous = self.get_subject(user_id, subject_id)
        progress = UserProgress(
            user_id=user_id,
            subject_id=subject_id,
            completed_questions=[a.question_id for a in answers],
            score=sum(1 for a in answers if a.is_correct),
            total_questions=len(answers),
            last_attempt=datetime.now(),
            attempts=(previous.attempts if previous else 0) + 1,
        )
        self.redis.hset(self._key(user_id), subject_id, progress.model_dump_json())
        logger.info(
            f"Progress for {user_id} on {subject_id}: "
            f"{progress.score}/{progress.total_questions} "
            f"(attempt {progress.attempts})"
        )
        return progress
