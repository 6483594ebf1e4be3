import logging
import uuid
from typing import List, Optional

from .models import TrainingGround
from .redis_session import TRAINING_INDEX_PREFIX, TRAINING_PREFIX

logger = logging.getLogger(__name__)


class TrainingStore:
    """Generated practice sets, stored by id with a per-user index of topics."""

    def __init__(self, redis_client):
        self.redis = redis_client

    def save(self, training: TrainingGround) -> str:
        training_id = uuid.uuid4().hex
        training.id = training_id
        self.redis.set(f"{TRAINING_PREFIX}{training_id}", training.model_dump_json())
        self.redis.hset(
            f"{TRAINING_INDEX_PREFIX}{training.user_id}", training_id, training.topic
        )
        logger.info(f"Training ground {training_id} [Topic: {training.topic}]")
        return training_id

    def get(self, training_id: str) -> Optional[TrainingGround]:
        raw = self.redis.get(f"{TRAINING_PREFIX}{training_id}")
        return TrainingGround.model_validate_json(raw) if raw else None

    def list(self, user_id: str, topic: Optional[str] = None) -> List[TrainingGround]:
        """A user's practice sets, newest first, optionally for one topic."""
        index = self.redis.hgetall(f"{TRAINING_INDEX_PREFIX}{user_id}") or {}
        trainings = []
        for training_id, indexed_topic in index.items():
            if topic is not None and indexed_topic != topic:
                continue
            training = self.get(training_id)
            if training is None:
                logger.warning(f"Training ground {training_id} is indexed but missing")
                continue
            trainings.append(training)
        trainings.sort(key=lambda t: t.generated_at, reverse=True)
        return trainings

    def latest(self, user_id: str, topic: Optional[str] = None) -> Optional[TrainingGround]:
        trainings = self.list(user_id, topic)
        return trainings[0] if trainings else None
