import pytest

from adaptiq.bank import QuestionBank
from adaptiq.models import Difficulty, Question


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def tick(self, seconds: float):
        self.now += seconds


class ManualHandle:
    def __init__(self, delay, callback):
        self.delay = delay
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class ManualScheduler:
    """Collects scheduled callbacks; tests fire them explicitly."""

    def __init__(self):
        self.handles = []

    def call_later(self, delay, callback):
        handle = ManualHandle(delay, callback)
        self.handles.append(handle)
        return handle

    def run_pending(self):
        pending, self.handles = self.handles, []
        for handle in pending:
            if not handle.cancelled:
                handle.callback()


class FakeRedis:
    """In-memory stand-in for the few Redis commands the app uses."""

    def __init__(self):
        self.values = {}
        self.hashes = {}

    def get(self, key):
        return self.values.get(key)

    def set(self, key, value, ex=None):
        self.values[key] = value
        return True

    def delete(self, key):
        self.values.pop(key, None)
        self.hashes.pop(key, None)

    def hget(self, key, field):
        return self.hashes.get(key, {}).get(field)

    def hset(self, key, field, value):
        self.hashes.setdefault(key, {})[field] = value

    def hgetall(self, key):
        return dict(self.hashes.get(key, {}))


def make_question(qid, difficulty, topic="General", correct=0, options=None):
    return Question(
        id=qid,
        question=f"Question {qid}?",
        options=options or ["A", "B", "C", "D"],
        correct_answer=correct,
        difficulty=difficulty,
        topic=topic,
    )


def make_bank(per_level=5):
    questions = [
        make_question(f"{level.value}-{i}", level, topic=f"{level.value} topic")
        for level in Difficulty
        for i in range(1, per_level + 1)
    ]
    return QuestionBank(questions, name="test")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def bank():
    return make_bank()


@pytest.fixture
def fake_redis():
    return FakeRedis()
