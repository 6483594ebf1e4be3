import asyncio
import logging
import time
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional

from .bank import QuestionBank, default_bank
from .config import settings
from .models import (
    DIFFICULTY_LADDER,
    AnswerResult,
    Difficulty,
    Question,
    QuizPhase,
    QuizView,
    SessionState,
)

logger = logging.getLogger(__name__)

CompletionCallback = Callable[[List[AnswerResult]], None]

# Cumulative correct answers at a level before stepping up.
ESCALATE_AFTER: Dict[Difficulty, int] = {
    Difficulty.EASY: 4,
    Difficulty.MEDIUM: 3,
}
# Wrong answers at a level (with no correct in between) before stepping down.
DEESCALATE_AFTER: Dict[Difficulty, int] = {
    Difficulty.MEDIUM: 2,
    Difficulty.HARD: 1,
}


# --- Scheduling ---
class Scheduler(ABC):
    """Runs a callback after a delay and hands back something cancellable."""

    @abstractmethod
    def call_later(self, delay: float, callback: Callable[[], None]):
        pass


class AsyncioScheduler(Scheduler):
    """Schedules on an asyncio event loop; the handle is a ``TimerHandle``."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self.loop = loop

    def call_later(self, delay: float, callback: Callable[[], None]):
        loop = self.loop or asyncio.get_running_loop()
        return loop.call_later(delay, callback)


# --- Difficulty Policy ---
def step_difficulty(difficulty: Difficulty, offset: int) -> Difficulty:
    index = DIFFICULTY_LADDER.index(difficulty) + offset
    index = max(0, min(index, len(DIFFICULTY_LADDER) - 1))
    return DIFFICULTY_LADDER[index]


def next_difficulty(state: SessionState, correct: bool) -> Difficulty:
    """Update the per-level counters for one answer and pick the next level."""
    level = state.current_difficulty

    if correct:
        if level == Difficulty.EASY:
            state.easy_correct += 1
            if state.easy_correct >= ESCALATE_AFTER[level]:
                return step_difficulty(level, 1)
        elif level == Difficulty.MEDIUM:
            state.medium_correct += 1
            state.medium_wrong = 0
            if state.medium_correct >= ESCALATE_AFTER[level]:
                return step_difficulty(level, 1)
        else:
            state.hard_wrong = 0
        return level

    if level == Difficulty.MEDIUM:
        state.medium_wrong += 1
        if state.medium_wrong >= DEESCALATE_AFTER[level]:
            state.medium_wrong = 0
            return step_difficulty(level, -1)
    elif level == Difficulty.HARD:
        state.hard_wrong += 1
        if state.hard_wrong >= DEESCALATE_AFTER[level]:
            state.hard_wrong = 0
            return step_difficulty(level, -1)
    return level


# --- Adaptive Controller ---
class AdaptiveQuiz:
    """Drives one fixed-length adaptive quiz session.

    Commands (``select_option``, ``submit``) that do not fit the current
    phase are ignored rather than raising, so late or duplicated UI events
    are harmless. After a submit the session stays revealed until
    ``advance`` runs: either from the scheduler after ``advance_delay``
    seconds, or from the host via ``advance_if_due``.
    """

    def __init__(
        self,
        bank: Optional[QuestionBank] = None,
        on_complete: Optional[CompletionCallback] = None,
        scheduler: Optional[Scheduler] = None,
        clock: Callable[[], float] = time.time,
        state: Optional[SessionState] = None,
        total_questions: int = settings.TOTAL_QUESTIONS,
        advance_delay: float = settings.ADVANCE_DELAY_SECONDS,
    ):
        self.bank = bank or default_bank()
        self.on_complete = on_complete
        self.scheduler = scheduler
        self.clock = clock
        self.total_questions = total_questions
        self.advance_delay = advance_delay
        self.state = state or SessionState(question_start_time=clock())
        self._pending = None
        self._closed = False

    # --- read model ---
    @property
    def phase(self) -> QuizPhase:
        return self.state.phase

    @property
    def is_complete(self) -> bool:
        return self.state.phase == QuizPhase.COMPLETE

    @property
    def current_question(self) -> Optional[Question]:
        if self.is_complete:
            return None
        return self.bank.question_for(
            self.state.current_question_index, self.state.current_difficulty
        )

    @property
    def current_question_index(self) -> int:
        return self.state.current_question_index

    @property
    def current_difficulty(self) -> Difficulty:
        return self.state.current_difficulty

    @property
    def selected_option(self) -> Optional[int]:
        return self.state.selected_option

    @property
    def show_result(self) -> bool:
        return self.state.show_result

    @property
    def is_correct(self) -> Optional[bool]:
        return self.state.is_correct

    @property
    def answers(self) -> List[AnswerResult]:
        return list(self.state.answers)

    @property
    def streak(self) -> int:
        return self.state.streak

    @property
    def correct_count(self) -> int:
        return sum(1 for a in self.state.answers if a.is_correct)

    @property
    def wrong_count(self) -> int:
        return sum(1 for a in self.state.answers if not a.is_correct)

    @property
    def average_time(self) -> float:
        answers = self.state.answers
        if not answers:
            return 0.0
        return sum(a.time_taken for a in answers) / len(answers)

    def view(self) -> QuizView:
        return QuizView(
            question=self.current_question,
            current_index=self.current_question_index,
            total_questions=self.total_questions,
            difficulty=self.current_difficulty,
            phase=self.phase,
            selected_option=self.selected_option,
            show_result=self.show_result,
            is_correct=self.is_correct,
            streak=self.streak,
            correct_count=self.correct_count,
            wrong_count=self.wrong_count,
            average_time=self.average_time,
            answers=self.answers,
        )

    # --- commands ---
    def select_option(self, index: int) -> bool:
        state = self.state
        if self._closed or state.phase not in (
            QuizPhase.PRESENTING,
            QuizPhase.SELECTED,
        ):
            return False
        question = self.current_question
        if isinstance(index, bool) or not isinstance(index, int):
            return False
        if not 0 <= index < len(question.options):
            return False
        state.selected_option = index
        state.phase = QuizPhase.SELECTED
        return True

    def submit(self) -> Optional[AnswerResult]:
        state = self.state
        if self._closed or state.phase != QuizPhase.SELECTED:
            return None
        if len(state.answers) >= self.total_questions:
            return None

        question = self.current_question
        now = self.clock()
        correct = state.selected_option == question.correct_answer
        result = AnswerResult(
            question_id=question.id,
            is_correct=correct,
            time_taken=max(0.0, now - state.question_start_time),
            difficulty=state.current_difficulty,
            selected_answer=state.selected_option,
            topic=question.topic,
        )
        state.answers.append(result)
        state.streak = state.streak + 1 if correct else 0
        state.next_difficulty = next_difficulty(state, correct)
        state.is_correct = correct
        state.show_result = True
        state.revealed_at = now
        state.phase = QuizPhase.REVEALED

        if self.scheduler is not None:
            self._pending = self.scheduler.call_later(
                self.advance_delay, self.advance
            )
        return result

    def advance(self):
        """Leave the revealed phase: next question, or completion."""
        state = self.state
        if self._closed or state.phase != QuizPhase.REVEALED:
            return
        self._pending = None

        if len(state.answers) >= self.total_questions:
            state.phase = QuizPhase.COMPLETE
            state.revealed_at = None
            logger.info(
                f"Quiz complete: {self.correct_count}/{len(state.answers)} correct"
            )
            if self.on_complete:
                self.on_complete(list(state.answers))
            return

        if state.next_difficulty and state.next_difficulty != state.current_difficulty:
            logger.debug(
                f"Difficulty {state.current_difficulty.value} -> "
                f"{state.next_difficulty.value}"
            )
        state.current_question_index += 1
        state.current_difficulty = state.next_difficulty or state.current_difficulty
        state.next_difficulty = None
        state.selected_option = None
        state.show_result = False
        state.is_correct = None
        state.revealed_at = None
        state.question_start_time = self.clock()
        state.phase = QuizPhase.PRESENTING

    def advance_if_due(self) -> bool:
        state = self.state
        if self._closed or state.phase != QuizPhase.REVEALED:
            return False
        if state.revealed_at is None:
            return False
        if self.clock() - state.revealed_at < self.advance_delay:
            return False
        self.advance()
        return True

    def close(self):
        """Dispose the session; a pending advance never fires afterwards."""
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
        self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed
