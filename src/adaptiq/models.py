from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


# --- Models ---
class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


# Ordered ladder, lowest first.
DIFFICULTY_LADDER: List[Difficulty] = [
    Difficulty.EASY,
    Difficulty.MEDIUM,
    Difficulty.HARD,
]


class QuizPhase(str, Enum):
    PRESENTING = "presenting"
    SELECTED = "selected"
    REVEALED = "revealed"
    COMPLETE = "complete"


class Question(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    question: str
    code_snippet: Optional[str] = None
    options: List[str] = Field(min_length=2)
    correct_answer: int = Field(ge=0)
    difficulty: Difficulty
    topic: str
    explanation: Optional[str] = None

    @model_validator(mode="after")
    def _check_correct_answer(self):
        if self.correct_answer >= len(self.options):
            raise ValueError(
                f"correct_answer {self.correct_answer} out of range for "
                f"{len(self.options)} options"
            )
        return self


class AnswerResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    question_id: str
    is_correct: bool
    time_taken: float = Field(ge=0)
    difficulty: Difficulty
    selected_answer: int
    topic: str


class SessionState(BaseModel):
    """Mutable state of one quiz attempt.

    Only the controller in ``adaptiq.engine`` writes to it; the web layer
    stores it between requests.
    """

    current_question_index: int = 0
    current_difficulty: Difficulty = Difficulty.EASY
    answers: List[AnswerResult] = []
    selected_option: Optional[int] = None
    show_result: bool = False
    is_correct: Optional[bool] = None
    phase: QuizPhase = QuizPhase.PRESENTING
    streak: int = 0
    easy_correct: int = 0
    medium_correct: int = 0
    medium_wrong: int = 0
    hard_wrong: int = 0
    question_start_time: float = 0.0
    next_difficulty: Optional[Difficulty] = None
    revealed_at: Optional[float] = None


class QuizView(BaseModel):
    """Read model handed to the presentation layer."""

    question: Optional[Question]
    current_index: int
    total_questions: int
    difficulty: Difficulty
    phase: QuizPhase
    selected_option: Optional[int]
    show_result: bool
    is_correct: Optional[bool]
    streak: int
    correct_count: int
    wrong_count: int
    average_time: float
    answers: List[AnswerResult]


class SessionData(BaseModel):
    state: SessionState
    subject: str
    created_at: datetime
    user_id: Optional[str] = None


class TopicStats(BaseModel):
    topic: str
    correct: int
    total: int
    accuracy: float


class PerformanceReport(BaseModel):
    correct_count: int
    total_questions: int
    score_percentage: int
    average_time: float
    topics: List[TopicStats]
    weak_topics: List[str]
    strong_topics: List[str]


class Citation(BaseModel):
    title: str
    url: str
    snippet: Optional[str] = None


class TrainingGround(BaseModel):
    id: Optional[str] = None
    user_id: str
    topic: str
    generated_at: datetime
    questions: List[Question]
    citations: List[Citation] = []
    source_links: List[str] = []


class UserProgress(BaseModel):
    user_id: str
    subject_id: str
    completed_questions: List[str] = []
    score: int = 0
    total_questions: int = 0
    last_attempt: datetime
    attempts: int = 0


class ActivityDay(BaseModel):
    day: date
    count: int
    level: int


class RecentActivity(BaseModel):
    title: str
    at: datetime
    status: str
    score_earned: Optional[int] = None
    score_total: Optional[int] = None
    mastered: bool = False


class WeeklyXp(BaseModel):
    day: str
    xp: int


class DashboardStats(BaseModel):
    total_xp: int
    current_streak: int
    longest_streak: int
    recent_activity: List[RecentActivity]
    activity: List[ActivityDay]
    weekly_progress: List[WeeklyXp]
    is_empty: bool
