import glob
import logging
import os
from functools import lru_cache
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd
from pydantic import ValidationError

from .default_bank import DEFAULT_QUESTIONS
from .models import DIFFICULTY_LADDER, Difficulty, Question

logger = logging.getLogger(__name__)

DEFAULT_BANK_ID = "default"
OPTION_SEPARATOR = "|"
REQUIRED_COLUMNS = ["id", "question", "options", "correct_answer", "difficulty", "topic"]


class BankError(ValueError):
    """Raised when a question bank cannot back an adaptive session."""


# --- Question Source ---
class QuestionBank:
    """Read-only, ordered set of questions split by difficulty.

    Every level of the difficulty ladder must hold at least one question,
    since the adaptive policy can reach all of them.
    """

    def __init__(self, questions: Iterable[Question], name: str = DEFAULT_BANK_ID):
        self.name = name
        self._questions: List[Question] = list(questions)

        seen = set()
        for q in self._questions:
            if q.id in seen:
                raise BankError(f"Duplicate question id '{q.id}' in bank '{name}'")
            seen.add(q.id)

        self._by_difficulty: Dict[Difficulty, List[Question]] = {
            level: [q for q in self._questions if q.difficulty == level]
            for level in DIFFICULTY_LADDER
        }
        missing = [lvl.value for lvl, qs in self._by_difficulty.items() if not qs]
        if missing:
            raise BankError(
                f"Bank '{name}' has no questions for: {', '.join(missing)}"
            )

    def __len__(self) -> int:
        return len(self._questions)

    @property
    def questions(self) -> List[Question]:
        return list(self._questions)

    def questions_at(self, difficulty: Difficulty) -> List[Question]:
        return list(self._by_difficulty.get(Difficulty(difficulty), []))

    def question_for(self, ordinal: int, difficulty: Difficulty) -> Question:
        """Resolve a session ordinal, wrapping round the sub-bank."""
        pool = self._by_difficulty[Difficulty(difficulty)]
        return pool[ordinal % len(pool)]

    def topics(self) -> List[str]:
        return sorted({q.topic for q in self._questions})


@lru_cache(maxsize=None)
def default_bank() -> QuestionBank:
    return QuestionBank(DEFAULT_QUESTIONS, name=DEFAULT_BANK_ID)


def _cell(value: Any) -> Optional[str]:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return None
    text = str(value).strip()
    return text or None


def questions_from_frame(df: pd.DataFrame) -> List[Question]:
    """Build questions from a frame with one row per question."""
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise BankError(f"Missing columns: {', '.join(missing)}")

    questions = []
    for row in df.to_dict("records"):
        options = [
            opt.strip()
            for opt in str(row["options"]).split(OPTION_SEPARATOR)
            if opt.strip()
        ]
        try:
            questions.append(
                Question(
                    id=str(row["id"]).strip(),
                    question=str(row["question"]).strip(),
                    code_snippet=_cell(row.get("code_snippet")),
                    options=options,
                    correct_answer=int(row["correct_answer"]),
                    difficulty=str(row["difficulty"]).strip().lower(),
                    topic=str(row["topic"]).strip(),
                    explanation=_cell(row.get("explanation")),
                )
            )
        except (ValidationError, ValueError) as e:
            raise BankError(f"Invalid question row {row.get('id')!r}: {e}") from e
    return questions


# --- Service Layer: Bank Management ---
class BankManager:
    """Manages loading and accessing question banks (subjects)."""

    def __init__(self, directory: str):
        self.directory = directory
        self.banks: Dict[str, QuestionBank] = {}
        self.load_all()

    def load_all(self):
        self.banks = {DEFAULT_BANK_ID: default_bank()}
        if not os.path.exists(self.directory):
            logger.warning(
                f"Bank directory {self.directory} not found. Using built-in bank only."
            )
            return

        csv_files = sorted(glob.glob(os.path.join(self.directory, "*.csv")))
        for file_path in csv_files:
            bank_id = os.path.splitext(os.path.basename(file_path))[0]
            try:
                df = pd.read_csv(file_path, encoding="utf-8")
                self.banks[bank_id] = QuestionBank(
                    questions_from_frame(df), name=bank_id
                )
                logger.info(f"Loaded {len(df)} questions from {bank_id}")
            except (
                BankError,
                OSError,
                pd.errors.ParserError,
                pd.errors.EmptyDataError,
            ) as e:
                logger.error(f"Skipping {file_path}: {e}")

    def get_bank(self, bank_id: str) -> Optional[QuestionBank]:
        return self.banks.get(bank_id)

    def get_subjects(self) -> List[Dict[str, Any]]:
        subjects = []
        for key, bank in self.banks.items():
            display_name = key.replace("_", " ").title()
            subjects.append(
                {
                    "id": key,
                    "name": display_name,
                    "count": len(bank),
                    "topics": bank.topics(),
                }
            )
        subjects.sort(key=lambda x: x["name"])
        return subjects
