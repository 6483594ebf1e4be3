import json
import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

import httpx
from pydantic import BaseModel, ValidationError

from .config import settings
from .models import Citation, Difficulty, Question, TrainingGround

logger = logging.getLogger(__name__)

QUESTIONS_PER_TOPIC = 3


class GenerationError(RuntimeError):
    """The research service failed or returned something unusable."""


# --- Helpers ---
def extract_domain(url: str) -> str:
    try:
        host = urlparse(url).hostname
    except ValueError:
        host = None
    if not host:
        return "unknown source"
    return host.replace("www.", "")


def clean_json_response(text: str) -> str:
    """Strip markdown code fences wrapped around a JSON payload."""
    return text.replace("```json", "").replace("```", "").strip()


def is_valid_question(question: Any) -> bool:
    if not isinstance(question, dict):
        return False
    options = question.get("options")
    correct = question.get("correct_answer")
    return (
        isinstance(question.get("question"), str)
        and isinstance(options, list)
        and len(options) >= 2
        and isinstance(correct, int)
        and not isinstance(correct, bool)
        and 0 <= correct < len(options)
    )


class GeneratedSet(BaseModel):
    questions: List[Question]
    citations: List[Citation] = []

    @property
    def source_links(self) -> List[str]:
        return [c.url for c in self.citations]


# --- Research API client ---
class YouComClient:
    """Thin wrapper over the You.com smart chat endpoint."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        base_url: Optional[str] = None,
        client: Optional[httpx.Client] = None,
    ):
        self.api_key = api_key or settings.YOU_COM_API_KEY
        if not self.api_key:
            raise GenerationError("YOU_COM_API_KEY is not configured")
        self.base_url = (base_url or settings.YOU_COM_BASE_URL).rstrip("/")
        self._client = client or httpx.Client(
            timeout=settings.GENERATION_TIMEOUT_SECONDS
        )

    def chat(self, query: str, chat_mode: str = "smart") -> Dict[str, Any]:
        try:
            r = self._client.post(
                f"{self.base_url}/smart/chat",
                headers={"X-API-Key": self.api_key},
                json={
                    "query": query,
                    "chat_mode": chat_mode,
                    "include_citations": True,
                },
            )
            r.raise_for_status()
            data = r.json()
        except httpx.HTTPStatusError as e:
            raise GenerationError(
                f"You.com API error: {e.response.status_code} - {e.response.text}"
            ) from e
        except (httpx.RequestError, ValueError) as e:
            raise GenerationError(f"You.com request failed: {e}") from e

        if not isinstance(data, dict):
            raise GenerationError(
                f"Unexpected response body from You.com: {type(data).__name__}"
            )
        return data

    def close(self):
        self._client.close()


def build_research_prompt(topic: str, count: int = QUESTIONS_PER_TOPIC) -> str:
    return f"""
Research the latest best practices for "{topic}". Based on this research, generate {count} strictly formatted multiple-choice questions for a coding learning platform.

Requirements:
- Prioritize official documentation and recent engineering blogs
- Questions must be technical and practical
- Return ONLY valid JSON (no markdown, no extra text)

JSON schema to return exactly:
{{
  "questions": [
    {{
      "id": string,
      "question": string,
      "options": [string, string, string, string],
      "correct_answer": integer (0-3),
      "explanation": string,
      "difficulty": "easy" | "medium" | "hard"
    }}
  ],
  "citations": [{{"title": string, "url": string, "snippet": string}}]
}}
""".strip()


# --- Strategy Pattern: Question Generators ---
class QuestionGenerator(ABC):
    """Abstract Base Class for question generation strategies."""

    @abstractmethod
    def generate(self, topic: str) -> GeneratedSet:
        pass


class YouComQuestionGenerator(QuestionGenerator):
    """Asks the research service for fresh, cited questions on a topic."""

    def __init__(self, client: YouComClient, count: int = QUESTIONS_PER_TOPIC):
        self.client = client
        self.count = count

    def generate(self, topic: str) -> GeneratedSet:
        data = self.client.chat(build_research_prompt(topic, self.count))
        try:
            parsed = json.loads(clean_json_response(str(data.get("answer", ""))))
        except json.JSONDecodeError as e:
            raise GenerationError(f"Failed to parse response as JSON: {e}") from e

        raw_questions = parsed.get("questions") if isinstance(parsed, dict) else None
        if not isinstance(raw_questions, list):
            raise GenerationError("Invalid response structure: missing questions")

        questions = []
        for i, raw in enumerate(raw_questions):
            if not is_valid_question(raw):
                logger.warning(f"Dropping malformed generated question #{i + 1}")
                continue
            try:
                questions.append(
                    Question(
                        id=str(raw.get("id") or f"q{i + 1}"),
                        question=raw["question"],
                        options=[str(o) for o in raw["options"]],
                        correct_answer=raw["correct_answer"],
                        difficulty=raw.get("difficulty") or Difficulty.MEDIUM,
                        topic=topic,
                        explanation=raw.get("explanation"),
                    )
                )
            except ValidationError as e:
                logger.warning(f"Dropping generated question #{i + 1}: {e}")
        if not questions:
            raise GenerationError("Response contained no usable questions")

        return GeneratedSet(
            questions=questions,
            citations=self._citations(parsed.get("citations"), data.get("citations")),
        )

    def _citations(self, *sources: Any) -> List[Citation]:
        citations: List[Citation] = []
        seen = set()
        for source in sources:
            if not isinstance(source, list):
                continue
            for item in source:
                if not isinstance(item, dict) or not item.get("url"):
                    continue
                if item["url"] in seen:
                    continue
                seen.add(item["url"])
                citations.append(
                    Citation(
                        title=item.get("title") or extract_domain(item["url"]),
                        url=item["url"],
                        snippet=item.get("snippet") or "",
                    )
                )
        return citations


class DemoQuestionGenerator(QuestionGenerator):
    """Offline questions used in demo mode or when the service is down."""

    MONGODB_SET = [
        (
            "What is the primary purpose of the $group stage in MongoDB aggregation?",
            [
                "To filter documents",
                "To group documents by a specified identifier and perform accumulations",
                "To sort documents",
                "To join collections",
            ],
            1,
            Difficulty.MEDIUM,
        ),
        (
            "Which operator would you use to reshape documents in the aggregation pipeline?",
            ["$match", "$group", "$project", "$sort"],
            2,
            Difficulty.EASY,
        ),
        (
            "What does the $lookup stage do in MongoDB aggregation?",
            [
                "Searches for text in documents",
                "Performs a left outer join with another collection",
                "Looks up indexed fields",
                "Validates document schemas",
            ],
            1,
            Difficulty.MEDIUM,
        ),
    ]
    MONGODB_CITATIONS = [
        Citation(
            title="MongoDB Aggregation Pipeline - Official Docs",
            url="https://www.mongodb.com/docs/manual/core/aggregation-pipeline/",
        ),
        Citation(
            title="MongoDB $lookup Documentation",
            url="https://www.mongodb.com/docs/manual/reference/operator/aggregation/lookup/",
        ),
    ]

    def generate(self, topic: str) -> GeneratedSet:
        normalized = topic.lower().strip()
        if "mongodb" in normalized or "aggregation" in normalized:
            return GeneratedSet(
                questions=[
                    Question(
                        id=f"mongo-{i + 1}",
                        question=text,
                        options=options,
                        correct_answer=correct,
                        difficulty=difficulty,
                        topic=topic,
                    )
                    for i, (text, options, correct, difficulty) in enumerate(
                        self.MONGODB_SET
                    )
                ],
                citations=list(self.MONGODB_CITATIONS),
            )
        return self._templated(topic)

    def _templated(self, topic: str) -> GeneratedSet:
        questions = [
            Question(
                id="demo-1",
                question=f"Where should you look first for current {topic} best practices?",
                options=[
                    "The official documentation",
                    "A random forum post from years ago",
                    "Auto-generated code comments",
                    "Nowhere, best practices never change",
                ],
                correct_answer=0,
                difficulty=Difficulty.EASY,
                topic=topic,
                explanation="Official documentation tracks the current release.",
            ),
            Question(
                id="demo-2",
                question=f"What is the safest way to adopt a new {topic} feature?",
                options=[
                    "Ship it straight to production",
                    "Try it behind tests and roll it out gradually",
                    "Rewrite the whole project first",
                    "Disable all existing tests",
                ],
                correct_answer=1,
                difficulty=Difficulty.MEDIUM,
                topic=topic,
                explanation="Tests and gradual rollout keep regressions visible.",
            ),
            Question(
                id="demo-3",
                question=f"Which habit helps most when debugging {topic} problems?",
                options=[
                    "Changing several things at once",
                    "Ignoring error messages",
                    "Reproducing the issue with a minimal example",
                    "Restarting until it works",
                ],
                correct_answer=2,
                difficulty=Difficulty.MEDIUM,
                topic=topic,
                explanation="A minimal reproduction isolates the cause.",
            ),
        ]
        slug = topic.lower().strip().replace(" ", "+")
        citations = [
            Citation(
                title=f"{topic} - search results",
                url=f"https://duckduckgo.com/?q={slug}+documentation",
            )
        ]
        return GeneratedSet(questions=questions, citations=citations)


class GeneratorFactory:
    """Factory to select the appropriate generator."""

    @staticmethod
    def create(mode: str, client: Optional[YouComClient] = None) -> QuestionGenerator:
        if mode == "demo":
            return DemoQuestionGenerator()
        elif mode == "live":
            return YouComQuestionGenerator(client or YouComClient())
        else:
            raise ValueError(f"Unknown generation mode: {mode}")


def generate_training_ground(
    topic: str,
    user_id: str,
    generator: Optional[QuestionGenerator] = None,
) -> TrainingGround:
    """Build a practice set for a weak topic, falling back to demo content."""
    if not topic or not topic.strip():
        raise ValueError("Topic cannot be empty")
    if not user_id or not user_id.strip():
        raise ValueError("User ID is required")
    topic = topic.strip()

    fallback = DemoQuestionGenerator()
    if generator is None:
        generator = fallback

    try:
        generated = generator.generate(topic)
    except GenerationError as e:
        logger.warning(f"Question generation failed for '{topic}', using demo data: {e}")
        generated = fallback.generate(topic)

    logger.info(
        f"Generated {len(generated.questions)} questions for '{topic}' "
        f"from {len(generated.source_links)} sources"
    )
    return TrainingGround(
        user_id=user_id,
        topic=topic,
        generated_at=datetime.now(),
        questions=generated.questions,
        citations=generated.citations,
        source_links=generated.source_links,
    )
