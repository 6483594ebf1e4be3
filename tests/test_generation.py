import json

import httpx
import pytest

from adaptiq.generation import (
    DemoQuestionGenerator,
    GenerationError,
    GeneratorFactory,
    QuestionGenerator,
    YouComClient,
    YouComQuestionGenerator,
    clean_json_response,
    extract_domain,
    generate_training_ground,
    is_valid_question,
)
from adaptiq.models import Difficulty

PAYLOAD = {
    "questions": [
        {
            "id": "q1",
            "question": "Which hook runs after render?",
            "options": ["useEffect", "useMemo", "useRef", "useId"],
            "correct_answer": 0,
            "explanation": "Effects run after commit.",
            "difficulty": "hard",
        },
        {
            "question": "Missing id, default difficulty",
            "options": ["a", "b"],
            "correct_answer": 1,
        },
        {"question": "Broken", "options": ["only one"], "correct_answer": 0},
    ],
    "citations": [
        {"title": "React docs", "url": "https://react.dev/reference", "snippet": "x"}
    ],
}


def _client(handler):
    return YouComClient(
        "test-key",
        base_url="https://api.example.com",
        client=httpx.Client(transport=httpx.MockTransport(handler)),
    )


def test_clean_json_response_strips_fences():
    assert clean_json_response('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert clean_json_response("  {}  ") == "{}"


def test_extract_domain():
    assert extract_domain("https://www.mongodb.com/docs") == "mongodb.com"
    assert extract_domain("https://react.dev/x") == "react.dev"
    assert extract_domain("not a url") == "unknown source"


def test_is_valid_question():
    assert is_valid_question({"question": "q", "options": ["a", "b"], "correct_answer": 1})
    assert not is_valid_question({"question": "q", "options": ["a"], "correct_answer": 0})
    assert not is_valid_question({"question": "q", "options": ["a", "b"], "correct_answer": 2})
    assert not is_valid_question({"question": "q", "options": ["a", "b"], "correct_answer": True})
    assert not is_valid_question("nope")


def test_client_requires_key(monkeypatch):
    monkeypatch.setattr("adaptiq.generation.settings.YOU_COM_API_KEY", "")
    with pytest.raises(GenerationError):
        YouComClient()


def test_live_generator_parses_questions_and_citations():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["key"] = request.headers["X-API-Key"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(
            200,
            json={
                "answer": "```json\n" + json.dumps(PAYLOAD) + "\n```",
                "citations": [
                    {"title": "React docs", "url": "https://react.dev/reference"},
                    {"title": "Blog", "url": "https://blog.example.com/hooks"},
                ],
            },
        )

    generated = YouComQuestionGenerator(_client(handler)).generate("React Hooks")

    assert seen["url"] == "https://api.example.com/smart/chat"
    assert seen["key"] == "test-key"
    assert seen["body"]["chat_mode"] == "smart"
    assert "React Hooks" in seen["body"]["query"]

    assert [q.id for q in generated.questions] == ["q1", "q2"]
    assert generated.questions[0].difficulty == Difficulty.HARD
    assert generated.questions[1].difficulty == Difficulty.MEDIUM
    assert all(q.topic == "React Hooks" for q in generated.questions)
    assert generated.source_links == [
        "https://react.dev/reference",
        "https://blog.example.com/hooks",
    ]


def test_live_generator_http_error():
    client = _client(lambda request: httpx.Response(500, text="boom"))
    with pytest.raises(GenerationError, match="500"):
        YouComQuestionGenerator(client).generate("x")


def test_live_generator_bad_json():
    client = _client(lambda request: httpx.Response(200, json={"answer": "sorry"}))
    with pytest.raises(GenerationError, match="JSON"):
        YouComQuestionGenerator(client).generate("x")


def test_demo_generator_topics():
    mongo = DemoQuestionGenerator().generate("MongoDB Aggregation")
    assert [q.id for q in mongo.questions] == ["mongo-1", "mongo-2", "mongo-3"]
    assert extract_domain(mongo.source_links[0]) == "mongodb.com"

    other = DemoQuestionGenerator().generate("Rust Lifetimes")
    assert len(other.questions) == 3
    assert all("Rust Lifetimes" in q.question for q in other.questions)
    assert other.citations


def test_factory():
    assert isinstance(GeneratorFactory.create("demo"), DemoQuestionGenerator)
    with pytest.raises(ValueError):
        GeneratorFactory.create("other")


class _FailingGenerator(QuestionGenerator):
    def generate(self, topic):
        raise GenerationError("service down")


def test_training_ground_falls_back_to_demo():
    training = generate_training_ground(" Recursion ", "user-1", _FailingGenerator())
    assert training.topic == "Recursion"
    assert training.user_id == "user-1"
    assert len(training.questions) == 3
    assert training.source_links == [c.url for c in training.citations]


def test_training_ground_validates_input():
    with pytest.raises(ValueError, match="Topic"):
        generate_training_ground("  ", "user-1")
    with pytest.raises(ValueError, match="User"):
        generate_training_ground("Recursion", "")


def test_client_rejects_non_object_body():
    client = _client(lambda request: httpx.Response(200, json=[]))
    with pytest.raises(GenerationError, match="list"):
        client.chat("anything")


def test_training_ground_falls_back_on_non_object_body():
    client = _client(lambda request: httpx.Response(200, json="just text"))
    training = generate_training_ground(
        "Recursion", "user-1", YouComQuestionGenerator(client)
    )
    assert [q.id for q in training.questions] == ["demo-1", "demo-2", "demo-3"]


def test_untitled_citation_is_labelled_by_domain():
    def handler(request):
        return httpx.Response(
            200,
            json={
                "answer": json.dumps(PAYLOAD),
                "citations": [{"url": "https://www.python.org/dev/peps/pep-0008/"}],
            },
        )

    generated = YouComQuestionGenerator(_client(handler)).generate("Style")
    titles = {c.url: c.title for c in generated.citations}
    assert titles["https://www.python.org/dev/peps/pep-0008/"] == "python.org"


def test_close_releases_http_client():
    http_client = httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
    client = YouComClient("test-key", client=http_client)
    client.close()
    assert http_client.is_closed
