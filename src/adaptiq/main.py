import logging
import os
import time
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timedelta
from logging.handlers import RotatingFileHandler
from typing import Callable, Optional

import uvicorn
from fastapi import (
    Cookie,
    Depends,
    FastAPI,
    Form,
    Header,
    Query,
    Response,
)
from fastapi.responses import JSONResponse

from .analysis import analyze_answers
from .bank import BankManager
from .config import settings
from .dashboard import build_dashboard
from .engine import AdaptiveQuiz
from .generation import (
    GeneratorFactory,
    QuestionGenerator,
    YouComClient,
    generate_training_ground,
)
from .keys import KeyboardAdapter
from .models import SessionData, SessionState
from .progress import ProgressStore
from .redis_session import SESSION_PREFIX, get_redis
from .training import TrainingStore

# --- Logging Setup ---
logger = logging.getLogger("adaptiq")
logger.setLevel(settings.LOG_LEVEL)

if not os.path.exists(settings.LOG_DIR):
    os.makedirs(settings.LOG_DIR)
log_path = os.path.join(settings.LOG_DIR, settings.LOG_FILE)
file_handler = RotatingFileHandler(log_path, maxBytes=5_000_000, backupCount=3)
file_handler.setFormatter(
    logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
)
logger.addHandler(file_handler)



# --- Lifecycle ---
research_client: Optional[YouComClient] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    global research_client
    bank_manager.load_all()
    if not settings.DEMO_MODE and settings.YOU_COM_API_KEY:
        research_client = YouComClient()
    yield
    if research_client is not None:
        research_client.close()
        research_client = None


app = FastAPI(
    title=settings.PROJECT_NAME,
    debug=settings.DEBUG,
    lifespan=lifespan,
)

bank_manager = BankManager(settings.BANK_DIR)
SESSION_TTL = timedelta(minutes=settings.SESSION_TIMEOUT_MINUTES)


# --- Dependencies ---
def get_clock() -> Callable[[], float]:
    return time.time


def get_generator() -> QuestionGenerator:
    if research_client is None:
        return GeneratorFactory.create("demo")
    return GeneratorFactory.create("live", research_client)


def get_user_id(
    user_id: Optional[str] = Header(None, alias=settings.USER_HEADER),
) -> Optional[str]:
    return user_id


def get_session_id(
    session_id: Optional[str] = Cookie(None, alias=settings.SESSION_COOKIE_NAME),
) -> Optional[str]:
    return session_id


def get_active_session(
    session_id: str = Depends(get_session_id),
    redis_client=Depends(get_redis),
) -> Optional[SessionData]:
    if not session_id:
        return None

    session_data = redis_client.get(f"{SESSION_PREFIX}{session_id}")
    if not session_data:
        return None

    session = SessionData.model_validate_json(session_data)

    if datetime.now() - session.created_at > SESSION_TTL:
        redis_client.delete(f"{SESSION_PREFIX}{session_id}")
        return None
    return session


def save_session(redis_client, session_id: str, session_data: SessionData):
    redis_client.set(
        f"{SESSION_PREFIX}{session_id}",
        session_data.model_dump_json(),
        ex=SESSION_TTL,
    )


def load_quiz(
    session_id: str,
    session_data: SessionData,
    redis_client,
    clock: Callable[[], float],
) -> Optional[AdaptiveQuiz]:
    """Rebuild the controller around the stored state of a session.

    A reveal whose delay has run out is advanced (and saved) before the
    caller sees the quiz. Returns None when the session's bank is gone.
    """
    bank = bank_manager.get_bank(session_data.subject)
    if bank is None:
        logger.warning(
            f"Session {session_id} refers to missing bank {session_data.subject}"
        )
        return None

    def on_complete(answers):
        logger.info(
            f"Session finished [Subject: {session_data.subject}, "
            f"Score: {sum(1 for a in answers if a.is_correct)}/{len(answers)}]"
        )
        if session_data.user_id:
            ProgressStore(redis_client).record(
                session_data.user_id, session_data.subject, answers
            )

    quiz = AdaptiveQuiz(
        bank=bank,
        on_complete=on_complete,
        clock=clock,
        state=session_data.state,
    )
    if quiz.advance_if_due():
        save_session(redis_client, session_id, session_data)
    return quiz


def invalid_session() -> JSONResponse:
    return JSONResponse({"error": "Session invalid"}, status_code=401)


def unknown_subject() -> JSONResponse:
    return JSONResponse({"error": "Unknown subject"}, status_code=404)


def missing_user() -> JSONResponse:
    return JSONResponse({"error": "User ID is required"}, status_code=401)


# --- Routes ---
@app.get("/api/subjects")
def get_subjects():
    return bank_manager.get_subjects()


@app.post("/start")
def start_quiz_session(
    response: Response,
    subject: str = Form("default"),
    user_id: Optional[str] = Depends(get_user_id),
    redis_client=Depends(get_redis),
    clock: Callable[[], float] = Depends(get_clock),
):
    if not bank_manager.get_bank(subject):
        return unknown_subject()

    new_id = str(uuid.uuid4())
    session_data = SessionData(
        state=SessionState(question_start_time=clock()),
        subject=subject,
        created_at=datetime.now(),
        user_id=user_id,
    )
    save_session(redis_client, new_id, session_data)

    logger.info(f"New session: {new_id} [Subject: {subject}, User: {user_id}]")

    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=new_id,
        httponly=True,
        samesite="Lax",
    )
    return {"session_id": new_id, "total_questions": settings.TOTAL_QUESTIONS}


@app.get("/api/quiz")
def get_quiz_state(
    session_id: str = Depends(get_session_id),
    session_data: SessionData = Depends(get_active_session),
    redis_client=Depends(get_redis),
    clock: Callable[[], float] = Depends(get_clock),
):
    if not session_data:
        return invalid_session()

    quiz = load_quiz(session_id, session_data, redis_client, clock)
    if quiz is None:
        return unknown_subject()
    return quiz.view()


@app.post("/api/select")
def select_option(
    option: int = Form(...),
    session_id: str = Depends(get_session_id),
    session_data: SessionData = Depends(get_active_session),
    redis_client=Depends(get_redis),
    clock: Callable[[], float] = Depends(get_clock),
):
    if not session_data:
        return invalid_session()

    quiz = load_quiz(session_id, session_data, redis_client, clock)
    if quiz is None:
        return unknown_subject()
    if not quiz.select_option(option):
        return JSONResponse({"error": "Invalid option"}, status_code=400)
    save_session(redis_client, session_id, session_data)
    return quiz.view()


@app.post("/api/submit")
def submit_answer(
    session_id: str = Depends(get_session_id),
    session_data: SessionData = Depends(get_active_session),
    redis_client=Depends(get_redis),
    clock: Callable[[], float] = Depends(get_clock),
):
    if not session_data:
        return invalid_session()

    quiz = load_quiz(session_id, session_data, redis_client, clock)
    if quiz is None:
        return unknown_subject()
    question = quiz.current_question
    result = quiz.submit()
    if result is None:
        return JSONResponse({"error": "Nothing to submit"}, status_code=400)
    save_session(redis_client, session_id, session_data)
    return {
        "result": result,
        "correct_answer": question.correct_answer,
        "explanation": question.explanation,
        "advance_in": quiz.advance_delay,
    }


@app.post("/api/key")
def press_key(
    key: str = Form(...),
    session_id: str = Depends(get_session_id),
    session_data: SessionData = Depends(get_active_session),
    redis_client=Depends(get_redis),
    clock: Callable[[], float] = Depends(get_clock),
):
    if not session_data:
        return invalid_session()

    quiz = load_quiz(session_id, session_data, redis_client, clock)
    if quiz is None:
        return unknown_subject()
    command = KeyboardAdapter(quiz).handle_key(key)
    if command:
        save_session(redis_client, session_id, session_data)
    return {"command": command, "quiz": quiz.view()}


@app.get("/api/result")
def get_result_data(
    session_id: str = Depends(get_session_id),
    session_data: SessionData = Depends(get_active_session),
    redis_client=Depends(get_redis),
    clock: Callable[[], float] = Depends(get_clock),
):
    if not session_data:
        return invalid_session()

    quiz = load_quiz(session_id, session_data, redis_client, clock)
    if quiz is None:
        return unknown_subject()
    if not quiz.is_complete:
        return JSONResponse({"error": "Quiz not complete"}, status_code=409)
    return analyze_answers(quiz.answers)


@app.post("/api/reset")
def reset_session(
    response: Response,
    session_id: str = Depends(get_session_id),
    redis_client=Depends(get_redis),
):
    if session_id:
        redis_client.delete(f"{SESSION_PREFIX}{session_id}")
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return {"status": "success"}


@app.post("/api/training")
def create_training_ground(
    topic: str = Form(...),
    user_id: Optional[str] = Depends(get_user_id),
    redis_client=Depends(get_redis),
    generator: QuestionGenerator = Depends(get_generator),
):
    if not user_id:
        return missing_user()
    try:
        training = generate_training_ground(topic, user_id, generator)
    except ValueError as e:
        return JSONResponse({"error": str(e)}, status_code=400)

    training_id = TrainingStore(redis_client).save(training)
    return {"training_id": training_id, "success": True}


@app.get("/api/training")
def list_training_grounds(
    topic: Optional[str] = Query(None),
    user_id: Optional[str] = Depends(get_user_id),
    redis_client=Depends(get_redis),
):
    if not user_id:
        return missing_user()
    return TrainingStore(redis_client).list(user_id, topic)


@app.get("/api/training/latest")
def get_latest_training_ground(
    topic: Optional[str] = Query(None),
    user_id: Optional[str] = Depends(get_user_id),
    redis_client=Depends(get_redis),
):
    if not user_id:
        return missing_user()
    training = TrainingStore(redis_client).latest(user_id, topic)
    if training is None:
        return JSONResponse({"error": "Training not found"}, status_code=404)
    return training


@app.get("/api/training/{training_id}")
def get_training_ground(training_id: str, redis_client=Depends(get_redis)):
    training = TrainingStore(redis_client).get(training_id)
    if training is None:
        return JSONResponse({"error": "Training not found"}, status_code=404)
    return training


@app.get("/api/progress")
def get_progress(
    user_id: Optional[str] = Depends(get_user_id),
    redis_client=Depends(get_redis),
):
    if not user_id:
        return missing_user()
    return ProgressStore(redis_client).get(user_id)


@app.get("/api/dashboard")
def get_dashboard(
    user_id: Optional[str] = Depends(get_user_id),
    redis_client=Depends(get_redis),
):
    if not user_id:
        return missing_user()
    subject_names = {s["id"]: s["name"] for s in bank_manager.get_subjects()}
    return build_dashboard(
        ProgressStore(redis_client).get(user_id),
        TrainingStore(redis_client).list(user_id),
        subject_names,
    )


if __name__ == "__main__":
    uvicorn.run("adaptiq.main:app", host="0.0.0.0", port=8000, reload=settings.DEBUG)
