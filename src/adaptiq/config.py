import os


class Settings:
    PROJECT_NAME: str = "adaptiq"
    DEBUG: bool = os.getenv("ADAPTIQ_DEBUG", "false").lower() == "true"
    LOG_DIR: str = os.getenv("ADAPTIQ_LOG_DIR", "log")
    LOG_FILE: str = "adaptiq.log"
    LOG_LEVEL: str = os.getenv("ADAPTIQ_LOG_LEVEL", "INFO")
    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    BANK_DIR: str = os.getenv("ADAPTIQ_BANK_DIR", "banks")
    TOTAL_QUESTIONS: int = 10
    ADVANCE_DELAY_SECONDS: float = 2.0
    SESSION_COOKIE_NAME: str = "quiz_session_id"
    SESSION_TIMEOUT_MINUTES: int = 120
    USER_HEADER: str = "X-User-Id"
    YOU_COM_API_KEY: str = os.getenv("YOU_COM_API_KEY", "")
    YOU_COM_BASE_URL: str = "https://api.you.com"
    DEMO_MODE: bool = os.getenv("DEMO_MODE", "false").lower() == "true"
    GENERATION_TIMEOUT_SECONDS: float = 60.0


settings = Settings()
