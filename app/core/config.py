from functools import lru_cache
import os

from dotenv import load_dotenv

load_dotenv()


class Settings:
    app_name: str = "AI Content Workflow"
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./content_workflow.db")
    frontend_url: str = os.getenv("FRONTEND_URL", "http://localhost:3000")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    openai_api_key: str | None = os.getenv("OPENAI_API_KEY") or None
    anthropic_api_key: str | None = os.getenv("ANTHROPIC_API_KEY") or None
    openai_model: str = os.getenv("OPENAI_MODEL", "gpt-4")
    anthropic_model: str = os.getenv("ANTHROPIC_MODEL", "claude-3-sonnet-20240229")


@lru_cache
def get_settings() -> Settings:
    return Settings()
