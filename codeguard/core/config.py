import os

from pydantic import BaseModel


def _csv(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


class Settings(BaseModel):
    # Review agent
    AGENT_ID: str = os.getenv("AGENT_ID", "69a2854ca96eb35aa78a9ccd")
    AGENT_PROVIDER: str = os.getenv("AGENT_PROVIDER", "openai")
    FIX_ENABLED: bool = os.getenv("FIX_ENABLED", "true").lower() in ("1", "true", "yes")

    # LLM: OpenAI
    OPENAI_API_KEY: str | None = os.getenv("OPENAI_API_KEY")
    OPENAI_MODEL: str = os.getenv("OPENAI_MODEL", "gpt-4o-mini")

    # LLM: Anthropic
    ANTHROPIC_API_KEY: str | None = os.getenv("ANTHROPIC_API_KEY")
    ANTHROPIC_MODEL: str = os.getenv("ANTHROPIC_MODEL", "claude-3-5-haiku-20241022")

    # Editor
    DEFAULT_LANGUAGE: str = os.getenv("DEFAULT_LANGUAGE", "JavaScript/TypeScript")
    SUPPORTED_LANGUAGES: list[str] = _csv(
        os.getenv("SUPPORTED_LANGUAGES", "JavaScript/TypeScript,Python,Java/Kotlin")
    )


settings = Settings()
