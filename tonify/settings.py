# tonify/settings.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional
from dotenv import load_dotenv

# Ensure .env is loaded if present
load_dotenv()

class _BaseSettings(BaseSettings):
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


class Settings(_BaseSettings):
    """Relay configuration. Loaded by the relay process only."""

    # Required: the relay refuses to start without an upstream credential
    OPENAI_API_KEY: str
    OPENAI_BASE_URL: str = "https://api.openai.com/v1"  # any OpenAI-compatible endpoint
    OPENAI_MODEL: str = "gpt-4.1-mini"
    OPENAI_ORG: Optional[str] = None
    UPSTREAM_TIMEOUT_S: float = 10.0

    # Server options
    HOST: str = "0.0.0.0"
    PORT: int = 4000
    CORS_ORIGINS: List[str] = ["*"]


class ClientSettings(_BaseSettings):
    """Demo UI and conversation tracker. Never holds the upstream credential."""

    RELAY_URL: str = "http://localhost:4000"
    CLIENT_TIMEOUT_S: float = 5.0
    LIVE_PREVIEW_DEBOUNCE_MS: int = 500

client_settings = ClientSettings()
