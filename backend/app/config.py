import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings


PROJECT_ROOT = Path(__file__).resolve().parent.parent
LOCAL_ENV_FILE = PROJECT_ROOT / ".env.local"

if LOCAL_ENV_FILE.exists():
    load_dotenv(LOCAL_ENV_FILE, override=True)


class Settings(BaseSettings):
    class Config:
        env_file = ".env"
        extra = "ignore"
    database_url: str = "sqlite:///./ad_dashboard.db"
    database_public_url: str = ""
    environment: str = "development"
    log_level: str = Field(default="INFO")
    frontend_base_url: str = Field(default="http://localhost:3000")
    additional_cors_origins: str | None = Field(default=None)

    # Graph API
    meta_graph_api_version: str = Field(default="v18.0")
    meta_request_timeout_seconds: float = Field(default=30.0)
    # What to do when a unit of remote work cannot be completed:
    # "placeholder" synthesizes mock_* ids, "abort" raises.
    meta_on_unrecoverable: Literal["placeholder", "abort"] = Field(default="placeholder")
    meta_remember_ad_formats: bool = Field(default=False)
    meta_default_thumbnail_url: str = Field(default="https://www.facebook.com/images/fb_icon_325x325.png")
    meta_creative_link_url: str = Field(default="https://facebook.com")

    def get_database_url(self) -> str:
        """
        Get the appropriate database URL.
        Prefers DATABASE_PUBLIC_URL for local development (external access).
        Falls back to DATABASE_URL.
        """
        public_url = os.getenv('DATABASE_PUBLIC_URL') or self.database_public_url
        internal_url = os.getenv('DATABASE_URL') or self.database_url

        if public_url:
            return public_url

        return internal_url

    def get_graph_api_base(self) -> str:
        return f"https://graph.facebook.com/{self.meta_graph_api_version}"

    def get_additional_cors_origins(self) -> list[str]:
        value = self.additional_cors_origins
        if not value:
            return []

        if isinstance(value, str):
            stripped = value.strip()
            if not stripped:
                return []
            if stripped.startswith("[") and stripped.endswith("]"):
                try:
                    parsed = json.loads(stripped)
                    if isinstance(parsed, list):
                        return [
                            str(origin).strip()
                            for origin in parsed
                            if str(origin).strip()
                        ]
                except json.JSONDecodeError:
                    pass
            return [item.strip() for item in stripped.split(",") if item.strip()]

        if isinstance(value, (list, tuple, set)):
            return [str(origin).strip() for origin in value if str(origin).strip()]

        return []


def get_cors_origins(settings: Settings) -> list[str]:
    """
    Build the CORS allow-list: the dashboard frontend plus any additional
    origins, keeping only well-formed scheme://host[:port] values.
    """
    from app.utils import extract_origin

    origins: list[str] = []
    candidates = [settings.frontend_base_url, *settings.get_additional_cors_origins()]
    for candidate in candidates:
        origin = extract_origin(candidate)
        if origin and origin not in origins:
            origins.append(origin)
    return origins


@lru_cache()
def get_settings():
    return Settings()
