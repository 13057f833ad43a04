from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    openai_api_key: str  # required, set it in the .env file
    openai_base_url: str = "https://api.openai.com/v1"

    chat_model: str = "gpt-3.5-turbo"
    quiz_model: str = "gpt-3.5-turbo-0125"
    chat_temperature: float = 0.7
    completion_timeout_s: float = 60.0

    transcript_max_chars: int = 1000
    transcript_languages: str = "en"  # comma separated, most preferred first

    quiz_default_video: str = "https://www.youtube.com/watch?v=x7X9w_GIm1s"

    strict_frames: bool = False  # reject unknown frame roles instead of ignoring them

    host: str = "0.0.0.0"
    port: int = 8080
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000"

    @field_validator("openai_api_key")
    @classmethod
    def _key_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("OPENAI_API_KEY is empty")
        return v.strip()

    def languages(self) -> List[str]:
        return [lang.strip() for lang in self.transcript_languages.split(",") if lang.strip()]

    def origins(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


settings = Settings()
