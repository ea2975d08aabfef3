from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable, Optional

from dotenv import load_dotenv

from brightfuture.errors import ConfigError

Getter = Callable[[str], Optional[str]]

DEFAULT_COUNSELING_CONTACT = "용산경찰서 마약팀: 02-XXX-XXXX"


def _env_str(get: Getter, key: str, default: Optional[str] = None) -> Optional[str]:
    v = get(key)
    if v is None:
        return default
    v = str(v).strip()
    return v if v else default


def _env_int(get: Getter, key: str, default: int) -> int:
    v = _env_str(get, key)
    if v is None:
        return default
    try:
        return int(v)
    except ValueError:
        return default


def _env_float(get: Getter, key: str, default: float) -> float:
    v = _env_str(get, key)
    if v is None:
        return default
    try:
        return float(v)
    except ValueError:
        return default


def _env_bool(get: Getter, key: str, default: bool) -> bool:
    v = _env_str(get, key)
    if v is None:
        return default
    return v.lower() in {"1", "true", "yes", "y", "on"}


@dataclass(frozen=True)
class Settings:
    # OpenAI
    openai_api_key: Optional[str]
    model: str
    temperature: float
    max_tokens: int
    timeout_seconds: float

    # Logging
    log_level: str
    log_json: bool

    # Shown on the result page and in the PDF
    counseling_contact: str

    def require_api_key(self) -> str:
        if not self.openai_api_key:
            raise ConfigError("Missing OPENAI_API_KEY environment variable.")
        return self.openai_api_key

    @staticmethod
    def from_env(get: Optional[Getter] = None, load_dotenv_file: bool = True) -> "Settings":
        # `get` lets the Streamlit app read st.secrets first; defaults to os.getenv.
        if load_dotenv_file:
            load_dotenv()
        if get is None:
            get = os.getenv

        return Settings(
            openai_api_key=_env_str(get, "OPENAI_API_KEY"),
            model=_env_str(get, "APP_OPENAI_MODEL", "gpt-3.5-turbo") or "gpt-3.5-turbo",
            temperature=_env_float(get, "APP_OPENAI_TEMPERATURE", 0.7),
            max_tokens=_env_int(get, "APP_OPENAI_MAX_TOKENS", 2000),
            timeout_seconds=_env_float(get, "APP_OPENAI_TIMEOUT_SECONDS", 60.0),

            log_level=_env_str(get, "APP_LOG_LEVEL", "INFO") or "INFO",
            log_json=_env_bool(get, "APP_LOG_JSON", False),

            counseling_contact=_env_str(get, "APP_COUNSELING_CONTACT", DEFAULT_COUNSELING_CONTACT)
            or DEFAULT_COUNSELING_CONTACT,
        )
