import os
import logging
from enum import Enum
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from Pianoacademy.errors import ValidationError

logger = logging.getLogger(__name__)

API_BASE_URLS = {
    "dev": "http://localhost:3000/api/v1",
    "prod": "https://api.piano-academy.com/v1",
}
DEFAULT_PUSH_GATEWAY_URL = "https://exp.host/--/api/v2/push/send"

_TRUE_WORDS = {"1", "true", "yes", "on", "enable", "enabled"}
_FALSE_WORDS = {"0", "false", "no", "off", "disable", "disabled"}


class DataMode(Enum):
    MOCK = "mock"
    API = "api"
    FIREBASE = "firebase"


def parse_bool(raw, default: bool = False) -> bool:
    if raw is None:
        return default
    s = str(raw).strip().lower()
    if s in _TRUE_WORDS:
        return True
    if s in _FALSE_WORDS:
        return False
    return default


def parse_number(name, raw, default, cast=float):
    """Numeric env value; ValidationError naming the variable when malformed."""
    if raw is None or not str(raw).strip():
        return default
    try:
        return cast(str(raw).strip())
    except ValueError:
        raise ValidationError(f"{name} 값이 올바르지 않습니다: {raw}")


def parse_mode(raw) -> DataMode:
    if isinstance(raw, DataMode):
        return raw
    value = (raw or DataMode.MOCK.value).strip().lower()
    try:
        return DataMode(value)
    except ValueError:
        raise ValidationError(f"알 수 없는 데이터 모드입니다: {raw}")


@dataclass(frozen=True)
class DataConfig:
    """Which backend the repositories talk to, plus the knobs each backend needs.

    Frozen on purpose: a mode change means building a new config and a new
    repository set.
    """

    mode: DataMode = DataMode.MOCK
    mock_network_delay: float = 0.5
    log_repository_calls: bool = False
    log_api_errors: bool = True
    api_env: str = "dev"
    request_timeout: float = 10.0
    firebase_project_id: Optional[str] = None
    firebase_api_key: Optional[str] = None
    push_gateway_url: str = DEFAULT_PUSH_GATEWAY_URL

    def is_mock_mode(self) -> bool:
        return self.mode is DataMode.MOCK

    def is_api_mode(self) -> bool:
        return self.mode is DataMode.API

    def is_firebase_mode(self) -> bool:
        return self.mode is DataMode.FIREBASE

    @property
    def api_base_url(self) -> str:
        return API_BASE_URLS.get(self.api_env, API_BASE_URLS["dev"])

    @classmethod
    def from_env(cls, dotenv_path=None) -> "DataConfig":
        load_dotenv(dotenv_path)
        mode = parse_mode(os.getenv("PIANOACADEMY_DATA_MODE"))
        delay_ms = parse_number("PIANOACADEMY_MOCK_DELAY_MS", os.getenv("PIANOACADEMY_MOCK_DELAY_MS"), 500, int)
        timeout = parse_number("PIANOACADEMY_REQUEST_TIMEOUT", os.getenv("PIANOACADEMY_REQUEST_TIMEOUT"), 10.0)
        api_env = (os.getenv("PIANOACADEMY_API_ENV") or "dev").strip().lower()
        if api_env not in API_BASE_URLS:
            logger.warning("Unknown PIANOACADEMY_API_ENV=%r, falling back to dev", api_env)
            api_env = "dev"
        config = cls(
            mode=mode,
            mock_network_delay=delay_ms / 1000,
            log_repository_calls=parse_bool(os.getenv("PIANOACADEMY_LOG_REPOSITORY_CALLS"), False),
            log_api_errors=parse_bool(os.getenv("PIANOACADEMY_LOG_API_ERRORS"), True),
            api_env=api_env,
            request_timeout=timeout,
            firebase_project_id=os.getenv("FIREBASE_PROJECT_ID") or None,
            firebase_api_key=os.getenv("FIREBASE_API_KEY") or None,
            push_gateway_url=os.getenv("PUSH_GATEWAY_URL") or DEFAULT_PUSH_GATEWAY_URL,
        )
        logger.info("Data mode: %s", config.mode.value)
        return config
