"""
설정 관리 모듈
환경변수(.env 포함)를 한 번 읽어 불변 설정 객체로 만든다
"""
import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DIALECTS = ("mode", "preview", "literal", "lines")

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


class ConfigError(ValueError):
    """잘못되었거나 누락된 설정"""


@dataclass(frozen=True)
class Credentials:
    openai_api_key: str
    line_channel_access_token: str

    def __repr__(self) -> str:
        # 토큰은 로그에 남기지 않는다
        return "Credentials(openai_api_key=***, line_channel_access_token=***)"


@dataclass(frozen=True)
class StyleConfig:
    """번역 스타일/모델 설정 (프로세스 시작 시 한 번 생성)"""
    target_model: str = "gpt-4o"
    fallback_model: str = "gpt-4o-mini"
    include_back_translation: bool = True
    max_segment_length: int = 1900
    enforce_polite_particle: bool = True
    output_dialect: str = "mode"
    temperature: float = 0.4
    request_timeout: float = 15.0
    reply_timeout: float = 10.0
    rate_limit_retries: int = 2
    rate_limit_backoff: float = 0.8
    show_direction_label: bool = False

    def __post_init__(self):
        if self.output_dialect not in DIALECTS:
            raise ConfigError(
                f"OUTPUT_DIALECT는 {', '.join(DIALECTS)} 중 하나여야 합니다: {self.output_dialect!r}"
            )
        if self.max_segment_length <= 0:
            raise ConfigError("MAX_SEGMENT_LENGTH는 양수여야 합니다.")
        if self.rate_limit_retries < 0:
            raise ConfigError("RATE_LIMIT_RETRIES는 0 이상이어야 합니다.")
        if self.request_timeout <= 0:
            raise ConfigError("OPENAI_TIMEOUT은 양수여야 합니다.")
        if self.reply_timeout <= 0:
            raise ConfigError("LINE_TIMEOUT은 양수여야 합니다.")

    @property
    def models(self) -> list[str]:
        """시도 순서대로 정리한 모델 목록 (중복 제거)"""
        ordered = [self.target_model]
        if self.fallback_model and self.fallback_model != self.target_model:
            ordered.append(self.fallback_model)
        return ordered


@dataclass(frozen=True)
class Settings:
    credentials: Credentials
    style: StyleConfig
    debug: bool = False
    port: int = 10000


def _get_bool(env: Mapping[str, str], key: str, default: bool) -> bool:
    value = env.get(key)
    if value is None or value.strip() == "":
        return default
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ConfigError(f"{key}의 값이 불리언이 아닙니다: {value!r}")


def _get_number(env: Mapping[str, str], key: str, default, cast):
    value = env.get(key)
    if value is None or value.strip() == "":
        return default
    try:
        return cast(value.strip())
    except ValueError as e:
        raise ConfigError(f"{key}의 값이 올바르지 않습니다: {value!r}") from e


def _require(env: Mapping[str, str], key: str) -> str:
    value = (env.get(key) or "").strip()
    if not value:
        raise ConfigError(f"{key}가 설정되지 않았습니다. .env 파일을 확인하세요.")
    return value


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    환경변수에서 설정 로드

    Args:
        environ: 테스트용 환경변수 매핑 (None이면 .env 로드 후 os.environ 사용)

    Returns:
        Settings 객체

    Raises:
        ConfigError: 필수 키 누락 또는 값 형식 오류
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    credentials = Credentials(
        openai_api_key=_require(environ, "OPENAI_API_KEY"),
        line_channel_access_token=_require(environ, "LINE_CHANNEL_ACCESS_TOKEN"),
    )

    defaults = StyleConfig()
    style = StyleConfig(
        target_model=environ.get("OPENAI_MODEL") or defaults.target_model,
        fallback_model=environ.get("OPENAI_FALLBACK_MODEL") or defaults.fallback_model,
        include_back_translation=_get_bool(
            environ, "INCLUDE_BACK_TRANSLATION", defaults.include_back_translation
        ),
        max_segment_length=_get_number(
            environ, "MAX_SEGMENT_LENGTH", defaults.max_segment_length, int
        ),
        enforce_polite_particle=_get_bool(
            environ, "ENFORCE_POLITE_PARTICLE", defaults.enforce_polite_particle
        ),
        output_dialect=(environ.get("OUTPUT_DIALECT") or defaults.output_dialect).strip().lower(),
        temperature=_get_number(environ, "OPENAI_TEMPERATURE", defaults.temperature, float),
        request_timeout=_get_number(environ, "OPENAI_TIMEOUT", defaults.request_timeout, float),
        reply_timeout=_get_number(environ, "LINE_TIMEOUT", defaults.reply_timeout, float),
        rate_limit_retries=_get_number(
            environ, "RATE_LIMIT_RETRIES", defaults.rate_limit_retries, int
        ),
        rate_limit_backoff=_get_number(
            environ, "RATE_LIMIT_BACKOFF", defaults.rate_limit_backoff, float
        ),
        show_direction_label=_get_bool(
            environ, "SHOW_DIRECTION_LABEL", defaults.show_direction_label
        ),
    )

    return Settings(
        credentials=credentials,
        style=style,
        debug=_get_bool(environ, "DEBUG", False),
        port=_get_number(environ, "PORT", 10000, int),
    )


def configure_logging(debug: bool = False) -> None:
    """루트 로거 설정 (stderr)"""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def log_effective_style(style: StyleConfig) -> None:
    """정책성 토글은 시작 시 명시적으로 남긴다"""
    logger.info(
        "model=%s fallback=%s dialect=%s back_translation=%s polite_particle=%s",
        style.target_model,
        style.fallback_model,
        style.output_dialect,
        style.include_back_translation,
        style.enforce_polite_particle,
    )
