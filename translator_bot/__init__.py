"""
한국어↔태국어 LINE 번역 봇
감지, 프롬프트, OpenAI 호출, 파싱, 후처리, 답장 조립 파이프라인
"""
from .config import (
    ConfigError,
    Credentials,
    Settings,
    StyleConfig,
    configure_logging,
    load_settings,
)
from .models import (
    CompletionOutcome,
    Direction,
    OutboundMessage,
    ParseOutcome,
    ParseStatus,
    TranslationRequest,
    TranslationResult,
)
from .pipeline import EventReport, EventState, TranslationPipeline

__all__ = [
    # Config
    "ConfigError",
    "Credentials",
    "Settings",
    "StyleConfig",
    "configure_logging",
    "load_settings",
    # Models
    "CompletionOutcome",
    "Direction",
    "OutboundMessage",
    "ParseOutcome",
    "ParseStatus",
    "TranslationRequest",
    "TranslationResult",
    # Pipeline
    "EventReport",
    "EventState",
    "TranslationPipeline",
]
