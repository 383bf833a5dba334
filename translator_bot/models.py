"""
데이터 모델
요청/응답/결과 객체 정의 (모두 이벤트 단위로 생성되고 공유되지 않음)
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from linebot.v3.messaging import TextMessage


class Direction(Enum):
    """번역 방향"""
    KR_TO_TH = "KR→TH"
    TH_TO_KR = "TH→KR"

    @property
    def flag_label(self) -> str:
        if self is Direction.KR_TO_TH:
            return "🇰🇷→🇹🇭"
        return "🇹🇭→🇰🇷"


class ParseStatus(Enum):
    """응답 파싱 결과 상태"""
    OK = "ok"               # 구조화(JSON) 응답 복원
    FALLBACK = "fallback"   # 줄 단위 텍스트로 추출
    FAILED = "failed"       # 사용할 내용 없음


@dataclass(frozen=True)
class TranslationRequest:
    """번역 요청 (이벤트 1건)"""
    source_text: str
    direction: Direction

    def __post_init__(self):
        if not self.source_text or not self.source_text.strip():
            raise ValueError("source_text는 비어 있을 수 없습니다.")
        object.__setattr__(self, "source_text", self.source_text.strip())


@dataclass(frozen=True)
class CompletionOutcome:
    """Completion API 호출 결과"""
    success: bool
    http_status: int                        # 응답 없음(타임아웃/연결 오류)은 0
    raw_content: Optional[str] = None
    failure_reason: Optional[str] = None
    model: Optional[str] = None             # 마지막으로 시도한 모델
    attempts: int = 0                       # 전체 시도 횟수


@dataclass(frozen=True)
class TranslationResult:
    """파싱된 번역 결과"""
    primary_text: str
    literal_back_translation: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.primary_text.strip()


@dataclass(frozen=True)
class ParseOutcome:
    """파서 결과"""
    status: ParseStatus
    result: Optional[TranslationResult] = None
    strategy: Optional[str] = None          # 성공한 파싱 전략 이름


@dataclass(frozen=True)
class OutboundMessage:
    """LINE으로 보낼 답장 세그먼트 (1~2개)"""
    segments: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if not self.segments:
            raise ValueError("답장 세그먼트가 비어 있습니다.")
        if len(self.segments) > 2:
            raise ValueError(f"세그먼트는 최대 2개입니다: {len(self.segments)}")

    def __len__(self) -> int:
        return len(self.segments)

    def to_line_messages(self) -> list[TextMessage]:
        return [TextMessage(text=text) for text in self.segments]
