"""
응답 파서 모듈
모델 출력이 형식을 어겨도 단계적으로 느슨한 전략을 적용해 번역문을 복원
"""
import json
import logging
import re
from typing import Any, Callable, Optional

from .models import Direction, ParseOutcome, ParseStatus, TranslationResult

logger = logging.getLogger(__name__)

RE_FENCE = re.compile(r"^\s*```[a-zA-Z]*\s*$", re.MULTILINE)
RE_LITERAL_PREFIX = re.compile(
    r"^\s*(?:\(직역\)|\[직역\]|직역\s*[:：]|literal\s*[:：]|back-?translation\s*[:：])\s*",
    re.IGNORECASE,
)

SMART_QUOTES = str.maketrans({
    "“": '"', "”": '"', "„": '"', "‟": '"',
    "‘": "'", "’": "'",
})

# dialect별 (KR→TH 본문 키, KR→TH 직역 키, TH→KR 본문 키)
DIALECT_FIELDS = {
    "mode": ("th", "ko_backliteral", "ko"),
    "preview": ("primary", "preview", "primary"),
    "literal": ("translated", "literal", "translated"),
}


def _strict(raw: str) -> Optional[Any]:
    return json.loads(raw)


def _defenced(raw: str) -> Optional[Any]:
    cleaned = RE_FENCE.sub("", raw).translate(SMART_QUOTES).strip()
    return json.loads(cleaned)


def _brace_span(raw: str) -> Optional[Any]:
    text = raw.translate(SMART_QUOTES)
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        return None
    return json.loads(text[start:end + 1])


STRATEGIES: list[tuple[str, Callable[[str], Optional[Any]]]] = [
    ("strict", _strict),
    ("defenced", _defenced),
    ("brace_span", _brace_span),
]


def _string_field(data: dict, key: Optional[str]) -> Optional[str]:
    if not key:
        return None
    value = data.get(key)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


class ResponseParser:
    """모델 응답 파서"""

    def __init__(self, dialect: str = "mode"):
        self.dialect = dialect

    def _dialect_order(self) -> list[str]:
        names = list(DIALECT_FIELDS)
        if self.dialect in DIALECT_FIELDS:
            names.remove(self.dialect)
            names.insert(0, self.dialect)
        return names

    def normalize(self, data: dict, direction: Direction) -> Optional[TranslationResult]:
        """알려진 스키마 중 하나로 해석해 TranslationResult로 변환"""
        for name in self._dialect_order():
            kr_primary, kr_literal, th_primary = DIALECT_FIELDS[name]
            if direction is Direction.KR_TO_TH:
                primary = _string_field(data, kr_primary)
                literal = _string_field(data, kr_literal)
            else:
                primary = _string_field(data, th_primary)
                literal = None
            if primary:
                return TranslationResult(primary, literal)

        # 방향과 다른 키만 온 경우 (예: 한국어 입력에 {"ko": ...})
        for key in ("th", "ko"):
            primary = _string_field(data, key)
            if primary:
                return TranslationResult(primary, None)
        return None

    def _parse_lines(self, raw: str, direction: Direction) -> Optional[TranslationResult]:
        lines = [
            line.strip()
            for line in raw.splitlines()
            if line.strip() and not line.strip().startswith("```")
        ]
        if not lines:
            return None

        literal = None
        if direction is Direction.KR_TO_TH and len(lines) > 1:
            literal = RE_LITERAL_PREFIX.sub("", lines[1]).strip() or None
        return TranslationResult(lines[0], literal)

    def parse(self, raw: Optional[str], direction: Direction) -> ParseOutcome:
        if not raw or not raw.strip():
            return ParseOutcome(ParseStatus.FAILED)

        for name, strategy in STRATEGIES:
            try:
                data = strategy(raw)
            except json.JSONDecodeError:
                continue
            if data is None:
                continue
            if not isinstance(data, dict):
                # JSON 문자열 등: 다음 전략으로
                continue

            result = self.normalize(data, direction)
            if result is None:
                logger.warning("JSON 파싱은 됐지만 알 수 없는 스키마: keys=%s", sorted(data))
                return ParseOutcome(ParseStatus.FAILED, strategy=name)
            return ParseOutcome(ParseStatus.OK, result, name)

        result = self._parse_lines(raw, direction)
        if result is None:
            return ParseOutcome(ParseStatus.FAILED)
        logger.info("JSON 파싱 실패, 줄 단위 추출로 대체")
        return ParseOutcome(ParseStatus.FALLBACK, result, "lines")
