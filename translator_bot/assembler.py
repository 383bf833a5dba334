"""답장 조립: 번역문 + (선택) 직역, 세그먼트 길이 제한"""
from typing import Optional

from .config import StyleConfig
from .models import Direction, OutboundMessage, TranslationResult
from .prompts import LITERAL_MARKER

FAILURE_MESSAGE = "번역 중 문제가 발생했어요. 다시 한번 보내주세요."


class ReplyAssembler:

    def __init__(self, style: StyleConfig):
        self.style = style

    def _cap(self, text: str) -> str:
        return text[:self.style.max_segment_length]

    def failure(self) -> OutboundMessage:
        return OutboundMessage((FAILURE_MESSAGE,))

    def assemble(
        self,
        result: Optional[TranslationResult],
        direction: Optional[Direction] = None,
    ) -> OutboundMessage:
        if result is None or result.is_empty:
            return self.failure()

        primary = result.primary_text.strip()
        if self.style.show_direction_label and direction is not None:
            primary = f"{direction.flag_label}\n{primary}"
        segments = [self._cap(primary)]

        literal = (result.literal_back_translation or "").strip()
        if self.style.include_back_translation and literal:
            segments.append(self._cap(f"{LITERAL_MARKER} {literal}"))

        return OutboundMessage(tuple(segments))
