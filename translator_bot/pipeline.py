"""
파이프라인 오케스트레이터
이벤트 단위로 감지 → 프롬프트 → 호출 → 파싱 → 후처리 → 조립 → 답장을 순서대로 실행
"""
import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol

from linebot.v3.webhooks import CallbackRequest, Event, MessageEvent, TextMessageContent

from .assembler import ReplyAssembler
from .completion import CompletionClient
from .config import Settings
from .detector import detect_direction
from .line_reply import LineReplier
from .models import (
    Direction,
    OutboundMessage,
    ParseStatus,
    TranslationRequest,
)
from .parser import ResponseParser
from .postprocess import PostProcessor
from .prompts import PromptBuilder

logger = logging.getLogger(__name__)


class EventState(Enum):
    """이벤트 처리 상태"""
    RECEIVED = "received"
    DETECTED = "detected"
    PROMPTED = "prompted"
    COMPLETED = "completed"
    PARSED = "parsed"
    POSTPROCESSED = "postprocessed"
    ASSEMBLED = "assembled"
    REPLIED = "replied"
    SKIPPED = "skipped"


class Replier(Protocol):
    def reply(self, reply_token: str, message: OutboundMessage) -> None: ...


@dataclass
class EventReport:
    """이벤트 1건의 처리 기록"""
    state: EventState = EventState.RECEIVED
    direction: Optional[Direction] = None
    completion_ok: Optional[bool] = None
    parse_status: Optional[ParseStatus] = None
    message: Optional[OutboundMessage] = None
    delivered: bool = False
    error: Optional[str] = None

    def advance(self, state: EventState) -> None:
        logger.debug("%s -> %s", self.state.value, state.value)
        self.state = state


def _parse_events_one_by_one(body: str) -> list[Optional[Event]]:
    """봉투 검증에 실패한 본문은 이벤트마다 따로 읽는다 (읽지 못한 이벤트는 None)"""
    try:
        payload = json.loads(body)
    except ValueError:
        logger.warning("JSON이 아닌 웹훅 본문 무시")
        return []
    events = payload.get("events") if isinstance(payload, dict) else None
    if not isinstance(events, list):
        logger.warning("events가 없는 웹훅 본문")
        return []

    parsed = []
    for raw in events:
        try:
            parsed.append(Event.from_dict(raw))
        except Exception as e:
            logger.warning("읽을 수 없는 이벤트 건너뜀: %s", e)
            parsed.append(None)
    return parsed


def parse_delivery(body: str) -> list[Optional[Event]]:
    """웹훅 본문을 line-bot-sdk 이벤트 모델 목록으로 변환 (서명 검증은 하지 않음)"""
    try:
        return list(CallbackRequest.from_json(body).events or [])
    except Exception as e:
        logger.debug("웹훅 본문 일괄 파싱 실패, 이벤트별로 재시도: %s", e)
        return _parse_events_one_by_one(body)


def extract_text_event(event: Optional[Event]) -> Optional[tuple[str, str]]:
    """텍스트 메시지 이벤트면 (reply_token, text), 아니면 None"""
    if not isinstance(event, MessageEvent) or not isinstance(event.message, TextMessageContent):
        return None
    text = (event.message.text or "").strip()
    if not event.reply_token or not text:
        return None
    return event.reply_token, text


class TranslationPipeline:
    """번역 파이프라인"""

    def __init__(
        self,
        settings: Settings,
        completion: Optional[CompletionClient] = None,
        replier: Optional[Replier] = None,
    ):
        style = settings.style
        self.settings = settings
        self.prompts = PromptBuilder(style)
        self.completion = completion or CompletionClient(
            style, api_key=settings.credentials.openai_api_key
        )
        self.parser = ResponseParser(style.output_dialect)
        self.post_processor = PostProcessor(style.enforce_polite_particle)
        self.assembler = ReplyAssembler(style)
        if replier is None:
            replier = LineReplier(
                settings.credentials.line_channel_access_token, timeout=style.reply_timeout
            )
        self.replier = replier

    def translate(self, text: str, report: Optional[EventReport] = None) -> OutboundMessage:
        """
        텍스트 한 건을 번역해 답장 메시지로 만든다

        Args:
            text: 사용자 입력 (비어 있지 않아야 함)
            report: 상태 기록용 (선택)

        Returns:
            OutboundMessage (실패 시 고정 안내 문구 1개)
        """
        report = report or EventReport()

        direction = detect_direction(text)
        request = TranslationRequest(text, direction)
        report.direction = direction
        report.advance(EventState.DETECTED)

        messages = self.prompts.build(request)
        report.advance(EventState.PROMPTED)

        outcome = self.completion.complete(messages, self.prompts.response_format())
        report.completion_ok = outcome.success
        report.advance(EventState.COMPLETED)
        if not outcome.success:
            logger.error(
                "번역 호출 실패 (model=%s, status=%s, attempts=%d): %s",
                outcome.model, outcome.http_status, outcome.attempts, outcome.failure_reason,
            )
            report.parse_status = ParseStatus.FAILED
            report.advance(EventState.ASSEMBLED)
            return self.assembler.failure()

        parsed = self.parser.parse(outcome.raw_content, direction)
        report.parse_status = parsed.status
        report.advance(EventState.PARSED)
        if parsed.result is None:
            logger.error("번역 응답 파싱 실패: %r", (outcome.raw_content or "")[:200])
            report.advance(EventState.ASSEMBLED)
            return self.assembler.failure()

        result = self.post_processor.apply(parsed.result, request)
        report.advance(EventState.POSTPROCESSED)

        message = self.assembler.assemble(result, direction)
        report.advance(EventState.ASSEMBLED)
        return message

    def process_event(self, event: Optional[Event]) -> EventReport:
        report = EventReport()

        extracted = extract_text_event(event)
        if extracted is None:
            report.advance(EventState.SKIPPED)
            return report
        reply_token, text = extracted

        try:
            message = self.translate(text, report)
        except Exception as e:
            logger.exception("번역 처리 중 오류")
            report.error = str(e)
            message = self.assembler.failure()
        report.message = message

        try:
            self.replier.reply(reply_token, message)
            report.delivered = True
        except Exception as e:
            logger.exception("LINE 답장 전송 실패")
            report.error = str(e)
        report.advance(EventState.REPLIED)
        return report

    def handle_delivery(self, body: str) -> list[EventReport]:
        """웹훅 본문(JSON 문자열)의 이벤트를 순서대로 처리 (한 건의 실패가 다른 이벤트를 막지 않음)"""
        reports = []
        for event in parse_delivery(body):
            try:
                reports.append(self.process_event(event))
            except Exception as e:
                logger.exception("이벤트 처리 오류")
                reports.append(EventReport(error=str(e)))
        return reports
