"""
테스트 공용 fixture
"""
import json
from types import SimpleNamespace
from unittest.mock import Mock

import pytest
from linebot.v3.webhooks import MessageEvent

from translator_bot.config import Credentials, Settings, StyleConfig
from translator_bot.completion import CompletionClient


def make_response(content):
    """OpenAI chat.completions 응답 흉내"""
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))]
    )


class FakeReplier:
    """보낸 답장을 기록하는 가짜 LINE 전송기"""

    def __init__(self, fail=False):
        self.sent = []
        self.fail = fail

    def reply(self, reply_token, message):
        if self.fail:
            raise RuntimeError("LINE API down")
        self.sent.append((reply_token, message))


def text_event(text, reply_token="token-1"):
    """LINE 웹훅 텍스트 메시지 이벤트 (JSON dict)"""
    return {
        "type": "message",
        "mode": "active",
        "timestamp": 1700000000000,
        "webhookEventId": "01HTESTEVENT0000000000000",
        "deliveryContext": {"isRedelivery": False},
        "source": {"type": "user", "userId": "U0123456789abcdef"},
        "replyToken": reply_token,
        "message": {
            "id": "500000000000000001",
            "type": "text",
            "text": text,
            "quoteToken": "q-token",
        },
    }


def delivery(*events):
    """웹훅 본문 (JSON 문자열)"""
    return json.dumps({"destination": "Ubot0000000000000", "events": list(events)}, ensure_ascii=False)


def message_event(text, reply_token="token-1"):
    return MessageEvent.from_dict(text_event(text, reply_token))


@pytest.fixture
def style():
    return StyleConfig(target_model="primary-model", fallback_model="fallback-model")


@pytest.fixture
def settings(style):
    return Settings(
        credentials=Credentials(openai_api_key="sk-test", line_channel_access_token="line-test"),
        style=style,
    )


@pytest.fixture
def openai_mock():
    return Mock()


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def completion(style, openai_mock, sleeps):
    return CompletionClient(style, openai_client=openai_mock, sleep=sleeps.append)
