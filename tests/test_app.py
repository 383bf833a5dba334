"""
Flask 웹훅 엔드포인트 테스트
"""
from unittest.mock import Mock

import pytest
from openai import InternalServerError

from app import create_app
from translator_bot.assembler import FAILURE_MESSAGE
from translator_bot.completion import CompletionClient
from translator_bot.config import ConfigError
from translator_bot.pipeline import TranslationPipeline

from conftest import FakeReplier, delivery, text_event


@pytest.fixture
def pipeline_mock():
    return Mock()


@pytest.fixture
def client(pipeline_mock):
    return create_app(pipeline=pipeline_mock).test_client()


class TestWebhook:

    def test_health(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.data == b"OK"

    def test_get_callback(self, client, pipeline_mock):
        response = client.get("/callback")

        assert response.status_code == 200
        pipeline_mock.handle_delivery.assert_not_called()

    def test_post_delivers_raw_body(self, client, pipeline_mock):
        body = delivery(text_event("안녕"))

        response = client.post("/callback", data=body, content_type="application/json")

        assert response.status_code == 200
        pipeline_mock.handle_delivery.assert_called_once_with(body)

    def test_non_json_body(self, settings, openai_mock):
        replier = FakeReplier()
        completion = CompletionClient(settings.style, openai_client=openai_mock, sleep=lambda _: None)
        pipeline = TranslationPipeline(settings, completion=completion, replier=replier)
        client = create_app(pipeline=pipeline).test_client()

        response = client.post("/callback", data="not json", content_type="text/plain")

        assert response.status_code == 200
        assert replier.sent == []
        openai_mock.chat.completions.create.assert_not_called()

    def test_pipeline_error_still_ok(self, client, pipeline_mock):
        """내부 오류여도 200 (LINE 재전송 방지)"""
        pipeline_mock.handle_delivery.side_effect = RuntimeError("boom")

        response = client.post("/callback", data=delivery(), content_type="application/json")

        assert response.status_code == 200

    def test_total_failure_end_to_end(self, settings):
        """두 모델 모두 실패 → 실패 안내 답장 + 200"""
        openai_mock = Mock()
        openai_mock.chat.completions.create.side_effect = InternalServerError(
            "Server error", response=Mock(status_code=500), body=None
        )
        replier = FakeReplier()
        completion = CompletionClient(settings.style, openai_client=openai_mock, sleep=lambda _: None)
        pipeline = TranslationPipeline(settings, completion=completion, replier=replier)
        client = create_app(pipeline=pipeline).test_client()

        body = delivery(text_event("안녕하세요"))
        response = client.post("/callback", data=body, content_type="application/json")

        assert response.status_code == 200
        assert len(replier.sent) == 1
        assert replier.sent[0][1].segments == (FAILURE_MESSAGE,)


class TestCreateApp:

    def test_missing_key_stops_startup(self, monkeypatch):
        monkeypatch.setattr("app.load_settings", Mock(side_effect=ConfigError("OPENAI_API_KEY")))

        with pytest.raises(ConfigError):
            create_app()

    def test_builds_pipeline_from_settings(self, settings):
        app = create_app(settings)

        assert isinstance(app.config["PIPELINE"], TranslationPipeline)
