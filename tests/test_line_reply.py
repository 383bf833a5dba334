"""
LINE 답장 전송 테스트
"""
from unittest.mock import MagicMock, patch

from translator_bot.line_reply import LineReplier
from translator_bot.models import OutboundMessage


class TestLineReplier:

    @patch("translator_bot.line_reply.MessagingApi")
    @patch("translator_bot.line_reply.ApiClient")
    def test_reply_message(self, mock_api_client, mock_messaging_api):
        mock_api_client.return_value = MagicMock()
        replier = LineReplier("line-token")

        replier.reply("reply-token", OutboundMessage(("สวัสดีครับ", "(직역) 안녕하세요")))

        request = mock_messaging_api.return_value.reply_message.call_args.args[0]
        assert request.reply_token == "reply-token"
        assert [m.text for m in request.messages] == ["สวัสดีครับ", "(직역) 안녕하세요"]

    def test_configuration_token(self):
        replier = LineReplier("line-token")

        assert replier.configuration.access_token == "line-token"

    @patch("translator_bot.line_reply.MessagingApi")
    @patch("translator_bot.line_reply.ApiClient")
    def test_reply_has_timeout(self, mock_api_client, mock_messaging_api):
        """답장 호출은 제한 시간을 넘겨야 함 (urllib3 기본값은 무제한)"""
        mock_api_client.return_value = MagicMock()
        replier = LineReplier("line-token", timeout=7.5)

        replier.reply("reply-token", OutboundMessage(("สวัสดีครับ",)))

        kwargs = mock_messaging_api.return_value.reply_message.call_args.kwargs
        assert kwargs["_request_timeout"] == 7.5

    def test_default_timeout(self):
        assert LineReplier("line-token").timeout == 10.0
