"""LINE 답장 전송 (line-bot-sdk v3)"""
import logging

from linebot.v3.messaging import (
    ApiClient,
    Configuration,
    MessagingApi,
    ReplyMessageRequest,
)

from .models import OutboundMessage

logger = logging.getLogger(__name__)


class LineReplier:
    """reply token으로 답장을 보낸다. 실패해도 재시도하지 않음 (중복 전송 방지)"""

    def __init__(self, access_token: str, timeout: float = 10.0):
        """
        Args:
            access_token: 채널 액세스 토큰
            timeout: 답장 API 호출 제한 시간(초)
        """
        self.configuration = Configuration(access_token=access_token)
        self.timeout = timeout

    def reply(self, reply_token: str, message: OutboundMessage) -> None:
        with ApiClient(self.configuration) as client:
            MessagingApi(client).reply_message(
                ReplyMessageRequest(
                    reply_token=reply_token,
                    messages=message.to_line_messages(),
                ),
                _request_timeout=self.timeout,
            )
        logger.debug("답장 전송 완료 (%d개 세그먼트)", len(message))
