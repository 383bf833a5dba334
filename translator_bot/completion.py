"""
Completion 클라이언트 모듈
OpenAI 호출 + 429 백오프 재시도 + 보조 모델 폴백
"""
import logging
import time
from dataclasses import replace
from typing import Callable, Optional

from openai import (
    OpenAI,
    APIError,
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    RateLimitError,
)

from .config import StyleConfig
from .models import CompletionOutcome

logger = logging.getLogger(__name__)


class CompletionClient:
    """번역용 OpenAI 클라이언트

    예외를 밖으로 던지지 않고 항상 CompletionOutcome을 돌려준다.
    """

    def __init__(
        self,
        style: StyleConfig,
        api_key: Optional[str] = None,
        openai_client: Optional[OpenAI] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Args:
            style: 모델/타임아웃/재시도 설정
            api_key: OpenAI API 키 (openai_client 미지정 시 필요)
            openai_client: 주입할 클라이언트 (테스트용)
            sleep: 백오프 대기 함수 (테스트용)
        """
        self.style = style
        self._sleep = sleep
        if openai_client is None:
            # 재시도는 이 클래스에서만 처리
            openai_client = OpenAI(
                api_key=api_key,
                timeout=style.request_timeout,
                max_retries=0,
            )
        self._client = openai_client

    def _request(
        self,
        model: str,
        messages: list[dict],
        response_format: Optional[dict],
    ) -> CompletionOutcome:
        kwargs = {
            "model": model,
            "temperature": self.style.temperature,
            "messages": messages,
            "timeout": self.style.request_timeout,
        }
        if response_format:
            kwargs["response_format"] = response_format

        response = self._client.chat.completions.create(**kwargs)

        content = ""
        if response.choices:
            content = (response.choices[0].message.content or "").strip()
        if not content:
            logger.warning("[%s] 빈 응답", model)
            return CompletionOutcome(
                success=False, http_status=200, failure_reason="empty content", model=model
            )
        logger.debug("[%s] raw completion: %s", model, content)
        return CompletionOutcome(success=True, http_status=200, raw_content=content, model=model)

    def _call_with_backoff(
        self,
        model: str,
        messages: list[dict],
        response_format: Optional[dict],
    ) -> tuple[CompletionOutcome, int]:
        """한 모델에 대해 429일 때만 같은 모델로 재시도"""
        attempts = 0
        while True:
            attempts += 1
            try:
                return self._request(model, messages, response_format), attempts

            except RateLimitError as e:
                retries_used = attempts - 1
                if retries_used >= self.style.rate_limit_retries:
                    logger.warning("[%s] rate limit, 재시도 소진: %s", model, e)
                    return CompletionOutcome(
                        success=False, http_status=429,
                        failure_reason=f"rate limited: {e}", model=model,
                    ), attempts
                wait_time = self.style.rate_limit_backoff * (2 ** retries_used)
                logger.warning("[%s] rate limit, %.1f초 후 재시도", model, wait_time)
                self._sleep(wait_time)

            except APITimeoutError as e:
                logger.warning("[%s] timeout: %s", model, e)
                return CompletionOutcome(
                    success=False, http_status=0, failure_reason=f"timeout: {e}", model=model
                ), attempts

            except APIConnectionError as e:
                logger.warning("[%s] connection error: %s", model, e)
                return CompletionOutcome(
                    success=False, http_status=0, failure_reason=f"connection error: {e}", model=model
                ), attempts

            except APIStatusError as e:
                logger.warning("[%s] HTTP %s: %s", model, e.status_code, e)
                return CompletionOutcome(
                    success=False, http_status=e.status_code,
                    failure_reason=f"HTTP {e.status_code}: {e}", model=model,
                ), attempts

            except APIError as e:
                logger.warning("[%s] API error: %s", model, e)
                return CompletionOutcome(
                    success=False, http_status=0, failure_reason=f"API error: {e}", model=model
                ), attempts

    def complete(
        self,
        messages: list[dict],
        response_format: Optional[dict] = None,
    ) -> CompletionOutcome:
        """
        모델 목록 [기본, 폴백] 순서로 시도

        Returns:
            마지막 시도의 CompletionOutcome (attempts는 전체 누적)
        """
        total_attempts = 0
        outcome = CompletionOutcome(success=False, http_status=0, failure_reason="no model configured")

        for model in self.style.models:
            outcome, attempts = self._call_with_backoff(model, messages, response_format)
            total_attempts += attempts
            if outcome.success:
                break

        return replace(outcome, attempts=total_attempts)
