"""
작업 큐 HTTP 클라이언트

GET /{queue_name} 으로 메시지 하나를 가져오고,
DELETE /{queue_name}/{message_id} 로 처리 완료를 알림.
"""

import logging
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from .errors import QueueError, TransportError
from .types import (
    BarkRequest,
    DeleteQueueMessageResponse,
    FetchedJob,
    GetJobFromQueueResponse,
)

logger = logging.getLogger(__name__)


class QueueClient:
    """작업 큐 클라이언트

    한 번의 조회에서 최대 한 개의 메시지만 처리 (배치 할당 없음).
    """

    def __init__(
        self,
        base_url: str,
        queue_name: str,
        auth_header: str,
        api_key: str,
        timeout: float = 30.0,
    ):
        self.base_url = base_url
        self.queue_name = queue_name
        self.auth_header = auth_header
        self.api_key = api_key
        self.timeout = timeout

    def _create_client(self) -> httpx.AsyncClient:
        """새로운 HTTP 클라이언트 생성 (매 요청마다)"""
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers={self.auth_header: self.api_key},
            timeout=self.timeout,
        )

    async def fetch_next(self) -> FetchedJob | None:
        """다음 작업 조회

        Returns:
            FetchedJob 또는 None (대기 메시지 없음)

        Raises:
            TransportError: 큐 서버 연결 실패
            QueueError: non-2xx 응답, 응답/메시지 본문 파싱 실패
        """
        try:
            async with self._create_client() as client:
                response = await client.get(f"/{self.queue_name}")
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as e:
            raise QueueError(
                f"큐 조회 거부: {e.response.status_code} {e.response.text}"
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(f"큐 서버 연결 실패: {e}") from e
        except ValueError as e:
            raise QueueError(f"큐 응답 파싱 실패: {e}") from e

        try:
            queue_response = GetJobFromQueueResponse.model_validate(payload)
            if not queue_response.messages:
                return None

            if len(queue_response.messages) > 1:
                logger.debug(
                    f"[Queue] 메시지 {len(queue_response.messages)}개 수신, 첫 번째만 처리"
                )

            message = queue_response.messages[0]
            job = message.parse_job()
        except ValidationError as e:
            raise QueueError(f"큐 메시지 파싱 실패: {e}") from e

        return FetchedJob(
            message_id=message.messageId,
            job=job,
            request=BarkRequest.from_job(job),
        )

    async def acknowledge(self, message_id: str) -> DeleteQueueMessageResponse:
        """메시지 삭제 (재처리 불필요 표시)

        Args:
            message_id: 메시지 수신 핸들 (URI 인코딩 전 원본)

        Returns:
            DeleteQueueMessageResponse

        Raises:
            TransportError: 큐 서버 연결 실패
            QueueError: 응답 파싱 실패
        """
        path = f"/{self.queue_name}/{quote(message_id, safe='')}"
        try:
            async with self._create_client() as client:
                response = await client.delete(path)
                return DeleteQueueMessageResponse.model_validate(response.json())
        except httpx.HTTPError as e:
            raise TransportError(f"메시지 삭제 실패: {e}") from e
        except (ValueError, ValidationError) as e:
            raise QueueError(f"삭제 응답 파싱 실패: {e}") from e
