"""
Bark 서버 API 클라이언트 (비동기)

- /hc 헬스 체크
- /generate 음성 생성 (동기 호출, 한 번에 하나)
"""

import logging

import httpx

from .errors import BackendError, TransportError
from .types import BarkRequest

logger = logging.getLogger(__name__)


class BarkClient:
    """비동기 Bark API 클라이언트

    Note: 동시 요청 수를 제한하지 않음. 워커 루프가 순차적으로 호출하므로
    서버에는 항상 요청이 하나만 들어감.
    """

    def __init__(self, base_url: str, timeout: float | None = None):
        """
        Args:
            base_url: Bark 서버 주소
            timeout: 요청 타임아웃 (초). None이면 무제한 (모델 로딩에 수 분 소요)
        """
        self.base_url = base_url
        self.timeout = timeout

    def _create_client(self) -> httpx.AsyncClient:
        """새로운 HTTP 클라이언트 생성 (매 요청마다)"""
        return httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout)

    async def health_check(self) -> str:
        """Bark 서버 헬스 체크

        응답 상태코드와 무관하게 서버가 응답하면 성공으로 간주.

        Returns:
            str: 응답 본문

        Raises:
            TransportError: 서버 연결 실패
        """
        try:
            async with self._create_client() as client:
                response = await client.get("/hc")
                return response.text
        except httpx.HTTPError as e:
            raise TransportError(f"Bark 서버 연결 실패: {e}") from e

    async def generate(self, request: BarkRequest) -> bytes:
        """음성 생성 요청

        Args:
            request: Bark 요청 (text, voice_preset)

        Returns:
            bytes: 생성된 오디오 (mp3)

        Raises:
            BackendError: non-2xx 응답 (재시도하지 않음)
            TransportError: 서버 연결 실패
        """
        try:
            async with self._create_client() as client:
                response = await client.post("/generate", json=request.to_payload())
                response.raise_for_status()
                return response.content
        except httpx.HTTPStatusError as e:
            logger.error(f"Bark generate failed: {e.response.text}")
            raise BackendError(
                e.response.status_code, e.response.reason_phrase, e.response.text
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Bark generate error: {e}")
            raise TransportError(f"Bark 서버 연결 실패: {e}") from e
