"""
오디오 업로드

작업에 포함된 pre-signed URL로 결과 오디오를 PUT.
"""

import logging

import httpx

from .errors import TransportError, UploadError

logger = logging.getLogger(__name__)


def strip_query(url: str) -> str:
    """쿼리 문자열(서명)을 제거한 다운로드 URL 반환

    첫 '?' 이후만 잘라냄. 나머지(스킴 대소문자, 쿼리 없는 URL의 #fragment)는 그대로.
    """
    return url.split("?", 1)[0]


class ArtifactUploader:
    """pre-signed URL 업로더 (인증 헤더 없음)"""

    def __init__(self, timeout: float = 30.0):
        self.timeout = timeout

    def _create_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout)

    async def upload(
        self, payload: bytes, url: str, content_type: str = "audio/mpeg"
    ) -> str:
        """오디오 업로드

        Args:
            payload: 오디오 바이너리
            url: pre-signed 업로드 URL
            content_type: Content-Type 헤더

        Returns:
            str: 쿼리 문자열을 제거한 URL

        Raises:
            UploadError: non-2xx 응답
            TransportError: 연결 실패
        """
        try:
            async with self._create_client() as client:
                response = await client.put(
                    url, content=payload, headers={"Content-Type": content_type}
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise UploadError(f"업로드 실패: {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise TransportError(f"업로드 연결 실패: {e}") from e

        download_url = strip_query(url)
        logger.debug(f"[Upload] 업로드 완료: {download_url} ({len(payload)} bytes)")
        return download_url
