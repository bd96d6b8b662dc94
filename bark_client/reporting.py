"""
벤치마크 결과 리포팅 클라이언트
"""

import httpx

from .errors import ReportError, TransportError
from .types import BenchmarkResult


class ReportingClient:
    """리포팅 서버 클라이언트

    POST /{benchmark_id} 로 BenchmarkResult 전송.
    """

    def __init__(
        self,
        base_url: str,
        benchmark_id: str,
        auth_header: str,
        api_key: str,
        timeout: float = 30.0,
    ):
        self.base_url = base_url
        self.benchmark_id = benchmark_id
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

    async def record_result(self, result: BenchmarkResult) -> None:
        """결과 전송

        Raises:
            ReportError: non-2xx 응답
            TransportError: 연결 실패
        """
        try:
            async with self._create_client() as client:
                response = await client.post(
                    f"/{self.benchmark_id}", json=result.model_dump(mode="json")
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ReportError(
                f"결과 리포트 실패: {e.response.status_code} {e.response.text}"
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(f"리포팅 서버 연결 실패: {e}") from e
