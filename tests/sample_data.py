"""
테스트용 샘플 데이터 및 Fake 협력 객체

실제 서버 없이 워커 루프와 파이프라인의 순서/동시성을 검증하기 위한
가짜 Bark 서버, 큐, 업로더, 리포터.
"""

import asyncio
import json
from typing import Any
from unittest.mock import AsyncMock

import httpx

from bark_client.errors import BackendError
from bark_client.storage import strip_query
from bark_client.types import (
    BarkJob,
    BarkRequest,
    BenchmarkResult,
    DeleteQueueMessageResponse,
    FetchedJob,
    SystemInfo,
)

SAMPLE_JOB_BODY: dict[str, Any] = {
    "id": 1,
    "voice": "v1",
    "script_section": "hi",
    "section_index": 0,
    "upload_url": "https://x/y?sig=1",
}

SAMPLE_SYSTEM_INFO = SystemInfo(vCPU=8, MemGB=31.25, gpu="NVIDIA GeForce RTX 4090")


def generate_queue_payload(*bodies: dict[str, Any], prefix: str = "m") -> dict[str, Any]:
    """GET /{queue_name} 응답 페이로드 생성"""
    return {
        "status": "ok",
        "messages": [
            {"messageId": f"{prefix}{i + 1}", "body": json.dumps(body)}
            for i, body in enumerate(bodies)
        ],
    }


def generate_fetched_job(
    index: int = 1, message_id: str | None = None, **overrides: Any
) -> FetchedJob:
    """FetchedJob 생성 (id/메시지 핸들/업로드 URL이 index별로 다름)"""
    body = {
        **SAMPLE_JOB_BODY,
        "id": index,
        "script_section": f"section {index}",
        "section_index": index - 1,
        "upload_url": f"https://bucket.example.com/clips/{index}.mp3?sig={index}",
        **overrides,
    }
    job = BarkJob.model_validate(body)
    return FetchedJob(
        message_id=message_id or f"msg/{index}+handle",
        job=job,
        request=BarkRequest.from_job(job),
    )


def make_response(
    status_code: int = 200,
    method: str = "GET",
    url: str = "http://testserver/",
    **kwargs: Any,
) -> httpx.Response:
    """요청 정보가 포함된 httpx.Response (raise_for_status 사용 가능)"""
    return httpx.Response(
        status_code, request=httpx.Request(method, url), **kwargs
    )


def mock_http_client(**methods: Any) -> AsyncMock:
    """async with로 사용할 수 있는 Mock httpx.AsyncClient"""
    client = AsyncMock()
    for name, value in methods.items():
        setattr(client, name, value)
    client.__aenter__ = AsyncMock(return_value=client)
    client.__aexit__ = AsyncMock(return_value=None)
    return client


class EventLog:
    """여러 Fake 객체가 공유하는 호출 기록"""

    def __init__(self) -> None:
        self.events: list[tuple[str, Any]] = []

    def add(self, kind: str, key: Any) -> None:
        self.events.append((kind, key))

    def index(self, kind: str, key: Any) -> int:
        return self.events.index((kind, key))

    def keys(self, kind: str) -> list[Any]:
        return [key for k, key in self.events if k == kind]


class FakeBarkServer:
    """동시 호출 수를 계측하는 가짜 Bark 서버"""

    def __init__(
        self,
        fail_on_call: int | None = None,
        delay: float = 0.0,
        on_generate=None,
    ):
        self.requests: list[BarkRequest] = []
        self.health_checks = 0
        self.in_flight = 0
        self.max_in_flight = 0
        self.fail_on_call = fail_on_call
        self.delay = delay
        self.on_generate = on_generate

    async def health_check(self) -> str:
        self.health_checks += 1
        return "ok"

    async def generate(self, request: BarkRequest) -> bytes:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            self.requests.append(request)
            await asyncio.sleep(self.delay)
            if self.on_generate is not None:
                self.on_generate(len(self.requests))
            if self.fail_on_call is not None and len(self.requests) == self.fail_on_call:
                raise BackendError(500, "Internal Server Error", "model crashed")
            return f"audio:{request.text}".encode()
        finally:
            self.in_flight -= 1


class FakeQueue:
    """미리 정한 결과를 순서대로 반환하는 가짜 큐

    results가 소진되면 infinite=True일 때 새 작업을 계속 생성.
    """

    def __init__(
        self,
        results: list[FetchedJob | None | Exception] | None = None,
        infinite: bool = False,
        log: EventLog | None = None,
    ):
        self.results = list(results or [])
        self.infinite = infinite
        self.log = log or EventLog()
        self.fetch_calls = 0
        self.acked: list[str] = []

    async def fetch_next(self) -> FetchedJob | None:
        self.fetch_calls += 1
        if self.results:
            result = self.results.pop(0)
            if isinstance(result, Exception):
                raise result
            return result
        if self.infinite:
            return generate_fetched_job(self.fetch_calls)
        return None

    async def acknowledge(self, message_id: str) -> DeleteQueueMessageResponse:
        self.log.add("ack", message_id)
        self.acked.append(message_id)
        return DeleteQueueMessageResponse(message="Message deleted")


class FakeUploader:
    """URL별 게이트로 완료 시점을 제어할 수 있는 가짜 업로더"""

    def __init__(self, log: EventLog | None = None, gated: bool = False):
        self.log = log or EventLog()
        self.gated = gated
        self.released = False
        self.gates: dict[str, asyncio.Event] = {}
        self.uploads: list[tuple[str, bytes]] = []

    def gate(self, url: str) -> asyncio.Event:
        return self.gates.setdefault(url, asyncio.Event())

    def release_all(self) -> None:
        self.released = True
        for url in list(self.gates):
            self.gates[url].set()

    async def upload(
        self, payload: bytes, url: str, content_type: str = "audio/mpeg"
    ) -> str:
        if self.gated and not self.released:
            await self.gate(url).wait()
        self.uploads.append((url, payload))
        self.log.add("upload", url)
        return strip_query(url)


class FakeReporter:
    def __init__(self, log: EventLog | None = None):
        self.log = log or EventLog()
        self.results: list[BenchmarkResult] = []

    async def record_result(self, result: BenchmarkResult) -> None:
        await asyncio.sleep(0)
        self.results.append(result)
        self.log.add("report", result.recipe_id)
