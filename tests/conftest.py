"""
Pytest 설정 및 공통 Fixture
"""

import pytest

from bark_client.types import SystemInfo
from bark_worker.config import WorkerConfig
from tests.sample_data import (
    SAMPLE_SYSTEM_INFO,
    EventLog,
    FakeBarkServer,
    FakeQueue,
    FakeReporter,
    FakeUploader,
)


@pytest.fixture
def worker_config() -> WorkerConfig:
    """테스트용 WorkerConfig

    환경변수 대신 하드코딩된 값 사용. 대기 시간은 짧게.
    """
    return WorkerConfig(
        server_url="http://bark.test:8000",
        benchmark_size=3,
        reporting_url="http://reporting.test:3000",
        reporting_auth_header="Benchmark-Api-Key",
        reporting_api_key="test-key",
        benchmark_id="bark-test",
        queue_url="http://queue.test:3001",
        queue_name="bark-test",
        poll_interval=0.01,
        readiness_max_attempts=3,
        readiness_interval=0.01,
        drain_timeout=1.0,
        health_port=0,
        health_enabled=False,
    )


@pytest.fixture
def system_info() -> SystemInfo:
    return SAMPLE_SYSTEM_INFO


@pytest.fixture
def system_info_provider(system_info: SystemInfo):
    """Worker에 주입할 시스템 정보 수집 함수 (nvidia-smi 없이)"""

    async def provider() -> SystemInfo:
        return system_info

    return provider


@pytest.fixture
def event_log() -> EventLog:
    return EventLog()


@pytest.fixture
def bark_server() -> FakeBarkServer:
    return FakeBarkServer()


@pytest.fixture
def fake_queue(event_log: EventLog) -> FakeQueue:
    return FakeQueue(infinite=True, log=event_log)


@pytest.fixture
def fake_uploader(event_log: EventLog) -> FakeUploader:
    return FakeUploader(log=event_log)


@pytest.fixture
def fake_reporter(event_log: EventLog) -> FakeReporter:
    return FakeReporter(log=event_log)
