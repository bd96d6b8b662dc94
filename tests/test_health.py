"""
헬스체크 서버 테스트
"""

import json

import pytest
from aiohttp.test_utils import make_mocked_request

from bark_client.types import WorkerState
from bark_worker.main import Worker


@pytest.fixture
def worker(worker_config, bark_server, fake_queue, fake_uploader, fake_reporter,
           system_info_provider) -> Worker:
    return Worker(
        worker_config,
        backend=bark_server,
        queue=fake_queue,
        uploader=fake_uploader,
        reporter=fake_reporter,
        system_info_provider=system_info_provider,
    )


class TestHealthServer:
    def test_snapshot_initial(self, worker: Worker):
        snapshot = worker.health_server.snapshot()

        assert snapshot["status"] == "ok"
        assert snapshot["worker_id"] == worker.worker_id
        assert snapshot["state"] == "idle"
        assert snapshot["processed"] == 0
        assert snapshot["current_message_id"] is None
        assert snapshot["outstanding_pipelines"] == 0
        assert snapshot["uptime_seconds"] >= 0

    @pytest.mark.asyncio
    async def test_health_endpoint_after_run(self, worker: Worker):
        await worker.run()

        request = make_mocked_request("GET", "/health")
        response = await worker.health_server._health_handler(request)
        body = json.loads(response.text)

        assert response.status == 200
        assert body["state"] == WorkerState.STOPPED.value
        assert body["processed"] == 3

    @pytest.mark.asyncio
    async def test_start_and_stop(self, worker: Worker):
        """포트 0으로 실제 바인딩 후 종료"""
        await worker.health_server.start()
        assert worker.health_server.site is not None

        await worker.health_server.stop()
        assert worker.health_server.site is None
        assert worker.health_server.runner is None
