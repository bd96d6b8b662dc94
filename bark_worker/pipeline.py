"""
후처리 파이프라인

작업 하나당: 업로드 → 결과 리포트 → 큐 메시지 삭제.
워커 루프는 이 파이프라인을 기다리지 않고 다음 작업을 가져옴
(업로드 네트워크 지연과 다음 추론을 겹치기 위함).
"""

import asyncio
import json
import logging
from typing import Any, Coroutine

from bark_client.errors import ErrorClassifier
from bark_client.queue import QueueClient
from bark_client.reporting import ReportingClient
from bark_client.storage import ArtifactUploader
from bark_client.types import BenchmarkResult, FetchedJob, SystemInfo

logger = logging.getLogger(__name__)


class PostProcessingPipeline:
    """작업별 후처리 체인

    단계 순서는 엄격함. 한 단계가 실패하면 이후 단계는 실행하지 않고
    로깅만 함 (ack 안 된 메시지는 큐에서 재전달됨).
    """

    def __init__(
        self,
        uploader: ArtifactUploader,
        reporter: ReportingClient,
        queue: QueueClient,
        system_info: SystemInfo,
    ):
        self.uploader = uploader
        self.reporter = reporter
        self.queue = queue
        self.system_info = system_info

    async def run(
        self, fetched: FetchedJob, audio: bytes, inference_time_ms: float
    ) -> str | None:
        """후처리 실행

        Args:
            fetched: 큐에서 가져온 작업
            audio: 생성된 오디오
            inference_time_ms: 추론 소요 시간 (ms)

        Returns:
            다운로드 URL, 실패 시 None
        """
        job = fetched.job
        step = "upload"
        try:
            # 1. 업로드 (여러 URL이면 첫 번째가 대상)
            output_url = await self.uploader.upload(audio, job.upload_urls[0])

            # 2. 결과 리포트
            step = "report"
            await self.reporter.record_result(
                BenchmarkResult(
                    recipe_id=job.id,
                    script_section=fetched.request.text,
                    section_index=job.section_index,
                    inference_time=inference_time_ms,
                    output_url=output_url,
                    voice=fetched.request.voice_preset,
                    system_info=self.system_info,
                )
            )

            # 3. 큐 메시지 삭제
            step = "acknowledge"
            await self.queue.acknowledge(fetched.message_id)
        except Exception as e:
            logger.error(
                f"[Pipeline] {step} 단계 실패: Job {job.id}, "
                f"{ErrorClassifier.format_message(e)}"
            )
            return None

        summary = {
            "text": fetched.request.text,
            "inference_time": inference_time_ms,
            "output_url": output_url,
        }
        logger.info(
            "[Pipeline] 후처리 완료:\n" + json.dumps(summary, indent=2, ensure_ascii=False)
        )
        return output_url


class PipelineTracker:
    """분리 실행된 파이프라인 태스크 추적

    컨트롤러는 태스크를 기다리지 않음. 종료 시 drain()으로 제한 시간 동안만
    기다릴 수 있음.
    """

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task] = set()
        self.launched = 0
        self.completed = 0
        self.failed = 0

    @property
    def outstanding(self) -> int:
        return len(self._tasks)

    def launch(self, coro: Coroutine[Any, Any, str | None]) -> asyncio.Task:
        """파이프라인을 분리된 태스크로 시작"""
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        self.launched += 1
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            self.failed += 1
            return
        error = task.exception()
        if error is not None:
            logger.error(f"[Pipeline] 예상치 못한 에러: {error}")
            self.failed += 1
        elif task.result() is None:
            self.failed += 1
        else:
            self.completed += 1

    async def drain(self, timeout: float) -> int:
        """미완료 파이프라인을 최대 timeout초 대기

        태스크를 취소하지 않음.

        Returns:
            int: 대기 후에도 남아있는 태스크 수
        """
        if not self._tasks or timeout <= 0:
            return self.outstanding

        logger.info(
            f"[Pipeline] 후처리 {self.outstanding}개 완료 대기 (최대 {timeout}초)"
        )
        _, pending = await asyncio.wait(set(self._tasks), timeout=timeout)
        if pending:
            logger.warning(f"[Pipeline] 후처리 {len(pending)}개 미완료 상태로 종료")
        return len(pending)
