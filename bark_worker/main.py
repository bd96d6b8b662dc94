"""
Bark 벤치마크 워커 메인 엔트리포인트

- Bark 서버 준비 대기 후 워밍업 요청 1회
- 큐 폴링 → 음성 생성 → 후처리 파이프라인 (기다리지 않음)
- 우아한 종료 처리 (SIGINT 시 현재 반복을 마치고 종료)
"""

import asyncio
import logging
import signal
import socket
import sys
import time
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable

from dotenv import load_dotenv

from bark_client.backend import BarkClient
from bark_client.errors import ErrorClassifier, QueueError, TransportError
from bark_client.queue import QueueClient
from bark_client.reporting import ReportingClient
from bark_client.storage import ArtifactUploader
from bark_client.types import BarkRequest, SystemInfo, WorkerState

from .config import WorkerConfig
from .health import HealthServer
from .pipeline import PipelineTracker, PostProcessingPipeline
from .readiness import sleep_or_stop, wait_until_ready
from .system_info import collect_system_info

logger = logging.getLogger(__name__)

# 서버가 실제로 동작하는지 확인하는 워밍업 요청
CANARY_REQUEST = BarkRequest(text="This is a test", voice_preset="v2/en_speaker_6")


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 3)


@dataclass
class BenchmarkSummary:
    """워커 루프 종료 시 집계"""

    processed: int
    elapsed_ms: float
    warm_time_ms: float | None

    @property
    def average_ms(self) -> float | None:
        if self.processed == 0:
            return None
        return self.elapsed_ms / self.processed


class Worker:
    """Bark 벤치마크 워커

    큐에서 작업을 하나씩 가져와 Bark 서버에 순차 제출하고, 후처리는
    분리된 태스크로 실행합니다. 서버에는 항상 요청이 하나만 들어갑니다.
    """

    def __init__(
        self,
        config: WorkerConfig,
        backend: BarkClient | None = None,
        queue: QueueClient | None = None,
        uploader: ArtifactUploader | None = None,
        reporter: ReportingClient | None = None,
        system_info_provider: Callable[[], Awaitable[SystemInfo]] | None = None,
        stop_event: asyncio.Event | None = None,
    ):
        """
        Args:
            config: 워커 설정
            backend: Bark 클라이언트 (기본: config.server_url)
            queue: 큐 클라이언트
            uploader: 오디오 업로더
            reporter: 리포팅 클라이언트
            system_info_provider: 시스템 정보 수집 함수
            stop_event: 종료 신호 (루프 상단에서만 확인)
        """
        self.config = config
        hostname = socket.gethostname()
        self.worker_id = f"{hostname}-{uuid.uuid4().hex[:8]}"

        self.backend = backend or BarkClient(config.server_url)
        self.queue = queue or QueueClient(
            base_url=config.queue_url,
            queue_name=config.queue_name,
            auth_header=config.reporting_auth_header,
            api_key=config.reporting_api_key,
        )
        self.uploader = uploader or ArtifactUploader()
        self.reporter = reporter or ReportingClient(
            base_url=config.reporting_url,
            benchmark_id=config.benchmark_id,
            auth_header=config.reporting_auth_header,
            api_key=config.reporting_api_key,
        )
        self.system_info_provider = system_info_provider or collect_system_info
        self.stop_event = stop_event or asyncio.Event()

        self.state = WorkerState.IDLE
        self.system_info: SystemInfo | None = None
        self.processed = 0
        self.warm_time_ms: float | None = None
        self.current_message_id: str | None = None
        self.tracker = PipelineTracker()
        self.health_server = HealthServer(self)

        logger.info(f"[Worker] 워커 초기화 완료: ID={self.worker_id}")

    def stop(self) -> None:
        """종료 요청 (진행 중인 조회/제출은 끝까지 실행)"""
        if not self.stop_event.is_set():
            logger.info("[Worker] 종료 신호 수신, 현재 작업 후 종료")
        self.stop_event.set()

    def _should_continue(self) -> bool:
        if self.stop_event.is_set():
            return False
        size = self.config.benchmark_size
        return size < 0 or self.processed < size

    async def run(self) -> BenchmarkSummary:
        """워커 상태 머신 실행

        Idle → WaitingForReadiness → WarmingUp → Running → Draining → Stopped

        Raises:
            IntrospectionError: GPU 정보 조회 실패 (네트워크 호출 전)
            BackendError: Bark 서버 non-2xx 응답
        """
        if self.system_info is None:
            await self._snapshot_system_info()
        load_start = time.perf_counter()

        self.state = WorkerState.WAITING_FOR_READINESS
        outcome = await wait_until_ready(
            self.backend.health_check,
            stop_event=self.stop_event,
            max_attempts=self.config.readiness_max_attempts,
            interval=self.config.readiness_interval,
        )
        logger.info(f"[Worker] 서버 준비 대기 결과: {outcome.value}")

        self.state = WorkerState.WARMING_UP
        await self.backend.generate(CANARY_REQUEST)
        self.warm_time_ms = _elapsed_ms(load_start)
        logger.info(f"[Worker] 서버 워밍업 완료: {self.warm_time_ms}ms")

        pipeline = PostProcessingPipeline(
            uploader=self.uploader,
            reporter=self.reporter,
            queue=self.queue,
            system_info=self.system_info,
        )

        self.state = WorkerState.RUNNING
        start = time.perf_counter()
        try:
            await self._loop(pipeline)
        finally:
            self.state = WorkerState.DRAINING
            self.current_message_id = None

        summary = BenchmarkSummary(
            processed=self.processed,
            elapsed_ms=_elapsed_ms(start),
            warm_time_ms=self.warm_time_ms,
        )
        if self.config.is_bounded:
            logger.info(
                f"[Worker] {summary.processed}개 클립 생성, 총 {summary.elapsed_ms}ms"
            )
            logger.info(f"[Worker] 클립당 평균 시간: {summary.average_ms}ms")

        self.state = WorkerState.STOPPED
        return summary

    async def _snapshot_system_info(self) -> SystemInfo:
        """Idle 단계: 시스템 정보 조회

        실패하면 GPU 없는 잘못된 구성이므로 소켓을 열기 전에 바로 종료.
        """
        self.system_info = await self.system_info_provider()
        logger.info(f"[Worker] System Info: {self.system_info.model_dump_json()}")
        return self.system_info

    async def _loop(self, pipeline: PostProcessingPipeline) -> None:
        """메인 루프

        종료 신호와 작업 수 한도는 루프 상단에서만 확인.
        """
        logger.info("[Worker] 작업 루프 시작")

        while self._should_continue():
            logger.debug("[Worker] 작업 조회 중...")
            try:
                fetched = await self.queue.fetch_next()
            except (TransportError, QueueError) as e:
                logger.error(f"[Worker] 작업 조회 실패: {e}")
                await sleep_or_stop(self.config.poll_interval, self.stop_event)
                continue

            if fetched is None:
                logger.debug("[Worker] 대기 작업 없음, 대기...")
                await sleep_or_stop(self.config.poll_interval, self.stop_event)
                continue

            self.current_message_id = fetched.message_id
            logger.info(f"[Worker] 작업 제출: Job {fetched.job.id}")
            job_start = time.perf_counter()
            audio = await self.backend.generate(fetched.request)
            inference_time_ms = _elapsed_ms(job_start)
            logger.info(f"[Worker] 클립 생성 완료: {inference_time_ms}ms")

            self.processed += 1
            self.current_message_id = None

            # 후처리는 기다리지 않고 다음 작업으로 진행
            self.tracker.launch(pipeline.run(fetched, audio, inference_time_ms))

        logger.info(f"[Worker] 작업 루프 종료 (처리된 작업: {self.processed}개)")

    def _install_signal_handlers(self) -> None:
        # Windows는 asyncio signal handler를 지원하지 않으므로 signal.signal() 사용
        if sys.platform != "win32":
            loop = asyncio.get_running_loop()
            for sig in (signal.SIGINT, signal.SIGTERM):
                loop.add_signal_handler(sig, self.stop)
        else:
            signal.signal(signal.SIGINT, lambda s, f: self.stop())

    async def start(self) -> BenchmarkSummary:
        """워커 시작

        시그널 핸들러 등록 후 시스템 정보를 먼저 조회하고(실패 시 헬스 서버를
        열지 않음) 워커 루프를 실행. 종료 전 남은 후처리를 drain_timeout 동안 대기.
        """
        logger.info(f"[Worker] 워커 시작: ID={self.worker_id}")
        self._install_signal_handlers()

        try:
            await self._snapshot_system_info()
            if self.config.health_enabled:
                await self.health_server.start()
            return await self.run()
        except Exception as e:
            if ErrorClassifier.is_fatal(e):
                logger.error(
                    "[Worker] 치명적 에러로 종료: "
                    f"{ErrorClassifier.format_message(e, include_traceback=True)}"
                )
            raise
        finally:
            await self.tracker.drain(self.config.drain_timeout)
            if self.health_server.runner is not None:
                await self.health_server.stop()
            logger.info("[Worker] 종료 완료")


# ============================================================================
# 엔트리포인트
# ============================================================================


def setup_logging(level: str = "INFO") -> None:
    """로깅 설정"""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def run() -> None:
    """워커 실행 (엔트리포인트)

    .env와 환경변수에서 설정을 로드하고 워커를 시작합니다.
    """
    env_path = Path.cwd() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    setup_logging()
    logger.info("=" * 60)
    logger.info("Bark Benchmark Worker")
    logger.info("=" * 60)

    config = WorkerConfig.from_env_validated()

    logger.info(f"Bark URL: {config.server_url}")
    logger.info(f"Queue: {config.queue_url}/{config.queue_name}")
    logger.info(f"Reporting: {config.reporting_url}/{config.benchmark_id}")
    logger.info(f"Benchmark Size: {config.benchmark_size}")

    worker = Worker(config)
    try:
        asyncio.run(worker.start())
    except KeyboardInterrupt:
        logger.info("[Worker] KeyboardInterrupt 수신, 종료 중...")
    except Exception as e:
        logger.error(f"[Worker] 예상치 못한 에러: {e}", exc_info=True)
        raise


if __name__ == "__main__":
    run()
