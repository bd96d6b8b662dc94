"""
Bark 서버 준비 대기

서버 부팅(모델 로딩)은 수 분이 걸릴 수 있으므로 백오프 없이 고정 주기로 폴링.
"""

import asyncio
import logging
from typing import Awaitable, Callable

from bark_client.errors import TransportError
from bark_client.types import ReadinessOutcome

logger = logging.getLogger(__name__)


async def sleep_or_stop(seconds: float, stop_event: asyncio.Event | None) -> None:
    """지정 시간 대기, 종료 신호가 오면 즉시 반환"""
    if stop_event is None:
        await asyncio.sleep(seconds)
        return
    try:
        await asyncio.wait_for(stop_event.wait(), timeout=seconds)
    except asyncio.TimeoutError:
        pass  # 타임아웃은 정상적인 폴링 주기


async def wait_until_ready(
    health_check: Callable[[], Awaitable[object]],
    stop_event: asyncio.Event | None = None,
    max_attempts: int = 300,
    interval: float = 1.0,
) -> ReadinessOutcome:
    """서버가 응답할 때까지 헬스 체크 반복

    연결 실패(TransportError)만 실패로 간주. 서버가 에러 응답을 보내더라도
    응답 자체가 오면 준비된 것으로 봄. 시간 초과 시에도 예외 없이 결과만
    반환하며 계속 진행할지는 호출자가 결정. 그 외 예외는 그대로 전파.

    Args:
        health_check: 헬스 체크 코루틴 함수
        stop_event: 종료 신호
        max_attempts: 최대 시도 횟수
        interval: 시도 간 대기 (초)

    Returns:
        ReadinessOutcome
    """
    attempts = 0
    while attempts < max_attempts:
        if stop_event is not None and stop_event.is_set():
            logger.info("[Readiness] 종료 신호 수신, 대기 중단")
            return ReadinessOutcome.STOPPED

        attempts += 1
        try:
            await health_check()
            logger.info(f"[Readiness] 서버 응답 확인 ({attempts}회 시도)")
            return ReadinessOutcome.READY
        except TransportError:
            logger.info(f"[Readiness] ({attempts}/{max_attempts}) 서버 시작 대기 중...")

        await sleep_or_stop(interval, stop_event)

    logger.warning(f"[Readiness] 최대 시도 횟수 초과: {max_attempts}회")
    return ReadinessOutcome.TIMED_OUT
