"""
워커 설정

환경변수 기반 설정 관리. 시작 시 한 번 생성해서 각 컴포넌트에 전달.
"""

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """설정 오류 예외"""

    pass


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class WorkerConfig:
    """워커 설정"""

    # Bark 서버
    server_url: str = "http://127.0.0.1:8000"

    # 처리할 작업 수 (음수 = 무제한, 0 = 워밍업만)
    benchmark_size: int = 10

    # 리포팅 (큐 인증에도 같은 헤더 사용)
    reporting_url: str = "http://localhost:3000"
    reporting_auth_header: str = "Benchmark-Api-Key"
    reporting_api_key: str = "abc1234567890"
    benchmark_id: str = "bark-test"

    # 큐
    queue_url: str = "http://localhost:3001"
    queue_name: str = "bark-test"

    # 폴링 설정
    poll_interval: float = 1.0  # 빈 큐일 때 대기 (초)
    readiness_max_attempts: int = 300
    readiness_interval: float = 1.0

    # 종료 시 후처리 대기 최대 시간 (초)
    drain_timeout: float = 30.0

    # 헬스 서버
    health_port: int = 8080
    health_enabled: bool = True

    @classmethod
    def from_env(cls) -> "WorkerConfig":
        """환경변수에서 설정 로드"""
        return cls(
            server_url=os.getenv("SERVER_URL", "http://127.0.0.1:8000"),
            benchmark_size=int(os.getenv("BENCHMARK_SIZE", "10")),
            reporting_url=os.getenv("REPORTING_URL", "http://localhost:3000"),
            reporting_auth_header=os.getenv(
                "REPORTING_AUTH_HEADER", "Benchmark-Api-Key"
            ),
            reporting_api_key=os.getenv("REPORTING_API_KEY", "abc1234567890"),
            benchmark_id=os.getenv("BENCHMARK_ID", "bark-test"),
            queue_url=os.getenv("QUEUE_URL", "http://localhost:3001"),
            queue_name=os.getenv("QUEUE_NAME", "bark-test"),
            poll_interval=float(os.getenv("POLL_INTERVAL", "1.0")),
            readiness_max_attempts=int(os.getenv("READINESS_MAX_ATTEMPTS", "300")),
            readiness_interval=float(os.getenv("READINESS_INTERVAL", "1.0")),
            drain_timeout=float(os.getenv("DRAIN_TIMEOUT", "30.0")),
            health_port=int(os.getenv("HEALTH_PORT", "8080")),
            health_enabled=_env_bool("HEALTH_ENABLED", True),
        )

    @property
    def is_bounded(self) -> bool:
        """유한한 양수 작업 수가 지정되었는지 (처리량 출력 여부)"""
        return self.benchmark_size > 0

    def validate(self, strict: bool = True) -> list[str]:
        """설정값 검증

        Args:
            strict: True면 오류 발생 시 예외, False면 로깅만

        Returns:
            list[str]: 검증 경고/오류 메시지 목록

        Raises:
            ConfigurationError: strict=True이고 오류가 있을 때
        """
        errors = []
        warnings = []

        # URL 형식 검증
        for field_name, env_name in (
            ("server_url", "SERVER_URL"),
            ("reporting_url", "REPORTING_URL"),
            ("queue_url", "QUEUE_URL"),
        ):
            value = getattr(self, field_name)
            if not value.startswith("http"):
                errors.append(f"잘못된 {env_name} 형식: {value}")

        # 필수 문자열
        if not self.queue_name:
            errors.append("필수 환경변수 누락: QUEUE_NAME")
        if not self.benchmark_id:
            errors.append("필수 환경변수 누락: BENCHMARK_ID")
        if not self.reporting_auth_header:
            errors.append("필수 환경변수 누락: REPORTING_AUTH_HEADER")

        # 숫자값 범위 검증
        if self.poll_interval <= 0:
            errors.append(f"폴링 간격이 너무 짧음: {self.poll_interval}초")
        if self.readiness_max_attempts < 1:
            errors.append(
                f"잘못된 READINESS_MAX_ATTEMPTS 값: {self.readiness_max_attempts}"
            )
        if self.readiness_interval <= 0:
            errors.append(f"잘못된 READINESS_INTERVAL 값: {self.readiness_interval}")
        if self.drain_timeout < 0:
            errors.append(f"잘못된 DRAIN_TIMEOUT 값: {self.drain_timeout}")

        if self.benchmark_size == 0:
            warnings.append("BENCHMARK_SIZE=0: 워밍업만 수행하고 종료")

        # 경고 로깅
        for warning in warnings:
            logger.warning(f"[Config] {warning}")

        # 오류 처리
        if errors:
            for error in errors:
                logger.error(f"[Config] {error}")
            if strict:
                raise ConfigurationError(
                    f"설정 검증 실패: {len(errors)}개 오류\n" + "\n".join(errors)
                )

        return errors + warnings

    @classmethod
    def from_env_validated(cls, strict: bool = True) -> "WorkerConfig":
        """환경변수에서 설정 로드 및 검증

        Raises:
            ConfigurationError: strict=True이고 오류가 있을 때
        """
        config = cls.from_env()
        config.validate(strict=strict)
        return config
