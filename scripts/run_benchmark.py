#!/usr/bin/env python
"""
Bark 벤치마크 워커 실행 스크립트

사용법:
    # 기본 실행 (.env)
    python scripts/run_benchmark.py

    # 환경 지정
    python scripts/run_benchmark.py --env prod

    # 무제한 실행, 디버그 로그
    python scripts/run_benchmark.py --benchmark-size -1 --log-level DEBUG
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from bark_worker.config import ConfigurationError, WorkerConfig
from bark_worker.main import Worker, setup_logging

PROJECT_ROOT = Path(__file__).parent.parent

logger = logging.getLogger(__name__)


def load_env_file(env: str) -> Path | None:
    """환경별 .env 파일 로드 (처음 발견된 파일 하나만)"""
    env_files = [
        PROJECT_ROOT / f".env.{env}",
        PROJECT_ROOT / ".env.local",
        PROJECT_ROOT / ".env",
    ]

    for env_file in env_files:
        if env_file.exists():
            load_dotenv(env_file)
            return env_file
    return None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Bark 벤치마크 워커",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
예시:
    # 기본 실행
    python scripts/run_benchmark.py

    # 프로덕션 환경, 헬스 서버 비활성화
    python scripts/run_benchmark.py --env prod --no-health

    # 20개 처리 후 종료
    python scripts/run_benchmark.py --benchmark-size 20
        """,
    )

    parser.add_argument(
        "--env",
        choices=["dev", "staging", "prod"],
        default="dev",
        help="실행 환경 (기본: dev)",
    )
    parser.add_argument(
        "--benchmark-size",
        type=int,
        default=None,
        help="처리할 작업 수 (음수=무제한, 기본: BENCHMARK_SIZE)",
    )
    parser.add_argument(
        "--no-health",
        action="store_true",
        help="헬스 서버 비활성화",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="로그 레벨",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """메인 함수"""
    args = build_parser().parse_args(argv)

    env_file = load_env_file(args.env)

    log_level = args.log_level or ("DEBUG" if args.env == "dev" else "INFO")
    setup_logging(log_level)
    if env_file:
        logger.info(f"[Config] 환경 파일 로드: {env_file}")

    try:
        config = WorkerConfig.from_env()
        if args.benchmark_size is not None:
            config.benchmark_size = args.benchmark_size
        if args.no_health:
            config.health_enabled = False
        config.validate(strict=True)
    except (ConfigurationError, ValueError) as e:
        logger.error(f"설정 로드 실패: {e}")
        sys.exit(1)

    size_label = "무제한" if config.benchmark_size < 0 else f"{config.benchmark_size}개"
    logger.info(f"[Worker] 환경: {args.env}, 작업 수: {size_label}")

    try:
        asyncio.run(Worker(config).start())
    except KeyboardInterrupt:
        logger.info("[Worker] 워커 종료")
    except Exception as e:
        logger.error(f"[Error] 워커 실행 실패: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
