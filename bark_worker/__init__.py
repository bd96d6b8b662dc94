"""
Bark 벤치마크 워커 모듈

큐 폴링 기반 비동기 음성 생성 워커.
"""

from .config import ConfigurationError, WorkerConfig
from .health import HealthServer
from .main import BenchmarkSummary, Worker, run
from .pipeline import PipelineTracker, PostProcessingPipeline
from .readiness import wait_until_ready
from .system_info import collect_system_info

__all__ = [
    "WorkerConfig",
    "ConfigurationError",
    "PostProcessingPipeline",
    "PipelineTracker",
    "wait_until_ready",
    "collect_system_info",
    "HealthServer",
    "BenchmarkSummary",
    "Worker",
    "run",
]
