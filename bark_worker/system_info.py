"""
시스템 정보 수집

GPU 종류(nvidia-smi), vCPU 수, 메모리(GB).
GPU가 없으면 잘못 구성된 워커로 보고 시작을 중단함.
"""

import asyncio
import logging

import psutil

from bark_client.errors import IntrospectionError
from bark_client.types import SystemInfo

logger = logging.getLogger(__name__)

NVIDIA_SMI_COMMAND = (
    "nvidia-smi",
    "--query-gpu=name",
    "--format=csv,noheader,nounits",
)


async def get_gpu_type() -> str:
    """nvidia-smi가 보고하는 GPU 이름

    Raises:
        IntrospectionError: nvidia-smi 미설치 또는 실행 실패
    """
    try:
        process = await asyncio.create_subprocess_exec(
            *NVIDIA_SMI_COMMAND,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, stderr = await process.communicate()
    except OSError as e:
        raise IntrospectionError(
            "GPU 정보 조회 실패 (nvidia-smi 미설치 가능성)"
        ) from e

    if process.returncode != 0:
        raise IntrospectionError(
            f"GPU 정보 조회 실패: {stderr.decode(errors='replace').strip()}"
        )

    return stdout.decode().strip()


def get_system_info() -> tuple[int, float]:
    """vCPU 수와 전체 메모리(GB, 소수점 2자리)"""
    vcpu = psutil.cpu_count(logical=True) or 0
    mem_gb = round(psutil.virtual_memory().total / (1024**3), 2)
    return vcpu, mem_gb


async def collect_system_info() -> SystemInfo:
    """벤치마크 시작 전 시스템 정보 스냅샷"""
    gpu = await get_gpu_type()
    vcpu, mem_gb = get_system_info()
    return SystemInfo(vCPU=vcpu, MemGB=mem_gb, gpu=gpu)
