"""
공용 타입 정의

큐 메시지, Bark 요청, 벤치마크 결과 관련 Enum, Dataclass, Pydantic 모델.
"""

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class WorkerState(str, Enum):
    """워커 루프 상태"""

    IDLE = "idle"
    WAITING_FOR_READINESS = "waiting_for_readiness"
    WARMING_UP = "warming_up"
    RUNNING = "running"
    DRAINING = "draining"
    STOPPED = "stopped"


class ReadinessOutcome(str, Enum):
    """서버 준비 대기 결과"""

    READY = "ready"
    TIMED_OUT = "timed_out"
    STOPPED = "stopped"


class BarkJob(BaseModel):
    """큐 메시지 본문 (JSON 파싱 결과)

    가져온 이후에는 변경하지 않음.
    """

    model_config = ConfigDict(frozen=True)

    id: int | str
    voice: str | None = None
    script_section: str
    section_index: int
    upload_url: str | list[str]

    @property
    def upload_urls(self) -> list[str]:
        """업로드 대상을 항상 리스트로 반환"""
        if isinstance(self.upload_url, str):
            return [self.upload_url]
        return list(self.upload_url)


class QueueMessage(BaseModel):
    """큐 메시지

    messageId는 수신 핸들(receipt handle)이며 작업 ID가 아님.
    삭제 시 URI 인코딩해서 사용해야 함.
    """

    messageId: str
    body: str

    def parse_job(self) -> BarkJob:
        """body를 BarkJob으로 파싱"""
        return BarkJob.model_validate_json(self.body)


class GetJobFromQueueResponse(BaseModel):
    """GET /{queue_name} 응답"""

    status: str = ""
    messages: list[QueueMessage] = Field(default_factory=list)


class DeleteQueueMessageResponse(BaseModel):
    """DELETE /{queue_name}/{message_id} 응답"""

    message: str = ""


class BarkRequest(BaseModel):
    """Bark 서버 /generate 요청 본문"""

    text: str
    voice_preset: str | None = None

    @classmethod
    def from_job(cls, job: BarkJob) -> "BarkRequest":
        return cls(text=job.script_section, voice_preset=job.voice)

    def to_payload(self) -> dict[str, str]:
        """voice_preset이 없으면 키 자체를 생략"""
        return self.model_dump(exclude_none=True)


class SystemInfo(BaseModel):
    """시작 시 한 번 수집하는 시스템 정보 (이후 읽기 전용)"""

    model_config = ConfigDict(frozen=True)

    vCPU: int
    MemGB: float
    gpu: str


class BenchmarkResult(BaseModel):
    """리포팅 서버로 전송하는 결과 레코드"""

    recipe_id: int | str
    script_section: str
    section_index: int
    inference_time: float  # ms
    output_url: str
    voice: str | None = None
    system_info: SystemInfo


@dataclass(frozen=True)
class FetchedJob:
    """큐에서 가져온 작업 (컨트롤러 → 파이프라인으로 전달)"""

    message_id: str
    job: BarkJob
    request: BarkRequest
