"""
bark_benchmark 공통 라이브러리

Bark 서버/큐/리포팅 API 클라이언트, 업로드, 에러 분류, 공용 타입 제공.
"""

from .backend import BarkClient
from .errors import (
    BackendError,
    BarkBenchmarkError,
    ErrorCategory,
    ErrorClassifier,
    IntrospectionError,
    QueueError,
    ReportError,
    TransportError,
    UploadError,
)
from .queue import QueueClient
from .reporting import ReportingClient
from .storage import ArtifactUploader, strip_query
from .types import (
    BarkJob,
    BarkRequest,
    BenchmarkResult,
    DeleteQueueMessageResponse,
    FetchedJob,
    GetJobFromQueueResponse,
    QueueMessage,
    ReadinessOutcome,
    SystemInfo,
    WorkerState,
)

__all__ = [
    # Clients
    "ArtifactUploader",
    "BarkClient",
    "QueueClient",
    "ReportingClient",
    "strip_query",
    # Errors
    "BackendError",
    "BarkBenchmarkError",
    "ErrorCategory",
    "ErrorClassifier",
    "IntrospectionError",
    "QueueError",
    "ReportError",
    "TransportError",
    "UploadError",
    # Types
    "BarkJob",
    "BarkRequest",
    "BenchmarkResult",
    "DeleteQueueMessageResponse",
    "FetchedJob",
    "GetJobFromQueueResponse",
    "QueueMessage",
    "ReadinessOutcome",
    "SystemInfo",
    "WorkerState",
]
