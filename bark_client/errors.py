"""
에러 분류 시스템

워커 루프가 치명/비치명 여부를 판단하고 파이프라인 실패를 로깅할 때 사용.
"""

from enum import Enum


class ErrorCategory(str, Enum):
    """에러 카테고리"""

    TRANSPORT = "transport"  # 연결 실패, 다음 주기에 재시도
    BACKEND_REJECTION = "backend_rejection"  # 백엔드 non-2xx, 루프 종료
    PIPELINE_STEP = "pipeline_step"  # 업로드/리포트/ack 실패, 로깅만
    INTROSPECTION = "introspection"  # 시스템 정보 조회 실패, 시작 중단
    UNKNOWN = "unknown"


# 치명적 카테고리 (워커 루프를 종료시킴)
FATAL_CATEGORIES = frozenset(
    {ErrorCategory.BACKEND_REJECTION, ErrorCategory.INTROSPECTION}
)


class BarkBenchmarkError(Exception):
    """벤치마크 워커 기본 에러"""

    category = ErrorCategory.UNKNOWN

    def __init__(self, message: str, category: ErrorCategory | None = None):
        super().__init__(message)
        if category is not None:
            self.category = category


class TransportError(BarkBenchmarkError):
    """HTTP 연결/전송 실패"""

    category = ErrorCategory.TRANSPORT


class BackendError(BarkBenchmarkError):
    """Bark 서버가 non-2xx 응답을 반환"""

    category = ErrorCategory.BACKEND_REJECTION

    def __init__(self, status_code: int, reason: str, body: str):
        super().__init__(f"작업 제출 실패: {status_code} {reason}\n{body}")
        self.status_code = status_code
        self.reason = reason
        self.body = body


class QueueError(BarkBenchmarkError):
    """큐 응답 파싱 실패"""

    category = ErrorCategory.TRANSPORT


class UploadError(BarkBenchmarkError):
    """오디오 업로드 실패"""

    category = ErrorCategory.PIPELINE_STEP


class ReportError(BarkBenchmarkError):
    """결과 리포트 실패"""

    category = ErrorCategory.PIPELINE_STEP


class IntrospectionError(BarkBenchmarkError):
    """GPU/시스템 정보 조회 실패"""

    category = ErrorCategory.INTROSPECTION


class ErrorClassifier:
    """에러 분류기"""

    @classmethod
    def classify(cls, error: Exception) -> ErrorCategory:
        """에러를 분류하여 카테고리 반환

        Args:
            error: 분류할 예외 객체

        Returns:
            ErrorCategory: 에러 카테고리
        """
        if isinstance(error, BarkBenchmarkError):
            return error.category

        # 예외 타입 기반 분류
        if isinstance(error, (TimeoutError, ConnectionError)):
            return ErrorCategory.TRANSPORT

        return ErrorCategory.UNKNOWN

    @classmethod
    def is_fatal(cls, error: Exception) -> bool:
        """워커 루프를 종료시켜야 하는 에러인지 판단"""
        return cls.classify(error) in FATAL_CATEGORIES

    @classmethod
    def format_message(
        cls, error: Exception, include_traceback: bool = False
    ) -> str:
        """에러 메시지 포맷팅

        Args:
            error: 포맷팅할 예외 객체
            include_traceback: 상세 스택 트레이스 포함 여부

        Returns:
            str: 카테고리 라벨이 포함된 에러 메시지
        """
        category = cls.classify(error)
        label = {
            ErrorCategory.TRANSPORT: "[전송 실패]",
            ErrorCategory.BACKEND_REJECTION: "[백엔드 거부]",
            ErrorCategory.PIPELINE_STEP: "[후처리 실패]",
            ErrorCategory.INTROSPECTION: "[시스템 정보 없음]",
            ErrorCategory.UNKNOWN: "[분류되지 않음]",
        }

        message = f"{label[category]} {type(error).__name__}: {str(error)}"

        if include_traceback:
            import traceback

            message += f"\n\n상세 정보:\n{traceback.format_exc()}"

        return message
