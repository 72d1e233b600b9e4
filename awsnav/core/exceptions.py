"""
core/exceptions.py - 통합 예외 계층 구조

리소스 브라우저 전체에서 사용되는 예외 클래스들을 정의합니다.
디스패치 경계에서 botocore 예외는 모두 아래 분류 중 하나로 변환됩니다.

예외 계층 구조:
    NavError (베이스)
    ├── DispatchError (외부 호출 실패)
    │   ├── AuthError               - 자격 증명 무효/만료, 재시도 안 함
    │   ├── ThrottlingError         - 요청 제한, 지수 백오프 재시도
    │   ├── NotFoundError           - 리소스/작업 없음, 재시도 안 함
    │   ├── TransportError          - 네트워크/TLS/타임아웃, 1회 재시도
    │   ├── MalformedResponseError  - 응답 형식 오류
    │   └── ServiceError            - 그 외 서비스 오류
    ├── MissingBindingError (액션 파라미터 바인딩 누락)
    ├── ReadOnlyError (읽기 전용 모드에서 변경 액션 요청)
    ├── RegistryError (레지스트리)
    │   ├── DuplicateKindError
    │   ├── KindNotFoundError
    │   ├── ActionNotFoundError
    │   └── RegistryFrozenError
    └── ConfigError (설정 관련)

Usage:
    from awsnav.core.exceptions import DispatchError, ThrottlingError

    try:
        raw = dispatcher.invoke("default", "us-east-1", None, spec, {})
    except DispatchError as e:
        print(format_error_for_user(e))
"""

from typing import Any, Dict, Optional

# =============================================================================
# 베이스 예외
# =============================================================================


class NavError(Exception):
    """리소스 브라우저 기본 예외 클래스

    Attributes:
        message: 에러 메시지
        cause: 원인 예외 (체이닝용)
        details: 추가 상세 정보
    """

    def __init__(
        self,
        message: str,
        cause: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.details = details or {}

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """예외 정보를 딕셔너리로 반환"""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "cause": str(self.cause) if self.cause else None,
            "details": self.details,
        }


# =============================================================================
# 디스패치 (외부 호출) 예외
# =============================================================================


class DispatchError(NavError):
    """AWS API 호출 실패

    Attributes:
        service: AWS 서비스 이름
        operation: API 작업 이름 (boto3 snake_case)
        error_code: AWS 에러 코드 (없으면 예외 클래스명)
        retryable: 디스패치 내부에서 재시도 대상인지
    """

    retryable = False

    def __init__(
        self,
        service: str,
        operation: str,
        error_code: Optional[str] = None,
        error_message: Optional[str] = None,
        cause: Optional[Exception] = None,
    ):
        message = f"{service}.{operation}"
        if error_code:
            message = f"{message} 실패 ({error_code})"
        if error_message:
            message = f"{message}: {error_message}"

        super().__init__(message, cause)
        self.service = service
        self.operation = operation
        self.error_code = error_code
        self.error_message = error_message
        self.details.update(
            {
                "service": service,
                "operation": operation,
                "error_code": error_code,
            }
        )

    def __str__(self) -> str:
        # cause는 error_message에 이미 반영됨
        return self.message


class AuthError(DispatchError):
    """자격 증명이 없거나 만료됨 - 해당 프로파일에 치명적"""


class ThrottlingError(DispatchError):
    """요청 제한 초과"""

    retryable = True


class NotFoundError(DispatchError):
    """리소스 또는 작업이 존재하지 않음"""


class TransportError(DispatchError):
    """네트워크/TLS/타임아웃 실패"""

    retryable = True


class MalformedResponseError(DispatchError):
    """응답을 기대한 형태로 해석할 수 없음"""


class ServiceError(DispatchError):
    """분류되지 않은 서비스 오류 (ValidationException, AccessDenied 등)"""


# =============================================================================
# 액션 관련 예외
# =============================================================================


class MissingBindingError(NavError):
    """액션 파라미터를 행(row)에서 찾을 수 없음"""

    def __init__(self, action_id: str, params: list[str]):
        message = f"액션 파라미터 누락 [{action_id}]: {', '.join(params)}"
        super().__init__(message)
        self.action_id = action_id
        self.params = params
        self.details.update({"action_id": action_id, "params": params})


class ReadOnlyError(NavError):
    """읽기 전용 모드에서 변경 액션 요청"""

    def __init__(self, action_id: str):
        super().__init__(f"읽기 전용 모드에서는 실행할 수 없습니다 [{action_id}]")
        self.action_id = action_id
        self.details["action_id"] = action_id


# =============================================================================
# 레지스트리 관련 예외
# =============================================================================


class RegistryError(NavError):
    """레지스트리 관련 예외"""


class DuplicateKindError(RegistryError):
    """이미 등록된 리소스 종류"""

    def __init__(self, kind_id: str):
        super().__init__(f"이미 등록된 리소스 종류입니다: {kind_id}")
        self.kind_id = kind_id
        self.details["kind_id"] = kind_id


class KindNotFoundError(RegistryError):
    """등록되지 않은 리소스 종류"""

    def __init__(self, kind_id: str):
        super().__init__(f"알 수 없는 리소스 종류입니다: {kind_id}")
        self.kind_id = kind_id
        self.details["kind_id"] = kind_id


class ActionNotFoundError(RegistryError):
    """리소스 종류에 없는 액션"""

    def __init__(self, kind_id: str, action_id: str):
        super().__init__(f"알 수 없는 액션입니다 [{kind_id}]: {action_id}")
        self.kind_id = kind_id
        self.action_id = action_id
        self.details.update({"kind_id": kind_id, "action_id": action_id})


class RegistryFrozenError(RegistryError):
    """초기화 이후 등록 시도"""

    def __init__(self, kind_id: str):
        super().__init__(f"레지스트리가 이미 고정되었습니다: {kind_id}")
        self.kind_id = kind_id


# =============================================================================
# 설정 관련 예외
# =============================================================================


class ConfigError(NavError):
    """설정 관련 예외"""

    def __init__(
        self,
        key: str,
        message: str,
        cause: Optional[Exception] = None,
    ):
        full_message = f"설정 오류 [{key}]: {message}"
        super().__init__(full_message, cause)
        self.config_key = key
        self.details["config_key"] = key


# =============================================================================
# 예외 유틸리티 함수
# =============================================================================


def format_error_for_user(error: Exception) -> str:
    """사용자에게 표시할 에러 메시지 포맷팅

    Args:
        error: 예외

    Returns:
        사용자 친화적인 에러 메시지
    """
    if isinstance(error, AuthError):
        return f"인증 실패 - 프로파일 자격 증명을 확인하세요 ({error.error_code})"
    if isinstance(error, ThrottlingError):
        return "요청이 너무 많습니다. 잠시 후 다시 시도하세요."
    if isinstance(error, TransportError):
        return f"네트워크 오류: {error.error_message or error.error_code}"
    if isinstance(error, NavError):
        return str(error)
    return f"{error.__class__.__name__}: {error}"
