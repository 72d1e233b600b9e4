"""
core/parallel/decorators.py - AWS API 에러 분류 및 재시도 유틸리티

botocore 예외를 디스패치 예외 분류로 변환하고,
분류별 재시도 횟수와 지수 백오프 대기 시간을 계산합니다.

주요 구성 요소:
- RetryConfig: 재시도 설정 (지수 백오프 + 지터)
- classify_error: botocore 예외를 DispatchError 하위 클래스로 변환
- get_error_code: 예외에서 에러 코드 추출
- max_attempts_for: 분류별 최대 시도 횟수
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass

from botocore.exceptions import ConnectionError as BotoConnectionError
from botocore.exceptions import (
    ClientError,
    HTTPClientError,
    NoCredentialsError,
    OperationNotPageableError,
    PartialCredentialsError,
    ProfileNotFound,
    SSOError,
    TokenRetrievalError,
    UnknownServiceError,
)
from botocore.parsers import ResponseParserError

from awsnav.core.exceptions import (
    AuthError,
    DispatchError,
    MalformedResponseError,
    NotFoundError,
    ServiceError,
    ThrottlingError,
    TransportError,
)

logger = logging.getLogger(__name__)


@dataclass
class RetryConfig:
    """재시도 설정

    Attributes:
        throttle_attempts: 스로틀링 시 최대 시도 횟수 (최초 호출 포함)
        transport_attempts: 네트워크 오류 시 최대 시도 횟수 (최초 호출 포함)
        base_delay: 기본 대기 시간 (초)
        max_delay: 최대 대기 시간 (초)
        exponential_base: 지수 백오프 밑수
        jitter: 지터 사용 여부 (대기 시간에 랜덤성 추가)
    """

    throttle_attempts: int = 3
    transport_attempts: int = 2
    base_delay: float = 0.5
    max_delay: float = 8.0
    exponential_base: float = 2.0
    jitter: bool = True

    def get_delay(self, attempt: int) -> float:
        """재시도 대기 시간 계산

        Exponential backoff with optional jitter.

        Args:
            attempt: 현재 시도 횟수 (0부터 시작)

        Returns:
            대기 시간 (초)
        """
        delay = self.base_delay * (self.exponential_base**attempt)
        delay = min(delay, self.max_delay)

        if self.jitter:
            # Full jitter: [0, delay]
            delay = random.uniform(0, delay)

        return delay


# 기본 재시도 설정
DEFAULT_RETRY_CONFIG = RetryConfig()

# 자격 증명 무효/만료
AUTH_ERROR_CODES: set[str] = {
    "ExpiredToken",
    "ExpiredTokenException",
    "InvalidClientTokenId",
    "UnrecognizedClientException",
    "AuthFailure",
    "SignatureDoesNotMatch",
    "InvalidAccessKeyId",
    "IncompleteSignature",
    "MissingAuthenticationToken",
    "RequestExpired",
}

THROTTLING_ERROR_CODES: set[str] = {
    "Throttling",
    "ThrottlingException",
    "ThrottledException",
    "RequestLimitExceeded",
    "TooManyRequestsException",
    "RateExceeded",
    "SlowDown",
    "ProvisionedThroughputExceededException",
    "RequestThrottled",
    "RequestThrottledException",
    "PriorRequestNotComplete",
}

NOT_FOUND_ERROR_CODES: set[str] = {
    "ResourceNotFoundException",
    "NotFoundException",
    "NotFound",
    "NoSuchEntity",
    "NoSuchBucket",
    "NoSuchKey",
    "InvalidInstanceID.NotFound",
    "DBInstanceNotFound",
    "ClusterNotFoundException",
    "AWS.SimpleQueueService.NonExistentQueue",
    "QueueDoesNotExist",
}

# 서버 측 일시 오류 - 네트워크 오류와 동일하게 1회 재시도
TRANSIENT_ERROR_CODES: set[str] = {
    "RequestTimeout",
    "RequestTimeoutException",
    "ServiceUnavailable",
    "ServiceUnavailableException",
    "InternalError",
    "InternalFailure",
    "InternalServiceError",
}


def get_error_code(error: Exception) -> str:
    """예외 객체에서 에러 코드 문자열 추출

    ClientError의 경우 response에서 Code를 추출하고,
    그 외에는 예외 클래스명을 반환합니다.

    Args:
        error: 예외 객체

    Returns:
        에러 코드 문자열
    """
    response = getattr(error, "response", None)
    if isinstance(response, dict):
        code: str = response.get("Error", {}).get("Code", "Unknown")
        return code
    return error.__class__.__name__


def _get_error_message(error: Exception) -> str:
    response = getattr(error, "response", None)
    if isinstance(response, dict):
        return response.get("Error", {}).get("Message", "") or str(error)
    return str(error)


def _classify_client_error(code: str, status: int | None) -> type[DispatchError]:
    if code in AUTH_ERROR_CODES:
        return AuthError
    if code in THROTTLING_ERROR_CODES:
        return ThrottlingError
    if code in NOT_FOUND_ERROR_CODES or code.endswith(".NotFound") or code.endswith("NotFoundException"):
        return NotFoundError
    if code in TRANSIENT_ERROR_CODES:
        return TransportError
    if status == 429:
        return ThrottlingError
    if status == 404:
        return NotFoundError
    return ServiceError


def classify_error(error: Exception, service: str, operation: str) -> DispatchError:
    """botocore 예외를 디스패치 예외 분류로 변환

    이미 DispatchError이면 그대로 반환합니다.

    Args:
        error: 원인 예외
        service: AWS 서비스 이름
        operation: API 작업 이름

    Returns:
        분류된 DispatchError 인스턴스
    """
    if isinstance(error, DispatchError):
        return error

    code = get_error_code(error)
    message = _get_error_message(error)
    cls: type[DispatchError]

    if isinstance(error, ClientError):
        status = error.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
        cls = _classify_client_error(code, status)
    elif isinstance(
        error,
        (NoCredentialsError, PartialCredentialsError, ProfileNotFound, TokenRetrievalError, SSOError),
    ):
        cls = AuthError
    elif isinstance(error, (HTTPClientError, BotoConnectionError, ConnectionError, TimeoutError)):
        # ConnectTimeoutError, ReadTimeoutError, EndpointConnectionError, SSLError 포함
        cls = TransportError
    elif isinstance(error, (ResponseParserError, ValueError)):
        cls = MalformedResponseError
    elif isinstance(error, (UnknownServiceError, OperationNotPageableError)):
        cls = NotFoundError
    else:
        cls = ServiceError

    return cls(service, operation, error_code=code, error_message=message, cause=error)


def max_attempts_for(error: DispatchError, config: RetryConfig) -> int:
    """분류별 최대 시도 횟수 (최초 호출 포함)

    Args:
        error: 분류된 예외
        config: 재시도 설정

    Returns:
        최대 시도 횟수. 재시도 대상이 아니면 1
    """
    if isinstance(error, ThrottlingError):
        return max(1, config.throttle_attempts)
    if isinstance(error, TransportError):
        return max(1, config.transport_attempts)
    return 1
