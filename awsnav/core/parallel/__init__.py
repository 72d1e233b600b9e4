"""
core/parallel - 재시도 정책과 백그라운드 새로고침

주요 구성 요소:
- RetryConfig / classify_error: botocore 예외 분류와 분류별 재시도 정책
- RefreshCoordinator: epoch 기반 백그라운드 조회 관리

Example:
    from awsnav.core.parallel import RefreshCoordinator

    coordinator = RefreshCoordinator(fetcher, max_workers=4)
    coordinator.request("s3-buckets", "default", "us-east-1")
"""

from .decorators import RetryConfig, classify_error, max_attempts_for
from .refresh import RefreshCoordinator, TupleState, TupleStatus

__all__: list[str] = [
    "RetryConfig",
    "classify_error",
    "max_attempts_for",
    "RefreshCoordinator",
    "TupleState",
    "TupleStatus",
]
