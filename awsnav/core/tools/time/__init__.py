# awsnav/core/tools/time - 날짜/시간 유틸리티
"""
날짜/시간 유틸리티

Note:
    이 모듈은 Lazy Import 패턴을 사용합니다.
"""

__all__ = [
    "CANONICAL_FORMAT",
    "parse_timestamp",
    "format_timestamp",
]

_UTILS_ATTRS = {
    "CANONICAL_FORMAT",
    "parse_timestamp",
    "format_timestamp",
}


def __getattr__(name: str):
    """Lazy import - 실제 사용 시점에만 모듈 로드"""
    if name in _UTILS_ATTRS:
        from . import utils

        return getattr(utils, name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
