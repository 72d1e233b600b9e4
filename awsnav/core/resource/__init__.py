"""
core/resource - 범용 리소스 디스패치 엔진

선언적 OperationSpec 테이블을 해석해 서비스별 분기 없이
목록 조회, 상세 조회, 액션 실행을 수행합니다.

주요 구성 요소:
- Registry: 리소스 종류 레지스트리 (시작 시 등록 후 고정)
- extract / format_value: 경로 기반 필드 추출과 포맷팅
- Dispatcher: 단일 외부 호출 + 에러 분류 + 재시도
- Fetcher: 페이지네이션 조회
- ActionExecutor: 액션 실행

Example:
    from awsnav.core.resource import Dispatcher, Fetcher, FetchRequest, default_registry
    from awsnav.core.transport import Transport

    registry = default_registry()
    dispatcher = Dispatcher(Transport.from_env(), registry)
    fetcher = Fetcher(dispatcher, registry)

    result = fetcher.fetch_paginated(FetchRequest("ec2-instances", "default", "ap-northeast-2"))
    for row in result.rows:
        print(row.key, row.columns)

Note:
    이 모듈은 Lazy Import 패턴을 사용합니다.
"""

__all__ = [
    # Types
    "Action",
    "ActionOutcome",
    "Column",
    "FetchRequest",
    "FetchResult",
    "FetchState",
    "OperationSpec",
    "Pagination",
    "ParamBinding",
    "ResourceFilter",
    "ResourceKind",
    "ResourceRow",
    # Registry
    "Registry",
    "default_registry",
    # Extractor
    "extract",
    "format_value",
    "build_row",
    # Engine
    "Dispatcher",
    "Fetcher",
    "ActionExecutor",
]

_SUBMODULE_ATTRS = {
    "types": {
        "Action",
        "ActionOutcome",
        "Column",
        "FetchRequest",
        "FetchResult",
        "FetchState",
        "OperationSpec",
        "Pagination",
        "ParamBinding",
        "ResourceFilter",
        "ResourceKind",
        "ResourceRow",
    },
    "registry": {"Registry", "default_registry"},
    "extractor": {"extract", "format_value", "build_row"},
    "dispatch": {"Dispatcher"},
    "fetcher": {"Fetcher"},
    "actions": {"ActionExecutor"},
}


def __getattr__(name: str):
    """Lazy import - 실제 사용 시점에만 모듈 로드"""
    import importlib

    for module_name, attrs in _SUBMODULE_ATTRS.items():
        if name in attrs:
            module = importlib.import_module(f".{module_name}", __name__)
            return getattr(module, name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
