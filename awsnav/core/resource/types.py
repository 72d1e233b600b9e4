"""
core/resource/types.py - 리소스 디스패치 데이터 타입

리소스 종류 정의(ResourceKind)부터 조회 결과(FetchResult)까지
엔진 전체에서 공유하는 불변 데이터 클래스들입니다.

주요 구성 요소:
- OperationSpec / Pagination: 외부 API 작업의 선언적 명세
- Column / Action / ParamBinding: 표시 컬럼과 액션 정의
- ResourceKind: 리소스 종류 하나를 나열/상세/표시/실행하는 방법
- ResourceRow / ResourceFilter: 조회된 행과 필터
- FetchRequest / FetchResult / FetchState: 조회 요청과 결과
- ActionOutcome: 액션 실행 결과
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from awsnav.core.exceptions import NavError

# 행의 기본 키를 바인딩할 때 쓰는 특수 경로
KEY_BINDING = "@key"


@dataclass(frozen=True)
class Pagination:
    """페이지네이션 명세

    Attributes:
        request_param: 다음 페이지 커서를 넣을 요청 파라미터 (예: "NextToken")
        response_path: 응답에서 커서를 읽을 경로 (예: "NextToken", "Marker")
        page_size_param: 페이지 크기 파라미터 (예: "MaxResults")
        page_size: 페이지 크기 값
    """

    request_param: str
    response_path: str
    page_size_param: str | None = None
    page_size: int | None = None


@dataclass(frozen=True)
class OperationSpec:
    """외부 작업 하나의 선언적 명세

    Attributes:
        service: boto3 서비스 이름 (예: "ec2")
        operation: boto3 메서드 이름 (예: "describe_instances")
        params: 정적 파라미터
        pagination: 페이지네이션 명세 (없으면 단일 페이지)
        key_param: 상세 조회 시 기본 키를 넣을 파라미터
        key_as_list: 기본 키를 리스트로 감쌀지 (예: InstanceIds=[id])
        result_path: 상세 응답에서 결과를 좁힐 경로
    """

    service: str
    operation: str
    params: dict[str, Any] = field(default_factory=dict)
    pagination: Pagination | None = None
    key_param: str | None = None
    key_as_list: bool = False
    result_path: str | None = None

    @property
    def label(self) -> str:
        return f"{self.service}.{self.operation}"


@dataclass(frozen=True)
class Column:
    """표시 컬럼

    Attributes:
        label: 컬럼 이름
        path: 필드 추출 경로 (예: "State.Name", "Tags")
        formatters: 추출 후 순서대로 적용할 포매터 (예: ("tag:Name", "truncate:40"))
    """

    label: str
    path: str
    formatters: tuple[str, ...] = ()


@dataclass(frozen=True)
class ParamBinding:
    """액션 파라미터 바인딩

    Attributes:
        param: 요청 파라미터 이름
        path: 행의 원본 값에서 읽을 경로 (KEY_BINDING이면 기본 키)
        as_list: 값을 리스트로 감쌀지
    """

    param: str
    path: str = KEY_BINDING
    as_list: bool = False


@dataclass(frozen=True)
class Action:
    """리소스 액션

    Attributes:
        id: 액션 ID (예: "stop")
        label: 표시 이름
        spec: 실행할 작업 명세
        bindings: 행에서 채울 파라미터
        destructive: 파괴적 작업 여부 (삭제, 종료 등)
        confirm: 실행 전 확인 필요 여부
        mutating: 상태 변경 작업 여부 (읽기 전용 모드에서 차단)
        message_path: 성공 메시지로 쓸 응답 필드 경로
    """

    id: str
    label: str
    spec: OperationSpec
    bindings: tuple[ParamBinding, ...] = ()
    destructive: bool = False
    confirm: bool = False
    mutating: bool = True
    message_path: str | None = None

    @property
    def requires_confirmation(self) -> bool:
        return self.destructive or self.confirm


@dataclass(frozen=True)
class ResourceKind:
    """리소스 종류 정의

    Attributes:
        id: 리소스 종류 ID (예: "ec2-instances")
        name: 표시 이름
        service: 소유 서비스
        list_spec: 목록 조회 작업
        items_path: 목록 응답에서 항목 위치 (예: "Reservations[*].Instances[*]")
        key_path: 항목의 기본 키 경로 (예: "InstanceId")
        columns: 표시 컬럼 (순서 유지)
        describe_spec: 상세 조회 작업 (없으면 목록 캐시 사용)
        actions: 액션 목록
        category: 메뉴 그룹
    """

    id: str
    name: str
    service: str
    list_spec: OperationSpec
    items_path: str
    key_path: str
    columns: tuple[Column, ...]
    describe_spec: OperationSpec | None = None
    actions: tuple[Action, ...] = ()
    category: str = "general"

    @property
    def column_labels(self) -> tuple[str, ...]:
        return tuple(c.label for c in self.columns)

    def get_action(self, action_id: str) -> Action | None:
        for action in self.actions:
            if action.id == action_id:
                return action
        return None


@dataclass(frozen=True)
class ResourceRow:
    """조회된 리소스 한 행

    Attributes:
        kind: 리소스 종류 ID
        key: 기본 키 값
        columns: 컬럼 이름 -> 표시 문자열 (순서 유지)
        raw: 원본 응답 값 (상세 보기, 액션 바인딩용)
    """

    kind: str
    key: str
    columns: dict[str, str]
    raw: Any = None

    def get(self, label: str, default: str = "") -> str:
        return self.columns.get(label, default)


@dataclass(frozen=True)
class ResourceFilter:
    """대소문자 무시 부분 문자열 필터

    Attributes:
        text: 검색어 (빈 문자열이면 전체 통과)
        fields: 검색 대상 필드. 컬럼 이름 또는 원본 값의 추출 경로.
            비어 있으면 모든 컬럼과 기본 키를 검색
    """

    text: str = ""
    fields: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.text.strip()

    def matches(self, row: ResourceRow) -> bool:
        if self.is_empty:
            return True
        needle = self.text.strip().lower()

        if not self.fields:
            haystack = [row.key, *row.columns.values()]
        else:
            from .extractor import extract, to_display

            haystack = []
            for name in self.fields:
                if name in row.columns:
                    haystack.append(row.columns[name])
                else:
                    haystack.append(to_display(extract(row.raw, name), empty=""))

        return any(needle in value.lower() for value in haystack)


class FetchState(Enum):
    """조회 완료 상태"""

    DONE = "done"
    TRUNCATED = "truncated"  # 페이지 상한 도달 - 경고, 실패 아님
    CANCELLED = "cancelled"  # 더 새로운 요청에 의해 대체됨 - 적용하지 않음


@dataclass(frozen=True)
class FetchRequest:
    """조회 요청

    Attributes:
        kind_id: 리소스 종류 ID
        profile: AWS 프로파일
        region: AWS 리전
        endpoint_url: 엔드포인트 오버라이드 (LocalStack 등)
        filter: 행 필터
        epoch: 요청 세대 토큰 (코디네이터가 부여)
        max_pages: 최대 페이지 수
    """

    kind_id: str
    profile: str
    region: str
    endpoint_url: str | None = None
    filter: ResourceFilter | None = None
    epoch: int = 0
    max_pages: int = 50

    @property
    def tuple_key(self) -> tuple[str, str, str]:
        return (self.kind_id, self.profile, self.region)


@dataclass(frozen=True)
class FetchResult:
    """조회 결과

    Attributes:
        epoch: 요청 세대 토큰
        rows: 조회된 행 (순서 유지)
        state: 완료 상태
        error: 분류된 에러 (부분 실패 시 rows와 함께 반환)
        next_cursor: 다음 페이지 커서 (단일 페이지 조회)
        pages: 수행한 호출 수
    """

    epoch: int
    rows: tuple[ResourceRow, ...] = ()
    state: FetchState = FetchState.DONE
    error: NavError | None = None
    next_cursor: Any = None
    pages: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def truncated(self) -> bool:
        return self.state == FetchState.TRUNCATED


@dataclass(frozen=True)
class ActionOutcome:
    """액션 실행 결과

    Attributes:
        kind_id: 리소스 종류 ID
        action_id: 액션 ID
        key: 대상 리소스 기본 키
        success: 성공 여부
        message: 결과 메시지
        error: 분류된 에러
        raw: 원본 응답
    """

    kind_id: str
    action_id: str
    key: str
    success: bool
    message: str | None = None
    error: NavError | None = None
    raw: Any = None
