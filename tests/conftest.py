"""
tests/conftest.py - pytest 공통 픽스처

AWS API 모킹과 테스트 헬퍼를 제공합니다.

Usage:
    def test_something(dispatcher, fake_transport):
        fake_transport.client_for("ec2").describe_instances.return_value = {...}
"""

from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

import pytest

from awsnav.core.parallel.decorators import RetryConfig
from awsnav.core.resource.actions import ActionExecutor
from awsnav.core.resource.dispatch import Dispatcher
from awsnav.core.resource.fetcher import Fetcher
from awsnav.core.resource.registry import Registry, default_registry
from awsnav.core.resource.types import (
    Action,
    Column,
    OperationSpec,
    Pagination,
    ParamBinding,
    ResourceKind,
)

# =============================================================================
# 환경 설정
# =============================================================================


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch, tmp_path):
    """테스트 환경 설정 (실제 AWS 설정/사용자 디렉토리와 격리)"""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    monkeypatch.setenv("AWS_CONFIG_FILE", str(tmp_path / "aws" / "config"))
    monkeypatch.setenv("AWS_SHARED_CREDENTIALS_FILE", str(tmp_path / "aws" / "credentials"))
    monkeypatch.setenv("AWSNAV_HOME", str(tmp_path / "awsnav"))
    for name in ("AWS_PROFILE", "AWS_REGION", "AWS_CA_BUNDLE", "SSL_CERT_FILE"):
        monkeypatch.delenv(name, raising=False)

    yield


# =============================================================================
# 전송 계층 / 엔진 픽스처
# =============================================================================


class FakeTransport:
    """서비스별 MagicMock client를 돌려주는 테스트용 전송 계층

    Attributes:
        calls: client() 호출 기록 (service, profile, region, endpoint_url)
    """

    def __init__(self):
        self.clients: Dict[str, MagicMock] = {}
        self.calls: List[tuple] = []

    def client_for(self, service: str) -> MagicMock:
        if service not in self.clients:
            self.clients[service] = MagicMock(name=f"{service}-client")
        return self.clients[service]

    def client(self, service: str, profile: str, region: str, endpoint_url: Optional[str] = None) -> Any:
        self.calls.append((service, profile, region, endpoint_url))
        return self.client_for(service)


@pytest.fixture
def fake_transport():
    """테스트용 전송 계층"""
    return FakeTransport()


@pytest.fixture
def sleeps():
    """백오프 대기 기록 (실제 대기 없음)"""
    return []


@pytest.fixture
def retry_config():
    """지터 없는 재시도 설정"""
    return RetryConfig(base_delay=0.5, max_delay=8.0, jitter=False)


WIDGET_KIND = ResourceKind(
    id="widgets",
    name="Widgets",
    service="widget",
    category="test",
    list_spec=OperationSpec(
        "widget",
        "list_widgets",
        params={"Scope": "all"},
        pagination=Pagination("NextToken", "NextToken", page_size_param="MaxResults", page_size=2),
    ),
    items_path="Widgets[*]",
    key_path="WidgetId",
    columns=(
        Column("Name", "Tags", ("tag:Name",)),
        Column("ID", "WidgetId"),
        Column("State", "State.Name"),
        Column("Created", "CreatedAt", ("timestamp",)),
    ),
    describe_spec=OperationSpec(
        "widget",
        "describe_widgets",
        key_param="WidgetIds",
        key_as_list=True,
        result_path="Widgets[0]",
    ),
    actions=(
        Action(
            id="poke",
            label="Poke",
            spec=OperationSpec("widget", "poke_widget"),
            bindings=(ParamBinding("WidgetId"), ParamBinding("OwnerId", path="Owner.Id")),
            message_path="Status",
        ),
        Action(
            id="destroy",
            label="Destroy",
            spec=OperationSpec("widget", "destroy_widget"),
            bindings=(ParamBinding("WidgetIds", as_list=True),),
            destructive=True,
        ),
        Action(
            id="peek",
            label="Peek",
            spec=OperationSpec("widget", "peek_widget"),
            bindings=(ParamBinding("WidgetId"),),
            mutating=False,
        ),
    ),
)

# describe 작업이 없는 종류 (목록 캐시로 상세 보기)
GADGET_KIND = ResourceKind(
    id="gadgets",
    name="Gadgets",
    service="gadget",
    category="test",
    list_spec=OperationSpec("gadget", "list_gadgets"),
    items_path="Gadgets[*]",
    key_path="Name",
    columns=(Column("Name", "Name"),),
)


@pytest.fixture
def widget_kind():
    return WIDGET_KIND


@pytest.fixture
def registry():
    """테스트용 리소스 종류가 등록된 레지스트리"""
    reg = Registry()
    reg.register(WIDGET_KIND)
    reg.register(GADGET_KIND)
    reg.freeze()
    return reg


@pytest.fixture
def builtin_registry():
    """내장 카탈로그 레지스트리"""
    return default_registry()


@pytest.fixture
def dispatcher(fake_transport, registry, retry_config, sleeps):
    """FakeTransport 기반 디스패처"""
    return Dispatcher(fake_transport, registry, retry_config=retry_config, sleep=sleeps.append)


@pytest.fixture
def fetcher(dispatcher, registry):
    return Fetcher(dispatcher, registry)


@pytest.fixture
def executor(dispatcher, registry):
    return ActionExecutor(dispatcher, registry)


# =============================================================================
# 유틸리티 함수
# =============================================================================


def make_widget(widget_id: str, name: str = "", state: str = "running", owner: Optional[str] = "o-1") -> Dict[str, Any]:
    """list_widgets 응답 항목 생성 헬퍼"""
    item: Dict[str, Any] = {
        "WidgetId": widget_id,
        "State": {"Name": state},
        "CreatedAt": 1704067200,
        "Tags": [{"Key": "Name", "Value": name or widget_id}],
    }
    if owner is not None:
        item["Owner"] = {"Id": owner}
    return item


def create_mock_response(
    data: Dict[str, Any],
    next_token: Optional[str] = None,
) -> Dict[str, Any]:
    """페이지네이션 응답 생성 헬퍼"""
    response = data.copy()
    response["ResponseMetadata"] = {"RequestId": "test-request", "HTTPStatusCode": 200}
    if next_token:
        response["NextToken"] = next_token
    return response


def create_mock_client_error(
    error_code: str,
    error_message: str = "Test error",
    status_code: Optional[int] = None,
    operation_name: str = "TestOperation",
) -> Exception:
    """ClientError 생성 헬퍼"""
    from botocore.exceptions import ClientError

    response: Dict[str, Any] = {
        "Error": {
            "Code": error_code,
            "Message": error_message,
        }
    }
    if status_code is not None:
        response["ResponseMetadata"] = {"HTTPStatusCode": status_code}
    return ClientError(response, operation_name)
