"""
awsnav/cli/context.py - 실행 컨텍스트

시작 시 한 번 생성되어 CLI 명령과 대화형 브라우저가 공유하는 협력 객체 묶음입니다.
전송 계층은 여기서 명시적으로 만들어져 Dispatcher에 주입됩니다.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from awsnav.core.config import ConfigStore, Settings
from awsnav.core.exceptions import ConfigError
from awsnav.core.parallel.refresh import RefreshCoordinator
from awsnav.core.resource.actions import ActionExecutor
from awsnav.core.resource.dispatch import Dispatcher
from awsnav.core.resource.fetcher import Fetcher
from awsnav.core.resource.registry import Registry, default_registry
from awsnav.core.transport import Transport

logger = logging.getLogger(__name__)

REFRESH_WORKERS = 4


@dataclass
class AppContext:
    """실행 컨텍스트

    Attributes:
        profile: 현재 프로파일
        region: 현재 리전
        endpoint_url: 엔드포인트 오버라이드
        readonly: 읽기 전용 모드
    """

    registry: Registry
    transport: Transport
    dispatcher: Dispatcher
    fetcher: Fetcher
    executor: ActionExecutor
    store: ConfigStore
    settings: Settings
    profile: str
    region: str
    endpoint_url: str | None = None
    readonly: bool = False
    _coordinator: RefreshCoordinator | None = field(default=None, repr=False)

    @property
    def coordinator(self) -> RefreshCoordinator:
        """새로고침 코디네이터 (처음 사용할 때 워커 생성)"""
        if self._coordinator is None:
            self._coordinator = RefreshCoordinator(self.fetcher, max_workers=REFRESH_WORKERS)
        return self._coordinator

    def remember(self, profile: str | None = None, region: str | None = None, resource: str | None = None) -> None:
        """마지막 사용 값 저장 (실패해도 계속 진행)"""
        try:
            self.settings = self.store.remember(profile=profile, region=region, resource=resource)
        except ConfigError as e:
            logger.warning(f"설정 저장 실패: {e}")

    def shutdown(self) -> None:
        if self._coordinator is not None:
            self._coordinator.shutdown(wait=False)
            self._coordinator = None


def build_context(
    profile: str | None = None,
    region: str | None = None,
    endpoint_url: str | None = None,
    readonly: bool = False,
    store: ConfigStore | None = None,
    transport: Transport | None = None,
) -> AppContext:
    """설정을 해석하고 협력 객체를 조립

    Args:
        profile: 명시적 프로파일 (우선순위 최상위)
        region: 명시적 리전 (우선순위 최상위)
        endpoint_url: 엔드포인트 오버라이드
        readonly: 읽기 전용 모드
        store: 설정 저장소 (None이면 기본 위치)
        transport: 전송 계층 (None이면 환경 변수 기준으로 생성)
    """
    store = store or ConfigStore()
    settings = store.load()
    registry = default_registry()
    transport = transport or Transport.from_env()
    dispatcher = Dispatcher(transport, registry)

    return AppContext(
        registry=registry,
        transport=transport,
        dispatcher=dispatcher,
        fetcher=Fetcher(dispatcher, registry),
        executor=ActionExecutor(dispatcher, registry, readonly=readonly),
        store=store,
        settings=settings,
        profile=store.effective_profile(settings, profile),
        region=store.effective_region(settings, region),
        endpoint_url=endpoint_url,
        readonly=readonly,
    )
