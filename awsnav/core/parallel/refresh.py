"""
core/parallel/refresh.py - 새로고침 코디네이터

(리소스 종류, 프로파일, 리전) 단위로 백그라운드 조회를 관리합니다.

상태 전이:
    IDLE -> FETCHING -> READY | FAILED
    어떤 상태에서든 새 요청이 오면 epoch를 올리고 FETCHING으로 전이

규칙:
    - epoch는 튜플마다 단조 증가
    - 결과는 전달 시점의 현재 epoch와 같을 때만 적용 (단일 잠금 안에서 비교 후 교체)
    - 대체된 조회는 현재 페이지를 마친 뒤 다음 페이지 전에 스스로 종료
    - 실패한 조회는 이전에 적용된 행을 유지 (실패 전까지 모은 새 행이 있으면 교체)

Example:
    coordinator = RefreshCoordinator(fetcher, max_workers=4)
    coordinator.add_listener(lambda key, state: print(key, state.status))

    future = coordinator.request("ec2-instances", "default", "ap-northeast-2")
    future.result()
    print(coordinator.state(("ec2-instances", "default", "ap-northeast-2")).rows)
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING

from awsnav.core.exceptions import NavError
from awsnav.core.resource.types import (
    FetchRequest,
    FetchResult,
    FetchState,
    ResourceFilter,
    ResourceRow,
)

if TYPE_CHECKING:
    from awsnav.core.resource.fetcher import Fetcher

logger = logging.getLogger(__name__)

TupleKey = tuple[str, str, str]
Listener = Callable[[TupleKey, "TupleState"], None]

DEFAULT_MAX_WORKERS = 4


class TupleStatus(Enum):
    """튜플별 조회 상태"""

    IDLE = "idle"
    FETCHING = "fetching"
    READY = "ready"
    FAILED = "failed"


@dataclass
class TupleState:
    """튜플별 상태 스냅샷

    Attributes:
        status: 조회 상태
        epoch: 현재 epoch (가장 최근 요청)
        applied_epoch: 마지막으로 적용된 결과의 epoch
        rows: 마지막으로 적용된 행
        error: 마지막 실패 에러
        truncated: 페이지 상한으로 잘린 결과인지
    """

    status: TupleStatus = TupleStatus.IDLE
    epoch: int = 0
    applied_epoch: int = 0
    rows: tuple[ResourceRow, ...] = ()
    error: NavError | None = None
    truncated: bool = False


class RefreshCoordinator:
    """epoch 기반 백그라운드 새로고침 관리자

    Args:
        fetcher: 페이지네이션 조회기
        max_workers: 백그라운드 워커 수
    """

    def __init__(self, fetcher: Fetcher, max_workers: int = DEFAULT_MAX_WORKERS):
        self.fetcher = fetcher
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="awsnav-refresh")
        self._lock = threading.Lock()
        self._states: dict[TupleKey, TupleState] = {}
        self._listeners: list[Listener] = []

    def __enter__(self) -> RefreshCoordinator:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown(wait=False)

    # =========================================================================
    # 요청
    # =========================================================================

    def request(
        self,
        kind_id: str,
        profile: str,
        region: str,
        endpoint_url: str | None = None,
        filter: ResourceFilter | None = None,
        max_pages: int = 50,
    ) -> Future[FetchResult]:
        """새 조회 요청 (이전 진행 중 조회를 대체)

        Returns:
            조회 결과 Future (적용 여부와 무관하게 결과를 담음)
        """
        key: TupleKey = (kind_id, profile, region)
        with self._lock:
            state = self._states.setdefault(key, TupleState())
            state.epoch += 1
            state.status = TupleStatus.FETCHING
            epoch = state.epoch

        request = FetchRequest(
            kind_id=kind_id,
            profile=profile,
            region=region,
            endpoint_url=endpoint_url,
            filter=filter,
            epoch=epoch,
            max_pages=max_pages,
        )
        logger.debug(f"조회 요청: {key} (epoch {epoch})")
        return self._executor.submit(self._run, request)

    def _run(self, request: FetchRequest) -> FetchResult:
        key = request.tuple_key

        def is_cancelled() -> bool:
            return self.current_epoch(key) != request.epoch

        try:
            result = self.fetcher.fetch_paginated(request, is_cancelled=is_cancelled)
        except NavError as e:
            result = FetchResult(epoch=request.epoch, error=e)
        except Exception as e:
            # 예상치 못한 오류도 FAILED로 적용
            logger.error(f"조회 중 예외 {key} (epoch {request.epoch}): {e}")
            result = FetchResult(epoch=request.epoch, error=NavError("조회 중 예기치 않은 오류", cause=e))

        self.apply(key, result)
        return result

    # =========================================================================
    # 적용 (compare-and-set)
    # =========================================================================

    def apply(self, key: TupleKey, result: FetchResult) -> bool:
        """결과 적용 - epoch가 현재 값과 같을 때만

        Returns:
            적용되었으면 True, 오래된 결과로 폐기되었으면 False
        """
        with self._lock:
            state = self._states.get(key)
            if (
                state is None
                or result.state == FetchState.CANCELLED
                or result.epoch != state.epoch
                or result.epoch == state.applied_epoch
            ):
                logger.debug(f"오래된 결과 폐기: {key} (epoch {result.epoch})")
                return False

            if result.error is None:
                state.status = TupleStatus.READY
                state.rows = result.rows
                state.error = None
                state.truncated = result.truncated
            else:
                state.status = TupleStatus.FAILED
                state.error = result.error
                if result.rows:
                    state.rows = result.rows
                    state.truncated = False
            state.applied_epoch = result.epoch
            snapshot = replace(state)
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(key, snapshot)
            except Exception as e:
                logger.warning(f"새로고침 리스너 오류: {e}")
        return True

    # =========================================================================
    # 조회
    # =========================================================================

    def state(self, key: TupleKey) -> TupleState:
        """튜플 상태 스냅샷 (요청된 적 없으면 IDLE)"""
        with self._lock:
            state = self._states.get(key)
            return replace(state) if state is not None else TupleState()

    def current_epoch(self, key: TupleKey) -> int:
        with self._lock:
            state = self._states.get(key)
            return state.epoch if state is not None else 0

    def add_listener(self, listener: Listener) -> None:
        """결과가 적용될 때마다 호출될 콜백 등록 (워커 스레드에서 호출됨)"""
        with self._lock:
            self._listeners.append(listener)

    def shutdown(self, wait: bool = True) -> None:
        """워커 종료 - 진행 중 조회는 다음 페이지 전에 중단됨"""
        with self._lock:
            for state in self._states.values():
                state.epoch += 1
        self._executor.shutdown(wait=wait, cancel_futures=True)
