"""
core/resource/fetcher.py - 페이지네이션 조회

목록 작업을 페이지 단위로 호출하고 응답 항목을 ResourceRow로 변환합니다.

- 이전 응답의 커서를 다음 요청의 커서 파라미터로 전달
- 커서가 없는 응답 또는 페이지 상한(기본 50)에서 종료 (상한 도달은 TRUNCATED)
- N번째 페이지 실패 시 그 전까지 모은 행과 에러를 함께 반환
- 매 페이지 호출 전 is_cancelled()를 확인해 협조적으로 중단
- 대체된 조회의 행은 상세 조회 캐시에 기록하지 않음
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from awsnav.core.exceptions import DispatchError

from .extractor import build_row, extract, extract_items
from .types import FetchRequest, FetchResult, FetchState, ResourceKind, ResourceRow

if TYPE_CHECKING:
    from .dispatch import Dispatcher
    from .registry import Registry

logger = logging.getLogger(__name__)

DEFAULT_MAX_PAGES = 50


class Fetcher:
    """목록 조회 오케스트레이터"""

    def __init__(self, dispatcher: Dispatcher, registry: Registry):
        self.dispatcher = dispatcher
        self.registry = registry

    def _page_params(self, kind: ResourceKind, cursor: Any) -> dict[str, Any]:
        pagination = kind.list_spec.pagination
        params: dict[str, Any] = {}
        if pagination is None:
            return params
        if pagination.page_size_param and pagination.page_size:
            params[pagination.page_size_param] = pagination.page_size
        if cursor is not None:
            params[pagination.request_param] = cursor
        return params

    def _call_page(
        self,
        kind: ResourceKind,
        request: FetchRequest,
        cursor: Any,
        first: bool,
        is_cancelled: Callable[[], bool] | None = None,
    ) -> tuple[list[ResourceRow], Any]:
        """한 페이지 호출 -> (필터 적용된 행, 다음 커서)"""
        response = self.dispatcher.invoke(
            request.profile,
            request.region,
            request.endpoint_url,
            kind.list_spec,
            self._page_params(kind, cursor),
        )

        rows = [build_row(kind, item) for item in extract_items(response, kind.items_path)]
        self.dispatcher.remember_rows(
            kind.id, request.profile, request.region, rows, replace=first, is_cancelled=is_cancelled
        )

        if request.filter is not None and not request.filter.is_empty:
            rows = [row for row in rows if request.filter.matches(row)]

        next_cursor = None
        if kind.list_spec.pagination is not None:
            next_cursor = extract(response, kind.list_spec.pagination.response_path)
            if next_cursor == "":
                next_cursor = None
        return rows, next_cursor

    def fetch_page(self, request: FetchRequest, cursor: Any = None) -> FetchResult:
        """단일 페이지 조회

        Args:
            request: 조회 요청
            cursor: 이전 페이지의 next_cursor (None이면 첫 페이지)

        Returns:
            FetchResult (next_cursor에 다음 페이지 커서)

        Raises:
            KindNotFoundError: 등록되지 않은 리소스 종류
        """
        kind = self.registry.lookup(request.kind_id)
        try:
            rows, next_cursor = self._call_page(kind, request, cursor, first=cursor is None)
        except DispatchError as e:
            return FetchResult(epoch=request.epoch, error=e, pages=1)
        return FetchResult(epoch=request.epoch, rows=tuple(rows), next_cursor=next_cursor, pages=1)

    def fetch_paginated(
        self,
        request: FetchRequest,
        is_cancelled: Callable[[], bool] | None = None,
    ) -> FetchResult:
        """커서가 끝날 때까지 또는 페이지 상한까지 전체 조회

        Args:
            request: 조회 요청
            is_cancelled: 매 페이지 호출 전 확인할 취소 여부 함수

        Returns:
            FetchResult. 실패 시 그때까지 모은 행과 에러를 함께 담음

        Raises:
            KindNotFoundError: 등록되지 않은 리소스 종류
        """
        kind = self.registry.lookup(request.kind_id)
        max_pages = max(1, request.max_pages)
        rows: list[ResourceRow] = []
        cursor: Any = None
        pages = 0

        while True:
            if is_cancelled is not None and is_cancelled():
                logger.debug(f"[{kind.id}] 조회 취소 (epoch {request.epoch}, {pages}페이지)")
                return FetchResult(epoch=request.epoch, rows=tuple(rows), state=FetchState.CANCELLED, pages=pages)

            try:
                page_rows, cursor = self._call_page(kind, request, cursor, first=pages == 0, is_cancelled=is_cancelled)
            except DispatchError as e:
                logger.debug(f"[{kind.id}] {pages + 1}페이지 실패: {e}")
                return FetchResult(epoch=request.epoch, rows=tuple(rows), error=e, pages=pages + 1)

            pages += 1
            rows.extend(page_rows)

            if cursor is None:
                return FetchResult(epoch=request.epoch, rows=tuple(rows), pages=pages)

            if pages >= max_pages:
                logger.warning(f"[{kind.id}] 페이지 상한({max_pages}) 도달 - 결과가 잘렸습니다")
                return FetchResult(
                    epoch=request.epoch,
                    rows=tuple(rows),
                    state=FetchState.TRUNCATED,
                    next_cursor=cursor,
                    pages=pages,
                )
