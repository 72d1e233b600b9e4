"""
awsnav/cli/ui/browser.py - 대화형 리소스 브라우저

리소스 종류 선택 → 목록(필터/새로고침) → 행 메뉴(상세 보기/액션) 흐름입니다.

조회는 RefreshCoordinator 워커에서 실행되고, 화면은 적용된 최신 상태만 그립니다.
응답을 기다리는 동안 Ctrl+C를 누르면 대기만 중단하고 이전 행을 계속 보여줍니다.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import TYPE_CHECKING

from awsnav.core.auth import list_profiles
from awsnav.core.exceptions import NavError, format_error_for_user
from awsnav.core.parallel.refresh import TupleState, TupleStatus
from awsnav.core.region.data import list_regions, region_label
from awsnav.core.resource.types import FetchResult, ResourceFilter, ResourceKind, ResourceRow

from . import prompts
from .console import build_rows_table, console, print_detail, print_error, print_info, print_outcome, print_warning

if TYPE_CHECKING:
    from awsnav.cli.context import AppContext

logger = logging.getLogger(__name__)

# 조회 결과 대기 최대 시간 (초) - 초과 시 이전 행을 보여주고 백그라운드에서 계속 조회
WAIT_SECONDS = 20.0


class Browser:
    """대화형 브라우저"""

    def __init__(self, app: AppContext):
        self.app = app
        self._filters: dict[str, str] = {}

    @property
    def _header(self) -> str:
        mode = " [yellow](읽기 전용)[/yellow]" if self.app.readonly else ""
        return f"[bold]{self.app.profile}[/bold] @ {region_label(self.app.region)}{mode}"

    def run(self) -> None:
        """메인 루프 - 종료를 선택하거나 취소하면 반환"""
        while True:
            console.print()
            console.print(self._header)
            choice = prompts.select_kind(self.app.registry.list_kinds(), self.app.settings.last_resource)

            if choice is None or choice == prompts.QUIT:
                return
            if choice == prompts.SWITCH_PROFILE:
                self._switch_profile()
                continue
            if choice == prompts.SWITCH_REGION:
                self._switch_region()
                continue

            self.browse(self.app.registry.lookup(choice))

    # =========================================================================
    # 프로파일/리전 전환
    # =========================================================================

    def _switch_profile(self) -> None:
        profile = prompts.select_profile(list_profiles(), self.app.profile)
        if profile and profile != self.app.profile:
            self.app.profile = profile
            self.app.remember(profile=profile)

    def _switch_region(self) -> None:
        with console.status("리전 목록 조회 중..."):
            regions = list_regions(self.app.dispatcher, self.app.profile, endpoint_url=self.app.endpoint_url)
        region = prompts.select_region(regions, self.app.settings.recent_regions, self.app.region)
        if region and region != self.app.region:
            self.app.region = region
            self.app.remember(region=region)

    # =========================================================================
    # 목록
    # =========================================================================

    def _key(self, kind: ResourceKind) -> tuple[str, str, str]:
        return (kind.id, self.app.profile, self.app.region)

    def _refresh(self, kind: ResourceKind) -> Future[FetchResult]:
        text = self._filters.get(kind.id, "")
        return self.app.coordinator.request(
            kind.id,
            self.app.profile,
            self.app.region,
            endpoint_url=self.app.endpoint_url,
            filter=ResourceFilter(text) if text else None,
        )

    def _wait(self, kind: ResourceKind, future: Future[FetchResult]) -> None:
        try:
            with console.status(f"{kind.name} 조회 중..."):
                future.result(timeout=WAIT_SECONDS)
        except FutureTimeoutError:
            print_warning("응답이 늦어 이전 결과를 표시합니다. 백그라운드에서 계속 조회합니다.")
        except KeyboardInterrupt:
            print_info("대기를 중단했습니다. 백그라운드에서 계속 조회합니다.")

    def _status_text(self, state: TupleState) -> str:
        if state.status == TupleStatus.FETCHING:
            return "(조회 중...)"
        if state.status == TupleStatus.FAILED:
            return "(조회 실패)"
        if state.truncated:
            return "(일부만 표시)"
        return ""

    def _render(self, kind: ResourceKind, state: TupleState) -> None:
        text = self._filters.get(kind.id, "")
        title = f"{kind.name} - 필터: {text}" if text else kind.name
        console.print(build_rows_table(kind, state.rows, title=title))
        if state.truncated:
            print_warning("페이지 상한에 도달하여 일부 결과만 표시합니다.")
        if state.error is not None:
            print_error(format_error_for_user(state.error))

    def browse(self, kind: ResourceKind) -> None:
        """리소스 목록 화면"""
        self.app.remember(resource=kind.id)
        self._wait(kind, self._refresh(kind))

        while True:
            state = self.app.coordinator.state(self._key(kind))
            self._render(kind, state)
            choice = prompts.select_row(kind, state.rows, self._status_text(state))

            if choice is None or choice == prompts.BACK:
                return
            if choice == prompts.REFRESH:
                self._wait(kind, self._refresh(kind))
                continue
            if choice == prompts.FILTER:
                text = prompts.ask_filter(self._filters.get(kind.id, ""))
                if text is not None:
                    self._filters[kind.id] = text.strip()
                    self._wait(kind, self._refresh(kind))
                continue

            row = next((r for r in state.rows if r.key == choice), None)
            if row is not None:
                self.row_menu(kind, row)

    # =========================================================================
    # 행 메뉴
    # =========================================================================

    def row_menu(self, kind: ResourceKind, row: ResourceRow) -> None:
        actions = self.app.executor.available_actions(kind.id)
        choice = prompts.select_action(actions)
        if choice is None or choice == prompts.BACK:
            return

        if choice == "describe":
            self._describe(kind, row)
            return

        action = kind.get_action(choice)
        if action is None:
            return
        if prompts.needs_confirmation(action) and not prompts.confirm_action(action, row.key):
            print_info("취소했습니다.")
            return

        outcome = self.app.executor.execute(
            kind.id,
            action.id,
            row,
            self.app.profile,
            self.app.region,
            self.app.endpoint_url,
        )
        print_outcome(outcome)
        if outcome.success:
            self._wait(kind, self._refresh(kind))

    def _describe(self, kind: ResourceKind, row: ResourceRow) -> None:
        try:
            with console.status(f"{row.key} 조회 중..."):
                raw = self.app.dispatcher.describe_resource(
                    kind,
                    row.key,
                    self.app.profile,
                    self.app.region,
                    self.app.endpoint_url,
                )
        except NavError as e:
            print_error(format_error_for_user(e))
            return
        print_detail(f"{kind.name}: {row.key}", raw)
