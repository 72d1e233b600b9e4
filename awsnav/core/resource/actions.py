"""
core/resource/actions.py - 리소스 액션 실행

Dispatcher.execute_action 위의 얇은 계층입니다.
확인 절차(파괴적 작업 재확인 등)는 호출하는 UI 계층의 책임이며,
여기서는 호출되면 바로 실행합니다. 읽기 전용 모드만 이 계층에서 차단합니다.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from awsnav.core.exceptions import ReadOnlyError

from .types import Action, ActionOutcome, ResourceRow

if TYPE_CHECKING:
    from .dispatch import Dispatcher
    from .registry import Registry

logger = logging.getLogger(__name__)


class ActionExecutor:
    """액션 실행기

    Args:
        dispatcher: 디스패처
        registry: 리소스 종류 레지스트리
        readonly: True면 상태 변경 액션을 거부
    """

    def __init__(self, dispatcher: Dispatcher, registry: Registry, readonly: bool = False):
        self.dispatcher = dispatcher
        self.registry = registry
        self.readonly = readonly

    def available_actions(self, kind_id: str, readonly: bool | None = None) -> list[Action]:
        """호출자가 제시할 수 있는 액션 목록 (선언 순서)"""
        readonly = self.readonly if readonly is None else readonly
        kind = self.registry.lookup(kind_id)
        if readonly:
            return [a for a in kind.actions if not a.mutating]
        return list(kind.actions)

    def execute(
        self,
        kind_id: str,
        action_id: str,
        row: ResourceRow,
        profile: str,
        region: str,
        endpoint_url: str | None = None,
    ) -> ActionOutcome:
        """액션 실행

        Returns:
            ActionOutcome (실패도 error 필드로 반환)

        Raises:
            KindNotFoundError: 등록되지 않은 리소스 종류
            ActionNotFoundError: 해당 종류에 없는 액션
        """
        kind, action = self.registry.find_action(kind_id, action_id)

        if self.readonly and action.mutating:
            error = ReadOnlyError(action.id)
            logger.warning(f"[{kind.id}] {error}")
            return ActionOutcome(kind.id, action.id, row.key, success=False, error=error)

        logger.info(f"[{kind.id}] {action.id} 실행 ({profile}/{region}): {row.key}")
        return self.dispatcher.execute_action(kind, action.id, row, profile, region, endpoint_url)
