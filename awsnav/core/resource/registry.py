"""
core/resource/registry.py - 리소스 종류 레지스트리

시작 시 한 번 등록하고 이후에는 읽기 전용으로 쓰는 리소스 종류 카탈로그입니다.
등록 순서가 곧 메뉴 순서이므로 실행마다 동일한 순서를 보장합니다.

Example:
    registry = Registry()
    registry.register(ec2_instances)
    registry.freeze()

    kind = registry.lookup("ec2-instances")
    for kind in registry.list_kinds():
        print(kind.id, kind.name)
"""

from __future__ import annotations

import logging
import threading

from awsnav.core.exceptions import (
    ActionNotFoundError,
    DuplicateKindError,
    KindNotFoundError,
    RegistryFrozenError,
)

from .extractor import build_formatter, parse_path
from .types import KEY_BINDING, Action, OperationSpec, ResourceKind

logger = logging.getLogger(__name__)


def _validate_spec(kind_id: str, spec: OperationSpec) -> None:
    if not spec.service or not spec.operation:
        raise ValueError(f"[{kind_id}] 서비스/작업 이름이 비어 있습니다")
    if spec.pagination is not None:
        parse_path(spec.pagination.response_path)
    if spec.result_path:
        parse_path(spec.result_path)


def _validate_kind(kind: ResourceKind) -> None:
    """등록 전 정의 검증 (경로 문법, 포매터, 라벨/액션 ID 중복)"""
    if not kind.id:
        raise ValueError("리소스 종류 ID가 비어 있습니다")
    if not kind.columns:
        raise ValueError(f"[{kind.id}] 컬럼이 하나 이상 필요합니다")

    labels = kind.column_labels
    if len(set(labels)) != len(labels):
        raise ValueError(f"[{kind.id}] 컬럼 이름이 중복되었습니다: {labels}")

    _validate_spec(kind.id, kind.list_spec)
    if kind.describe_spec is not None:
        _validate_spec(kind.id, kind.describe_spec)
        if not kind.describe_spec.key_param:
            raise ValueError(f"[{kind.id}] 상세 조회에는 key_param이 필요합니다")

    parse_path(kind.items_path)
    parse_path(kind.key_path)
    for col in kind.columns:
        parse_path(col.path)
        for name in col.formatters:
            build_formatter(name)

    action_ids = [a.id for a in kind.actions]
    if len(set(action_ids)) != len(action_ids):
        raise ValueError(f"[{kind.id}] 액션 ID가 중복되었습니다: {action_ids}")
    for action in kind.actions:
        _validate_action(kind.id, action)


def _validate_action(kind_id: str, action: Action) -> None:
    _validate_spec(kind_id, action.spec)
    for binding in action.bindings:
        if binding.path != KEY_BINDING:
            parse_path(binding.path)
    if action.message_path:
        parse_path(action.message_path)


class Registry:
    """리소스 종류 레지스트리

    freeze() 이후에는 등록이 불가하며, 조회는 잠금 없이 수행됩니다.
    """

    def __init__(self) -> None:
        self._kinds: dict[str, ResourceKind] = {}
        self._frozen = False
        self._lock = threading.Lock()

    def register(self, kind: ResourceKind) -> ResourceKind:
        """리소스 종류 등록

        Raises:
            DuplicateKindError: 이미 등록된 ID
            RegistryFrozenError: freeze() 이후 등록 시도
            ValueError: 정의 오류
        """
        _validate_kind(kind)
        with self._lock:
            if self._frozen:
                raise RegistryFrozenError(kind.id)
            if kind.id in self._kinds:
                raise DuplicateKindError(kind.id)
            self._kinds[kind.id] = kind
        logger.debug(f"리소스 종류 등록: {kind.id} ({kind.list_spec.label})")
        return kind

    def freeze(self) -> None:
        """등록 종료 - 이후 읽기 전용"""
        with self._lock:
            self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def lookup(self, kind_id: str) -> ResourceKind:
        """리소스 종류 조회

        Raises:
            KindNotFoundError: 등록되지 않은 ID
        """
        kind = self._kinds.get(kind_id)
        if kind is None:
            raise KindNotFoundError(kind_id)
        return kind

    def find_action(self, kind_id: str, action_id: str) -> tuple[ResourceKind, Action]:
        """리소스 종류와 액션 조회

        Raises:
            KindNotFoundError: 등록되지 않은 리소스 종류
            ActionNotFoundError: 해당 종류에 없는 액션
        """
        kind = self.lookup(kind_id)
        action = kind.get_action(action_id)
        if action is None:
            raise ActionNotFoundError(kind_id, action_id)
        return kind, action

    def list_kinds(self) -> list[ResourceKind]:
        """등록 순서대로 전체 리소스 종류 반환"""
        return list(self._kinds.values())

    def categories(self) -> dict[str, list[ResourceKind]]:
        """카테고리별 그룹 (카테고리와 항목 모두 등록 순서 유지)"""
        result: dict[str, list[ResourceKind]] = {}
        for kind in self._kinds.values():
            result.setdefault(kind.category, []).append(kind)
        return result

    def __contains__(self, kind_id: object) -> bool:
        return kind_id in self._kinds

    def __len__(self) -> int:
        return len(self._kinds)


def default_registry() -> Registry:
    """내장 카탈로그를 등록하고 고정한 레지스트리 생성"""
    from .catalog import BUILTIN_KINDS

    registry = Registry()
    for kind in BUILTIN_KINDS:
        registry.register(kind)
    registry.freeze()
    return registry
