"""
awsnav/cli/ui/prompts.py - questionary 기반 선택/확인 프롬프트

모든 프롬프트는 사용자가 취소(Ctrl+C, Esc)하면 None을 반환합니다.
파괴적 액션의 확인 정책도 이 계층에서 결정합니다.
"""

from __future__ import annotations

from collections.abc import Sequence

import questionary

from awsnav.core.region.data import region_label
from awsnav.core.resource.types import Action, ResourceKind, ResourceRow

# 메뉴 전용 선택 값
BACK = "__back__"
REFRESH = "__refresh__"
FILTER = "__filter__"
SWITCH_PROFILE = "__profile__"
SWITCH_REGION = "__region__"
QUIT = "__quit__"

# 행 선택 목록에 표시할 최대 컬럼 수
ROW_PREVIEW_COLUMNS = 3


def needs_confirmation(action: Action) -> bool:
    """실행 전 명시적 확인이 필요한 액션인지"""
    return action.requires_confirmation


def confirm_action(action: Action, key: str) -> bool:
    """액션 실행 확인

    파괴적 작업은 기본값이 "아니오"이며, 리소스 키를 다시 입력해야 실행됩니다.
    """
    if action.destructive:
        answer = questionary.text(
            f"[파괴적 작업] {action.label} - 확인을 위해 '{key}'를 입력하세요:",
        ).ask()
        return answer is not None and answer.strip() == key

    answer = questionary.confirm(f"{action.label} → {key} 실행하시겠습니까?", default=False).ask()
    return bool(answer)


def select_kind(kinds: Sequence[ResourceKind], last: str | None = None) -> str | None:
    """리소스 종류 선택 (카테고리 구분)"""
    choices: list[questionary.Choice | questionary.Separator] = []
    category = None
    for kind in kinds:
        if kind.category != category:
            category = kind.category
            choices.append(questionary.Separator(f"── {category}"))
        choices.append(questionary.Choice(f"{kind.name} ({kind.id})", value=kind.id))
    choices.append(questionary.Separator())
    choices.append(questionary.Choice("프로파일 변경", value=SWITCH_PROFILE))
    choices.append(questionary.Choice("리전 변경", value=SWITCH_REGION))
    choices.append(questionary.Choice("종료", value=QUIT))

    default = last if last and any(k.id == last for k in kinds) else None
    return questionary.select("리소스 종류를 선택하세요:", choices=choices, default=default).ask()


def select_profile(profiles: Sequence[str], current: str) -> str | None:
    return questionary.select(
        "프로파일을 선택하세요:",
        choices=list(profiles),
        default=current if current in profiles else None,
    ).ask()


def select_region(regions: Sequence[str], recent: Sequence[str], current: str) -> str | None:
    """리전 선택 (최근 사용 리전을 위에 표시)"""
    choices: list[questionary.Choice | questionary.Separator] = []
    recent = [r for r in recent if r in regions]
    if recent:
        choices.append(questionary.Separator("── 최근 사용"))
        choices.extend(questionary.Choice(region_label(r), value=r) for r in recent)
        choices.append(questionary.Separator("── 전체"))
    choices.extend(questionary.Choice(region_label(r), value=r) for r in regions if r not in recent)

    default = current if current in regions else None
    return questionary.select("리전을 선택하세요:", choices=choices, default=default).ask()


def _row_title(kind: ResourceKind, row: ResourceRow) -> str:
    labels = kind.column_labels[:ROW_PREVIEW_COLUMNS]
    preview = " | ".join(row.get(label, "-") for label in labels)
    return preview if row.key in preview else f"{row.key} | {preview}"


def select_row(kind: ResourceKind, rows: Sequence[ResourceRow], status: str = "") -> str | None:
    """행 선택 또는 목록 메뉴 명령 선택

    Returns:
        선택한 행의 키 또는 메뉴 값 (REFRESH, FILTER, BACK)
    """
    choices: list[questionary.Choice | questionary.Separator] = [
        questionary.Choice("↻ 새로고침", value=REFRESH),
        questionary.Choice("⌕ 필터", value=FILTER),
        questionary.Choice("← 뒤로", value=BACK),
        questionary.Separator(),
    ]
    choices.extend(questionary.Choice(_row_title(kind, row), value=row.key) for row in rows if row.key)

    message = f"{kind.name} {status}".strip()
    return questionary.select(message, choices=choices).ask()


def select_action(actions: Sequence[Action]) -> str | None:
    """행 메뉴 (상세 보기 + 액션)

    Returns:
        "describe", 액션 ID 또는 BACK
    """
    choices: list[questionary.Choice | questionary.Separator] = [questionary.Choice("상세 보기", value="describe")]
    for action in actions:
        label = f"{action.label} (파괴적)" if action.destructive else action.label
        choices.append(questionary.Choice(label, value=action.id))
    choices.append(questionary.Choice("← 뒤로", value=BACK))
    return questionary.select("작업을 선택하세요:", choices=choices).ask()


def ask_filter(current: str = "") -> str | None:
    """필터 검색어 입력 (빈 문자열이면 필터 해제)"""
    return questionary.text("필터 (대소문자 무시, 빈 값이면 해제):", default=current).ask()
