"""
awsnav/cli/ui/console.py - Rich 콘솔 유틸리티

일관된 콘솔 출력과 로깅 설정을 위한 함수들
"""

from __future__ import annotations

import logging
import platform
from typing import Any

from rich.console import Console
from rich.json import JSON
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from awsnav.core.resource.types import ActionOutcome, FetchResult, ResourceKind, ResourceRow

# botocore 노이즈 로그 제한
NOISY_LOGGERS = (
    "botocore",
    "boto3",
    "urllib3",
)

LOG_LEVELS: dict[str, int] = {
    "off": logging.CRITICAL + 10,
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}


def get_console(stderr: bool = False) -> Console:
    """Rich Console 인스턴스를 생성하고 반환합니다."""
    is_windows = platform.system().lower() == "windows"

    return Console(
        stderr=stderr,
        color_system="auto",
        highlight=True,
        soft_wrap=True,
        markup=True,
        emoji=not is_windows,
    )


# 전역 콘솔 인스턴스
console = get_console()
err_console = get_console(stderr=True)

_handler: logging.Handler | None = None


def configure_logging(level: str = "warn", log_file: str | None = None) -> None:
    """루트 로거 설정 (여러 번 호출 시 이전 핸들러 교체)

    Args:
        level: off | error | warn | info | debug
        log_file: 지정하면 화면 대신 파일로 기록 (대화형 화면 보호)
    """
    global _handler

    root = logging.getLogger()
    if _handler is not None:
        root.removeHandler(_handler)
        _handler.close()

    numeric = LOG_LEVELS.get(level, logging.WARNING)
    handler: logging.Handler
    if log_file:
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
    else:
        handler = RichHandler(console=err_console, show_path=False, rich_tracebacks=True)
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))

    root.addHandler(handler)
    root.setLevel(numeric)
    _handler = handler

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric, logging.WARNING))


# =============================================================================
# 표준 출력 스타일
# =============================================================================

SYMBOL_SUCCESS = "✓"
SYMBOL_ERROR = "✗"
SYMBOL_WARNING = "!"
SYMBOL_INFO = "•"


def print_success(message: str) -> None:
    console.print(f"[green]{SYMBOL_SUCCESS} {escape(message)}[/green]")


def print_error(message: str) -> None:
    err_console.print(f"[red]{SYMBOL_ERROR} {escape(message)}[/red]")


def print_warning(message: str) -> None:
    err_console.print(f"[yellow]{SYMBOL_WARNING} {escape(message)}[/yellow]")


def print_info(message: str) -> None:
    console.print(f"[blue]{SYMBOL_INFO} {escape(message)}[/blue]")


# =============================================================================
# 리소스 렌더링
# =============================================================================


def build_rows_table(kind: ResourceKind, rows: tuple[ResourceRow, ...] | list[ResourceRow], title: str = "") -> Table:
    """리소스 행 테이블 생성 (컬럼은 종류 정의 순서)

    Args:
        kind: 리소스 종류
        rows: 표시할 행
        title: 테이블 제목
    """
    table = Table(title=escape(title or kind.name), show_lines=False, header_style="bold cyan")
    table.add_column("#", justify="right", style="dim")
    for label in kind.column_labels:
        table.add_column(label, overflow="fold")

    for i, row in enumerate(rows, 1):
        table.add_row(str(i), *(escape(row.get(label, "-")) for label in kind.column_labels))
    return table


def print_fetch_result(kind: ResourceKind, result: FetchResult, title: str = "") -> None:
    """조회 결과 출력 (행 테이블 + 잘림/에러 상태)"""
    from awsnav.core.exceptions import format_error_for_user

    console.print(build_rows_table(kind, result.rows, title=title))
    console.print(f"[dim]{len(result.rows)}개 ({result.pages}페이지)[/dim]")
    if result.truncated:
        print_warning("페이지 상한에 도달하여 일부 결과만 표시합니다.")
    if result.error is not None:
        print_error(format_error_for_user(result.error))


def print_detail(title: str, raw: Any) -> None:
    """리소스 상세 (JSON) 출력"""
    import json

    text = json.dumps(raw, default=str, ensure_ascii=False, indent=2)
    console.print(Panel(JSON(text), title=title, border_style="cyan", expand=False))


def print_outcome(outcome: ActionOutcome) -> None:
    """액션 결과 출력"""
    from awsnav.core.exceptions import format_error_for_user

    target = f"{outcome.action_id} → {outcome.key}"
    if outcome.success:
        suffix = f" ({outcome.message})" if outcome.message else ""
        print_success(f"{target}{suffix}")
    elif outcome.error is not None:
        print_error(f"{target}: {format_error_for_user(outcome.error)}")
    else:
        print_error(f"{target}: 실패")
