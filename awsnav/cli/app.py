"""
awsnav/cli/app.py - 메인 CLI 엔트리포인트

Click 기반의 CLI 애플리케이션 진입점입니다.

명령어 구조:
    awsnav                              # 대화형 브라우저
    awsnav --version                    # 버전 표시
    awsnav list-profiles                # 프로파일 목록 (한 줄에 하나)
    awsnav list-regions                 # 활성화된 리전 목록 (한 줄에 하나)
    awsnav kinds                        # 리소스 종류 목록
    awsnav ls <kind>                    # 리소스 목록
    awsnav describe <kind> <key>        # 리소스 상세
    awsnav act <kind> <action> <key>    # 액션 실행

    공통 옵션:
    -p, --profile      AWS 프로파일
    -r, --region       AWS 리전
    --endpoint-url     엔드포인트 오버라이드 (LocalStack 등)
    --readonly         상태 변경 액션 차단
    --log-level        off | error | warn | info | debug

Usage:
    $ awsnav -p dev -r ap-northeast-2 ls ec2-instances --filter web
    $ awsnav describe s3-buckets my-bucket -o json
    $ python -m awsnav.cli.app
"""

from __future__ import annotations

import json
import logging
from typing import NoReturn

import click

from awsnav import __version__
from awsnav.cli.context import AppContext, build_context
from awsnav.cli.ui.console import (
    LOG_LEVELS,
    console,
    print_detail,
    print_error,
    print_fetch_result,
    print_outcome,
    print_warning,
)
from awsnav.core.exceptions import NavError, RegistryError, format_error_for_user
from awsnav.core.resource.extractor import parse_path
from awsnav.core.resource.types import (
    KEY_BINDING,
    FetchRequest,
    FetchResult,
    ResourceFilter,
    ResourceKind,
    ResourceRow,
)

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ["table", "json", "plain"]


def _fail(message: str, code: int = 1) -> NoReturn:
    print_error(message)
    raise SystemExit(code)


def _lookup(app: AppContext, kind_id: str) -> ResourceKind:
    try:
        return app.registry.lookup(kind_id)
    except RegistryError as e:
        _fail(str(e), code=2)


def _fetch_rows(
    app: AppContext,
    kind: ResourceKind,
    resource_filter: ResourceFilter | None = None,
    max_pages: int = 50,
) -> FetchResult:
    request = FetchRequest(
        kind_id=kind.id,
        profile=app.profile,
        region=app.region,
        endpoint_url=app.endpoint_url,
        filter=resource_filter,
        max_pages=max_pages,
    )
    return app.fetcher.fetch_paginated(request)


@click.group(invoke_without_command=True)
@click.version_option(__version__, "-v", "--version", prog_name="awsnav")
@click.option("-p", "--profile", default=None, help="AWS 프로파일 (기본: AWS_PROFILE → 저장된 값 → default)")
@click.option("-r", "--region", default=None, help="AWS 리전 (기본: AWS_REGION → 저장된 값 → us-east-1)")
@click.option("--endpoint-url", default=None, help="엔드포인트 오버라이드 (LocalStack 등)")
@click.option("--readonly", is_flag=True, help="상태 변경 액션 차단")
@click.option(
    "--log-level",
    type=click.Choice(list(LOG_LEVELS)),
    default="warn",
    show_default=True,
    help="로그 레벨",
)
@click.pass_context
def cli(
    ctx: click.Context,
    profile: str | None,
    region: str | None,
    endpoint_url: str | None,
    readonly: bool,
    log_level: str,
) -> None:
    """AWS 리소스 브라우저

    서브 명령 없이 실행하면 대화형 브라우저를 시작합니다.
    """
    from awsnav.cli.ui.console import configure_logging

    interactive = ctx.invoked_subcommand is None
    log_file = None
    if interactive:
        from awsnav.core.tools.cache import get_cache_path

        # 로그가 대화형 화면을 깨뜨리지 않도록 파일로 기록
        log_file = get_cache_path("logs", "awsnav.log")
    configure_logging(log_level, log_file)

    app = build_context(profile=profile, region=region, endpoint_url=endpoint_url, readonly=readonly)
    ctx.obj = app
    ctx.call_on_close(app.shutdown)

    if interactive:
        from awsnav.cli.ui.browser import Browser

        try:
            Browser(app).run()
        except KeyboardInterrupt:
            console.print()


@cli.command("list-profiles")
def list_profiles_cmd() -> None:
    """프로파일 목록 (한 줄에 하나)"""
    from awsnav.core.auth import list_profiles

    for profile in list_profiles():
        click.echo(profile)


@cli.command("list-regions")
@click.pass_obj
def list_regions_cmd(app: AppContext) -> None:
    """활성화된 리전 목록 (한 줄에 하나)"""
    from awsnav.core.region.data import list_regions

    for region in list_regions(app.dispatcher, app.profile, app.region, app.endpoint_url):
        click.echo(region)


@cli.command("kinds")
@click.option("--plain", is_flag=True, help="ID만 한 줄에 하나씩 출력")
@click.pass_obj
def kinds_cmd(app: AppContext, plain: bool) -> None:
    """리소스 종류 목록"""
    from rich.table import Table

    kinds = app.registry.list_kinds()
    if plain:
        for kind in kinds:
            click.echo(kind.id)
        return

    table = Table(title="리소스 종류", header_style="bold cyan")
    table.add_column("ID")
    table.add_column("이름")
    table.add_column("카테고리")
    table.add_column("액션")
    for kind in kinds:
        table.add_row(kind.id, kind.name, kind.category, ", ".join(a.id for a in kind.actions) or "-")
    console.print(table)


@cli.command("ls")
@click.argument("kind_id")
@click.option("-f", "--filter", "filter_text", default="", help="검색어 (대소문자 무시 부분 일치)")
@click.option("--field", "fields", multiple=True, help="검색 대상 필드 (컬럼 이름 또는 경로, 다중 가능)")
@click.option("--max-pages", default=50, show_default=True, type=click.IntRange(min=1), help="최대 페이지 수")
@click.option("-o", "--output", type=click.Choice(OUTPUT_FORMATS), default="table", show_default=True)
@click.pass_obj
def ls_cmd(
    app: AppContext,
    kind_id: str,
    filter_text: str,
    fields: tuple[str, ...],
    max_pages: int,
    output: str,
) -> None:
    """리소스 목록"""
    kind = _lookup(app, kind_id)
    for name in fields:
        if name not in kind.column_labels:
            try:
                parse_path(name)
            except ValueError as e:
                _fail(f"--field: {e}", code=2)
    resource_filter = ResourceFilter(filter_text, tuple(fields)) if filter_text else None
    result = _fetch_rows(app, kind, resource_filter, max_pages)

    if output == "json":
        click.echo(json.dumps([{"key": row.key, **row.columns} for row in result.rows], ensure_ascii=False, indent=2))
        if result.truncated:
            print_warning("페이지 상한에 도달하여 일부 결과만 표시합니다.")
        if result.error is not None:
            print_error(format_error_for_user(result.error))
    elif output == "plain":
        for row in result.rows:
            click.echo(row.key)
        if result.error is not None:
            print_error(format_error_for_user(result.error))
    else:
        title = f"{kind.name} ({app.profile}/{app.region})"
        print_fetch_result(kind, result, title=title)

    if result.error is not None:
        raise SystemExit(1)


@cli.command("describe")
@click.argument("kind_id")
@click.argument("key")
@click.option("-o", "--output", type=click.Choice(["table", "json"]), default="table", show_default=True)
@click.pass_obj
def describe_cmd(app: AppContext, kind_id: str, key: str, output: str) -> None:
    """리소스 상세"""
    kind = _lookup(app, kind_id)

    if kind.describe_spec is None:
        # 상세 조회 작업이 없는 종류는 목록 결과로 대체
        result = _fetch_rows(app, kind)
        if result.error is not None:
            _fail(format_error_for_user(result.error))

    try:
        raw = app.dispatcher.describe_resource(kind, key, app.profile, app.region, app.endpoint_url)
    except NavError as e:
        _fail(format_error_for_user(e))

    if output == "json":
        click.echo(json.dumps(raw, default=str, ensure_ascii=False, indent=2))
    else:
        print_detail(f"{kind.name}: {key}", raw)


def _find_row(app: AppContext, kind: ResourceKind, key: str, action_id: str) -> ResourceRow:
    """액션 대상 행 조회 (키만 필요한 액션은 목록 조회 생략)"""
    action = kind.get_action(action_id)
    key_only = action is not None and all(b.path == KEY_BINDING for b in action.bindings)
    if key_only:
        return ResourceRow(kind=kind.id, key=key, columns={}, raw=None)

    result = _fetch_rows(app, kind)
    for row in result.rows:
        if row.key == key:
            return row
    if result.error is not None:
        _fail(format_error_for_user(result.error))
    _fail(f"리소스를 찾을 수 없습니다: {kind.id} {key}")


@cli.command("act")
@click.argument("kind_id")
@click.argument("action_id")
@click.argument("key")
@click.option("-y", "--yes", is_flag=True, help="확인 없이 실행")
@click.pass_obj
def act_cmd(app: AppContext, kind_id: str, action_id: str, key: str, yes: bool) -> None:
    """액션 실행"""
    from awsnav.cli.ui.prompts import needs_confirmation

    try:
        kind, action = app.registry.find_action(kind_id, action_id)
    except RegistryError as e:
        _fail(str(e), code=2)

    row = _find_row(app, kind, key, action.id)

    if not app.readonly and needs_confirmation(action) and not yes:
        warning = " (되돌릴 수 없는 작업입니다)" if action.destructive else ""
        if not click.confirm(f"{action.label} → {key} 실행하시겠습니까?{warning}", default=False):
            click.echo("취소했습니다.")
            raise SystemExit(1)

    outcome = app.executor.execute(kind.id, action.id, row, app.profile, app.region, app.endpoint_url)
    print_outcome(outcome)
    if not outcome.success:
        raise SystemExit(1)


if __name__ == "__main__":
    cli()
