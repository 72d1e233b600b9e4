"""
core/resource/extractor.py - 경로 기반 필드 추출 및 포맷팅

반정형(dict/list) 응답에서 경로로 값을 꺼내고 표시 문자열로 변환합니다.

경로 문법:
    Instances[0].State.Name     점으로 키, 대괄호로 인덱스
    Tags[-1].Value              음수 인덱스
    Reservations[*].Instances[*]  와일드카드 - 여러 값을 평탄화하여 투영
    Attributes["aws.key"]       점이 포함된 키

없는 키, 범위 밖 인덱스는 해당 필드만 None이 되며 행 전체를 실패시키지 않습니다.

포매터 (컬럼에 선언한 순서대로 적용):
    timestamp   시간 정규화 ("2024-01-01 00:00:00 UTC")
    bytes       바이트 크기 ("1.5 GiB")
    suffix:X    단위 접미사 (예: suffix:GiB)
    truncate:N  N자 초과 시 말줄임
    tag:KEY     [{"Key":..,"Value":..}] 또는 {KEY: value}에서 태그 값
    bool        yes/no
    count       항목 개수

Example:
    >>> extract({"a": {"b": [{"c": 1}, {"c": 2}]}}, "a.b[1].c")
    2
    >>> format_value([{"Key": "Name", "Value": "web"}], ("tag:Name",))
    'web'
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable, Iterable
from datetime import date, datetime
from functools import lru_cache
from typing import TYPE_CHECKING, Any

from awsnav.core.tools.time.utils import format_timestamp

if TYPE_CHECKING:
    from .types import ResourceKind, ResourceRow

EMPTY_DISPLAY = "-"


class _Wildcard:
    def __repr__(self) -> str:
        return "[*]"


WILDCARD = _Wildcard()


class Projection(list):
    """와일드카드 투영 결과 (중첩 와일드카드 평탄화 표시용)"""


_TOKEN_RE = re.compile(
    r"""
    (?P<dot>\.)
    | \[(?P<index>\*|-?\d+)\]
    | \[(?P<quoted>"[^"]*"|'[^']*')\]
    | (?P<key>[^.\[\]]+)
    """,
    re.VERBOSE,
)


@lru_cache(maxsize=1024)
def parse_path(path: str) -> tuple[Any, ...]:
    """경로 문자열을 세그먼트 튜플로 파싱

    Args:
        path: 추출 경로

    Returns:
        세그먼트 튜플 (str 키, int 인덱스, WILDCARD)

    Raises:
        ValueError: 문법 오류
    """
    segments: list[Any] = []
    pos = 0
    expect_key = True
    while pos < len(path):
        m = _TOKEN_RE.match(path, pos)
        if m is None:
            raise ValueError(f"잘못된 경로: {path!r} (위치 {pos})")
        if m.group("dot") is not None:
            if expect_key:
                raise ValueError(f"잘못된 경로: {path!r} (위치 {pos})")
            expect_key = True
        elif m.group("index") is not None:
            token = m.group("index")
            segments.append(WILDCARD if token == "*" else int(token))
            expect_key = False
        elif m.group("quoted") is not None:
            segments.append(m.group("quoted")[1:-1])
            expect_key = False
        else:
            if not expect_key:
                raise ValueError(f"잘못된 경로: {path!r} (위치 {pos})")
            segments.append(m.group("key"))
            expect_key = False
        pos = m.end()

    if expect_key and segments:
        raise ValueError(f"잘못된 경로: {path!r} (끝이 '.')")
    return tuple(segments)


def _walk(value: Any, segments: tuple[Any, ...]) -> Any:
    for i, seg in enumerate(segments):
        if value is None:
            return None
        if seg is WILDCARD:
            if not isinstance(value, (list, tuple)):
                return None
            rest = segments[i + 1 :]
            out = Projection()
            for item in value:
                sub = _walk(item, rest)
                if sub is None:
                    continue
                if isinstance(sub, Projection):
                    out.extend(sub)
                else:
                    out.append(sub)
            return out or None
        if isinstance(seg, int):
            if not isinstance(value, (list, tuple)):
                return None
            try:
                value = value[seg]
            except IndexError:
                return None
        else:
            if not isinstance(value, dict):
                return None
            value = value.get(seg)
    return value


def extract(raw: Any, path: str) -> Any:
    """경로로 값 추출

    Args:
        raw: 원본 응답 값
        path: 추출 경로 ("" 또는 "@"이면 원본 그대로)

    Returns:
        추출된 값. 없으면 None, 와일드카드면 Projection(list)
    """
    if path in ("", "@"):
        return raw
    return _walk(raw, parse_path(path))


def extract_items(raw: Any, path: str) -> list[Any]:
    """목록 응답에서 항목 리스트 추출

    Args:
        raw: 한 페이지의 원본 응답
        path: 항목 경로

    Returns:
        항목 리스트 (없으면 빈 리스트)
    """
    value = extract(raw, path)
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def to_display(value: Any, empty: str = EMPTY_DISPLAY) -> str:
    """값을 표시 문자열로 변환

    리스트(와일드카드 투영 포함)는 쉼표로 연결합니다.
    """
    if value is None:
        return empty
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, datetime):
        return format_timestamp(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        parts = [to_display(v, empty="") for v in value if v is not None]
        parts = [p for p in parts if p]
        return ", ".join(parts) if parts else empty
    if isinstance(value, dict):
        return json.dumps(value, default=str, ensure_ascii=False, separators=(",", ":"))
    return str(value)


# =============================================================================
# 포매터
# =============================================================================

Formatter = Callable[[Any], Any]

_SIZE_UNITS = ("B", "KiB", "MiB", "GiB", "TiB", "PiB")


def _map_each(func: Formatter) -> Formatter:
    def apply(value: Any) -> Any:
        if value is None:
            return None
        if isinstance(value, (list, tuple)):
            return Projection(func(v) for v in value)
        return func(value)

    return apply


def human_bytes(value: Any) -> Any:
    """바이트 수를 사람이 읽기 쉬운 형태로 ("1.5 GiB")"""
    try:
        size = float(value)
    except (TypeError, ValueError):
        return value
    unit = 0
    while abs(size) >= 1024 and unit < len(_SIZE_UNITS) - 1:
        size /= 1024
        unit += 1
    if unit == 0:
        return f"{int(size)} B"
    return f"{size:.1f} {_SIZE_UNITS[unit]}"


def _tag_value(key: str) -> Formatter:
    def apply(value: Any) -> Any:
        if isinstance(value, dict):
            return value.get(key)
        if isinstance(value, (list, tuple)):
            for tag in value:
                if isinstance(tag, dict) and tag.get("Key") == key:
                    return tag.get("Value")
        return None

    return apply


def _truncate(limit: int) -> Formatter:
    def apply(value: Any) -> Any:
        text = to_display(value, empty="")
        if not text:
            return None
        if len(text) <= limit:
            return text
        return text[: max(limit - 1, 0)] + "…"

    return apply


def _suffix(unit: str) -> Formatter:
    return _map_each(lambda v: f"{v} {unit}")


def _count(value: Any) -> Any:
    if value is None:
        return 0
    if isinstance(value, (list, tuple, dict)):
        return len(value)
    return 1


def _yes_no(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, str):
        return "yes" if value.lower() in ("true", "yes", "1", "enabled") else "no"
    return "yes" if value else "no"


_SIMPLE_FORMATTERS: dict[str, Formatter] = {
    "timestamp": _map_each(format_timestamp),
    "bytes": _map_each(human_bytes),
    "bool": _yes_no,
    "count": _count,
}

_PARAM_FORMATTERS: dict[str, Callable[[str], Formatter]] = {
    "truncate": lambda arg: _truncate(int(arg)),
    "tag": _tag_value,
    "suffix": _suffix,
}


def build_formatter(name: str) -> Formatter:
    """포매터 이름으로 포매터 생성

    Args:
        name: "timestamp", "truncate:40", "tag:Name" 등

    Raises:
        ValueError: 알 수 없는 포매터 또는 잘못된 인자
    """
    if name in _SIMPLE_FORMATTERS:
        return _SIMPLE_FORMATTERS[name]
    base, sep, arg = name.partition(":")
    if sep and base in _PARAM_FORMATTERS and arg:
        return _PARAM_FORMATTERS[base](arg)
    raise ValueError(f"알 수 없는 포매터: {name!r}")


@lru_cache(maxsize=512)
def _compile(names: tuple[str, ...]) -> tuple[Formatter, ...]:
    return tuple(build_formatter(n) for n in names)


def format_value(value: Any, formatters: Iterable[str] = ()) -> str:
    """포매터를 순서대로 적용한 뒤 표시 문자열로 변환"""
    for func in _compile(tuple(formatters)):
        value = func(value)
    return to_display(value)


def build_row(kind: ResourceKind, item: Any) -> ResourceRow:
    """목록 항목 하나를 ResourceRow로 변환

    Args:
        kind: 리소스 종류
        item: 목록 응답의 항목 하나

    Returns:
        ResourceRow
    """
    from .types import ResourceRow

    columns = {col.label: format_value(extract(item, col.path), col.formatters) for col in kind.columns}
    key = to_display(extract(item, kind.key_path), empty="")
    return ResourceRow(kind=kind.id, key=key, columns=columns, raw=item)
