"""
awsnav/core/tools/time/utils.py - 타임스탬프 정규화

서비스마다 제각각인 시간 표현을 하나의 표시 형식으로 맞춥니다.

지원 입력:
    - datetime 객체 (boto3 응답의 기본 형태, naive이면 UTC로 간주)
    - epoch 초 / epoch 밀리초 (int, float, 숫자 문자열)
    - ISO-8601 변형 ("2024-01-01T00:00:00Z", "...000+0000", "...+09:00" 등)
    - RFC 1123 ("Mon, 01 Jan 2024 00:00:00 GMT")

출력 형식: "2024-01-01 00:00:00 UTC"
"""

import re
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any

CANONICAL_FORMAT = "%Y-%m-%d %H:%M:%S UTC"

_CANONICAL_RE = re.compile(r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2} UTC$")
_EPOCH_RE = re.compile(r"^\d{9,13}(\.\d+)?$")
# "+0000" -> "+00:00"
_TZ_NO_COLON_RE = re.compile(r"([+-]\d{2})(\d{2})$")

# 이 값 이상이면 밀리초로 간주 (초 단위라면 5138년)
_MILLIS_THRESHOLD = 100_000_000_000


def _from_epoch(value: float) -> datetime:
    if abs(value) >= _MILLIS_THRESHOLD:
        value = value / 1000
    return datetime.fromtimestamp(value, tz=timezone.utc)


def _from_iso(text: str) -> datetime | None:
    candidate = text.strip()
    if candidate.endswith("Z") or candidate.endswith("z"):
        candidate = candidate[:-1] + "+00:00"
    candidate = _TZ_NO_COLON_RE.sub(r"\1:\2", candidate)
    try:
        return datetime.fromisoformat(candidate)
    except ValueError:
        pass

    # 소수점 자릿수가 3/6이 아닌 경우 등
    for fmt in ("%Y-%m-%dT%H:%M:%S.%f%z", "%Y-%m-%dT%H:%M:%S%z", "%Y-%m-%d %H:%M:%S%z"):
        try:
            return datetime.strptime(candidate, fmt)
        except ValueError:
            continue
    return None


def parse_timestamp(raw: Any) -> datetime | None:
    """다양한 시간 표현을 UTC datetime으로 변환

    Args:
        raw: 시간 값

    Returns:
        tz-aware UTC datetime. 해석할 수 없으면 None
    """
    if isinstance(raw, bool) or raw is None:
        return None

    dt: datetime | None = None
    if isinstance(raw, datetime):
        dt = raw
    elif isinstance(raw, (int, float)):
        try:
            dt = _from_epoch(float(raw))
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(raw, str):
        text = raw.strip()
        if not text:
            return None
        if _CANONICAL_RE.match(text):
            return datetime.strptime(text, CANONICAL_FORMAT).replace(tzinfo=timezone.utc)
        if _EPOCH_RE.match(text):
            try:
                dt = _from_epoch(float(text))
            except (OverflowError, OSError, ValueError):
                return None
        else:
            dt = _from_iso(text)
            if dt is None:
                try:
                    dt = parsedate_to_datetime(text)
                except (TypeError, ValueError, IndexError):
                    return None

    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_timestamp(raw: Any) -> str:
    """타임스탬프를 표시 형식으로 정규화

    이미 정규화된 문자열은 그대로 반환하며 (멱등),
    해석할 수 없는 입력은 실패 없이 문자열 그대로 통과시킵니다.

    Args:
        raw: 시간 값 (datetime, epoch 초/밀리초, ISO-8601 문자열 등)

    Returns:
        "YYYY-MM-DD HH:MM:SS UTC" 형식 문자열 또는 원본 문자열
    """
    if isinstance(raw, str) and _CANONICAL_RE.match(raw):
        return raw

    dt = parse_timestamp(raw)
    if dt is None:
        return raw if isinstance(raw, str) else str(raw)
    return dt.strftime(CANONICAL_FORMAT)
