"""
core/transport/trust.py - 사용자 지정 CA 번들 로드

AWS_CA_BUNDLE 또는 SSL_CERT_FILE로 지정된 PEM 번들에서
검증에 실패하는 인증서를 재귀 이분 탐색으로 걸러냅니다.

전체 번들이 유효하면 검증 1회로 끝나며, 실패하면 절반씩 나누어
유효한 부분만 모읍니다. 남은 인증서는 기본 신뢰 저장소에 더해져 캐시 디렉토리에 기록됩니다.

Note:
    개별적으로 실패한 인증서를 제거하면 그 인증서에 의존하던 체인이
    끊어질 수 있으므로, 제거가 발생하면 항상 경고를 남깁니다.
"""

from __future__ import annotations

import logging
import os
import re
import ssl
from collections.abc import Callable, Mapping, Sequence
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

CA_BUNDLE_ENV_VARS = ("AWS_CA_BUNDLE", "SSL_CERT_FILE")

_PEM_BLOCK_RE = re.compile(
    r"-----BEGIN CERTIFICATE-----\s+.*?-----END CERTIFICATE-----",
    re.DOTALL,
)


def bisect_valid(items: Sequence[T], is_valid_group: Callable[[list[T]], bool]) -> list[T]:
    """그룹 검증을 이분 탐색으로 적용해 유효한 최대 부분열 반환

    전체를 먼저 검증하고, 실패하면 절반으로 나누어 재귀합니다.
    원래 순서는 유지됩니다.

    Args:
        items: 검증 대상 항목
        is_valid_group: 항목 묶음 전체가 유효한지 판정하는 함수

    Returns:
        유효한 항목 리스트 (순서 유지)

    Example:
        >>> bisect_valid([1, 2, -3, 4], lambda g: all(x > 0 for x in g))
        [1, 2, 4]
    """
    group = list(items)
    if not group:
        return []
    if is_valid_group(group):
        return group
    if len(group) == 1:
        return []

    mid = len(group) // 2
    return bisect_valid(group[:mid], is_valid_group) + bisect_valid(group[mid:], is_valid_group)


def split_pem(text: str) -> list[str]:
    """PEM 번들을 인증서 블록 단위로 분리"""
    return [m.group(0).strip() + "\n" for m in _PEM_BLOCK_RE.finditer(text)]


def is_loadable(blocks: list[str]) -> bool:
    """인증서 묶음을 TLS 컨텍스트에 신뢰 루트로 올릴 수 있는지 확인"""
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    try:
        context.load_verify_locations(cadata="".join(blocks))
    except (ssl.SSLError, ValueError):
        return False
    return True


def resolve_ca_bundle_path(environ: Mapping[str, str] | None = None) -> str | None:
    """환경 변수에서 CA 번들 경로 결정 (AWS_CA_BUNDLE 우선)"""
    env = os.environ if environ is None else environ
    for name in CA_BUNDLE_ENV_VARS:
        value = env.get(name, "").strip()
        if value:
            return value
    return None


def default_roots_path() -> str | None:
    """botocore 기본 신뢰 저장소 경로 (certifi가 있으면 certifi 번들)"""
    from botocore.httpsession import get_cert_path

    path = get_cert_path(True)
    return path if path and os.path.isfile(path) else None


def _read_pem(path: str, label: str) -> str | None:
    try:
        with open(path, encoding="utf-8") as f:
            return f.read()
    except UnicodeDecodeError as e:
        logger.warning(f"{label}이(가) 올바른 UTF-8이 아니어서 무시합니다 ({path}): {e}")
    except OSError as e:
        logger.warning(f"{label}을(를) 읽을 수 없습니다 ({path}): {e}")
    return None


def _write_bundle(text: str) -> str | None:
    """병합 번들을 캐시 디렉토리에 원자적으로 기록 (실패 시 None)"""
    from awsnav.core.tools.cache import get_cache_path

    try:
        bundle_path = get_cache_path("tls", "ca-bundle.pem")
        tmp_path = f"{bundle_path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            f.write(text)
        os.replace(tmp_path, bundle_path)
    except OSError as e:
        logger.warning(f"CA 번들을 캐시에 기록할 수 없습니다: {e}")
        return None
    return bundle_path


def load_ca_bundle(
    environ: Mapping[str, str] | None = None,
    validator: Callable[[list[str]], bool] = is_loadable,
    default_roots: Callable[[], str | None] = default_roots_path,
) -> str | None:
    """CA 번들 경로를 결정하고 기본 루트에 유효한 인증서를 더한 번들 경로 반환

    사용자 지정 인증서는 기본 신뢰 저장소를 대체하지 않고 추가됩니다.
    병합 번들은 ``cache/tls/ca-bundle.pem``에 기록됩니다.

    Args:
        environ: 환경 변수 (None이면 os.environ)
        validator: 인증서 묶음 검증 함수
        default_roots: 기본 루트 번들 경로를 돌려주는 함수

    Returns:
        사용할 번들 경로. 지정되지 않았거나 쓸 수 있는 인증서가 없으면 None
        (None이면 botocore 기본 신뢰 저장소 사용)
    """
    path = resolve_ca_bundle_path(environ)
    if path is None:
        return None

    text = _read_pem(path, "CA 번들")
    if text is None:
        return None

    blocks = split_pem(text)
    if not blocks:
        logger.warning(f"CA 번들에 인증서가 없습니다: {path}")
        return None

    valid = bisect_valid(blocks, validator)
    dropped = len(blocks) - len(valid)
    if not valid:
        logger.warning(f"CA 번들의 인증서 {dropped}개가 모두 유효하지 않아 기본 신뢰 저장소를 사용합니다: {path}")
        return None

    roots = ""
    roots_path = default_roots()
    if roots_path:
        roots = _read_pem(roots_path, "기본 신뢰 저장소") or ""
        if roots and not roots.endswith("\n"):
            roots += "\n"

    bundle_path = _write_bundle(roots + "".join(valid))
    if bundle_path is None:
        if dropped:
            logger.warning(f"필터링된 CA 번들을 쓸 수 없어 기본 신뢰 저장소를 사용합니다: {path}")
            return None
        # 모두 유효하면 원본만이라도 사용 (기본 루트는 빠짐)
        return path

    if dropped:
        logger.warning(
            f"CA 번들에서 유효하지 않은 인증서 {dropped}개를 제외했습니다 ({path}). "
            "해당 인증서에 의존하는 체인은 검증에 실패할 수 있습니다."
        )
    logger.debug(f"CA 번들 로드: {path} ({len(valid)}개 + 기본 루트)")
    return bundle_path
