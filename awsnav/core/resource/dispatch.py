"""
core/resource/dispatch.py - 범용 API 디스패치

OperationSpec을 실제 boto3 호출로 바꾸는 유일한 지점입니다.
서비스별 분기 없이 ``getattr(client, spec.operation)(**params)``로 호출하고,
실패는 모두 DispatchError 분류로 변환합니다.

재시도 정책 (분류별):
    ThrottlingError  지수 백오프, 최대 3회 시도
    TransportError   1회 재시도
    그 외            재시도 없음

액션 실행은 분류와 관계없이 1회만 시도합니다 (변경 작업의 중복 실행 방지).

Example:
    dispatcher = Dispatcher(transport, registry)

    raw = dispatcher.invoke("default", "ap-northeast-2", None, kind.list_spec, {})
    detail = dispatcher.describe_resource("ec2-instances", "i-0abc", "default", "ap-northeast-2")
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any

from botocore.exceptions import BotoCoreError, ClientError

from awsnav.core.exceptions import (
    ActionNotFoundError,
    DispatchError,
    MalformedResponseError,
    MissingBindingError,
    NotFoundError,
)
from awsnav.core.parallel.decorators import (
    DEFAULT_RETRY_CONFIG,
    RetryConfig,
    classify_error,
    max_attempts_for,
)
from awsnav.core.tools.time.utils import format_timestamp

from .extractor import extract, to_display
from .types import KEY_BINDING, Action, ActionOutcome, OperationSpec, ResourceKind, ResourceRow

if TYPE_CHECKING:
    from awsnav.core.transport import Transport

    from .registry import Registry

logger = logging.getLogger(__name__)

__all__ = ["Dispatcher", "format_timestamp"]

# boto3 호출 중 발생 가능한 예외 (그 외는 프로그래밍 오류로 그대로 전파)
_CALL_ERRORS = (BotoCoreError, ClientError, OSError, ValueError)

_CacheKey = tuple[str, str, str]


class Dispatcher:
    """선언적 작업 명세 실행기

    Args:
        transport: boto3 client 제공자
        registry: 리소스 종류 레지스트리
        retry_config: 재시도 설정
        sleep: 백오프 대기 함수 (테스트에서 교체)
    """

    def __init__(
        self,
        transport: Transport,
        registry: Registry,
        retry_config: RetryConfig | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.transport = transport
        self.registry = registry
        self.retry_config = retry_config or DEFAULT_RETRY_CONFIG
        self._sleep = sleep
        # (kind, profile, region) -> {key: raw}
        self._row_cache: dict[_CacheKey, dict[str, Any]] = {}
        self._cache_lock = threading.Lock()

    # =========================================================================
    # 단일 호출
    # =========================================================================

    def invoke(
        self,
        profile: str,
        region: str,
        endpoint_url: str | None,
        spec: OperationSpec,
        params: dict[str, Any] | None = None,
        retry: bool = True,
    ) -> dict[str, Any]:
        """외부 호출 1회 (분류별 재시도 포함)

        Args:
            profile: AWS 프로파일
            region: AWS 리전
            endpoint_url: 엔드포인트 오버라이드
            spec: 작업 명세
            params: 호출 파라미터 (정적 파라미터 위에 덮어씀)
            retry: False면 분류와 관계없이 1회만 시도

        Returns:
            응답 dict (ResponseMetadata 제외)

        Raises:
            DispatchError: 분류된 실패 (AuthError, ThrottlingError, NotFoundError,
                TransportError, MalformedResponseError, ServiceError)
        """
        call_params = {**spec.params, **(params or {})}
        attempt = 0

        while True:
            attempt += 1
            try:
                client = self.transport.client(spec.service, profile, region, endpoint_url)
                method = getattr(client, spec.operation, None)
                if method is None:
                    raise NotFoundError(
                        spec.service,
                        spec.operation,
                        error_code="UnknownOperation",
                        error_message=f"{spec.service} 클라이언트에 {spec.operation} 작업이 없습니다",
                    )
                response = method(**call_params)
            except _CALL_ERRORS as e:
                error = classify_error(e, spec.service, spec.operation)
                limit = max_attempts_for(error, self.retry_config) if retry else 1
                if attempt >= limit:
                    logger.debug(f"{spec.label} 실패 ({profile}/{region}): {error.error_code}")
                    raise error from e

                delay = self.retry_config.get_delay(attempt - 1)
                logger.debug(f"{spec.label} 재시도 {attempt}/{limit - 1}: {error.error_code} ({delay:.2f}초 후)")
                self._sleep(delay)
                continue

            if not isinstance(response, dict):
                raise MalformedResponseError(
                    spec.service,
                    spec.operation,
                    error_code="UnexpectedResponse",
                    error_message=f"dict 응답을 기대했으나 {type(response).__name__} 수신",
                )
            return {k: v for k, v in response.items() if k != "ResponseMetadata"}

    # =========================================================================
    # 상세 조회
    # =========================================================================

    def _resolve_kind(self, kind: ResourceKind | str) -> ResourceKind:
        if isinstance(kind, str):
            return self.registry.lookup(kind)
        return kind

    def describe_resource(
        self,
        kind: ResourceKind | str,
        key: str,
        profile: str,
        region: str,
        endpoint_url: str | None = None,
    ) -> Any:
        """리소스 상세 조회

        상세 조회 작업이 없는 종류는 가장 최근 목록 페이지에서 캐시된
        원본 값을 반환합니다 (축소된 상세 보기).

        Raises:
            NotFoundError: 상세 결과가 없거나 캐시된 항목도 없음
            DispatchError: 호출 실패
        """
        kind = self._resolve_kind(kind)
        spec = kind.describe_spec

        if spec is None or not spec.key_param:
            raw = self.cached_raw(kind.id, profile, region, key)
            if raw is None:
                raise NotFoundError(
                    kind.service,
                    kind.list_spec.operation,
                    error_code="NotCached",
                    error_message=f"{key}: 목록에서 조회된 적이 없는 리소스입니다",
                )
            return raw

        value: Any = [key] if spec.key_as_list else key
        response = self.invoke(profile, region, endpoint_url, spec, {spec.key_param: value})
        if not spec.result_path:
            return response

        result = extract(response, spec.result_path)
        if result is None:
            raise NotFoundError(
                spec.service,
                spec.operation,
                error_code="EmptyResult",
                error_message=f"{key}: 응답에 결과가 없습니다",
            )
        return result

    # =========================================================================
    # 액션 실행
    # =========================================================================

    @staticmethod
    def bind_params(action: Action, row: ResourceRow) -> dict[str, Any]:
        """행에서 액션 파라미터 바인딩

        Raises:
            MissingBindingError: 값을 찾을 수 없는 파라미터가 있음
        """
        params: dict[str, Any] = {}
        missing: list[str] = []
        for binding in action.bindings:
            value = row.key if binding.path == KEY_BINDING else extract(row.raw, binding.path)
            if value is None or value == "":
                missing.append(binding.param)
                continue
            params[binding.param] = [value] if binding.as_list else value

        if missing:
            raise MissingBindingError(action.id, missing)
        return params

    def execute_action(
        self,
        kind: ResourceKind | str,
        action_id: str,
        row: ResourceRow,
        profile: str,
        region: str,
        endpoint_url: str | None = None,
    ) -> ActionOutcome:
        """액션 1회 실행 (재시도 없음)

        바인딩 누락과 호출 실패는 예외 대신 ActionOutcome.error로 반환합니다.

        Raises:
            ActionNotFoundError: 해당 종류에 없는 액션
        """
        kind = self._resolve_kind(kind)
        action = kind.get_action(action_id)
        if action is None:
            raise ActionNotFoundError(kind.id, action_id)

        try:
            params = self.bind_params(action, row)
        except MissingBindingError as e:
            logger.warning(f"[{kind.id}] {e}")
            return ActionOutcome(kind.id, action.id, row.key, success=False, error=e)

        try:
            response = self.invoke(profile, region, endpoint_url, action.spec, params, retry=False)
        except DispatchError as e:
            logger.warning(f"[{kind.id}] {action.id} 실패 ({row.key}): {e}")
            return ActionOutcome(kind.id, action.id, row.key, success=False, error=e)

        message = None
        if action.message_path:
            message = to_display(extract(response, action.message_path), empty="") or None
        logger.info(f"[{kind.id}] {action.id} 완료 ({row.key})")
        return ActionOutcome(kind.id, action.id, row.key, success=True, message=message, raw=response)

    # =========================================================================
    # 목록 캐시 (상세 조회 대체용)
    # =========================================================================

    def remember_rows(
        self,
        kind_id: str,
        profile: str,
        region: str,
        rows: Iterable[ResourceRow],
        replace: bool = False,
        is_cancelled: Callable[[], bool] | None = None,
    ) -> None:
        """목록 페이지의 원본 값 기록

        Args:
            replace: True면 해당 (종류, 프로파일, 리전)의 기존 캐시를 비우고 기록
            is_cancelled: 대체된 조회면 True. 캐시 잠금 안에서 확인하며 True면 기록하지 않음
        """
        cache_key = (kind_id, profile, region)
        with self._cache_lock:
            if is_cancelled is not None and is_cancelled():
                return
            if replace or cache_key not in self._row_cache:
                self._row_cache[cache_key] = {}
            entries = self._row_cache[cache_key]
            for row in rows:
                if row.key:
                    entries[row.key] = row.raw

    def cached_raw(self, kind_id: str, profile: str, region: str, key: str) -> Any | None:
        with self._cache_lock:
            return self._row_cache.get((kind_id, profile, region), {}).get(key)
