"""
core/transport/client.py - boto3 세션/클라이언트 제공자

시작 시 한 번 명시적으로 생성되어 Dispatcher에 주입되는 전송 계층입니다.
타임아웃, 연결 풀, CA 번들이 적용된 boto3 client를 (프로파일, 리전, 서비스,
엔드포인트) 단위로 캐시합니다.

botocore 자체 재시도는 1회로 제한합니다. 재시도 정책은 Dispatcher에만 있습니다.

Example:
    from awsnav.core.transport import Transport, TransportConfig

    transport = Transport.from_env()
    ec2 = transport.client("ec2", profile="default", region="ap-northeast-2")
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, cast

import boto3
from botocore.config import Config

logger = logging.getLogger(__name__)

DEFAULT_CONNECT_TIMEOUT = 10  # 초
DEFAULT_READ_TIMEOUT = 30  # 초
DEFAULT_MAX_POOL_CONNECTIONS = 25  # 새로고침 워커 수 이상 권장

DEFAULT_PROFILE = "default"


@dataclass
class TransportConfig:
    """전송 계층 설정

    Attributes:
        connect_timeout: 연결 타임아웃 (초)
        read_timeout: 읽기 타임아웃 (초)
        max_pool_connections: HTTP 연결 풀 크기
        ca_bundle: CA 번들 경로 (None이면 botocore 기본 신뢰 저장소)
    """

    connect_timeout: int = DEFAULT_CONNECT_TIMEOUT
    read_timeout: int = DEFAULT_READ_TIMEOUT
    max_pool_connections: int = DEFAULT_MAX_POOL_CONNECTIONS
    ca_bundle: str | None = None

    def to_botocore(self) -> Config:
        return Config(
            retries={"max_attempts": 1, "mode": "standard"},  # pyright: ignore[reportArgumentType]
            connect_timeout=self.connect_timeout,
            read_timeout=self.read_timeout,
            max_pool_connections=self.max_pool_connections,
        )


class Transport:
    """boto3 세션/클라이언트 캐시

    boto3 Session은 여러 스레드에서 동시에 client를 만들면 안전하지 않으므로
    생성은 잠금 안에서 수행합니다. 생성된 client는 스레드 간 공유 가능합니다.
    """

    def __init__(self, config: TransportConfig | None = None):
        self.config = config or TransportConfig()
        self._botocore_config = self.config.to_botocore()
        self._sessions: dict[str, boto3.Session] = {}
        self._clients: dict[tuple[str, str, str, str | None], Any] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_env(cls, **kwargs: Any) -> Transport:
        """환경 변수의 CA 번들을 반영해 생성

        Args:
            **kwargs: TransportConfig 필드 오버라이드
        """
        from .trust import load_ca_bundle

        kwargs.setdefault("ca_bundle", load_ca_bundle())
        return cls(TransportConfig(**kwargs))

    def _create_session(self, profile: str) -> boto3.Session:
        # 설정 파일 없이 환경 변수 자격 증명만 있는 경우
        if profile == DEFAULT_PROFILE and DEFAULT_PROFILE not in boto3.Session().available_profiles:
            return boto3.Session()
        return boto3.Session(profile_name=profile)

    def session(self, profile: str) -> boto3.Session:
        """프로파일별 boto3 Session (캐시)

        Raises:
            botocore.exceptions.ProfileNotFound: 존재하지 않는 프로파일
        """
        with self._lock:
            session = self._sessions.get(profile)
            if session is None:
                session = self._create_session(profile)
                self._sessions[profile] = session
                logger.debug(f"세션 생성: {profile}")
            return session

    def client(
        self,
        service: str,
        profile: str,
        region: str,
        endpoint_url: str | None = None,
    ) -> Any:
        """설정이 적용된 boto3 client (캐시)

        Args:
            service: AWS 서비스 이름 (ec2, s3, iam 등)
            profile: AWS 프로파일
            region: AWS 리전
            endpoint_url: 엔드포인트 오버라이드 (LocalStack 등)

        Returns:
            boto3 client
        """
        key = (profile, region, service, endpoint_url)
        client = self._clients.get(key)
        if client is not None:
            return client

        session = self.session(profile)
        with self._lock:
            client = self._clients.get(key)
            if client is None:
                # boto3-stubs는 Literal 서비스명을 요구
                client = session.client(  # pyright: ignore[reportCallIssue]
                    cast(Any, service),
                    region_name=region,
                    endpoint_url=endpoint_url,
                    config=self._botocore_config,
                    verify=self.config.ca_bundle,
                )
                self._clients[key] = client
                logger.debug(f"클라이언트 생성: {service} ({profile}/{region})")
            return client

    def clear(self) -> None:
        """세션/클라이언트 캐시 초기화 (자격 증명 갱신 후 등)"""
        with self._lock:
            self._sessions.clear()
            self._clients.clear()
