"""캐시 경로 유틸리티.

설정 파일과 캐시는 사용자 앱 디렉토리(``click.get_app_dir("awsnav")``)에 저장됩니다.
``AWSNAV_HOME`` 환경변수로 위치를 바꿀 수 있습니다 (테스트, 포터블 설치).

    {app_dir}/config.yaml        사용자 설정
    {app_dir}/cache/<category>/  카테고리별 캐시 (tls, logs 등)
"""

import os

import click

APP_NAME = "awsnav"
HOME_ENV = "AWSNAV_HOME"


def get_app_dir() -> str:
    """앱 디렉토리 경로 반환 (생성하지 않음)

    Returns:
        ``AWSNAV_HOME`` 또는 OS별 사용자 설정 디렉토리
    """
    override = os.environ.get(HOME_ENV)
    if override:
        return override
    return click.get_app_dir(APP_NAME)


def get_cache_dir(category: str = "") -> str:
    """캐시 디렉토리 경로 반환

    Args:
        category: 캐시 카테고리 (예: "tls", "logs")
                  빈 문자열이면 루트 캐시 디렉토리 반환

    Returns:
        캐시 디렉토리 절대 경로 (자동 생성됨)
    """
    root = os.path.join(get_app_dir(), "cache")
    cache_dir = os.path.join(root, category) if category else root

    # 디렉토리 자동 생성
    os.makedirs(cache_dir, exist_ok=True)
    return cache_dir


def get_cache_path(category: str, filename: str) -> str:
    """캐시 파일 경로 반환

    Args:
        category: 캐시 카테고리 (예: "tls")
        filename: 캐시 파일명 (예: "ca-bundle.pem")

    Returns:
        캐시 파일 절대 경로 (디렉토리 자동 생성됨)
    """
    cache_dir = get_cache_dir(category)
    return os.path.join(cache_dir, filename)
