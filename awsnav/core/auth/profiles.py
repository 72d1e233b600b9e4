"""
core/auth/profiles.py - AWS 프로파일 목록

~/.aws/config, ~/.aws/credentials에 정의된 프로파일을 조회합니다.
"""

from __future__ import annotations

import logging

import boto3
from botocore.exceptions import BotoCoreError

logger = logging.getLogger(__name__)

DEFAULT_PROFILE = "default"


def list_profiles() -> list[str]:
    """사용 가능한 프로파일 목록 (정렬, 항상 "default" 포함)

    설정 파일을 해석할 수 없으면 ["default"]만 반환합니다.
    """
    try:
        profiles = set(boto3.Session().available_profiles)
    except BotoCoreError as e:
        logger.warning(f"프로파일 목록 조회 실패: {e}")
        profiles = set()

    profiles.add(DEFAULT_PROFILE)
    return sorted(profiles)
