"""
core/auth - AWS 프로파일 조회

Usage:
    from awsnav.core.auth import list_profiles
"""

from .profiles import list_profiles

__all__: list[str] = ["list_profiles"]
