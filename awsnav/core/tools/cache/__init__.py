"""캐시 경로 유틸리티.

Usage:
    from awsnav.core.tools.cache import get_app_dir, get_cache_path
"""

from .path import get_app_dir, get_cache_dir, get_cache_path

__all__ = ["get_app_dir", "get_cache_dir", "get_cache_path"]
