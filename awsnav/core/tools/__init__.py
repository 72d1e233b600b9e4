# awsnav/core/tools - 공용 유틸리티
"""
공용 유틸리티 (시간 포맷, 캐시 경로)
"""
