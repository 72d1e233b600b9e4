"""
awsnav - AWS 리소스 브라우저

프로파일/리전별 AWS 리소스를 조회, 필터링하고 액션을 실행하는 터미널 도구입니다.
"""

__version__ = "0.3.0"
