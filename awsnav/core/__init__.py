# awsnav/core/__init__.py
"""
core - 리소스 디스패치 엔진

아키텍처:
    core/
    ├── resource/       # 레지스트리, 필드 추출, 디스패치, 페처, 액션
    ├── parallel/       # 재시도 정책, 백그라운드 새로고침 코디네이터
    ├── transport/      # boto3 클라이언트 생성 (타임아웃, CA 번들)
    ├── auth/           # 프로파일/리전 목록
    ├── region/         # 리전 데이터
    ├── tools/          # 시간/캐시 경로 유틸리티
    ├── config.py       # 사용자 설정 (YAML)
    └── exceptions.py   # 통합 예외 계층

Usage:
    from awsnav.core.resource import default_registry, Dispatcher, Fetcher
    from awsnav.core.transport import Transport

    registry = default_registry()
    dispatcher = Dispatcher(Transport.from_env(), registry)
    fetcher = Fetcher(dispatcher, registry)
"""
