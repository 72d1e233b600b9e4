"""
core/transport - AWS 전송 계층

주요 구성 요소:
- Transport / TransportConfig: 타임아웃과 CA 번들이 적용된 boto3 client 캐시
- bisect_valid / load_ca_bundle: CA 번들 인증서 필터링
"""

from .client import Transport, TransportConfig
from .trust import bisect_valid, load_ca_bundle, split_pem

__all__: list[str] = [
    "Transport",
    "TransportConfig",
    "bisect_valid",
    "load_ca_bundle",
    "split_pem",
]
