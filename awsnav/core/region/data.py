"""
core/region/data.py - 리전 목록

EC2.describe_regions()로 계정에서 활성화된 리전을 조회하고,
실패하면 정적 목록으로 대체합니다.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from awsnav.core.exceptions import DispatchError
from awsnav.core.resource.types import OperationSpec

if TYPE_CHECKING:
    from awsnav.core.resource.dispatch import Dispatcher

logger = logging.getLogger(__name__)

# describe_regions 실패 시 사용하는 상용 리전 (옵트인 리전 포함)
FALLBACK_REGIONS: list[str] = [
    "af-south-1",
    "ap-east-1",
    "ap-northeast-1",
    "ap-northeast-2",
    "ap-northeast-3",
    "ap-south-1",
    "ap-south-2",
    "ap-southeast-1",
    "ap-southeast-2",
    "ap-southeast-3",
    "ap-southeast-4",
    "ca-central-1",
    "eu-central-1",
    "eu-central-2",
    "eu-north-1",
    "eu-south-1",
    "eu-south-2",
    "eu-west-1",
    "eu-west-2",
    "eu-west-3",
    "me-central-1",
    "me-south-1",
    "sa-east-1",
    "us-east-1",
    "us-east-2",
    "us-west-1",
    "us-west-2",
]

REGION_NAMES: dict[str, str] = {
    "af-south-1": "케이프타운",
    "ap-east-1": "홍콩",
    "ap-northeast-1": "도쿄",
    "ap-northeast-2": "서울",
    "ap-northeast-3": "오사카",
    "ap-south-1": "뭄바이",
    "ap-south-2": "하이데라바드",
    "ap-southeast-1": "싱가포르",
    "ap-southeast-2": "시드니",
    "ap-southeast-3": "자카르타",
    "ap-southeast-4": "멜버른",
    "ca-central-1": "캐나다 중부",
    "eu-central-1": "프랑크푸르트",
    "eu-central-2": "취리히",
    "eu-north-1": "스톡홀름",
    "eu-south-1": "밀라노",
    "eu-south-2": "스페인",
    "eu-west-1": "아일랜드",
    "eu-west-2": "런던",
    "eu-west-3": "파리",
    "me-central-1": "UAE",
    "me-south-1": "바레인",
    "sa-east-1": "상파울루",
    "us-east-1": "버지니아 북부",
    "us-east-2": "오하이오",
    "us-west-1": "캘리포니아 북부",
    "us-west-2": "오레곤",
}

DESCRIBE_REGIONS = OperationSpec(
    "ec2",
    "describe_regions",
    params={"Filters": [{"Name": "opt-in-status", "Values": ["opt-in-not-required", "opted-in"]}]},
)


def list_regions(
    dispatcher: Dispatcher,
    profile: str,
    region: str = "us-east-1",
    endpoint_url: str | None = None,
) -> list[str]:
    """활성화된 리전 목록 (정렬)

    Args:
        dispatcher: 디스패처
        profile: AWS 프로파일
        region: describe_regions를 호출할 리전
        endpoint_url: 엔드포인트 오버라이드

    Returns:
        리전 코드 리스트. 조회 실패 시 FALLBACK_REGIONS
    """
    try:
        response = dispatcher.invoke(profile, region, endpoint_url, DESCRIBE_REGIONS)
    except DispatchError as e:
        logger.warning(f"리전 목록 조회 실패, 기본 목록 사용: {e}")
        return list(FALLBACK_REGIONS)

    regions = sorted({r["RegionName"] for r in response.get("Regions", []) if r.get("RegionName")})
    return regions or list(FALLBACK_REGIONS)


def region_label(region: str) -> str:
    """표시용 리전 이름 ("ap-northeast-2 (서울)")"""
    name = REGION_NAMES.get(region)
    return f"{region} ({name})" if name else region
