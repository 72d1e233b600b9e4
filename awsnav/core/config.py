"""
core/config.py - 사용자 설정 (프로파일/리전/최근 리소스)

``{app_dir}/config.yaml``에 마지막 사용 프로파일, 리전, 리소스 종류와
최근 사용 리전(최대 6개, 최신순)을 저장합니다.

유효 프로파일/리전 결정 순서:
    1. 명시적 지정 (CLI 옵션 등)
    2. 환경 변수 (AWS_PROFILE / AWS_REGION, AWS_DEFAULT_REGION)
    3. 저장된 설정
    4. 기본값 ("default" / "us-east-1")

Example:
    store = ConfigStore()
    settings = store.load()
    region = store.effective_region(settings, override=None)
    store.remember(region="ap-northeast-2", resource="ec2-instances")
"""

from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Mapping
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from awsnav.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_PROFILE = "default"
DEFAULT_REGION = "us-east-1"
MAX_RECENT_REGIONS = 6

PROFILE_ENV_VARS = ("AWS_PROFILE",)
REGION_ENV_VARS = ("AWS_REGION", "AWS_DEFAULT_REGION")


@dataclass
class Settings:
    """저장되는 사용자 설정"""

    profile: str | None = None
    region: str | None = None
    last_resource: str | None = None
    recent_regions: list[str] = field(default_factory=list)


_SETTINGS_FIELDS = {f.name for f in fields(Settings)}


def _from_env(names: tuple[str, ...], environ: Mapping[str, str]) -> str | None:
    for name in names:
        value = environ.get(name, "").strip()
        if value:
            return value
    return None


class ConfigStore:
    """YAML 설정 파일 저장소

    Args:
        path: 설정 파일 경로 (None이면 앱 디렉토리의 config.yaml)
        environ: 환경 변수 (None이면 os.environ)
    """

    def __init__(self, path: str | Path | None = None, environ: Mapping[str, str] | None = None):
        if path is None:
            from awsnav.core.tools.cache import get_app_dir

            path = Path(get_app_dir()) / "config.yaml"
        self.path = Path(path)
        self.environ = os.environ if environ is None else environ

    # =========================================================================
    # 로드/저장
    # =========================================================================

    def load(self) -> Settings:
        """설정 로드

        파일이 없거나 손상된 경우 기본 설정을 반환합니다.
        알 수 없는 키는 무시합니다.
        """
        if not self.path.exists():
            return Settings()

        try:
            data = yaml.safe_load(self.path.read_text(encoding="utf-8"))
        except (yaml.YAMLError, UnicodeDecodeError, OSError) as e:
            logger.warning(f"설정 파일을 읽을 수 없어 기본값을 사용합니다 ({self.path}): {e}")
            return Settings()

        if not isinstance(data, dict):
            return Settings()

        values: dict[str, Any] = {k: v for k, v in data.items() if k in _SETTINGS_FIELDS}
        recent = values.get("recent_regions")
        values["recent_regions"] = [str(r) for r in recent if r] if isinstance(recent, list) else []
        for key in ("profile", "region", "last_resource"):
            if values.get(key) is not None:
                values[key] = str(values[key])
        return Settings(**values)

    def save(self, settings: Settings) -> None:
        """원자적으로 저장 (임시 파일에 쓴 뒤 rename)

        Raises:
            ConfigError: 저장 실패
        """
        content = yaml.safe_dump(asdict(settings), allow_unicode=True, sort_keys=False)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp", prefix=".config_")
            try:
                with open(fd, "w", encoding="utf-8") as f:
                    f.write(content)
                Path(tmp_path).replace(self.path)
            except BaseException:
                Path(tmp_path).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise ConfigError(str(self.path), "설정 파일 저장 실패", e) from e

    # =========================================================================
    # 유효 값 결정
    # =========================================================================

    def effective_profile(self, settings: Settings, override: str | None = None) -> str:
        return override or _from_env(PROFILE_ENV_VARS, self.environ) or settings.profile or DEFAULT_PROFILE

    def effective_region(self, settings: Settings, override: str | None = None) -> str:
        return override or _from_env(REGION_ENV_VARS, self.environ) or settings.region or DEFAULT_REGION

    # =========================================================================
    # 갱신
    # =========================================================================

    def remember(
        self,
        profile: str | None = None,
        region: str | None = None,
        resource: str | None = None,
    ) -> Settings:
        """마지막 사용 값 기록 후 저장

        Returns:
            저장된 설정
        """
        settings = self.load()
        if profile:
            settings.profile = profile
        if region:
            settings.region = region
            settings.recent_regions = add_recent_region(settings.recent_regions, region)
        if resource:
            settings.last_resource = resource
        self.save(settings)
        return settings


def add_recent_region(recent: list[str], region: str, limit: int = MAX_RECENT_REGIONS) -> list[str]:
    """최근 리전 목록 맨 앞에 추가 (중복 제거, 최대 limit개)"""
    return [region, *(r for r in recent if r != region)][:limit]
