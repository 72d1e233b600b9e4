"""
tests/core/transport/test_transport_client.py - core/transport/client.py 테스트
"""

from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ProfileNotFound

from awsnav.core.transport import Transport, TransportConfig


class TestTransportConfig:
    """TransportConfig 테스트"""

    def test_default_values(self):
        config = TransportConfig()

        assert config.connect_timeout == 10
        assert config.read_timeout == 30
        assert config.max_pool_connections == 25
        assert config.ca_bundle is None

    def test_botocore_config(self):
        boto_config = TransportConfig(connect_timeout=3, read_timeout=7).to_botocore()

        assert boto_config.connect_timeout == 3
        assert boto_config.read_timeout == 7
        assert boto_config.max_pool_connections == 25
        assert boto_config.retries == {"max_attempts": 1, "mode": "standard"}


class TestTransport:
    """Transport 테스트"""

    def test_client_cached_per_tuple(self):
        transport = Transport()

        first = transport.client("sqs", "default", "ap-northeast-2")
        second = transport.client("sqs", "default", "ap-northeast-2")
        other_region = transport.client("sqs", "default", "us-west-2")

        assert first is second
        assert first is not other_region
        assert other_region.meta.region_name == "us-west-2"

    def test_endpoint_override(self):
        transport = Transport()

        client = transport.client("s3", "default", "us-east-1", endpoint_url="http://localhost:4566")

        assert client.meta.endpoint_url == "http://localhost:4566"
        assert client is not transport.client("s3", "default", "us-east-1")

    def test_default_profile_without_config_file(self):
        """설정 파일에 default가 없어도 환경 변수 자격 증명으로 세션 생성"""
        session = Transport().session("default")

        assert session.get_credentials().access_key == "testing"

    def test_unknown_profile(self):
        with pytest.raises(ProfileNotFound):
            Transport().session("does-not-exist")

    def test_named_profile(self, tmp_path, monkeypatch):
        config_file = tmp_path / "named-config"
        config_file.write_text("[profile dev]\nregion = eu-west-1\n", encoding="utf-8")
        monkeypatch.setenv("AWS_CONFIG_FILE", str(config_file))

        session = Transport().session("dev")

        assert session.profile_name == "dev"
        assert session.region_name == "eu-west-1"

    def test_client_receives_config_and_bundle(self):
        transport = Transport(TransportConfig(ca_bundle="/tmp/bundle.pem"))
        fake_session = MagicMock()
        transport._sessions["default"] = fake_session

        transport.client("ec2", "default", "ap-northeast-2")

        kwargs = fake_session.client.call_args.kwargs
        assert kwargs["verify"] == "/tmp/bundle.pem"
        assert kwargs["region_name"] == "ap-northeast-2"
        assert kwargs["config"].read_timeout == 30

    def test_clear(self):
        transport = Transport()
        first = transport.client("sqs", "default", "us-east-1")

        transport.clear()

        assert transport.client("sqs", "default", "us-east-1") is not first

    def test_from_env_without_bundle(self):
        assert Transport.from_env().config.ca_bundle is None

    def test_from_env_override(self):
        transport = Transport.from_env(ca_bundle="/custom.pem", read_timeout=5)

        assert transport.config.ca_bundle == "/custom.pem"
        assert transport.config.read_timeout == 5

    def test_from_env_missing_bundle_file(self, tmp_path, monkeypatch):
        monkeypatch.setenv("AWS_CA_BUNDLE", str(tmp_path / "missing.pem"))

        assert Transport.from_env().config.ca_bundle is None

    def test_from_env_invalid_utf8_bundle(self, tmp_path, monkeypatch):
        path = tmp_path / "binary.pem"
        path.write_bytes(b"\xff\xfe-----BEGIN CERTIFICATE-----\nAAA\n-----END CERTIFICATE-----\n")
        monkeypatch.setenv("AWS_CA_BUNDLE", str(path))

        assert Transport.from_env().config.ca_bundle is None
