"""
tests/core/parallel/test_parallel_decorators.py - core/parallel/decorators.py 테스트
"""

import pytest
from botocore.exceptions import (
    ConnectTimeoutError,
    EndpointConnectionError,
    NoCredentialsError,
    ProfileNotFound,
    UnknownServiceError,
)
from botocore.parsers import ResponseParserError
from conftest import create_mock_client_error

from awsnav.core.exceptions import (
    AuthError,
    MalformedResponseError,
    NotFoundError,
    ServiceError,
    ThrottlingError,
    TransportError,
)
from awsnav.core.parallel.decorators import (
    DEFAULT_RETRY_CONFIG,
    RetryConfig,
    classify_error,
    get_error_code,
    max_attempts_for,
)


class TestRetryConfig:
    """RetryConfig 테스트"""

    def test_default_values(self):
        """기본값 확인"""
        config = RetryConfig()

        assert config.throttle_attempts == 3
        assert config.transport_attempts == 2
        assert config.base_delay == 0.5
        assert config.jitter is True

    def test_get_delay_exponential_no_jitter(self):
        """지수 백오프 (jitter 없음)"""
        config = RetryConfig(base_delay=1.0, exponential_base=2.0, max_delay=100.0, jitter=False)

        assert config.get_delay(0) == 1.0
        assert config.get_delay(1) == 2.0
        assert config.get_delay(3) == 8.0

    def test_get_delay_capped(self):
        """최대 대기 시간 제한"""
        config = RetryConfig(base_delay=1.0, max_delay=3.0, jitter=False)

        assert config.get_delay(10) == 3.0

    def test_get_delay_with_jitter_in_range(self):
        """jitter 적용 시 [0, delay] 범위"""
        config = RetryConfig(base_delay=1.0, jitter=True)

        for _ in range(20):
            assert 0 <= config.get_delay(2) <= 4.0

    def test_default_instance(self):
        assert isinstance(DEFAULT_RETRY_CONFIG, RetryConfig)


class TestGetErrorCode:
    """get_error_code 테스트"""

    def test_client_error(self):
        assert get_error_code(create_mock_client_error("AccessDenied")) == "AccessDenied"

    def test_other_exception_uses_class_name(self):
        assert get_error_code(ValueError("bad")) == "ValueError"


class TestClassifyError:
    """classify_error 테스트"""

    @pytest.mark.parametrize(
        "code,expected",
        [
            ("ExpiredToken", AuthError),
            ("InvalidClientTokenId", AuthError),
            ("ThrottlingException", ThrottlingError),
            ("RequestLimitExceeded", ThrottlingError),
            ("ResourceNotFoundException", NotFoundError),
            ("InvalidVolume.NotFound", NotFoundError),
            ("ServiceUnavailable", TransportError),
            ("AccessDenied", ServiceError),
            ("ValidationException", ServiceError),
        ],
    )
    def test_client_error_codes(self, code, expected):
        error = classify_error(create_mock_client_error(code), "ec2", "describe_instances")

        assert type(error) is expected
        assert error.error_code == code
        assert error.service == "ec2"
        assert error.operation == "describe_instances"

    def test_status_code_fallback(self):
        throttled = classify_error(create_mock_client_error("Weird", status_code=429), "s3", "list_buckets")
        missing = classify_error(create_mock_client_error("Odd", status_code=404), "s3", "list_buckets")

        assert isinstance(throttled, ThrottlingError)
        assert isinstance(missing, NotFoundError)

    def test_credentials_errors(self):
        assert isinstance(classify_error(NoCredentialsError(), "ec2", "op"), AuthError)
        assert isinstance(classify_error(ProfileNotFound(profile="x"), "ec2", "op"), AuthError)

    def test_network_errors(self):
        assert isinstance(classify_error(EndpointConnectionError(endpoint_url="https://x"), "ec2", "op"), TransportError)
        assert isinstance(classify_error(ConnectTimeoutError(endpoint_url="https://x"), "ec2", "op"), TransportError)

    def test_parse_errors(self):
        assert isinstance(classify_error(ResponseParserError("bad xml"), "ec2", "op"), MalformedResponseError)

    def test_unknown_service(self):
        error = UnknownServiceError(service_name="nope", known_service_names="ec2, s3")
        assert isinstance(classify_error(error, "nope", "op"), NotFoundError)

    def test_unknown_exception_is_service_error(self):
        assert isinstance(classify_error(RuntimeError("boom"), "ec2", "op"), ServiceError)

    def test_cause_preserved(self):
        original = create_mock_client_error("AccessDenied", "no")
        error = classify_error(original, "ec2", "op")

        assert error.cause is original
        assert error.error_message == "no"

    def test_already_classified_passthrough(self):
        error = AuthError("ec2", "op", error_code="ExpiredToken")
        assert classify_error(error, "s3", "other") is error


class TestMaxAttemptsFor:
    """max_attempts_for 테스트"""

    def test_per_category(self):
        config = RetryConfig()

        assert max_attempts_for(ThrottlingError("s", "o"), config) == 3
        assert max_attempts_for(TransportError("s", "o"), config) == 2
        assert max_attempts_for(AuthError("s", "o"), config) == 1
        assert max_attempts_for(ServiceError("s", "o"), config) == 1

    def test_at_least_one(self):
        config = RetryConfig(throttle_attempts=0)
        assert max_attempts_for(ThrottlingError("s", "o"), config) == 1
