"""
tests/integration/test_moto_dispatch.py - moto 기반 종단 간 테스트

실제 Transport(boto3) → Dispatcher → Fetcher/ActionExecutor 경로를
moto 모의 AWS에 대해 실행합니다.
"""

from dataclasses import replace

import boto3
import pytest
from moto import mock_aws

from awsnav.core.exceptions import NotFoundError
from awsnav.core.resource.actions import ActionExecutor
from awsnav.core.resource.catalog import EC2_INSTANCES
from awsnav.core.resource.dispatch import Dispatcher
from awsnav.core.resource.fetcher import Fetcher
from awsnav.core.resource.registry import Registry, default_registry
from awsnav.core.resource.types import FetchRequest, FetchState, Pagination, ResourceFilter
from awsnav.core.transport import Transport

pytestmark = pytest.mark.integration

PROFILE = "default"
REGION = "ap-northeast-2"
AMI_ID = "ami-12c6146b"


@pytest.fixture
def aws():
    with mock_aws():
        yield


@pytest.fixture
def engine(aws):
    """실제 전송 계층으로 조립한 디스패처/조회기/실행기"""
    registry = default_registry()
    dispatcher = Dispatcher(Transport(), registry, sleep=lambda _: None)
    return dispatcher, Fetcher(dispatcher, registry), ActionExecutor(dispatcher, registry)


def _fetch(fetcher, kind_id, **kwargs):
    return fetcher.fetch_paginated(FetchRequest(kind_id=kind_id, profile=PROFILE, region=REGION, **kwargs))


def _run_instance(ec2, name):
    response = ec2.run_instances(
        ImageId=AMI_ID,
        MinCount=1,
        MaxCount=1,
        InstanceType="t3.micro",
        TagSpecifications=[{"ResourceType": "instance", "Tags": [{"Key": "Name", "Value": name}]}],
    )
    return response["Instances"][0]["InstanceId"]


class TestS3:
    """S3 버킷 (상세 조회 작업 없음)"""

    def test_list_describe_delete(self, engine):
        dispatcher, fetcher, executor = engine
        s3 = boto3.client("s3", region_name=REGION)
        for name in ("alpha-logs", "beta-assets"):
            s3.create_bucket(Bucket=name, CreateBucketConfiguration={"LocationConstraint": REGION})

        result = _fetch(fetcher, "s3-buckets")

        assert result.ok
        assert sorted(r.key for r in result.rows) == ["alpha-logs", "beta-assets"]
        assert dispatcher.describe_resource("s3-buckets", "beta-assets", PROFILE, REGION)["Name"] == "beta-assets"

        row = next(r for r in result.rows if r.key == "alpha-logs")
        outcome = executor.execute("s3-buckets", "delete", row, PROFILE, REGION)

        assert outcome.success
        assert [b["Name"] for b in s3.list_buckets()["Buckets"]] == ["beta-assets"]


class TestEC2:
    """EC2 인스턴스"""

    def test_list_with_name_tag(self, engine):
        _, fetcher, _ = engine
        ec2 = boto3.client("ec2", region_name=REGION)
        instance_id = _run_instance(ec2, "web-1")

        result = _fetch(fetcher, "ec2-instances")

        assert [r.key for r in result.rows] == [instance_id]
        row = result.rows[0]
        assert row.columns["Name"] == "web-1"
        assert row.columns["State"] == "running"
        assert row.columns["Launched"].endswith(" UTC")

    def test_real_pagination(self, aws):
        registry = Registry()
        small_pages = replace(
            EC2_INSTANCES,
            list_spec=replace(EC2_INSTANCES.list_spec, pagination=Pagination("NextToken", "NextToken", "MaxResults", 2)),
        )
        registry.register(small_pages)
        dispatcher = Dispatcher(Transport(), registry)
        fetcher = Fetcher(dispatcher, registry)
        ec2 = boto3.client("ec2", region_name=REGION)
        instance_ids = [_run_instance(ec2, f"node-{i}") for i in range(5)]

        result = _fetch(fetcher, "ec2-instances")

        assert result.state == FetchState.DONE
        assert result.pages == 3
        assert sorted(r.key for r in result.rows) == sorted(instance_ids)

    def test_page_cap_truncates(self, aws):
        registry = Registry()
        registry.register(
            replace(
                EC2_INSTANCES,
                list_spec=replace(
                    EC2_INSTANCES.list_spec, pagination=Pagination("NextToken", "NextToken", "MaxResults", 1)
                ),
            )
        )
        dispatcher = Dispatcher(Transport(), registry)
        ec2 = boto3.client("ec2", region_name=REGION)
        for i in range(3):
            _run_instance(ec2, f"node-{i}")

        result = _fetch(Fetcher(dispatcher, registry), "ec2-instances", max_pages=2)

        assert result.truncated
        assert len(result.rows) == 2
        assert result.next_cursor

    def test_describe_and_stop(self, engine):
        dispatcher, fetcher, executor = engine
        ec2 = boto3.client("ec2", region_name=REGION)
        instance_id = _run_instance(ec2, "api")

        detail = dispatcher.describe_resource("ec2-instances", instance_id, PROFILE, REGION)
        assert detail["InstanceId"] == instance_id

        row = _fetch(fetcher, "ec2-instances").rows[0]
        outcome = executor.execute("ec2-instances", "stop", row, PROFILE, REGION)

        assert outcome.success
        assert outcome.message in ("stopping", "stopped")

    def test_describe_unknown_instance(self, engine):
        dispatcher, _, _ = engine

        with pytest.raises(NotFoundError):
            dispatcher.describe_resource("ec2-instances", "i-1234567890abcdef0", PROFILE, REGION)


class TestSQS:
    """SQS 큐 (스칼라 항목)"""

    def test_list_describe_purge(self, engine):
        dispatcher, fetcher, executor = engine
        sqs = boto3.client("sqs", region_name=REGION)
        url = sqs.create_queue(QueueName="jobs")["QueueUrl"]

        result = _fetch(fetcher, "sqs-queues")

        assert [r.key for r in result.rows] == [url]
        attributes = dispatcher.describe_resource("sqs-queues", url, PROFILE, REGION)
        assert attributes["QueueArn"].endswith(":jobs")

        outcome = executor.execute("sqs-queues", "purge", result.rows[0], PROFILE, REGION)
        assert outcome.success


class TestIAM:
    """IAM 사용자"""

    def test_list_and_describe(self, engine):
        dispatcher, fetcher, _ = engine
        iam = boto3.client("iam", region_name="us-east-1")
        iam.create_user(UserName="alice")

        result = _fetch(fetcher, "iam-users")

        assert [r.key for r in result.rows] == ["alice"]
        assert dispatcher.describe_resource("iam-users", "alice", PROFILE, REGION)["UserName"] == "alice"

    def test_filter(self, engine):
        _, fetcher, _ = engine
        iam = boto3.client("iam", region_name="us-east-1")
        for name in ("alice", "bob", "alicia"):
            iam.create_user(UserName=name)

        result = _fetch(fetcher, "iam-users", filter=ResourceFilter("ALI"))

        assert sorted(r.key for r in result.rows) == ["alice", "alicia"]
