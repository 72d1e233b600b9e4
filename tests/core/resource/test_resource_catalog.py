"""
tests/core/resource/test_resource_catalog.py - 내장 카탈로그 테스트
"""

from datetime import datetime, timezone

from awsnav.core.resource.catalog import BUILTIN_KINDS
from awsnav.core.resource.extractor import build_row, extract, extract_items


class TestBuiltinCatalog:
    """내장 리소스 종류 정의 테스트"""

    def test_default_registry_contains_all(self, builtin_registry):
        assert builtin_registry.frozen
        assert [k.id for k in builtin_registry.list_kinds()] == [k.id for k in BUILTIN_KINDS]

    def test_expected_kinds(self, builtin_registry):
        expected = {
            "ec2-instances",
            "ebs-volumes",
            "security-groups",
            "vpcs",
            "s3-buckets",
            "lambda-functions",
            "rds-instances",
            "dynamodb-tables",
            "iam-users",
            "iam-roles",
            "sqs-queues",
            "log-groups",
            "ecs-clusters",
            "cfn-stacks",
        }
        assert {k.id for k in builtin_registry.list_kinds()} == expected

    def test_delete_and_terminate_are_destructive(self):
        for kind in BUILTIN_KINDS:
            for action in kind.actions:
                if action.id in ("delete", "terminate", "purge"):
                    assert action.destructive, f"{kind.id}.{action.id}"
                    assert action.requires_confirmation

    def test_operations_are_snake_case(self):
        for kind in BUILTIN_KINDS:
            specs = [kind.list_spec, *(a.spec for a in kind.actions)]
            if kind.describe_spec:
                specs.append(kind.describe_spec)
            for spec in specs:
                assert spec.operation == spec.operation.lower(), spec.label
                assert spec.service == kind.service, spec.label


class TestBuiltinExtraction:
    """대표 응답으로 컬럼 추출 확인"""

    def test_ec2_instances(self, builtin_registry):
        kind = builtin_registry.lookup("ec2-instances")
        response = {
            "Reservations": [
                {
                    "Instances": [
                        {
                            "InstanceId": "i-1234567890abcdef0",
                            "InstanceType": "t3.micro",
                            "State": {"Name": "running"},
                            "Placement": {"AvailabilityZone": "ap-northeast-2a"},
                            "Tags": [{"Key": "Name", "Value": "test-instance"}],
                            "LaunchTime": datetime(2024, 1, 1, tzinfo=timezone.utc),
                            "PrivateIpAddress": "10.0.0.1",
                        }
                    ]
                }
            ]
        }

        rows = [build_row(kind, item) for item in extract_items(response, kind.items_path)]

        assert len(rows) == 1
        row = rows[0]
        assert row.key == "i-1234567890abcdef0"
        assert row.get("Name") == "test-instance"
        assert row.get("State") == "running"
        assert row.get("Public IP") == "-"
        assert row.get("Launched") == "2024-01-01 00:00:00 UTC"

    def test_ebs_volume_attachments_projection(self, builtin_registry):
        kind = builtin_registry.lookup("ebs-volumes")
        item = {
            "VolumeId": "vol-1",
            "Size": 100,
            "Encrypted": True,
            "Attachments": [{"InstanceId": "i-1"}, {"InstanceId": "i-2"}],
        }
        row = build_row(kind, item)

        assert row.get("Size") == "100 GiB"
        assert row.get("Encrypted") == "yes"
        assert row.get("Attached To") == "i-1, i-2"

    def test_scalar_items_use_item_as_key(self, builtin_registry):
        kind = builtin_registry.lookup("dynamodb-tables")
        response = {"TableNames": ["orders", "users"], "LastEvaluatedTableName": "users"}

        rows = [build_row(kind, item) for item in extract_items(response, kind.items_path)]

        assert [r.key for r in rows] == ["orders", "users"]
        assert extract(response, kind.list_spec.pagination.response_path) == "users"

    def test_log_group_millis_timestamp(self, builtin_registry):
        kind = builtin_registry.lookup("log-groups")
        row = build_row(kind, {"logGroupName": "/aws/lambda/x", "creationTime": 1704067200000, "storedBytes": 2048})

        assert row.get("Created") == "2024-01-01 00:00:00 UTC"
        assert row.get("Stored") == "2.0 KiB"
