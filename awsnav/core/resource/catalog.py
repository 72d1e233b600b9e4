"""
core/resource/catalog.py - 내장 리소스 종류 카탈로그

리소스 종류 추가는 코드 경로가 아니라 이 테이블에 항목을 추가하는 것으로 끝납니다.
작업 이름은 boto3 메서드 이름(snake_case), 파라미터/경로는 AWS API 응답 필드명을 따릅니다.

카테고리:
    - compute: EC2 Instance, Lambda Function, ECS Cluster
    - storage: EBS Volume, S3 Bucket
    - network: Security Group, VPC
    - database: RDS Instance, DynamoDB Table
    - security: IAM User, IAM Role
    - integration: SQS Queue
    - monitoring: CloudWatch Log Group
    - management: CloudFormation Stack
"""

from __future__ import annotations

from .types import (
    Action,
    Column,
    OperationSpec,
    Pagination,
    ParamBinding,
    ResourceKind,
)

NEXT_TOKEN = Pagination(request_param="NextToken", response_path="NextToken")

# =============================================================================
# Compute
# =============================================================================

EC2_INSTANCES = ResourceKind(
    id="ec2-instances",
    name="EC2 Instances",
    service="ec2",
    category="compute",
    list_spec=OperationSpec(
        "ec2",
        "describe_instances",
        pagination=Pagination("NextToken", "NextToken", page_size_param="MaxResults", page_size=100),
    ),
    items_path="Reservations[*].Instances[*]",
    key_path="InstanceId",
    columns=(
        Column("Name", "Tags", ("tag:Name",)),
        Column("Instance ID", "InstanceId"),
        Column("State", "State.Name"),
        Column("Type", "InstanceType"),
        Column("AZ", "Placement.AvailabilityZone"),
        Column("Private IP", "PrivateIpAddress"),
        Column("Public IP", "PublicIpAddress"),
        Column("Launched", "LaunchTime", ("timestamp",)),
    ),
    describe_spec=OperationSpec(
        "ec2",
        "describe_instances",
        key_param="InstanceIds",
        key_as_list=True,
        result_path="Reservations[0].Instances[0]",
    ),
    actions=(
        Action(
            id="start",
            label="Start",
            spec=OperationSpec("ec2", "start_instances"),
            bindings=(ParamBinding("InstanceIds", as_list=True),),
            message_path="StartingInstances[0].CurrentState.Name",
        ),
        Action(
            id="stop",
            label="Stop",
            spec=OperationSpec("ec2", "stop_instances"),
            bindings=(ParamBinding("InstanceIds", as_list=True),),
            confirm=True,
            message_path="StoppingInstances[0].CurrentState.Name",
        ),
        Action(
            id="reboot",
            label="Reboot",
            spec=OperationSpec("ec2", "reboot_instances"),
            bindings=(ParamBinding("InstanceIds", as_list=True),),
            confirm=True,
        ),
        Action(
            id="terminate",
            label="Terminate",
            spec=OperationSpec("ec2", "terminate_instances"),
            bindings=(ParamBinding("InstanceIds", as_list=True),),
            destructive=True,
            message_path="TerminatingInstances[0].CurrentState.Name",
        ),
    ),
)

LAMBDA_FUNCTIONS = ResourceKind(
    id="lambda-functions",
    name="Lambda Functions",
    service="lambda",
    category="compute",
    list_spec=OperationSpec(
        "lambda",
        "list_functions",
        pagination=Pagination("Marker", "NextMarker", page_size_param="MaxItems", page_size=50),
    ),
    items_path="Functions[*]",
    key_path="FunctionName",
    columns=(
        Column("Name", "FunctionName"),
        Column("Runtime", "Runtime"),
        Column("Memory", "MemorySize", ("suffix:MB",)),
        Column("Timeout", "Timeout", ("suffix:s",)),
        Column("Code Size", "CodeSize", ("bytes",)),
        Column("Modified", "LastModified", ("timestamp",)),
    ),
    describe_spec=OperationSpec("lambda", "get_function", key_param="FunctionName", result_path="Configuration"),
    actions=(
        Action(
            id="invoke",
            label="Invoke (async)",
            spec=OperationSpec("lambda", "invoke", params={"InvocationType": "Event"}),
            bindings=(ParamBinding("FunctionName"),),
            confirm=True,
            message_path="StatusCode",
        ),
        Action(
            id="delete",
            label="Delete",
            spec=OperationSpec("lambda", "delete_function"),
            bindings=(ParamBinding("FunctionName"),),
            destructive=True,
        ),
    ),
)

ECS_CLUSTERS = ResourceKind(
    id="ecs-clusters",
    name="ECS Clusters",
    service="ecs",
    category="compute",
    list_spec=OperationSpec(
        "ecs",
        "list_clusters",
        pagination=Pagination("nextToken", "nextToken", page_size_param="maxResults", page_size=100),
    ),
    items_path="clusterArns[*]",
    key_path="@",
    columns=(Column("Cluster ARN", "@"),),
    describe_spec=OperationSpec(
        "ecs",
        "describe_clusters",
        key_param="clusters",
        key_as_list=True,
        result_path="clusters[0]",
    ),
)

# =============================================================================
# Storage
# =============================================================================

EBS_VOLUMES = ResourceKind(
    id="ebs-volumes",
    name="EBS Volumes",
    service="ec2",
    category="storage",
    list_spec=OperationSpec(
        "ec2",
        "describe_volumes",
        pagination=Pagination("NextToken", "NextToken", page_size_param="MaxResults", page_size=500),
    ),
    items_path="Volumes[*]",
    key_path="VolumeId",
    columns=(
        Column("Name", "Tags", ("tag:Name",)),
        Column("Volume ID", "VolumeId"),
        Column("Size", "Size", ("suffix:GiB",)),
        Column("Type", "VolumeType"),
        Column("State", "State"),
        Column("Encrypted", "Encrypted", ("bool",)),
        Column("AZ", "AvailabilityZone"),
        Column("Attached To", "Attachments[*].InstanceId"),
        Column("Created", "CreateTime", ("timestamp",)),
    ),
    describe_spec=OperationSpec(
        "ec2",
        "describe_volumes",
        key_param="VolumeIds",
        key_as_list=True,
        result_path="Volumes[0]",
    ),
    actions=(
        Action(
            id="delete",
            label="Delete",
            spec=OperationSpec("ec2", "delete_volume"),
            bindings=(ParamBinding("VolumeId"),),
            destructive=True,
        ),
    ),
)

# describe 작업 없음 - 상세 보기는 목록 캐시로 대체
S3_BUCKETS = ResourceKind(
    id="s3-buckets",
    name="S3 Buckets",
    service="s3",
    category="storage",
    list_spec=OperationSpec("s3", "list_buckets"),
    items_path="Buckets[*]",
    key_path="Name",
    columns=(
        Column("Name", "Name"),
        Column("Created", "CreationDate", ("timestamp",)),
    ),
    actions=(
        Action(
            id="delete",
            label="Delete (empty bucket)",
            spec=OperationSpec("s3", "delete_bucket"),
            bindings=(ParamBinding("Bucket"),),
            destructive=True,
        ),
    ),
)

# =============================================================================
# Network
# =============================================================================

SECURITY_GROUPS = ResourceKind(
    id="security-groups",
    name="Security Groups",
    service="ec2",
    category="network",
    list_spec=OperationSpec(
        "ec2",
        "describe_security_groups",
        pagination=Pagination("NextToken", "NextToken", page_size_param="MaxResults", page_size=500),
    ),
    items_path="SecurityGroups[*]",
    key_path="GroupId",
    columns=(
        Column("Name", "GroupName"),
        Column("Group ID", "GroupId"),
        Column("VPC", "VpcId"),
        Column("Inbound Rules", "IpPermissions", ("count",)),
        Column("Description", "Description", ("truncate:50",)),
    ),
    describe_spec=OperationSpec(
        "ec2",
        "describe_security_groups",
        key_param="GroupIds",
        key_as_list=True,
        result_path="SecurityGroups[0]",
    ),
    actions=(
        Action(
            id="delete",
            label="Delete",
            spec=OperationSpec("ec2", "delete_security_group"),
            bindings=(ParamBinding("GroupId"),),
            destructive=True,
        ),
    ),
)

VPCS = ResourceKind(
    id="vpcs",
    name="VPCs",
    service="ec2",
    category="network",
    list_spec=OperationSpec("ec2", "describe_vpcs", pagination=NEXT_TOKEN),
    items_path="Vpcs[*]",
    key_path="VpcId",
    columns=(
        Column("Name", "Tags", ("tag:Name",)),
        Column("VPC ID", "VpcId"),
        Column("CIDR", "CidrBlock"),
        Column("State", "State"),
        Column("Default", "IsDefault", ("bool",)),
    ),
    describe_spec=OperationSpec("ec2", "describe_vpcs", key_param="VpcIds", key_as_list=True, result_path="Vpcs[0]"),
)

# =============================================================================
# Database
# =============================================================================

RDS_INSTANCES = ResourceKind(
    id="rds-instances",
    name="RDS Instances",
    service="rds",
    category="database",
    list_spec=OperationSpec(
        "rds",
        "describe_db_instances",
        pagination=Pagination("Marker", "Marker", page_size_param="MaxRecords", page_size=100),
    ),
    items_path="DBInstances[*]",
    key_path="DBInstanceIdentifier",
    columns=(
        Column("Identifier", "DBInstanceIdentifier"),
        Column("Engine", "Engine"),
        Column("Class", "DBInstanceClass"),
        Column("Status", "DBInstanceStatus"),
        Column("AZ", "AvailabilityZone"),
        Column("Endpoint", "Endpoint.Address"),
        Column("Storage", "AllocatedStorage", ("suffix:GiB",)),
        Column("Created", "InstanceCreateTime", ("timestamp",)),
    ),
    describe_spec=OperationSpec(
        "rds",
        "describe_db_instances",
        key_param="DBInstanceIdentifier",
        result_path="DBInstances[0]",
    ),
    actions=(
        Action(
            id="start",
            label="Start",
            spec=OperationSpec("rds", "start_db_instance"),
            bindings=(ParamBinding("DBInstanceIdentifier"),),
            message_path="DBInstance.DBInstanceStatus",
        ),
        Action(
            id="stop",
            label="Stop",
            spec=OperationSpec("rds", "stop_db_instance"),
            bindings=(ParamBinding("DBInstanceIdentifier"),),
            confirm=True,
            message_path="DBInstance.DBInstanceStatus",
        ),
        Action(
            id="reboot",
            label="Reboot",
            spec=OperationSpec("rds", "reboot_db_instance"),
            bindings=(ParamBinding("DBInstanceIdentifier"),),
            confirm=True,
            message_path="DBInstance.DBInstanceStatus",
        ),
    ),
)

DYNAMODB_TABLES = ResourceKind(
    id="dynamodb-tables",
    name="DynamoDB Tables",
    service="dynamodb",
    category="database",
    list_spec=OperationSpec(
        "dynamodb",
        "list_tables",
        pagination=Pagination(
            "ExclusiveStartTableName",
            "LastEvaluatedTableName",
            page_size_param="Limit",
            page_size=100,
        ),
    ),
    items_path="TableNames[*]",
    key_path="@",
    columns=(Column("Table Name", "@"),),
    describe_spec=OperationSpec("dynamodb", "describe_table", key_param="TableName", result_path="Table"),
    actions=(
        Action(
            id="delete",
            label="Delete",
            spec=OperationSpec("dynamodb", "delete_table"),
            bindings=(ParamBinding("TableName"),),
            destructive=True,
            message_path="TableDescription.TableStatus",
        ),
    ),
)

# =============================================================================
# Security
# =============================================================================

IAM_USERS = ResourceKind(
    id="iam-users",
    name="IAM Users",
    service="iam",
    category="security",
    list_spec=OperationSpec("iam", "list_users", pagination=Pagination("Marker", "Marker", "MaxItems", 100)),
    items_path="Users[*]",
    key_path="UserName",
    columns=(
        Column("User Name", "UserName"),
        Column("User ID", "UserId"),
        Column("ARN", "Arn", ("truncate:60",)),
        Column("Created", "CreateDate", ("timestamp",)),
        Column("Password Last Used", "PasswordLastUsed", ("timestamp",)),
    ),
    describe_spec=OperationSpec("iam", "get_user", key_param="UserName", result_path="User"),
)

IAM_ROLES = ResourceKind(
    id="iam-roles",
    name="IAM Roles",
    service="iam",
    category="security",
    list_spec=OperationSpec("iam", "list_roles", pagination=Pagination("Marker", "Marker", "MaxItems", 100)),
    items_path="Roles[*]",
    key_path="RoleName",
    columns=(
        Column("Role Name", "RoleName"),
        Column("Path", "Path"),
        Column("Created", "CreateDate", ("timestamp",)),
        Column("Description", "Description", ("truncate:50",)),
    ),
    describe_spec=OperationSpec("iam", "get_role", key_param="RoleName", result_path="Role"),
)

# =============================================================================
# Integration / Monitoring / Management
# =============================================================================

SQS_QUEUES = ResourceKind(
    id="sqs-queues",
    name="SQS Queues",
    service="sqs",
    category="integration",
    list_spec=OperationSpec(
        "sqs",
        "list_queues",
        pagination=Pagination("NextToken", "NextToken", page_size_param="MaxResults", page_size=1000),
    ),
    items_path="QueueUrls[*]",
    key_path="@",
    columns=(Column("Queue URL", "@"),),
    describe_spec=OperationSpec(
        "sqs",
        "get_queue_attributes",
        params={"AttributeNames": ["All"]},
        key_param="QueueUrl",
        result_path="Attributes",
    ),
    actions=(
        Action(
            id="purge",
            label="Purge messages",
            spec=OperationSpec("sqs", "purge_queue"),
            bindings=(ParamBinding("QueueUrl"),),
            destructive=True,
        ),
        Action(
            id="delete",
            label="Delete",
            spec=OperationSpec("sqs", "delete_queue"),
            bindings=(ParamBinding("QueueUrl"),),
            destructive=True,
        ),
    ),
)

LOG_GROUPS = ResourceKind(
    id="log-groups",
    name="CloudWatch Log Groups",
    service="logs",
    category="monitoring",
    list_spec=OperationSpec(
        "logs",
        "describe_log_groups",
        pagination=Pagination("nextToken", "nextToken", page_size_param="limit", page_size=50),
    ),
    items_path="logGroups[*]",
    key_path="logGroupName",
    columns=(
        Column("Log Group", "logGroupName"),
        Column("Retention", "retentionInDays", ("suffix:days",)),
        Column("Stored", "storedBytes", ("bytes",)),
        Column("Created", "creationTime", ("timestamp",)),
    ),
    actions=(
        Action(
            id="delete",
            label="Delete",
            spec=OperationSpec("logs", "delete_log_group"),
            bindings=(ParamBinding("logGroupName"),),
            destructive=True,
        ),
    ),
)

CFN_STACKS = ResourceKind(
    id="cfn-stacks",
    name="CloudFormation Stacks",
    service="cloudformation",
    category="management",
    list_spec=OperationSpec("cloudformation", "describe_stacks", pagination=NEXT_TOKEN),
    items_path="Stacks[*]",
    key_path="StackName",
    columns=(
        Column("Stack Name", "StackName"),
        Column("Status", "StackStatus"),
        Column("Drift", "DriftInformation.StackDriftStatus"),
        Column("Created", "CreationTime", ("timestamp",)),
        Column("Updated", "LastUpdatedTime", ("timestamp",)),
    ),
    describe_spec=OperationSpec(
        "cloudformation",
        "describe_stacks",
        key_param="StackName",
        result_path="Stacks[0]",
    ),
    actions=(
        Action(
            id="delete",
            label="Delete",
            spec=OperationSpec("cloudformation", "delete_stack"),
            bindings=(ParamBinding("StackName"),),
            destructive=True,
        ),
    ),
)

# 메뉴 표시 순서
BUILTIN_KINDS: tuple[ResourceKind, ...] = (
    EC2_INSTANCES,
    LAMBDA_FUNCTIONS,
    ECS_CLUSTERS,
    EBS_VOLUMES,
    S3_BUCKETS,
    SECURITY_GROUPS,
    VPCS,
    RDS_INSTANCES,
    DYNAMODB_TABLES,
    IAM_USERS,
    IAM_ROLES,
    SQS_QUEUES,
    LOG_GROUPS,
    CFN_STACKS,
)
