"""
Service role resolution shared by every module.

A module either reuses a caller supplied role ARN, in which case nothing
IAM related is declared and nothing waits on IAM, or gets a fresh role that
only the service principal may assume, plus one scoped policy per data
location it was handed.
"""

from typing import Any, Dict, List, Optional, Sequence

import pulumi

from awsaiml.errors import ValidationError
from awsaiml.plan import CREATED, PolicyFragment, RoleResolution

POLICY_VERSION = "2012-10-17"
SSE_ALGORITHMS = ["AES256", "aws:kms"]
MAX_ROLE_NAME = 64

# needed by services that attach training jobs to customer subnets
VPC_ACTIONS = [
    "ec2:CreateNetworkInterface",
    "ec2:CreateNetworkInterfacePermission",
    "ec2:DeleteNetworkInterface",
    "ec2:DeleteNetworkInterfacePermission",
    "ec2:DescribeNetworkInterfaces",
    "ec2:DescribeVpcs",
    "ec2:DescribeDhcpOptions",
    "ec2:DescribeSubnets",
    "ec2:DescribeSecurityGroups",
]


def service_principal(service: str) -> str:
    return f"{service}.amazonaws.com"


def trust_policy(principal: str) -> Dict[str, Any]:
    return {
        "Version": POLICY_VERSION,
        "Statement": [
            {
                "Effect": "Allow",
                "Principal": {"Service": principal},
                "Action": "sts:AssumeRole",
            }
        ],
    }


def policy_document(*statements: Dict[str, Any]) -> Dict[str, Any]:
    return {"Version": POLICY_VERSION, "Statement": list(statements)}


def output_object_arn(input_bucket: Optional[str], output_bucket: Optional[str], output_prefix: Optional[str]) -> str:
    """Objects the write policy covers. The bucket defaults before the prefix is applied."""
    bucket = output_bucket or input_bucket
    prefix = (output_prefix or "").strip("/")
    return f"arn:aws:s3:::{bucket}{'/' + prefix if prefix else ''}/*"


def resolve_role(
    name: str,
    service: str,
    existing_role_arn: Optional[str] = None,
    input_bucket: Optional[str] = None,
    output_bucket: Optional[str] = None,
    output_prefix: Optional[str] = None,
    service_actions: Sequence[str] = (),
    kinesis_video_arns: Sequence[str] = (),
    kinesis_data_arns: Sequence[str] = (),
    kms_key_arns: Sequence[str] = (),
    sns_topic_arns: Sequence[str] = (),
) -> RoleResolution:
    if existing_role_arn:
        pulumi.log.debug(f"{name}: reusing role {existing_role_arn}")
        return RoleResolution.reused(existing_role_arn)

    role_name = f"{name}-{service}-role"
    if len(role_name) > MAX_ROLE_NAME:
        raise ValidationError(
            f"role name '{role_name}' is longer than {MAX_ROLE_NAME} characters; shorten the name or pass existing_role_arn",
            service,
            "name",
        )

    def policy_name(suffix: str) -> str:
        return f"{name}-{service}-{suffix}"

    fragments: List[PolicyFragment] = []
    if input_bucket:
        fragments.append(
            PolicyFragment(
                key="s3_input",
                name=policy_name("s3-input"),
                description=f"Read access to s3://{input_bucket} for {service}",
                document=policy_document(
                    {
                        "Effect": "Allow",
                        "Action": ["s3:GetObject", "s3:ListBucket"],
                        "Resource": [f"arn:aws:s3:::{input_bucket}", f"arn:aws:s3:::{input_bucket}/*"],
                    }
                ),
            )
        )
    if input_bucket or output_bucket:
        fragments.append(
            PolicyFragment(
                key="s3_output",
                name=policy_name("s3-output"),
                description=f"Encrypted write access to s3://{output_bucket or input_bucket} for {service}",
                document=policy_document(
                    {
                        "Effect": "Allow",
                        "Action": ["s3:PutObject"],
                        "Resource": output_object_arn(input_bucket, output_bucket, output_prefix),
                        "Condition": {"StringEquals": {"s3:x-amz-server-side-encryption": SSE_ALGORITHMS}},
                    }
                ),
            )
        )
    if kinesis_video_arns or kinesis_data_arns:
        statements = []
        if kinesis_video_arns:
            statements.append(
                {
                    "Effect": "Allow",
                    "Action": ["kinesisvideo:GetDataEndpoint", "kinesisvideo:GetMedia"],
                    "Resource": list(kinesis_video_arns),
                }
            )
        if kinesis_data_arns:
            statements.append(
                {
                    "Effect": "Allow",
                    "Action": ["kinesis:PutRecord", "kinesis:PutRecords"],
                    "Resource": list(kinesis_data_arns),
                }
            )
        fragments.append(
            PolicyFragment(
                key="kinesis",
                name=policy_name("kinesis"),
                description=f"Kinesis stream access for {service}",
                document=policy_document(*statements),
            )
        )
    if kms_key_arns:
        fragments.append(
            PolicyFragment(
                key="kms",
                name=policy_name("kms"),
                description=f"Use of customer managed keys by {service}",
                document=policy_document(
                    {
                        "Effect": "Allow",
                        "Action": ["kms:Decrypt", "kms:GenerateDataKey", "kms:CreateGrant"],
                        "Resource": list(kms_key_arns),
                    }
                ),
            )
        )
    if sns_topic_arns:
        fragments.append(
            PolicyFragment(
                key="sns",
                name=policy_name("sns"),
                description=f"Notification publishing for {service}",
                document=policy_document(
                    {"Effect": "Allow", "Action": ["sns:Publish"], "Resource": list(sns_topic_arns)}
                ),
            )
        )
    fragments.append(
        PolicyFragment(
            key="service",
            name=policy_name("service"),
            description=f"{service} service access",
            document=policy_document(
                {"Effect": "Allow", "Action": list(service_actions or [f"{service}:*"]), "Resource": "*"}
            ),
        )
    )

    principal = service_principal(service)
    pulumi.log.debug(f"{name}: creating role for {principal} with {[f.key for f in fragments]}")
    return RoleResolution(
        mode=CREATED,
        role_name=role_name,
        service_principal=principal,
        trust_policy=trust_policy(principal),
        fragments=tuple(fragments),
    )
