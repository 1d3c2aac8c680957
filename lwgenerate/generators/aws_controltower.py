"""
AWS Control Tower CloudTrail integration generator.

Control Tower already writes a consolidated trail to the log archive
account and publishes notifications from the audit account. The module
reads from both, so each account gets its own aliased provider.
"""

from typing import Any, Dict, List, Optional

from pydantic import Field

from ..constants import AWS_CONTROLTOWER_SOURCE, AWS_CONTROLTOWER_VERSION
from ..enums import Cloud
from ..errors import InvalidInputsError
from ..terraform.models import Module, Provider
from ..types import AwsSubAccount, ExistingIamRole, Labels, OrgAccountMapping
from .base import BaseGenerator, GeneratorArgs, create_lacework_provider, create_required_providers
from .registry import register_generator

LOG_ARCHIVE_ALIAS = "log_archive"
AUDIT_ALIAS = "audit"

# Largest external ID the module will generate
EXTERNAL_ID_LENGTH_MAX = 1224


class ControlTowerArgs(GeneratorArgs):
    """Arguments for the AWS Control Tower generator."""

    s3_bucket_arn: Optional[str] = None
    sns_topic_arn: Optional[str] = None
    log_archive_account: Optional[AwsSubAccount] = None
    audit_account: Optional[AwsSubAccount] = None

    lacework_organization_level: bool = False
    lacework_account_id: Optional[str] = None
    lacework_integration_name: Optional[str] = None

    cross_account_policy_name: Optional[str] = None
    enable_log_file_validation: bool = False
    external_id_length: Optional[int] = Field(default=None, gt=0, le=EXTERNAL_ID_LENGTH_MAX)
    existing_iam_role: Optional[ExistingIamRole] = None
    kms_key_arn: Optional[str] = None
    org_account_mappings: Optional[OrgAccountMapping] = None
    prefix: Optional[str] = None
    sqs_queue_name: Optional[str] = None
    tags: Optional[Labels] = None
    wait_time: Optional[str] = None  # e.g. "10s"


def create_account_providers(args: ControlTowerArgs) -> List[Provider]:
    """Build the log archive provider followed by the audit provider."""
    providers = []
    for alias, account in ((LOG_ARCHIVE_ALIAS, args.log_archive_account), (AUDIT_ALIAS, args.audit_account)):
        providers.append(Provider("aws", {
            "alias": alias,
            "profile": account.profile,
            "region": account.region,
        }))
    return providers


def create_controltower_module(args: ControlTowerArgs) -> Module:
    attributes: Dict[str, Any] = {
        "s3_bucket_arn": args.s3_bucket_arn,
        "sns_topic_arn": args.sns_topic_arn,
    }

    optional = {
        "cross_account_policy_name": args.cross_account_policy_name,
        "external_id_length": args.external_id_length,
        "kms_key_arn": args.kms_key_arn,
        "lacework_aws_account_id": args.lacework_account_id,
        "lacework_integration_name": args.lacework_integration_name,
        "prefix": args.prefix,
        "sqs_queue_name": args.sqs_queue_name,
        "tags": args.tags,
        "wait_time": args.wait_time,
    }
    attributes.update({name: value for name, value in optional.items() if value})

    if args.enable_log_file_validation:
        attributes["enable_log_file_validation"] = True

    mappings = args.org_account_mappings
    if mappings is not None and not mappings.is_empty():
        attributes["org_account_mappings"] = [mappings.model_dump()]

    role = args.existing_iam_role
    if role is not None and not role.is_empty():
        attributes["use_existing_iam_role"] = True
        attributes["iam_role_arn"] = role.arn
        attributes["iam_role_name"] = role.name
        attributes["iam_role_external_id"] = role.external_id

    return Module(
        name="lacework_aws_controltower",
        source=AWS_CONTROLTOWER_SOURCE,
        version=AWS_CONTROLTOWER_VERSION,
        attributes=attributes,
        providers={f"aws.{alias}": f"aws.{alias}" for alias in (AUDIT_ALIAS, LOG_ARCHIVE_ALIAS)},
    )


@register_generator(Cloud.AWS_CONTROLTOWER.value, ControlTowerArgs)
class ControlTowerGenerator(BaseGenerator[ControlTowerArgs]):
    """Generator for the AWS Control Tower CloudTrail integration."""

    def validate(self) -> None:
        args = self.args
        if not args.s3_bucket_arn:
            raise InvalidInputsError("s3 bucket arn must be set")
        if not args.sns_topic_arn:
            raise InvalidInputsError("sns topic arn must be set")
        if args.log_archive_account is None or args.audit_account is None:
            raise InvalidInputsError("log archive and audit accounts must be set")

        # The module expects these exact provider aliases
        for expected, account in ((LOG_ARCHIVE_ALIAS, args.log_archive_account), (AUDIT_ALIAS, args.audit_account)):
            if account.alias and account.alias != expected:
                raise InvalidInputsError(f"the {expected} account alias must be {expected}, got {account.alias}")

        if args.existing_iam_role is not None and args.existing_iam_role.is_partial():
            raise InvalidInputsError(
                "when using an existing IAM role, existing role ARN, name, and external ID all must be set"
            )

    def build_blocks(self) -> List[Any]:
        args = self.args
        return [
            create_required_providers(),
            create_account_providers(args),
            create_lacework_provider(args.lacework_profile, args.lacework_organization_level),
            create_controltower_module(args),
        ]
