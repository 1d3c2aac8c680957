"""
AWS EKS audit log generator.

Builds the Terraform document that ships EKS control plane audit logs to
Lacework. Clusters may live in several regions. With more than one region
the module's own CloudWatch subscription filter is switched off and one
subscription filter resource per region is generated instead, each bound
to a provider aliased by region.
"""

import logging
from typing import Any, Dict, List, Optional

from pydantic import Field

from ..constants import (
    AWS_EKS_AUDIT_SOURCE,
    AWS_EKS_AUDIT_VERSION,
    KMS_KEY_DELETION_DAYS_MAX,
    KMS_KEY_DELETION_DAYS_MIN,
)
from ..enums import Cloud
from ..errors import InvalidInputsError
from ..terraform.models import FunctionCall, Module, Provider, Resource, create_simple_traversal, raw
from ..types import ExistingCrossAccountIamRole, RegionClusterMap
from .base import BaseGenerator, GeneratorArgs, create_lacework_provider, create_required_providers
from .registry import register_generator

logger = logging.getLogger(__name__)

EKS_AUDIT_MODULE_NAME = "aws_eks_audit_log"
SUBSCRIPTION_FILTER_RESOURCE_TYPE = "aws_cloudwatch_log_subscription_filter"


class EksAuditArgs(GeneratorArgs):
    """
    Arguments for the EKS audit log generator.

    Encryption, versioning and KMS flags default to the module defaults
    (enabled) and are only written out when turned off.
    """

    region_cluster_map: RegionClusterMap = Field(default_factory=dict)

    bucket_versioning: bool = True
    bucket_enable_mfa_delete: bool = False
    bucket_encryption_enabled: bool = True
    bucket_sse_algorithm: Optional[str] = None
    bucket_sse_key_arn: Optional[str] = None
    bucket_force_destroy: bool = False
    bucket_lifecycle_expiration_days: Optional[int] = None

    existing_cloudwatch_iam_role_arn: Optional[str] = None
    existing_cross_account_iam_role: Optional[ExistingCrossAccountIamRole] = None
    existing_firehose_iam_role_arn: Optional[str] = None

    filter_pattern: Optional[str] = None
    firehose_encryption_enabled: bool = True
    firehose_encryption_key_arn: Optional[str] = None

    kms_key_deletion_days: Optional[int] = None
    kms_key_multi_region: bool = True
    kms_key_rotation: bool = True

    sns_topic_encryption_enabled: bool = True
    sns_topic_encryption_key_arn: Optional[str] = None

    prefix: Optional[str] = None
    eks_audit_integration_name: Optional[str] = None


def create_aws_providers(regions: List[str]) -> List[Provider]:
    """One aliased provider per region, or a plain provider for a single region."""
    if len(regions) == 1:
        return [Provider("aws", {"region": regions[0]})]
    return [Provider("aws", {"alias": region, "region": region}) for region in regions]


def create_subscription_filter(region: str, clusters: List[str]) -> Resource:
    """
    Build the CloudWatch subscription filter for the clusters of one region.

    Args:
        region: AWS region, also the alias of the provider the resource uses
        clusters: Cluster names whose log groups are subscribed

    Returns:
        Resource builder
    """
    return Resource(
        resource_type=SUBSCRIPTION_FILTER_RESOURCE_TYPE,
        name=f"lw_cw_subscription_filter_{region}",
        attributes={
            "for_each": FunctionCall("toset", (list(clusters),)),
            "name": raw(f'"${{module.{EKS_AUDIT_MODULE_NAME}.filter_prefix}}-${{each.value}}"'),
            "log_group_name": raw('"/aws/eks/${each.value}/cluster"'),
            "role_arn": create_simple_traversal("module", EKS_AUDIT_MODULE_NAME, "cloudwatch_iam_role_arn"),
            "filter_pattern": create_simple_traversal("module", EKS_AUDIT_MODULE_NAME, "filter_pattern"),
            "destination_arn": create_simple_traversal("module", EKS_AUDIT_MODULE_NAME, "firehose_arn"),
        },
        provider=f"aws.{region}",
        depends_on=[f"module.{EKS_AUDIT_MODULE_NAME}"],
    )


def create_eks_audit_module(args: EksAuditArgs, regions: List[str]) -> Module:
    attributes: Dict[str, Any] = {}

    if not args.bucket_versioning:
        attributes["bucket_versioning_enabled"] = False
    elif args.bucket_enable_mfa_delete:
        attributes["bucket_enable_mfa_delete"] = True

    if not args.bucket_encryption_enabled:
        attributes["bucket_encryption_enabled"] = False
    else:
        if args.bucket_sse_algorithm:
            attributes["bucket_sse_algorithm"] = args.bucket_sse_algorithm
        if args.bucket_sse_key_arn:
            attributes["bucket_key_arn"] = args.bucket_sse_key_arn

    if args.bucket_force_destroy:
        attributes["bucket_force_destroy"] = True
    if args.bucket_lifecycle_expiration_days and args.bucket_lifecycle_expiration_days > 0:
        attributes["bucket_lifecycle_expiration_days"] = args.bucket_lifecycle_expiration_days

    if args.existing_cloudwatch_iam_role_arn:
        attributes["use_existing_cloudwatch_iam_role"] = True
        attributes["cloudwatch_iam_role_arn"] = args.existing_cloudwatch_iam_role_arn

    role = args.existing_cross_account_iam_role
    if role is not None and not role.is_empty():
        attributes["use_existing_cross_account_iam_role"] = True
        attributes["iam_role_arn"] = role.arn
        attributes["iam_role_external_id"] = role.external_id

    if args.existing_firehose_iam_role_arn:
        attributes["use_existing_firehose_iam_role"] = True
        attributes["firehose_iam_role_arn"] = args.existing_firehose_iam_role_arn

    if args.filter_pattern:
        attributes["filter_pattern"] = args.filter_pattern

    if not args.firehose_encryption_enabled:
        attributes["kinesis_firehose_encryption_enabled"] = False
    elif args.firehose_encryption_key_arn:
        attributes["kinesis_firehose_key_arn"] = args.firehose_encryption_key_arn

    deletion_days = args.kms_key_deletion_days
    if deletion_days is not None and KMS_KEY_DELETION_DAYS_MIN <= deletion_days <= KMS_KEY_DELETION_DAYS_MAX:
        attributes["kms_key_deletion_days"] = deletion_days
    elif deletion_days is not None:
        logger.debug(f"Ignoring kms_key_deletion_days={deletion_days}, outside the accepted window")

    # A multi-region key only makes sense when logs come from several regions
    if not args.kms_key_multi_region or len(regions) == 1:
        attributes["kms_key_multi_region"] = False
    if not args.kms_key_rotation:
        attributes["kms_key_rotation"] = False

    if not args.sns_topic_encryption_enabled:
        attributes["sns_topic_encryption_enabled"] = False
    elif args.sns_topic_encryption_key_arn:
        attributes["sns_topic_key_arn"] = args.sns_topic_encryption_key_arn

    if args.prefix:
        attributes["prefix"] = args.prefix
    if args.eks_audit_integration_name:
        attributes["lacework_integration_name"] = args.eks_audit_integration_name

    if len(regions) > 1:
        attributes["no_cw_subscription_filter"] = True
    else:
        attributes["cluster_names"] = args.region_cluster_map[regions[0]]

    attributes["cloudwatch_regions"] = regions

    return Module(
        name=EKS_AUDIT_MODULE_NAME,
        source=AWS_EKS_AUDIT_SOURCE,
        version=AWS_EKS_AUDIT_VERSION,
        attributes=attributes,
    )


@register_generator(Cloud.AWS_EKS_AUDIT.value, EksAuditArgs)
class EksAuditGenerator(BaseGenerator[EksAuditArgs]):
    """Generator for the AWS EKS audit log integration."""

    def validate(self) -> None:
        args = self.args
        if not args.region_cluster_map:
            raise InvalidInputsError("At least one region with a list of clusters must be set")

        for clusters in args.region_cluster_map.values():
            if not clusters:
                raise InvalidInputsError("At least one cluster must be supplied per region")

        role = args.existing_cross_account_iam_role
        if role is not None and role.is_partial():
            raise InvalidInputsError(
                "when using an existing cross account IAM role, existing role ARN and external ID all must be set"
            )

    def build_blocks(self) -> List[Any]:
        args = self.args
        regions = sorted(args.region_cluster_map)

        subscription_filters = []
        if len(regions) > 1:
            subscription_filters = [
                create_subscription_filter(region, args.region_cluster_map[region]) for region in regions
            ]

        return [
            create_required_providers(),
            create_aws_providers(regions),
            create_lacework_provider(args.lacework_profile),
            subscription_filters,
            create_eks_audit_module(args, regions),
        ]
