"""
AWS integration generator.

Builds the Terraform document for the Lacework AWS integrations:
configuration assessment (single account, additional accounts or an AWS
organization), CloudTrail and agentless workload scanning.

When any additional account is configured, the main account provider is
aliased ``main`` and every module is wired to an explicit provider.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from pydantic import Field

from ..constants import (
    AWS_AGENTLESS_SOURCE,
    AWS_AGENTLESS_STACKSET_TEMPLATE_URL,
    AWS_AGENTLESS_VERSION,
    AWS_CLOUDTRAIL_SOURCE,
    AWS_CLOUDTRAIL_VERSION,
    AWS_CONFIG_ORG_SOURCE,
    AWS_CONFIG_ORG_VERSION,
    AWS_CONFIG_SOURCE,
    AWS_CONFIG_VERSION,
)
from ..enums import Cloud
from ..errors import InvalidInputsError
from ..terraform.models import Module, Provider, Resource, create_generic_block, create_simple_traversal
from ..types import AwsSubAccount, ExistingIamRole, OrgAccountMapping
from .base import (
    BaseGenerator,
    GeneratorArgs,
    create_lacework_provider,
    create_required_providers,
    validate_organization_scope,
)
from .registry import register_generator

logger = logging.getLogger(__name__)

MAIN_PROVIDER_ALIAS = "main"
CONFIG_MODULE_NAME = "aws_config"
CLOUDTRAIL_MODULE_NAME = "main_cloudtrail"
AGENTLESS_GLOBAL_MODULE_NAME = "lacework_aws_agentless_scanning_global"
AGENTLESS_STACKSET_NAME = "snapshot_role"


class AwsArgs(GeneratorArgs):
    """
    Arguments for the AWS generator.

    The ``*_encryption_enabled`` flags are tri-state: None leaves the module
    default in place, False disables encryption, and True enables it with
    the optional customer managed key.
    """

    enable_config: bool = False
    enable_cloudtrail: bool = False
    enable_agentless: bool = False
    aws_organization: bool = False

    aws_region: Optional[str] = None
    aws_profile: Optional[str] = None
    aws_assume_role: Optional[str] = None
    lacework_account_id: Optional[str] = None
    lacework_organization_level: bool = False

    sub_accounts: List[AwsSubAccount] = Field(default_factory=list)
    agentless_scanning_accounts: List[AwsSubAccount] = Field(default_factory=list)

    # Organization agentless scanning
    agentless_management_account_id: Optional[str] = None
    # Account IDs, organizational unit IDs ("ou-...") or the organization root
    agentless_monitored_account_ids: List[str] = Field(default_factory=list)
    agentless_monitored_accounts: List[AwsSubAccount] = Field(default_factory=list)

    # CloudTrail
    consolidated_cloudtrail: bool = False
    cloudtrail_name: Optional[str] = None
    existing_cloudtrail_bucket_arn: Optional[str] = None
    existing_sns_topic_arn: Optional[str] = None
    existing_iam_role: Optional[ExistingIamRole] = None
    force_destroy_s3_bucket: bool = False
    bucket_name: Optional[str] = None
    bucket_encryption_enabled: Optional[bool] = None
    bucket_sse_key_arn: Optional[str] = None
    s3_bucket_notification: bool = False
    sns_topic_name: Optional[str] = None
    sns_topic_encryption_enabled: Optional[bool] = None
    sns_topic_encryption_key_arn: Optional[str] = None
    sqs_queue_name: Optional[str] = None
    sqs_encryption_enabled: Optional[bool] = None
    sqs_encryption_key_arn: Optional[str] = None
    org_account_mappings: Optional[OrgAccountMapping] = None

    # Organization configuration
    organization_id: Optional[str] = None
    organization_unit: Optional[str] = None
    lacework_account: Optional[str] = None
    lacework_sub_account: Optional[str] = None
    lacework_access_key_id: Optional[str] = None
    lacework_secret_key: Optional[str] = None
    resource_prefix: Optional[str] = None


def _extra_accounts(args: AwsArgs) -> List[AwsSubAccount]:
    return args.sub_accounts + args.agentless_scanning_accounts + args.agentless_monitored_accounts


def _has_extra_accounts(args: AwsArgs) -> bool:
    return bool(_extra_accounts(args))


def _main_providers(args: AwsArgs) -> Dict[str, str]:
    if _has_extra_accounts(args):
        return {"aws": f"aws.{MAIN_PROVIDER_ALIAS}"}
    return {}


def create_aws_providers(args: AwsArgs) -> List[Provider]:
    """
    Build the main account provider followed by one provider per extra account.

    Extra accounts sharing an alias get a single provider; validation
    guarantees they also share a profile and region.
    """
    attributes: Dict[str, Any] = {"region": args.aws_region}
    if args.aws_profile:
        attributes["profile"] = args.aws_profile
    if _has_extra_accounts(args):
        attributes["alias"] = MAIN_PROVIDER_ALIAS

    blocks = []
    if args.aws_assume_role:
        blocks.append(create_generic_block("assume_role", attributes={"role_arn": args.aws_assume_role}))
    providers = [Provider("aws", attributes, blocks)]

    seen_aliases = set()
    for account in _extra_accounts(args):
        alias = account.provider_alias
        if alias in seen_aliases:
            continue
        seen_aliases.add(alias)
        providers.append(Provider("aws", {
            "alias": alias,
            "profile": account.profile,
            "region": account.region,
        }))
    return providers


def create_config_modules(args: AwsArgs) -> List[Module]:
    """
    Build the configuration module(s).

    An AWS organization is covered by a single organization configuration
    module. Otherwise the main account gets ``aws_config`` and every
    additional account gets its own module bound to its provider.
    """
    if not args.enable_config:
        return []

    if args.aws_organization:
        attributes = {
            "lacework_account": args.lacework_account,
            "lacework_sub_account": args.lacework_sub_account,
            "lacework_access_key_id": args.lacework_access_key_id,
            "lacework_secret_key": args.lacework_secret_key,
            "organization_id": args.organization_id,
            "organization_unit": args.organization_unit,
        }
        if args.resource_prefix:
            attributes["resource_prefix"] = args.resource_prefix
        return [Module(
            name=CONFIG_MODULE_NAME,
            source=AWS_CONFIG_ORG_SOURCE,
            version=AWS_CONFIG_ORG_VERSION,
            attributes=attributes,
            providers=_main_providers(args),
        )]

    attributes = {}
    if args.lacework_account_id:
        attributes["lacework_aws_account_id"] = args.lacework_account_id

    modules = [Module(
        name=CONFIG_MODULE_NAME,
        source=AWS_CONFIG_SOURCE,
        version=AWS_CONFIG_VERSION,
        attributes=attributes,
        providers=_main_providers(args),
    )]
    for account in args.sub_accounts:
        alias = account.provider_alias
        modules.append(Module(
            name=f"{CONFIG_MODULE_NAME}_{alias}",
            source=AWS_CONFIG_SOURCE,
            version=AWS_CONFIG_VERSION,
            attributes=dict(attributes),
            providers={"aws": f"aws.{alias}"},
        ))
    return modules


def _add_encryption_attributes(
    attributes: Dict[str, Any],
    enabled: Optional[bool],
    enabled_name: str,
    key_arn: Optional[str],
    key_arn_name: str
) -> None:
    if enabled is False:
        attributes[enabled_name] = False
    elif enabled and key_arn:
        attributes[key_arn_name] = key_arn


def create_cloudtrail_module(args: AwsArgs) -> Optional[Module]:
    """
    Build the CloudTrail module, or None when CloudTrail is disabled.

    When the configuration module is generated in the same document and no
    existing IAM role was given, the trail reuses the role it creates.
    """
    if not args.enable_cloudtrail:
        return None

    attributes: Dict[str, Any] = {}
    if args.lacework_account_id:
        attributes["lacework_aws_account_id"] = args.lacework_account_id
    if args.consolidated_cloudtrail:
        attributes["consolidated_trail"] = True

    if args.existing_cloudtrail_bucket_arn:
        attributes["use_existing_cloudtrail"] = True
        attributes["bucket_arn"] = args.existing_cloudtrail_bucket_arn
        if args.cloudtrail_name:
            attributes["cloudtrail_name"] = args.cloudtrail_name
    else:
        if args.bucket_name:
            attributes["bucket_name"] = args.bucket_name
        if args.force_destroy_s3_bucket:
            attributes["bucket_force_destroy"] = True
        _add_encryption_attributes(
            attributes, args.bucket_encryption_enabled, "bucket_encryption_enabled",
            args.bucket_sse_key_arn, "bucket_sse_key_arn",
        )

    if args.s3_bucket_notification:
        attributes["use_s3_bucket_notification"] = True

    if args.aws_organization:
        attributes["is_organization_trail"] = True
        mappings = args.org_account_mappings
        if mappings is not None and not mappings.is_empty():
            attributes["org_account_mappings"] = [mappings.model_dump()]

    if args.existing_sns_topic_arn:
        attributes["use_existing_sns_topic"] = True
        attributes["sns_topic_arn"] = args.existing_sns_topic_arn
    else:
        if args.sns_topic_name:
            attributes["sns_topic_name"] = args.sns_topic_name
        _add_encryption_attributes(
            attributes, args.sns_topic_encryption_enabled, "sns_topic_encryption_enabled",
            args.sns_topic_encryption_key_arn, "sns_topic_encryption_key_arn",
        )

    if args.sqs_queue_name:
        attributes["sqs_queue_name"] = args.sqs_queue_name
    _add_encryption_attributes(
        attributes, args.sqs_encryption_enabled, "sqs_encryption_enabled",
        args.sqs_encryption_key_arn, "sqs_encryption_key_arn",
    )

    role = args.existing_iam_role
    if role is not None and not role.is_empty():
        attributes["use_existing_iam_role"] = True
        attributes["iam_role_name"] = role.name
        attributes["iam_role_arn"] = role.arn
        attributes["iam_role_external_id"] = role.external_id
    elif args.enable_config:
        attributes["use_existing_iam_role"] = True
        attributes["iam_role_name"] = create_simple_traversal("module", CONFIG_MODULE_NAME, "iam_role_name")
        attributes["iam_role_arn"] = create_simple_traversal("module", CONFIG_MODULE_NAME, "iam_role_arn")
        attributes["iam_role_external_id"] = create_simple_traversal("module", CONFIG_MODULE_NAME, "external_id")

    return Module(
        name=CLOUDTRAIL_MODULE_NAME,
        source=AWS_CLOUDTRAIL_SOURCE,
        version=AWS_CLOUDTRAIL_VERSION,
        attributes=attributes,
        providers=_main_providers(args),
    )


def _agentless_module(name: str, provider_alias: str, attributes: Dict[str, Any]) -> Module:
    return Module(
        name=name,
        source=AWS_AGENTLESS_SOURCE,
        version=AWS_AGENTLESS_VERSION,
        attributes=attributes,
        providers={"aws": f"aws.{provider_alias}"},
    )


def _global_module_reference() -> Any:
    return create_simple_traversal("module", AGENTLESS_GLOBAL_MODULE_NAME)


def _global_module_output(name: str) -> Any:
    return create_simple_traversal("module", AGENTLESS_GLOBAL_MODULE_NAME, name)


def _regional_scanning_module(account: AwsSubAccount) -> Module:
    alias = account.provider_alias
    return _agentless_module(
        f"lacework_aws_agentless_scanning_region_{alias}",
        alias,
        {"regional": True, "global_module_reference": _global_module_reference()},
    )


def create_agentless_modules(args: AwsArgs) -> List[Module]:
    """
    Build the single account agentless scanning modules.

    The global module lives in the main account; each scanning account gets
    a regional module that references it.
    """
    if not args.enable_agentless or args.aws_organization:
        return []

    modules = [Module(
        name=AGENTLESS_GLOBAL_MODULE_NAME,
        source=AWS_AGENTLESS_SOURCE,
        version=AWS_AGENTLESS_VERSION,
        attributes={"global": True, "regional": True},
        providers=_main_providers(args),
    )]
    modules.extend(_regional_scanning_module(account) for account in args.agentless_scanning_accounts)
    return modules


def create_organization_agentless_blocks(args: AwsArgs) -> List[Any]:
    """
    Build organization-wide agentless scanning.

    The management account gets the snapshot role, the first scanning
    account hosts the global module and the remaining scanning accounts get
    regional modules. Every monitored account gets a snapshot role module,
    and a service managed StackSet deploys the same role to the monitored
    organizational units.
    """
    if not (args.enable_agentless and args.aws_organization):
        return []

    scanning = args.agentless_scanning_accounts
    blocks: List[Any] = [
        _agentless_module(
            "lacework_aws_agentless_management_scanning_role",
            MAIN_PROVIDER_ALIAS,
            {"snapshot_role": True, "global_module_reference": _global_module_reference()},
        ),
        _agentless_module(
            AGENTLESS_GLOBAL_MODULE_NAME,
            scanning[0].provider_alias,
            {
                "global": True,
                "regional": True,
                "organization": {
                    "management_account": args.agentless_management_account_id,
                    "monitored_accounts": args.agentless_monitored_account_ids,
                },
            },
        ),
    ]
    blocks.extend(_regional_scanning_module(account) for account in scanning[1:])
    blocks.extend(
        _agentless_module(
            f"lacework_aws_agentless_monitored_scanning_role_{account.provider_alias}",
            account.provider_alias,
            {"snapshot_role": True, "global_module_reference": _global_module_reference()},
        )
        for account in args.agentless_monitored_accounts
    )

    blocks.append(Resource(
        resource_type="aws_cloudformation_stack_set",
        name=AGENTLESS_STACKSET_NAME,
        attributes={
            "capabilities": ["CAPABILITY_NAMED_IAM"],
            "description": "Lacework AWS Agentless Workload Scanning Organization Roles",
            "name": "lacework-agentless-scanning-stackset",
            "parameters": {
                "ECSTaskRoleArn": _global_module_output("agentless_scan_ecs_task_role_arn"),
                "ExternalId": _global_module_output("external_id"),
                "ResourceNamePrefix": _global_module_output("prefix"),
                "ResourceNameSuffix": _global_module_output("suffix"),
            },
            "permission_model": "SERVICE_MANAGED",
            "template_url": AWS_AGENTLESS_STACKSET_TEMPLATE_URL,
        },
        provider=f"aws.{MAIN_PROVIDER_ALIAS}",
        blocks=[
            create_generic_block("auto_deployment", attributes={
                "enabled": True,
                "retain_stacks_on_account_removal": False,
            }),
            create_generic_block("lifecycle", attributes={
                "ignore_changes": [create_simple_traversal("administration_role_arn")],
            }),
        ],
    ))

    # The StackSet targets organizational units only; plain account IDs are ignored
    unit_ids = [target for target in args.agentless_monitored_account_ids if target.startswith("ou-")]
    blocks.append(Resource(
        resource_type="aws_cloudformation_stack_set_instance",
        name=AGENTLESS_STACKSET_NAME,
        attributes={
            "stack_set_name": create_simple_traversal(
                "aws_cloudformation_stack_set", AGENTLESS_STACKSET_NAME, "name"
            ),
        },
        provider=f"aws.{MAIN_PROVIDER_ALIAS}",
        blocks=[create_generic_block("deployment_targets", attributes={"organizational_unit_ids": unit_ids})],
    ))
    return blocks


def _duplicated_aliases(accounts: List[AwsSubAccount]) -> List[str]:
    aliases = [account.provider_alias for account in accounts]
    return sorted({alias for alias in aliases if aliases.count(alias) > 1})


def validate_account_aliases(args: AwsArgs) -> None:
    """
    Check that every extra account maps to exactly one provider and module.

    Each account list names one module per alias, so an alias may appear
    only once per list. The same alias may be reused across lists only for
    the same profile and region, since those accounts share one provider.

    Raises:
        InvalidInputsError: If an alias is duplicated, reserved or ambiguous
    """
    account_lists = (
        ("sub account", args.sub_accounts),
        ("agentless scanning account", args.agentless_scanning_accounts),
        ("agentless monitored account", args.agentless_monitored_accounts),
    )
    for kind, accounts in account_lists:
        duplicates = _duplicated_aliases(accounts)
        if duplicates:
            raise InvalidInputsError(f"{kind} aliases must be unique, duplicated: {', '.join(duplicates)}")

    targets: Dict[str, Tuple[str, str]] = {}
    for account in _extra_accounts(args):
        alias = account.provider_alias
        if alias == MAIN_PROVIDER_ALIAS:
            raise InvalidInputsError(f"account alias {alias} is reserved for the main AWS account")
        target = (account.profile, account.region)
        if targets.setdefault(alias, target) != target:
            raise InvalidInputsError(f"account alias {alias} is used for more than one profile and region")


@register_generator(Cloud.AWS.value, AwsArgs)
class AwsGenerator(BaseGenerator[AwsArgs]):
    """Generator for the AWS configuration, CloudTrail and agentless integrations."""

    def validate(self) -> None:
        args = self.args
        if not (args.enable_agentless or args.enable_cloudtrail or args.enable_config):
            raise InvalidInputsError("Agentless, CloudTrail or Config integration must be enabled")

        if not args.aws_region:
            raise InvalidInputsError("Main AWS account region must be set")

        if args.existing_iam_role is not None and args.existing_iam_role.is_partial():
            raise InvalidInputsError(
                "when using an existing IAM role, existing role ARN, name, and external ID all must be set"
            )

        validate_organization_scope(args.aws_organization, args.organization_id, "AWS Organization integration")

        if args.aws_organization and args.enable_config:
            required = (
                args.lacework_account,
                args.lacework_sub_account,
                args.lacework_access_key_id,
                args.lacework_secret_key,
                args.organization_unit,
            )
            if not all(required):
                raise InvalidInputsError(
                    "Lacework organization credentials and an organization unit must be set "
                    "for an AWS Organization config integration"
                )

        if args.aws_organization and args.enable_agentless:
            if not args.agentless_management_account_id:
                raise InvalidInputsError("must specify a management account ID for Agentless organization integration")
            if not args.agentless_monitored_account_ids:
                raise InvalidInputsError("must specify monitored account ID list for Agentless organization integration")
            if not args.agentless_monitored_accounts:
                raise InvalidInputsError("must specify monitored accounts for Agentless organization integration")
            if not args.agentless_scanning_accounts:
                raise InvalidInputsError("must specify scanning accounts for Agentless organization integration")

        validate_account_aliases(args)

    def build_blocks(self) -> List[Any]:
        args = self.args
        if args.aws_organization and args.enable_agentless:
            logger.debug(
                f"Generating organization agentless scanning for "
                f"{len(args.agentless_monitored_account_ids)} monitored target(s)"
            )

        return [
            create_required_providers(),
            create_aws_providers(args),
            create_lacework_provider(args.lacework_profile, args.lacework_organization_level),
            create_config_modules(args),
            create_cloudtrail_module(args),
            create_agentless_modules(args),
            create_organization_agentless_blocks(args),
        ]
