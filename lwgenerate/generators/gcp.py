"""
GCP integration generator.

Builds the Terraform document for the Lacework GCP integrations: agentless
scanning, configuration assessment and audit log (GCS bucket or Pub/Sub
based), at project or organization scope.
"""

from typing import Any, Dict, List, Optional

from pydantic import Field

from ..constants import (
    GCP_AGENTLESS_SOURCE,
    GCP_AGENTLESS_VERSION,
    GCP_AUDIT_LOG_SOURCE,
    GCP_AUDIT_LOG_VERSION,
    GCP_CONFIG_SOURCE,
    GCP_CONFIG_VERSION,
    GCP_PUB_SUB_AUDIT_LOG_SOURCE,
    GCP_PUB_SUB_AUDIT_LOG_VERSION,
)
from ..enums import Cloud, IntegrationType
from ..errors import InvalidInputsError
from ..terraform.models import ForEach, Module, Provider, create_generic_block, create_simple_traversal
from ..types import ExistingServiceAccount, Labels, TerraformOutput
from ..utils import unique_sorted
from .base import (
    BaseGenerator,
    GeneratorArgs,
    create_lacework_provider,
    create_outputs,
    create_required_providers,
    validate_organization_scope,
)
from .registry import register_generator

AGENTLESS_GLOBAL_MODULE_NAME = "lacework_gcp_agentless_scanning_global"


class GcpArgs(GeneratorArgs):
    """Arguments for the GCP generator."""

    enable_agentless: bool = False
    enable_config: bool = False
    enable_audit_log: bool = False
    use_pub_sub_audit: bool = False

    project_id: Optional[str] = None
    service_account_credentials: Optional[str] = None
    organization_integration: bool = False
    organization_id: Optional[str] = None
    existing_service_account: Optional[ExistingServiceAccount] = None

    config_integration_name: Optional[str] = None
    audit_log_integration_name: Optional[str] = None

    audit_log_labels: Optional[Labels] = None
    bucket_labels: Optional[Labels] = None
    pubsub_subscription_labels: Optional[Labels] = None
    pubsub_topic_labels: Optional[Labels] = None
    provider_default_labels: Optional[Labels] = None

    custom_bucket_name: Optional[str] = None
    bucket_region: Optional[str] = None
    existing_log_bucket_name: Optional[str] = None
    existing_log_sink_name: Optional[str] = None
    # Module defaults are kept by leaving these alone
    enable_ubla: bool = True
    log_bucket_lifecycle_rule_age: Optional[int] = None

    folders_to_include: List[str] = Field(default_factory=list)
    folders_to_exclude: List[str] = Field(default_factory=list)
    include_root_projects: bool = True

    custom_filter: Optional[str] = None
    google_workspace_filter: bool = True
    k8s_filter: bool = True

    prefix: Optional[str] = None
    wait_time: Optional[str] = None

    projects: List[str] = Field(default_factory=list)
    regions: List[str] = Field(default_factory=list)
    project_filter_list: List[str] = Field(default_factory=list)
    custom_outputs: List[TerraformOutput] = Field(default_factory=list)


def create_google_providers(
    service_account_credentials: Optional[str],
    project_id: Optional[str],
    regions: List[str],
    default_labels: Optional[Labels] = None
) -> List[Provider]:
    """
    Build the google provider blocks.

    One provider aliased by region name is built per region. Without
    regions a single unaliased provider is built, which may be empty.

    Args:
        service_account_credentials: Path to the service account key file
        project_id: Project the provider operates on
        regions: Regions needing their own provider
        default_labels: Labels applied to every resource the provider creates

    Returns:
        List of google providers
    """
    providers = []
    for region in regions or [None]:
        attributes: Dict[str, Any] = {}
        if service_account_credentials:
            attributes["credentials"] = service_account_credentials
        if project_id:
            attributes["project"] = project_id
        if region:
            attributes["alias"] = region
            attributes["region"] = region

        blocks = []
        if default_labels:
            blocks.append(create_generic_block("default_labels", attributes=default_labels))
        providers.append(Provider("google", attributes, blocks))
    return providers


def _config_module_name(args: GcpArgs) -> str:
    if args.organization_integration:
        return "gcp_organization_level_config"
    return "gcp_project_level_config"


def _audit_log_module_name(args: GcpArgs) -> str:
    if args.organization_integration:
        return "gcp_organization_level_audit_log"
    return "gcp_project_audit_log"


def _projects_for_each(args: GcpArgs) -> Optional[ForEach]:
    if not args.projects:
        return None
    return ForEach("project_id", {project: project for project in args.projects})


def _first_region_providers(args: GcpArgs) -> Dict[str, str]:
    # Integrations share the provider of the first agentless region
    if args.enable_agentless and args.regions:
        return {"google": f"google.{args.regions[0]}"}
    return {}


def _add_folder_attributes(args: GcpArgs, attributes: Dict[str, Any]) -> None:
    if args.folders_to_include:
        attributes["folders_to_include"] = unique_sorted(args.folders_to_include)

    if args.folders_to_exclude:
        attributes["folders_to_exclude"] = unique_sorted(args.folders_to_exclude)
        if not args.include_root_projects:
            attributes["include_root_projects"] = False


def _add_existing_service_account(args: GcpArgs, attributes: Dict[str, Any]) -> None:
    if args.existing_service_account is not None:
        attributes["use_existing_service_account"] = True
        attributes["service_account_name"] = args.existing_service_account.name
        attributes["service_account_private_key"] = args.existing_service_account.private_key


def create_agentless_modules(args: GcpArgs) -> List[Module]:
    """
    Build one agentless scanning module per region.

    The first region hosts the global resources; every later region refers
    back to it through ``global_module_reference``.
    """
    if not args.enable_agentless:
        return []

    modules = []
    for i, region in enumerate(args.regions):
        name = AGENTLESS_GLOBAL_MODULE_NAME
        attributes: Dict[str, Any] = {"regional": True}
        if i == 0:
            attributes["global"] = True
            if args.project_filter_list:
                attributes["project_filter_list"] = args.project_filter_list
            if args.organization_integration:
                attributes["integration_type"] = IntegrationType.ORGANIZATION
                attributes["organization_id"] = args.organization_id
        else:
            name = f"lacework_gcp_agentless_scanning_region_{region}"
            attributes["global_module_reference"] = create_simple_traversal(
                "module", AGENTLESS_GLOBAL_MODULE_NAME
            )

        modules.append(Module(
            name=name,
            source=GCP_AGENTLESS_SOURCE,
            version=GCP_AGENTLESS_VERSION,
            attributes=attributes,
            providers={"google": f"google.{region}"},
        ))
    return modules


def create_config_module(args: GcpArgs) -> Optional[Module]:
    """Build the configuration module, or None when config is disabled."""
    if not args.enable_config:
        return None

    attributes: Dict[str, Any] = {}
    if args.organization_integration:
        attributes["org_integration"] = True
        attributes["organization_id"] = args.organization_id
        _add_folder_attributes(args, attributes)

    _add_existing_service_account(args, attributes)

    if args.config_integration_name:
        attributes["lacework_integration_name"] = args.config_integration_name
    if args.prefix:
        attributes["prefix"] = args.prefix
    if args.wait_time:
        attributes["wait_time"] = args.wait_time

    return Module(
        name=_config_module_name(args),
        source=GCP_CONFIG_SOURCE,
        version=GCP_CONFIG_VERSION,
        attributes=attributes,
        providers=_first_region_providers(args),
        for_each=_projects_for_each(args),
    )


def create_audit_log_module(args: GcpArgs) -> Optional[Module]:
    """
    Build the audit log module, or None when the audit log is disabled.

    When the configuration module is generated in the same document and no
    existing service account was given, the audit log reuses the service
    account created by the configuration module.
    """
    if not args.enable_audit_log:
        return None

    attributes: Dict[str, Any] = {}
    if args.pubsub_subscription_labels is not None:
        attributes["pubsub_subscription_labels"] = args.pubsub_subscription_labels
    if args.pubsub_topic_labels is not None:
        attributes["pubsub_topic_labels"] = args.pubsub_topic_labels

    if args.existing_log_bucket_name:
        attributes["existing_bucket_name"] = args.existing_log_bucket_name
    else:
        if args.log_bucket_lifecycle_rule_age is not None:
            attributes["lifecycle_rule_age"] = args.log_bucket_lifecycle_rule_age
        if args.audit_log_labels is not None:
            attributes["labels"] = args.audit_log_labels
        if args.bucket_labels is not None:
            attributes["bucket_labels"] = args.bucket_labels
        if not args.enable_ubla:
            attributes["enable_ubla"] = False
        if args.custom_bucket_name:
            attributes["custom_bucket_name"] = args.custom_bucket_name
        if args.bucket_region:
            attributes["bucket_region"] = args.bucket_region

    if args.existing_log_sink_name:
        attributes["existing_sink_name"] = args.existing_log_sink_name

    if args.organization_integration:
        if args.use_pub_sub_audit:
            attributes["integration_type"] = IntegrationType.ORGANIZATION
        else:
            attributes["org_integration"] = True
        attributes["organization_id"] = args.organization_id
        _add_folder_attributes(args, attributes)

    if args.existing_service_account is None and args.enable_config:
        config_module = _config_module_name(args)
        if args.projects:
            config_module = f"{config_module}[each.key]"
        attributes["use_existing_service_account"] = True
        attributes["service_account_name"] = create_simple_traversal(
            "module", config_module, "service_account_name"
        )
        attributes["service_account_private_key"] = create_simple_traversal(
            "module", config_module, "service_account_private_key"
        )
    _add_existing_service_account(args, attributes)

    if args.audit_log_integration_name:
        attributes["lacework_integration_name"] = args.audit_log_integration_name
    if args.custom_filter:
        attributes["custom_filter"] = args.custom_filter
    if not args.google_workspace_filter:
        attributes["google_workspace_filter"] = False
    if not args.k8s_filter:
        attributes["k8s_filter"] = False
    if args.prefix:
        attributes["prefix"] = args.prefix
    if args.wait_time:
        attributes["wait_time"] = args.wait_time

    if args.use_pub_sub_audit:
        source, version = GCP_PUB_SUB_AUDIT_LOG_SOURCE, GCP_PUB_SUB_AUDIT_LOG_VERSION
    else:
        source, version = GCP_AUDIT_LOG_SOURCE, GCP_AUDIT_LOG_VERSION

    return Module(
        name=_audit_log_module_name(args),
        source=source,
        version=version,
        attributes=attributes,
        providers=_first_region_providers(args),
        for_each=_projects_for_each(args),
    )


@register_generator(Cloud.GCP.value, GcpArgs)
class GcpGenerator(BaseGenerator[GcpArgs]):
    """Generator for the GCP agentless, configuration and audit log integrations."""

    def validate(self) -> None:
        args = self.args
        if not (args.enable_agentless or args.enable_audit_log or args.enable_config):
            raise InvalidInputsError("agentless, audit log or configuration integration must be enabled")

        if args.enable_agentless and not args.regions:
            raise InvalidInputsError("regions must be provided for Agentless Integration")

        validate_organization_scope(args.organization_integration, args.organization_id)

        if args.existing_service_account is not None and args.existing_service_account.is_partial():
            raise InvalidInputsError(
                "when using an existing Service Account, existing name, and base64 "
                "encoded JSON Private Key fields all must be set"
            )

    def build_blocks(self) -> List[Any]:
        args = self.args
        return [
            create_required_providers(),
            create_google_providers(
                args.service_account_credentials,
                args.project_id,
                args.regions,
                args.provider_default_labels,
            ),
            create_lacework_provider(args.lacework_profile),
            create_agentless_modules(args),
            create_config_module(args),
            create_audit_log_module(args),
            create_outputs(args.custom_outputs),
        ]
