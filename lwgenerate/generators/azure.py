"""
Azure integration generator.

Builds the Terraform document for the Lacework Azure integrations:
configuration assessment, activity log, agentless scanning and Microsoft
Entra ID activity log. The Active Directory application the integrations
authenticate with is either supplied by the user or created by the
``az_ad_application`` module in the same document.
"""

import ipaddress
from typing import Any, Dict, List, Optional

from pydantic import Field

from ..constants import (
    AZURE_ACTIVITY_LOG_SOURCE,
    AZURE_ACTIVITY_LOG_VERSION,
    AZURE_AD_SOURCE,
    AZURE_AD_VERSION,
    AZURE_AGENTLESS_DEFAULT_REGION,
    AZURE_AGENTLESS_SOURCE,
    AZURE_AGENTLESS_VERSION,
    AZURE_CONFIG_SOURCE,
    AZURE_CONFIG_VERSION,
    AZURE_ENTRA_ID_ACTIVITY_LOG_SOURCE,
    AZURE_ENTRA_ID_ACTIVITY_LOG_VERSION,
)
from ..enums import AzureIntegrationLevel, Cloud
from ..errors import InvalidInputsError
from ..terraform.models import Module, Provider, create_generic_block, create_simple_traversal
from ..types import TerraformOutput
from ..utils import make_safe_module_suffix
from .base import (
    BaseGenerator,
    GeneratorArgs,
    create_lacework_provider,
    create_outputs,
    create_required_providers,
)
from .registry import register_generator

AD_APPLICATION_MODULE_NAME = "az_ad_application"
ENTRA_ID_ACTIVITY_LOG_MODULE_NAME = "microsoft-entra-id-activity-log"


class AzureArgs(GeneratorArgs):
    """Arguments for the Azure generator."""

    enable_config: bool = False
    enable_activity_log: bool = False
    enable_agentless: bool = False
    enable_entra_id_activity_log: bool = False
    create_ad_integration: bool = False

    subscription_id: Optional[str] = None
    subscription_ids: List[str] = Field(default_factory=list)
    all_subscriptions: bool = False
    management_group: bool = False
    management_group_id: Optional[str] = None

    ad_application_id: Optional[str] = None
    ad_application_password: Optional[str] = None
    ad_service_principal_id: Optional[str] = None

    config_integration_name: Optional[str] = None
    activity_log_integration_name: Optional[str] = None
    entra_id_integration_name: Optional[str] = None

    storage_account_name: Optional[str] = None
    storage_account_resource_group: Optional[str] = None
    existing_storage_account: bool = False
    storage_location: Optional[str] = None
    use_storage_account_network_rules: bool = False
    storage_account_network_rule_ip_rules: List[str] = Field(default_factory=list)

    event_hub_location: Optional[str] = None
    event_hub_partition_count: Optional[int] = None

    integration_level: Optional[AzureIntegrationLevel] = None
    regions: List[str] = Field(default_factory=list)
    agentless_subscription_ids: List[str] = Field(default_factory=list)
    global_scanning: bool = False
    create_log_analytics_workspace: bool = False

    custom_outputs: List[TerraformOutput] = Field(default_factory=list)


def is_ipv4(address: str) -> bool:
    """Check whether a string is a valid IPv4 address."""
    try:
        return isinstance(ipaddress.ip_address(address), ipaddress.IPv4Address)
    except ValueError:
        return False


def _ad_application_attributes(args: AzureArgs, use_existing_with_created: bool = True) -> Dict[str, Any]:
    """
    Wire an integration to the AD application.

    Args:
        args: Generator arguments
        use_existing_with_created: Value of ``use_existing_ad_application`` when
            the application is created in the same document

    Returns:
        Attribute mapping for the integration module
    """
    if args.create_ad_integration:
        return {
            "use_existing_ad_application": use_existing_with_created,
            "application_id": create_simple_traversal("module", AD_APPLICATION_MODULE_NAME, "application_id"),
            "application_password": create_simple_traversal(
                "module", AD_APPLICATION_MODULE_NAME, "application_password"
            ),
            "service_principal_id": create_simple_traversal(
                "module", AD_APPLICATION_MODULE_NAME, "service_principal_id"
            ),
        }
    return {
        "use_existing_ad_application": True,
        "application_id": args.ad_application_id,
        "application_password": args.ad_application_password,
        "service_principal_id": args.ad_service_principal_id,
    }


def _add_subscription_attributes(args: AzureArgs, attributes: Dict[str, Any]) -> None:
    if args.all_subscriptions:
        attributes["all_subscriptions"] = True
    elif args.subscription_ids:
        attributes["subscription_ids"] = args.subscription_ids


def create_azurerm_provider(subscription_id: Optional[str]) -> Provider:
    """Build the azurerm provider; it always carries an empty ``features`` block."""
    attributes = {}
    if subscription_id:
        attributes["subscription_id"] = subscription_id
    return Provider("azurerm", attributes, [create_generic_block("features")])


def create_ad_application_module(args: AzureArgs) -> Optional[Module]:
    if not args.create_ad_integration:
        return None
    return Module(name=AD_APPLICATION_MODULE_NAME, source=AZURE_AD_SOURCE, version=AZURE_AD_VERSION)


def create_config_module(args: AzureArgs) -> Optional[Module]:
    if not args.enable_config:
        return None

    attributes = _ad_application_attributes(args)
    if args.config_integration_name:
        attributes["lacework_integration_name"] = args.config_integration_name
    _add_subscription_attributes(args, attributes)
    if args.management_group:
        attributes["use_management_group"] = True
        attributes["management_group_id"] = args.management_group_id

    return Module(
        name="az_config",
        source=AZURE_CONFIG_SOURCE,
        version=AZURE_CONFIG_VERSION,
        attributes=attributes,
    )


def create_activity_log_module(args: AzureArgs) -> Optional[Module]:
    """
    Build the activity log module.

    A newly created storage account gets infrastructure encryption and,
    when requested, network rules. An existing account is referenced by
    name and resource group only.
    """
    if not args.enable_activity_log:
        return None

    attributes = _ad_application_attributes(args)
    if args.activity_log_integration_name:
        attributes["lacework_integration_name"] = args.activity_log_integration_name
    _add_subscription_attributes(args, attributes)

    if args.storage_account_name:
        attributes["storage_account_name"] = args.storage_account_name

    if args.existing_storage_account:
        attributes["use_existing_storage_account"] = True
        attributes["storage_account_resource_group"] = args.storage_account_resource_group
    else:
        attributes["infrastructure_encryption_enabled"] = True
        if args.use_storage_account_network_rules:
            attributes["use_storage_account_network_rules"] = True
            if args.storage_account_network_rule_ip_rules:
                attributes["storage_account_network_rule_ip_rules"] = args.storage_account_network_rule_ip_rules

    if args.storage_location:
        attributes["location"] = args.storage_location

    return Module(
        name="az_activity_log",
        source=AZURE_ACTIVITY_LOG_SOURCE,
        version=AZURE_ACTIVITY_LOG_VERSION,
        attributes=attributes,
    )


def create_agentless_modules(args: AzureArgs) -> List[Module]:
    """
    Build one agentless scanning module per region.

    Later regions reference the module of the first region, which is the
    only one that may hold the global resources.
    """
    if not args.enable_agentless:
        return []

    regions = args.regions or [AZURE_AGENTLESS_DEFAULT_REGION]
    level = args.integration_level
    scope = "tenant" if level == AzureIntegrationLevel.TENANT else "subscription"

    modules = []
    first_module_name = None
    for i, region in enumerate(regions):
        is_first_region = i == 0
        name = f"lacework_azure_agentless_scanning_{scope}_{make_safe_module_suffix(region)}"

        attributes: Dict[str, Any] = {
            "integration_level": level,
            "region": region,
            "global": args.global_scanning and is_first_region,
            "create_log_analytics_workspace": args.create_log_analytics_workspace,
        }
        if is_first_region:
            first_module_name = name
        else:
            attributes["global_module_reference"] = create_simple_traversal("module", first_module_name)

        if args.subscription_id:
            attributes["scanning_subscription_id"] = args.subscription_id

        if level == AzureIntegrationLevel.SUBSCRIPTION and is_first_region and args.agentless_subscription_ids:
            attributes["included_subscriptions"] = [
                f"/subscriptions/{subscription}" for subscription in args.agentless_subscription_ids
            ]

        modules.append(Module(
            name=name,
            source=AZURE_AGENTLESS_SOURCE,
            version=AZURE_AGENTLESS_VERSION,
            attributes=attributes,
        ))
    return modules


def create_entra_id_activity_log_module(args: AzureArgs) -> Optional[Module]:
    if not args.enable_entra_id_activity_log:
        return None

    # The Entra ID module creates its own application when none is passed in
    attributes = _ad_application_attributes(args, use_existing_with_created=False)
    if args.entra_id_integration_name:
        attributes["lacework_integration_name"] = args.entra_id_integration_name
    if args.event_hub_location:
        attributes["location"] = args.event_hub_location
    if args.event_hub_partition_count and args.event_hub_partition_count > 0:
        attributes["num_partitions"] = args.event_hub_partition_count

    return Module(
        name=ENTRA_ID_ACTIVITY_LOG_MODULE_NAME,
        source=AZURE_ENTRA_ID_ACTIVITY_LOG_SOURCE,
        version=AZURE_ENTRA_ID_ACTIVITY_LOG_VERSION,
        attributes=attributes,
    )


@register_generator(Cloud.AZURE.value, AzureArgs)
class AzureGenerator(BaseGenerator[AzureArgs]):
    """Generator for the Azure integrations."""

    def validate(self) -> None:
        args = self.args
        any_integration = (
            args.enable_activity_log or args.enable_agentless
            or args.enable_config or args.enable_entra_id_activity_log
        )
        if not any_integration:
            raise InvalidInputsError("audit log, agentless or config integration must be enabled")

        if not args.subscription_id:
            raise InvalidInputsError("subscription_id must be provided")

        needs_ad = args.enable_config or args.enable_activity_log or args.enable_entra_id_activity_log
        if not args.create_ad_integration and needs_ad:
            if not (args.ad_application_id and args.ad_service_principal_id and args.ad_application_password):
                raise InvalidInputsError("Active directory details must be set")

        if args.management_group and not args.management_group_id:
            raise InvalidInputsError("When Group Management is enabled, then Group Id must be configured")
        if args.management_group_id and not args.management_group:
            raise InvalidInputsError("To provide a Group Id, Group Management must be enabled")

        if args.existing_storage_account and not (
            args.storage_account_name and args.storage_account_resource_group
        ):
            raise InvalidInputsError(
                "When using existing storage account, storage account details must be configured"
            )

        for ip_rule in args.storage_account_network_rule_ip_rules:
            if not is_ipv4(ip_rule):
                raise InvalidInputsError(f"storage account network rule IP {ip_rule} is not a valid IPv4 address")

        if args.enable_agentless:
            if args.integration_level is None:
                raise InvalidInputsError("integration_level must be set for Agentless Integration")
            if (args.integration_level == AzureIntegrationLevel.SUBSCRIPTION
                    and not args.agentless_subscription_ids):
                raise InvalidInputsError(
                    "subscription_ids must be provided for Agentless Integration with SUBSCRIPTION integration level"
                )

    def build_blocks(self) -> List[Any]:
        args = self.args
        return [
            create_required_providers(),
            create_lacework_provider(args.lacework_profile),
            Provider("azuread"),
            create_azurerm_provider(args.subscription_id),
            create_ad_application_module(args),
            create_config_module(args),
            create_activity_log_module(args),
            create_agentless_modules(args),
            create_entra_id_activity_log_module(args),
            create_outputs(args.custom_outputs),
        ]
