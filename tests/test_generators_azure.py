"""Tests for lwgenerate.generators.azure module."""

import pytest
from pydantic import ValidationError

from lwgenerate.errors import InvalidInputsError
from lwgenerate.generators.azure import AzureArgs, AzureGenerator, is_ipv4

REQUIRED_PROVIDERS = (
    'terraform {\n'
    '  required_providers {\n'
    '    lacework = {\n'
    '      source  = "lacework/lacework"\n'
    '      version = "~> 1.0"\n'
    '    }\n'
    '  }\n'
    '}\n'
)

EXISTING_AD = {
    "ad_application_id": "app-id",
    "ad_application_password": "app-password",
    "ad_service_principal_id": "sp-id",
}


def generate(**kwargs) -> str:
    kwargs.setdefault("subscription_id", "sub-1")
    return AzureGenerator(AzureArgs(**kwargs)).generate()


class TestAzureGolden:
    """Byte-exact documents for representative configurations."""

    def test_config_and_activity_log_with_new_ad_application(self) -> None:
        hcl = generate(enable_config=True, enable_activity_log=True, create_ad_integration=True)

        assert hcl == REQUIRED_PROVIDERS + (
            '\n'
            'provider "azuread" {\n'
            '}\n'
            '\n'
            'provider "azurerm" {\n'
            '  subscription_id = "sub-1"\n'
            '  features {\n'
            '  }\n'
            '}\n'
            '\n'
            'module "az_ad_application" {\n'
            '  source  = "lacework/ad-application/azure"\n'
            '  version = "~> 1.0"\n'
            '}\n'
            '\n'
            'module "az_config" {\n'
            '  source                      = "lacework/config/azure"\n'
            '  version                     = "~> 2.0"\n'
            '  application_id              = module.az_ad_application.application_id\n'
            '  application_password        = module.az_ad_application.application_password\n'
            '  service_principal_id        = module.az_ad_application.service_principal_id\n'
            '  use_existing_ad_application = true\n'
            '}\n'
            '\n'
            'module "az_activity_log" {\n'
            '  source                            = "lacework/activity-log/azure"\n'
            '  version                           = "~> 2.0"\n'
            '  application_id                    = module.az_ad_application.application_id\n'
            '  application_password              = module.az_ad_application.application_password\n'
            '  infrastructure_encryption_enabled = true\n'
            '  service_principal_id              = module.az_ad_application.service_principal_id\n'
            '  use_existing_ad_application       = true\n'
            '}\n'
        )

    def test_config_with_existing_ad_application(self) -> None:
        hcl = generate(enable_config=True, lacework_profile="default", **EXISTING_AD)

        assert hcl == REQUIRED_PROVIDERS + (
            '\n'
            'provider "lacework" {\n'
            '  profile = "default"\n'
            '}\n'
            '\n'
            'provider "azuread" {\n'
            '}\n'
            '\n'
            'provider "azurerm" {\n'
            '  subscription_id = "sub-1"\n'
            '  features {\n'
            '  }\n'
            '}\n'
            '\n'
            'module "az_config" {\n'
            '  source                      = "lacework/config/azure"\n'
            '  version                     = "~> 2.0"\n'
            '  application_id              = "app-id"\n'
            '  application_password        = "app-password"\n'
            '  service_principal_id        = "sp-id"\n'
            '  use_existing_ad_application = true\n'
            '}\n'
        )


class TestAzureModules:
    """Module attributes for the individual options."""

    def test_all_subscriptions_wins_over_list(self) -> None:
        hcl = generate(enable_config=True, create_ad_integration=True, all_subscriptions=True, subscription_ids=["a"])
        assert "all_subscriptions           = true" in hcl
        assert "subscription_ids" not in hcl

    def test_subscription_ids(self) -> None:
        hcl = generate(enable_config=True, create_ad_integration=True, subscription_ids=["a", "b"])
        assert 'subscription_ids            = ["a", "b"]' in hcl

    def test_management_group(self) -> None:
        hcl = generate(
            enable_config=True,
            create_ad_integration=True,
            management_group=True,
            management_group_id="mg-1",
            config_integration_name="cfg",
        )
        assert 'management_group_id         = "mg-1"' in hcl
        assert "use_management_group        = true" in hcl
        assert 'lacework_integration_name   = "cfg"' in hcl

    def test_existing_storage_account(self) -> None:
        hcl = generate(
            enable_activity_log=True,
            create_ad_integration=True,
            existing_storage_account=True,
            storage_account_name="sa",
            storage_account_resource_group="rg",
            use_storage_account_network_rules=True,
        )

        assert 'storage_account_name           = "sa"' in hcl
        assert 'storage_account_resource_group = "rg"' in hcl
        assert "use_existing_storage_account   = true" in hcl
        assert "infrastructure_encryption_enabled" not in hcl
        assert "use_storage_account_network_rules" not in hcl

    def test_storage_network_rules_and_location(self) -> None:
        hcl = generate(
            enable_activity_log=True,
            create_ad_integration=True,
            use_storage_account_network_rules=True,
            storage_account_network_rule_ip_rules=["10.0.0.1", "192.168.1.1"],
            storage_location="West US",
            activity_log_integration_name="activity",
        )

        assert 'storage_account_network_rule_ip_rules = ["10.0.0.1", "192.168.1.1"]' in hcl
        assert "use_storage_account_network_rules     = true" in hcl
        assert 'location                              = "West US"' in hcl
        assert 'lacework_integration_name             = "activity"' in hcl

    def test_agentless_subscription_level(self) -> None:
        hcl = generate(
            enable_agentless=True,
            integration_level="SUBSCRIPTION",
            agentless_subscription_ids=["s1", "s2"],
            regions=["West US", "East US 2"],
            global_scanning=True,
            create_log_analytics_workspace=True,
        )

        assert (
            'module "lacework_azure_agentless_scanning_subscription_west_us" {\n'
            '  source                         = "lacework/agentless-scanning/azure"\n'
            '  version                        = "~> 0.1"\n'
            '  create_log_analytics_workspace = true\n'
            '  global                         = true\n'
            '  included_subscriptions         = ["/subscriptions/s1", "/subscriptions/s2"]\n'
            '  integration_level              = "SUBSCRIPTION"\n'
            '  region                         = "West US"\n'
            '  scanning_subscription_id       = "sub-1"\n'
            '}\n'
        ) in hcl
        assert (
            'module "lacework_azure_agentless_scanning_subscription_east_us_2" {\n'
            '  source                         = "lacework/agentless-scanning/azure"\n'
            '  version                        = "~> 0.1"\n'
            '  create_log_analytics_workspace = true\n'
            '  global                         = false\n'
            '  global_module_reference        = module.lacework_azure_agentless_scanning_subscription_west_us\n'
            '  integration_level              = "SUBSCRIPTION"\n'
            '  region                         = "East US 2"\n'
            '  scanning_subscription_id       = "sub-1"\n'
            '}\n'
        ) in hcl

    def test_agentless_tenant_level_default_region(self) -> None:
        hcl = generate(enable_agentless=True, integration_level="TENANT")

        assert 'module "lacework_azure_agentless_scanning_tenant_west_us" {' in hcl
        assert 'integration_level              = "TENANT"' in hcl
        assert "included_subscriptions" not in hcl
        assert 'provider "azuread"' in hcl

    def test_agentless_does_not_need_ad_details(self) -> None:
        hcl = generate(enable_agentless=True, integration_level="TENANT")
        assert "application_id" not in hcl

    def test_entra_id_activity_log_with_created_application(self) -> None:
        hcl = generate(
            enable_entra_id_activity_log=True,
            create_ad_integration=True,
            entra_id_integration_name="entra",
            event_hub_location="West US",
            event_hub_partition_count=2,
        )

        assert 'module "microsoft-entra-id-activity-log" {' in hcl
        assert 'source                      = "lacework/microsoft-entra-id-activity-log/azure"' in hcl
        assert "use_existing_ad_application = false" in hcl
        assert 'location                    = "West US"' in hcl
        assert "num_partitions              = 2" in hcl

    def test_entra_id_partition_count_zero_omitted(self) -> None:
        hcl = generate(enable_entra_id_activity_log=True, event_hub_partition_count=0, **EXISTING_AD)
        assert "num_partitions" not in hcl
        assert "use_existing_ad_application = true" in hcl

    def test_module_order(self) -> None:
        hcl = generate(
            enable_config=True,
            enable_activity_log=True,
            enable_agentless=True,
            enable_entra_id_activity_log=True,
            create_ad_integration=True,
            integration_level="TENANT",
        )
        names = [
            'module "az_ad_application"',
            'module "az_config"',
            'module "az_activity_log"',
            'module "lacework_azure_agentless_scanning_tenant_west_us"',
            'module "microsoft-entra-id-activity-log"',
        ]
        positions = [hcl.index(name) for name in names]
        assert positions == sorted(positions)


class TestAzureValidation:
    """Invalid argument combinations are rejected."""

    def test_no_integration_enabled(self) -> None:
        with pytest.raises(InvalidInputsError) as exc_info:
            generate()
        assert exc_info.value.reason == "audit log, agentless or config integration must be enabled"

    def test_subscription_id_required(self) -> None:
        with pytest.raises(InvalidInputsError, match="subscription_id must be provided"):
            generate(enable_config=True, create_ad_integration=True, subscription_id=None)

    def test_ad_details_required(self) -> None:
        with pytest.raises(InvalidInputsError, match="Active directory details must be set"):
            generate(enable_config=True, ad_application_id="app-id")

    def test_management_group_requires_id(self) -> None:
        with pytest.raises(InvalidInputsError, match="When Group Management is enabled, then Group Id must be configured"):
            generate(enable_config=True, create_ad_integration=True, management_group=True)

    def test_group_id_requires_management_group(self) -> None:
        with pytest.raises(InvalidInputsError, match="To provide a Group Id, Group Management must be enabled"):
            generate(enable_config=True, create_ad_integration=True, management_group_id="mg")

    def test_existing_storage_account_requires_details(self) -> None:
        with pytest.raises(InvalidInputsError, match="storage account details must be configured"):
            generate(
                enable_activity_log=True,
                create_ad_integration=True,
                existing_storage_account=True,
                storage_account_name="sa",
            )

    def test_invalid_ip_rule(self) -> None:
        with pytest.raises(InvalidInputsError, match="storage account network rule IP 10.0.0.256 is not a valid IPv4 address"):
            generate(
                enable_activity_log=True,
                create_ad_integration=True,
                use_storage_account_network_rules=True,
                storage_account_network_rule_ip_rules=["10.0.0.256"],
            )

    def test_agentless_requires_integration_level(self) -> None:
        with pytest.raises(InvalidInputsError, match="integration_level must be set for Agentless Integration"):
            generate(enable_agentless=True)

    def test_subscription_level_requires_subscription_ids(self) -> None:
        with pytest.raises(InvalidInputsError, match="subscription_ids must be provided"):
            generate(enable_agentless=True, integration_level="SUBSCRIPTION")

    def test_unknown_integration_level_rejected(self) -> None:
        with pytest.raises(ValidationError):
            AzureArgs(enable_agentless=True, integration_level="REGION")


class TestIsIpv4:
    """Test is_ipv4 helper."""

    @pytest.mark.parametrize("address,expected", [
        ("10.0.0.1", True),
        ("255.255.255.255", True),
        ("10.0.0.256", False),
        ("::1", False),
        ("not-an-ip", False),
        ("", False),
    ])
    def test_is_ipv4(self, address, expected) -> None:
        assert is_ipv4(address) is expected
