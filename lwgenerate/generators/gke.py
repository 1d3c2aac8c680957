"""
GKE audit log generator.

Builds the Terraform document that ships GKE audit logs to Lacework at
project or organization scope.
"""

from typing import Any, Dict, List, Optional

from ..constants import GCP_GKE_AUDIT_LOG_SOURCE, GCP_GKE_AUDIT_LOG_VERSION
from ..enums import Cloud, IntegrationType
from ..errors import InvalidInputsError
from ..terraform.models import Module, Provider
from ..types import ExistingServiceAccount, Labels
from .base import (
    BaseGenerator,
    GeneratorArgs,
    create_lacework_provider,
    create_required_providers,
    validate_organization_scope,
)
from .registry import register_generator


class GkeArgs(GeneratorArgs):
    """Arguments for the GKE audit log generator."""

    project_id: Optional[str] = None
    service_account_credentials: Optional[str] = None
    organization_integration: bool = False
    organization_id: Optional[str] = None
    existing_service_account: Optional[ExistingServiceAccount] = None
    existing_sink_name: Optional[str] = None
    integration_name: Optional[str] = None
    labels: Optional[Labels] = None
    pubsub_subscription_labels: Optional[Labels] = None
    pubsub_topic_labels: Optional[Labels] = None
    prefix: Optional[str] = None
    wait_time: Optional[str] = None


def create_gke_audit_log_module(args: GkeArgs) -> Module:
    attributes: Dict[str, Any] = {}
    if args.organization_integration:
        level = "organization"
        attributes["integration_type"] = IntegrationType.ORGANIZATION
        attributes["organization_id"] = args.organization_id
    else:
        level = "project"
        attributes["integration_type"] = IntegrationType.PROJECT

    if args.existing_sink_name:
        attributes["existing_sink_name"] = args.existing_sink_name

    if args.existing_service_account is not None:
        attributes["use_existing_service_account"] = True
        attributes["service_account_name"] = args.existing_service_account.name
        attributes["service_account_private_key"] = args.existing_service_account.private_key

    if args.integration_name:
        attributes["lacework_integration_name"] = args.integration_name
    if args.labels is not None:
        attributes["labels"] = args.labels
    if args.pubsub_subscription_labels is not None:
        attributes["pubsub_subscription_labels"] = args.pubsub_subscription_labels
    if args.pubsub_topic_labels is not None:
        attributes["pubsub_topic_labels"] = args.pubsub_topic_labels
    if args.prefix:
        attributes["prefix"] = args.prefix
    if args.wait_time:
        attributes["wait_time"] = args.wait_time

    return Module(
        name=f"gcp_{level}_level_gke_audit_log",
        source=GCP_GKE_AUDIT_LOG_SOURCE,
        version=GCP_GKE_AUDIT_LOG_VERSION,
        attributes=attributes,
    )


@register_generator(Cloud.GKE.value, GkeArgs)
class GkeGenerator(BaseGenerator[GkeArgs]):
    """Generator for the GKE audit log integration. It has no enable flags."""

    def validate(self) -> None:
        args = self.args
        validate_organization_scope(args.organization_integration, args.organization_id)

        if args.existing_service_account is not None and args.existing_service_account.is_partial():
            raise InvalidInputsError(
                "when using an existing Service Account, existing name, and base64 "
                "encoded JSON Private Key fields all must be set"
            )

    def build_blocks(self) -> List[Any]:
        args = self.args
        google_attributes: Dict[str, Any] = {}
        if args.service_account_credentials:
            google_attributes["credentials"] = args.service_account_credentials
        if args.project_id:
            google_attributes["project"] = args.project_id

        return [
            create_required_providers(),
            Provider("google", google_attributes),
            create_lacework_provider(args.lacework_profile),
            create_gke_audit_log_module(args),
        ]
