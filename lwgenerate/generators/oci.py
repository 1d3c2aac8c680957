"""OCI configuration integration generator."""

from typing import Any, List, Optional

from ..constants import OCI_CONFIG_SOURCE, OCI_CONFIG_VERSION, OCI_LACEWORK_PROVIDER_VERSION
from ..enums import Cloud
from ..errors import InvalidInputsError
from ..terraform.models import Module
from .base import BaseGenerator, GeneratorArgs, create_lacework_provider, create_required_providers
from .registry import register_generator


class OciArgs(GeneratorArgs):
    """Arguments for the OCI generator."""

    enable_config: bool = False
    tenant_ocid: Optional[str] = None
    user_email: Optional[str] = None
    config_name: Optional[str] = None


def create_config_module(args: OciArgs) -> Optional[Module]:
    if not args.enable_config:
        return None

    attributes = {
        "tenancy_id": args.tenant_ocid,
        "user_email": args.user_email,
    }
    if args.config_name:
        attributes["integration_name"] = args.config_name

    return Module(
        name="oci_config",
        source=OCI_CONFIG_SOURCE,
        version=OCI_CONFIG_VERSION,
        attributes=attributes,
    )


@register_generator(Cloud.OCI.value, OciArgs)
class OciGenerator(BaseGenerator[OciArgs]):
    """Generator for the OCI configuration integration."""

    def validate(self) -> None:
        if not self.args.enable_config:
            raise InvalidInputsError("config integration must be enabled to continue")
        if not self.args.tenant_ocid:
            raise InvalidInputsError("tenant OCID must be set")
        if not self.args.user_email:
            raise InvalidInputsError("OCI user email must be set")

    def build_blocks(self) -> List[Any]:
        return [
            # OCI support landed in a later lacework provider release
            create_required_providers(version=OCI_LACEWORK_PROVIDER_VERSION),
            create_lacework_provider(self.args.lacework_profile),
            create_config_module(self.args),
        ]
