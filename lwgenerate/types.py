"""
Shared data types for the generators.

Detail groups that must be supplied all-or-nothing (existing service
accounts, existing IAM roles) and account descriptors live here so that
generator modules and the CLI configuration share one definition.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


# Type aliases for commonly-used complex types
Labels = Dict[str, str]
"""Label/tag mapping rendered as an HCL map with sorted keys."""

RegionClusterMap = Dict[str, List[str]]
"""Mapping of AWS region to the EKS cluster names in that region."""


class ExistingServiceAccount(BaseModel):
    """Existing GCP service account reused instead of creating one."""
    model_config = ConfigDict(extra="forbid")

    name: str = ""
    private_key: str = ""  # base64 encoded JSON key

    def is_partial(self) -> bool:
        return not (self.name and self.private_key)


class ExistingIamRole(BaseModel):
    """Existing AWS IAM role reused by the CloudTrail integration."""
    model_config = ConfigDict(extra="forbid")

    arn: str = ""
    name: str = ""
    external_id: str = ""

    def is_empty(self) -> bool:
        return not (self.arn or self.name or self.external_id)

    def is_partial(self) -> bool:
        """True when some, but not all, of the role details are set."""
        return not self.is_empty() and not (self.arn and self.name and self.external_id)


class ExistingCrossAccountIamRole(BaseModel):
    """Existing cross-account IAM role used by the EKS audit log integration."""
    model_config = ConfigDict(extra="forbid")

    arn: str = ""
    external_id: str = ""

    def is_empty(self) -> bool:
        return not (self.arn or self.external_id)

    def is_partial(self) -> bool:
        return bool(self.arn) != bool(self.external_id)


class AwsSubAccount(BaseModel):
    """
    Additional AWS account reached through a named AWS CLI profile.

    The provider alias defaults to "<profile>-<region>", which keeps two
    regions of the same profile apart.
    """
    model_config = ConfigDict(extra="forbid")

    profile: str
    region: str
    alias: Optional[str] = None

    @property
    def provider_alias(self) -> str:
        return self.alias or f"{self.profile}-{self.region}"


class OrgAccountMap(BaseModel):
    """AWS accounts whose CloudTrail events go to one Lacework sub-account."""
    model_config = ConfigDict(extra="forbid")

    lacework_account: str
    aws_accounts: List[str] = Field(min_length=1)


class OrgAccountMapping(BaseModel):
    """
    Routing of an organization trail's events to Lacework sub-accounts.

    Accounts not listed in any mapping report to the default account.
    """
    model_config = ConfigDict(extra="forbid")

    default_lacework_account: str = ""
    mapping: List[OrgAccountMap] = Field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.default_lacework_account or self.mapping)


class TerraformOutput(BaseModel):
    """Custom ``output`` block appended to a generated document."""
    model_config = ConfigDict(extra="forbid")

    name: str
    # traversal segments, e.g. ["module", "gcp_project_audit_log", "bucket_name"]
    value: List[str] = Field(min_length=1)
    description: Optional[str] = None
