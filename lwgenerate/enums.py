"""
Enumerations for lwgenerate.

This module contains the enum types used throughout the generators
to replace magic strings.
"""

from enum import Enum


class Cloud(str, Enum):
    """Clouds (and audit-log flavours) a Terraform document can be generated for."""
    AWS = "aws"
    AWS_CONTROLTOWER = "aws_controltower"
    AWS_EKS_AUDIT = "aws_eks_audit"
    AZURE = "azure"
    GCP = "gcp"
    GKE = "gke"
    OCI = "oci"


class IntegrationType(str, Enum):
    """Scope value passed to modules that take an ``integration_type``."""
    ORGANIZATION = "ORGANIZATION"
    PROJECT = "PROJECT"


class AzureIntegrationLevel(str, Enum):
    """Scope of an Azure agentless scanning integration."""
    SUBSCRIPTION = "SUBSCRIPTION"
    TENANT = "TENANT"
