"""
Constants module for Terraform sources, versions and naming.

This module contains the registry sources and version constraints of every
Terraform provider and module the generators reference.
"""

# Lacework provider
LACEWORK_PROVIDER_SOURCE = "lacework/lacework"
LACEWORK_PROVIDER_VERSION = "~> 1.0"
# OCI integrations need a newer provider release
OCI_LACEWORK_PROVIDER_VERSION = ">= 1.9.0"

# Terraform module sources and versions (alphabetical by cloud)
# AWS
AWS_AGENTLESS_SOURCE = "lacework/agentless-scanning/aws"
AWS_AGENTLESS_VERSION = "~> 0.6"
AWS_AGENTLESS_STACKSET_TEMPLATE_URL = (
    "https://agentless-workload-scanner.s3.amazonaws.com/cloudformation-lacework/latest/snapshot-role.json"
)
AWS_CLOUDTRAIL_SOURCE = "lacework/cloudtrail/aws"
AWS_CLOUDTRAIL_VERSION = "~> 2.0"
AWS_CONFIG_SOURCE = "lacework/config/aws"
AWS_CONFIG_VERSION = "~> 0.5"
AWS_CONFIG_ORG_SOURCE = "lacework/aws-org-configuration/aws"
AWS_CONFIG_ORG_VERSION = "~> 0.1"
AWS_CONTROLTOWER_SOURCE = "lacework/cloudtrail-controltower/aws"
AWS_CONTROLTOWER_VERSION = "~> 0.3"
AWS_EKS_AUDIT_SOURCE = "lacework/eks-audit-log/aws"
AWS_EKS_AUDIT_VERSION = "~> 0.4"
# Azure
AZURE_AD_SOURCE = "lacework/ad-application/azure"
AZURE_AD_VERSION = "~> 1.0"
AZURE_ACTIVITY_LOG_SOURCE = "lacework/activity-log/azure"
AZURE_ACTIVITY_LOG_VERSION = "~> 2.0"
AZURE_AGENTLESS_SOURCE = "lacework/agentless-scanning/azure"
AZURE_AGENTLESS_VERSION = "~> 0.1"
AZURE_CONFIG_SOURCE = "lacework/config/azure"
AZURE_CONFIG_VERSION = "~> 2.0"
AZURE_ENTRA_ID_ACTIVITY_LOG_SOURCE = "lacework/microsoft-entra-id-activity-log/azure"
AZURE_ENTRA_ID_ACTIVITY_LOG_VERSION = "~> 0.1"
# GCP
GCP_AGENTLESS_SOURCE = "lacework/agentless-scanning/gcp"
GCP_AGENTLESS_VERSION = "~> 0.1"
GCP_AUDIT_LOG_SOURCE = "lacework/audit-log/gcp"
GCP_AUDIT_LOG_VERSION = "~> 3.0"
GCP_CONFIG_SOURCE = "lacework/config/gcp"
GCP_CONFIG_VERSION = "~> 2.3"
GCP_GKE_AUDIT_LOG_SOURCE = "lacework/gke-audit-log/gcp"
GCP_GKE_AUDIT_LOG_VERSION = "~> 0.3"
GCP_PUB_SUB_AUDIT_LOG_SOURCE = "lacework/pub-sub-audit-log/gcp"
GCP_PUB_SUB_AUDIT_LOG_VERSION = "~> 0.2"
# OCI
OCI_CONFIG_SOURCE = "lacework/config/oci"
OCI_CONFIG_VERSION = "~> 0.3"

# Azure agentless scanning falls back to this region when none are given
AZURE_AGENTLESS_DEFAULT_REGION = "West US"

# EKS audit KMS key deletion window accepted by the module, in days
KMS_KEY_DELETION_DAYS_MIN = 7
KMS_KEY_DELETION_DAYS_MAX = 30

# Terraform file generation constants
MAIN_TF_FILENAME = "main.tf"
DEFAULT_OUTPUT_DIR = "lacework"
