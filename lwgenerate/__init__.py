"""
lwgenerate - Terraform generation for Lacework cloud integrations.

Usage:
    from lwgenerate import GcpArgs, GcpGenerator

    hcl = GcpGenerator(GcpArgs(enable_audit_log=True, project_id="project-1")).generate()
"""

from .errors import GenerationFailedError, InvalidInputsError
from .generators.aws import AwsArgs, AwsGenerator
from .generators.aws_controltower import ControlTowerArgs, ControlTowerGenerator
from .generators.aws_eks_audit import EksAuditArgs, EksAuditGenerator
from .generators.azure import AzureArgs, AzureGenerator
from .generators.gcp import GcpArgs, GcpGenerator
from .generators.gke import GkeArgs, GkeGenerator
from .generators.oci import OciArgs, OciGenerator
from .generators.registry import generate_terraform, get_cloud_names, get_generator

__all__ = [
    "AwsArgs",
    "AwsGenerator",
    "AzureArgs",
    "AzureGenerator",
    "ControlTowerArgs",
    "ControlTowerGenerator",
    "EksAuditArgs",
    "EksAuditGenerator",
    "GcpArgs",
    "GcpGenerator",
    "GenerationFailedError",
    "GkeArgs",
    "GkeGenerator",
    "InvalidInputsError",
    "OciArgs",
    "OciGenerator",
    "generate_terraform",
    "get_cloud_names",
    "get_generator",
]
