from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict

from .constants import DEFAULT_OUTPUT_DIR
from .enums import Cloud


class LwGenerateConfig(BaseModel):
    """CLI-level settings plus one options section per cloud."""
    model_config = ConfigDict(extra="forbid")

    cloud: Cloud
    # Directory main.tf is written to
    output_dir: str = DEFAULT_OUTPUT_DIR
    # Replace an existing main.tf whose content differs
    overwrite: bool = False
    # Print the document instead of writing it
    stdout: bool = False

    # Per-cloud options, validated by the selected generator's arguments model
    aws: Optional[Dict[str, Any]] = None
    aws_controltower: Optional[Dict[str, Any]] = None
    aws_eks_audit: Optional[Dict[str, Any]] = None
    azure: Optional[Dict[str, Any]] = None
    gcp: Optional[Dict[str, Any]] = None
    gke: Optional[Dict[str, Any]] = None
    oci: Optional[Dict[str, Any]] = None

    def cloud_options(self) -> Dict[str, Any]:
        """Options section for the selected cloud (empty when absent)."""
        return getattr(self, self.cloud.value) or {}
