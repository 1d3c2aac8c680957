"""
User-facing console output for lwgenerate.

Everything the CLI prints goes through ``OutputHandler`` so the rendered
document on stdout is kept apart from status lines.
"""

import json
import logging
from typing import Any, Dict

logger = logging.getLogger(__name__)

DIVIDER = "=" * 80


class OutputHandler:
    """Prints status, documents and errors for a generation run."""

    @staticmethod
    def config_summary(settings: Dict[str, Any]) -> None:
        """
        Echo the resolved run settings as JSON.

        Args:
            settings: Top-level settings only; cloud sections are never passed
        """
        print("\n✅ Final Config")
        print(json.dumps(settings, indent=2, sort_keys=True, default=str))

    @staticmethod
    def generating(cloud: str) -> None:
        """Announce which cloud a document is being generated for."""
        print("\n" + DIVIDER)
        print(f"GENERATING {cloud.upper()} TERRAFORM")
        print(DIVIDER)

    @staticmethod
    def document(hcl: str) -> None:
        """
        Print a rendered document to stdout as is.

        Args:
            hcl: Complete HCL document, already newline terminated
        """
        print(hcl, end="")

    @staticmethod
    def generation_completed(cloud: str, destination: str) -> None:
        """
        Log and print where a generated document ended up.

        Args:
            cloud: Cloud the document was generated for
            destination: File path, or "stdout"
        """
        logger.info(f"{cloud} terraform generation completed: {destination}")
        print(f"\n✅ Generated {cloud} Terraform: {destination}")

    @staticmethod
    def error(title: str, error: Exception) -> None:
        """
        Print formatted error message.

        Args:
            title: Error category, e.g. "Invalid Inputs"
            error: Exception that occurred
        """
        print(f"\n🚨 {title}:\n{error}\n")
