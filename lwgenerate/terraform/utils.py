"""
Terraform Utility Functions

Helpers for writing generated Terraform documents to disk.
"""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

__all__ = ["needs_write", "write_terraform_file"]


def needs_write(filepath: Path, content: str, overwrite: bool) -> bool:
    """
    Decide whether a generated document should be written.

    Args:
        filepath: Destination file
        content: Generated document
        overwrite: Whether an existing file with different content may be replaced

    Returns:
        False when the file already holds exactly this content, True otherwise

    Raises:
        FileExistsError: If the file holds different content and overwrite is False
    """
    if not filepath.exists():
        return True

    if filepath.read_text() == content:
        logger.info(f"{filepath} is already up to date")
        return False

    if not overwrite:
        raise FileExistsError(f"{filepath} already exists, use --overwrite to replace it")
    return True


def write_terraform_file(filepath: Path, content: str, cloud: str) -> None:
    """
    Write Terraform content to a file with logging.

    Args:
        filepath: Path object for the file to write
        content: Terraform content to write
        cloud: Cloud the document was generated for (e.g., "gcp", "aws")
    """
    filepath.parent.mkdir(parents=True, exist_ok=True)
    with open(filepath, 'w') as f:
        f.write(content)
    logger.info(f"Generated {cloud} Terraform file: {filepath}")
