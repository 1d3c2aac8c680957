from typing import Dict, List, Optional
import argparse
import logging
from pathlib import Path

from .config import LwGenerateConfig
from .constants import MAIN_TF_FILENAME
from .errors import InvalidInputsError
from .generators.registry import create_generator
from .output import OutputHandler
from .terraform.utils import needs_write, write_terraform_file
from .usage import load_yaml_config, parse_cli_args, merge_configs

logger = logging.getLogger(__name__)


def setup_configuration(cli_args: argparse.Namespace, yaml_config: Dict) -> LwGenerateConfig:
    """
    Merge and validate configuration from YAML and CLI arguments.

    Args:
        cli_args: Parsed command line arguments
        yaml_config: Configuration loaded from YAML file

    Returns:
        Validated LwGenerateConfig object

    Raises:
        SystemExit: If configuration validation fails
    """
    try:
        final_config = merge_configs(yaml_config, cli_args)
    except (ValueError, TypeError) as e:
        OutputHandler.error("Configuration Error", e)
        exit(1)

    # Cloud sections may hold credentials, only the settings are echoed
    OutputHandler.config_summary(final_config.model_dump(
        mode="json", include={"cloud", "output_dir", "overwrite", "stdout"}
    ))

    return final_config


def generate_document(final_config: LwGenerateConfig) -> str:
    """
    Run the generator selected by the configuration.

    Args:
        final_config: Validated lwgenerate configuration

    Returns:
        Complete HCL document

    Raises:
        ValueError: If the cloud options are invalid
        RuntimeError: If the document could not be built
    """
    cloud = final_config.cloud.value
    OutputHandler.generating(cloud)
    generator = create_generator(cloud, final_config.cloud_options())
    return generator.generate()


def emit_document(final_config: LwGenerateConfig, hcl: str) -> None:
    """
    Print the document or write it to ``<output_dir>/main.tf``.

    An existing file with identical content is left untouched.

    Raises:
        FileExistsError: If main.tf differs and overwrite is not set
    """
    cloud = final_config.cloud.value
    if final_config.stdout:
        OutputHandler.document(hcl)
        OutputHandler.generation_completed(cloud, "stdout")
        return

    filepath = Path(final_config.output_dir) / MAIN_TF_FILENAME
    if needs_write(filepath, hcl, final_config.overwrite):
        write_terraform_file(filepath, hcl, cloud)
    OutputHandler.generation_completed(cloud, str(filepath))


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for lwgenerate."""
    cli_args = parse_cli_args(argv)
    logging.basicConfig(level=logging.DEBUG if cli_args.verbose else logging.WARNING)

    yaml_config = load_yaml_config(cli_args.config)
    final_config = setup_configuration(cli_args, yaml_config)

    try:
        hcl = generate_document(final_config)
        emit_document(final_config, hcl)

    except InvalidInputsError as e:
        OutputHandler.error("Invalid Inputs", e)
        logger.error(f"Invalid inputs: {e.reason}", exc_info=True)
        exit(1)
    except ValueError as e:
        OutputHandler.error("Configuration Error", e)
        logger.error(f"Invalid configuration: {e}", exc_info=True)
        exit(1)
    except RuntimeError as e:
        OutputHandler.error("Runtime Error", e)
        logger.error(f"Runtime error during Terraform generation: {e}", exc_info=True)
        exit(1)
    except OSError as e:
        OutputHandler.error("File Error", e)
        logger.error(f"Unable to write Terraform: {e}", exc_info=True)
        exit(1)


if __name__ == "__main__":
    main()
