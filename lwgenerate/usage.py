import argparse
import yaml
from typing import Any, Dict, List, Optional
from .config import LwGenerateConfig
from .enums import Cloud

# Settings the command line may override, in addition to the YAML file
CLI_OVERRIDES = ("cloud", "output_dir", "overwrite", "stdout")


def load_yaml_config(path: str) -> Dict[str, Any]:
    """
    Read the lwgenerate YAML file.

    A missing file is not fatal since ``--cloud`` alone selects a generator
    that may need no options. An empty file reads as no settings.
    """
    try:
        with open(path, 'r') as f:
            loaded = yaml.safe_load(f)
    except FileNotFoundError:
        print(f"Config file '{path}' not found. Continuing without it.")
        return {}
    return loaded or {}


def parse_cli_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command line arguments for the lwgenerate tool.

    Args:
        argv: Arguments to parse, defaults to sys.argv

    Returns:
        Parsed command line arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog="lwgenerate",
        description="lwgenerate - generate Terraform for Lacework cloud integrations"
    )

    parser.add_argument(
        '--config',
        required=True,
        type=str,
        help='Path to config YAML'
    )

    # Settings (override YAML if provided)
    parser.add_argument(
        '--cloud',
        type=str,
        choices=[cloud.value for cloud in Cloud],
        help='Cloud to generate Terraform for'
    )
    parser.add_argument(
        '--output-dir',
        dest='output_dir',
        type=str,
        help='Directory to write main.tf to (default lacework)'
    )
    parser.add_argument(
        '--overwrite',
        action='store_true',
        default=argparse.SUPPRESS,
        help='Replace an existing main.tf with different content'
    )
    parser.add_argument(
        '--stdout',
        action='store_true',
        default=argparse.SUPPRESS,
        help='Print the generated Terraform instead of writing it'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable debug logging'
    )

    return parser.parse_args(argv)


def merge_configs(yaml_config: Dict[str, Any], cli_args: argparse.Namespace) -> LwGenerateConfig:
    """
    Layer command line settings over the YAML file and validate the result.

    Only settings in ``CLI_OVERRIDES`` that were actually given on the
    command line replace YAML values; cloud sections always come from YAML.

    Raises:
        ValueError: If the merged settings are invalid
    """
    overrides = {
        name: getattr(cli_args, name) for name in CLI_OVERRIDES
        if getattr(cli_args, name, None) is not None
    }
    return LwGenerateConfig(**{**yaml_config, **overrides})
