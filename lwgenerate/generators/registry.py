"""
Generator registry for auto-discovery of cloud generators.

This module provides a decorator-based registry pattern that allows generators
to self-register. The CLI looks generators up by cloud name, so adding a cloud
requires no changes to other files.
"""

from typing import Any, Dict, List, Type

from .base import BaseGenerator, GeneratorArgs

_GENERATOR_REGISTRY: Dict[str, Type[BaseGenerator]] = {}


def register_generator(cloud: str, args_model: Type[GeneratorArgs]):
    """
    Decorator to register a generator class.

    Args:
        cloud: Cloud name (aws, gcp, azure, ...)
        args_model: Arguments record the generator consumes

    Usage:
        @register_generator("gcp", GcpArgs)
        class GcpGenerator(BaseGenerator[GcpArgs]):
            ...
    """
    def decorator(cls: Type[BaseGenerator]) -> Type[BaseGenerator]:
        _GENERATOR_REGISTRY[cloud] = cls
        cls.CLOUD = cloud
        cls.ARGS_MODEL = args_model
        return cls
    return decorator


def get_generator(cloud: str) -> Type[BaseGenerator]:
    """
    Get generator class by cloud name.

    Args:
        cloud: Name of the cloud

    Returns:
        Generator class

    Raises:
        ValueError: If cloud is not registered
    """
    if cloud not in _GENERATOR_REGISTRY:
        raise ValueError(f"Unknown cloud: {cloud}")
    return _GENERATOR_REGISTRY[cloud]


def get_cloud_names() -> List[str]:
    """Get all registered cloud names, sorted."""
    return sorted(_GENERATOR_REGISTRY)


def create_generator(cloud: str, options: Dict[str, Any]) -> BaseGenerator:
    """
    Build a generator from plain options (e.g. a YAML section).

    Args:
        cloud: Name of the cloud
        options: Field values for the cloud's arguments record

    Returns:
        Generator ready to generate

    Raises:
        ValueError: If the cloud is unknown or the options do not fit the
            arguments record (pydantic.ValidationError is a ValueError)
    """
    generator_class = get_generator(cloud)
    args = generator_class.ARGS_MODEL(**options)
    return generator_class(args)


def generate_terraform(cloud: str, options: Dict[str, Any]) -> str:
    """
    Generate the Terraform document for a cloud from plain options.

    Args:
        cloud: Name of the cloud
        options: Field values for the cloud's arguments record

    Returns:
        Complete HCL document
    """
    return create_generator(cloud, options).generate()
