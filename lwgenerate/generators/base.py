"""
Base generator framework for Terraform document generation.

This module provides an abstract base class that implements the Template Method
pattern for every cloud generator. Concrete generators only need to implement
two methods: validate() and build_blocks().
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Dict, Generic, List, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel, ConfigDict

from ..constants import LACEWORK_PROVIDER_SOURCE, LACEWORK_PROVIDER_VERSION
from ..errors import GenerationFailedError, InvalidInputsError
from ..terraform.models import Block, Output, Provider, RequiredProvider, RequiredProviders
from ..terraform.render import combine_blocks, render_document
from ..types import TerraformOutput

logger = logging.getLogger(__name__)


class GeneratorArgs(BaseModel):
    """
    Common base for the per-cloud arguments records.

    Every optional field defaults to "unset" (None or empty), and unset
    fields never appear in the generated document.
    """
    model_config = ConfigDict(extra="forbid")

    # Lacework CLI profile the lacework provider should use
    lacework_profile: Optional[str] = None


ArgsT = TypeVar('ArgsT', bound=GeneratorArgs)


class BaseGenerator(ABC, Generic[ArgsT]):
    """
    Abstract base class for all cloud generators.

    Implements template method pattern for generation.
    Subclasses only need to implement 2 methods:
    - validate(): Reject invalid argument combinations
    - build_blocks(): Decide which blocks make up the document
    """

    # These are set by the @register_generator decorator
    CLOUD: ClassVar[str]
    ARGS_MODEL: ClassVar[Type[GeneratorArgs]]

    def __init__(self, args: ArgsT) -> None:
        """
        Initialize the generator.

        Args:
            args: Arguments record for this cloud. It is only read during generation.
        """
        self.args = args

    @abstractmethod
    def validate(self) -> None:
        """
        Check the arguments for invalid combinations.

        Raises:
            InvalidInputsError: Describing the first violated rule
        """

    @abstractmethod
    def build_blocks(self) -> List[Any]:
        """
        Build the document contents.

        Returns:
            Blocks, block builders, lists of either, or None for blocks
            that are not needed, in document order
        """

    def generate(self) -> str:
        """
        Generate the Terraform document (template method).

        This method orchestrates the entire generation flow:
        1. Validate: Reject invalid argument combinations before building anything
        2. Build: Collect the blocks for this configuration
        3. Render: Combine the blocks and serialize them to HCL

        Returns:
            Complete HCL document

        Raises:
            InvalidInputsError: If the arguments are invalid
            GenerationFailedError: If a block could not be built
        """
        self.validate()

        logger.debug(f"Building {self.CLOUD} terraform blocks")
        try:
            blocks = combine_blocks(*self.build_blocks())
            hcl = render_document(blocks)
        except (TypeError, ValueError) as e:
            raise GenerationFailedError(self.CLOUD, e) from e

        logger.info(f"Generated {self.CLOUD} terraform document with {len(blocks)} blocks")
        return hcl


def create_required_providers(
    version: str = LACEWORK_PROVIDER_VERSION,
    extra_blocks: Sequence[Block] = ()
) -> RequiredProviders:
    """
    Build the ``terraform { required_providers { lacework = ... } }`` block.

    Args:
        version: Version constraint for the lacework provider
        extra_blocks: Additional blocks to nest inside ``terraform {}``

    Returns:
        RequiredProviders builder
    """
    return RequiredProviders(
        providers=[RequiredProvider("lacework", LACEWORK_PROVIDER_SOURCE, version)],
        extra_blocks=list(extra_blocks),
    )


def create_lacework_provider(profile: Optional[str], organization: bool = False) -> Optional[Provider]:
    """
    Build the lacework provider, or None when it would have no settings.

    Args:
        profile: Lacework CLI profile override
        organization: Manage integrations at the Lacework organization level
    """
    attributes: Dict[str, Any] = {}
    if profile:
        attributes["profile"] = profile
    if organization:
        attributes["organization"] = True
    if not attributes:
        return None
    return Provider("lacework", attributes)


def create_outputs(outputs: Sequence[TerraformOutput]) -> List[Output]:
    """Build ``output`` blocks from their configured descriptions."""
    return [Output(output.name, output.value, output.description) for output in outputs]


def validate_organization_scope(
    enabled: bool,
    organization_id: Optional[str],
    scope: str = "Organization Integration"
) -> None:
    """
    Require the organization flag and organization ID to be set together.

    Args:
        enabled: Whether the organization-scope integration was requested
        organization_id: Organization ID supplied, if any
        scope: Name of the integration used in error messages

    Raises:
        InvalidInputsError: If only one of the two is set
    """
    if enabled and not organization_id:
        raise InvalidInputsError(f"an Organization ID must be provided for an {scope}")
    if organization_id and not enabled:
        raise InvalidInputsError(f"to provide an Organization ID, {scope} must be true")
