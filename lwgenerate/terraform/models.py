"""
Terraform Models

Intermediate representation for the HCL documents produced by the
generators. It provides the encoded value variants, the generic ``Block``
structure, and the builders for every kind of top-level block
(required providers, providers, modules, resources and outputs).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from ..utils import is_valid_identifier

# Number of labels each known block type takes
_LABEL_COUNTS: Dict[str, int] = {
    "module": 1,
    "output": 1,
    "provider": 1,
    "required_providers": 0,
    "resource": 2,
    "terraform": 0,
}


@dataclass(frozen=True)
class Tokens:
    """
    An encoded HCL expression.

    Inline expressions carry their source text. Object expressions carry
    ``(key, Tokens)`` entries instead and are laid out one entry per line
    by the renderer, with their keys written verbatim. A list of objects
    carries one entries tuple per object in ``items``.

    Tokens built by hand are the raw escape hatch: they are never quoted
    or escaped, so the caller is responsible for their syntax.
    """
    text: Optional[str] = None
    entries: Optional[Tuple[Tuple[str, "Tokens"], ...]] = None
    items: Optional[Tuple[Tuple[Tuple[str, "Tokens"], ...], ...]] = None

    @property
    def is_multiline(self) -> bool:
        return self.entries is not None or self.items is not None


def raw(text: str) -> Tokens:
    """Wrap pre-formatted expression text, e.g. ``"${each.value}"``."""
    return Tokens(text=text)


@dataclass(frozen=True)
class Traversal:
    """Unquoted reference such as ``module.gcp_project_level_config.service_account_name``."""
    segments: Tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.segments:
            raise TypeError("a traversal needs at least one segment")

    def __str__(self) -> str:
        return ".".join(self.segments)


def create_simple_traversal(*segments: str) -> Traversal:
    """
    Build a traversal from its segments.

    Args:
        *segments: Root name followed by attribute names (e.g. "module", "x", "y")

    Returns:
        Traversal rendered as ``module.x.y``

    Raises:
        TypeError: If no segment is given
    """
    return Traversal(tuple(segments))


@dataclass(frozen=True)
class FunctionCall:
    """Call to a Terraform built-in function, e.g. ``toset(["a", "b"])``."""
    name: str
    args: Tuple[Any, ...] = ()


def quote_string(value: str) -> str:
    """
    Quote and escape a string literal.

    Template introducers are doubled (``${`` becomes ``$${``) so the value
    is taken literally by Terraform.
    """
    escaped = ['"']
    for i, ch in enumerate(value):
        if ch == "\\":
            escaped.append("\\\\")
        elif ch == '"':
            escaped.append('\\"')
        elif ch == "\n":
            escaped.append("\\n")
        elif ch == "\r":
            escaped.append("\\r")
        elif ch == "\t":
            escaped.append("\\t")
        elif ch in "$%" and value[i + 1:i + 2] == "{":
            escaped.append(ch * 2)
        elif not ch.isprintable():
            code = ord(ch)
            escaped.append(f"\\u{code:04x}" if code <= 0xFFFF else f"\\U{code:08x}")
        else:
            escaped.append(ch)
    escaped.append('"')
    return "".join(escaped)


def _encode_key(key: str) -> str:
    return key if is_valid_identifier(key) else quote_string(key)


def _encode_inline(value: Any) -> str:
    tokens = encode_value(value)
    if tokens.text is None:
        raise TypeError("object values cannot be nested inside a list or function call")
    return tokens.text


def _encode_entries(mapping: Dict[str, Any]) -> Tuple[Tuple[str, Tokens], ...]:
    return tuple((_encode_key(key), encode_value(mapping[key])) for key in sorted(mapping))


def encode_value(value: Any) -> Tokens:
    """
    Convert a native value into HCL expression tokens.

    Args:
        value: str, int, float, bool, list/tuple, dict, Traversal,
            FunctionCall or Tokens. A list may hold scalars or only dicts,
            not a mix of both.

    Returns:
        Tokens ready to be placed after ``name =``

    Raises:
        TypeError: If the value (or a nested value) has an unsupported type
    """
    if isinstance(value, Tokens):
        return value
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, Traversal):
        return Tokens(text=str(value))
    if isinstance(value, FunctionCall):
        args = ", ".join(_encode_inline(arg) for arg in value.args)
        return Tokens(text=f"{value.name}({args})")
    # bool is a subclass of int, so it has to be checked first
    if isinstance(value, bool):
        return Tokens(text="true" if value else "false")
    if isinstance(value, int):
        return Tokens(text=str(value))
    if isinstance(value, float):
        return Tokens(text=str(int(value)) if value.is_integer() else repr(value))
    if isinstance(value, str):
        return Tokens(text=quote_string(value))
    if isinstance(value, (list, tuple)):
        # Only a list made entirely of objects is laid out over several lines
        if value and all(isinstance(item, dict) for item in value):
            return Tokens(items=tuple(_encode_entries(item) for item in value))
        return Tokens(text="[" + ", ".join(_encode_inline(item) for item in value) + "]")
    if isinstance(value, dict):
        if not value:
            return Tokens(text="{}")
        return Tokens(entries=_encode_entries(value))
    raise TypeError(f"unsupported HCL value type: {type(value).__name__}")


@dataclass(frozen=True)
class Attribute:
    """A ``name = value`` line inside a block body."""
    name: str
    value: Any


@dataclass(frozen=True)
class BlankLine:
    """An empty line inside a block body."""


@dataclass
class Block:
    """
    A single HCL block.

    The body is kept in render order; builders are responsible for
    sorting attributes before they are added.
    """
    block_type: str
    labels: List[str] = field(default_factory=list)
    body: List[Union[Attribute, BlankLine, "Block"]] = field(default_factory=list)

    def __post_init__(self) -> None:
        expected = _LABEL_COUNTS.get(self.block_type)
        if expected is not None and len(self.labels) != expected:
            raise ValueError(
                f"{self.block_type} block takes {expected} label(s), got {len(self.labels)}"
            )


def ordered_attributes(attributes: Dict[str, Any]) -> List[Attribute]:
    """
    Order attributes for rendering.

    ``source`` and ``version`` always lead; every other attribute follows
    in ascending order by name.

    Args:
        attributes: Attribute name to value mapping

    Returns:
        Attributes in render order
    """
    leading = [name for name in ("source", "version") if name in attributes]
    rest = sorted(name for name in attributes if name not in ("source", "version"))
    return [Attribute(name, attributes[name]) for name in leading + rest]


def create_generic_block(
    block_type: str,
    labels: Optional[Sequence[str]] = None,
    attributes: Optional[Dict[str, Any]] = None
) -> Block:
    """
    Create a block holding ordered attributes.

    Args:
        block_type: Block type keyword (e.g. "features", "assume_role")
        labels: Optional block labels
        attributes: Optional attribute mapping

    Returns:
        Block with attributes in render order
    """
    return Block(
        block_type=block_type,
        labels=list(labels or []),
        body=list(ordered_attributes(attributes or {})),
    )


def create_map_traversal_tokens(mapping: Dict[str, str]) -> Tokens:
    """
    Build an object expression whose keys and values are written verbatim.

    Used for module ``providers`` maps, where both sides are provider
    references (``aws.audit = aws.audit``) rather than strings.
    """
    return Tokens(entries=tuple((key, raw(mapping[key])) for key in sorted(mapping)))


class BlockBuilder(ABC):
    """Base class for values that materialize into a top-level block."""

    @abstractmethod
    def to_block(self) -> Block:
        """Build the block for this value."""


@dataclass
class RequiredProvider:
    """One entry of the ``required_providers`` block."""
    name: str
    source: Optional[str] = None
    version: Optional[str] = None


@dataclass
class RequiredProviders(BlockBuilder):
    """``terraform { required_providers { ... } }`` with optional extra nested blocks."""
    providers: List[RequiredProvider] = field(default_factory=list)
    extra_blocks: List[Block] = field(default_factory=list)

    def to_block(self) -> Block:
        details: Dict[str, Dict[str, str]] = {}
        for provider in self.providers:
            entry = {}
            if provider.source:
                entry["source"] = provider.source
            if provider.version:
                entry["version"] = provider.version
            details[provider.name] = entry

        required = create_generic_block("required_providers", attributes=details)
        return Block("terraform", body=[required, *self.extra_blocks])


@dataclass
class Provider(BlockBuilder):
    """``provider "<name>" { ... }``"""
    name: str
    attributes: Dict[str, Any] = field(default_factory=dict)
    blocks: List[Block] = field(default_factory=list)

    def to_block(self) -> Block:
        block = create_generic_block("provider", [self.name], self.attributes)
        block.body.extend(self.blocks)
        return block


@dataclass
class ForEach:
    """``for_each`` meta-argument of a module, plus the input that receives ``each.key``."""
    key: str
    value: Any


@dataclass
class Module(BlockBuilder):
    """
    ``module "<name>" { ... }``

    Renders ``source`` and ``version`` first, then the remaining attributes
    sorted by name. A ``for_each`` section and a ``providers`` map follow,
    each separated from the attributes by a blank line.
    """
    name: str
    source: str
    version: Optional[str] = None
    attributes: Dict[str, Any] = field(default_factory=dict)
    providers: Dict[str, str] = field(default_factory=dict)
    for_each: Optional[ForEach] = None
    blocks: List[Block] = field(default_factory=list)

    def to_block(self) -> Block:
        attributes = dict(self.attributes)
        attributes["source"] = self.source
        if self.version:
            attributes["version"] = self.version
        block = create_generic_block("module", [self.name], attributes)

        if self.for_each is not None:
            block.body.append(BlankLine())
            block.body.append(Attribute("for_each", self.for_each.value))
            block.body.append(Attribute(self.for_each.key, create_simple_traversal("each", "key")))

        if self.providers:
            block.body.append(BlankLine())
            block.body.append(Attribute("providers", create_map_traversal_tokens(self.providers)))

        block.body.extend(self.blocks)
        return block


@dataclass
class Resource(BlockBuilder):
    """
    ``resource "<type>" "<name>" { ... }``

    ``depends_on`` entries are dotted references and render as a tuple of
    traversals. Nested blocks follow the attributes, and a provider alias
    renders last, after a blank line.
    """
    resource_type: str
    name: str
    attributes: Dict[str, Any] = field(default_factory=dict)
    provider: Optional[str] = None
    depends_on: List[str] = field(default_factory=list)
    blocks: List[Block] = field(default_factory=list)

    def to_block(self) -> Block:
        attributes = dict(self.attributes)
        if self.depends_on:
            attributes["depends_on"] = [
                create_simple_traversal(*reference.split(".")) for reference in self.depends_on
            ]
        block = create_generic_block("resource", [self.resource_type, self.name], attributes)
        block.body.extend(self.blocks)

        if self.provider:
            block.body.append(BlankLine())
            block.body.append(Attribute("provider", create_simple_traversal(*self.provider.split("."))))
        return block


@dataclass
class Output(BlockBuilder):
    """``output "<name>" { value = <reference> }``"""
    name: str
    value: Sequence[str]
    description: Optional[str] = None

    def to_block(self) -> Block:
        attributes: Dict[str, Any] = {"value": create_simple_traversal(*self.value)}
        if self.description:
            attributes["description"] = self.description
        return create_generic_block("output", [self.name], attributes)
