"""
HCL Rendering

Combines blocks into a document and serializes it in the canonical
layout written by ``terraform fmt``: two-space indentation, ``=`` signs
aligned across runs of single-line attributes, and exactly one blank line
between top-level blocks.
"""

from dataclasses import dataclass
from typing import Any, List, Optional

from .models import Attribute, BlankLine, Block, BlockBuilder, Tokens, encode_value, quote_string

INDENT = "  "


@dataclass
class _Line:
    """
    One output line before alignment.

    ``assign`` holds the ``= value`` part of a complete single-line
    attribute. Lines without it (block headers, closing braces, attributes
    opening a multi-line value, blank lines) end an alignment run.
    """
    indent: int
    lead: str
    assign: Optional[str] = None

    @property
    def columns(self) -> int:
        return len(INDENT) * self.indent + len(self.lead)


def _object_list_lines(name: str, tokens: Tokens, indent: int) -> List[_Line]:
    # Objects after the first are introduced by "}, {" one level deeper
    lines = [_Line(indent, f"{name} = [{{")]
    for position, entries in enumerate(tokens.items):
        if position:
            lines.append(_Line(indent + 1, "}, {"))
        for key, value in entries:
            lines.extend(_attribute_lines(key, value, indent + 1))
    lines.append(_Line(indent, "}]"))
    return lines


def _attribute_lines(name: str, tokens: Tokens, indent: int) -> List[_Line]:
    if tokens.items is not None:
        return _object_list_lines(name, tokens, indent)
    if tokens.entries is None:
        return [_Line(indent, name, f"= {tokens.text}")]

    lines = [_Line(indent, f"{name} = {{")]
    for key, value in tokens.entries:
        lines.extend(_attribute_lines(key, value, indent + 1))
    lines.append(_Line(indent, "}"))
    return lines


def _block_lines(block: Block, indent: int) -> List[_Line]:
    header = " ".join([block.block_type] + [quote_string(label) for label in block.labels])
    lines = [_Line(indent, f"{header} {{")]
    for item in block.body:
        if isinstance(item, BlankLine):
            lines.append(_Line(0, ""))
        elif isinstance(item, Attribute):
            lines.extend(_attribute_lines(item.name, encode_value(item.value), indent + 1))
        else:
            lines.extend(_block_lines(item, indent + 1))
    lines.append(_Line(indent, "}"))
    return lines


def _format_lines(lines: List[_Line]) -> List[str]:
    formatted: List[str] = []
    run: List[_Line] = []

    def close_run() -> None:
        width = max(line.columns for line in run)
        for line in run:
            padding = " " * (width - line.columns + 1)
            formatted.append(f"{INDENT * line.indent}{line.lead}{padding}{line.assign}")
        run.clear()

    for line in lines:
        if line.assign is not None:
            run.append(line)
            continue
        if run:
            close_run()
        formatted.append(f"{INDENT * line.indent}{line.lead}" if line.lead else "")

    if run:
        close_run()
    return formatted


def render_block(block: Block) -> str:
    """
    Render a single block.

    Args:
        block: Block to render

    Returns:
        Block text terminated by a newline
    """
    return "\n".join(_format_lines(_block_lines(block, 0))) + "\n"


def combine_blocks(*items: Any) -> List[Block]:
    """
    Concatenate blocks in call order.

    ``None`` entries (blocks a generator decided not to build) are dropped,
    lists and tuples are flattened, and builders are materialized.

    Raises:
        TypeError: If an item is not a block, builder, sequence or None
    """
    blocks: List[Block] = []
    for item in items:
        if item is None:
            continue
        if isinstance(item, (list, tuple)):
            blocks.extend(combine_blocks(*item))
        elif isinstance(item, BlockBuilder):
            blocks.append(item.to_block())
        elif isinstance(item, Block):
            blocks.append(item)
        else:
            raise TypeError(f"cannot combine {type(item).__name__} into an HCL document")
    return blocks


def render_document(blocks: List[Block]) -> str:
    """
    Render top-level blocks separated by one blank line.

    Args:
        blocks: Blocks in document order

    Returns:
        Complete HCL document text
    """
    return "\n".join(render_block(block) for block in blocks)
