"""
Terraform Module

This module contains the HCL representation and rendering used by every
generator, plus the helpers that write generated documents to disk.

Modules:
- models: Encoded values, blocks and block builders
- render: Document composition and canonical HCL formatting
- utils: Writing generated documents to disk
"""

from .models import (
    Block,
    ForEach,
    FunctionCall,
    Module,
    Output,
    Provider,
    RequiredProvider,
    RequiredProviders,
    Resource,
    Tokens,
    Traversal,
    create_generic_block,
    create_simple_traversal,
    encode_value,
    raw,
)
from .render import combine_blocks, render_block, render_document

__all__ = [
    "Block",
    "ForEach",
    "FunctionCall",
    "Module",
    "Output",
    "Provider",
    "RequiredProvider",
    "RequiredProviders",
    "Resource",
    "Tokens",
    "Traversal",
    "combine_blocks",
    "create_generic_block",
    "create_simple_traversal",
    "encode_value",
    "raw",
    "render_block",
    "render_document",
]
