"""Tests for lwgenerate.terraform.render module."""

import pytest

from lwgenerate.terraform.models import (
    Block,
    ForEach,
    Module,
    Provider,
    RequiredProvider,
    RequiredProviders,
    create_generic_block,
    create_simple_traversal,
)
from lwgenerate.terraform.render import combine_blocks, render_block, render_document


class TestRenderBlock:
    """Test canonical formatting of single blocks."""

    def test_empty_provider(self) -> None:
        assert render_block(Provider("azuread").to_block()) == 'provider "azuread" {\n}\n'

    def test_required_providers(self) -> None:
        block = RequiredProviders([RequiredProvider("lacework", "lacework/lacework", "~> 1.0")]).to_block()

        assert render_block(block) == (
            'terraform {\n'
            '  required_providers {\n'
            '    lacework = {\n'
            '      source  = "lacework/lacework"\n'
            '      version = "~> 1.0"\n'
            '    }\n'
            '  }\n'
            '}\n'
        )

    def test_equals_aligned_across_run(self) -> None:
        block = Provider("aws", {"alias": "us-east-1", "region": "us-east-1"}).to_block()

        assert render_block(block) == (
            'provider "aws" {\n'
            '  alias  = "us-east-1"\n'
            '  region = "us-east-1"\n'
            '}\n'
        )

    def test_nested_empty_block(self) -> None:
        block = Provider("azurerm", {"subscription_id": "sub-1"}, [create_generic_block("features")]).to_block()

        assert render_block(block) == (
            'provider "azurerm" {\n'
            '  subscription_id = "sub-1"\n'
            '  features {\n'
            '  }\n'
            '}\n'
        )

    def test_multiline_map_breaks_alignment_run(self) -> None:
        """Attributes after a multi-line value start a new alignment run."""
        block = Module(
            name="audit",
            source="s",
            attributes={"a": "1", "labels": {"env": "prod"}, "long_attribute_name": "2"},
        ).to_block()

        assert render_block(block) == (
            'module "audit" {\n'
            '  source = "s"\n'
            '  a      = "1"\n'
            '  labels = {\n'
            '    env = "prod"\n'
            '  }\n'
            '  long_attribute_name = "2"\n'
            '}\n'
        )

    def test_list_of_objects(self) -> None:
        """Objects after the first open with a "}, {" line one level deeper."""
        block = Module(
            name="trail",
            source="s",
            attributes={"mappings": [
                {"account": "a", "ids": ["1"]},
                {"account": "b", "ids": ["2", "3"]},
            ]},
        ).to_block()

        assert render_block(block) == (
            'module "trail" {\n'
            '  source = "s"\n'
            '  mappings = [{\n'
            '    account = "a"\n'
            '    ids     = ["1"]\n'
            '    }, {\n'
            '    account = "b"\n'
            '    ids     = ["2", "3"]\n'
            '  }]\n'
            '}\n'
        )

    def test_module_with_providers_map(self) -> None:
        block = Module(
            name="aws_config",
            source="lacework/config/aws",
            version="~> 0.5",
            attributes={"lacework_aws_account_id": "123456789012"},
            providers={"aws": "aws.main"},
        ).to_block()

        assert render_block(block) == (
            'module "aws_config" {\n'
            '  source                  = "lacework/config/aws"\n'
            '  version                 = "~> 0.5"\n'
            '  lacework_aws_account_id = "123456789012"\n'
            '\n'
            '  providers = {\n'
            '    aws = aws.main\n'
            '  }\n'
            '}\n'
        )

    def test_module_with_for_each(self) -> None:
        block = Module(
            name="gcp_project_level_config",
            source="lacework/config/gcp",
            version="~> 2.3",
            for_each=ForEach("project_id", {"project-1": "project-1", "project-2": "project-2"}),
        ).to_block()

        assert render_block(block) == (
            'module "gcp_project_level_config" {\n'
            '  source  = "lacework/config/gcp"\n'
            '  version = "~> 2.3"\n'
            '\n'
            '  for_each = {\n'
            '    project-1 = "project-1"\n'
            '    project-2 = "project-2"\n'
            '  }\n'
            '  project_id = each.key\n'
            '}\n'
        )

    def test_traversal_rendered_unquoted(self) -> None:
        block = Module(
            name="m",
            source="s",
            attributes={"service_account_name": create_simple_traversal("module", "cfg", "service_account_name")},
        ).to_block()

        assert "service_account_name = module.cfg.service_account_name\n" in render_block(block)


class TestCombineBlocks:
    """Test combine_blocks flattening and filtering."""

    def test_drops_none_and_flattens(self) -> None:
        first = Block("provider", ["a"])
        second = Provider("b")
        third = Block("provider", ["c"])

        blocks = combine_blocks(None, first, [second, None], (third,), [])

        assert [block.labels for block in blocks] == [["a"], ["b"], ["c"]]

    def test_rejects_unknown_items(self) -> None:
        with pytest.raises(TypeError, match="cannot combine str into an HCL document"):
            combine_blocks("provider")

    def test_empty(self) -> None:
        assert combine_blocks() == []


class TestRenderDocument:
    """Test whole document rendering."""

    def test_blocks_separated_by_single_blank_line(self) -> None:
        blocks = combine_blocks(Provider("azuread"), Provider("google", {"project": "p"}))

        assert render_document(blocks) == (
            'provider "azuread" {\n'
            '}\n'
            '\n'
            'provider "google" {\n'
            '  project = "p"\n'
            '}\n'
        )

    def test_empty_document(self) -> None:
        assert render_document([]) == ""

    def test_rendering_is_idempotent(self) -> None:
        blocks = combine_blocks(Provider("google", {"project": "p", "region": "us-east1"}))
        assert render_document(blocks) == render_document(blocks)
