"""Tests for lwgenerate.generators.aws_controltower module."""

import pytest
from pydantic import ValidationError

from lwgenerate.errors import InvalidInputsError
from lwgenerate.generators.aws_controltower import ControlTowerArgs, ControlTowerGenerator
from lwgenerate.generators.registry import generate_terraform
from lwgenerate.types import AwsSubAccount, ExistingIamRole, OrgAccountMap, OrgAccountMapping

S3_BUCKET_ARN = "arn:aws:s3:::aws-controltower-logs-0123456789-us-east-1"
SNS_TOPIC_ARN = "arn:aws:sns:us-east-1:0123456789:aws-controltower-AllConfigNotifications"

HEADER = (
    'terraform {\n'
    '  required_providers {\n'
    '    lacework = {\n'
    '      source  = "lacework/lacework"\n'
    '      version = "~> 1.0"\n'
    '    }\n'
    '  }\n'
    '}\n'
    '\n'
    'provider "aws" {\n'
    '  alias   = "log_archive"\n'
    '  profile = "AWSAdministratorAccess"\n'
    '  region  = "us-east-1"\n'
    '}\n'
    '\n'
    'provider "aws" {\n'
    '  alias   = "audit"\n'
    '  profile = "AWSAdministratorAccess"\n'
    '  region  = "us-east-1"\n'
    '}\n'
    '\n'
    'provider "lacework" {\n'
    '  organization = true\n'
    '}\n'
    '\n'
)

PROVIDERS_MAP = (
    '\n'
    '  providers = {\n'
    '    aws.audit       = aws.audit\n'
    '    aws.log_archive = aws.log_archive\n'
    '  }\n'
    '}\n'
)


def account(alias=None) -> AwsSubAccount:
    return AwsSubAccount(profile="AWSAdministratorAccess", region="us-east-1", alias=alias)


def generate(**kwargs) -> str:
    options = {
        "s3_bucket_arn": S3_BUCKET_ARN,
        "sns_topic_arn": SNS_TOPIC_ARN,
        "log_archive_account": account(),
        "audit_account": account(),
        "lacework_organization_level": True,
    }
    options.update(kwargs)
    return ControlTowerGenerator(ControlTowerArgs(**options)).generate()


def stripped(hcl: str) -> str:
    return hcl.replace(" ", "")


class TestControlTowerGolden:
    """Byte-exact documents."""

    def test_basic(self) -> None:
        assert generate() == HEADER + (
            'module "lacework_aws_controltower" {\n'
            '  source        = "lacework/cloudtrail-controltower/aws"\n'
            '  version       = "~> 0.3"\n'
            f'  s3_bucket_arn = "{S3_BUCKET_ARN}"\n'
            f'  sns_topic_arn = "{SNS_TOPIC_ARN}"\n'
        ) + PROVIDERS_MAP

    def test_account_mappings(self) -> None:
        mappings = OrgAccountMapping(
            default_lacework_account="main",
            mapping=[
                OrgAccountMap(lacework_account="sub-account-1", aws_accounts=["123456789011"]),
                OrgAccountMap(lacework_account="sub-account-2", aws_accounts=["123456789012"]),
            ],
        )

        assert generate(org_account_mappings=mappings) == HEADER + (
            'module "lacework_aws_controltower" {\n'
            '  source  = "lacework/cloudtrail-controltower/aws"\n'
            '  version = "~> 0.3"\n'
            '  org_account_mappings = [{\n'
            '    default_lacework_account = "main"\n'
            '    mapping = [{\n'
            '      aws_accounts     = ["123456789011"]\n'
            '      lacework_account = "sub-account-1"\n'
            '      }, {\n'
            '      aws_accounts     = ["123456789012"]\n'
            '      lacework_account = "sub-account-2"\n'
            '    }]\n'
            '  }]\n'
            f'  s3_bucket_arn = "{S3_BUCKET_ARN}"\n'
            f'  sns_topic_arn = "{SNS_TOPIC_ARN}"\n'
        ) + PROVIDERS_MAP

    def test_registered(self) -> None:
        hcl = generate_terraform("aws_controltower", {
            "s3_bucket_arn": S3_BUCKET_ARN,
            "sns_topic_arn": SNS_TOPIC_ARN,
            "log_archive_account": {"profile": "AWSAdministratorAccess", "region": "us-east-1"},
            "audit_account": {"profile": "AWSAdministratorAccess", "region": "us-east-1"},
            "lacework_organization_level": True,
        })
        assert hcl == generate()


class TestControlTowerAttributes:
    """Module attributes for the individual options."""

    def test_optional_attributes(self) -> None:
        hcl = stripped(generate(
            cross_account_policy_name="policy",
            enable_log_file_validation=True,
            external_id_length=1000,
            kms_key_arn="arn:aws:kms:us-east-1:0123456789:key/abc",
            lacework_account_id="434813966438",
            lacework_integration_name="ct",
            prefix="lw",
            sqs_queue_name="queue",
            tags={"env": "prod"},
            wait_time="10s",
        ))

        assert 'cross_account_policy_name="policy"' in hcl
        assert "enable_log_file_validation=true" in hcl
        assert "external_id_length=1000" in hcl
        assert 'kms_key_arn="arn:aws:kms:us-east-1:0123456789:key/abc"' in hcl
        assert 'lacework_aws_account_id="434813966438"' in hcl
        assert 'lacework_integration_name="ct"' in hcl
        assert 'prefix="lw"' in hcl
        assert 'sqs_queue_name="queue"' in hcl
        assert 'tags={\nenv="prod"\n}' in hcl
        assert 'wait_time="10s"' in hcl

    def test_defaults_not_rendered(self) -> None:
        hcl = generate()
        for name in ("enable_log_file_validation", "external_id_length", "use_existing_iam_role", "tags"):
            assert name not in hcl

    def test_existing_iam_role(self) -> None:
        role = ExistingIamRole(arn="arn:aws:iam::0123456789:role/lw", name="lw", external_id="ext")
        hcl = stripped(generate(existing_iam_role=role))

        assert "use_existing_iam_role=true" in hcl
        assert 'iam_role_arn="arn:aws:iam::0123456789:role/lw"' in hcl
        assert 'iam_role_name="lw"' in hcl
        assert 'iam_role_external_id="ext"' in hcl

    def test_empty_iam_role_is_unset(self) -> None:
        assert "use_existing_iam_role" not in generate(existing_iam_role=ExistingIamRole())

    def test_lacework_profile_without_organization(self) -> None:
        hcl = generate(lacework_profile="ct", lacework_organization_level=False)
        assert 'provider "lacework" {\n  profile = "ct"\n}\n' in hcl

    def test_no_lacework_provider_by_default(self) -> None:
        assert 'provider "lacework"' not in generate(lacework_organization_level=False)

    def test_matching_aliases_accepted(self) -> None:
        hcl = generate(log_archive_account=account("log_archive"), audit_account=account("audit"))
        assert hcl == generate()

    def test_external_id_length_bounds(self) -> None:
        with pytest.raises(ValidationError):
            ControlTowerArgs(external_id_length=1225)


class TestControlTowerValidation:
    """Invalid argument combinations are rejected."""

    @pytest.mark.parametrize("overrides,reason", [
        ({"s3_bucket_arn": None}, "s3 bucket arn must be set"),
        ({"sns_topic_arn": ""}, "sns topic arn must be set"),
        ({"log_archive_account": None}, "log archive and audit accounts must be set"),
        ({"audit_account": None}, "log archive and audit accounts must be set"),
    ])
    def test_required_inputs(self, overrides, reason) -> None:
        with pytest.raises(InvalidInputsError) as exc_info:
            generate(**overrides)
        assert exc_info.value.reason == reason

    def test_wrong_alias(self) -> None:
        with pytest.raises(InvalidInputsError) as exc_info:
            generate(audit_account=account("security"))
        assert exc_info.value.reason == "the audit account alias must be audit, got security"

    @pytest.mark.parametrize("role", [
        ExistingIamRole(arn="arn:aws:iam::0123456789:role/lw"),
        ExistingIamRole(arn="arn:aws:iam::0123456789:role/lw", name="lw"),
        ExistingIamRole(external_id="ext"),
    ])
    def test_partial_iam_role(self, role) -> None:
        with pytest.raises(InvalidInputsError) as exc_info:
            generate(existing_iam_role=role)
        assert exc_info.value.reason == (
            "when using an existing IAM role, existing role ARN, name, and external ID all must be set"
        )
