"""Unit tests for CLI commands.

This module tests the command-line interface for pio-mapper including the
main group, configuration validation and the conversion commands.
"""

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from pio_mapper import __version__
from pio_mapper.cli.main import cli
from pio_mapper.converters.organization import organizations_to_trees
from pio_mapper.document.primitives import UuidValue
from pio_mapper.document.reader import store_fragments
from pio_mapper.document.tree import SubTree
from pio_mapper.models.resources import Organization, OrganizationIdentifier
from pio_mapper.terminology.resolver import TerminologyResolver

ROLE_ID = "e5f6a7b8-c9d0-4e1f-9a2b-3c4d5e6f7a95"
ORPHAN_PRACTITIONER_ID = "9a8b7c6d-5e4f-4a3b-9c2d-1e0f9a8b7c62"

pytestmark = pytest.mark.usefixtures("reset_logging")


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def document_file(
    tmp_path: Path, empty_document: SubTree, resolver: TerminologyResolver
) -> Path:
    """Document with one organization and one role without practitioner."""
    organization = Organization(
        id="o1",
        name="Pflegeheim Ost",
        type="pflegeheim",
        identifier=[OrganizationIdentifier("facility-ID", "998877")],
    )
    store_fragments(empty_document, organizations_to_trees([organization], resolver))
    role = SubTree(f"{ROLE_ID}.KBV_PR_MIO_ULB_PractitionerRole")
    role.set_value("practitioner.reference", UuidValue(ORPHAN_PRACTITIONER_ID))
    store_fragments(empty_document, [role])

    path = tmp_path / "document.json"
    path.write_text(json.dumps(empty_document.to_dict()), encoding="utf-8")
    return path


class TestMainCLI:
    """Test cases for main CLI entry point."""

    def test_cli_help(self, runner: CliRunner) -> None:
        """Test main CLI help output."""
        # Act
        result = runner.invoke(cli, ["--help"])

        # Assert
        assert result.exit_code == 0
        assert "PIO resource mapper" in result.output
        assert "--verbose" in result.output
        assert "convert" in result.output

    def test_cli_version(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert "pio-mapper" in result.output

    def test_cli_version_command(self, runner: CliRunner) -> None:
        """Test explicit version command."""
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["version"])

        assert result.exit_code == 0
        assert f"pio-mapper version {__version__}" in result.output

    def test_verbose_flag_configures_logging(self, runner: CliRunner) -> None:
        """Test --verbose flag enables DEBUG logging."""
        # Act
        with patch("pio_mapper.cli.main.configure_logging") as mock_config:
            result = runner.invoke(cli, ["--verbose", "version"])

        # Assert
        assert result.exit_code == 0
        mock_config.assert_called_once()
        assert mock_config.call_args[1]["level"] == "DEBUG"

    def test_log_file_and_redact_flags(self, runner: CliRunner, tmp_path: Path) -> None:
        log_file = tmp_path / "custom.log"

        with patch("pio_mapper.cli.main.configure_logging") as mock_config:
            result = runner.invoke(cli, ["--log-file", str(log_file), "--redact-pii", "version"])

        assert result.exit_code == 0
        assert mock_config.call_args[1]["log_file"] == log_file
        assert mock_config.call_args[1]["redact_pii"] is True

    def test_invalid_config_file(self, runner: CliRunner, tmp_path: Path) -> None:
        """Test a broken --config file aborts with exit code 1."""
        config_file = tmp_path / "config.json"
        config_file.write_text("{", encoding="utf-8")

        result = runner.invoke(cli, ["--config", str(config_file), "version"])

        assert result.exit_code == 1
        assert "Error loading configuration" in result.output


class TestConfigCommands:
    """Test configuration validation command."""

    def test_validate_valid_file(self, runner: CliRunner, tmp_path: Path) -> None:
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({"backend": {"enabled": True}}), encoding="utf-8")

        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["config", "validate", str(config_file)])

        assert result.exit_code == 0
        assert "Configuration is valid" in result.output
        assert "Enabled:     True" in result.output

    def test_validate_invalid_file(self, runner: CliRunner, tmp_path: Path) -> None:
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({"logging": {"level": "LOUD"}}), encoding="utf-8")

        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["config", "validate", str(config_file)])

        assert result.exit_code == 1
        assert "Configuration validation failed" in result.output


class TestConvertToObject:
    """Test reading objects out of a document."""

    def test_organizations(self, runner: CliRunner, document_file: Path, tmp_path: Path) -> None:
        """Test organizations are written as JSON objects."""
        # Arrange
        output = tmp_path / "orgs.json"

        # Act
        with runner.isolated_filesystem():
            result = runner.invoke(
                cli,
                ["convert", "to-object", str(document_file), "--kind", "organization", "--output", str(output)],
            )

        # Assert
        assert result.exit_code == 0, result.output
        payload = json.loads(output.read_text(encoding="utf-8"))
        assert payload["ignored"] == []
        assert payload["items"] == [
            {
                "id": "o1",
                "name": "Pflegeheim Ost",
                "type": "pflegeheim",
                "identifier": [{"label": "facility-ID", "value": "998877"}],
                "address": [],
                "telecom": [],
            }
        ]

    def test_practitioners_report_orphan_roles(
        self, runner: CliRunner, document_file: Path, tmp_path: Path
    ) -> None:
        """Test roles without practitioner appear as ignored tree fragments."""
        output = tmp_path / "practitioners.json"

        with runner.isolated_filesystem():
            result = runner.invoke(
                cli,
                ["convert", "to-object", str(document_file), "--kind", "practitioner", "--output", str(output)],
            )

        assert result.exit_code == 0, result.output
        payload = json.loads(output.read_text(encoding="utf-8"))
        assert payload["items"] == []
        assert [item["absolutePath"] for item in payload["ignored"]] == [
            f"{ROLE_ID}.KBV_PR_MIO_ULB_PractitionerRole"
        ]

    def test_invalid_document(self, runner: CliRunner, tmp_path: Path) -> None:
        """Test an unreadable document exits with code 1."""
        document = tmp_path / "document.json"
        document.write_text("not json", encoding="utf-8")

        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["convert", "to-object", str(document), "--kind", "organization"])

        assert result.exit_code == 1
        assert "Invalid JSON in document file" in result.output


class TestConvertToTree:
    """Test turning objects into fragments."""

    def test_organizations_without_document(self, runner: CliRunner, tmp_path: Path) -> None:
        # Arrange
        objects = tmp_path / "orgs.json"
        objects.write_text(
            json.dumps([{"id": "o2", "name": "Praxis", "identifier": [{"label": "office-number", "value": "1"}]}]),
            encoding="utf-8",
        )
        output = tmp_path / "fragments.json"

        # Act
        with runner.isolated_filesystem():
            result = runner.invoke(
                cli, ["convert", "to-tree", str(objects), "--kind", "organization", "--output", str(output)]
            )

        # Assert
        assert result.exit_code == 0, result.output
        payload = json.loads(output.read_text(encoding="utf-8"))
        assert [tree["absolutePath"] for tree in payload["subTrees"]] == ["o2.KBV_PR_MIO_ULB_Organization"]

    def test_unknown_identifier_label_fails(self, runner: CliRunner, tmp_path: Path) -> None:
        """Test an unknown identifier label exits with code 1 and writes nothing."""
        objects = tmp_path / "orgs.json"
        objects.write_text(
            json.dumps([{"id": "o2", "identifier": [{"label": "steuernummer", "value": "1"}]}]),
            encoding="utf-8",
        )
        output = tmp_path / "fragments.json"

        with runner.isolated_filesystem():
            result = runner.invoke(
                cli, ["convert", "to-tree", str(objects), "--kind", "organization", "--output", str(output)]
            )

        assert result.exit_code == 1
        assert "steuernummer" in result.output
        assert not output.exists()

    def test_contact_persons_need_patient(self, runner: CliRunner, tmp_path: Path) -> None:
        objects = tmp_path / "persons.json"
        objects.write_text(json.dumps([{"id": "p1"}]), encoding="utf-8")

        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["convert", "to-tree", str(objects), "--kind", "contact-person"])

        assert result.exit_code == 2
        assert "--patient-id" in result.output

    def test_invalid_objects(self, runner: CliRunner, tmp_path: Path) -> None:
        objects = tmp_path / "orgs.json"
        objects.write_text(json.dumps([{"name": "ohne id"}]), encoding="utf-8")

        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["convert", "to-tree", str(objects), "--kind", "organization"])

        assert result.exit_code == 2
        assert "is not a list of organization objects" in result.output
