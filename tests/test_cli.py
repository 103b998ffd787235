"""Tests for the command-line interface."""

from pathlib import Path
from unittest.mock import patch

import pytest

from repo_pdf_service import cli
from repo_pdf_service.core.exceptions import ConversionError


class TestParser:
    """Test argument parsing."""

    def test_render_arguments(self):
        """Test render options map to namespace fields."""
        args = cli.build_parser().parse_args(
            [
                "render",
                "https://github.com/octocat/demo",
                "--ext",
                "js",
                "--ext",
                "py",
                "--max-depth",
                "1",
                "--no-readme",
                "-o",
                "out.pdf",
            ]
        )
        assert args.command == "render"
        assert args.extensions == ["js", "py"]
        assert args.max_depth == 1
        assert args.no_readme is True
        assert args.no_structure is False
        assert args.output == Path("out.pdf")

    def test_serve_arguments(self):
        """Test serve overrides."""
        args = cli.build_parser().parse_args(["serve", "--port", "8080", "-v"])
        assert args.port == 8080
        assert args.verbose is True

    def test_command_required(self):
        """Test a subcommand must be given."""
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args([])

    def test_verbose_and_quiet_exclusive(self):
        """Test -v and -q cannot be combined."""
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args(["serve", "-v", "-q"])


class TestMain:
    """Test exit codes."""

    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        for name in ("GITHUB_TOKEN", "PORT", "REPO2PDF_CONFIG"):
            monkeypatch.delenv(name, raising=False)

    def test_invalid_url_exit_code(self):
        """Test a bad URL fails with exit code 1."""
        assert cli.main(["render", "not-a-url", "-q"]) == 1

    def test_missing_config_exit_code(self, tmp_path):
        """Test a missing config file fails with exit code 1."""
        assert cli.main(["serve", "-c", str(tmp_path / "missing.yaml"), "-q"]) == 1

    def test_render_moves_pdf(self, tmp_path, sample_github):
        """Test the rendered PDF lands at the requested path and the workspace is removed."""
        output = tmp_path / "out" / "demo.pdf"
        workspace = tmp_path / "workspace"
        config_file = tmp_path / "config.yaml"
        config_file.write_text(f"workspace_dir: {workspace}\n", encoding="utf-8")

        def fake_generate(self, repo, options, output_dir):
            pdf = output_dir / "demo-1.pdf"
            pdf.write_bytes(b"%PDF")
            return pdf

        with patch("repo_pdf_service.github.GitHubClient", return_value=sample_github), patch(
            "repo_pdf_service.converter.RepoPDFConverter.generate", fake_generate
        ):
            code = cli.main(
                [
                    "render",
                    "https://github.com/octocat/demo",
                    "-o",
                    str(output),
                    "-c",
                    str(config_file),
                    "-q",
                ]
            )

        assert code == 0
        assert output.read_bytes() == b"%PDF"
        assert list(workspace.iterdir()) == []

    def test_render_failure_exit_code(self, tmp_path):
        """Test conversion errors fail with exit code 1 and leave no workspace behind."""
        workspace = tmp_path / "workspace"
        config_file = tmp_path / "config.yaml"
        config_file.write_text(f"workspace_dir: {workspace}\n", encoding="utf-8")

        with patch(
            "repo_pdf_service.converter.RepoPDFConverter.generate",
            side_effect=ConversionError("Pandoc conversion failed"),
        ):
            code = cli.main(
                ["render", "https://github.com/octocat/demo", "-c", str(config_file), "-q"]
            )

        assert code == 1
        assert list(workspace.iterdir()) == []

    def test_keyboard_interrupt_exit_code(self):
        """Test interruption exits with 130."""
        with patch("repo_pdf_service.cli._load_config", side_effect=KeyboardInterrupt):
            assert cli.main(["serve", "-q"]) == 130

    def test_serve_overrides(self):
        """Test host and port flags reach the service."""
        with patch("repo_pdf_service.service.run_service") as mock_run:
            assert cli.main(["serve", "--host", "127.0.0.1", "--port", "8080", "-q"]) == 0

        config = mock_run.call_args.args[0]
        assert config.server.host == "127.0.0.1"
        assert config.server.port == 8080
