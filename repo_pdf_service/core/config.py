"""
Configuration management with Pydantic validation.

This module provides strongly-typed configuration models with validation
for all application settings.
"""

import os
from pathlib import Path
from typing import List, Optional, Union

import yaml
from pydantic import BaseModel, Field, field_validator

from repo_pdf_service.core.constants import (
    DEFAULT_FONTSIZE,
    DEFAULT_MARGIN,
    FILE_MARKER,
    FOLDER_MARKER,
    GITHUB_API_TIMEOUT,
    GITHUB_API_URL,
    INDENT_WIDTH,
    MAX_LINE_LENGTH_DEFAULT,
    MAX_TREE_WORKERS,
    PANDOC_HIGHLIGHT_STYLE,
    PANDOC_HIGHLIGHT_STYLES,
    PANDOC_PDF_ENGINE,
    VALID_FONTSIZES,
)
from repo_pdf_service.core.exceptions import ConfigurationError

CONFIG_ENV_VAR = "REPO2PDF_CONFIG"
TOKEN_ENV_VAR = "GITHUB_TOKEN"
PORT_ENV_VAR = "PORT"


class GitHubSettings(BaseModel):
    """
    GitHub API access settings.

    Attributes:
        token: Personal access token (optional, raises the rate limit)
        api_url: Base URL of the REST API
        timeout: Per-request timeout in seconds
    """

    token: Optional[str] = Field(default=None, description="GitHub API token")
    api_url: str = Field(default=GITHUB_API_URL, description="GitHub REST API base URL")
    timeout: int = Field(default=GITHUB_API_TIMEOUT, ge=1, le=600, description="Timeout (s)")

    @field_validator("api_url")
    @classmethod
    def validate_api_url(cls, v: str) -> str:
        """Validate API URL format."""
        v = v.strip().rstrip("/")
        if not v.startswith(("http://", "https://")):
            raise ValueError("api_url must start with http:// or https://")
        return v


class ServerSettings(BaseModel):
    """
    HTTP server settings.

    Attributes:
        host: Interface to bind
        port: Port to listen on
        api_prefix: Prefix for the JSON/PDF routes (e.g. "/api")
        cors_origins: Origins allowed by the CORS middleware
        client_build_dir: Directory of a bundled client application to serve
    """

    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=5000, ge=1, le=65535, description="Listen port")
    api_prefix: str = Field(default="", description="Route prefix")
    cors_origins: List[str] = Field(default_factory=lambda: ["*"], description="CORS origins")
    client_build_dir: Optional[str] = Field(default=None, description="Client build directory")

    @field_validator("api_prefix")
    @classmethod
    def validate_api_prefix(cls, v: str) -> str:
        """Normalize prefix to "" or "/segment" without trailing slash."""
        v = v.strip().strip("/")
        return f"/{v}" if v else ""


class PDFSettings(BaseModel):
    """
    PDF generation settings.

    Attributes:
        margin: Page geometry (e.g., "margin=50bp")
        main_font: Main document font (auto-detected if not set)
        sans_font: Sans-serif font (auto-detected if not set)
        mono_font: Monospace font for code (auto-detected if not set)
        emoji_font: Font used for folder/file markers (auto-detected if not set)
        fontsize: Document font size
        highlight_style: Pandoc syntax highlighting style
        pdf_engine: Pandoc PDF engine
        folder_marker: Marker printed before directories
        file_marker: Marker printed before files in the structure listing
        indent_width: Spaces per directory level
        max_line_length: Maximum code line length before hard wrapping
        show_progress: Show a progress bar while writing file sections
    """

    margin: str = Field(default=DEFAULT_MARGIN, description="Page margins")
    main_font: Optional[str] = Field(default=None, description="Main document font")
    sans_font: Optional[str] = Field(default=None, description="Sans-serif font")
    mono_font: Optional[str] = Field(default=None, description="Monospace font for code")
    emoji_font: Optional[str] = Field(default=None, description="Emoji font for markers")
    fontsize: str = Field(default=DEFAULT_FONTSIZE, description="Document font size")
    highlight_style: str = Field(
        default=PANDOC_HIGHLIGHT_STYLE, description="Syntax highlighting style"
    )
    pdf_engine: str = Field(default=PANDOC_PDF_ENGINE, description="Pandoc PDF engine")
    folder_marker: str = Field(default=FOLDER_MARKER, description="Directory marker")
    file_marker: str = Field(default=FILE_MARKER, description="File marker")
    indent_width: int = Field(default=INDENT_WIDTH, ge=0, le=8, description="Indent per level")
    max_line_length: int = Field(
        default=MAX_LINE_LENGTH_DEFAULT, ge=40, le=500, description="Hard wrap width for code"
    )
    show_progress: bool = Field(default=False, description="Show progress bar")

    @field_validator("fontsize")
    @classmethod
    def validate_fontsize(cls, v: str) -> str:
        """Validate font size."""
        if v not in VALID_FONTSIZES:
            raise ValueError(f"fontsize must be one of: {', '.join(sorted(VALID_FONTSIZES))}")
        return v

    @field_validator("highlight_style")
    @classmethod
    def validate_highlight_style(cls, v: str) -> str:
        """Validate pandoc highlight style."""
        if v not in PANDOC_HIGHLIGHT_STYLES:
            raise ValueError(
                f"highlight_style must be one of: {', '.join(sorted(PANDOC_HIGHLIGHT_STYLES))}"
            )
        return v


class AppConfig(BaseModel):
    """
    Main application configuration.

    Attributes:
        github: GitHub API settings
        server: HTTP server settings
        pdf_settings: PDF generation settings
        workspace_dir: Root for per-request temporary directories
        tree_workers: Worker threads used to fetch directory listings

    Example:
        >>> config = AppConfig.from_yaml("config.yaml")
        >>> app = create_app(config)
    """

    github: GitHubSettings = Field(default_factory=GitHubSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)
    pdf_settings: PDFSettings = Field(default_factory=PDFSettings)
    workspace_dir: Optional[str] = Field(
        default=None, description="Temporary workspace root (system temp dir if unset)"
    )
    tree_workers: int = Field(
        default=1, ge=1, le=MAX_TREE_WORKERS, description="Tree fetch worker threads"
    )

    # Internal fields
    _project_root: Optional[Path] = None

    @classmethod
    def from_yaml(cls, config_path: Union[str, Path]) -> "AppConfig":
        """
        Load configuration from YAML file.

        Environment overrides (``GITHUB_TOKEN``, ``PORT``) are applied on top
        of the file contents.

        Args:
            config_path: Path to configuration YAML file

        Returns:
            Validated AppConfig instance

        Raises:
            ConfigurationError: If config file is invalid
        """
        config_path = Path(config_path)

        if not config_path.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError("Invalid YAML syntax in configuration file", str(e))
        except OSError as e:
            raise ConfigurationError(f"Failed to read configuration file: {config_path}", str(e))

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError("Configuration file must contain a mapping")

        try:
            config = cls(**data)
        except Exception as e:
            raise ConfigurationError("Invalid configuration", str(e))

        config._project_root = config_path.parent.absolute()
        return config.with_env_overrides()

    @classmethod
    def from_env(cls) -> "AppConfig":
        """
        Build configuration from the environment.

        Loads ``$REPO2PDF_CONFIG`` when set, otherwise starts from defaults,
        then applies ``GITHUB_TOKEN`` and ``PORT``.
        """
        config_path = os.environ.get(CONFIG_ENV_VAR)
        if config_path:
            return cls.from_yaml(config_path)
        return cls().with_env_overrides()

    def with_env_overrides(self) -> "AppConfig":
        """Apply ``GITHUB_TOKEN`` and ``PORT`` environment variables in place."""
        token = os.environ.get(TOKEN_ENV_VAR)
        if token:
            self.github.token = token

        port = os.environ.get(PORT_ENV_VAR)
        if port:
            try:
                self.server.port = int(port)
            except ValueError as e:
                raise ConfigurationError(f"Invalid {PORT_ENV_VAR} value: {port}", str(e))

        return self

    @property
    def project_root(self) -> Path:
        """Get project root directory."""
        if self._project_root is None:
            return Path.cwd()
        return self._project_root

    @property
    def workspace_path(self) -> Optional[Path]:
        """Get absolute workspace directory path, or None for the system temp dir."""
        if not self.workspace_dir:
            return None
        workspace = Path(self.workspace_dir)
        if not workspace.is_absolute():
            workspace = self.project_root / workspace
        return workspace

    @property
    def client_build_path(self) -> Optional[Path]:
        """Get absolute client build directory, if configured."""
        if not self.server.client_build_dir:
            return None
        build_dir = Path(self.server.client_build_dir)
        if not build_dir.is_absolute():
            build_dir = self.project_root / build_dir
        return build_dir

    class Config:
        """Pydantic configuration."""

        validate_assignment = True
