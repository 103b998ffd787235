"""
Constants and configuration defaults for repo-pdf-service.

This module centralizes magic numbers, size limits, timeouts, markers
and other constants to avoid hardcoding values throughout the codebase.
"""

from typing import Dict, Set

# ============================================================================
# Render Option Defaults
# ============================================================================

DEFAULT_MAX_DEPTH: int = 3
"""Default maximum directory depth for tree traversal"""

DEFAULT_MAX_FILE_SIZE: int = 100000
"""Default maximum file size in bytes before a placeholder replaces content"""

# ============================================================================
# GitHub API
# ============================================================================

GITHUB_API_URL: str = "https://api.github.com"
"""Base URL of the GitHub REST API"""

GITHUB_API_TIMEOUT: int = 30
"""Timeout in seconds for a single GitHub API call"""

GITHUB_ACCEPT_HEADER: str = "application/vnd.github+json"
"""Accept header sent with every GitHub API request"""

USER_AGENT: str = "repo-pdf-service/1.0"
"""User-Agent sent to GitHub"""

README_MARKER: str = "readme"
"""Lower-cased substring identifying a README file at the repository root"""

# ============================================================================
# Anchors
# ============================================================================

README_ANCHOR: str = "readme"
"""Anchor of the README section"""

STRUCTURE_ANCHOR: str = "structure"
"""Anchor of the repository structure section"""

FILE_ANCHOR_PREFIX: str = "file-"
"""Prefix of every per-file section anchor"""

ANCHOR_SUBSTITUTE: str = "-"
"""Character replacing path separators and dots in file anchors"""

ANCHOR_HASH_LENGTH: int = 8
"""Hex digits of the path hash appended to a colliding anchor"""

# ============================================================================
# Document Text
# ============================================================================

FOLDER_MARKER: str = "📁"
"""Marker printed before directory entries"""

FILE_MARKER: str = "📄"
"""Marker printed before file entries in the structure listing"""

INDENT_WIDTH: int = 2
"""Spaces of indentation per directory level"""

MAX_LINE_LENGTH_DEFAULT: int = 120
"""Code lines longer than this are hard wrapped"""

WRAP_WIDTH_RATIO: float = 0.75
"""Ratio of max_line_length used as the wrapped chunk width"""

TOC_TITLE: str = "Table of Contents"
README_TITLE: str = "README"
STRUCTURE_TITLE: str = "Repository Structure"

TOO_LARGE_PLACEHOLDER: str = "[File too large to include: {size_kb}KB]"
"""Placeholder emitted instead of content for files over the size ceiling"""

FETCH_ERROR_PLACEHOLDER: str = "// Error fetching content for {path}: {message}"
"""Placeholder emitted when file content cannot be fetched"""

# ============================================================================
# Delivery
# ============================================================================

STREAM_CHUNK_SIZE: int = 8192
"""Chunk size in bytes for streaming the rendered document"""

PDF_MEDIA_TYPE: str = "application/pdf"

TEMP_DIR_PREFIX: str = "repo-pdf-"
"""Prefix of per-request temporary directories"""

# ============================================================================
# Concurrency Settings
# ============================================================================

MAX_TREE_WORKERS: int = 8
"""Upper bound for the tree builder's worker pool"""

# ============================================================================
# Syntax Highlighting
# ============================================================================

CODE_EXTENSIONS: Dict[str, str] = {
    # Frontend
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".ts": "typescript",
    ".tsx": "typescript",
    ".css": "css",
    ".scss": "scss",
    ".html": "html",
    ".htm": "html",
    ".json": "json",
    ".graphql": "graphql",
    # Backend
    ".py": "python",
    ".java": "java",
    ".cpp": "cpp",
    ".cc": "cpp",
    ".c": "c",
    ".h": "c",
    ".hpp": "cpp",
    ".go": "go",
    ".rs": "rust",
    ".rb": "ruby",
    ".php": "php",
    ".cs": "cs",
    ".kt": "kotlin",
    ".swift": "swift",
    ".scala": "scala",
    ".lua": "lua",
    ".r": "r",
    # Configuration and Scripts
    ".sh": "bash",
    ".bash": "bash",
    ".zsh": "zsh",
    ".sql": "sql",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".toml": "toml",
    ".xml": "xml",
    ".ini": "ini",
    ".dockerfile": "dockerfile",
    # Documentation
    ".md": "markdown",
    ".rst": "rest",
    ".txt": "text",
}
"""Mapping of file extensions to language identifiers for syntax highlighting"""

# ============================================================================
# PDF and LaTeX Settings
# ============================================================================

DEFAULT_MARGIN: str = "margin=50bp"
"""Default page margin"""

DEFAULT_FONTSIZE: str = "10pt"
"""Default document font size"""

VALID_FONTSIZES: Set[str] = {"10pt", "11pt", "12pt"}
"""Font sizes supported by the article document class"""

PANDOC_HIGHLIGHT_STYLES: Set[str] = {
    "pygments",
    "tango",
    "espresso",
    "zenburn",
    "kate",
    "monochrome",
    "breezedark",
    "haddock",
}
"""Highlight styles built into pandoc"""

PANDOC_HIGHLIGHT_STYLE: str = "tango"
"""Default syntax highlighting style"""

PANDOC_PDF_ENGINE: str = "xelatex"
"""PDF engine to use with pandoc"""

PANDOC_TIMEOUT: int = 600
"""Timeout in seconds for a pandoc run"""

PANDOC_INPUT_FORMAT: str = (
    "markdown+fenced_code_attributes+fenced_code_blocks+backtick_code_blocks"
    "+line_blocks+raw_attribute+header_attributes"
    "-yaml_metadata_block-tex_math_dollars-raw_tex-implicit_figures"
)
"""Pandoc reader extensions for the intermediate Markdown"""

# ============================================================================
# Logging
# ============================================================================

LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
"""Default logging format"""

LOG_DATE_FORMAT: str = "%Y-%m-%d %H:%M:%S"
"""Default logging date format"""
