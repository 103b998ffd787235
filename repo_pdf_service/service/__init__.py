"""HTTP service mode."""

from repo_pdf_service.service.app import create_app, run_service

__all__ = ["create_app", "run_service"]
