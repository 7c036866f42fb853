"""Environment-driven settings for paperforge.

Reads from a .env file and PAPERFORGE_* environment variables. These are
process-wide defaults only; every run freezes them into a ``BuildConfig``
and ``MessageConfig`` (see ``paperforge.models.config``) which are passed
explicitly to the components that need them.
"""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Process-wide defaults with environment variable overrides.

    Examples
    --------
    Override via environment::

        export PAPERFORGE_LOG_LEVEL=DEBUG
        export PAPERFORGE_LATEX_COMMAND=lualatex
        export PAPERFORGE_KEEP_WORKSPACE=true

    Or via .env file::

        PAPERFORGE_PRIMARY_SOURCE=paper.tex
        PAPERFORGE_MESSAGE_ID_DOMAIN=example.org
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="PAPERFORGE_",
        env_file_encoding="utf-8",
    )

    log_level: str = "INFO"

    # External tools
    latex_command: str = "pdflatex"
    bibtex_command: str = "bibtex"

    # Recognized document sources
    primary_source: str = "main.tex"
    bibliography_database: str = "main.bib"

    # Transient workspace
    workspace_prefix: str = "texdir"
    keep_workspace: bool = False

    # Message composition
    message_id_domain: str = "localhost"


# Module-level singleton; import as `from paperforge.config import settings`
settings = Settings()
