"""Root of the paperforge exception hierarchy.

Every module raises its own ``PaperforgeError`` subclass. None of them are
recovered locally: a raised error aborts the run and is reported by the CLI.
"""

from __future__ import annotations


class PaperforgeError(RuntimeError):
    """Base class for all fatal paperforge errors."""
