"""paperforge: reproducible document builds from a single git commit.

Turns the file tree of one commit into a compiled PDF and a deterministic
gzip'd tar of its sources, and optionally packages both into a MIME message:
  - order-preserving, filtered staging of the commit tree
  - provenance stamp injected into the primary LaTeX source
  - pdflatex/bibtex passes driven by an explicit state machine
  - release mode archiving only the files the compiler used
  - multipart message with streaming, fixed-width base64 attachments
"""

__version__ = "0.1.0"
__description__ = "Reproducible PDF and source-archive builds from a git commit"

from paperforge.core.pipeline import BuildPipeline
from paperforge.mail.composer import MessageComposer

__all__ = ["BuildPipeline", "MessageComposer", "__version__"]
