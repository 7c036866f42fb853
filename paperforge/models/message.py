"""Multipart message models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

# Canonical header order. Headers without a value are omitted, never reordered.
HEADER_ORDER: tuple[str, ...] = (
    "From",
    "To",
    "Cc",
    "Subject",
    "Date",
    "Message-ID",
    "MIME-Version",
    "Content-Type",
)


class MessagePart(BaseModel):
    """One body part: either inline text or a base64 attachment."""

    model_config = ConfigDict(frozen=True)

    content_type: str
    text: str | None = None
    payload: bytes | None = None
    filename: str | None = None

    @property
    def is_attachment(self) -> bool:
        return self.payload is not None

    def header_lines(self) -> list[tuple[str, str]]:
        """Part headers in emission order."""
        lines = [("Content-Type", self.content_type)]
        if self.is_attachment:
            lines.append(("Content-Transfer-Encoding", "base64"))
            lines.append(("Content-Disposition", f"attachment; filename={self.filename}"))
        else:
            # Commit text is written as raw UTF-8.
            lines.append(("Content-Transfer-Encoding", "8bit"))
        return lines


class EmailMessage(BaseModel):
    """A fully composed message, ready to be streamed."""

    model_config = ConfigDict(frozen=True)

    headers: dict[str, str]
    boundary: str
    parts: tuple[MessagePart, ...]

    def ordered_headers(self) -> list[tuple[str, str]]:
        return [(name, self.headers[name]) for name in HEADER_ORDER if self.headers.get(name)]
