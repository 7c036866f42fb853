"""Composes the build message: commit metadata plus two attachments.

Header block, in fixed order (unset headers are skipped)::

    From, To, Cc, Subject, Date, Message-ID, MIME-Version, Content-Type

Body parts, in fixed order: plain-text commit summary, compiled document,
compressed source archive. Attachments are base64 encoded through
``write_base64_lines`` one at a time.
"""

from __future__ import annotations

import logging
import os
import time
from collections.abc import Callable
from datetime import datetime
from email.header import Header
from email.utils import format_datetime, formataddr, parseaddr
from typing import BinaryIO

from paperforge.errors import PaperforgeError
from paperforge.mail.base64_stream import CRLF, write_base64_lines
from paperforge.mail.multipart import MultipartWriter, random_boundary
from paperforge.models.artifacts import BuildResult
from paperforge.models.config import MessageConfig
from paperforge.models.message import EmailMessage, MessagePart
from paperforge.models.snapshot import CommitSnapshot

logger = logging.getLogger(__name__)

AUTHOR_TIME_FORMAT = "%a %b %d %H:%M:%S %Y %z"
_ECHOED_HEADERS = frozenset({"From", "To", "Cc", "Subject"})


class AddressError(PaperforgeError):
    """Raised when an address cannot be parsed."""


class HeaderValueError(PaperforgeError):
    """Raised when a header value would break out of its header line."""


def _check_single_line(name: str, value: str) -> str:
    if "\r" in value or "\n" in value:
        raise HeaderValueError(f"{name} must not contain line breaks: {value!r}")
    return value


def parse_address(text: str) -> str:
    """Parse ``Name <user@host>`` or ``user@host`` into a normalized address."""
    if "\r" in text or "\n" in text:
        raise AddressError(f"invalid address: {text!r}")
    name, addr = parseaddr(text)
    if not addr or "@" not in addr or addr.startswith("@") or addr.endswith("@"):
        raise AddressError(f"invalid address: {text!r}")
    return formataddr((name, addr))


def generate_message_id(
    domain: str,
    *,
    now: float | None = None,
    random_bytes: Callable[[int], bytes] = os.urandom,
) -> str:
    """Best-effort unique message identifier.

    Four low-order bytes of the Unix time followed by fourteen random
    bytes, laid out like a UUID. Collisions are harmless.
    """
    seconds = int(time.time() if now is None else now)
    raw = (seconds & 0xFFFFFFFF).to_bytes(4, "little") + random_bytes(14)
    return (
        f"{raw[0:4].hex()}-{raw[4:6].hex()}-{raw[6:8].hex()}-"
        f"{raw[8:10].hex()}-{raw[10:18].hex()}@{domain}"
    )


def _encode_header(value: str) -> str:
    if value.isascii():
        return value
    return Header(value, "utf-8").encode(linesep="\r\n")


def commit_summary(snapshot: CommitSnapshot) -> str:
    """Plain-text body: author, author time, blank line, full message."""
    author = snapshot.author
    return f"{author}\n{author.when.strftime(AUTHOR_TIME_FORMAT)}\n\n{snapshot.message}\n"


class MessageComposer:
    """Builds and streams the multipart build message.

    Parameters
    ----------
    config:
        Sender, recipients, subject and message-id domain.
    clock:
        Source of the composition time (``Date`` header, message id).
    """

    def __init__(
        self,
        config: MessageConfig,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._config = config
        self._clock = clock or (lambda: datetime.now().astimezone())

    # ------------------------------------------------------------------
    # Building
    # ------------------------------------------------------------------

    def build(self, snapshot: CommitSnapshot, result: BuildResult) -> EmailMessage:
        sender = parse_address(self._config.sender)
        recipients = [parse_address(r) for r in self._config.recipients]
        now = self._clock()
        boundary = random_boundary()

        headers: dict[str, str] = {"From": sender}
        if recipients:
            headers["To"] = ", ".join(recipients)
            headers["Cc"] = sender
        else:
            headers["To"] = sender
        headers["Subject"] = _encode_header(_check_single_line("Subject", self._config.subject))
        headers["Date"] = format_datetime(now)
        domain = _check_single_line("Message-ID domain", self._config.message_id_domain)
        message_id = generate_message_id(domain, now=now.timestamp())
        headers["Message-ID"] = f"<{message_id}>"
        headers["MIME-Version"] = "1.0"
        headers["Content-Type"] = f'multipart/mixed; boundary="{boundary}"'

        parts = (
            MessagePart(
                content_type="text/plain; charset=utf-8",
                text=commit_summary(snapshot),
            ),
            MessagePart(
                content_type="application/pdf",
                payload=result.artifacts.document,
                filename=result.names.document,
            ),
            MessagePart(
                content_type="application/gzip",
                payload=result.artifacts.archive,
                filename=result.names.archive,
            ),
        )
        return EmailMessage(headers=headers, boundary=boundary, parts=parts)

    # ------------------------------------------------------------------
    # Streaming
    # ------------------------------------------------------------------

    @staticmethod
    def write(message: EmailMessage, out: BinaryIO) -> None:
        """Stream *message* onto *out* in wire format."""
        ordered = message.ordered_headers()
        for name, value in ordered:
            if name in _ECHOED_HEADERS:
                logger.info("%s: %s", name, value)

        out.write("".join(f"{name}: {value}\r\n" for name, value in ordered).encode("utf-8"))
        out.write(CRLF)

        writer = MultipartWriter(out, message.boundary)
        for part in message.parts:
            body = writer.create_part(part.header_lines())
            if part.is_attachment:
                write_base64_lines(part.payload, body)
            else:
                body.write(part.text.encode("utf-8"))
        writer.close()

    def compose(self, snapshot: CommitSnapshot, result: BuildResult, out: BinaryIO) -> EmailMessage:
        message = self.build(snapshot, result)
        self.write(message, out)
        return message
