"""Multipart message composition with streaming base64 attachments."""

from paperforge.mail.base64_stream import LINE_LENGTH, TranscodingError, write_base64_lines
from paperforge.mail.composer import AddressError, HeaderValueError, MessageComposer, parse_address
from paperforge.mail.multipart import MultipartWriter

__all__ = [
    "LINE_LENGTH",
    "AddressError",
    "HeaderValueError",
    "MessageComposer",
    "MultipartWriter",
    "TranscodingError",
    "parse_address",
    "write_base64_lines",
]
