"""
Reply Envelope Handling

Helpers for the XML returned by Junos devices:
- unwrap_reply: strip the <rpc-reply> wrapper and keep its body verbatim
- decode_xml: hand the first element of a body to a decode target
- strip_line_breaks: remove line breaks that break NETCONF values
"""

import re
import xml.etree.ElementTree as ET
from typing import Optional

from junos_exporter.exceptions import DecodeError, EnvelopeDecodeError


RPC_REPLY = "rpc-reply"

# Body of a reply, kept byte-for-byte. The document has already been
# validated by ElementTree when this runs.
_REPLY_BODY = re.compile(
    rb"^(?:<\?xml[^>]*\?>)?\s*"
    rb"<(?:[\w.-]+:)?rpc-reply(?:\s[^>]*)?"
    rb"(?:/>|>(?P<body>.*)</(?:[\w.-]+:)?rpc-reply\s*>)\s*$",
    re.DOTALL
)

# The junos: prefix is declared on <rpc-reply>, so a body cut out of it
# needs the declaration again.
_FRAGMENT_OPEN = b'<fragment xmlns:junos="http://xml.juniper.net/junos/*/junos">'
_FRAGMENT_CLOSE = b'</fragment>'


def local_name(tag: str) -> str:
    """Return a tag name without its {namespace} part"""
    return tag.rsplit('}', 1)[-1]


def find_text(element: ET.Element, name: str, default: str = "") -> str:
    """
    Text of the first direct child with the given local name.

    Junos pads values with line breaks and blanks, so the text is stripped.
    """
    for child in element:
        if local_name(child.tag) == name:
            return (child.text or "").strip()
    return default


def unwrap_reply(data: bytes, host: Optional[str] = None) -> bytes:
    """
    Extract the body of an <rpc-reply> document.

    Args:
        data: Raw reply as returned by the device
        host: Device host, used for error context

    Returns:
        Inner bytes of the reply, unchanged

    Raises:
        EnvelopeDecodeError: If the reply is not a well-formed rpc-reply
    """
    data = data.strip()

    try:
        root = ET.fromstring(data)
    except ET.ParseError as e:
        raise EnvelopeDecodeError(f"could not decode rpc-reply: {e}", host=host) from e

    if local_name(root.tag) != RPC_REPLY:
        raise EnvelopeDecodeError(
            f"expected element <{RPC_REPLY}> but have <{local_name(root.tag)}>",
            host=host
        )

    match = _REPLY_BODY.match(data)
    if match is None:
        raise EnvelopeDecodeError("could not locate rpc-reply body", host=host)

    return match.group('body') or b""


def strip_line_breaks(data: bytes) -> bytes:
    """Remove every CR and LF byte"""
    return data.replace(b"\n", b"").replace(b"\r", b"")


def decode_xml(data: bytes, target, host: Optional[str] = None) -> None:
    """
    Decode a reply body into a target.

    The body may hold several sibling elements (the CLI appends a <cli>
    block after the payload); the first one is the payload.

    Args:
        data: Reply body
        target: Object exposing decode_xml(element)
        host: Device host, used for error context

    Raises:
        DecodeError: If the body is not XML or the target rejects it
    """
    try:
        root = ET.fromstring(_FRAGMENT_OPEN + data + _FRAGMENT_CLOSE)
    except ET.ParseError as e:
        raise DecodeError(f"could not decode reply: {e}", host=host) from e

    element = next(iter(root), None)
    if element is None:
        raise DecodeError("reply contains no element", host=host)

    try:
        target.decode_xml(element)
    except ValueError as e:
        raise DecodeError(f"could not decode <{local_name(element.tag)}>: {e}", host=host) from e
