"""
Forward message construction.

Builds a forward of an existing RFC 822 message the way mail clients do:
a "Fwd:" subject, a short header block quoting the original, and the
original message attached whole so attachments and HTML survive.
"""

import base64
from email import policy
from email.headerregistry import HeaderRegistry, UnstructuredHeader
from email.message import EmailMessage
from email.parser import BytesParser
from typing import Optional


FORWARD_PREFIX = "Fwd:"
FORWARD_SEPARATOR = "---------- Forwarded message ---------"
QUOTED_HEADERS = ("From", "Date", "Subject", "To")

# To is written exactly as given; Gmail parses the recipient list on send
_FORWARD_HEADERS = HeaderRegistry()
_FORWARD_HEADERS.map_to_type("to", UnstructuredHeader)
FORWARD_POLICY = policy.default.clone(header_factory=_FORWARD_HEADERS)


def parse_message(raw: bytes) -> EmailMessage:
    """Parse raw RFC 822 bytes into an EmailMessage."""
    return BytesParser(policy=policy.default).parsebytes(raw)


def forward_subject(subject: Optional[str]) -> str:
    """Prefix a subject with ``Fwd:`` unless it is already a forward."""
    subject = (subject or "").strip()
    if subject.lower().startswith(FORWARD_PREFIX.lower()):
        return subject
    return f"{FORWARD_PREFIX} {subject}".rstrip()


def _plain_text_body(message: EmailMessage) -> Optional[str]:
    part = message.get_body(preferencelist=("plain",))
    if part is None:
        return None
    try:
        return part.get_content()
    except (LookupError, UnicodeDecodeError):
        # Unknown or lying charset; the attached original still carries it
        return None


def build_forward_message(
    original: bytes,
    recipients: str,
    sender: Optional[str] = None,
) -> EmailMessage:
    """
    Build a forward of ``original`` addressed to ``recipients``.

    Args:
        original: The original message as raw RFC 822 bytes.
        recipients: Comma-separated recipient list, used verbatim as the
            ``To`` header without address parsing.
        sender: Optional ``From`` address. Gmail uses the authenticated
            mailbox when omitted.

    Returns:
        The forward as an EmailMessage.
    """
    original_message = parse_message(original)

    forward = EmailMessage(policy=FORWARD_POLICY)
    forward["To"] = recipients
    if sender:
        forward["From"] = sender
    forward["Subject"] = forward_subject(original_message.get("Subject"))

    lines = [FORWARD_SEPARATOR]
    for header in QUOTED_HEADERS:
        value = original_message.get(header)
        if value:
            lines.append(f"{header}: {value}")
    lines.append("")

    body = _plain_text_body(original_message)
    if body:
        lines.append(body)

    forward.set_content("\n".join(lines))
    forward.add_attachment(original_message, filename="forwarded-message.eml")
    return forward


def encode_raw(message: EmailMessage) -> str:
    """Encode a message as the base64url ``raw`` field Gmail expects."""
    return base64.urlsafe_b64encode(message.as_bytes()).decode("ascii")
