from __future__ import annotations

import base64
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_pascal


class MailpitModel(BaseModel):
    """Base for shapes keyed the way Mailpit writes JSON (``PascalCase``).

    Acronym keys (``ID``, ``HTML``, ``SMTPServer`` ...) are declared with an
    explicit alias. Unknown keys are kept so a decoded body dumps back to the
    same document.
    """

    model_config = ConfigDict(
        alias_generator=to_pascal,
        populate_by_name=True,
        frozen=True,
        extra="allow",
    )


class PlainModel(BaseModel):
    """Base for the few shapes Mailpit keys in lower case."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="allow")


def _split_addresses(v):
    # Accept "a@x, b@y" as well as a list.
    if isinstance(v, str):
        return [a.strip() for a in v.split(",") if a.strip()]
    return v


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------


class RuntimeStats(MailpitModel):
    memory: int = 0
    messages_deleted: int = 0
    smtp_accepted: int = Field(0, alias="SMTPAccepted")
    smtp_accepted_size: int = Field(0, alias="SMTPAcceptedSize")
    smtp_ignored: int = Field(0, alias="SMTPIgnored")
    smtp_rejected: int = Field(0, alias="SMTPRejected")
    uptime: int = 0


class ServerInfo(MailpitModel):
    """Runtime, version and statistics snapshot from ``/api/v1/info``."""

    database: str = ""
    database_size: int = 0
    latest_version: str = ""
    messages: int = 0
    runtime_stats: Optional[RuntimeStats] = None
    tags: Dict[str, int] = Field(default_factory=dict)  # tag name -> message count
    unread: int = 0
    version: str = ""


class MessageRelay(MailpitModel):
    allowed_recipients: str = ""
    enabled: bool = False
    return_path: str = ""
    smtp_server: str = Field("", alias="SMTPServer")


class ServerConfig(MailpitModel):
    """Web UI configuration from ``/api/v1/webui``."""

    duplicates_ignored: bool = False
    label: str = ""
    spam_assassin: bool = False
    message_relay: Optional[MessageRelay] = None


# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------


class Address(MailpitModel):
    address: str = ""
    name: str = ""


class Attachment(MailpitModel):
    content_id: str = Field("", alias="ContentID")
    content_type: str = ""
    file_name: str = ""
    part_id: str = Field("", alias="PartID")
    size: int = 0


class Message(MailpitModel):
    """One stored email in full detail. ``id`` is unique on the server."""

    id: str = Field(alias="ID")
    message_id: str = Field("", alias="MessageID")
    from_: Optional[Address] = Field(None, alias="From")
    to: List[Address] = Field(default_factory=list)
    cc: List[Address] = Field(default_factory=list)
    bcc: List[Address] = Field(default_factory=list)
    reply_to: List[Address] = Field(default_factory=list)
    return_path: str = ""
    subject: str = ""
    date: str = ""
    text: str = ""
    html: str = Field("", alias="HTML")
    size: int = 0
    tags: List[str] = Field(default_factory=list)
    attachments: List[Attachment] = Field(default_factory=list)
    inline: List[Attachment] = Field(default_factory=list)


class MessageSummary(MailpitModel):
    """Lightweight listing entry; ``attachments`` is a count here."""

    id: str = Field(alias="ID")
    message_id: str = Field("", alias="MessageID")
    read: bool = False
    from_: Optional[Address] = Field(None, alias="From")
    to: List[Address] = Field(default_factory=list)
    cc: List[Address] = Field(default_factory=list)
    bcc: List[Address] = Field(default_factory=list)
    reply_to: List[Address] = Field(default_factory=list)
    subject: str = ""
    created: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    size: int = 0
    attachments: int = 0
    snippet: str = ""


class MessagesSummary(PlainModel):
    """A page of message summaries (``/api/v1/messages`` and ``/api/v1/search``)."""

    total: int = 0
    unread: int = 0
    messages_count: int = 0
    start: int = 0
    tags: List[str] = Field(default_factory=list)
    messages: List[MessageSummary] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Sending / releasing
# ---------------------------------------------------------------------------


class Contact(MailpitModel):
    email: str
    name: str = ""


class SendAttachment(MailpitModel):
    content: str  # base64
    filename: str

    @classmethod
    def from_bytes(cls, filename: str, data: bytes) -> "SendAttachment":
        return cls(filename=filename, content=base64.b64encode(data).decode("ascii"))


class SendRequest(MailpitModel):
    """Outbound message for ``POST /api/v1/send``."""

    from_: Contact = Field(alias="From")
    to: List[Contact] = Field(default_factory=list)
    cc: List[Contact] = Field(default_factory=list)
    bcc: List[str] = Field(default_factory=list)
    reply_to: List[Contact] = Field(default_factory=list)
    subject: str = ""
    text: str = ""
    html: str = Field("", alias="HTML")
    tags: List[str] = Field(default_factory=list)
    headers: Dict[str, str] = Field(default_factory=dict)
    attachments: List[SendAttachment] = Field(default_factory=list)

    @field_validator("bcc", mode="before")
    def _parse_bcc(cls, v):  # noqa: N805
        return _split_addresses(v)


class SendConfirmation(MailpitModel):
    id: str = Field(alias="ID")


class ReleaseRequest(MailpitModel):
    to: List[str]

    @field_validator("to", mode="before")
    def _parse_to(cls, v):  # noqa: N805
        return _split_addresses(v)


# ---------------------------------------------------------------------------
# Checks
# ---------------------------------------------------------------------------


class HTMLCheckTotal(MailpitModel):
    nodes: int = 0
    partial: int = 0
    supported: int = 0
    tests: int = 0
    unsupported: int = 0


class HTMLCheckResult(MailpitModel):
    family: str = ""
    name: str = ""
    note_number: str = ""
    platform: str = ""
    support: str = ""  # "yes" | "no" | "partial"
    version: str = ""


class HTMLCheckScore(MailpitModel):
    found: int = 0
    partial: int = 0
    supported: int = 0
    unsupported: int = 0


class HTMLCheckWarning(MailpitModel):
    category: str = ""  # "css" | "html"
    description: str = ""
    keywords: str = ""
    notes_by_number: Dict[str, str] = Field(default_factory=dict)
    results: List[HTMLCheckResult] = Field(default_factory=list)
    score: Optional[HTMLCheckScore] = None
    slug: str = ""
    tags: List[str] = Field(default_factory=list)
    title: str = ""
    url: str = Field("", alias="URL")


class HTMLCheckResponse(MailpitModel):
    """Email-client compatibility report for a message's HTML part."""

    platforms: Dict[str, List[str]] = Field(default_factory=dict)
    total: Optional[HTMLCheckTotal] = None
    warnings: List[HTMLCheckWarning] = Field(default_factory=list)


class Link(MailpitModel):
    status: str = ""
    status_code: int = 0
    url: str = Field("", alias="URL")


class LinkCheckResponse(MailpitModel):
    errors: int = 0
    links: List[Link] = Field(default_factory=list)


class SpamAssassinRule(MailpitModel):
    description: str = ""
    name: str = ""
    score: float = 0


class SpamAssassinResponse(MailpitModel):
    errors: int = 0
    is_spam: bool = False
    rules: List[SpamAssassinRule] = Field(default_factory=list)
    score: float = 0


# ---------------------------------------------------------------------------
# Bulk message actions, search, tags
# ---------------------------------------------------------------------------


class ReadStatusRequest(MailpitModel):
    ids: List[str] = Field(default_factory=list, alias="IDs")
    read: bool = True


class DeleteRequest(MailpitModel):
    ids: List[str] = Field(default_factory=list, alias="IDs")


class SearchRequest(PlainModel):
    """``query`` uses Mailpit's search-filter syntax and is passed through as-is."""

    query: str
    start: int = 0
    limit: int = 50
    tz: Optional[str] = None


class SearchDeleteRequest(PlainModel):
    query: str
    tz: Optional[str] = None


class SetTagsRequest(MailpitModel):
    ids: List[str] = Field(default_factory=list, alias="IDs")
    tags: List[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Chaos
# ---------------------------------------------------------------------------


class ChaosTrigger(MailpitModel):
    error_code: int
    probability: int  # percent


class ChaosTriggers(MailpitModel):
    """SMTP fault-injection rules. A missing trigger is disabled."""

    authentication: Optional[ChaosTrigger] = None
    recipient: Optional[ChaosTrigger] = None
    sender: Optional[ChaosTrigger] = None
