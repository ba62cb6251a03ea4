"""Typed async client for the Mailpit email-testing API."""

from .client import LATEST, MailpitClient
from .config import Settings
from .exceptions import (
    MailpitError,
    MailpitNoResponseError,
    MailpitRequestError,
    MailpitResponseError,
    MailpitUnexpectedError,
)
from .models import (
    Address,
    Attachment,
    ChaosTrigger,
    ChaosTriggers,
    Contact,
    DeleteRequest,
    HTMLCheckResponse,
    LinkCheckResponse,
    Message,
    MessagesSummary,
    MessageSummary,
    ReadStatusRequest,
    ReleaseRequest,
    SearchDeleteRequest,
    SearchRequest,
    SendAttachment,
    SendConfirmation,
    SendRequest,
    ServerConfig,
    ServerInfo,
    SetTagsRequest,
    SpamAssassinResponse,
)

__all__ = [
    "LATEST",
    "MailpitClient",
    "Settings",
    "MailpitError",
    "MailpitNoResponseError",
    "MailpitRequestError",
    "MailpitResponseError",
    "MailpitUnexpectedError",
    "Address",
    "Attachment",
    "ChaosTrigger",
    "ChaosTriggers",
    "Contact",
    "DeleteRequest",
    "HTMLCheckResponse",
    "LinkCheckResponse",
    "Message",
    "MessagesSummary",
    "MessageSummary",
    "ReadStatusRequest",
    "ReleaseRequest",
    "SearchDeleteRequest",
    "SearchRequest",
    "SendAttachment",
    "SendConfirmation",
    "SendRequest",
    "ServerConfig",
    "ServerInfo",
    "SetTagsRequest",
    "SpamAssassinResponse",
]
