import json

import httpx
import pytest

from mailpit_client import MailpitClient

BASE_URL = "http://mailpit.test"


# --- Canned API responses ---

INFO = {
    "Database": "/tmp/mailpit.db",
    "DatabaseSize": 4096,
    "LatestVersion": "v1.21.0",
    "Messages": 3,
    "RuntimeStats": {
        "Memory": 1024,
        "MessagesDeleted": 1,
        "SMTPAccepted": 4,
        "SMTPAcceptedSize": 2048,
        "SMTPIgnored": 0,
        "SMTPRejected": 0,
        "Uptime": 60,
    },
    "Tags": {"invoice": 2, "signup": 1},
    "Unread": 2,
    "Version": "v1.21.0",
}

WEBUI = {
    "DuplicatesIgnored": False,
    "Label": "staging",
    "SpamAssassin": True,
    "MessageRelay": {
        "AllowedRecipients": "@example\\.com$",
        "Enabled": True,
        "ReturnPath": "bounce@example.com",
        "SMTPServer": "smtp.example.com:587",
    },
}

MESSAGE = {
    "ID": "d7a5543b",
    "MessageID": "abc@example.com",
    "From": {"Address": "alice@example.com", "Name": "Alice"},
    "To": [{"Address": "bob@example.com", "Name": "Bob"}],
    "Cc": [],
    "Bcc": [],
    "ReplyTo": [],
    "ReturnPath": "alice@example.com",
    "Subject": "Hello",
    "Date": "2025-01-01T12:00:00Z",
    "Text": "Hello world",
    "HTML": "<p>Hello world</p>",
    "Size": 512,
    "Tags": ["invoice"],
    "Attachments": [
        {
            "ContentID": "",
            "ContentType": "application/pdf",
            "FileName": "invoice.pdf",
            "PartID": "2",
            "Size": 100,
        }
    ],
    "Inline": [],
}

MESSAGES = {
    "total": 1,
    "unread": 1,
    "messages_count": 1,
    "start": 0,
    "tags": ["invoice"],
    "messages": [
        {
            "ID": "d7a5543b",
            "MessageID": "abc@example.com",
            "Read": False,
            "From": {"Address": "alice@example.com", "Name": "Alice"},
            "To": [{"Address": "bob@example.com", "Name": "Bob"}],
            "Cc": [],
            "Bcc": [],
            "ReplyTo": [],
            "Subject": "Hello",
            "Created": "2025-01-01T12:00:00Z",
            "Tags": ["invoice"],
            "Size": 512,
            "Attachments": 1,
            "Snippet": "Hello world",
        }
    ],
}

CHAOS = {
    "Authentication": {"ErrorCode": 535, "Probability": 10},
    "Sender": {"ErrorCode": 451, "Probability": 50},
}


HEADERS = {
    "Content-Type": ["text/plain; charset=utf-8"],
    "Received": ["from a.example.com", "from b.example.com"],
    "Subject": ["Hello"],
}

HTML_CHECK = {
    "Platforms": {"apple-mail": ["macOS", "iOS"], "gmail": ["desktop-webmail"]},
    "Total": {"Nodes": 12, "Partial": 1, "Supported": 10, "Tests": 14, "Unsupported": 1},
    "Warnings": [
        {
            "Category": "css",
            "Description": "Flexbox layout",
            "Keywords": "display:flex",
            "NotesByNumber": {"1": "Partial support in Outlook"},
            "Results": [
                {
                    "Family": "outlook",
                    "Name": "Outlook 2019",
                    "NoteNumber": "1",
                    "Platform": "windows",
                    "Support": "partial",
                    "Version": "2019",
                }
            ],
            "Score": {"Found": 2, "Partial": 1, "Supported": 8, "Unsupported": 1},
            "Slug": "css-display-flex",
            "Tags": ["layout"],
            "Title": "display:flex",
            "URL": "https://www.caniemail.com/features/css-display-flex/",
        }
    ],
}

LINK_CHECK = {
    "Errors": 1,
    "Links": [
        {"Status": "OK", "StatusCode": 200, "URL": "https://example.com/"},
        {"Status": "Not Found", "StatusCode": 404, "URL": "https://example.com/gone"},
    ],
}

SA_CHECK = {
    "Errors": 0,
    "IsSpam": True,
    "Rules": [
        {"Description": "Subject is all capitals", "Name": "SUBJ_ALL_CAPS", "Score": 2.5},
        {"Description": "Message has no text part", "Name": "MIME_HTML_ONLY", "Score": 3.0},
    ],
    "Score": 5.5,
}

class Recorder:
    """MockTransport handler that records requests and replays one response."""

    def __init__(self, response=None):
        self.requests: list[httpx.Request] = []
        self.response = response if response is not None else httpx.Response(200, text="ok")

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if isinstance(self.response, Exception):
            raise self.response
        # fresh copy per request, a Response is bound to the request that read it
        return httpx.Response(
            self.response.status_code,
            headers=self.response.headers,
            content=self.response.content,
        )

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self):
        return json.loads(self.last.content)


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def make_client():
    """Factory building a MailpitClient wired to a Recorder."""

    def _make(handler, **kwargs) -> MailpitClient:
        return MailpitClient(BASE_URL, transport=httpx.MockTransport(handler), **kwargs)

    return _make
