from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel

from . import config
from .exceptions import (
    MailpitError,
    MailpitNoResponseError,
    MailpitRequestError,
    MailpitResponseError,
    MailpitUnexpectedError,
)
from .models import (
    ChaosTriggers,
    DeleteRequest,
    HTMLCheckResponse,
    LinkCheckResponse,
    Message,
    MessagesSummary,
    ReadStatusRequest,
    ReleaseRequest,
    SearchDeleteRequest,
    SearchRequest,
    SendConfirmation,
    SendRequest,
    ServerConfig,
    ServerInfo,
    SetTagsRequest,
    SpamAssassinResponse,
)

log = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

LATEST = "latest"


def _status_ok(status_code: int) -> bool:
    """Mailpit answers 200 on success; any other code is a failure."""
    return status_code == 200


def _segment(value: str) -> str:
    """Percent-encode one path segment, including ``/``."""
    return quote(str(value), safe="")


def _body(model: Optional[BaseModel]) -> Optional[Dict[str, Any]]:
    if model is None:
        return None
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)


def _error_detail(resp: httpx.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return resp.text


class MailpitClient:
    """Async client for the Mailpit REST API.

    Owns one ``httpx.AsyncClient`` bound to *base_url*. Each public coroutine
    maps to exactly one endpoint and either returns the decoded body or raises
    a :class:`~mailpit_client.exceptions.MailpitError`. Nothing is retried.

    Basic auth is attached only when both *username* and *password* are given.
    """

    def __init__(
        self,
        base_url: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        auth = None
        if username and password:
            auth = httpx.BasicAuth(username, password)
        elif username or password:
            log.warning("Only one of username/password supplied; sending requests without auth")

        kwargs: Dict[str, Any] = {"base_url": str(base_url), "auth": auth, "transport": transport}
        if timeout is not None:
            kwargs["timeout"] = httpx.Timeout(timeout)
        self._client = httpx.AsyncClient(**kwargs)

    @classmethod
    def from_settings(cls, settings: Optional[config.Settings] = None, **kwargs: Any) -> "MailpitClient":
        """Build a client from :class:`~mailpit_client.config.Settings`.

        Without *settings* the environment (and ``.env``) is read at call time.
        """
        if settings is None:
            settings = config.Settings()
        return cls(
            str(settings.base_url),
            settings.username,
            settings.password,
            timeout=settings.request_timeout,
            **kwargs,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "MailpitClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    # ---------------------------------------------------------------
    # Internal helpers
    # ---------------------------------------------------------------

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json_body: Optional[Dict[str, Any]] = None,
        decode: Callable[[httpx.Response], Any] = lambda r: r.text,
        ok: Callable[[int], bool] = _status_ok,
    ) -> Any:
        """Issue one request and normalize every failure into a MailpitError."""

        log.debug("%s %s", method, path)
        try:
            resp = await self._client.request(method, path, params=params, json=json_body)
            if not ok(resp.status_code):
                detail = _error_detail(resp)
                raise MailpitResponseError(
                    f"Mailpit API Error: {resp.status_code} {resp.reason_phrase}: {json.dumps(detail)}",
                    status_code=resp.status_code,
                    reason=resp.reason_phrase,
                    body=detail,
                )
            return decode(resp)
        except MailpitError as exc:
            log.debug("%s %s failed: %s", method, path, exc)
            raise
        except httpx.PoolTimeout as exc:
            # no connection was free, the request never left
            log.warning("%s %s: request not sent (%s)", method, path, exc)
            raise MailpitRequestError(f"Mailpit API Error: {exc}") from exc
        except (httpx.TimeoutException, httpx.NetworkError, httpx.RemoteProtocolError) as exc:
            log.warning("%s %s: no response (%s)", method, path, exc)
            raise MailpitNoResponseError("Mailpit API Error: No response received from server.") from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            log.warning("%s %s: request failed (%s)", method, path, exc)
            raise MailpitRequestError(f"Mailpit API Error: {exc}") from exc
        except Exception as exc:
            log.warning("%s %s: unexpected error (%s)", method, path, exc)
            raise MailpitUnexpectedError(f"Unexpected Error: {exc}") from exc

    async def _get_model(self, path: str, model: Type[ModelT], **kwargs: Any) -> ModelT:
        return await self._request(
            "GET", path, decode=lambda r: model.model_validate(r.json()), **kwargs
        )

    # ---------------------------------------------------------------
    # Application
    # ---------------------------------------------------------------

    async def get_info(self) -> ServerInfo:
        """Runtime statistics and version of the server."""
        return await self._get_model("/api/v1/info", ServerInfo)

    async def get_configuration(self) -> ServerConfig:
        return await self._get_model("/api/v1/webui", ServerConfig)

    # ---------------------------------------------------------------
    # Message
    # ---------------------------------------------------------------

    async def get_message_summary(self, id: str = LATEST) -> Message:
        """Full detail of one message; defaults to the most recent one."""
        return await self._get_model(f"/api/v1/message/{_segment(id)}", Message)

    async def get_message_headers(self, id: str = LATEST) -> Dict[str, List[str]]:
        return await self._request(
            "GET", f"/api/v1/message/{_segment(id)}/headers", decode=lambda r: r.json()
        )

    async def get_message_attachment(self, id: str, part_id: str) -> bytes:
        return await self._request(
            "GET",
            f"/api/v1/message/{_segment(id)}/part/{_segment(part_id)}",
            decode=lambda r: r.content,
        )

    async def get_message_source(self, id: str = LATEST) -> str:
        """Raw RFC 822 source."""
        return await self._request("GET", f"/api/v1/message/{_segment(id)}/raw")

    async def get_attachment_thumbnail(self, id: str, part_id: str) -> bytes:
        return await self._request(
            "GET",
            f"/api/v1/message/{_segment(id)}/part/{_segment(part_id)}/thumb",
            decode=lambda r: r.content,
        )

    async def release_message(self, id: str, release_request: ReleaseRequest) -> str:
        """Relay a stored message to real recipients via the configured SMTP relay."""
        return await self._request(
            "POST",
            f"/api/v1/message/{_segment(id)}/release",
            json_body=_body(release_request),
        )

    async def send_message(self, send_request: SendRequest) -> SendConfirmation:
        return await self._request(
            "POST",
            "/api/v1/send",
            json_body=_body(send_request),
            decode=lambda r: SendConfirmation.model_validate(r.json()),
        )

    # ---------------------------------------------------------------
    # Other
    # ---------------------------------------------------------------

    async def html_check(self, id: str = LATEST) -> HTMLCheckResponse:
        return await self._get_model(f"/api/v1/message/{_segment(id)}/html-check", HTMLCheckResponse)

    async def link_check(self, id: str = LATEST, follow: bool = False) -> LinkCheckResponse:
        """Check every link in the message; *follow* makes the server follow redirects."""
        return await self._get_model(
            f"/api/v1/message/{_segment(id)}/link-check",
            LinkCheckResponse,
            params={"follow": "true" if follow else "false"},
        )

    async def spam_assassin_check(self, id: str = LATEST) -> SpamAssassinResponse:
        return await self._get_model(f"/api/v1/message/{_segment(id)}/sa-check", SpamAssassinResponse)

    # ---------------------------------------------------------------
    # Messages
    # ---------------------------------------------------------------

    async def list_messages(self, start: int = 0, limit: int = 50) -> MessagesSummary:
        return await self._get_model(
            "/api/v1/messages", MessagesSummary, params={"start": start, "limit": limit}
        )

    async def set_read_status(self, read_status: ReadStatusRequest) -> str:
        return await self._request("PUT", "/api/v1/messages", json_body=_body(read_status))

    async def delete_messages(self, delete_request: Optional[DeleteRequest] = None) -> str:
        """Delete the given messages, or every message when called without a request."""
        return await self._request("DELETE", "/api/v1/messages", json_body=_body(delete_request))

    # See https://mailpit.axllent.org/docs/usage/search-filters/
    async def search_messages(self, search: SearchRequest) -> MessagesSummary:
        return await self._get_model(
            "/api/v1/search", MessagesSummary, params=_body(search)
        )

    # See https://mailpit.axllent.org/docs/usage/search-filters/
    async def delete_messages_by_search(self, search: SearchDeleteRequest) -> str:
        return await self._request("DELETE", "/api/v1/search", params=_body(search))

    # ---------------------------------------------------------------
    # Tags
    # ---------------------------------------------------------------

    async def get_tags(self) -> List[str]:
        return await self._request("GET", "/api/v1/tags", decode=lambda r: r.json())

    async def set_tags(self, request: SetTagsRequest) -> str:
        return await self._request("PUT", "/api/v1/tags", json_body=_body(request))

    async def rename_tag(self, tag: str, new_tag_name: str) -> str:
        return await self._request(
            "PUT", f"/api/v1/tags/{_segment(tag)}", json_body={"Name": new_tag_name}
        )

    async def delete_tag(self, tag: str) -> str:
        return await self._request("DELETE", f"/api/v1/tags/{_segment(tag)}")

    # ---------------------------------------------------------------
    # Testing
    # ---------------------------------------------------------------

    async def render_message_html(self, id: str = LATEST) -> str:
        return await self._request("GET", f"/view/{_segment(id)}.html")

    async def render_message_text(self, id: str = LATEST) -> str:
        return await self._request("GET", f"/view/{_segment(id)}.txt")

    async def get_chaos_triggers(self) -> ChaosTriggers:
        return await self._get_model("/api/v1/chaos", ChaosTriggers)

    async def set_chaos_triggers(self, triggers: Optional[ChaosTriggers] = None) -> ChaosTriggers:
        """Replace the chaos triggers; no argument disables all of them."""
        return await self._request(
            "PUT",
            "/api/v1/chaos",
            json_body=_body(triggers if triggers is not None else ChaosTriggers()),
            decode=lambda r: ChaosTriggers.model_validate(r.json()),
        )
