"""
API Client Facade.

Async client mirroring the backend HTTP surface. Every request carries the
caller identity in the x-user-id header and X-Frontend-ID: api for log
routing. Successful responses are unwrapped to the envelope's `data`
(camelCase keys, as sent by the server); failures raise APIClientError.

Usage:
    async with NotelensClient(user_id="u-1") as client:
        note = await client.notes.create(title="Groceries", content="<p>milk</p>")
        summary = await client.ai.summarize_note(note["content"])
"""

import mimetypes
from pathlib import Path
from typing import Any

import httpx

from notelens.backend.core.config import get_server_base_url
from notelens.backend.core.logging import get_logger, log_with_source

logger = get_logger(__name__)

USER_ID_HEADER = "x-user-id"


class APIClientError(Exception):
    """Raised for any non-2xx response."""

    def __init__(self, message: str, status_code: int) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(f"{status_code}: {message}")


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text or response.reason_phrase

    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict) and error.get("message"):
            return error["message"]
        if isinstance(payload.get("detail"), str):
            return payload["detail"]
    return response.reason_phrase


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


class NotelensClient:
    """
    HTTP client for the notelens backend.

    Args:
        base_url: Server URL. If None, read from config/settings/application.yaml.
        user_id: Value sent as x-user-id. May be None until a user is registered.
        timeout: Request timeout in seconds. If None, read from config.
        transport: Optional httpx transport (ASGITransport in tests).
    """

    def __init__(
        self,
        base_url: str | None = None,
        user_id: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if base_url is None or timeout is None:
            config_base_url, config_timeout = get_server_base_url()
            base_url = base_url or config_base_url
            timeout = timeout if timeout is not None else config_timeout

        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.user_id = user_id
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

        self.notes = NotesAPI(self)
        self.folders = FoldersAPI(self)
        self.users = UsersAPI(self)
        self.ai = AIAPI(self)

    async def __aenter__(self) -> "NotelensClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers={"X-Frontend-ID": "api"},
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def request(self, method: str, path: str, **kwargs: Any) -> Any:
        """
        Send a request and return the envelope's `data`.

        Returns:
            Decoded `data` field, or None for empty (204) responses

        Raises:
            APIClientError: On a non-2xx response
            httpx.HTTPError: On transport failure
        """
        client = await self._get_client()

        headers = kwargs.pop("headers", {})
        if self.user_id is not None:
            headers[USER_ID_HEADER] = self.user_id

        log_with_source(logger, "api", "debug", "API request", method=method, path=path)

        try:
            response = await client.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            log_with_source(
                logger, "api", "error", "API request failed",
                method=method, path=path, error=str(e),
            )
            raise

        log_with_source(
            logger, "api", "debug", "API response",
            method=method, path=path, status_code=response.status_code,
        )

        if not response.is_success:
            raise APIClientError(_error_message(response), response.status_code)

        if response.status_code == 204 or not response.content:
            return None
        return response.json().get("data")


class _Namespace:
    def __init__(self, client: NotelensClient) -> None:
        self._client = client


class NotesAPI(_Namespace):
    async def get_all(self) -> list[dict[str, Any]]:
        return await self._client.request("GET", "/api/notes")

    async def get_by_id(self, note_id: str) -> dict[str, Any]:
        return await self._client.request("GET", f"/api/notes/{note_id}")

    async def create(
        self,
        title: str = "",
        content: str = "",
        folder_id: str | None = None,
    ) -> dict[str, Any]:
        body = {"title": title, "content": content, "folderId": folder_id}
        return await self._client.request("POST", "/api/notes", json=body)

    async def update(self, note_id: str, **changes: Any) -> dict[str, Any]:
        """Send only the given fields (title, content, folder_id)."""
        body = {_camel(key): value for key, value in changes.items()}
        return await self._client.request("PUT", f"/api/notes/{note_id}", json=body)

    async def delete(self, note_id: str) -> None:
        await self._client.request("DELETE", f"/api/notes/{note_id}")


class FoldersAPI(_Namespace):
    async def get_all(self) -> list[dict[str, Any]]:
        return await self._client.request("GET", "/api/folders")

    async def get_by_id(self, folder_id: str) -> dict[str, Any]:
        return await self._client.request("GET", f"/api/folders/{folder_id}")

    async def get_notes(self, folder_id: str) -> list[dict[str, Any]]:
        return await self._client.request("GET", f"/api/folders/{folder_id}/notes")

    async def create(self, name: str) -> dict[str, Any]:
        return await self._client.request("POST", "/api/folders", json={"name": name})

    async def update(self, folder_id: str, name: str) -> dict[str, Any]:
        return await self._client.request("PUT", f"/api/folders/{folder_id}", json={"name": name})

    async def delete(self, folder_id: str) -> None:
        await self._client.request("DELETE", f"/api/folders/{folder_id}")


class UsersAPI(_Namespace):
    async def register(self, username: str, password: str | None = None) -> dict[str, Any]:
        body = {"username": username, "password": password}
        return await self._client.request("POST", "/api/users", json=body)

    async def me(self) -> dict[str, Any]:
        return await self._client.request("GET", "/api/users/me")


class AIAPI(_Namespace):
    async def _upload(
        self,
        path: str,
        field: str,
        file_path: Path | str,
        content_type: str | None,
    ) -> dict[str, Any]:
        file_path = Path(file_path)
        media_type = content_type or mimetypes.guess_type(file_path.name)[0] or "application/octet-stream"
        files = {field: (file_path.name, file_path.read_bytes(), media_type)}
        return await self._client.request("POST", path, files=files)

    async def analyze_image(self, file_path: Path | str, content_type: str | None = None) -> dict[str, Any]:
        return await self._upload("/api/ai/analyze-image", "image", file_path, content_type)

    async def analyze_pdf(self, file_path: Path | str, content_type: str | None = None) -> dict[str, Any]:
        return await self._upload("/api/ai/analyze-pdf", "pdf", file_path, content_type)

    async def analyze_audio(self, file_path: Path | str, content_type: str | None = None) -> dict[str, Any]:
        return await self._upload("/api/ai/analyze-audio", "audio", file_path, content_type)

    async def analyze_youtube(self, url: str) -> dict[str, Any]:
        return await self._client.request("POST", "/api/ai/analyze-youtube", json={"url": url})

    async def summarize_note(self, content: str) -> dict[str, Any]:
        return await self._client.request("POST", "/api/ai/summarize-note", json={"content": content})
