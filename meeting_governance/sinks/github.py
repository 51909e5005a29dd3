"""GitHub contents API client used as the decision document store."""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from typing import Protocol

import httpx

from meeting_governance.config import settings
from meeting_governance.errors import (
    DocumentConflictError,
    DocumentNotFoundError,
    DocumentStoreError,
)
from meeting_governance.projects import DocumentDestination

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredDocument:
    """Current body of a document plus its version token (blob sha)."""

    body: str
    sha: str


class DocumentStore(Protocol):
    def get(self, path: str) -> StoredDocument: ...

    def put(self, path: str, body: str, message: str, sha: str | None = None) -> None: ...


def _error_message(response: httpx.Response) -> str:
    try:
        return str(response.json().get("message", response.text))
    except ValueError:
        return response.text


class GitHubDocumentStore:
    """Reads and conditionally writes files in one branch of a repository.

    Writes pass the last-read ``sha``; GitHub rejects a write whose sha is
    stale, which surfaces here as :class:`DocumentConflictError`.
    """

    def __init__(
        self,
        destination: DocumentDestination,
        token: str | None = None,
        api_url: str | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.destination = destination
        self._client = client or httpx.Client(timeout=settings.http_timeout_seconds)
        self._base_url = (
            f"{(api_url or settings.github_api_url).rstrip('/')}"
            f"/repos/{destination.owner}/{destination.repo}/contents"
        )
        self._headers = {
            "Authorization": f"token {token if token is not None else settings.github_token}",
            "Accept": "application/vnd.github.v3+json",
        }

    def _url(self, path: str) -> str:
        return f"{self._base_url}/{path.lstrip('/')}"

    def get(self, path: str) -> StoredDocument:
        try:
            response = self._client.get(
                self._url(path),
                headers=self._headers,
                params={"ref": self.destination.branch},
            )
        except httpx.HTTPError as exc:
            raise DocumentStoreError(f"GitHub request failed: {exc}") from exc

        if response.status_code == 404:
            raise DocumentNotFoundError(path)
        if response.is_error:
            raise DocumentStoreError(
                f"GitHub GET {path} returned {response.status_code}: {_error_message(response)}"
            )

        data = response.json()
        body = base64.b64decode(data.get("content", "")).decode("utf-8")
        return StoredDocument(body=body, sha=data["sha"])

    def put(self, path: str, body: str, message: str, sha: str | None = None) -> None:
        payload: dict[str, str] = {
            "message": message,
            "content": base64.b64encode(body.encode("utf-8")).decode("ascii"),
            "branch": self.destination.branch,
        }
        if sha:
            payload["sha"] = sha

        try:
            response = self._client.put(self._url(path), headers=self._headers, json=payload)
        except httpx.HTTPError as exc:
            raise DocumentStoreError(f"GitHub request failed: {exc}") from exc

        if response.status_code == 409 or (
            response.status_code == 422 and "sha" in _error_message(response)
        ):
            raise DocumentConflictError(
                f"{path} changed since it was read: {_error_message(response)}"
            )
        if response.is_error:
            raise DocumentStoreError(
                f"GitHub PUT {path} returned {response.status_code}: {_error_message(response)}"
            )
        logger.debug("Wrote %s to %s/%s", path, self.destination.owner, self.destination.repo)
