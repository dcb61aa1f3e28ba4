"""Async HTTP client for the Todoist REST API."""

from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, List, Mapping, Optional

import httpx

from .config import Settings
from .errors import RequestError

logger = logging.getLogger(__name__)

Record = Dict[str, Any]


class TodoistClient:
    """Fetch projects and tasks and create tasks on behalf of one user."""

    def __init__(
        self,
        settings: Settings,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._settings = settings
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "TodoistClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def _base_url(self) -> str:
        """Return the API base URL without a trailing slash."""

        return str(self._settings.todoist_base_url).rstrip("/")

    @property
    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._settings.todoist_api_token.get_secret_value()}",
            "Accept": "application/json",
        }

    def _get_http_client(self) -> httpx.AsyncClient:
        if self._client is None:
            timeout = httpx.Timeout(self._settings.request_timeout, connect=10.0)
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                headers=self._headers,
                timeout=timeout,
                transport=self._transport,
            )
        return self._client

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        json: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Any:
        client = self._get_http_client()
        logger.debug("%s %s", method, path)
        try:
            response = await client.request(
                method, path, params=params, json=json, headers=headers
            )
        except httpx.HTTPError as exc:
            raise RequestError(None, str(exc) or exc.__class__.__name__) from exc

        if response.status_code >= 400:
            raise RequestError(response.status_code, self._extract_error_detail(response))

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise RequestError(response.status_code, f"Invalid JSON body: {exc}") from exc

    @staticmethod
    def _extract_error_detail(response: httpx.Response) -> Any:
        try:
            payload = response.json()
        except ValueError:
            return response.text or response.reason_phrase
        if isinstance(payload, Mapping):
            return payload.get("error") or payload.get("message") or payload
        return payload

    async def _list(self, path: str) -> List[Record]:
        """Return every record of a collection, following cursors when paged."""

        records: List[Record] = []
        cursor: Optional[str] = None
        while True:
            params = {"cursor": cursor} if cursor else None
            payload = await self._request("GET", path, params=params)
            if isinstance(payload, list):
                records.extend(payload)
                break
            if not isinstance(payload, Mapping):
                raise RequestError(None, f"Unexpected response for {path}: {payload!r}")

            records.extend(payload.get("results", []))
            cursor = payload.get("next_cursor")
            if not cursor:
                break
        return records

    async def list_projects(self) -> List[Record]:
        projects = await self._list("/projects")
        logger.info("Fetched %d project(s)", len(projects))
        return projects

    async def list_tasks(self) -> List[Record]:
        tasks = await self._list("/tasks")
        logger.info("Fetched %d task(s)", len(tasks))
        return tasks

    async def create_task(self, content: str, project_id: Optional[str]) -> Record:
        """Create an open, unprioritized, undated task and return its record."""

        body: dict[str, Any] = {"content": content}
        if project_id is not None:
            body["project_id"] = project_id

        record = await self._request(
            "POST",
            "/tasks",
            json=body,
            headers={"X-Request-Id": str(uuid.uuid4())},
        )
        if not isinstance(record, Mapping):
            raise RequestError(None, f"Unexpected response for task creation: {record!r}")
        return dict(record)


__all__ = ["Record", "TodoistClient"]
