from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, AsyncIterator, Iterable, Mapping, Protocol, Sequence

import httpx

from .labels import CHECKED_LABEL, LABEL_TAXONOMY, WAITING_LABEL, rank_labels_from, status_from_labels
from .models import Ticket

logger = logging.getLogger(__name__)

_PAGE_SIZE = 100


class TicketStoreError(RuntimeError):
    """Raised when the issue tracker rejects or fails a request."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code

    def __str__(self) -> str:
        prefix = f"[{self.status_code}] " if self.status_code is not None else ""
        return f"{prefix}{super().__str__()}"


class TicketStore(Protocol):
    async def list_awaiting_tickets(self) -> Sequence[Ticket]:
        ...

    async def create_ticket(self, ticket_date: date, body: str) -> Ticket:
        ...

    async def mark_checked(self, ticket_id: int, labels: Iterable[str]) -> None:
        ...

    async def ensure_label_taxonomy(self) -> None:
        ...


def _extract_error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text or "Unknown issue tracker error"

    if isinstance(data, Mapping) and isinstance(data.get("message"), str):
        return data["message"]
    return "Issue tracker request failed"


def ticket_title(ticket_date: date) -> str:
    return f"Lotto purchase {ticket_date.isoformat()}"


class GitHubTicketStore:
    """Ticket store backed by the issues of a GitHub repository."""

    def __init__(
        self,
        repository: str,
        *,
        token: str = "",
        api_url: str = "https://api.github.com",
        client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        if repository.count("/") != 1:
            raise ValueError(f"Repository must look like 'owner/name', got {repository!r}")
        self._repository = repository
        self._token = token
        self._api_url = api_url.rstrip("/")
        self._timeout = timeout
        self._client = client

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            headers = {
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            }
            if self._token:
                headers["Authorization"] = f"Bearer {self._token}"
            self._client = httpx.AsyncClient(base_url=self._api_url, headers=headers, timeout=self._timeout)
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        client = self._ensure_client()
        try:
            response = await client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            raise TicketStoreError(f"Issue tracker request failed: {exc}") from exc

        if response.status_code >= 400:
            raise TicketStoreError(_extract_error_message(response), status_code=response.status_code)
        return response

    def _repo_path(self, suffix: str) -> str:
        return f"/repos/{self._repository}/{suffix}"

    async def _paginate(self, path: str, params: dict[str, Any]) -> AsyncIterator[Mapping[str, Any]]:
        url: str | None = path
        query: dict[str, Any] | None = {**params, "per_page": _PAGE_SIZE}
        while url is not None:
            response = await self._request("GET", url, params=query)
            for item in response.json():
                yield item
            # the next link already carries the query string
            url = response.links.get("next", {}).get("url")
            query = None

    async def list_awaiting_tickets(self) -> list[Ticket]:
        tickets: list[Ticket] = []
        params = {"state": "open", "labels": WAITING_LABEL.name}
        async for item in self._paginate(self._repo_path("issues"), params):
            if "pull_request" in item:
                continue
            tickets.append(self._issue_to_ticket(item))
        logger.debug("Found %d waiting tickets in %s", len(tickets), self._repository)
        return tickets

    async def create_ticket(self, ticket_date: date, body: str) -> Ticket:
        response = await self._request(
            "POST",
            self._repo_path("issues"),
            json={
                "title": ticket_title(ticket_date),
                "body": body,
                "labels": [WAITING_LABEL.name],
            },
        )
        ticket = self._issue_to_ticket(response.json())
        logger.info("Created ticket #%d", ticket.id)
        return ticket

    async def mark_checked(self, ticket_id: int, labels: Iterable[str]) -> None:
        names = [CHECKED_LABEL.name, *sorted(set(labels))]
        await self._request(
            "PATCH",
            self._repo_path(f"issues/{ticket_id}"),
            json={"labels": names, "state": "closed", "state_reason": "completed"},
        )
        logger.info("Marked ticket #%d as checked with labels %s", ticket_id, names[1:])

    async def ensure_label_taxonomy(self) -> None:
        # label names are case-insensitive on GitHub
        existing = {str(item["name"]).casefold() async for item in self._paginate(self._repo_path("labels"), {})}
        for label in LABEL_TAXONOMY:
            if label.name.casefold() in existing:
                continue
            await self._request(
                "POST",
                self._repo_path("labels"),
                json={"name": label.name, "color": label.color, "description": label.description},
            )
            logger.info("Created label %r", label.name)

    @staticmethod
    def _issue_to_ticket(item: Mapping[str, Any]) -> Ticket:
        label_names = [label["name"] if isinstance(label, Mapping) else str(label) for label in item.get("labels", [])]
        created_at = item.get("created_at")
        return Ticket(
            id=int(item["number"]),
            title=str(item.get("title", "")),
            body=item.get("body"),
            status=status_from_labels(label_names),
            rank_labels=rank_labels_from(label_names),
            created_at=datetime.fromisoformat(created_at.replace("Z", "+00:00")) if created_at else None,
        )
