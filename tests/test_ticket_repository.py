from __future__ import annotations

import json
from datetime import date

import httpx
import pytest

from lotto_action.tickets.labels import CHECKED_LABEL, LABEL_TAXONOMY, WAITING_LABEL
from lotto_action.tickets.repository import GitHubTicketStore, TicketStoreError
from lotto_action.tickets.state import TicketStatus

API = "https://api.github.test"


def _issue(number: int, *, labels=(WAITING_LABEL.name,), body="body", **extra):
    return {
        "number": number,
        "title": f"Lotto purchase #{number}",
        "body": body,
        "labels": [{"name": name} for name in labels],
        "created_at": "2023-09-11T00:00:00Z",
        **extra,
    }


def _store(handler) -> GitHubTicketStore:
    client = httpx.AsyncClient(base_url=API, transport=httpx.MockTransport(handler))
    return GitHubTicketStore("octo/lotto", token="t0ken", api_url=API, client=client)


@pytest.mark.asyncio
async def test_list_awaiting_tickets_follows_pages_and_skips_pull_requests():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.params.get("page") == "2":
            return httpx.Response(200, json=[_issue(3)])
        return httpx.Response(
            200,
            json=[_issue(1), _issue(2, pull_request={"url": "..."})],
            headers={"Link": f'<{API}/repos/octo/lotto/issues?labels=waiting&page=2>; rel="next"'},
        )

    store = _store(handler)
    tickets = await store.list_awaiting_tickets()

    assert [ticket.id for ticket in tickets] == [1, 3]
    assert all(ticket.status == TicketStatus.AWAITING for ticket in tickets)
    assert seen[0].url.params["labels"] == WAITING_LABEL.name
    assert seen[0].url.params["state"] == "open"
    assert len(seen) == 2
    await store.close()


@pytest.mark.asyncio
async def test_create_ticket_posts_waiting_issue():
    captured: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["method"] = request.method
        captured["path"] = request.url.path
        captured["payload"] = json.loads(request.content)
        return httpx.Response(201, json=_issue(7, body=captured["payload"]["body"]))

    store = _store(handler)
    ticket = await store.create_ticket(date(2023, 9, 11), "ticket body")

    assert captured["method"] == "POST"
    assert captured["path"] == "/repos/octo/lotto/issues"
    assert captured["payload"] == {
        "title": "Lotto purchase 2023-09-11",
        "body": "ticket body",
        "labels": [WAITING_LABEL.name],
    }
    assert ticket.id == 7
    assert ticket.body == "ticket body"


@pytest.mark.asyncio
async def test_mark_checked_replaces_labels_and_closes_issue():
    captured: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "PATCH"
        assert request.url.path == "/repos/octo/lotto/issues/7"
        captured.append(json.loads(request.content))
        return httpx.Response(200, json=_issue(7))

    store = _store(handler)
    await store.mark_checked(7, {"no win", "5th prize", "no win"})

    assert captured == [
        {"labels": [CHECKED_LABEL.name, "5th prize", "no win"], "state": "closed", "state_reason": "completed"}
    ]


@pytest.mark.asyncio
async def test_ensure_label_taxonomy_creates_only_missing_labels():
    created: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "GET":
            return httpx.Response(200, json=[{"name": WAITING_LABEL.name}, {"name": "bug"}])
        created.append(json.loads(request.content)["name"])
        return httpx.Response(201, json={})

    store = _store(handler)
    await store.ensure_label_taxonomy()

    assert created == [label.name for label in LABEL_TAXONOMY if label.name != WAITING_LABEL.name]


@pytest.mark.asyncio
async def test_ensure_label_taxonomy_reads_every_label_page():
    created: list[str] = []
    pages: list[str | None] = []

    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "POST":
            created.append(json.loads(request.content)["name"])
            return httpx.Response(422, json={"message": "Validation Failed"})
        pages.append(request.url.params.get("page"))
        if request.url.params.get("page") == "2":
            return httpx.Response(200, json=[{"name": label.name} for label in LABEL_TAXONOMY])
        return httpx.Response(
            200,
            json=[{"name": f"area-{index}"} for index in range(100)],
            headers={"Link": f'<{API}/repos/octo/lotto/labels?per_page=100&page=2>; rel="next"'},
        )

    store = _store(handler)
    await store.ensure_label_taxonomy()

    assert pages == [None, "2"]
    assert created == []
    await store.close()


@pytest.mark.asyncio
async def test_ensure_label_taxonomy_matches_names_case_insensitively():
    created: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "GET":
            return httpx.Response(200, json=[{"name": label.name.upper()} for label in LABEL_TAXONOMY])
        created.append(json.loads(request.content)["name"])
        return httpx.Response(422, json={"message": "Validation Failed"})

    store = _store(handler)
    await store.ensure_label_taxonomy()

    assert created == []
    await store.close()


@pytest.mark.asyncio
async def test_error_responses_raise_store_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"message": "Not Found"})

    store = _store(handler)

    with pytest.raises(TicketStoreError) as exc:
        await store.list_awaiting_tickets()

    assert exc.value.status_code == 404
    assert str(exc.value) == "[404] Not Found"


def test_repository_name_is_validated():
    with pytest.raises(ValueError):
        GitHubTicketStore("not-a-repo")
