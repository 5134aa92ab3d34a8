from __future__ import annotations

import pytest

from ghdiscussions import actions
from ghdiscussions.errors import PreconditionError
from ghdiscussions.models import Action, Options


def test_every_action_has_a_handler():
    assert set(actions.HANDLERS) == set(Action)


def test_dispatch_without_action_fails(client, session):
    with pytest.raises(PreconditionError, match="No action specified"):
        actions.dispatch(client, Options(owner="octo", repo="hello"))
    assert session.request_log == []


def test_dispatch_routes_to_handler_and_returns_result(monkeypatch, client):
    seen = []

    def fake_get(c, owner, repo, number):
        seen.append((c, owner, repo, number))
        return {"number": number}

    monkeypatch.setattr(actions.discussions, "get_discussion", fake_get)

    result = actions.dispatch(client, Options(action=Action.GET, owner="octo", repo="hello", number=8))

    assert result == {"number": 8}
    assert seen == [(client, "octo", "hello", 8)]


def test_dispatch_list_forwards_filters(client, session):
    session.queue_data({"repository": {"discussions": {"nodes": []}}})
    opts = Options(
        action=Action.LIST,
        owner="octo",
        repo="hello",
        limit=3,
        states=("CLOSED",),
        answered=True,
    )

    assert actions.dispatch(client, opts) == []
    assert session.variables[0] == {
        "owner": "octo",
        "name": "hello",
        "first": 3,
        "answered": True,
        "states": ["CLOSED"],
    }


def test_dispatch_propagates_errors(client):
    opts = Options(action=Action.CREATE, owner="octo", repo="hello", title="t", body="b")
    with pytest.raises(PreconditionError, match="--category-id"):
        actions.dispatch(client, opts)


def test_action_labels():
    assert Action.LIST_CATEGORIES.label == "listCategories"
    assert Action.LIST_COMMENTS.label == "listComments"
    assert Action.GET.label == "get"
