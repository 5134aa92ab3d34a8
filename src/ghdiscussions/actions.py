"""Map each :class:`Action` to the discussions operation that performs it."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from . import discussions
from .errors import PreconditionError
from .github_client import GitHubClient
from .logging import get_logger
from .models import Action, Options

Handler = Callable[[GitHubClient, Options], Any]

NO_ACTION_MESSAGE = (
    "No action specified. Use --list, --list-categories, --get, --create, "
    "--list-comments, or --comment."
)


def _list(client: GitHubClient, opts: Options) -> Any:
    return discussions.list_discussions(
        client,
        opts.owner or "",
        opts.repo or "",
        limit=opts.limit,
        category_id=opts.category_id,
        answered=opts.answered,
        states=opts.states,
    )


def _list_categories(client: GitHubClient, opts: Options) -> Any:
    return discussions.list_categories(client, opts.owner or "", opts.repo or "")


def _get(client: GitHubClient, opts: Options) -> Any:
    return discussions.get_discussion(client, opts.owner or "", opts.repo or "", opts.number)


def _create(client: GitHubClient, opts: Options) -> Any:
    return discussions.create_discussion(
        client,
        opts.owner or "",
        opts.repo or "",
        title=opts.title,
        body=opts.body,
        category_id=opts.category_id,
    )


def _comment(client: GitHubClient, opts: Options) -> Any:
    return discussions.add_comment(
        client,
        opts.owner or "",
        opts.repo or "",
        opts.number,
        body=opts.body,
        reply_to_id=opts.reply_to_id,
    )


def _list_comments(client: GitHubClient, opts: Options) -> Any:
    return discussions.list_comments(
        client, opts.owner or "", opts.repo or "", opts.number, limit=opts.limit
    )


HANDLERS: Mapping[Action, Handler] = {
    Action.LIST: _list,
    Action.LIST_CATEGORIES: _list_categories,
    Action.GET: _get,
    Action.CREATE: _create,
    Action.COMMENT: _comment,
    Action.LIST_COMMENTS: _list_comments,
}


def dispatch(client: GitHubClient, opts: Options) -> Any:
    """Run the handler for ``opts.action`` and return its result unchanged."""
    if opts.action is None:
        raise PreconditionError(NO_ACTION_MESSAGE)
    handler = HANDLERS[opts.action]
    with get_logger().timed_operation(
        opts.action.label, owner=opts.owner, repo=opts.repo, number=opts.number
    ):
        return handler(client, opts)


__all__ = ["HANDLERS", "Handler", "NO_ACTION_MESSAGE", "dispatch"]
