from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Action(Enum):
    """The six things one invocation can do, keyed by their CLI flag."""

    LIST = "--list"
    LIST_CATEGORIES = "--list-categories"
    GET = "--get"
    CREATE = "--create"
    COMMENT = "--comment"
    LIST_COMMENTS = "--list-comments"

    @property
    def label(self) -> str:
        # camelCase names are what users see in the "Multiple actions" error
        head, *rest = self.name.lower().split("_")
        return head + "".join(part.capitalize() for part in rest)


@dataclass(frozen=True)
class Options:
    """A parsed CLI invocation.

    ``action`` is ``None`` only when no action flag was given; the parser
    never records two different actions.
    """

    action: Action | None = None
    owner: str | None = None
    repo: str | None = None
    token: str | None = None
    number: int | None = None
    title: str | None = None
    body: str | None = None
    category_id: str | None = None
    reply_to_id: str | None = None
    limit: int | None = None
    states: tuple[str, ...] = ()
    answered: bool | None = None
    output_format: str = "json"


@dataclass(frozen=True)
class CommentPage:
    """One page of a discussion's comments as returned by GraphQL."""

    discussion: dict[str, Any]
    comments: list[dict[str, Any]] = field(default_factory=list)
    has_next_page: bool = False
    end_cursor: str | None = None


__all__ = ["Action", "Options", "CommentPage"]
