"""GitHub Discussions operations.

Each public function performs one CLI action against a :class:`GitHubClient`
and returns plain JSON-ready data. Required-field checks run before any
request is issued.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from typing import Any

from .errors import NotFoundError, PreconditionError
from .github_client import GitHubClient
from .models import CommentPage

DEFAULT_LIST_LIMIT = 20
CATEGORY_PAGE_SIZE = 100
COMMENT_PAGE_SIZE = 100

LIST_DISCUSSIONS_QUERY = """
query($owner: String!, $name: String!, $first: Int!, $categoryId: ID, $answered: Boolean, $states: [DiscussionState!]) {
  repository(owner: $owner, name: $name) {
    discussions(
      first: $first,
      orderBy: {field: CREATED_AT, direction: DESC},
      categoryId: $categoryId,
      answered: $answered,
      states: $states
    ) {
      nodes {
        id
        number
        title
        createdAt
        url
        answerChosenAt
        isAnswered
        closed
        category { id name }
        author { login }
      }
    }
  }
}
"""

LIST_CATEGORIES_QUERY = f"""
query($owner: String!, $name: String!) {{
  repository(owner: $owner, name: $name) {{
    id
    discussionCategories(first: {CATEGORY_PAGE_SIZE}) {{
      nodes {{
        id
        name
        description
        isAnswerable
      }}
    }}
  }}
}}
"""

REPOSITORY_ID_QUERY = """
query($owner: String!, $name: String!) {
  repository(owner: $owner, name: $name) { id }
}
"""

DISCUSSION_ID_QUERY = """
query($owner: String!, $name: String!, $number: Int!) {
  repository(owner: $owner, name: $name) {
    discussion(number: $number) { id }
  }
}
"""

CREATE_DISCUSSION_MUTATION = """
mutation($repositoryId: ID!, $categoryId: ID!, $title: String!, $body: String!) {
  createDiscussion(input: {
    repositoryId: $repositoryId,
    categoryId: $categoryId,
    title: $title,
    body: $body
  }) {
    discussion {
      id
      number
      title
      url
    }
  }
}
"""

ADD_COMMENT_MUTATION = """
mutation($discussionId: ID!, $replyToId: ID, $body: String!) {
  addDiscussionComment(input: {
    discussionId: $discussionId,
    replyToId: $replyToId,
    body: $body
  }) {
    comment {
      id
      url
      createdAt
      author { login }
      replyTo { id }
      body
    }
  }
}
"""

LIST_COMMENTS_QUERY = f"""
query($owner: String!, $name: String!, $number: Int!, $after: String) {{
  repository(owner: $owner, name: $name) {{
    discussion(number: $number) {{
      id
      number
      title
      url
      comments(first: {COMMENT_PAGE_SIZE}, after: $after) {{
        nodes {{
          id
          url
          createdAt
          updatedAt
          isAnswer
          replyTo {{ id }}
          author {{ login }}
          body
        }}
        pageInfo {{
          hasNextPage
          endCursor
        }}
      }}
    }}
  }}
}}
"""


def _dig(data: Any, *keys: str) -> Any:
    for key in keys:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data


def discussion_state(node: dict[str, Any]) -> str:
    return "CLOSED" if node.get("closed") is True else "OPEN"


def list_discussions(
    client: GitHubClient,
    owner: str,
    repo: str,
    *,
    limit: int | None = None,
    category_id: str | None = None,
    answered: bool | None = None,
    states: Sequence[str] | None = None,
) -> list[dict[str, Any]]:
    first = limit if limit is not None and limit > 0 else DEFAULT_LIST_LIMIT
    variables: dict[str, Any] = {"owner": owner, "name": repo, "first": first}
    if category_id:
        variables["categoryId"] = category_id
    if answered is not None:
        variables["answered"] = answered
    if states:
        variables["states"] = list(states)

    data = client.graphql(LIST_DISCUSSIONS_QUERY, variables)
    nodes = _dig(data, "repository", "discussions", "nodes") or []
    return [{**node, "state": discussion_state(node)} for node in nodes[:first]]


def list_categories(client: GitHubClient, owner: str, repo: str) -> dict[str, Any]:
    data = client.graphql(LIST_CATEGORIES_QUERY, {"owner": owner, "name": repo})
    categories = _dig(data, "repository", "discussionCategories", "nodes") or []
    return {
        "repositoryId": _dig(data, "repository", "id"),
        "categories": [
            {
                "id": category.get("id"),
                "name": category.get("name"),
                "answerable": category.get("isAnswerable"),
                "description": category.get("description"),
            }
            for category in categories
        ],
    }


def get_discussion(
    client: GitHubClient, owner: str, repo: str, number: int | None
) -> Any:
    if number is None:
        raise PreconditionError("--get requires a discussion number")
    return client.rest("GET", f"/repos/{owner}/{repo}/discussions/{number}")


def get_repository_id(client: GitHubClient, owner: str, repo: str) -> str:
    data = client.graphql(REPOSITORY_ID_QUERY, {"owner": owner, "name": repo})
    repository_id = _dig(data, "repository", "id")
    if not repository_id:
        raise NotFoundError("Unable to resolve repository ID for createDiscussion.")
    return str(repository_id)


def get_discussion_id(client: GitHubClient, owner: str, repo: str, number: int) -> str:
    data = client.graphql(
        DISCUSSION_ID_QUERY, {"owner": owner, "name": repo, "number": number}
    )
    discussion_id = _dig(data, "repository", "discussion", "id")
    if not discussion_id:
        raise NotFoundError("Unable to resolve discussion ID. Check the discussion number.")
    return str(discussion_id)


def create_discussion(
    client: GitHubClient,
    owner: str,
    repo: str,
    *,
    title: str | None,
    body: str | None,
    category_id: str | None,
) -> Any:
    if not title:
        raise PreconditionError("--create requires --title")
    if not body:
        raise PreconditionError("--create requires --body")
    if not category_id:
        raise PreconditionError("--create requires --category-id")

    repository_id = get_repository_id(client, owner, repo)
    data = client.graphql(
        CREATE_DISCUSSION_MUTATION,
        {
            "repositoryId": repository_id,
            "categoryId": category_id,
            "title": title,
            "body": body,
        },
    )
    return _dig(data, "createDiscussion", "discussion")


def add_comment(
    client: GitHubClient,
    owner: str,
    repo: str,
    number: int | None,
    *,
    body: str | None,
    reply_to_id: str | None = None,
) -> Any:
    """Post a top-level comment, or a reply when ``reply_to_id`` is given."""
    if number is None:
        raise PreconditionError("--comment requires a discussion number")
    if not body:
        raise PreconditionError("--comment requires --body")

    discussion_id = get_discussion_id(client, owner, repo, number)
    data = client.graphql(
        ADD_COMMENT_MUTATION,
        {
            "discussionId": discussion_id,
            "replyToId": reply_to_id or None,
            "body": body,
        },
    )
    return _dig(data, "addDiscussionComment", "comment")


def iter_comment_pages(
    client: GitHubClient, owner: str, repo: str, number: int
) -> Iterator[CommentPage]:
    """Yield comment pages lazily; the next request is sent only on demand."""
    after: str | None = None
    while True:
        data = client.graphql(
            LIST_COMMENTS_QUERY,
            {"owner": owner, "name": repo, "number": number, "after": after},
        )
        discussion = _dig(data, "repository", "discussion")
        if not discussion:
            raise NotFoundError("Discussion not found.")

        page_info = _dig(discussion, "comments", "pageInfo") or {}
        page = CommentPage(
            discussion={
                "id": discussion.get("id"),
                "number": discussion.get("number"),
                "title": discussion.get("title"),
                "url": discussion.get("url"),
            },
            comments=list(_dig(discussion, "comments", "nodes") or []),
            has_next_page=bool(page_info.get("hasNextPage")),
            end_cursor=page_info.get("endCursor"),
        )
        yield page
        if not page.has_next_page or page.end_cursor is None:
            return
        after = page.end_cursor


def collect_comments(
    pages: Iterable[CommentPage], limit: int | None = None
) -> dict[str, Any]:
    """Accumulate comments until the pages run out or ``limit`` is reached.

    Pages are pulled one at a time; once the running total reaches ``limit``
    no further page is requested and the surplus of the last page is dropped.
    """
    summary: dict[str, Any] | None = None
    comments: list[dict[str, Any]] = []
    for page in pages:
        if summary is None:
            summary = page.discussion
        comments.extend(page.comments)
        if limit is not None and limit > 0 and len(comments) >= limit:
            del comments[limit:]
            break
    if summary is None:
        raise NotFoundError("Discussion not found.")
    return {"discussion": summary, "comments": comments}


def list_comments(
    client: GitHubClient,
    owner: str,
    repo: str,
    number: int | None,
    *,
    limit: int | None = None,
) -> dict[str, Any]:
    if number is None:
        raise PreconditionError("--list-comments requires a discussion number")
    return collect_comments(iter_comment_pages(client, owner, repo, number), limit)


__all__ = [
    "DEFAULT_LIST_LIMIT",
    "add_comment",
    "collect_comments",
    "create_discussion",
    "discussion_state",
    "get_discussion",
    "get_discussion_id",
    "get_repository_id",
    "iter_comment_pages",
    "list_categories",
    "list_comments",
    "list_discussions",
]
