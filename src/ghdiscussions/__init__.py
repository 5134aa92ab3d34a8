"""gh-discussions - read and write GitHub Discussions from the command line.

High-level public API:

from ghdiscussions import GitHubClient, list_discussions

with GitHubClient(token="ghp_...") as client:
    for discussion in list_discussions(client, "octocat", "hello-world", limit=5):
        print(discussion["number"], discussion["state"], discussion["title"])

The CLI (``gh-discussions`` / ``python -m ghdiscussions``) is a thin layer
over these functions.
"""

from __future__ import annotations

from .discussions import (
    add_comment,
    create_discussion,
    get_discussion,
    iter_comment_pages,
    list_categories,
    list_comments,
    list_discussions,
)
from .github_client import GitHubAPIError, GitHubClient
from .models import Action, Options

# Keep in sync with pyproject.toml
__version__ = "0.1.0"

__all__ = [
    "Action",
    "GitHubAPIError",
    "GitHubClient",
    "Options",
    "add_comment",
    "create_discussion",
    "get_discussion",
    "iter_comment_pages",
    "list_categories",
    "list_comments",
    "list_discussions",
    "__version__",
]
