"""gh-discussions CLI.

Read and write GitHub Discussions from the command line. Exactly one action
flag is accepted per invocation:

  --list             recent discussions (GraphQL)
  --list-categories  discussion categories with node ids (GraphQL)
  --get N            one discussion (REST)
  --create           new discussion (GraphQL)
  --comment N        comment or reply on a discussion (GraphQL)
  --list-comments N  all comments of a discussion, paginated (GraphQL)

Results go to stdout as JSON (default) or text; errors go to stderr with
exit code 1.
"""

from __future__ import annotations

import argparse
import json
import re
import sys
from collections.abc import Sequence
from typing import Any

from ghdiscussions.actions import NO_ACTION_MESSAGE, dispatch
from ghdiscussions.config import load_config
from ghdiscussions.env_auth import EnvAuthConfig, create_env_auth_manager
from ghdiscussions.errors import (
    CLIUsageError,
    DiscussionsError,
    PreconditionError,
    classify_error,
    redact,
)
from ghdiscussions.github_client import GitHubAPIError, GitHubClient
from ghdiscussions.logging import configure_logging, get_logger
from ghdiscussions.models import Action, Options
from ghdiscussions.output import FORMATS, write_output

PROG = "gh-discussions"

VALUE_FLAGS = frozenset(
    {
        "--token",
        "--owner",
        "--repo",
        "--limit",
        "--get",
        "--comment",
        "--list-comments",
        "--title",
        "--body",
        "--category-id",
        "--reply-to",
        "--answered",
        "--state",
        "--format",
    }
)
SWITCH_FLAGS = frozenset({"--list", "--list-categories", "--create", "--help"})
FLAG_NAMES = VALUE_FLAGS | SWITCH_FLAGS

ANSWERED_CHOICES = ("answered", "unanswered", "true", "false", "any")
STATE_CHOICES = ("OPEN", "CLOSED")

_INTEGER_RE = re.compile(r"\s*[+-]?\d+\s*")
_MAX_HELP_WIDTH = 100

EXAMPLES = f"""\
examples:
  GITHUB_TOKEN=ghp_x {PROG} --owner octocat --repo hello-world --list --limit 5
  {PROG} --token ghp_x --owner octocat --repo hello-world --list-categories
  {PROG} --token ghp_x --owner octocat --repo hello-world --create \\
      --title "Hello" --body "Hi" --category-id MDg6Q2F0ZWdvcnkxMjM=
  {PROG} --token ghp_x --owner octocat --repo hello-world --comment 42 --body "Great update!"
  {PROG} --token ghp_x --owner octocat --repo hello-world --comment 42 \\
      --reply-to MDEyOkRpc2N1c3Npb25Db21tZW50MTIz --body "Thanks for clarifying"
"""


class _HelpFormatter(argparse.RawDescriptionHelpFormatter):
    def __init__(self, prog: str) -> None:
        super().__init__(prog, max_help_position=30, width=_MAX_HELP_WIDTH)


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises :class:`CLIUsageError` instead of exiting."""

    def error(self, message: str) -> Any:  # type: ignore[override]
        raise CLIUsageError(message)


class _SelectAction(argparse.Action):
    """Record the requested action; a second, different action is an error."""

    def __init__(self, option_strings: Sequence[str], dest: str, kind: Action, **kwargs: Any):
        self.kind = kind
        super().__init__(option_strings, dest, **kwargs)

    def __call__(
        self,
        parser: argparse.ArgumentParser,
        namespace: argparse.Namespace,
        values: Any,
        option_string: str | None = None,
    ) -> None:
        current = getattr(namespace, "action", None)
        if current is not None and current is not self.kind:
            raise argparse.ArgumentError(
                self,
                f"Multiple actions specified ({current.label} and {self.kind.label}). "
                "Please choose one.",
            )
        namespace.action = self.kind
        if self.nargs != 0:
            namespace.number = values


class _AppendUnique(argparse.Action):
    def __call__(
        self,
        parser: argparse.ArgumentParser,
        namespace: argparse.Namespace,
        values: Any,
        option_string: str | None = None,
    ) -> None:
        items = list(getattr(namespace, self.dest, None) or [])
        if values not in items:
            items.append(values)
        setattr(namespace, self.dest, items)


def _integer(flag: str) -> Any:
    def convert(value: str) -> int:
        if not _INTEGER_RE.fullmatch(value):
            raise argparse.ArgumentTypeError(f"{flag} requires an integer value")
        return int(value, 10)

    return convert


def _positive_limit(value: str) -> int:
    limit = _integer("--limit")(value)
    if limit <= 0:
        raise argparse.ArgumentTypeError("--limit requires a positive integer")
    return limit


def _answered(value: str) -> bool | None:
    lowered = value.lower()
    if lowered not in ANSWERED_CHOICES:
        raise argparse.ArgumentTypeError(
            "--answered must be one of answered, unanswered, true, false, or any"
        )
    if lowered == "any":
        return None
    return lowered in ("answered", "true")


def _state(value: str) -> str:
    upper = value.upper()
    if upper not in STATE_CHOICES:
        raise argparse.ArgumentTypeError("--state must be open or closed")
    return upper


def _format(value: str) -> str:
    lowered = value.lower()
    if lowered not in FORMATS:
        raise argparse.ArgumentTypeError(f"Unsupported --format value: {lowered}")
    return lowered


def build_parser() -> argparse.ArgumentParser:
    """Construct the CLI parser.

    Keep ordering stable for help output readability.
    """
    p = _ArgumentParser(
        prog=PROG,
        description="GitHub Discussions utility (GraphQL + REST).",
        epilog=EXAMPLES,
        formatter_class=_HelpFormatter,
        add_help=False,
        allow_abbrev=False,
        exit_on_error=False,
    )
    p.set_defaults(action=None, number=None)

    auth = p.add_argument_group("authentication")
    auth.add_argument(
        "--token",
        metavar="<token>",
        help="GitHub personal access token (falls back to GITHUB_TOKEN env)",
    )

    repo = p.add_argument_group("repository selection (required for every action)")
    repo.add_argument("--owner", metavar="<owner>", help="Repository owner (user or org)")
    repo.add_argument("--repo", metavar="<repo>", help="Repository name")

    actions = p.add_argument_group("actions (specify exactly one)")
    actions.add_argument(
        "--list",
        action=_SelectAction,
        kind=Action.LIST,
        nargs=0,
        help="List recent discussions; combine with --limit, --category-id, --answered, --state",
    )
    actions.add_argument(
        "--list-categories",
        action=_SelectAction,
        kind=Action.LIST_CATEGORIES,
        nargs=0,
        help="List discussion categories with GraphQL IDs",
    )
    actions.add_argument(
        "--get",
        action=_SelectAction,
        kind=Action.GET,
        type=_integer("--get"),
        metavar="<number>",
        help="Fetch a discussion via the REST API",
    )
    actions.add_argument(
        "--create",
        action=_SelectAction,
        kind=Action.CREATE,
        nargs=0,
        help="Create a discussion; requires --title, --body, --category-id",
    )
    actions.add_argument(
        "--list-comments",
        action=_SelectAction,
        kind=Action.LIST_COMMENTS,
        type=_integer("--list-comments"),
        metavar="<number>",
        help="List comments for a discussion; combine with --limit",
    )
    actions.add_argument(
        "--comment",
        action=_SelectAction,
        kind=Action.COMMENT,
        type=_integer("--comment"),
        metavar="<number>",
        help="Add a comment or reply; requires --body",
    )

    extra = p.add_argument_group("additional options")
    extra.add_argument("--limit", type=_positive_limit, metavar="<n>", help="Maximum results")
    extra.add_argument("--title", metavar="<text>", help="Title for --create")
    extra.add_argument("--body", metavar="<text>", help="Markdown body for --create or --comment")
    extra.add_argument(
        "--category-id",
        metavar="<id>",
        help="Discussion category node ID for --create or to filter --list",
    )
    extra.add_argument(
        "--answered",
        type=_answered,
        metavar="<state>",
        help="Filter --list: answered, unanswered, true, false, or any (default)",
    )
    extra.add_argument(
        "--state",
        dest="states",
        action=_AppendUnique,
        type=_state,
        metavar="<state>",
        help="Filter --list by state (open or closed); may be repeated",
    )
    extra.add_argument(
        "--reply-to",
        metavar="<id>",
        help="Reply to an existing comment (use with --comment)",
    )
    extra.add_argument(
        "--format",
        type=_format,
        default="json",
        metavar="<type>",
        help="Output format: json (default) or text",
    )
    extra.add_argument("--help", action="help", help="Show this message")
    return p


def _bind_values(tokens: Sequence[str]) -> list[str]:
    """Fold ``--flag value`` pairs into ``--flag=value``.

    A value may be any token except a registered flag name, so values such
    as ``-5`` or ``-draft`` survive argparse's option detection.
    """
    bound: list[str] = []
    i = 0
    while i < len(tokens):
        token = tokens[i]
        if token in VALUE_FLAGS:
            if i + 1 >= len(tokens) or tokens[i + 1] in FLAG_NAMES:
                raise CLIUsageError(f"{token} requires a value")
            bound.append(f"{token}={tokens[i + 1]}")
            i += 2
            continue
        bound.append(token)
        i += 1
    return bound


def parse_options(
    argv: Sequence[str], parser: argparse.ArgumentParser | None = None
) -> Options:
    """Parse CLI tokens into :class:`Options` or raise :class:`CLIUsageError`."""
    parser = parser or build_parser()
    try:
        ns, extras = parser.parse_known_args(_bind_values(argv))
    except argparse.ArgumentError as exc:
        raise CLIUsageError(exc.message) from None
    if extras:
        raise CLIUsageError(f"Unknown argument: {extras[0]}")
    return Options(
        action=ns.action,
        owner=ns.owner,
        repo=ns.repo,
        token=ns.token,
        number=ns.number,
        title=ns.title,
        body=ns.body,
        category_id=ns.category_id,
        reply_to_id=ns.reply_to,
        limit=ns.limit,
        states=tuple(ns.states or ()),
        answered=ns.answered,
        output_format=ns.format,
    )


def _check_preconditions(opts: Options, token: str | None) -> str:
    if not token:
        raise PreconditionError(
            "Missing GitHub token. Provide via --token or GITHUB_TOKEN env var."
        )
    if not opts.owner or not opts.repo:
        raise PreconditionError("Missing --owner or --repo argument.")
    if opts.action is None:
        raise PreconditionError(NO_ACTION_MESSAGE)
    return token


def _report_error(exc: DiscussionsError) -> None:
    info = classify_error(exc)
    get_logger().info("command failed", category=info.category, error_type=info.original_type)
    print(redact(str(exc)), file=sys.stderr)
    if isinstance(exc, GitHubAPIError) and exc.response_body is not None:
        body = exc.response_body
        rendered = body if isinstance(body, str) else json.dumps(body, indent=2)
        print(redact(rendered), file=sys.stderr)


def main(argv: Sequence[str] | None = None) -> int:
    tokens = list(sys.argv[1:] if argv is None else argv)
    parser = build_parser()
    if not tokens or "--help" in tokens:
        parser.print_help()
        return 0

    try:
        cfg = load_config()
    except DiscussionsError as exc:
        _report_error(exc)
        return 1
    configure_logging(json_logging=cfg.logging_json_enabled, level=cfg.logging_level)

    try:
        options = parse_options(tokens, parser)
    except CLIUsageError as exc:
        _report_error(exc)
        parser.print_help(sys.stderr)
        return 1

    auth = create_env_auth_manager(
        EnvAuthConfig(load_dotenv=cfg.load_dotenv, dotenv_path=cfg.dotenv_path)
    )
    try:
        token = _check_preconditions(options, auth.resolve_token(options.token))
        with GitHubClient(
            token=token, api_url=cfg.api_url, graphql_url=cfg.graphql_url
        ) as client:
            result = dispatch(client, options)
    except DiscussionsError as exc:
        _report_error(exc)
        return 1

    write_output(result, options.output_format)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
