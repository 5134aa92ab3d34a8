"""Error taxonomy & redaction helpers.

Every failure the CLI can report derives from :class:`DiscussionsError` so
``main`` can map it to exit code 1 in a single place. ``classify_error``
attaches a coarse category for the log record, and ``redact`` keeps tokens
out of anything written to stderr.

Public API:
- DiscussionsError / CLIUsageError / PreconditionError / NotFoundError / ConfigError
- classify_error(exc) -> ErrorInfo
- redact(text) -> str
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

_SENSITIVE_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"ghp_[A-Za-z0-9]{20,40}"),  # classic PAT
    re.compile(r"gh[osru]_[A-Za-z0-9]{20,40}"),  # oauth / app / refresh tokens
    re.compile(r"github_pat_\w{20,}"),  # fine-grained PAT
    re.compile(r"(?i)(bearer\s+)[A-Za-z0-9_\-\.]{8,}"),
]

_REDACTION_PLACEHOLDER = "<redacted>"


class DiscussionsError(RuntimeError):
    """Base class for every error reported by the discussions CLI."""


class CLIUsageError(DiscussionsError):
    """Bad, missing or conflicting command line flags."""


class PreconditionError(DiscussionsError):
    """A required input (token, owner, repo, action or companion flag) is missing."""


class NotFoundError(DiscussionsError):
    """A repository or discussion lookup resolved to nothing."""


class ConfigError(DiscussionsError):
    pass


@dataclass
class ErrorInfo:
    category: str
    message: str
    original_type: str
    details: dict[str, Any] | None = None


def redact(text: str) -> str:
    """Replace GitHub tokens in ``text`` with a placeholder."""
    if not text:
        return text
    redacted = text
    for pat in _SENSITIVE_PATTERNS:
        if pat.groups:
            redacted = pat.sub(lambda m: m.group(1) + _REDACTION_PLACEHOLDER, redacted)
        else:
            redacted = pat.sub(_REDACTION_PLACEHOLDER, redacted)
    return redacted


def classify_error(exc: BaseException) -> ErrorInfo:
    """Best-effort classification of an exception.

    Typed errors map directly; API failures are split by status code and
    message so rate limiting and bad credentials stand out in the logs.
    """
    msg = redact(str(exc) if exc else "")
    name = exc.__class__.__name__

    if isinstance(exc, CLIUsageError):
        return ErrorInfo("usage", msg, name)
    if isinstance(exc, PreconditionError):
        return ErrorInfo("precondition", msg, name)
    if isinstance(exc, NotFoundError):
        return ErrorInfo("not_found", msg, name)
    if isinstance(exc, ConfigError):
        return ErrorInfo("config", msg, name)

    status = getattr(exc, "status", None)
    body = getattr(exc, "response_body", None)
    low = f"{msg} {body}".lower() if body is not None else msg.lower()
    details = {"status": status} if status is not None else None

    if "rate limit" in low or "secondary rate" in low:
        return ErrorInfo("github.rate_limit", msg, name, details)
    if status in (401, 403) or "bad credentials" in low:
        return ErrorInfo("github.auth", msg, name, details)
    if any(k in low for k in ("timeout", "timed out", "connection", "temporarily unavailable")):
        return ErrorInfo("network", msg, name, details)
    return ErrorInfo("generic", msg, name, details)


__all__ = [
    "DiscussionsError",
    "CLIUsageError",
    "PreconditionError",
    "NotFoundError",
    "ConfigError",
    "ErrorInfo",
    "classify_error",
    "redact",
]
