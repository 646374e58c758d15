"""Guess hosting-service URLs from a remote URL."""

from __future__ import annotations

import re

_HOSTS = {
    "github.com": re.compile(r"github\.com[:/](?P<path>.+?)(?:\.git)?/?$"),
    "gitlab.com": re.compile(r"gitlab\.com[:/](?P<path>.+?)(?:\.git)?/?$"),
}


def _project_path(remote_url: str | None) -> tuple[str, str] | None:
    if not remote_url:
        return None
    for host, pattern in _HOSTS.items():
        match = pattern.search(remote_url.strip())
        if match:
            return host, match.group("path")
    return None


def infer_ci_url(remote_url: str | None) -> str | None:
    """CI dashboard for the repository, or None if the host is unknown."""
    found = _project_path(remote_url)
    if found is None:
        return None
    host, path = found
    if host == "github.com":
        return f"https://github.com/{path}/actions"
    return f"https://gitlab.com/{path}/-/pipelines"


def infer_review_url(
    remote_url: str | None, source: str, target: str
) -> str | None:
    """Page for opening a pull/merge request from source into target."""
    found = _project_path(remote_url)
    if found is None:
        return None
    host, path = found
    if host == "github.com":
        return f"https://github.com/{path}/compare/{target}...{source}"
    return (
        f"https://gitlab.com/{path}/-/merge_requests/new"
        f"?merge_request[source_branch]={source}"
        f"&merge_request[target_branch]={target}"
    )
