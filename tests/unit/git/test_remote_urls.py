"""Tests for CI and review URL inference."""

import pytest

from gitpromote.git.remote import infer_ci_url, infer_review_url


@pytest.mark.parametrize(
    "remote",
    [
        "git@github.com:acme/widgets.git",
        "https://github.com/acme/widgets.git",
        "https://github.com/acme/widgets",
        "ssh://git@github.com/acme/widgets.git",
    ],
)
def test_github_forms(remote):
    assert infer_ci_url(remote) == "https://github.com/acme/widgets/actions"


def test_gitlab_subgroups():
    assert (
        infer_ci_url("git@gitlab.com:acme/tools/widgets.git")
        == "https://gitlab.com/acme/tools/widgets/-/pipelines"
    )


@pytest.mark.parametrize(
    "remote", [None, "", "git@bitbucket.org:acme/widgets.git", "/srv/repo.git"]
)
def test_unknown_hosts(remote):
    assert infer_ci_url(remote) is None
    assert infer_review_url(remote, "feature/x", "main") is None


def test_github_compare_page():
    assert (
        infer_review_url("git@github.com:acme/widgets.git", "feature/x", "main")
        == "https://github.com/acme/widgets/compare/main...feature/x"
    )


def test_gitlab_merge_request_page():
    url = infer_review_url(
        "https://gitlab.com/acme/widgets.git", "feature/x", "main"
    )

    assert url.startswith("https://gitlab.com/acme/widgets/-/merge_requests/new")
    assert "source_branch]=feature/x" in url
    assert "target_branch]=main" in url
