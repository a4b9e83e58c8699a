"""Tests for pull request reference parsing and diff collection."""

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from backend import github_client


@pytest.mark.parametrize(
    "ref, expected",
    [
        ("octo/repo#12", ("octo", "repo", 12)),
        (" my-org/my.repo#3 ", ("my-org", "my.repo", 3)),
        ("https://github.com/octo/repo/pull/45", ("octo", "repo", 45)),
        ("https://github.com/octo/repo/pull/45/", ("octo", "repo", 45)),
        ("pr-123", None),
        ("octo/repo", None),
        ("", None),
        (None, None),
    ],
)
def test_parse_pr_ref(ref, expected):
    assert github_client.parse_pr_ref(ref) == expected


def test_get_pr_diff_skips_files_without_patch():
    files = [
        SimpleNamespace(filename="a.py", patch="@@ -1 +1 @@\n-x\n+y"),
        SimpleNamespace(filename="logo.png", patch=None),
        SimpleNamespace(filename="b.py", patch="@@ -2 +2 @@\n-z\n+w"),
    ]
    gh = MagicMock()
    gh.get_repo.return_value.get_pull.return_value.get_files.return_value = files

    with patch("backend.github_client._client", return_value=gh):
        diff = github_client.get_pr_diff("octo", "repo", 7)

    gh.get_repo.assert_called_once_with("octo/repo")
    gh.get_repo.return_value.get_pull.assert_called_once_with(7)
    assert diff == (
        "--- a.py\n+++ a.py\n@@ -1 +1 @@\n-x\n+y"
        "\n\n"
        "--- b.py\n+++ b.py\n@@ -2 +2 @@\n-z\n+w"
    )
