# backend/github_client.py
import re
from typing import Optional, Tuple

from github import Github

from backend import config

_SHORT_REF = re.compile(r"^(?P<owner>[\w.-]+)/(?P<repo>[\w.-]+)#(?P<number>\d+)$")
_URL_REF = re.compile(
    r"^https?://github\.com/(?P<owner>[\w.-]+)/(?P<repo>[\w.-]+)/pull/(?P<number>\d+)/?$"
)

_gh: Optional[Github] = None


def _client() -> Github:
    global _gh
    if _gh is None:
        _gh = Github(config.GITHUB_TOKEN) if config.GITHUB_TOKEN else Github()
    return _gh


def parse_pr_ref(ref: Optional[str]) -> Optional[Tuple[str, str, int]]:
    """
    Recognise "owner/repo#123" or a github.com pull request URL.
    Plain project ids from the RAG service return None.
    """
    if not ref:
        return None
    ref = ref.strip()
    m = _SHORT_REF.match(ref) or _URL_REF.match(ref)
    if not m:
        return None
    return m.group("owner"), m.group("repo"), int(m.group("number"))


def get_pr_diff(owner: str, repo: str, pr_number: int) -> str:
    """
    Fetch the unified diff of a pull request.
    """
    repository = _client().get_repo(f"{owner}/{repo}")
    pr = repository.get_pull(pr_number)
    diffs = []
    for f in pr.get_files():
        if f.patch:  # binary files have no patch
            diffs.append(f"--- {f.filename}\n+++ {f.filename}\n{f.patch}")
    return "\n\n".join(diffs)
