"""Resolve the repository argument of ``bootstrap`` into a git URL."""

from __future__ import annotations

import re

_SHORT_GITHUB_REPO = re.compile(r"[\w.-]+/[\w.-]+", re.ASCII)


def is_short_github_repo(repo: str) -> bool:
    """True if ``repo`` has the short ``<user>/<repo>`` form."""
    return _SHORT_GITHUB_REPO.fullmatch(repo) is not None


def get_git_url(repo: str) -> str:
    """Expand ``<user>/<repo>`` to a GitHub URL; anything else is used as given."""
    if is_short_github_repo(repo):
        return "https://github.com/" + repo + ".git"
    return repo