"""Detection and setup of git-crypt support in the dotfiles repository."""

from __future__ import annotations

import logging
import os

log = logging.getLogger(__name__)

DOOT_CRYPT_EXT = ".doot-crypt"
DOOT_CRYPT_EXT_WITHOUT_DOT = "doot-crypt"
MAX_PARENTS_UP = 4

GIT_CRYPT_KEY_PATH = os.path.join(".git", "git-crypt", "keys", "default")
GIT_ATTRIBUTES_PATH = os.path.join(".git", "info", "attributes")

_ATTRIBUTES_BODY = """# Auto-generated by 'doot crypt init'. Do not edit.
**/*.doot-crypt filter=git-crypt diff=git-crypt
**/*.doot-crypt.* filter=git-crypt diff=git-crypt
**/*.doot-crypt/** filter=git-crypt diff=git-crypt
**/*.doot-crypt.*/** filter=git-crypt diff=git-crypt
# End of 'doot crypt init'"""


class NotARepositoryError(Exception):
    """The dotfiles directory is not inside a git repository."""


def git_attributes_content(with_padding: bool) -> str:
    """The attributes block that marks doot-crypt files for encryption."""
    content = _ATTRIBUTES_BODY
    if with_padding:
        content = "\n" + content + "\n"
    if os.name == "nt":
        return content.replace("\n", "\r\n")
    return content


def repo_root(directory: str) -> str | None:
    """The closest directory holding ``.git``, searching a few levels up."""
    current = directory
    for _ in range(MAX_PARENTS_UP):
        if os.path.exists(os.path.join(current, ".git")):
            return current
        current = os.path.dirname(current)
    return None


def git_crypt_key_exists(dotfiles_dir: str) -> bool:
    root = repo_root(dotfiles_dir)
    if root is None:
        return False
    return os.path.isfile(os.path.join(root, GIT_CRYPT_KEY_PATH))


def git_attributes_is_set(dotfiles_dir: str) -> bool:
    root = repo_root(dotfiles_dir)
    if root is None:
        return False
    try:
        with open(os.path.join(root, GIT_ATTRIBUTES_PATH), encoding="utf-8", newline="") as f:
            existing = f.read()
    except (OSError, UnicodeDecodeError):
        return False
    return git_attributes_content(False) in existing


def git_crypt_is_initialized(dotfiles_dir: str) -> bool:
    return git_crypt_key_exists(dotfiles_dir) and git_attributes_is_set(dotfiles_dir)


def append_git_attributes(dotfiles_dir: str) -> None:
    """Append the attributes block to the repository's ``.git/info/attributes``."""
    root = repo_root(dotfiles_dir)
    if root is None:
        raise NotARepositoryError(
            f"the dotfiles directory ({dotfiles_dir}) is not a git repository"
        )
    with open(os.path.join(root, GIT_ATTRIBUTES_PATH), "a", encoding="utf-8", newline="") as f:
        f.write(git_attributes_content(True))


def contains_crypt_files(directory: str) -> bool:
    """True if any file or directory below ``directory`` has the doot-crypt marker."""
    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as err:
        log.error("Error reading directory %s: %s", directory, err)
        return False
    for entry in entries:
        if DOOT_CRYPT_EXT in entry.name:
            return True
        if entry.is_dir(follow_symlinks=False) and contains_crypt_files(entry.path):
            return True
    return False