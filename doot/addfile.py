"""Work out where a file being added belongs inside the dotfiles directory."""

from __future__ import annotations

import logging
import os
import stat
from collections.abc import Collection
from dataclasses import dataclass, field

from doot.crypt import DOOT_CRYPT_EXT, DOOT_CRYPT_EXT_WITHOUT_DOT
from doot.mapping import Prompt, _ask
from doot.scan import GlobCollection

log = logging.getLogger(__name__)


class AddFileError(Exception):
    """A file cannot be added to the dotfiles directory."""


@dataclass
class AddFileParams:
    """Settings that decide the dotfile path of an added file."""

    dotfiles_dir: str
    target_dir: str
    crypt: bool = False
    host_specific_dir: str = ""
    implicit_dot: bool = False
    implicit_dot_ignore: Collection[str] = ()
    include_files: GlobCollection = field(default_factory=GlobCollection)
    exclude_files: GlobCollection = field(default_factory=GlobCollection)
    prompt: Prompt | None = None


def _top_level_dir(rel_path: str) -> str:
    return rel_path.split(os.sep, 1)[0]


def process_added_file(path: str, params: AddFileParams) -> str:
    """Path, relative to the dotfiles directory, where ``path`` should be stored."""
    try:
        mode = os.lstat(path).st_mode
    except FileNotFoundError:
        raise AddFileError("this file does not exist") from None
    except OSError as err:
        raise AddFileError(str(err)) from err
    if stat.S_ISDIR(mode):
        raise AddFileError(f"it's a directory. Consider adding {path}/**/* instead")

    abs_path = os.path.abspath(path)
    if not abs_path.startswith(params.target_dir):
        raise AddFileError(f"it's not inside target directory {params.target_dir}")

    try:
        rel_path = _construct_relative_path(abs_path, params)
    except (OSError, ValueError) as err:
        raise AddFileError(f"error getting relative path: {err}") from err

    top_level = _top_level_dir(rel_path)
    if params.implicit_dot and top_level not in params.implicit_dot_ignore:
        if not rel_path.startswith("."):
            raise AddFileError(
                "its current filename is impossible because implicit_dot is true. "
                f"Add '{top_level}' to implicit_dot_ignore to fix this"
            )
        rel_path = rel_path[1:]

    if params.crypt and DOOT_CRYPT_EXT not in rel_path:
        rel_path = add_doot_crypt_extension(rel_path)

    check_is_included(rel_path, params.include_files, params.exclude_files)

    if params.host_specific_dir:
        rel_path = os.path.join(params.host_specific_dir, rel_path)
    return rel_path


def _construct_relative_path(abs_path: str, params: AddFileParams) -> str:
    """Relative path, reusing existing doot-crypt directories where they stand in for missing ones."""
    parts = os.path.relpath(abs_path, params.target_dir).split(os.sep)
    prompt = params.prompt or _ask

    for i, part in enumerate(parts[:-1]):
        current_dir = os.path.join(params.dotfiles_dir, *parts[: i + 1])
        if os.path.isdir(current_dir):
            continue

        log.info("%s does not exist, checking for crypt directory", current_dir)
        crypt_dir = os.path.join(params.dotfiles_dir, *parts[:i], part + DOOT_CRYPT_EXT)
        if not os.path.isdir(crypt_dir):
            continue
        if not params.crypt:
            answer = prompt(
                "Yn",
                f"Do you want to add '{abs_path}' inside the existing directory '{crypt_dir}'? "
                "It will become encrypted even though you didn't use the --crypt flag. "
                f"Press N to create a new directory '{current_dir}'",
            )
            if answer != "y":
                continue
        log.info("Using crypt directory %s", crypt_dir)
        parts[i] = part + DOOT_CRYPT_EXT

    return os.path.join(*parts)


def check_is_included(
    rel_path: str, include_files: GlobCollection, exclude_files: GlobCollection
) -> None:
    """Raise AddFileError if the path or one of its parents is excluded and not included."""
    current = rel_path
    while current not in ("", "."):
        if exclude_files.matches(current) and not include_files.matches(current):
            raise AddFileError(
                f"{current} matches exclude_files but is not included in include_files"
            )
        parent = os.path.dirname(current)
        if parent == current:
            break
        current = parent


def add_doot_crypt_extension(rel_path: str) -> str:
    """Insert the doot-crypt marker into the file name, before its last extension."""
    directory, file_name = os.path.split(rel_path)
    parts = file_name.split(".")
    if len(parts) == 1 or (len(parts) == 2 and parts[0] == ""):
        parts.append(DOOT_CRYPT_EXT_WITHOUT_DOT)
    else:
        parts.insert(len(parts) - 1, DOOT_CRYPT_EXT_WITHOUT_DOT)
    return os.path.join(directory, ".".join(parts))