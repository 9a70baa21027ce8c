"""Replace installed links with the dotfiles they point to."""

from __future__ import annotations

import errno
import logging
import os
import shutil
import stat
from collections.abc import Iterable

from doot.symlinks import SymlinkCollection

log = logging.getLogger(__name__)


class RestoreError(Exception):
    """A file could not be restored."""


def _ensure_file_exists(raw_input: str) -> str:
    path = os.path.abspath(raw_input)
    try:
        mode = os.lstat(path).st_mode
    except FileNotFoundError:
        raise RestoreError("file not found") from None
    except OSError as err:
        raise RestoreError(str(err)) from err
    if stat.S_ISDIR(mode):
        raise RestoreError("it's a directory, you must specify files")
    return path


def _move_replacing(src: str, dst: str) -> None:
    try:
        os.replace(src, dst)
    except OSError as err:
        if err.errno != errno.EXDEV:
            raise
        if os.path.lexists(dst):
            os.unlink(dst)
        shutil.move(src, dst)


def _cleanup_empty_dirs(directory: str, stop_at: str) -> None:
    stop_at = os.path.normpath(stop_at)
    directory = os.path.normpath(directory)
    while directory.startswith(stop_at + os.sep):
        try:
            os.rmdir(directory)
        except OSError:
            return
        directory = os.path.dirname(directory)


def restore_file(file_path: str, installed_links: SymlinkCollection, dotfiles_dir: str) -> None:
    """Move the dotfile behind ``file_path`` (link or dotfile) back over its link."""
    for link_path, dotfile_path in installed_links.items():
        if file_path in (link_path, dotfile_path):
            log.info("Moving '%s' -> '%s'", dotfile_path, link_path)
            try:
                _move_replacing(dotfile_path, link_path)
            except OSError as err:
                raise RestoreError(str(err)) from err
            _cleanup_empty_dirs(os.path.dirname(dotfile_path), dotfiles_dir)
            installed_links.remove(link_path)
            return
    raise RestoreError("it's not a dotfile managed by doot")


def restore_files(
    input_files: Iterable[str], installed_links: SymlinkCollection, dotfiles_dir: str
) -> int:
    """Restore each file, logging failures; return how many succeeded."""
    success_count = 0
    for raw_input in input_files:
        try:
            restore_file(_ensure_file_exists(raw_input), installed_links, dotfiles_dir)
        except RestoreError as err:
            log.error("Failed to restore '%s': %s", raw_input, err)
            continue
        log.info("Successfully restored '%s'", raw_input)
        success_count += 1
    return success_count