"""Mapping of dotfiles to their installed locations, and link installation."""

from __future__ import annotations

import difflib
import logging
import os
import shutil
import stat
import sys
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from doot.crypt import DOOT_CRYPT_EXT
from doot.hostfilter import get_hostname_filter
from doot.scan import Config
from doot.symlinks import SymlinkCollection

log = logging.getLogger(__name__)

Prompt = Callable[[str, str], str]


def _ask(options: str, message: str) -> str:
    """Ask on the terminal; the upper-case option is the default answer."""
    default = next((c.lower() for c in options if c.isupper()), None)
    valid = options.lower()
    while True:
        try:
            answer = input(f"{message} [{options}] ").strip().lower()
        except EOFError:
            if default is None:
                raise
            return default
        if not answer and default is not None:
            return default
        if len(answer) == 1 and answer in valid:
            return answer


@dataclass(frozen=True)
class SourcePath:
    """A dotfile path and whether it came from the host-specific directory."""

    path: str
    host_specific: bool


def _is_link_to(link: str, target: str) -> bool:
    try:
        return os.path.islink(link) and os.readlink(link) == target
    except OSError:
        return False


def _cleanup_empty_dirs(directory: str, stop_at: str) -> None:
    stop_at = os.path.normpath(stop_at)
    directory = os.path.normpath(directory)
    while directory.startswith(stop_at + os.sep):
        try:
            os.rmdir(directory)
        except OSError:
            return
        directory = os.path.dirname(directory)


class FileMapping:
    """Installed link path -> dotfile, built from the files of the dotfiles directory."""

    def __init__(
        self,
        dotfiles_dir: str,
        config: Config,
        source_files: Iterable[str] = (),
        hostname: str | None = None,
        prompt: Prompt | None = None,
    ) -> None:
        self._mapping: dict[str, SourcePath] = {}
        self._source_base = dotfiles_dir
        self._target_base = config.target_dir
        self._implicit_dot = config.implicit_dot
        self._implicit_dot_ignore = set(config.implicit_dot_ignore)
        self._hosts = get_hostname_filter(config.hosts, hostname)
        self._skipped: set[str] = set()
        self._prompt = prompt or _ask
        for source in source_files:
            self.add(source)

    def add(self, relative_source: str) -> None:
        """Map one dotfile, resolving conflicts with files already mapped."""
        relative_target, host_specific = self.map_source_to_target(relative_source)
        if relative_target is None:
            return
        source = os.path.join(self._source_base, relative_source)
        target = os.path.join(self._target_base, relative_target)

        old = self._mapping.get(target)
        if old is None or host_specific:
            self._mapping[target] = SourcePath(source, host_specific)
            if old is not None:
                log.info("Host-specific file %s overrides %s for target %s", source, old.path, target)
        elif old.host_specific:
            log.info("Host-specific file %s overrides %s for target %s", old.path, source, target)
        else:
            log.warning(
                "Conflicting files: %s and %s both map to %s. Ignoring %s",
                old.path, source, target, source,
            )

    def map_source_to_target(self, source: str) -> tuple[str | None, bool]:
        """Target path relative to the target directory, and whether it is host-specific."""
        if self._hosts.is_ignored(source):
            return None, False
        prefix_len = self._hosts.host_specific_prefix_len(source)
        target = source if prefix_len is None else source[prefix_len:]
        top_level = source.split(os.sep, 1)[0]
        if (
            self._implicit_dot
            and top_level not in self._implicit_dot_ignore
            and not target.startswith(".")
        ):
            target = "." + target
        return target.replace(DOOT_CRYPT_EXT, ""), prefix_len is not None

    def installed_targets(self) -> SymlinkCollection:
        """Links that are installed, leaving out those the user chose to skip."""
        return SymlinkCollection(
            {t: s.path for t, s in self._mapping.items() if t not in self._skipped}
        )

    def install_new_links(self) -> list[str]:
        """Create missing links; return the targets that were created or replaced."""
        created: list[str] = []
        for target, entry in sorted(self._mapping.items()):
            source = entry.path
            if _is_link_to(target, source):
                continue
            if os.path.lexists(target):
                if self._handle_existing(target, source):
                    created.append(target)
                continue
            try:
                os.makedirs(os.path.dirname(target), exist_ok=True)
                log.info("Linking %s -> %s", target, source)
                os.symlink(source, target)
            except OSError as err:
                log.error("Failed to create link %s -> %s: %s", target, source, err)
                continue
            created.append(target)
        return created

    def remove_stale_links(self, previous_links: SymlinkCollection) -> list[str]:
        """Remove previously installed links that are no longer mapped."""
        removed: list[str] = []
        for link in previous_links:
            if link in self._mapping:
                continue
            if not self._can_be_safely_removed(link):
                log.info(
                    "%s appears to have been modified externally. Skipping removal to avoid data loss.",
                    link,
                )
                continue
            log.info("Removing link %s", link)
            try:
                os.unlink(link)
            except FileNotFoundError:
                pass
            except OSError as err:
                log.error("Failed to remove %s: %s", link, err)
                continue
            _cleanup_empty_dirs(os.path.dirname(link), self._target_base)
            removed.append(link)
        return removed

    def _can_be_safely_removed(self, link: str) -> bool:
        if not os.path.lexists(link):
            return True
        if not os.path.islink(link):
            return False
        try:
            return os.readlink(link).startswith(self._source_base)
        except OSError:
            return False

    def _handle_existing(self, target: str, source: str) -> bool:
        mode = os.lstat(target).st_mode
        if stat.S_ISLNK(mode):
            return self._handle_existing_symlink(target, source)
        if stat.S_ISREG(mode):
            return self._handle_existing_file(target, source)
        log.warning("Target %s exists but is not a symlink or a regular file, skipping", target)
        return False

    def _handle_existing_symlink(self, target: str, source: str) -> bool:
        try:
            link_source = os.readlink(target)
        except OSError as err:
            log.error("Failed to read link %s: %s", target, err)
            return False
        if link_source.startswith(self._source_base):
            log.info(
                "Link %s is incorrect (%s) but points to the source directory, replacing silently with %s",
                target, link_source, source,
            )
            return self._replace_with_link(target, source)
        if _is_link_to(source, link_source):
            log.info(
                "Link %s is incorrect (%s) but the dotfile %s is also a symlink to same target, replacing silently",
                target, link_source, source,
            )
            return self._replace_with_link(target, source)
        answer = self._prompt(
            "yN",
            f"Link {target} already exists, but it points to {link_source} instead of {source}. Replace it?",
        )
        if answer == "y":
            return self._replace_with_link(target, source)
        self._skipped.add(target)
        return False

    def _handle_existing_file(self, target: str, source: str) -> bool:
        try:
            source_is_link = os.path.islink(source) or not os.path.lexists(source) and False
            if not os.path.lexists(source):
                raise FileNotFoundError(source)
        except OSError as err:
            log.error("Failed to lstat source file %s: %s", source, err)
            return False
        if source_is_link:
            return self._handle_regular_file_with_symlink_source(target, source)

        try:
            with open(target, "rb") as f:
                target_contents = f.read()
            with open(source, "rb") as f:
                source_contents = f.read()
        except OSError as err:
            log.error("Failed to read %s: %s", err.filename, err)
            return False
        if target_contents == source_contents:
            log.info(
                "File %s exists but its contents are identical to %s, replacing silently", target, source
            )
            return self._replace_with_link(target, source)

        message = (
            f"File {target} already exists, but its contents differ from {source}. Replace it? "
            "(D to see diff, A to adopt changes into dotfiles repo)"
        )
        while True:
            answer = self._prompt("yNda", message)
            if answer == "y":
                return self._replace_with_link(target, source)
            if answer == "n":
                self._skipped.add(target)
                return False
            if answer == "d":
                self._print_diff(source, target)
            elif answer == "a":
                return self._adopt_changes(target, source)

    def _handle_regular_file_with_symlink_source(self, target: str, source: str) -> bool:
        try:
            source_link_target = os.readlink(source)
        except OSError as err:
            log.error("Failed to read symlink target %s: %s", source, err)
            return False
        message = (
            f"File {target} already exists, but it is a regular file and you are trying to replace it "
            f"with a symlink to '{source_link_target}'. Replace it? "
            "(A to adopt the regular file into dotfiles repo)"
        )
        while True:
            answer = self._prompt("yNa", message)
            if answer == "y":
                return self._replace_with_link(target, source)
            if answer == "n":
                self._skipped.add(target)
                return False
            if answer == "a":
                return self._adopt_changes(target, source)

    @staticmethod
    def _replace_with_link(target: str, source: str) -> bool:
        try:
            os.unlink(target)
            os.symlink(source, target)
        except OSError as err:
            log.error("Failed to replace %s with a link to %s: %s", target, source, err)
            return False
        return True

    @staticmethod
    def _adopt_changes(target: str, source: str) -> bool:
        """Move the installed file into the dotfiles repo and link it back."""
        try:
            if os.path.lexists(source):
                os.unlink(source)
            shutil.move(target, source)
            os.symlink(source, target)
        except OSError as err:
            log.error("Failed to adopt %s into %s: %s", target, source, err)
            return False
        log.info("Adopted %s into %s", target, source)
        return True

    @staticmethod
    def _print_diff(left: str, right: str) -> None:
        try:
            with open(left, encoding="utf-8", errors="replace") as f:
                left_lines = f.readlines()
            with open(right, encoding="utf-8", errors="replace") as f:
                right_lines = f.readlines()
        except OSError as err:
            log.info("Could not show diff: %s", err)
            return
        sys.stdout.writelines(difflib.unified_diff(left_lines, right_lines, left, right))
        sys.stdout.flush()