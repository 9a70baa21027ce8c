"""Configuration values, glob matching and the scan of the dotfiles directory."""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Iterable
from dataclasses import dataclass, field

from doot.crypt import DOOT_CRYPT_EXT

log = logging.getLogger(__name__)

IGNORE_HIDDEN_FILES_GLOB = "**/.*"


@dataclass
class Config:
    """Settings read from the dotfiles repository."""

    target_dir: str = field(default_factory=lambda: os.path.expanduser("~"))
    implicit_dot: bool = False
    implicit_dot_ignore: list[str] = field(default_factory=list)
    exclude_files: list[str] = field(default_factory=list)
    include_files: list[str] = field(default_factory=list)
    explore_excluded_dirs: bool = False
    hosts: dict[str, str] = field(default_factory=dict)
    diff_command: str = "diff"


def _translate(pattern: str) -> str:
    out: list[str] = []
    depth = 0
    pos = 0
    length = len(pattern)
    while pos < length:
        char = pattern[pos]
        if char == "*":
            if pattern.startswith("**", pos):
                out.append(".*")
                pos += 2
                continue
            out.append("[^/]*")
        elif char == "?":
            out.append("[^/]")
        elif char == "[":
            end = pattern.find("]", pos + 2)
            if end == -1:
                out.append(re.escape(char))
            else:
                body = pattern[pos + 1 : end]
                if body.startswith("!"):
                    body = "^" + body[1:]
                out.append(f"[{body}]")
                pos = end + 1
                continue
        elif char == "{":
            out.append("(?:")
            depth += 1
        elif char == "}" and depth:
            out.append(")")
            depth -= 1
        elif char == "," and depth:
            out.append("|")
        elif char == "\\" and pos + 1 < length:
            out.append(re.escape(pattern[pos + 1]))
            pos += 2
            continue
        else:
            out.append(re.escape(char))
        pos += 1
    if depth:
        raise ValueError(f"unbalanced braces in glob {pattern!r}")
    return "".join(out)


class GlobCollection:
    """A set of glob patterns; ``*`` stops at ``/``, ``**`` crosses it."""

    def __init__(self, patterns: Iterable[str] = ()) -> None:
        self.patterns = list(patterns)
        try:
            self._compiled = [re.compile(_translate(p), re.DOTALL) for p in self.patterns]
        except re.error as err:
            raise ValueError(f"invalid glob pattern: {err}") from err

    def matches(self, path: str) -> bool:
        normalized = path.replace(os.sep, "/")
        return any(regex.fullmatch(normalized) for regex in self._compiled)


@dataclass
class FileFilter:
    """Rules that decide which dotfiles the scan keeps."""

    ignore_hidden: bool = False
    ignore_doot_crypt: bool = False
    explore_excluded_dirs: bool = False
    exclude_globs: GlobCollection = field(default_factory=GlobCollection)
    include_globs: GlobCollection = field(default_factory=GlobCollection)

    def is_excluded(self, path: str, file_name: str, in_excluded_dir: bool) -> bool:
        return (
            in_excluded_dir or self._matches_exclude_pattern(path, file_name)
        ) and not self.include_globs.matches(path)

    def _matches_exclude_pattern(self, path: str, file_name: str) -> bool:
        return (
            (self.ignore_hidden and file_name.startswith("."))
            or (self.ignore_doot_crypt and DOOT_CRYPT_EXT in file_name)
            or self.exclude_globs.matches(path)
        )


def create_filter(config: Config, ignore_doot_crypt: bool) -> FileFilter:
    """Build the scan filter; the hidden-files glob becomes a fast name check."""
    ignore_hidden = IGNORE_HIDDEN_FILES_GLOB in config.exclude_files
    excludes = [p for p in config.exclude_files if p != IGNORE_HIDDEN_FILES_GLOB]
    return FileFilter(
        ignore_hidden=ignore_hidden,
        ignore_doot_crypt=ignore_doot_crypt,
        explore_excluded_dirs=config.explore_excluded_dirs,
        exclude_globs=GlobCollection(excludes),
        include_globs=GlobCollection(config.include_files),
    )


def scan_directory(directory: str, file_filter: FileFilter) -> list[str]:
    """Relative paths of all files below ``directory`` that pass the filter."""
    return list(_scan(directory, "", file_filter, False))


def _scan(scan_path: str, rel_dir: str, file_filter: FileFilter, in_excluded_dir: bool):
    try:
        with os.scandir(scan_path) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as err:
        log.error("Error reading directory %s: %s", scan_path, err)
        return
    for entry in entries:
        rel_path = os.path.join(rel_dir, entry.name) if rel_dir else entry.name
        excluded = file_filter.is_excluded(rel_path, entry.name, in_excluded_dir)
        if excluded and not file_filter.explore_excluded_dirs:
            continue
        if entry.is_dir(follow_symlinks=False):
            yield from _scan(entry.path, rel_path, file_filter, excluded)
        elif not excluded:
            yield rel_path