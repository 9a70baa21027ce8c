"""Decide which dotfiles belong to this host, to other hosts, or to doot itself."""

from __future__ import annotations

import logging
import os
import socket
from dataclasses import dataclass, field

log = logging.getLogger(__name__)

DOOT_INTERNAL_DIR = "doot"


@dataclass(frozen=True)
class HostnameFilter:
    """Prefix rules derived from the ``hosts`` table of the configuration."""

    host_specific_prefix: str | None = None
    ignore_prefixes: tuple[str, ...] = field(default_factory=tuple)

    def host_specific_prefix_len(self, path: str) -> int | None:
        """Length of the host-specific prefix of ``path``, or None if it has none."""
        prefix = self.host_specific_prefix
        if prefix is None or not path.startswith(prefix):
            return None
        return len(prefix)

    def is_ignored(self, path: str) -> bool:
        """True if ``path`` lives in doot's own directory or in another host's directory."""
        return any(path.startswith(prefix) for prefix in self.ignore_prefixes)


def get_hostname() -> str:
    """The current hostname, or an empty string if it cannot be read."""
    try:
        return socket.gethostname()
    except OSError as err:
        log.error("Failed to get hostname: %s", err)
        return ""


def get_hostname_filter(hosts: dict[str, str], hostname: str | None = None) -> HostnameFilter:
    """Build the filter for ``hostname`` (the current host when None)."""
    if hostname is None:
        hostname = get_hostname()

    # The doot directory should never be symlinked.
    ignore = [DOOT_INTERNAL_DIR + os.sep]
    host_prefix = None
    for host, directory in hosts.items():
        dir_prefix = directory + os.sep
        if host == hostname:
            log.info("Using host-specific directory: %s", directory)
            host_prefix = dir_prefix
        else:
            ignore.append(dir_prefix)
    return HostnameFilter(host_specific_prefix=host_prefix, ignore_prefixes=tuple(ignore))