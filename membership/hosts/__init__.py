"""Hosts include/exclude lists.

Public API:
    MembershipStore     — loads and refreshes the include/exclude host sets
    RefreshScheduler    — one-shot or periodic refresh with node notifications
    NotificationTarget  — protocol for the refresh_nodes() callback
    parse_hosts         — tokenize hosts file lines into a set
"""
from membership.hosts.parser import parse_hosts, read_hosts_file, tokenize_line
from membership.hosts.scheduler import NotificationTarget, RefreshScheduler
from membership.hosts.store import (
    HostsFileReadError,
    MembershipError,
    MembershipStore,
    NotInitializedError,
)

__all__ = [
    "HostsFileReadError",
    "MembershipError",
    "MembershipStore",
    "NotInitializedError",
    "NotificationTarget",
    "RefreshScheduler",
    "parse_hosts",
    "read_hosts_file",
    "tokenize_line",
]
