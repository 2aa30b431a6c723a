"""Subsystem hosts reader initialization.

The DFS namenode and the MapReduce jobtracker read the same kind of hosts
files under different config keys. HostsKeys names those keys; one
initialize_reader() call wires a MembershipStore and RefreshScheduler from
any ConfigSource using a given key set.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from membership.config import Config, ConfigSource
from membership.constants import (
    DEFAULT_REFRESH_SEC,
    DFS_HOSTS_EXCLUDE_KEY,
    DFS_HOSTS_KEY,
    DFS_HOSTS_REFRESH_SEC_KEY,
    ENV_HOSTS_EXCLUDE,
    ENV_HOSTS_INCLUDE,
    ENV_HOSTS_REFRESH_SEC,
    MR_HOSTS_EXCLUDE_KEY,
    MR_HOSTS_KEY,
    MR_HOSTS_REFRESH_SEC_KEY,
)
from membership.hosts.scheduler import NotificationTarget, RefreshScheduler
from membership.hosts.store import MembershipStore
from membership.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class HostsKeys:
    """Config keys one subsystem uses for its hosts files."""

    name: str
    include_key: str
    exclude_key: str
    refresh_sec_key: str
    refresh_sec_default: int = DEFAULT_REFRESH_SEC


DFS_KEYS = HostsKeys(
    name="dfs",
    include_key=DFS_HOSTS_KEY,
    exclude_key=DFS_HOSTS_EXCLUDE_KEY,
    refresh_sec_key=DFS_HOSTS_REFRESH_SEC_KEY,
)

MR_KEYS = HostsKeys(
    name="mapreduce",
    include_key=MR_HOSTS_KEY,
    exclude_key=MR_HOSTS_EXCLUDE_KEY,
    refresh_sec_key=MR_HOSTS_REFRESH_SEC_KEY,
)

SUBSYSTEM_KEYS: dict[str, HostsKeys] = {keys.name: keys for keys in (DFS_KEYS, MR_KEYS)}


def apply_env_overrides(config: Config, keys: HostsKeys) -> None:
    """Apply MEMBERSHIP_HOSTS_* environment overrides to ``config`` in-place.

    Environment values always win over the config file for the active
    subsystem's keys. An empty MEMBERSHIP_HOSTS_INCLUDE / _EXCLUDE disables
    that file.
    """
    overrides = {
        ENV_HOSTS_INCLUDE: keys.include_key,
        ENV_HOSTS_EXCLUDE: keys.exclude_key,
        ENV_HOSTS_REFRESH_SEC: keys.refresh_sec_key,
    }
    for env_name, key in overrides.items():
        value = os.environ.get(env_name)
        if value is not None:
            logger.debug("Config overridden from environment", key=key, env=env_name)
            config.set(key, value)


def initialize_reader(
    config: ConfigSource,
    keys: HostsKeys,
    target: NotificationTarget,
    store: Optional[MembershipStore] = None,
) -> RefreshScheduler:
    """Configure, initialize and load a hosts reader for one subsystem.

    A refresh interval <= 0 loads the files once; a positive interval also
    starts periodic refresh, notifying ``target`` whenever membership changes.

    Returns:
        The scheduler wrapping the initialized store (``scheduler.store``).

    Raises:
        HostsFileReadError: an existing hosts file could not be read.
        ConfigError: the refresh interval is not an integer.
    """
    store = store if store is not None else MembershipStore()
    store.configure(
        config.get_string(keys.include_key, ""),
        config.get_string(keys.exclude_key, ""),
    )
    store.mark_initialized()

    refresh_sec = config.get_int(keys.refresh_sec_key, keys.refresh_sec_default)
    scheduler = RefreshScheduler(store)
    scheduler.select_and_refresh(target, refresh_sec)
    logger.info(
        "Hosts reader initialized",
        subsystem=keys.name,
        refresh_sec=refresh_sec,
        includes=len(store.get_hosts()),
        excludes=len(store.get_excluded_hosts()),
    )
    return scheduler
