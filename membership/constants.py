"""Shared constants for the membership reader.

Config keys, defaults and file-format constants used across modules are
defined here. No magic values in other modules; import from here.
"""

# ─── Hosts file format ───────────────────────────────────────────────────────

# A token beginning with this prefix comments out the rest of its line.
COMMENT_PREFIX: str = "#"

# Hosts files are plain text; undecodable bytes are a read failure.
HOSTS_FILE_ENCODING: str = "utf-8"

# ─── Refresh interval ────────────────────────────────────────────────────────

# Refresh interval used when the config does not set one.
# Any value <= 0 means "refresh once at startup, never again".
DEFAULT_REFRESH_SEC: int = -1

# Seconds to wait for the periodic refresh thread to exit on stop().
SCHEDULER_STOP_TIMEOUT_S: float = 5.0

# Name given to the periodic refresh thread (shows up in log entries).
SCHEDULER_THREAD_NAME: str = "hosts-refresh"

# ─── DFS (namenode) config keys ──────────────────────────────────────────────

DFS_HOSTS_KEY: str = "dfs.hosts"
DFS_HOSTS_EXCLUDE_KEY: str = "dfs.hosts.exclude"
DFS_HOSTS_REFRESH_SEC_KEY: str = "dfs.namenode.hosts.reader.refresh.sec"

# ─── MapReduce (jobtracker) config keys ──────────────────────────────────────

MR_HOSTS_KEY: str = "mapreduce.jobtracker.hosts.filename"
MR_HOSTS_EXCLUDE_KEY: str = "mapreduce.jobtracker.hosts.exclude.filename"
MR_HOSTS_REFRESH_SEC_KEY: str = "mapreduce.jobtracker.hosts.reader.refresh.sec"

# ─── Environment overrides ───────────────────────────────────────────────────

# Explicit config file path, tried before the default search paths.
ENV_CONFIG_PATH: str = "MEMBERSHIP_CONFIG"

# Override the active subsystem's include/exclude paths and refresh interval.
ENV_HOSTS_INCLUDE: str = "MEMBERSHIP_HOSTS_INCLUDE"
ENV_HOSTS_EXCLUDE: str = "MEMBERSHIP_HOSTS_EXCLUDE"
ENV_HOSTS_REFRESH_SEC: str = "MEMBERSHIP_HOSTS_REFRESH_SEC"
