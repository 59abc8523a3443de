"""Process-lifetime cache of resolved tools and running daemons.

Maps a folder to the tool resolved for it, and a tool version to the one
daemon running that version. Folders that resolve to the same version
share a daemon.

Concurrency contract:
    Both maps are guarded by one lock that is never held across a probe or
    a spawn. Resolution is serialized per folder and spawning per version
    with per-key locks, so simultaneous first use of a folder (or of a
    version) runs one probe sequence and starts one process.

    clear_all bumps a generation counter. A resolution or spawn that began
    before the clear is not written back: the resolution is returned
    uncached, and the daemon is stopped and its launch reported as failed.
"""

import logging
import threading
from collections.abc import Callable, Hashable
from typing import TypeVar

from fantomas_client.domain.exceptions import DaemonLaunchError
from fantomas_client.domain.tooling import Folder, ResolvedTool, StartMethod, ToolVersion
from fantomas_client.ports.daemon import FormattingDaemon
from fantomas_client.ports.resolver import ToolResolver

logger = logging.getLogger(__name__)

DaemonFactory = Callable[[StartMethod], FormattingDaemon]

K = TypeVar("K", bound=Hashable)


class DaemonRegistry:
    """Owner of every cached ResolvedTool and running daemon.

    The raw maps are never handed out; callers use get_or_create_daemon,
    evict and clear_all.
    """

    def __init__(self, resolver: ToolResolver, daemon_factory: DaemonFactory) -> None:
        """Initialize an empty registry.

        Args:
            resolver: Resolves a folder to a tool on cache miss.
            daemon_factory: Starts a daemon for a start method. Must raise
                DaemonLaunchError on failure.
        """
        self._resolver = resolver
        self._daemon_factory = daemon_factory

        self._lock = threading.Lock()
        self._folder_to_tool: dict[Folder, ResolvedTool] = {}
        self._version_to_daemon: dict[ToolVersion, FormattingDaemon] = {}
        self._folder_locks: dict[Folder, threading.Lock] = {}
        self._version_locks: dict[ToolVersion, threading.Lock] = {}
        self._generation = 0

    def __enter__(self) -> "DaemonRegistry":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.clear_all()

    @property
    def cached_folders(self) -> frozenset[Folder]:
        """Snapshot of folders with a cached resolution."""
        with self._lock:
            return frozenset(self._folder_to_tool)

    @property
    def running_versions(self) -> frozenset[ToolVersion]:
        """Snapshot of versions with a cached daemon."""
        with self._lock:
            return frozenset(self._version_to_daemon)

    def get_or_create_daemon(self, folder: Folder) -> FormattingDaemon:
        """Return the daemon serving a folder, resolving and starting it if needed.

        Args:
            folder: Folder of the file being formatted.

        Returns:
            The cached or newly started daemon for the folder's tool version.

        Raises:
            NoCompatibleVersionFound: If resolution fails (nothing is cached).
            DaemonLaunchError: If the daemon cannot be started (nothing is cached).
        """
        resolved = self._resolve(folder)
        return self._daemon_for(resolved)

    def evict(self, daemon: FormattingDaemon) -> None:
        """Drop a broken daemon so the next request starts a fresh one.

        Only this exact instance is removed; a replacement that is already
        cached is left alone. The folder resolution stays cached.
        """
        with self._lock:
            versions = [v for v, d in self._version_to_daemon.items() if d is daemon]
            for version in versions:
                del self._version_to_daemon[version]

        if versions:
            logger.info(f"Evicting Fantomas daemon for version {versions[0]}")
        daemon.close()

    def clear_all(self) -> None:
        """Stop every daemon and empty both caches.

        Safe to call at any time. Requests still in flight against a stopped
        daemon fail with DaemonTransportError.
        """
        with self._lock:
            self._generation += 1
            daemons = list(self._version_to_daemon.items())
            self._version_to_daemon.clear()
            self._folder_to_tool.clear()
            self._folder_locks.clear()
            self._version_locks.clear()

        for version, daemon in daemons:
            try:
                daemon.close()
            except Exception:
                # Keep tearing down the remaining daemons
                logger.exception(f"Failed to stop Fantomas daemon for version {version}")

        if daemons:
            logger.info(f"Stopped {len(daemons)} Fantomas daemon(s)")

    # ------------------------------------------------------------------

    def _key_lock(self, locks: dict[K, threading.Lock], key: K) -> threading.Lock:
        with self._lock:
            return locks.setdefault(key, threading.Lock())

    def _resolve(self, folder: Folder) -> ResolvedTool:
        with self._lock:
            generation = self._generation
            cached = self._folder_to_tool.get(folder)
        if cached is not None:
            return cached

        with self._key_lock(self._folder_locks, folder):
            with self._lock:
                cached = self._folder_to_tool.get(folder)
            if cached is not None:
                return cached

            resolved = self._resolver.resolve(folder)
            with self._lock:
                current = self._generation == generation
                if current:
                    self._folder_to_tool[folder] = resolved
            if not current:
                logger.debug(f"Cache cleared while resolving {folder}; result not cached")
            return resolved

    def _daemon_for(self, resolved: ResolvedTool) -> FormattingDaemon:
        version = resolved.version
        with self._lock:
            generation = self._generation
            daemon = self._version_to_daemon.get(version)
        if daemon is not None and daemon.is_alive:
            return daemon

        with self._key_lock(self._version_locks, version):
            stale = None
            with self._lock:
                daemon = self._version_to_daemon.get(version)
                if daemon is not None and not daemon.is_alive:
                    stale = self._version_to_daemon.pop(version)
                    daemon = None
            if daemon is not None:
                return daemon

            if stale is not None:
                logger.warning(f"Fantomas daemon for version {version} died, starting a new one")
                stale.close()

            # A resolution can be cached without a daemon (first use, eviction,
            # or a clear racing a request); all start a daemon for the version.
            daemon = self._daemon_factory(resolved.start_method)
            with self._lock:
                current = self._generation == generation
                if current:
                    self._version_to_daemon[version] = daemon
            if not current:
                daemon.close()
                raise DaemonLaunchError(
                    f"cache was cleared while the daemon for version {version} was starting"
                )
            return daemon
