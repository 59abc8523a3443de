"""Fallback-based Fantomas resolution: local manifest, global tool, PATH."""

import logging

from fantomas_client.adapters.dotnet.probe import ProbeError, ProbeHit, VersionProbe
from fantomas_client.domain.exceptions import NoCompatibleVersionFound
from fantomas_client.domain.tooling import (
    MINIMUM_VERSION,
    Folder,
    GlobalTool,
    LocalTool,
    ProbeKind,
    ResolvedTool,
    StartMethod,
    ToolOnPath,
    ToolVersion,
)

logger = logging.getLogger(__name__)

RESOLUTION_ORDER: tuple[ProbeKind, ...] = (ProbeKind.LOCAL, ProbeKind.GLOBAL, ProbeKind.PATH)


def _start_method_for(kind: ProbeKind, folder: Folder, hit: ProbeHit) -> StartMethod:
    if kind is ProbeKind.LOCAL:
        return LocalTool(working_directory=folder)
    if kind is ProbeKind.GLOBAL:
        return GlobalTool()
    if hit.executable is None:
        raise ProbeError("Path probe did not report an executable.")
    return ToolOnPath(executable_path=hit.executable)


def _compatible_version(hit: ProbeHit, kind: ProbeKind) -> ToolVersion:
    """Parse the probe's version and enforce the minimum version.

    Raises:
        ProbeError: If the version is unparseable or too old.
    """
    try:
        version = ToolVersion.parse(hit.version)
    except ValueError as e:
        raise ProbeError(
            f"Could not parse version '{hit.version}' from {kind.value} probe: {e}"
        ) from e

    if not version.is_compatible():
        raise ProbeError(
            f"Could not find any compatible install of fantomas or fantomas-tool, "
            f"got {hit.version} for {kind.value} list (minimum {MINIMUM_VERSION})."
        )
    return version


class DotnetToolResolver:
    """Resolves the Fantomas install that applies to a folder.

    Probes run strictly in order and stop at the first compatible version.
    Individual probe failures are logged and discarded; callers only see
    NoCompatibleVersionFound. No caching happens here.
    """

    def __init__(
        self,
        probe: VersionProbe,
        order: tuple[ProbeKind, ...] = RESOLUTION_ORDER,
    ) -> None:
        self.probe = probe
        self.order = order

    def resolve(self, folder: Folder) -> ResolvedTool:
        """Find a compatible tool for a folder.

        Args:
            folder: Absolute directory to resolve for.

        Returns:
            ResolvedTool from the first successful probe.

        Raises:
            NoCompatibleVersionFound: If every probe failed.
        """
        for kind in self.order:
            try:
                hit = self.probe.run(kind, folder)
                version = _compatible_version(hit, kind)
                start_method = _start_method_for(kind, folder, hit)
            except ProbeError as e:
                logger.warning(f"{kind.value} probe for {folder}: {e.message}")
                continue

            logger.info(f"Resolved Fantomas {version} for {folder} via {kind.value} probe")
            return ResolvedTool(version=version, start_method=start_method)

        logger.error(f"No compatible Fantomas version found for {folder}")
        raise NoCompatibleVersionFound(str(folder))
