"""Port interface for tool resolution."""

from typing import Protocol

from fantomas_client.domain.tooling import Folder, ResolvedTool


class ToolResolver(Protocol):
    """Protocol for locating a compatible Fantomas install for a folder."""

    def resolve(self, folder: Folder) -> ResolvedTool:
        """Find the tool that applies to a folder.

        Args:
            folder: Absolute directory the tool is resolved for.

        Returns:
            The first compatible tool found in fallback order.

        Raises:
            NoCompatibleVersionFound: If every probe failed.
        """
        ...
