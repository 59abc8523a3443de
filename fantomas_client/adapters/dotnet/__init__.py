"""Discovery of Fantomas installs through the dotnet CLI.

- probe.py: VersionProbe (one discovery command, output parsing)
- resolver.py: DotnetToolResolver (local -> global -> PATH fallback)
"""

from fantomas_client.adapters.dotnet.probe import ProbeError, VersionProbe
from fantomas_client.adapters.dotnet.resolver import DotnetToolResolver

__all__ = ["DotnetToolResolver", "ProbeError", "VersionProbe"]
