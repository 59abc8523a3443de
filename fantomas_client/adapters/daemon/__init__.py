"""Daemon process adapter for the Fantomas formatting engine.

This package starts `fantomas --daemon` and talks to it over stdio.

Architecture:
- protocol.py: JSON-RPC messages and Content-Length framing
- launch.py: Start method to command line
- client.py: DaemonProcess (spawn, handshake, correlated requests, teardown)
- timeouts.py: Timeout defaults
"""

from fantomas_client.adapters.daemon.client import DaemonProcess

__all__ = ["DaemonProcess"]
