"""Fake dotnet and fantomas executables used by the integration tests."""
