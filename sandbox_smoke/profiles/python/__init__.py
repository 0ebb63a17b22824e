"""Python runtime profile module."""

from sandbox_smoke.profiles.python.manifest import python_manifest

__all__ = ["python_manifest"]
