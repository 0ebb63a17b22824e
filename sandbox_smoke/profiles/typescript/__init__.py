"""TypeScript runtime profile module."""

from sandbox_smoke.profiles.typescript.manifest import typescript_manifest

__all__ = ["typescript_manifest"]
