"""Loading of runtime profiles from entry points."""

import logging
from importlib.metadata import entry_points

from sandbox_smoke.profiles.manifest import ProfileManifest

log = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "sandbox_smoke.profiles"


class ProfileNotFoundError(Exception):
    """Raised when no profile is registered under a key."""


class InvalidProfileError(Exception):
    """Raised when an entry point does not resolve to a ProfileManifest."""


def available_profiles() -> list[str]:
    """Return the keys of all registered profiles, sorted."""
    return sorted(entry.name for entry in entry_points(group=ENTRY_POINT_GROUP))


def load_profile_manifest(key: str) -> ProfileManifest:
    """Resolve a profile key to its manifest.

    Args:
        key: Entry point name under the ``sandbox_smoke.profiles`` group
             (e.g., "typescript", "python")

    Raises:
        ProfileNotFoundError: If nothing is registered under the key
        InvalidProfileError: If the entry point resolves to another object

    """
    matches = entry_points(group=ENTRY_POINT_GROUP, name=key)
    if not matches:
        raise ProfileNotFoundError(
            f"Profile '{key}' not found. Available profiles: {available_profiles()}"
        )

    entry = next(iter(matches))
    manifest = entry.load()
    if not isinstance(manifest, ProfileManifest):
        raise InvalidProfileError(
            f"Entry point '{entry.value}' is not a ProfileManifest"
        )

    log.debug("Loaded profile %s from %s", key, entry.value)
    return manifest
