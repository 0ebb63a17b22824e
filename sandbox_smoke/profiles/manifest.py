"""Profile manifest definition for the plugin system."""

from collections.abc import Sequence
from dataclasses import dataclass

from daytona import AsyncDaytona

from sandbox_smoke.config import ProfileSettings
from sandbox_smoke.orchestrator import SuiteTest


@dataclass(frozen=True, kw_only=True)
class ProfileManifest:
    """Manifest describing a runtime profile.

    A profile pairs the runtime-specific settings with the ordered table of
    test procedures to run under them.
    """

    settings: ProfileSettings
    tests: Sequence[SuiteTest[AsyncDaytona]]

    @property
    def test_names(self) -> Sequence[str]:
        """Names of the profile's tests in run order."""
        return [test.name for test in self.tests]

    def select(self, names: Sequence[str]) -> Sequence[SuiteTest[AsyncDaytona]]:
        """Return the named tests in profile order.

        Raises:
            ValueError: If a name is not part of the profile

        """
        if unknown := sorted(set(names) - set(self.test_names)):
            raise ValueError(
                f"Unknown test(s): {', '.join(unknown)}. "
                f"Available tests: {', '.join(self.test_names)}"
            )
        return [test for test in self.tests if test.name in names]
