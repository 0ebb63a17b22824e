"""Python runtime profile manifest."""

from sandbox_smoke.config import ProfileSettings
from sandbox_smoke.orchestrator import SuiteTest
from sandbox_smoke.profiles.manifest import ProfileManifest
from sandbox_smoke.suites.files import run_file_operations_test, run_git_lsp_test
from sandbox_smoke.suites.images import run_declarative_image_test
from sandbox_smoke.suites.process import (
    run_charts_test,
    run_exec_command_test,
    run_performance_test,
)
from sandbox_smoke.suites.sandbox import (
    run_auto_archive_test,
    run_auto_delete_test,
    run_lifecycle_test,
    run_volumes_test,
)

python_manifest = ProfileManifest(
    settings=ProfileSettings(
        runtime="Python",
        language="python",
        volume_name="my-volume-python",
        snapshot_prefix="python-example",
        session_prefix="python-exec-session",
        labels={"python-test": "true", "runtime": "python"},
    ),
    tests=[
        SuiteTest(name="Volumes Test", procedure=run_volumes_test),
        SuiteTest(name="Lifecycle Test", procedure=run_lifecycle_test),
        SuiteTest(name="File Operations Test", procedure=run_file_operations_test),
        SuiteTest(name="Exec Command Test", procedure=run_exec_command_test),
        SuiteTest(
            name="Declarative Image Test", procedure=run_declarative_image_test
        ),
        SuiteTest(name="Git LSP Test", procedure=run_git_lsp_test),
        SuiteTest(name="Auto Delete Test", procedure=run_auto_delete_test),
        SuiteTest(name="Charts Test", procedure=run_charts_test),
        SuiteTest(name="Auto Archive Test", procedure=run_auto_archive_test),
        SuiteTest(name="Python Performance Test", procedure=run_performance_test),
    ],
)
