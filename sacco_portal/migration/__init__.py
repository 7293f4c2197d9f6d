"""Member data migration."""

from sacco_portal.migration.driver import MigrationDriver, MigrationStep, StepStatus
from sacco_portal.migration.fixtures import get_mock_data
from sacco_portal.migration.orchestrator import DataMigration, MigrationResult

__all__ = [
    "DataMigration",
    "MigrationDriver",
    "MigrationResult",
    "MigrationStep",
    "StepStatus",
    "get_mock_data",
]
