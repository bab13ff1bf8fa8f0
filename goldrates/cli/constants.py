"""Exit codes shared by CLI commands."""

VALIDATION_EXIT_CODE = 10
RUN_FAILED_EXIT_CODE = 20
SYSTEM_EXIT_CODE = 30

__all__ = ["VALIDATION_EXIT_CODE", "RUN_FAILED_EXIT_CODE", "SYSTEM_EXIT_CODE"]
