"""Exit codes for the relnotes CLI.

Values are process exit codes and should remain stable:
- 0: Success
- 1: User error (bad arguments)
- 2: Config error (unreadable or invalid config.toml)
- 3: Not found (no release notes for the product)
- 5: I/O error (index or cache unreadable)
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands."""

    OK = 0
    USER_ERROR = 1
    CONFIG_ERROR = 2
    NOT_FOUND = 3
    IO_ERROR = 5

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK
