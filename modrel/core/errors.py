"""Process exit codes for the modrel CLI.

The values are part of the command-line contract and must stay stable:
- 0: Success
- 1: User error (bad arguments, unreadable changelog)
- 2: Configuration error (missing credentials, invalid modrel.toml, missing JDK)
- 3: Build error (gradle exited non-zero, daemon could not be stopped)
- 4: Network error (release lookup, creation or asset upload failed)
- 5: I/O error (working copy clone/fetch/pull failed)
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    OK = 0
    USER_ERROR = 1
    CONFIG_ERROR = 2
    BUILD_ERROR = 3
    NETWORK_ERROR = 4
    IO_ERROR = 5

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK
