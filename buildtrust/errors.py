# Copyright 2026 The buildtrust Authors
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#      http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Exceptions.
"""

from __future__ import annotations

import sys
from logging import Logger
from typing import NewType, Optional, Sequence

ErrorPrefix = NewType("ErrorPrefix", str)
"""
A newtype for `str` objects that are prepended, unmodified, to every failure
message of a single verification attempt. Lets a multi-stage build pipeline
attribute an error to its stage.
"""


class Error(Exception):
    """Base buildtrust exception type. Defines helpers for diagnostics."""

    def diagnostics(self) -> str:
        """Returns human-friendly error information."""

        cause_ctx = (
            f"""

        Additional context:

        {self.__cause__}
        """
            if self.__cause__
            else ""
        )

        return str(self) + cause_ctx

    def log_and_exit(self, logger: Logger, raise_error: bool = False) -> None:
        """Prints all relevant error information to stderr and exits."""

        remind_verbose = (
            "Raising original exception:"
            if raise_error
            else "For detailed error information, set BUILDTRUST_LOGLEVEL=DEBUG."
        )

        logger.error(f"{self.diagnostics()}\n{remind_verbose}")

        if raise_error:
            # don't want "during handling another exception"
            self.__suppress_context__ = True
            raise self

        sys.exit(1)


class CommandError(Error):
    """
    Raised when an external program exits nonzero or cannot be started.
    """

    def __init__(
        self,
        program: str,
        args: Sequence[str],
        *,
        exit_code: Optional[int] = None,
        stdout: str = "",
        stderr: str = "",
        reason: Optional[str] = None,
    ):
        """
        Constructs a `CommandError`.

        `exit_code` is `None` when the program never ran, in which case
        `reason` describes why.
        """
        self.program = program
        self.arguments = list(args)
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr

        command = " ".join([program, *self.arguments])
        if exit_code is None:
            message = f"Running '{command}' failed with '{reason}'"
        else:
            message = f"Running '{command}': exited with exit-code {exit_code}"
            if stderr:
                message += f"\nstderr:\n{stderr}"
        super().__init__(message)

    def diagnostics(self) -> str:
        """Returns the failure along with any captured stdout."""
        if self.stdout:
            return f"{self}\nstdout:\n{self.stdout}"
        return str(self)


class VerificationError(Error):
    """
    Raised whenever any phase of artifact verification fails.
    """


class InvalidInput(VerificationError):
    """
    Raised when a verification request is malformed, before any external
    program is run.
    """


class InvalidRevision(InvalidInput):
    """
    Raised when a git revision is empty, malformed, or names neither a commit
    nor a tag.
    """


class KeyringError(VerificationError):
    """
    Raised when the ephemeral keyring cannot be allocated, created, or loaded
    with the trusted public key.
    """

    def diagnostics(self) -> str:
        """Returns diagnostics for the error."""

        return (
            super().diagnostics()
            + """
        No verification was attempted: the trusted public key could not be
        set up in an isolated keyring.
        """
        )


class InvalidSignature(VerificationError):
    """
    Raised when a verifier ran but did not establish a valid, trusted
    signature.
    """

    def __init__(self, message: str, *, exit_code: Optional[int] = None):
        """
        Constructs an `InvalidSignature`.

        `exit_code` is the verifying tool's exit code, when it exited nonzero.
        """
        super().__init__(message)
        self.exit_code = exit_code
