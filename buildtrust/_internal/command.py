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
Execution of the external programs that verification delegates to.
"""

from __future__ import annotations

import logging
import os
import subprocess
from typing import Mapping, Optional, Union

from buildtrust.errors import CommandError

_logger = logging.getLogger(__name__)

StrPath = Union[str, "os.PathLike[str]"]


class CommandRunner:
    """
    Runs external programs on behalf of the verification APIs.

    Output routing is fixed at construction: a quiet runner discards the
    child's stdout, a regular one lets it through. stderr always reaches the
    caller's stderr, so a tool's own diagnostics are never lost.
    """

    def __init__(self, *, quiet: bool = False):
        """
        Create a new `CommandRunner`.

        `quiet` discards the stdout of programs started with `run`/`run_in`.
        It has no effect on `capture`.
        """
        self.quiet = quiet

    def run(
        self,
        program: str,
        *args: str,
        cwd: Optional[StrPath] = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> None:
        """
        Run `program` with `args`, streaming its output.

        Raises `CommandError` if the program exits nonzero or cannot be
        started.
        """
        _logger.debug(f"running {program} {' '.join(args)} (cwd={cwd})")

        stdout = subprocess.DEVNULL if self.quiet else None
        try:
            proc = subprocess.run(
                [program, *args], cwd=cwd, env=env, stdout=stdout, stderr=None
            )
        except OSError as exc:
            raise CommandError(program, args, reason=str(exc)) from exc

        if proc.returncode != 0:
            raise CommandError(program, args, exit_code=proc.returncode)

    def run_in(
        self,
        work_dir: StrPath,
        program: str,
        *args: str,
        env: Optional[Mapping[str, str]] = None,
    ) -> None:
        """
        Like `run`, but with `work_dir` as the working directory.
        """
        self.run(program, *args, cwd=work_dir, env=env)

    def capture(
        self,
        program: str,
        *args: str,
        cwd: Optional[StrPath] = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> str:
        """
        Run `program` with `args` and return its stdout.

        On a nonzero exit the raised `CommandError` embeds the exit code and
        the captured stderr, and keeps the captured stdout for inspection.
        """
        _logger.debug(f"capturing {program} {' '.join(args)} (cwd={cwd})")

        try:
            proc = subprocess.run(
                [program, *args],
                cwd=cwd,
                env=env,
                capture_output=True,
                text=True,
            )
        except OSError as exc:
            raise CommandError(program, args, reason=str(exc)) from exc

        if proc.returncode != 0:
            raise CommandError(
                program,
                args,
                exit_code=proc.returncode,
                stdout=proc.stdout,
                stderr=proc.stderr,
            )

        return proc.stdout
