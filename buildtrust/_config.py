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
Runtime configuration and logging setup.
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from rich.console import Console
from rich.logging import RichHandler

from buildtrust.errors import InvalidInput

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    """
    Settings shared by every verification performed in one process.
    """

    quiet: bool = False
    """
    Discard the stdout of the external tools instead of streaming it.
    """

    log_level: str = "INFO"
    """
    Level of the `buildtrust` package logger.
    """

    src_dir: Optional[Path] = None
    """
    Directory holding cloned source repositories.
    """

    def __post_init__(self) -> None:
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise InvalidInput(f"invalid log level: {self.log_level}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> Settings:
        """
        Load `Settings` from `BUILDTRUST_QUIET`, `BUILDTRUST_LOGLEVEL` and
        `BUILDTRUST_SRC_DIR`.
        """
        if environ is None:
            environ = os.environ

        src_dir = environ.get("BUILDTRUST_SRC_DIR")
        return cls(
            quiet=environ.get("BUILDTRUST_QUIET", "").strip().lower() in _TRUTHY,
            log_level=environ.get("BUILDTRUST_LOGLEVEL", "INFO").upper(),
            src_dir=Path(src_dir) if src_dir else None,
        )

    def repo_dir(self, repo: Optional[str] = None) -> Path:
        """
        Returns the location of the cloned source repository `repo`.

        Without `repo`, this is the current working directory.
        """
        if not repo:
            return Path(".")
        if self.src_dir is None:
            raise InvalidInput(
                f"cannot locate repository {repo}: BUILDTRUST_SRC_DIR is not set"
            )
        return self.src_dir / repo


def configure_logging(settings: Optional[Settings] = None) -> logging.Logger:
    """
    Route `buildtrust` logs to stderr through `rich`, at the configured level.

    Returns the package logger. Calling this more than once does not stack
    handlers.
    """
    if settings is None:
        settings = Settings.from_env()

    # NOTE: We configure the top package logger, rather than the root logger,
    # to avoid overly verbose logging in third-party code by default.
    package_logger = logging.getLogger("buildtrust")
    package_logger.setLevel(settings.log_level)

    if not any(isinstance(h, RichHandler) for h in package_logger.handlers):
        handler = RichHandler(console=Console(file=sys.stderr))
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
        package_logger.addHandler(handler)

    return package_logger
