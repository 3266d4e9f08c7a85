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
Git revisions: classification and stable version tokens.

Example:
```python
from pathlib import Path

from buildtrust._internal.command import CommandRunner
from buildtrust.git import GitSpec

spec = GitSpec(revision="v1.2.0", cloned_dir=Path("src/libfoo"))
print(spec.version(CommandRunner()))
```
"""

from __future__ import annotations

import enum
import logging
import re
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, StrictStr

from buildtrust._internal.command import CommandRunner
from buildtrust.errors import CommandError, InvalidRevision

_logger = logging.getLogger(__name__)

GIT = "git"

# git accepts abbreviations down to 4 hex digits; full object names are 40
# (SHA-1) or 64 (SHA-256) digits.
_OBJECT_NAME = re.compile(r"[0-9a-fA-F]{4,64}")


class RevisionType(enum.Enum):
    """
    What a git revision names.
    """

    COMMIT = "commit"
    TAG = "tag"


def abbreviate_commit(revision: str, short_length: int) -> str:
    """
    Returns `revision` cut down to at most `short_length` characters.

    Hashes already at or below `short_length` are returned unchanged.
    """
    if short_length < 1:
        raise ValueError(f"invalid short hash length: {short_length}")
    if not revision:
        raise InvalidRevision("cannot abbreviate an empty commit hash")

    return revision[:short_length]


class GitSpec(BaseModel, frozen=True):
    """
    Identifies a git revision inside a local clone.
    """

    revision: StrictStr
    """
    A commit hash (short or full) or a tag name.
    """

    cloned_dir: Path
    """
    A working copy that already contains `revision`.
    """

    def revision_type(self, runner: CommandRunner) -> RevisionType:
        """
        Classify `revision` as a commit or a tag.

        Annotated tags are recognized by their object type, lightweight tags
        by their ref under `refs/tags/`. Raises `InvalidRevision` for anything
        else, including revisions unknown to the repository.
        """
        if not self.revision:
            raise InvalidRevision("empty git revision")

        try:
            object_type = runner.capture(
                GIT, "cat-file", "-t", self.revision, cwd=self.cloned_dir
            ).strip()
        except CommandError as exc:
            raise InvalidRevision(
                f"cannot inspect revision {self.revision} in {self.cloned_dir}"
            ) from exc

        _logger.debug(f"{self.revision} is a {object_type} object")

        if object_type == "tag":
            return RevisionType.TAG

        if object_type == "commit":
            if self._is_tag_ref(runner):
                return RevisionType.TAG
            if _OBJECT_NAME.fullmatch(self.revision) is None:
                raise InvalidRevision(
                    f"revision {self.revision} is neither a commit hash nor a tag"
                )
            return RevisionType.COMMIT

        raise InvalidRevision(
            f"revision {self.revision} is a {object_type or 'unknown'} object, "
            "not a commit or a tag"
        )

    def _is_tag_ref(self, runner: CommandRunner) -> bool:
        try:
            runner.capture(
                GIT,
                "show-ref",
                "--verify",
                "--quiet",
                f"refs/tags/{self.revision}",
                cwd=self.cloned_dir,
            )
        except CommandError:
            return False
        return True

    def abbreviated_length(self, runner: CommandRunner) -> int:
        """
        Returns the repository's own length for short commit identifiers.
        """
        short = runner.capture(
            GIT, "rev-parse", "--short", self.revision, cwd=self.cloned_dir
        ).strip()
        if not short:
            raise InvalidRevision(
                f"git could not abbreviate revision {self.revision}"
            )
        return len(short)

    def version(
        self, runner: CommandRunner, *, short_length: Optional[int] = None
    ) -> str:
        """
        Returns a short, stable version token for `revision`.

        Tags are returned as-is. Commits are abbreviated to `short_length`
        characters, or to the repository's own short length when
        `short_length` is not given.
        """
        if self.revision_type(runner) is RevisionType.TAG:
            return self.revision

        if short_length is None:
            try:
                short_length = self.abbreviated_length(runner)
            except CommandError as exc:
                raise InvalidRevision(
                    f"cannot abbreviate revision {self.revision}"
                ) from exc

        return abbreviate_commit(self.revision, short_length)
