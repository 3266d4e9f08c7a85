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
Verification API machinery.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from buildtrust._config import Settings
from buildtrust._internal.command import CommandRunner, StrPath
from buildtrust._internal.keyring import GPG, ephemeral_keyring
from buildtrust.errors import (
    CommandError,
    ErrorPrefix,
    InvalidInput,
    InvalidRevision,
    InvalidSignature,
)
from buildtrust.git import GIT, GitSpec, RevisionType

_logger = logging.getLogger(__name__)

RPM = "rpm"

# NOTE: `rpm -K` can exit 0 while reporting signatures as merely "not
# checked", so success is decided on this literal phrase of its report.
RPM_SUCCESS_MARKER = "digests signatures OK"


def _require_files(error_prefix: ErrorPrefix, **paths: StrPath) -> None:
    for name, path in paths.items():
        if not Path(path).is_file():
            raise InvalidInput(
                f"{error_prefix}{name.replace('_', ' ')} {path} does not exist"
            )


class Verifier:
    """
    The primary API for verification operations.
    """

    def __init__(self, *, runner: Optional[CommandRunner] = None):
        """
        Create a new `Verifier`.

        `runner` runs the external tools; a default, non-quiet
        `CommandRunner` is used when omitted.
        """
        self._runner = runner if runner is not None else CommandRunner()

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> Verifier:
        """
        Return a `Verifier` whose tools honor `settings`, or the settings
        found in the environment when `settings` is omitted.
        """
        if settings is None:
            settings = Settings.from_env()
        return cls(runner=CommandRunner(quiet=settings.quiet))

    def verify_rpm_signature(
        self, rpm_path: StrPath, *, error_prefix: ErrorPrefix = ErrorPrefix("")
    ) -> None:
        """
        Verify that the RPM at `rpm_path` is signed with a key in rpm's own
        keyring, and that its digests and signatures are valid.

        Raises `InvalidSignature` on failure.
        """
        _require_files(error_prefix, rpm=rpm_path)

        try:
            output = self._runner.capture(RPM, "-K", str(rpm_path))
        except CommandError as exc:
            raise InvalidSignature(
                f"{error_prefix}{exc}", exit_code=exc.exit_code
            ) from exc

        if RPM_SUCCESS_MARKER not in output:
            raise InvalidSignature(
                f"{error_prefix}Signature check of {rpm_path} failed. "
                f"rpm -K output:\n{output}"
            )

        _logger.info(f"{rpm_path}: signature OK")

    def verify_tarball_signature(
        self,
        tarball_path: StrPath,
        signature_path: StrPath,
        public_key_path: StrPath,
        *,
        error_prefix: ErrorPrefix = ErrorPrefix(""),
    ) -> None:
        """
        Verify the detached signature `signature_path` of `tarball_path`
        against `public_key_path`, and only that key.

        Raises `KeyringError` if the key cannot be set up and
        `InvalidSignature` if the signature does not verify.
        """
        _require_files(
            error_prefix,
            tarball=tarball_path,
            signature=signature_path,
            public_key=public_key_path,
        )

        with ephemeral_keyring(
            self._runner, public_key_path, error_prefix=error_prefix
        ) as keyring:
            try:
                self._runner.capture(
                    GPG,
                    *keyring.gpg_args,
                    "--verify",
                    str(signature_path),
                    str(tarball_path),
                )
            except CommandError as exc:
                raise InvalidSignature(
                    f"{error_prefix}Error verifying signature {signature_path} "
                    f"for tarball {tarball_path} with pubkey {public_key_path}."
                    f"\ngpg --verify err: {exc}stdout:{exc.stdout}",
                    exit_code=exc.exit_code,
                ) from exc

        _logger.info(f"{tarball_path}: signature OK")

    def verify_git_signature(
        self,
        public_key_path: StrPath,
        git_spec: GitSpec,
        *,
        error_prefix: ErrorPrefix = ErrorPrefix(""),
    ) -> None:
        """
        Verify that the commit or tag `git_spec.revision` is signed with
        `public_key_path`, and only that key.

        Verification runs inside `git_spec.cloned_dir`. Raises
        `InvalidRevision` if the revision is neither a commit nor a tag,
        `KeyringError` if the key cannot be set up, and `InvalidSignature` if
        the signature does not verify.
        """
        _require_files(error_prefix, public_key=public_key_path)

        revision = git_spec.revision
        if not revision:
            raise InvalidRevision(f"{error_prefix}empty git revision provided")

        with ephemeral_keyring(
            self._runner, public_key_path, error_prefix=error_prefix
        ) as keyring:
            try:
                revision_type = git_spec.revision_type(self._runner)
            except InvalidRevision as exc:
                raise InvalidRevision(
                    f"{error_prefix}invalid revision {revision} provided, "
                    "provide either a COMMIT or TAG"
                ) from exc

            if revision_type is RevisionType.COMMIT:
                verify_cmd = ["verify-commit", "-v", revision]
            else:
                verify_cmd = ["verify-tag", "-v", revision]

            cloned_dir = git_spec.cloned_dir
            try:
                self._runner.run_in(cloned_dir, GIT, *verify_cmd, env=keyring.env)
            except CommandError as exc:
                raise InvalidSignature(
                    f"{error_prefix}error during verifying git repo at "
                    f"{cloned_dir}: {exc}",
                    exit_code=exc.exit_code,
                ) from exc

        _logger.info(f"{cloned_dir}: {revision_type.value} {revision} signature OK")
