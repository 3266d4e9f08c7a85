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
Ephemeral, call-scoped GnuPG keyrings.

A keyring produced here holds exactly one public key, the one the caller
supplied, and is never backed by the operator's default keyring: a signature
cannot verify merely because some unrelated key already lives on the system.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from buildtrust._internal.command import CommandRunner, StrPath
from buildtrust.errors import CommandError, ErrorPrefix, KeyringError

_logger = logging.getLogger(__name__)

GPG = "gpg"

KEYRING_PREFIX = "buildtrust-keyring"

KEYRING_NAME = "trustedkeys.gpg"


@dataclass(frozen=True)
class EphemeralKeyring:
    """
    A process-local trust root living in an exclusively owned directory.
    """

    home_dir: Path
    keyring_file: Path

    @property
    def gpg_args(self) -> list[str]:
        """
        Arguments that scope a `gpg` invocation to this keyring only.

        `keyring_file` itself is named once, by the home directory's
        `gpg.conf`: gpg refuses a keyring registered twice.
        """
        return ["--homedir", str(self.home_dir), "--no-default-keyring"]

    @property
    def env(self) -> dict[str, str]:
        """
        An environment for programs (such as `git`) that run `gpg` themselves.

        `GNUPGHOME` points at the keyring's home directory, whose `gpg.conf`
        restricts `gpg` to `keyring_file`.
        """
        env = dict(os.environ)
        env["GNUPGHOME"] = str(self.home_dir)
        return env

    def _write_config(self) -> None:
        conf = self.home_dir / "gpg.conf"
        conf.write_text(f"no-default-keyring\nkeyring {self.keyring_file}\n")


@contextmanager
def ephemeral_keyring(
    runner: CommandRunner,
    public_key: StrPath,
    *,
    error_prefix: ErrorPrefix = ErrorPrefix(""),
) -> Iterator[EphemeralKeyring]:
    """
    A context manager for a fresh keyring holding only `public_key`.

    The keyring's directory is removed when the context exits, whether the
    setup steps or the body of the `with` block succeeded or not.

    Raises `KeyringError` if the directory cannot be allocated or the keyring
    cannot be created or loaded with `public_key`, or if the
    directory cannot be removed after the `with` block succeeded.
    """

    try:
        home_dir = tempfile.mkdtemp(prefix=KEYRING_PREFIX)
    except OSError as exc:
        raise KeyringError(
            f"{error_prefix}Error '{exc}' creating temp dir for keyring"
        ) from exc

    try:
        home = Path(home_dir)
        keyring = EphemeralKeyring(home_dir=home, keyring_file=home / KEYRING_NAME)
        _logger.debug(f"created ephemeral keyring in {home}")

        try:
            keyring._write_config()
            runner.run(GPG, *keyring.gpg_args, "--fingerprint")
        except (CommandError, OSError) as exc:
            raise KeyringError(f"{error_prefix}Error '{exc}' creating keyring") from exc

        try:
            runner.run(GPG, *keyring.gpg_args, "--import", str(public_key))
        except CommandError as exc:
            raise KeyringError(
                f"{error_prefix}Error '{exc}' importing public-key {public_key}"
            ) from exc

        yield keyring
    except BaseException:
        # The failure in flight is the one to report; a removal error is only
        # logged.
        try:
            _remove_home(home_dir)
        except OSError as exc:
            _logger.warning(f"could not remove ephemeral keyring {home_dir}: {exc}")
        raise

    try:
        _remove_home(home_dir)
    except OSError as exc:
        raise KeyringError(
            f"{error_prefix}Error '{exc}' removing keyring in {home_dir}"
        ) from exc


def _remove_home(home_dir: str) -> None:
    shutil.rmtree(home_dir)
    _logger.debug(f"removed ephemeral keyring in {home_dir}")
