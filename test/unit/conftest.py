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

from __future__ import annotations

from pathlib import Path

import pretend
import pytest

from buildtrust.errors import CommandError


class FakeRunner:
    """
    A `CommandRunner` stand-in that records every invocation.

    `responses` maps a (program, first argument) pair to either the text that
    `capture` returns or an exception to raise. Unmatched `run` calls succeed;
    unmatched `capture` calls return an empty string.
    """

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.calls = []
        self.quiet = False

    def _respond(self, program, args):
        key = (program, _verb(args))
        response = self.responses.get(key, "")
        if isinstance(response, Exception):
            raise response
        return response

    def run(self, program, *args, cwd=None, env=None):
        self.calls.append(pretend.call(program, *args, cwd=cwd, env=env))
        self._respond(program, args)

    def run_in(self, work_dir, program, *args, env=None):
        self.run(program, *args, cwd=work_dir, env=env)

    def capture(self, program, *args, cwd=None, env=None):
        self.calls.append(pretend.call(program, *args, cwd=cwd, env=env))
        return self._respond(program, args)

    def verbs(self, program):
        return [_verb(c.args[1:]) for c in self.calls if c.args[0] == program]


def _verb(args):
    # git and rpm lead with their verb or flag; gpg invocations lead with
    # keyring scoping flags, and the verb follows them.
    if args and (not args[0].startswith("-") or args[0] == "-K"):
        return args[0]
    for arg in args:
        if arg in ("--fingerprint", "--import", "--verify"):
            return arg
    return args[0] if args else None


@pytest.fixture
def fake_runner():
    return FakeRunner


@pytest.fixture
def command_error():
    def _command_error(program="tool", *args, exit_code=1, stdout="", stderr="boom"):
        return CommandError(
            program, list(args), exit_code=exit_code, stdout=stdout, stderr=stderr
        )

    return _command_error


@pytest.fixture
def keyring_tmpdir(tmp_path, monkeypatch):
    """
    Redirects temporary directories into a per-test location, so tests can
    assert that no keyring directory outlives a verification.
    """
    root = tmp_path / "tmp"
    root.mkdir()
    monkeypatch.setattr("tempfile.tempdir", str(root))
    return root


@pytest.fixture
def artifacts(tmp_path) -> dict[str, Path]:
    files = {
        "tarball": tmp_path / "libfoo-1.0.tar.gz",
        "signature": tmp_path / "libfoo-1.0.tar.gz.asc",
        "public_key": tmp_path / "libfoo.pub",
        "rpm": tmp_path / "libfoo-1.0-1.x86_64.rpm",
    }
    for path in files.values():
        path.write_bytes(b"placeholder")
    return files
