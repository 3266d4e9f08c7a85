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

import shutil

import pytest


def _has_tools():
    return shutil.which("gpg") is not None and shutil.which("git") is not None


def pytest_addoption(parser):
    parser.addoption(
        "--skip-tools",
        action="store_true",
        help="skip tests that run the real gpg and git executables",
    )


def pytest_runtest_setup(item):
    if "tools" not in item.keywords:
        return

    if item.config.getoption("--skip-tools"):
        pytest.skip("skipping test that requires gpg and git due to `--skip-tools` flag")
    elif not _has_tools():
        pytest.skip("skipping test that requires gpg and git executables")


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "tools: mark test as requiring the gpg and git executables"
    )
