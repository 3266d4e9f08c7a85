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
API for verifying build input signatures.

Example:
```python
from pathlib import Path

from buildtrust.git import GitSpec
from buildtrust.verify import Verifier

verifier = Verifier.from_settings()

verifier.verify_rpm_signature(Path("libfoo-1.0-1.x86_64.rpm"))

verifier.verify_tarball_signature(
    Path("libfoo-1.0.tar.gz"),
    Path("libfoo-1.0.tar.gz.asc"),
    Path("keys/libfoo.pub"),
    error_prefix="libfoo: ",
)

verifier.verify_git_signature(
    Path("keys/libfoo.pub"),
    GitSpec(revision="v1.0", cloned_dir=Path("src/libfoo")),
)
```
"""

from buildtrust.verify.verifier import Verifier

__all__ = [
    "Verifier",
    "verifier",
]
