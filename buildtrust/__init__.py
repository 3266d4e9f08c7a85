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
The `buildtrust` Python APIs.

`buildtrust` establishes trust in retrieved build inputs (RPM packages,
source tarballs and git revisions) before a build pipeline consumes them.

Here are some quick starting points:

* `buildtrust.verify`: signature checks for RPMs, tarballs and git revisions
* `buildtrust.git`: revision classification and stable version tokens
"""

from buildtrust._version import __version__

__all__ = ["__version__"]
