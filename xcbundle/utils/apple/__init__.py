#
# Copyright 2024 zhlinh and ccgo Project Authors. All rights reserved.
# Use of this source code is governed by a MIT-style
# license that can be found at
#
# https://opensource.org/license/MIT
#
# The above copyright notice and this permission
# notice shall be included in all copies or
# substantial portions of the Software.

"""Apple XCFramework assembly utilities for xcbundle."""

from .errors import (
    XCFrameworkError,
    ConfigError,
    VersionFormatError,
    ArtifactNotFoundError,
    PlistEditError,
    ToolError,
    ArtifactError,
)
from .platforms import PlatformDescriptor, expand_platforms, get_platform
from .symbols import ArchiveResult, extract_archive_result
from .manifest import BundleManifest, LibraryEntry, generate_manifest
from .config import XCFrameworkConfig, ValidationError

__all__ = [
    'XCFrameworkError', 'ConfigError', 'VersionFormatError',
    'ArtifactNotFoundError', 'PlistEditError', 'ToolError', 'ArtifactError',
    'PlatformDescriptor', 'expand_platforms', 'get_platform',
    'ArchiveResult', 'extract_archive_result',
    'BundleManifest', 'LibraryEntry', 'generate_manifest',
    'XCFrameworkConfig', 'ValidationError',
]
