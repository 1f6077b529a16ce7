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

"""
Info.plist manifest of a manually assembled XCFramework.

Mirrors the layout Carthage produces for frameworks built without library
evolution, where xcodebuild -create-xcframework cannot be used.
"""

import plistlib
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .errors import XCFrameworkError
from .platforms import SIMULATOR_VARIANT, get_platform

PACKAGE_TYPE = "XFWK"
FORMAT_VERSION = "1.0"
SYMBOL_MAPS_PATH = "BCSymbolMaps"
DEBUG_SYMBOLS_PATH = "dSYMs"
FRAMEWORK_EXTENSION = ".framework"
MANIFEST_FILE_NAME = "Info.plist"


@dataclass(frozen=True)
class LibraryEntry:
    """One AvailableLibraries row of the XCFramework Info.plist."""
    library_identifier: str
    library_path: str
    supported_platform: str
    supported_architectures: Tuple[str, ...]
    supported_platform_variant: Optional[str] = None
    debug_symbols_path: Optional[str] = DEBUG_SYMBOLS_PATH
    symbol_maps_path: Optional[str] = None

    def to_plist(self) -> Dict[str, Any]:
        entry = {}
        if self.symbol_maps_path is not None:
            entry["BitcodeSymbolMapsPath"] = self.symbol_maps_path
        if self.debug_symbols_path is not None:
            entry["DebugSymbolsPath"] = self.debug_symbols_path
        entry["LibraryIdentifier"] = self.library_identifier
        entry["LibraryPath"] = self.library_path
        entry["SupportedArchitectures"] = list(self.supported_architectures)
        entry["SupportedPlatform"] = self.supported_platform
        if self.supported_platform_variant is not None:
            entry["SupportedPlatformVariant"] = self.supported_platform_variant
        return entry


@dataclass(frozen=True)
class BundleManifest:
    libraries: Tuple[LibraryEntry, ...]
    package_type: str = PACKAGE_TYPE
    format_version: str = FORMAT_VERSION

    def to_plist(self) -> Dict[str, Any]:
        return {
            "AvailableLibraries": [library.to_plist() for library in self.libraries],
            "CFBundlePackageType": self.package_type,
            "XCFrameworkFormatVersion": self.format_version,
        }

    def dumps(self) -> bytes:
        return plistlib.dumps(self.to_plist(), fmt=plistlib.FMT_XML)

    def write(self, path: str):
        with open(path, "wb") as f:
            f.write(self.dumps())


def make_library_entry(platform: str, result, framework_name: str) -> LibraryEntry:
    descriptor = get_platform(platform)
    library_identifier = descriptor.library_identifier
    # The debug symbols path is listed even when the archive had no dSYM
    return LibraryEntry(
        library_identifier=library_identifier,
        library_path=f"{framework_name}{FRAMEWORK_EXTENSION}",
        supported_platform=descriptor.supported_platform,
        supported_architectures=descriptor.architectures,
        supported_platform_variant=(
            SIMULATOR_VARIANT if library_identifier.endswith(SIMULATOR_VARIANT) else None
        ),
        debug_symbols_path=DEBUG_SYMBOLS_PATH,
        symbol_maps_path=SYMBOL_MAPS_PATH if result.symbol_maps else None,
    )


def generate_manifest(results: Mapping[str, Any], framework_name: str) -> BundleManifest:
    """
    Build the manifest from the per-platform archive results.

    Args:
        results: Ordered mapping of platform key to ArchiveResult
        framework_name: Name of the framework bundle without extension

    Returns:
        BundleManifest with one entry per platform, in the mapping's order

    Raises:
        XCFrameworkError: two platforms share a library identifier
    """
    libraries: List[LibraryEntry] = []
    seen = set()
    for platform, result in results.items():
        entry = make_library_entry(platform, result, framework_name)
        if entry.library_identifier in seen:
            raise XCFrameworkError(
                f"Duplicate library identifier '{entry.library_identifier}' for platform {platform}"
            )
        seen.add(entry.library_identifier)
        libraries.append(entry)
    return BundleManifest(libraries=tuple(libraries))
