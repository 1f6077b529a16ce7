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
Locate the framework, dSYM and BCSymbolMaps of one platform archive.

An archive may carry BCSymbolMaps of statically linked dependencies as well,
so only the maps that reference the module's Swift force-load symbol are kept.
"""

import glob
import os
from dataclasses import dataclass
from typing import Optional, Tuple

from .errors import ArtifactNotFoundError

SYMBOL_MAPS_DIR_NAME = "BCSymbolMaps"
SYMBOL_MAP_MARKER_PREFIX = "__swift_FORCE_LOAD_$_swiftFoundation_$_"


@dataclass(frozen=True)
class ArchiveResult:
    """Artifacts of one platform archive that go into the XCFramework."""
    framework: str
    dsym: Optional[str] = None
    symbol_maps: Tuple[str, ...] = ()


def _glob_first(archive_path: str, name: str) -> Optional[str]:
    matches = sorted(glob.glob(os.path.join(glob.escape(archive_path), "**", name), recursive=True))
    return matches[0] if matches else None


def symbol_map_marker(module_name: str) -> str:
    return f"{SYMBOL_MAP_MARKER_PREFIX}{module_name}"


def find_framework(archive_path: str, framework_name: str) -> str:
    framework = _glob_first(archive_path, f"{framework_name}.framework")
    if framework is None:
        raise ArtifactNotFoundError(
            f"No {framework_name}.framework found in {archive_path}"
        )
    return framework


def find_dsym(archive_path: str, framework_name: str) -> Optional[str]:
    return _glob_first(archive_path, f"{framework_name}.framework.dSYM")


def find_symbol_maps(archive_path: str, module_name: str) -> Tuple[str, ...]:
    marker = symbol_map_marker(module_name)
    pattern = os.path.join(glob.escape(archive_path), "**", SYMBOL_MAPS_DIR_NAME, "*")
    symbol_maps = []
    for path in sorted(glob.glob(pattern, recursive=True)):
        if not os.path.isfile(path):
            continue
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            if marker in f.read():
                symbol_maps.append(path)
    return tuple(symbol_maps)


def extract_archive_result(
    archive_path: str, framework_name: str, module_name: Optional[str] = None
) -> ArchiveResult:
    """
    Collect the XCFramework inputs of a single .xcarchive.

    Args:
        archive_path: Path to the .xcarchive of one platform
        framework_name: Name of the framework bundle without extension
        module_name: Module whose BCSymbolMaps are kept (default: framework_name)

    Returns:
        ArchiveResult for the archive

    Raises:
        ArtifactNotFoundError: the archive has no matching framework; nothing
            else is looked up in that case.
    """
    framework = find_framework(archive_path, framework_name)
    return ArchiveResult(
        framework=framework,
        dsym=find_dsym(archive_path, framework_name),
        symbol_maps=find_symbol_maps(archive_path, module_name or framework_name),
    )
