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
Stamp the release version and build number into an archive's Info.plist files.

Each key is set first; when the plist does not have it yet the key is added
as a string instead. Every other failure is fatal.
"""

import glob
import os
import re
from typing import List, Optional, Tuple

from .errors import PlistEditError, VersionFormatError

SHORT_VERSION_KEY = "CFBundleShortVersionString"
BUILD_NUMBER_KEY = "CFBundleVersion"
STRING_TYPE = "string"

# major.minor.(patch|*)[-prerelease][+buildmeta]
SEMVER_PATTERN = re.compile(r"(\d+\.)(\d+\.)(\*|\d+)(-[^+\s]+)?(\+\S+)?")


def normalize_version(version: str) -> str:
    """
    Reduce a release version to major.minor.patch[-prerelease].

    Build metadata is not stored: "2.5.0-beta+001" becomes "2.5.0-beta".

    Raises:
        VersionFormatError: the version has no major.minor.patch part (e.g. "10.0")
    """
    match = SEMVER_PATTERN.search(version)
    if match is None:
        raise VersionFormatError(
            f"Version '{version}' does not match major.minor.patch[-prerelease][+build]"
        )
    return "".join(group for group in match.groups()[:4] if group)


def plan_stamps(version: Optional[str], build_number: Optional[str]) -> List[Tuple[str, str]]:
    stamps = []
    if version is not None:
        stamps.append((SHORT_VERSION_KEY, normalize_version(version)))
    if build_number is not None:
        stamps.append((BUILD_NUMBER_KEY, build_number))
    return stamps


def find_info_plists(archive_path: str) -> List[str]:
    pattern = os.path.join(glob.escape(archive_path), "Products", "**", "Info.plist")
    return sorted(glob.glob(pattern, recursive=True))


def set_or_add(editor, path: str, key: str, value: str):
    result = editor.set_value(path, key, value)
    if result.is_success():
        return
    if not result.is_key_absent():
        raise PlistEditError(path, key, result.get_error())

    fallback = editor.add_value(path, key, STRING_TYPE, value)
    if fallback.is_failure():
        raise PlistEditError(path, key, fallback.get_error())


def stamp_archive(
    archive_path: str,
    editor,
    version: Optional[str] = None,
    build_number: Optional[str] = None,
) -> List[str]:
    """
    Set version and build number in every product Info.plist of an archive.

    Args:
        archive_path: Path to the .xcarchive
        editor: Plist editor with set_value() and add_value()
        version: Release version, normalized before it is written
        build_number: Build number written as-is

    Returns:
        List of the Info.plist paths that were stamped
    """
    stamps = plan_stamps(version, build_number)
    if not stamps:
        return []

    plists = find_info_plists(archive_path)
    for path in plists:
        for key, value in stamps:
            print(f'[XCFramework] ▸ Setting {key}: "{value}" in {path}')
            set_or_add(editor, path, key, value)
    return plists
