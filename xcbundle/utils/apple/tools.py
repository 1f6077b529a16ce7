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
Adapters for the external Xcode tools used to build an XCFramework.

Each adapter builds an argv list and hands it to a runner with the signature
runner(argv, cwd) -> (exit_code, output). The default runner is
utils.cmd.cmd_util.exec_command; tests pass their own.
"""

import os
import shutil
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple

from xcbundle.utils.cmd.cmd_util import exec_command
from xcbundle.utils.context.result import PlistEditResult

from .errors import ArtifactError, ToolError

Runner = Callable[[List[str], Optional[str]], Tuple[int, str]]

XCODEBUILD = "xcodebuild"
PLIST_BUDDY = "/usr/libexec/PlistBuddy"
ZIP = "zip"
# PlistBuddy prints this when Set targets a key the plist does not have
PLIST_KEY_ABSENT_MARKER = "Does Not Exist"


def default_runner(argv: List[str], cwd: Optional[str] = None) -> Tuple[int, str]:
    return exec_command(argv, cwd=cwd)


@dataclass(frozen=True)
class FrameworkGroup:
    """Inputs of one -framework entry for xcodebuild -create-xcframework."""
    framework: str
    dsym: Optional[str] = None
    symbol_maps: Tuple[str, ...] = ()


class XcodebuildArchiver:
    """Run xcodebuild archive for one platform."""

    def __init__(self, runner: Runner = default_runner):
        self.runner = runner

    def build_command(
        self,
        archive_path: str,
        scheme: str,
        configuration: str,
        destination: str,
        xcargs: Sequence[str] = (),
        project: Optional[str] = None,
        workspace: Optional[str] = None,
    ) -> List[str]:
        cmd = [
            XCODEBUILD, "clean", "archive",
            "-archivePath", archive_path,
            "-scheme", scheme,
            "-configuration", configuration,
            "-destination", destination,
        ]
        if project:
            cmd += ["-project", project]
        if workspace:
            cmd += ["-workspace", workspace]
        cmd += list(xcargs)
        return cmd

    def archive(self, archive_path: str, scheme: str, configuration: str,
                destination: str, xcargs: Sequence[str] = (),
                project: Optional[str] = None, workspace: Optional[str] = None) -> str:
        # xcodebuild does not remove a previous archive at the same path
        if os.path.exists(archive_path):
            try:
                shutil.rmtree(archive_path)
            except OSError as e:
                raise ArtifactError(archive_path, e.strerror or str(e))
        cmd = self.build_command(
            archive_path, scheme, configuration, destination, xcargs, project, workspace
        )
        err_code, err_msg = self.runner(cmd, None)
        if err_code != 0:
            raise ToolError("xcodebuild archive", f"{scheme} ({destination})", err_code, err_msg)
        return archive_path


class PlistBuddy:
    """Set or add keys of a property list file in place."""

    def __init__(self, runner: Runner = default_runner):
        self.runner = runner

    def _run(self, path: str, command: str) -> PlistEditResult:
        err_code, err_msg = self.runner([PLIST_BUDDY, "-c", command, path], None)
        if err_code == 0:
            return PlistEditResult.ok()
        if PLIST_KEY_ABSENT_MARKER in err_msg:
            return PlistEditResult.missing_key(err_msg.strip())
        return PlistEditResult.failed(err_msg.strip() or f"exit code {err_code}")

    def set_value(self, path: str, key: str, value: str) -> PlistEditResult:
        return self._run(path, f"Set :{key} {value}")

    def add_value(self, path: str, key: str, value_type: str, value: str) -> PlistEditResult:
        return self._run(path, f"Add :{key} {value_type} {value}")


class XCFrameworkCreator:
    """Run xcodebuild -create-xcframework."""

    def __init__(self, runner: Runner = default_runner):
        self.runner = runner

    def build_command(self, groups: Sequence[FrameworkGroup], output_path: str) -> List[str]:
        cmd = [XCODEBUILD, "-create-xcframework"]
        for group in groups:
            cmd += ["-framework", group.framework]
            if group.dsym is not None:
                cmd += ["-debug-symbols", group.dsym]
            for symbol_map in group.symbol_maps:
                cmd += ["-debug-symbols", symbol_map]
        cmd += ["-allow-internal-distribution", "-output", output_path]
        return cmd

    def create(self, groups: Sequence[FrameworkGroup], output_path: str) -> str:
        err_code, err_msg = self.runner(self.build_command(groups, output_path), None)
        if err_code != 0:
            raise ToolError("xcodebuild -create-xcframework", output_path, err_code, err_msg)
        return output_path


class ZipPackager:
    """Compress a directory with zip, keeping symbolic links as links."""

    def __init__(self, runner: Runner = default_runner):
        self.runner = runner

    def build_command(self, source_dir: str, output_path: str, symlinks: bool = True) -> List[str]:
        cmd = [ZIP, "-r", "-q"]
        if symlinks:
            cmd.append("--symlinks")
        cmd += [output_path, os.path.basename(os.path.normpath(source_dir))]
        return cmd

    def zip(self, source_dir: str, output_path: str, symlinks: bool = True) -> str:
        output_path = os.path.abspath(output_path)
        output_dir = os.path.dirname(output_path)
        try:
            if output_dir:
                os.makedirs(output_dir, exist_ok=True)
            # zip updates an existing archive instead of replacing it
            if os.path.isfile(output_path):
                os.remove(output_path)
        except OSError as e:
            raise ArtifactError(output_path, e.strerror or str(e))

        cwd = os.path.dirname(os.path.abspath(source_dir))
        err_code, err_msg = self.runner(
            self.build_command(source_dir, output_path, symlinks), cwd
        )
        if err_code != 0:
            if os.path.isfile(output_path):
                os.remove(output_path)
            raise ToolError("zip", output_path, err_code, err_msg)
        return output_path


@dataclass
class XcodeTools:
    archiver: XcodebuildArchiver = field(default_factory=XcodebuildArchiver)
    plist_editor: PlistBuddy = field(default_factory=PlistBuddy)
    xcframework_creator: XCFrameworkCreator = field(default_factory=XCFrameworkCreator)
    packager: ZipPackager = field(default_factory=ZipPackager)

    @classmethod
    def with_runner(cls, runner: Runner) -> "XcodeTools":
        return cls(
            archiver=XcodebuildArchiver(runner),
            plist_editor=PlistBuddy(runner),
            xcframework_creator=XCFrameworkCreator(runner),
            packager=ZipPackager(runner),
        )
