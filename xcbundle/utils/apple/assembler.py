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
Assemble the per-platform archive results into one .xcframework directory.

With library evolution enabled the work is delegated to
xcodebuild -create-xcframework. Without it the directory layout and the
Info.plist are written by hand, the way Carthage does, since xcodebuild
refuses frameworks built without BUILD_LIBRARY_FOR_DISTRIBUTION.
"""

import os
import shutil
from typing import Mapping

from .errors import ArtifactError
from .manifest import (
    DEBUG_SYMBOLS_PATH,
    MANIFEST_FILE_NAME,
    SYMBOL_MAPS_PATH,
    generate_manifest,
)
from .platforms import library_identifier_for
from .symbols import ArchiveResult
from .tools import FrameworkGroup, XCFrameworkCreator

XCFRAMEWORK_EXTENSION = ".xcframework"


def xcframework_path(work_dir: str, framework_name: str) -> str:
    return os.path.join(work_dir, f"{framework_name}{XCFRAMEWORK_EXTENSION}")


class DelegateAssembler:
    name = "xcodebuild -create-xcframework"

    def __init__(self, creator: XCFrameworkCreator):
        self.creator = creator

    def assemble(self, results: Mapping[str, ArchiveResult], framework_name: str, work_dir: str) -> str:
        output_path = xcframework_path(work_dir, framework_name)
        print(f"[XCFramework] ▸ Creating {os.path.basename(output_path)} via {self.name}")
        groups = [
            FrameworkGroup(result.framework, result.dsym, tuple(result.symbol_maps))
            for result in results.values()
        ]
        return self.creator.create(groups, output_path)


class ManualAssembler:
    name = "manual layout"

    def assemble(self, results: Mapping[str, ArchiveResult], framework_name: str, work_dir: str) -> str:
        output_path = xcframework_path(work_dir, framework_name)
        print(f"[XCFramework] ▸ Creating {os.path.basename(output_path)} manually à la Carthage")

        # the manifest is checked first so a duplicate identifier leaves no partial layout
        manifest = generate_manifest(results, framework_name)
        try:
            os.makedirs(output_path, exist_ok=True)
            for platform, result in results.items():
                self.copy_platform(result, os.path.join(output_path, library_identifier_for(platform)))

            manifest.write(os.path.join(output_path, MANIFEST_FILE_NAME))
        except OSError as e:
            raise ArtifactError(e.filename or output_path, e.strerror or str(e))
        return output_path

    @staticmethod
    def copy_platform(result: ArchiveResult, destination: str):
        symbol_maps_dir = os.path.join(destination, SYMBOL_MAPS_PATH)
        dsyms_dir = os.path.join(destination, DEBUG_SYMBOLS_PATH)
        os.makedirs(symbol_maps_dir, exist_ok=True)
        os.makedirs(dsyms_dir, exist_ok=True)

        shutil.copytree(
            result.framework,
            os.path.join(destination, os.path.basename(result.framework)),
            symlinks=True,
        )
        for symbol_map in result.symbol_maps:
            shutil.copy2(symbol_map, symbol_maps_dir)
        if result.dsym is not None:
            shutil.copytree(
                result.dsym,
                os.path.join(dsyms_dir, os.path.basename(result.dsym)),
                symlinks=True,
            )


def select_assembler(enable_library_evolution: bool, creator: XCFrameworkCreator):
    if enable_library_evolution:
        return DelegateAssembler(creator)
    return ManualAssembler()
