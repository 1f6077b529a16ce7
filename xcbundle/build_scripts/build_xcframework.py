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
XCFramework build script.

Builds one .xcarchive per requested platform (simulators included), stamps
the version into each archive, collects the framework, dSYM and BCSymbolMaps,
then assembles everything into a single .xcframework and zips it. It handles:
- Expanding platforms with their simulator sdks (iOS -> iOS, iOSSimulator)
- Archiving each sdk with xcodebuild, one after the other
- Setting CFBundleShortVersionString and CFBundleVersion
- Creating the XCFramework with xcodebuild when library evolution is enabled
- Creating the XCFramework layout and Info.plist by hand otherwise

All archives share one temporary directory that is removed when the build
ends, whether it succeeded or not. Any failure aborts the whole build and no
zip archive is written.

Output:
    - Zip archive: <zip_destination> containing {name}.xcframework
"""

import os
import tempfile
import time
from typing import Dict, List, Optional

from xcbundle.utils.apple.assembler import select_assembler
from xcbundle.utils.apple.config import XCFrameworkConfig
from xcbundle.utils.apple.platforms import (
    destination_for,
    expand_platforms,
    scheme_name_for,
)
from xcbundle.utils.apple.stamper import stamp_archive
from xcbundle.utils.apple.symbols import ArchiveResult, extract_archive_result
from xcbundle.utils.apple.tools import XcodeTools

# Build settings passed to every xcodebuild archive
BASE_XCARGS = [
    "BITCODE_GENERATION_MODE=bitcode",
    "DEBUG_INFORMATION_FORMAT=dwarf-with-dsym",
    "ENABLE_BITCODE=YES",
    "SKIP_INSTALL=NO",
]
LIBRARY_EVOLUTION_XCARG = "BUILD_LIBRARY_FOR_DISTRIBUTION=YES"
SK_ASSERT_XCARG = "ENABLE_SK_ASSERT=-D ENABLE_SK_ASSERT"
XCARCHIVE_EXTENSION = ".xcarchive"


def xcode_arguments(config: XCFrameworkConfig) -> List[str]:
    """
    Build settings for xcodebuild archive.

    Caller supplied xcargs come last; whether they override earlier settings
    is up to xcodebuild.
    """
    args = list(BASE_XCARGS)
    if config.enable_library_evolution:
        args.append(LIBRARY_EVOLUTION_XCARG)
    if config.enable_sk_assertions:
        args.append(SK_ASSERT_XCARG)
    args.extend(config.xcargs)
    return args


class XCFrameworkBuilder:
    def __init__(self, config: XCFrameworkConfig, tools: Optional[XcodeTools] = None):
        self.config = config
        self.tools = tools or XcodeTools()

    def archive_path(self, work_dir: str, platform: str) -> str:
        return os.path.join(work_dir, platform, f"{self.config.framework_name}{XCARCHIVE_EXTENSION}")

    def archive_platform(self, platform: str, work_dir: str) -> ArchiveResult:
        """Archive, stamp and collect the artifacts of a single sdk."""
        config = self.config
        scheme = scheme_name_for(config.scheme, platform)
        archive_path = self.archive_path(work_dir, platform)

        print(f"[XCFramework] ▸ Archiving {scheme} for {platform}")
        self.tools.archiver.archive(
            archive_path,
            scheme=scheme,
            configuration=config.configuration,
            destination=destination_for(platform),
            xcargs=xcode_arguments(config),
            project=config.project,
            workspace=config.workspace,
        )

        stamp_archive(archive_path, self.tools.plist_editor, config.version, config.build_number)

        result = extract_archive_result(archive_path, config.framework_name, config.module_name)
        print(
            f"[XCFramework]   framework: {result.framework}, "
            f"dSYM: {result.dsym or 'none'}, BCSymbolMaps: {len(result.symbol_maps)}"
        )
        return result

    def build(self) -> str:
        """
        Run the whole build.

        Returns:
            str: Absolute path of the zip archive

        Raises:
            XCFrameworkError: on invalid configuration or any failed step
        """
        config = self.config
        config.ensure_valid()

        before_time = time.time()
        sdks = expand_platforms(config.platforms)
        print(f"==================build_xcframework ({config.framework_name}: {', '.join(sdks)})==================")

        with tempfile.TemporaryDirectory(prefix="xcbundle-") as work_dir:
            results: Dict[str, ArchiveResult] = {}
            for platform in sdks:
                results[platform] = self.archive_platform(platform, work_dir)

            assembler = select_assembler(config.enable_library_evolution, self.tools.xcframework_creator)
            bundle_path = assembler.assemble(results, config.framework_name, work_dir)

            print(f"[XCFramework] ▸ Zipping {os.path.basename(bundle_path)}")
            zip_path = self.tools.packager.zip(bundle_path, config.zip_destination, symlinks=True)

        after_time = time.time()
        print(f"[XCFramework] Created {zip_path}")
        print(f"==================build_xcframework time cost: {int(after_time - before_time)}s==================")
        return zip_path


def build_xcframework(config: XCFrameworkConfig, tools: Optional[XcodeTools] = None) -> str:
    return XCFrameworkBuilder(config, tools).build()
