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

import sys
import argparse

from xcbundle.build_scripts.build_xcframework import XCFrameworkBuilder
from xcbundle.utils.apple.config import load_config, split_list
from xcbundle.utils.apple.errors import XCFrameworkError
from xcbundle.utils.apple.tools import XcodeTools
from xcbundle.utils.context.namespace import CliNameSpace
from xcbundle.utils.context.context import CliContext
from xcbundle.utils.context.command import CliCommand


class Create(CliCommand):
    def __init__(self, tools: XcodeTools = None):
        self.tools = tools

    def description(self) -> str:
        return """Create an XCFramework with dSYMs and BCSymbolMaps, zipped.

Every platform is archived with xcodebuild (simulators are added
automatically), then the archives are combined into one XCFramework.
Options not given on the command line are read from the [xcframework]
table of XCBundle.toml in the current directory.

EXAMPLES:
    # iOS (device + simulator) and macOS, library evolution enabled
    xcbundle create --scheme MyKit --platforms iOS,macOS \\
        --zip-destination build/MyKit.xcframework.zip

    # Platform based schemes, built without library evolution
    xcbundle create --scheme "MyKit-{{platform}}" --name MyKit \\
        --platforms iOS,tvOS --no-library-evolution \\
        --version 2.5.0 --build-number 42 --zip-destination MyKit.zip

ENVIRONMENT:
    RELEASE_VERSION            Release version when --version is not set
    BUILD_NUMBER               Build number when --build-number is not set

OUTPUT STRUCTURE:
    <zip-destination>
    └── <name>.xcframework/
        ├── Info.plist
        └── <library identifier>/      e.g. ios-arm64_armv7
            ├── <name>.framework
            ├── BCSymbolMaps/
            └── dSYMs/
        """

    def cli(self, argv=None) -> CliNameSpace:
        parser = argparse.ArgumentParser(
            prog="xcbundle create",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            description=self.description(),
        )
        parser.add_argument(
            "--scheme",
            type=str,
            help='Base name of the scheme to build, may contain "{{platform}}"',
        )
        parser.add_argument(
            "--name",
            type=str,
            help="Module name, if different than the scheme",
        )
        parser.add_argument(
            "--platforms",
            type=split_list,
            help='Comma-separated platforms to include (e.g. "iOS,watchOS")',
        )
        parser.add_argument(
            "--configuration",
            type=str,
            help="Build configuration, Debug or Release (default: Release)",
        )
        parser.add_argument(
            "--version",
            type=str,
            help="Release version written to CFBundleShortVersionString",
        )
        parser.add_argument(
            "--build-number",
            dest="build_number",
            type=str,
            help="Build number written to CFBundleVersion",
        )
        parser.add_argument(
            "--no-library-evolution",
            dest="enable_library_evolution",
            action="store_false",
            default=None,
            help="Build without BUILD_LIBRARY_FOR_DISTRIBUTION and assemble the XCFramework manually",
        )
        parser.add_argument(
            "--sk-assertions",
            dest="enable_sk_assertions",
            action="store_true",
            default=None,
            help="Build with ENABLE_SK_ASSERT defined",
        )
        group = parser.add_mutually_exclusive_group()
        group.add_argument("--project", type=str, help="The .xcodeproj containing the scheme")
        group.add_argument("--workspace", type=str, help="The .xcworkspace containing the scheme")
        parser.add_argument(
            "--xcarg",
            dest="xcargs",
            action="append",
            help="Additional xcodebuild build setting, may be repeated",
        )
        parser.add_argument(
            "--zip-destination",
            dest="zip_destination",
            type=str,
            help="Path of the XCFramework zip archive",
        )
        parser.add_argument(
            "--config",
            type=str,
            help="Configuration file (default: ./XCBundle.toml)",
        )

        argv = sys.argv[2:] if argv is None else argv
        return parser.parse_args(argv, namespace=CliNameSpace())

    def exec(self, context: CliContext, args: CliNameSpace):
        overrides = {k: v for k, v in vars(args).items() if k != "config"}
        try:
            config = load_config(context.project_dir, overrides, config_path=args.config)
            config.ensure_valid()
            print("[XCFramework] Configuration:")
            print(config.get_config_summary())
            zip_path = XCFrameworkBuilder(config, self.tools).build()
        except XCFrameworkError as e:
            print(f"ERROR: {e}")
            sys.exit(1)
        return zip_path
