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

import os
import sys
import importlib
import argparse

SCRIPT_PATH = os.path.split(os.path.realpath(__file__))[0]
PACKAGE_NAME = os.path.basename(SCRIPT_PATH)

from xcbundle.utils.context.namespace import CliNameSpace
from xcbundle.utils.context.context import CliContext
from xcbundle.utils.context.command import CliCommand


# Root Class for Command Line Interface
class Cli(CliCommand):
    def description(self) -> str:
        return """XCBUNDLE - Multi-platform XCFramework builder

Archives a framework scheme for several Apple platforms and assembles the
archives into one XCFramework zip, with dSYMs and BCSymbolMaps.

USAGE:
    xcbundle <command> [options]

COMMANDS:
    create      Archive the platforms and create the XCFramework zip
    platforms   List supported platforms and their library identifiers

EXAMPLES:
    xcbundle create --scheme MyKit --platforms iOS,macOS --zip-destination MyKit.xcframework.zip
    xcbundle create --no-library-evolution --version 2.5.0 --build-number 42
    xcbundle platforms

For more information on a specific command:
    xcbundle <command> --help
        """

    def get_command_list(self) -> list:
        arr = []
        for command in os.listdir(os.path.join(SCRIPT_PATH, "commands")):
            if not command.startswith(("_", "test_")) and command.endswith(".py"):
                arr.append(os.path.splitext(os.path.basename(command))[0])
        return sorted(arr)

    def _help_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog="xcbundle",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            description=self.description(),
        )
        parser.add_argument(
            "subcommand",
            metavar=f"{self.get_command_list()}",
            type=str,
            choices=self.get_command_list(),
        )
        return parser

    def cli(self, argv=None) -> CliNameSpace:
        argv = sys.argv[1:] if argv is None else argv
        # Only "xcbundle --help" is handled here, "xcbundle create --help" is not
        if len(argv) == 1 and argv[0] in ['--help', '-h']:
            self._help_parser().print_help()
            sys.exit(0)

        parser = argparse.ArgumentParser(
            prog="xcbundle",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            description=self.description(),
            add_help=False,
        )
        parser.add_argument(
            "subcommand",
            metavar=f"{self.get_command_list()}",
            type=str,
            nargs='?',
            choices=self.get_command_list(),
        )
        # parse only known args - the rest belongs to the subcommand
        args, unknown = parser.parse_known_args(argv, namespace=CliNameSpace())
        args.subcommand_argv = unknown
        return args

    def exec(self, context: CliContext, args: CliNameSpace):
        if not args.subcommand:
            print("ERROR: No command specified\n")
            self._help_parser().print_help()
            sys.exit(1)

        module = importlib.import_module(f"{PACKAGE_NAME}.commands.{args.subcommand}")
        klass = getattr(module, args.subcommand.capitalize())
        sub_cmd = klass()
        sub_cmd.exec(context, sub_cmd.cli(args.subcommand_argv))


def main():
    cmd = Cli()
    cmd.exec(CliContext(), cmd.cli())


if __name__ == "__main__":
    main()
