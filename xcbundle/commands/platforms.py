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

from xcbundle.utils.apple.platforms import PLATFORMS, REQUESTABLE_PLATFORMS
from xcbundle.utils.context.namespace import CliNameSpace
from xcbundle.utils.context.context import CliContext
from xcbundle.utils.context.command import CliCommand


class Platforms(CliCommand):
    def description(self) -> str:
        return """List the platforms an XCFramework can contain.

Platforms that can be requested are marked with '*'; their simulator sdks
are added automatically and listed right after them.
        """

    def cli(self, argv=None) -> CliNameSpace:
        parser = argparse.ArgumentParser(
            prog="xcbundle platforms",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            description=self.description(),
        )
        argv = sys.argv[2:] if argv is None else argv
        return parser.parse_args(argv, namespace=CliNameSpace())

    def exec(self, context: CliContext, args: CliNameSpace):
        for key, descriptor in PLATFORMS.items():
            marker = "*" if key in REQUESTABLE_PLATFORMS else " "
            print(f"{marker} {key:<20} {descriptor.library_identifier:<36} {descriptor.destination}")
