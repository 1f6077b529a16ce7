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
Tests for the platform catalog.

Run with: python3 -m pytest test_platforms.py
"""

import unittest

from xcbundle.utils.apple.errors import ConfigError
from xcbundle.utils.apple.platforms import (
    PLATFORMS,
    REQUESTABLE_PLATFORMS,
    architectures_for,
    destination_for,
    expand_platforms,
    get_platform,
    library_identifier_for,
    scheme_name_for,
    supported_platform_for,
)


class TestExpandPlatforms(unittest.TestCase):

    def test_simulator_follows_its_platform(self):
        self.assertEqual(
            expand_platforms(["iOS", "macOS"]),
            ["iOS", "iOSSimulator", "macOS"],
        )

    def test_request_order_is_kept(self):
        self.assertEqual(
            expand_platforms(["watchOS", "macOSCatalyst", "tvOS"]),
            ["watchOS", "watchOSSimulator", "macOSCatalyst", "tvOS", "tvOSSimulator"],
        )

    def test_empty_request(self):
        self.assertEqual(expand_platforms([]), [])

    def test_unknown_platform(self):
        with self.assertRaises(ConfigError) as ctx:
            expand_platforms(["android"])
        self.assertIn("android", str(ctx.exception))

    def test_every_requestable_platform_is_cataloged(self):
        for platform in REQUESTABLE_PLATFORMS:
            self.assertIn(platform, PLATFORMS)

    def test_simulator_pairs_exist(self):
        for descriptor in PLATFORMS.values():
            if descriptor.simulator:
                self.assertTrue(get_platform(descriptor.simulator).is_simulator)


class TestLibraryIdentifier(unittest.TestCase):

    def test_simulator(self):
        self.assertEqual(library_identifier_for("iOSSimulator"), "ios-arm64_i386_x86_64-simulator")

    def test_device(self):
        self.assertEqual(library_identifier_for("macOS"), "macos-arm64_x86_64")
        self.assertEqual(library_identifier_for("iOS"), "ios-arm64_armv7")
        self.assertEqual(library_identifier_for("watchOS"), "watchos-arm64_32_armv7k")

    def test_undefined_architecture_is_kept(self):
        self.assertEqual(library_identifier_for("macOSCatalyst"), "macoscatalyst-undefined")
        self.assertEqual(library_identifier_for("carPlayOSSimulator"), "carplayos-undefined-simulator")

    def test_identifiers_are_unique(self):
        identifiers = [d.library_identifier for d in PLATFORMS.values()]
        self.assertEqual(len(identifiers), len(set(identifiers)))


class TestLookups(unittest.TestCase):

    def test_destination(self):
        self.assertEqual(destination_for("iOS"), "generic/platform=iOS")
        self.assertEqual(destination_for("tvOSSimulator"), "generic/platform=tvOS Simulator")
        self.assertEqual(destination_for("macOSCatalyst"), "generic/platform=macOS,variant=Mac Catalyst")

    def test_architectures(self):
        self.assertEqual(architectures_for("tvOS"), ["arm64"])
        self.assertEqual(architectures_for("watchOSSimulator"), ["arm64", "i386", "x86_64"])

    def test_supported_platform(self):
        self.assertEqual(supported_platform_for("iOSSimulator"), "ios")
        self.assertEqual(supported_platform_for("macOSCatalyst"), "macoscatalyst")

    def test_scheme_name(self):
        self.assertEqual(scheme_name_for("MyKit-{{platform}}", "iOSSimulator"), "MyKit-iOS")
        self.assertEqual(scheme_name_for("MyKit-{{platform}}", "macOSCatalyst"), "MyKit-Catalyst")

    def test_scheme_without_placeholder(self):
        self.assertEqual(scheme_name_for("MyKit", "tvOS"), "MyKit")


if __name__ == '__main__':
    unittest.main()
