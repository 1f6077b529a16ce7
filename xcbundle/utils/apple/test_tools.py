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
Tests for the external tool adapters.

Run with: python3 -m pytest test_tools.py
"""

import os
import tempfile
import unittest
from unittest.mock import patch

from xcbundle.utils.apple.errors import ArtifactError, ToolError
from xcbundle.utils.apple.tools import (
    PLIST_BUDDY,
    FrameworkGroup,
    PlistBuddy,
    XcodeTools,
    XcodebuildArchiver,
    XCFrameworkCreator,
    ZipPackager,
)


class FakeRunner:
    def __init__(self, code=0, output=""):
        self.code = code
        self.output = output
        self.calls = []

    def __call__(self, argv, cwd=None):
        self.calls.append((argv, cwd))
        return self.code, self.output


class TestXcodebuildArchiver(unittest.TestCase):

    def test_command(self):
        runner = FakeRunner()

        XcodebuildArchiver(runner).archive(
            "/tmp/none/Foo.xcarchive", "Foo-iOS", "Release", "generic/platform=iOS Simulator",
            xcargs=["SKIP_INSTALL=NO"], workspace="Foo.xcworkspace",
        )

        self.assertEqual(runner.calls, [([
            "xcodebuild", "clean", "archive",
            "-archivePath", "/tmp/none/Foo.xcarchive",
            "-scheme", "Foo-iOS",
            "-configuration", "Release",
            "-destination", "generic/platform=iOS Simulator",
            "-workspace", "Foo.xcworkspace",
            "SKIP_INSTALL=NO",
        ], None)])

    def test_previous_archive_is_removed(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            archive = os.path.join(temp_dir, "Foo.xcarchive")
            os.makedirs(os.path.join(archive, "Products"))

            XcodebuildArchiver(FakeRunner()).archive(archive, "Foo", "Debug", "generic/platform=macOS")

            self.assertFalse(os.path.exists(archive))

    def test_failure(self):
        runner = FakeRunner(65, "** ARCHIVE FAILED **")

        with self.assertRaises(ToolError) as ctx:
            XcodebuildArchiver(runner).archive("/tmp/none/Foo.xcarchive", "Foo", "Release", "generic/platform=tvOS")

        self.assertIn("Foo", str(ctx.exception))
        self.assertIn("ARCHIVE FAILED", str(ctx.exception))
        self.assertEqual(ctx.exception.code, 65)

    def test_unremovable_previous_archive(self):
        runner = FakeRunner()
        with tempfile.TemporaryDirectory() as temp_dir:
            archive = os.path.join(temp_dir, "Foo.xcarchive")
            os.makedirs(archive)

            with patch("xcbundle.utils.apple.tools.shutil.rmtree",
                       side_effect=PermissionError(13, "Permission denied")):
                with self.assertRaises(ArtifactError) as ctx:
                    XcodebuildArchiver(runner).archive(archive, "Foo", "Release", "generic/platform=iOS")

        self.assertEqual(ctx.exception.path, archive)
        self.assertIn("Permission denied", str(ctx.exception))
        self.assertEqual(runner.calls, [])


class TestPlistBuddy(unittest.TestCase):

    def test_set(self):
        runner = FakeRunner()

        result = PlistBuddy(runner).set_value("Info.plist", "CFBundleVersion", "42")

        self.assertTrue(result.is_success())
        self.assertEqual(runner.calls[0][0], [PLIST_BUDDY, "-c", "Set :CFBundleVersion 42", "Info.plist"])

    def test_add(self):
        runner = FakeRunner()

        PlistBuddy(runner).add_value("Info.plist", "CFBundleVersion", "string", "42")

        self.assertEqual(runner.calls[0][0], [PLIST_BUDDY, "-c", "Add :CFBundleVersion string 42", "Info.plist"])

    def test_key_absent(self):
        runner = FakeRunner(1, 'Set: Entry, ":CFBundleVersion", Does Not Exist\n')

        result = PlistBuddy(runner).set_value("Info.plist", "CFBundleVersion", "42")

        self.assertTrue(result.is_failure())
        self.assertTrue(result.is_key_absent())

    def test_other_failure(self):
        runner = FakeRunner(1, "Error Reading File: Info.plist")

        result = PlistBuddy(runner).set_value("Info.plist", "CFBundleVersion", "42")

        self.assertTrue(result.is_failure())
        self.assertFalse(result.is_key_absent())
        self.assertIn("Error Reading File", result.get_error())


class TestXCFrameworkCreator(unittest.TestCase):

    def test_command(self):
        groups = [
            FrameworkGroup("/w/iOS/Foo.framework", "/w/iOS/Foo.framework.dSYM", ("/w/iOS/A.bcsymbolmap",)),
            FrameworkGroup("/w/iOSSimulator/Foo.framework"),
        ]

        cmd = XCFrameworkCreator(FakeRunner()).build_command(groups, "/w/Foo.xcframework")

        self.assertEqual(cmd, [
            "xcodebuild", "-create-xcframework",
            "-framework", "/w/iOS/Foo.framework",
            "-debug-symbols", "/w/iOS/Foo.framework.dSYM",
            "-debug-symbols", "/w/iOS/A.bcsymbolmap",
            "-framework", "/w/iOSSimulator/Foo.framework",
            "-allow-internal-distribution",
            "-output", "/w/Foo.xcframework",
        ])

    def test_failure(self):
        with self.assertRaises(ToolError) as ctx:
            XCFrameworkCreator(FakeRunner(1, "error")).create([], "/w/Foo.xcframework")
        self.assertIn("/w/Foo.xcframework", str(ctx.exception))


class TestZipPackager(unittest.TestCase):

    def test_command_runs_next_to_source(self):
        runner = FakeRunner()
        with tempfile.TemporaryDirectory() as temp_dir:
            source = os.path.join(temp_dir, "work", "Foo.xcframework")
            output = os.path.join(temp_dir, "out", "Foo.zip")

            path = ZipPackager(runner).zip(source, output)

            self.assertEqual(path, output)
            self.assertTrue(os.path.isdir(os.path.join(temp_dir, "out")))
            self.assertEqual(runner.calls, [(
                ["zip", "-r", "-q", "--symlinks", output, "Foo.xcframework"],
                os.path.join(temp_dir, "work"),
            )])

    def test_failure_removes_partial_output(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            output = os.path.join(temp_dir, "Foo.zip")

            def runner(argv, cwd=None):
                with open(output, "w") as f:
                    f.write("partial")
                return 12, "zip error"

            with self.assertRaises(ToolError):
                ZipPackager(runner).zip(os.path.join(temp_dir, "Foo.xcframework"), output)
            self.assertFalse(os.path.exists(output))


    def test_destination_under_a_regular_file(self):
        runner = FakeRunner()
        with tempfile.TemporaryDirectory() as temp_dir:
            blocker = os.path.join(temp_dir, "out")
            with open(blocker, "w") as f:
                f.write("not a directory")
            output = os.path.join(blocker, "Foo.zip")

            with self.assertRaises(ArtifactError) as ctx:
                ZipPackager(runner).zip(os.path.join(temp_dir, "Foo.xcframework"), output)

        self.assertEqual(ctx.exception.path, output)
        self.assertIn(output, str(ctx.exception))
        self.assertEqual(runner.calls, [])

class TestXcodeTools(unittest.TestCase):

    def test_with_runner(self):
        runner = FakeRunner()

        tools = XcodeTools.with_runner(runner)

        self.assertIs(tools.archiver.runner, runner)
        self.assertIs(tools.plist_editor.runner, runner)
        self.assertIs(tools.xcframework_creator.runner, runner)
        self.assertIs(tools.packager.runner, runner)


if __name__ == '__main__':
    unittest.main()
