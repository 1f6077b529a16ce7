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
Tests for the create and platforms commands.

Run with: python3 -m pytest test_commands.py
"""

import io
import os
import tempfile
import unittest
from contextlib import redirect_stdout
from unittest.mock import patch

from xcbundle.commands.create import Create
from xcbundle.commands.platforms import Platforms
from xcbundle.utils.context.context import CliContext


class TestCreateCli(unittest.TestCase):

    def test_arguments(self):
        args = Create().cli([
            "--scheme", "Foo-{{platform}}",
            "--name", "Foo",
            "--platforms", "iOS,macOS",
            "--no-library-evolution",
            "--xcarg", "A=1",
            "--xcarg", "B=2",
            "--zip-destination", "Foo.zip",
        ])

        self.assertEqual(args.scheme, "Foo-{{platform}}")
        self.assertEqual(args.platforms, ["iOS", "macOS"])
        self.assertFalse(args.enable_library_evolution)
        self.assertIsNone(args.enable_sk_assertions)
        self.assertEqual(args.xcargs, ["A=1", "B=2"])
        self.assertIsNone(args.version)

    def test_project_and_workspace_conflict(self):
        with redirect_stdout(io.StringIO()), patch("sys.stderr", new_callable=io.StringIO):
            with self.assertRaises(SystemExit):
                Create().cli(["--project", "A.xcodeproj", "--workspace", "A.xcworkspace"])


class TestCreateExec(unittest.TestCase):

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.context = CliContext(project_dir=self.temp_dir.name)

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_config_error_exits(self):
        command = Create()
        args = command.cli(["--scheme", "Foo", "--platforms", "linux"])
        out = io.StringIO()

        with redirect_stdout(out), patch("xcbundle.commands.create.XCFrameworkBuilder.archive_platform") as mock_archive:
            with self.assertRaises(SystemExit) as ctx:
                command.exec(self.context, args)

        self.assertEqual(ctx.exception.code, 1)
        self.assertIn("ERROR:", out.getvalue())
        self.assertIn("'linux'", out.getvalue())
        mock_archive.assert_not_called()

    def test_wrongly_typed_toml_value_exits(self):
        with open(os.path.join(self.temp_dir.name, "XCBundle.toml"), "w") as f:
            f.write('[xcframework]\nscheme = 5\nplatforms = ["iOS"]\nzip_destination = "Foo.zip"\n')
        command = Create()
        args = command.cli([])
        out = io.StringIO()

        with redirect_stdout(out), patch("xcbundle.commands.create.XCFrameworkBuilder.build") as mock_build:
            with self.assertRaises(SystemExit) as ctx:
                command.exec(self.context, args)

        self.assertEqual(ctx.exception.code, 1)
        self.assertIn("ERROR:", out.getvalue())
        self.assertIn("scheme", out.getvalue())
        self.assertNotIn("Configuration:", out.getvalue())
        mock_build.assert_not_called()

    def test_toml_and_arguments_are_merged(self):
        with open(os.path.join(self.temp_dir.name, "XCBundle.toml"), "w") as f:
            f.write('[xcframework]\nscheme = "Foo"\nplatforms = ["tvOS"]\n')
        command = Create()
        args = command.cli(["--zip-destination", "Foo.zip", "--version", "1.0.0"])

        with redirect_stdout(io.StringIO()), \
                patch("xcbundle.commands.create.XCFrameworkBuilder.build", return_value="/out/Foo.zip") as mock_build:
            self.assertEqual(command.exec(self.context, args), "/out/Foo.zip")

        mock_build.assert_called_once_with()


class TestPlatforms(unittest.TestCase):

    def test_lists_catalog(self):
        out = io.StringIO()
        command = Platforms()

        with redirect_stdout(out):
            command.exec(CliContext(), command.cli([]))

        lines = out.getvalue().splitlines()
        self.assertEqual(len(lines), 12)
        self.assertTrue(lines[2].startswith("* iOS "))
        self.assertIn("ios-arm64_i386_x86_64-simulator", lines[3])
        self.assertTrue(lines[3].startswith("  iOSSimulator"))

    def test_description_explains_marker(self):
        self.assertIn("Platforms that can be requested are marked with '*'", Platforms().description())


if __name__ == '__main__':
    unittest.main()
