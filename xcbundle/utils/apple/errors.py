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
Errors raised while building an XCFramework.

Every error is fatal for the whole run. Messages name the offending path,
platform or value so they can be shown to the user as-is.
"""


class XCFrameworkError(Exception):
    """Base exception for all XCFramework build failures"""
    pass


class ConfigError(XCFrameworkError):
    """Exception raised for invalid build configuration"""

    def __init__(self, message, errors=None):
        super().__init__(message)
        self.errors = list(errors or [])


class VersionFormatError(ConfigError):
    """Exception raised when a release version cannot be normalized"""
    pass


class ArtifactNotFoundError(XCFrameworkError):
    """Exception raised when an archive does not contain the expected framework"""
    pass


class PlistEditError(XCFrameworkError):
    """Exception raised when an Info.plist key can be neither set nor added"""

    def __init__(self, path, key, message):
        super().__init__(f"Failed to edit {key} in {path}: {message}")
        self.path = path
        self.key = key


class ToolError(XCFrameworkError):
    """Exception raised when an external tool exits with a non-zero code"""

    def __init__(self, tool, subject, code, output=""):
        message = f"{tool} failed for {subject} (exit code {code})"
        if output:
            message += f"\n{output.strip()}"
        super().__init__(message)
        self.tool = tool
        self.subject = subject
        self.code = code
        self.output = output


class ArtifactError(XCFrameworkError):
    """Exception raised when an artifact cannot be copied, created or removed"""

    def __init__(self, path, reason):
        super().__init__(f"Cannot write {path}: {reason}")
        self.path = path
        self.reason = reason
