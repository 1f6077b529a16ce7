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
XCFramework build configuration for xcbundle.

Values come from the [xcframework] table of XCBundle.toml, then environment
variables, then the command line. The result is validated as a whole before
any external tool runs.
"""

import os
import re
import sys
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Mapping, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from .errors import ConfigError, VersionFormatError
from .platforms import REQUESTABLE_PLATFORMS, SCHEME_PLATFORM_PLACEHOLDER
from .stamper import normalize_version

CONFIG_FILE_NAME = "XCBundle.toml"
CONFIG_TABLE = "xcframework"
VALID_CONFIGURATIONS = ["Debug", "Release"]
PROJECT_EXTENSION = ".xcodeproj"
WORKSPACE_EXTENSION = ".xcworkspace"
XCFRAMEWORK_EXTENSION = ".xcframework"

# Environment variables read when the value is not configured elsewhere
ENV_VARIABLES = {
    "version": "RELEASE_VERSION",
    "build_number": "BUILD_NUMBER",
}

# Expected value types, checked before any other validation
STRING_FIELDS = ["scheme", "name", "zip_destination", "configuration", "project", "workspace",
                 "version", "build_number"]
BOOL_FIELDS = ["enable_library_evolution", "enable_sk_assertions"]
LIST_FIELDS = ["platforms", "xcargs"]


@dataclass(frozen=True)
class ValidationError:
    """A single configuration problem."""
    field: str
    message: str

    def __str__(self):
        return f"{self.field}: {self.message}"


@dataclass
class XCFrameworkConfig:
    """Options of one XCFramework build."""
    scheme: str = ""
    platforms: List[str] = field(default_factory=list)
    zip_destination: str = ""
    name: Optional[str] = None  # module name, if different than the scheme
    configuration: str = "Release"
    version: Optional[str] = None
    build_number: Optional[str] = None
    enable_library_evolution: bool = True
    enable_sk_assertions: bool = False
    project: Optional[str] = None
    workspace: Optional[str] = None
    xcargs: List[str] = field(default_factory=list)

    @property
    def framework_name(self) -> str:
        name = self.name or self.scheme
        if name.endswith(XCFRAMEWORK_EXTENSION):
            name = name[:-len(XCFRAMEWORK_EXTENSION)]
        return name

    @property
    def module_name(self) -> str:
        return self.framework_name

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], environ: Optional[Mapping[str, str]] = None) -> "XCFrameworkConfig":
        """
        Create a configuration from a plain mapping.

        Unknown keys are ignored, strings may reference environment variables
        as ${VAR} or $VAR, and platforms may be a list or a comma-separated string.
        """
        environ = os.environ if environ is None else environ
        known = {f.name for f in fields(cls)}
        values = {}
        for key, value in data.items():
            key = key.replace("-", "_")
            if key not in known or value is None:
                continue
            if isinstance(value, str):
                value = expand_env(value, environ)
            elif isinstance(value, list):
                value = [expand_env(v, environ) if isinstance(v, str) else v for v in value]
            values[key] = value

        for key, env_name in ENV_VARIABLES.items():
            if key not in values and environ.get(env_name):
                values[key] = environ[env_name]

        if isinstance(values.get("platforms"), str):
            values["platforms"] = split_list(values["platforms"])
        if isinstance(values.get("xcargs"), str):
            values["xcargs"] = values["xcargs"].split()
        for key in ("version", "build_number"):
            if values.get(key) is not None:
                values[key] = str(values[key])
        return cls(**values)

    def validate_types(self) -> List[ValidationError]:
        errors = []
        for key in STRING_FIELDS:
            value = getattr(self, key)
            if value is not None and not isinstance(value, str):
                errors.append(ValidationError(key, f"Expected a string, got {value!r}"))
        for key in BOOL_FIELDS:
            value = getattr(self, key)
            if not isinstance(value, bool):
                errors.append(ValidationError(key, f"Expected true or false, got {value!r}"))
        for key in LIST_FIELDS:
            value = getattr(self, key)
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                errors.append(ValidationError(key, f"Expected a list of strings, got {value!r}"))
        return errors

    def validate(self) -> List[ValidationError]:
        # the remaining checks assume well-typed values
        errors = self.validate_types()
        if errors:
            return errors

        if not self.scheme:
            errors.append(ValidationError("scheme", "Please supply the scheme to build"))
        elif SCHEME_PLATFORM_PLACEHOLDER in self.scheme and not self.name:
            errors.append(ValidationError(
                "name",
                f"Scheme '{self.scheme}' contains {SCHEME_PLATFORM_PLACEHOLDER}, please supply the module name",
            ))

        if not self.platforms:
            errors.append(ValidationError("platforms", "Please supply at least one platform"))
        seen = set()
        for platform in self.platforms:
            if platform not in REQUESTABLE_PLATFORMS:
                errors.append(ValidationError(
                    "platforms",
                    f"Invalid platform '{platform}', must be one of: {', '.join(REQUESTABLE_PLATFORMS)}",
                ))
            elif platform in seen:
                errors.append(ValidationError("platforms", f"Platform '{platform}' is requested more than once"))
            seen.add(platform)

        if self.configuration not in VALID_CONFIGURATIONS:
            errors.append(ValidationError(
                "configuration",
                f"Invalid configuration '{self.configuration}', please supply one of: {' | '.join(VALID_CONFIGURATIONS)}",
            ))

        if self.project and self.workspace:
            errors.append(ValidationError("project", "You can only pass either a 'project' or a 'workspace', not both"))
        if self.project:
            errors.extend(_validate_container("project", self.project, PROJECT_EXTENSION))
        if self.workspace:
            errors.extend(_validate_container("workspace", self.workspace, WORKSPACE_EXTENSION))

        if not self.zip_destination:
            errors.append(ValidationError("zip_destination", "Please supply the path of the zip archive"))

        if self.version is not None:
            try:
                normalize_version(self.version)
            except VersionFormatError as e:
                errors.append(ValidationError("version", str(e)))

        return errors

    def ensure_valid(self):
        errors = self.validate()
        if errors:
            raise ConfigError(
                "Invalid XCFramework configuration:\n" + "\n".join(f"  - {e}" for e in errors),
                errors,
            )

    def get_config_summary(self) -> str:
        """Get a summary of the configuration for display."""
        lines = [
            f"  Scheme: {self.scheme}",
            f"  Framework: {self.framework_name}",
            f"  Platforms: {', '.join(self.platforms)}",
            f"  Configuration: {self.configuration}",
            f"  Library Evolution: {'Enabled' if self.enable_library_evolution else 'Disabled'}",
        ]
        if self.version is not None:
            lines.append(f"  Version: {self.version}")
        if self.build_number is not None:
            lines.append(f"  Build Number: {self.build_number}")
        if self.project:
            lines.append(f"  Project: {self.project}")
        if self.workspace:
            lines.append(f"  Workspace: {self.workspace}")
        lines.append(f"  Zip Destination: {self.zip_destination}")
        return '\n'.join(lines)


def _validate_container(key: str, value: str, extension: str) -> List[ValidationError]:
    path = os.path.abspath(os.path.expanduser(value))
    label = key.capitalize()
    if not os.path.exists(path):
        return [ValidationError(key, f"{label} file not found at path '{path}'")]
    if not os.path.isdir(path):
        return [ValidationError(key, f"{label} file invalid at path '{path}'")]
    if extension not in path:
        return [ValidationError(key, f"{label} file at '{path}' must end with {extension}")]
    return []


def expand_env(value: str, environ: Optional[Mapping[str, str]] = None) -> str:
    """
    Expand environment variables in configuration values.

    Supports ${VAR_NAME} and $VAR_NAME syntax; unknown variables are left as-is.
    """
    environ = os.environ if environ is None else environ

    # Pattern for ${VAR_NAME}
    pattern1 = re.compile(r'\$\{([^}]+)\}')
    value = pattern1.sub(lambda m: environ.get(m.group(1), m.group(0)), value)

    # Pattern for $VAR_NAME
    pattern2 = re.compile(r'\$([A-Za-z_][A-Za-z0-9_]*)')
    value = pattern2.sub(lambda m: environ.get(m.group(1), m.group(0)), value)

    return value


def split_list(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def find_config_file(project_dir: str) -> Optional[str]:
    path = os.path.join(project_dir, CONFIG_FILE_NAME)
    return path if os.path.isfile(path) else None


def load_config_file(path: str) -> Dict[str, Any]:
    """Read the [xcframework] table of a TOML file."""
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}")
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}")
    table = data.get(CONFIG_TABLE, {})
    if not isinstance(table, dict):
        raise ConfigError(f"[{CONFIG_TABLE}] in {path} must be a table")
    return table


def load_config(
    project_dir: str,
    overrides: Optional[Mapping[str, Any]] = None,
    config_path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> XCFrameworkConfig:
    """
    Merge XCBundle.toml, environment and command line values.

    Args:
        project_dir: Directory searched for XCBundle.toml
        overrides: Command line values; None entries are ignored
        config_path: Explicit configuration file, must exist when given
        environ: Environment mapping (default: os.environ)

    Returns:
        XCFrameworkConfig, not yet validated
    """
    data: Dict[str, Any] = {}
    if config_path is not None:
        if not os.path.isfile(config_path):
            raise ConfigError(f"Configuration file not found at path '{config_path}'")
        data.update(load_config_file(config_path))
    else:
        found = find_config_file(project_dir)
        if found:
            data.update(load_config_file(found))

    for key, value in (overrides or {}).items():
        if value is not None:
            data[key] = value
    return XCFrameworkConfig.from_dict(data, environ)
