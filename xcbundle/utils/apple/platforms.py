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
Catalog of the Apple platforms an XCFramework can contain.

Every per-platform value (xcodebuild destination, architectures, scheme
display name, simulator pairing) lives in one descriptor table so the
build, the assembly and the manifest all read the same data.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .errors import ConfigError

SCHEME_PLATFORM_PLACEHOLDER = "{{platform}}"
SIMULATOR_SUFFIX = "Simulator"
SIMULATOR_VARIANT = "simulator"
# Architecture of platforms whose slices are not resolved yet
UNDEFINED_ARCHITECTURE = "undefined"


@dataclass(frozen=True)
class PlatformDescriptor:
    """A single platform sdk and everything derived from its key."""
    key: str
    destination: str
    architectures: Tuple[str, ...]
    scheme_platform: str
    simulator: Optional[str] = None  # key of the paired simulator sdk

    @property
    def is_simulator(self) -> bool:
        return self.key.endswith(SIMULATOR_SUFFIX)

    @property
    def supported_platform(self) -> str:
        name = self.key.lower()
        if name.endswith(SIMULATOR_VARIANT):
            name = name[:-len(SIMULATOR_VARIANT)]
        return name

    @property
    def library_identifier(self) -> str:
        base = self.key
        if base.endswith(SIMULATOR_SUFFIX):
            base = base[:-len(SIMULATOR_SUFFIX)]
        components = [
            base.lower(),
            "_".join(self.architectures),
            SIMULATOR_VARIANT if self.is_simulator else None,
        ]
        return "-".join(c for c in components if c)


def _descriptor(key, destination, architectures, scheme_platform, simulator=None):
    return PlatformDescriptor(
        key=key,
        destination=destination,
        architectures=tuple(architectures),
        scheme_platform=scheme_platform,
        simulator=simulator,
    )


PLATFORMS: Dict[str, PlatformDescriptor] = {
    d.key: d
    for d in [
        _descriptor("carPlayOS", "generic/platform=carPlayOS",
                    [UNDEFINED_ARCHITECTURE], "carPlayOS", "carPlayOSSimulator"),
        _descriptor("carPlayOSSimulator", "generic/platform=carPlayOS Simulator",
                    [UNDEFINED_ARCHITECTURE], "carPlayOS"),
        _descriptor("iOS", "generic/platform=iOS",
                    ["arm64", "armv7"], "iOS", "iOSSimulator"),
        _descriptor("iOSSimulator", "generic/platform=iOS Simulator",
                    ["arm64", "i386", "x86_64"], "iOS"),
        _descriptor("iPadOS", "generic/platform=iPadOS",
                    [UNDEFINED_ARCHITECTURE], "iPadOS", "iPadOSSimulator"),
        _descriptor("iPadOSSimulator", "generic/platform=iPadOS Simulator",
                    [UNDEFINED_ARCHITECTURE], "iPadOS"),
        _descriptor("macOSCatalyst", "generic/platform=macOS,variant=Mac Catalyst",
                    [UNDEFINED_ARCHITECTURE], "Catalyst"),
        _descriptor("macOS", "generic/platform=macOS",
                    ["arm64", "x86_64"], "macOS"),
        _descriptor("tvOS", "generic/platform=tvOS",
                    ["arm64"], "tvOS", "tvOSSimulator"),
        _descriptor("tvOSSimulator", "generic/platform=tvOS Simulator",
                    ["arm64", "x86_64"], "tvOS"),
        _descriptor("watchOS", "generic/platform=watchOS",
                    ["arm64_32", "armv7k"], "watchOS", "watchOSSimulator"),
        _descriptor("watchOSSimulator", "generic/platform=watchOS Simulator",
                    ["arm64", "i386", "x86_64"], "watchOS"),
    ]
}

# Platforms a caller may request; simulators are added by expand_platforms()
REQUESTABLE_PLATFORMS = [
    "carPlayOS",
    "iOS",
    "iPadOS",
    "macOSCatalyst",
    "macOS",
    "tvOS",
    "watchOS",
]


def get_platform(platform: str) -> PlatformDescriptor:
    descriptor = PLATFORMS.get(platform)
    if descriptor is None:
        raise ConfigError(
            f"Unknown platform '{platform}', must be one of: {', '.join(PLATFORMS)}"
        )
    return descriptor


def destination_for(platform: str) -> str:
    return get_platform(platform).destination


def architectures_for(platform: str) -> List[str]:
    return list(get_platform(platform).architectures)


def library_identifier_for(platform: str) -> str:
    return get_platform(platform).library_identifier


def supported_platform_for(platform: str) -> str:
    return get_platform(platform).supported_platform


def scheme_name_for(base_scheme: str, platform: str) -> str:
    """Replace the first {{platform}} placeholder with the platform's scheme name."""
    return base_scheme.replace(
        SCHEME_PLATFORM_PLACEHOLDER, get_platform(platform).scheme_platform, 1
    )


def expand_platforms(requested: List[str]) -> List[str]:
    """
    Add the simulator sdk right after each platform that has one.

    The request order is kept, e.g. ["iOS", "macOS"] becomes
    ["iOS", "iOSSimulator", "macOS"].
    """
    sdks = []
    for platform in requested:
        descriptor = get_platform(platform)
        sdks.append(descriptor.key)
        if descriptor.simulator:
            sdks.append(descriptor.simulator)
    return sdks
