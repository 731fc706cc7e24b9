"""
platforms.py

Responsibility: The closed sets of OS and architecture tags an artifact can carry,
plus the Homebrew DSL block each one renders to.
"""

from __future__ import annotations

from enum import Enum

from brewpub.errors import ConfigError


class Os(str, Enum):
    LINUX = "linux"
    DARWIN = "darwin"
    WINDOWS = "windows"

    @classmethod
    def parse(cls, text: str) -> Os:
        key = str(text).strip().lower()
        value = _OS_ALIASES.get(key, key)
        try:
            return cls(value)
        except ValueError as e:
            raise ConfigError(f"Unknown os tag: {text!r}") from e

    @property
    def homebrew_block(self) -> str | None:
        # Homebrew has no Windows support; templates skip entries without a block.
        return {Os.LINUX: "on_linux", Os.DARWIN: "on_macos"}.get(self)


class Arch(str, Enum):
    AMD64 = "amd64"
    ARM64 = "arm64"
    I386 = "386"
    ARM = "arm"

    @classmethod
    def parse(cls, text: str) -> Arch:
        key = str(text).strip().lower()
        value = _ARCH_ALIASES.get(key, key)
        try:
            return cls(value)
        except ValueError as e:
            raise ConfigError(f"Unknown arch tag: {text!r}") from e

    @property
    def homebrew_block(self) -> str:
        return "on_arm" if self in (Arch.ARM64, Arch.ARM) else "on_intel"


_OS_ALIASES = {
    "macos": "darwin",
    "osx": "darwin",
    "mac": "darwin",
    "apple-darwin": "darwin",
    "win": "windows",
    "win32": "windows",
}

_ARCH_ALIASES = {
    "x86_64": "amd64",
    "x64": "amd64",
    "aarch64": "arm64",
    "i386": "386",
    "i686": "386",
    "x86": "386",
    "armv7": "arm",
    "armv7l": "arm",
}
