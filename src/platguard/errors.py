# Copyright (c) 2024 Platguard Contributors
# MIT License

"""
Platguard Error Classes.

All custom exceptions raised by the guard layer. Guards raise and let the
caller decide; nothing here retries or falls back.
"""

from __future__ import annotations

import enum


class ExitCode(enum.IntEnum):
    """Exit codes used by the platguard CLI."""

    SUCCESS = 0
    PLATFORM_MISMATCH = 1
    CONFIG_ERROR = 3
    USAGE_ERROR = 4
    KEYBOARD_INTERRUPT = 130


class PlatguardError(Exception):
    """Base exception for all Platguard errors."""

    exit_code: int = ExitCode.PLATFORM_MISMATCH

    def __init__(self, message: str, details: str | None = None) -> None:
        self.message = message
        self.details = details
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}\n  Details: {self.details}"
        return self.message


class PlatformMismatch(PlatguardError):
    """Code restricted to one platform was used on another."""

    exit_code: int = ExitCode.PLATFORM_MISMATCH

    def __init__(
        self,
        message: str,
        target: str | None = None,
        current: str | None = None,
    ) -> None:
        self.target = target
        self.current = current
        super().__init__(message)


class NoHandlerForPlatform(PlatguardError, LookupError):
    """switch_platform() has no entry for the current platform."""

    exit_code: int = ExitCode.PLATFORM_MISMATCH

    def __init__(self, platform: str, message: str | None = None) -> None:
        self.platform = platform
        super().__init__(message or f"No function specified for platform: {platform}")


class GuardUsageError(PlatguardError, TypeError):
    """A guard was applied to something it cannot guard."""

    exit_code: int = ExitCode.USAGE_ERROR


class ConfigError(PlatguardError):
    """Error loading or validating guard configuration."""

    exit_code: int = ExitCode.CONFIG_ERROR

    def __init__(
        self,
        message: str,
        file_path: str | None = None,
        details: str | None = None,
    ) -> None:
        self.file_path = file_path
        location = f" in {file_path}" if file_path else ""
        super().__init__(f"Config error{location}: {message}", details)


class MessageTemplateError(ConfigError):
    """A configured failure message template could not be rendered."""

    def __init__(self, message: str, template: str | None = None) -> None:
        self.template = template

        details = None
        if template:
            # Truncate long templates
            truncated = template[:100] + "..." if len(template) > 100 else template
            details = f"Template: {truncated}"

        super().__init__(f"Message template error: {message}", details=details)
