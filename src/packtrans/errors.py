# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Custom exceptions raised at the pack translation I/O boundaries."""

from __future__ import annotations


class PackTranslationError(RuntimeError):
    """Base class for failures raised while resolving pack translations."""


class FragmentFetchError(PackTranslationError):
    """Raised when a fragment or index file cannot be retrieved."""

    def __init__(self, url: str, reason: str | None = None) -> None:
        """Create the error for ``url`` with an optional ``reason``.

        Args:
            url: Location of the file that could not be retrieved.
            reason: Optional human-readable failure description.
        """

        super().__init__(f"{url}: {reason or 'fetch failed'}")
        self.url = url


class FragmentDecodeError(PackTranslationError):
    """Raised when a retrieved fragment is not valid JSON."""

    def __init__(self, url: str, reason: str | None = None) -> None:
        """Create the error for ``url`` with an optional ``reason``.

        Args:
            url: Location of the malformed document.
            reason: Optional parser message.
        """

        super().__init__(f"{url}: {reason or 'failed to parse JSON'}")
        self.url = url


class ConfigError(PackTranslationError):
    """Raised when engine configuration input is invalid."""


__all__ = (
    "ConfigError",
    "FragmentDecodeError",
    "FragmentFetchError",
    "PackTranslationError",
)
