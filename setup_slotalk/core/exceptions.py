"""
Centralized exception hierarchy for setup-slotalk.

Library code raises these; the CLI and the workflow entry point translate
them into log messages and exit codes.
"""


# ============================================================================
# Base Exceptions
# ============================================================================


class SetupSlotalkError(Exception):
    """Base exception for all setup-slotalk errors."""

    pass


class ConfigError(SetupSlotalkError):
    """Invalid or unreadable configuration."""

    pass


class InputError(SetupSlotalkError):
    """A required pipeline input is missing."""

    pass


# ============================================================================
# Resolution Exceptions
# ============================================================================


class InvalidVersionError(SetupSlotalkError):
    """Version string cannot be turned into a release tag."""

    pass


class UnsupportedPlatformError(SetupSlotalkError):
    """Raised when the host os/arch has no published slotalk binary."""

    def __init__(self, system: str, machine: str):
        self.system = system
        self.machine = machine
        super().__init__(
            "the installer was not able to find a valid slotalk binary "
            f"for the host runner os/arch: {system}/{machine}"
        )


# ============================================================================
# Install Exceptions
# ============================================================================


class DownloadError(SetupSlotalkError):
    """Raised when a release archive cannot be fetched."""

    def __init__(self, url: str, reason: str = ""):
        self.url = url
        self.reason = reason
        msg = f"Failed to download slotalk from location {url}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class ArchiveExtractionError(SetupSlotalkError):
    """Failed to extract an archive."""

    pass


class InsecureArchiveError(ArchiveExtractionError):
    """Archive contains insecure paths (directory traversal attempt)."""

    pass


class ExecutableNotFoundError(SetupSlotalkError):
    """Raised when no file with the tool name exists under a search root."""

    def __init__(self, root, name: str = "slotalk"):
        self.root = root
        self.name = name
        super().__init__(f"Slotalk executable '{name}' not found in path {root}")


# ============================================================================
# Tool Cache Exceptions
# ============================================================================


class RegistryError(SetupSlotalkError):
    """Base exception for tool cache index errors."""

    pass


class RegistryLockTimeout(RegistryError):
    """Raised when the cache index lock cannot be acquired within timeout."""

    pass
