"""Exception hierarchy for the fhEVM example hub.

All hub exceptions inherit from HubError so the CLI can report every
operator-facing failure the same way. Soft failures (missing tests, missing
dependency files, unresolved dependency names) are logged, never raised.
"""

from __future__ import annotations

from pathlib import Path

# ============================================================================
# Base Exception
# ============================================================================


class HubError(Exception):
    """Base exception for all fhevm-hub errors.

    Catch this to handle every failure the pipeline reports on purpose.
    """

    pass


# ============================================================================
# Configuration Errors
# ============================================================================


class ConfigurationError(HubError):
    """Raised when configuration is invalid or missing.

    Examples
    --------
    Example usage::

        raise ConfigurationError("missing_file_policy", "must be 'warn' or 'strict'")
    """

    def __init__(self, component: str, reason: str) -> None:
        """Initialize configuration error.

        Args
        ----
            component: Name of the setting or section with invalid configuration
            reason: Explanation of what's wrong
        """
        super().__init__(f"Configuration error in '{component}': {reason}")
        self.component = component
        self.reason = reason


# ============================================================================
# Registry Errors
# ============================================================================


class DeployPlanError(HubError):
    """Raised when a ``@custom:deploy-plan`` annotation cannot be normalized.

    A broken plan would otherwise produce a broken deploy script in every
    scaffold, so registry construction stops here.

    Examples
    --------
    Example usage::

        raise DeployPlanError(Path("contracts/basic/Foo.sol"), "Expecting value: line 1")
    """

    def __init__(self, source_file: Path | str | None, reason: str) -> None:
        """Initialize deploy plan error.

        Args
        ----
            source_file: Contract file carrying the annotation (if known)
            reason: Parser or validation message
        """
        location = f" in {source_file}" if source_file else ""
        super().__init__(f"Invalid @custom:deploy-plan{location}: {reason}")
        self.source_file = source_file
        self.reason = reason


class DuplicateSlugError(HubError):
    """Raised when two example files normalize to the same slug.

    Examples
    --------
    Example usage::

        raise DuplicateSlugError("counter", Path("basic/Counter.sol"), Path("games/Counter.sol"))
    """

    def __init__(self, slug: str, first: Path, second: Path) -> None:
        super().__init__(f"Duplicate example slug '{slug}': {first} and {second}")
        self.slug = slug
        self.first = first
        self.second = second


class ResourceNotFoundError(HubError):
    """Raised when an example, category or file identifier is unknown.

    Examples
    --------
    Example usage::

        raise ResourceNotFoundError("example", "fhe-countr", ["fhe-counter", "fhe-eq"])
    """

    def __init__(
        self, resource_type: str, resource_id: str, available: list[str] | None = None
    ) -> None:
        """Initialize resource not found error.

        Args
        ----
            resource_type: Type of resource (e.g., "example", "category")
            resource_id: Identifier of the missing resource
            available: Valid identifiers (optional)
        """
        msg = f"Unknown {resource_type}: {resource_id}"
        if available:
            msg += f". Available: {', '.join(available)}"
        super().__init__(msg)
        self.resource_type = resource_type
        self.resource_id = resource_id
        self.available = available or []


# ============================================================================
# Scaffold Errors
# ============================================================================


class OutputDirectoryNotEmptyError(HubError):
    """Raised before any write when a scaffold target already has content."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Output directory is not empty: {path}")
        self.path = path


class TemplateNotFoundError(HubError):
    """Raised when no usable project template can be found or fetched.

    The message always carries remediation guidance.
    """

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class MissingSourceFileError(HubError):
    """Raised for a missing referenced source file under the strict file policy."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"File not found: {path}")
        self.path = path


class CommandFailedError(HubError):
    """Raised when a blocking child process exits with a non-zero status.

    Examples
    --------
    Example usage::

        raise CommandFailedError(["npm", "install"], 1)
    """

    def __init__(self, command: list[str], returncode: int | None, reason: str = "") -> None:
        """Initialize command failure.

        Args
        ----
            command: The argv that was executed
            returncode: Exit status (None when the process could not start)
            reason: Extra detail, e.g. the OS error
        """
        pretty = " ".join(command)
        if returncode is None:
            msg = f"{pretty} could not be started: {reason}"
        else:
            msg = f"{pretty} failed with exit code {returncode}"
        super().__init__(msg)
        self.command = command
        self.returncode = returncode
