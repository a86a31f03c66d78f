"""Exception hierarchy for specsamples.

All exceptions inherit from :class:`SpecSamplesError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`specsamples.exit_codes`.
The CLI command catches ``SpecSamplesError``, reports the message on stderr
and exits with the error's code, while unexpected exceptions produce a crash
log and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    SpecSamplesError (exit 1)
    +-- InvalidUsageError        missing or malformed CLI arguments
    +-- ConfigError              unreadable project config
    +-- InvalidTargetError       target not in the supported vocabulary
    +-- OutputFormatError        output file name does not denote JSON
    +-- SpecParseError           source cannot be read or parsed
    +-- SpecStructureError       document lacks a required property
    +-- SnippetGenerationError   generator rejected an operation
    +-- OutputWriteError         result could not be written
    +-- PluginError              generator plugin could not be loaded
"""

from specsamples.exit_codes import EXIT_GENERIC_FAILURE


class SpecSamplesError(Exception):
    """Base exception for all specsamples errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(SpecSamplesError):
    """Raised when the source or output argument is missing."""


class ConfigError(SpecSamplesError):
    """Raised for configuration problems (invalid project config JSON, bad values)."""


class InvalidTargetError(SpecSamplesError):
    """Raised when a requested target is not part of the supported vocabulary.

    Args:
        target: The offending identifier.
    """

    def __init__(self, target: str):
        super().__init__(f"Target '{target}' is not valid")
        self.target = target


class OutputFormatError(SpecSamplesError):
    """Raised when the requested output file name does not denote JSON."""


class SpecParseError(SpecSamplesError):
    """Raised when the source document cannot be read or parsed."""


class SpecStructureError(SpecSamplesError):
    """Raised when a document lacks a property the engine requires.

    Args:
        property_name: Name of the missing or malformed property.
        message: Human-readable description.
    """

    def __init__(self, property_name: str, message: str):
        super().__init__(message)
        self.property_name = property_name


class SnippetGenerationError(SpecSamplesError):
    """Raised when the snippet generator cannot build a request for an operation."""


class OutputWriteError(SpecSamplesError):
    """Raised when the enriched document cannot be written to disk."""


class PluginError(SpecSamplesError):
    """Raised when a snippet generator plugin fails to load."""
