"""Custom exceptions for ladderkit."""


class LadderKitError(Exception):
    """Base exception for all ladderkit errors."""
    pass


class MalformedLabelError(LadderKitError, ValueError):
    """Raised when an allele label does not parse as repeats[.microvariant]."""

    def __init__(self, label: str, reason: str | None = None):
        self.label = label
        message = f"Malformed allele label: {label!r}"
        if reason is not None:
            message = f"{message} ({reason})"
        super().__init__(message)


class EmptyLocusError(LadderKitError):
    """Raised when BP positions are requested for a locus without alleles."""

    def __init__(self, locus_name: str):
        self.locus_name = locus_name
        super().__init__(f"Locus {locus_name} has no alleles to anchor BP computation")


class UnresolvedMergeTargetError(LadderKitError):
    """Raised when a merge cannot find the target locus by name."""

    def __init__(self, locus_name: str):
        self.locus_name = locus_name
        super().__init__(f"Could not find locus matching name: {locus_name}")


class LadderInputError(LadderKitError):
    """Exception raised while reading panels, bins or channel map input."""

    def __init__(self, message: str, line_number: int | None = None, line_content: str | None = None):
        self.line_number = line_number
        self.line_content = line_content

        if line_number is not None:
            message = f"Line {line_number}: {message}"
        if line_content is not None:
            message = f"{message} (content: {line_content[:50]})"

        super().__init__(message)


class LadderIOError(LadderKitError):
    """Raised when an input cannot be read or an output cannot be written."""

    def __init__(self, message: str, path=None):
        self.path = path
        if path is not None:
            message = f"{message}: {path}"
        super().__init__(message)
