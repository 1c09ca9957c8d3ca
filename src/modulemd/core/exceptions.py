"""Custom exceptions for modulemd."""


class ContractViolation(Exception):
    """A caller broke a documented precondition.

    This signals a programming error (for example constructing a stream with
    an unknown mdversion or a Module without a name). It deliberately does
    not derive from ModulemdError so that ``except ModulemdError`` handlers
    for recoverable failures never swallow it.
    """

    pass


class ModulemdError(Exception):
    """Base exception for all recoverable modulemd errors."""

    pass


class ParseError(ModulemdError):
    """YAML text is malformed or does not have the expected structure."""

    def __init__(self, message: str, line: int | None = None):
        """Initialize exception with an optional source line.

        Args:
            message: Description of the problem.
            line: 1-based line number in the source text, if known.
        """
        self.line = line
        if line is not None:
            message = f"{message} (line {line})"
        super().__init__(message)


class ValidationError(ModulemdError):
    """A schema rule or cross-field rule was violated."""

    pass


class MdVersionError(ValidationError):
    """Metadata versions of two objects are incompatible."""

    pass


class BuildOrderError(ValidationError):
    """Component buildorder/buildafter settings are inconsistent."""

    pass


class NoMatchesError(ModulemdError):
    """A stream query matched nothing."""

    pass


class TooManyMatchesError(ModulemdError):
    """A stream query matched more than one stream."""

    pass


class MergeConflictError(ModulemdError):
    """Two sources contributed irreconcilable metadata."""

    def __init__(self, conflicts: list[str]):
        """Initialize exception with every conflict found.

        Args:
            conflicts: Human-readable description of each conflict.
        """
        self.conflicts = list(conflicts)
        if len(self.conflicts) == 1:
            message = f"Merge conflict: {self.conflicts[0]}"
        else:
            message = f"{len(self.conflicts)} merge conflicts:\n" + "\n".join(
                f"  - {c}" for c in self.conflicts
            )
        super().__init__(message)


class EmitError(ModulemdError):
    """Serializing an object to YAML failed."""

    pass
