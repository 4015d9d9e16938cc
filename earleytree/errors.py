class EarleyError(Exception):
    """Base class for every error raised while loading, recognizing or extracting."""


class GrammarFormatError(EarleyError, ValueError):
    """A grammar line does not have the ``HEAD -> BODY`` shape."""

    def __init__(self, message: str, line: int | None = None):
        self.line = line
        if line is not None:
            message = f"Line {line}: {message}"
        super().__init__(message)


class UnknownTerminalError(EarleyError, ValueError):
    """An input atom does not name any terminal symbol of the grammar."""

    def __init__(self, atom: str, position: int | None = None):
        self.atom = atom
        self.position = position
        where = f" at position {position}" if position is not None else ""
        super().__init__(f"Unrecognized token{where}: {atom!r}")


class Rejected(EarleyError):
    """The input is not in the language of the grammar."""

    def __init__(self, token_count: int):
        self.token_count = token_count
        super().__init__(f"Input of {token_count} token(s) is not accepted by the grammar")


class AstReconstructionFailure(EarleyError):
    """The chart accepted the input but no derivation tree could be rebuilt from it."""
