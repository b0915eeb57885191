"""Exception hierarchy for the search core.

Precondition errors signal a broken contract between the search and the rules
engine (or a caller misusing a session). They are never caught by the core.
"""


class ChessAIError(Exception):
    """Base class for every error raised by chess_ai."""


class PreconditionError(ChessAIError):
    """A caller or collaborator violated an invariant; the operation was aborted."""


class IllegalMoveError(PreconditionError):
    def __init__(self, move, fen: str):
        super().__init__(f"Illegal move {move} in position {fen}")
        self.move = move
        self.fen = fen


class EmptyHistoryError(PreconditionError):
    def __init__(self):
        super().__init__("undo requested with no applied move pending")


class InvalidPositionError(PreconditionError):
    pass


class InvalidTablesError(PreconditionError):
    pass


class SearchInvariantError(PreconditionError):
    pass


class NotYourTurnError(PreconditionError):
    pass


class SessionNotInitializedError(ChessAIError):
    def __init__(self, operation: str):
        super().__init__(f"{operation}() called before initialize()")
        self.operation = operation


class SessionBusyError(ChessAIError):
    def __init__(self):
        super().__init__("a search is running; the position cannot be changed until it returns")


class SearchCancelled(ChessAIError):
    """Raised out of a search whose stop event was set. The board is left unchanged."""
