from __future__ import annotations


class BoardError(Exception):
    """Base class for every rejected board operation.

    The board is left unchanged whenever one of these is raised.
    """

    message = "Board operation rejected"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)


class InvalidPlacement(BoardError):
    message = "Block placement is invalid"


class IllegalMove(BoardError):
    message = "Move is not a legal unit step"


class BlockIndexOutOfRange(BoardError):
    message = "Block index is out of bounds"


class InvalidStateTransition(BoardError):
    message = "Board state transition is not allowed"


class NoMoveToUndo(BoardError):
    message = "No board moves to undo"


class InvalidBlockVariant(BoardError):
    message = "Block ID provided is invalid"


class BoardNotEditable(BoardError):
    message = "Board cannot be edited in its current state"


class CorruptRecord(BoardError):
    message = "Stored board record is inconsistent"


class BoardNotFound(BoardError):
    message = "No board with matching ID"


class BadRequest(BoardError):
    message = "Invalid request"
