"""Custom exceptions shared across layers.

NOTE: the rules engine itself never raises for an invalid move. It returns the state it was given.
These are for the boundaries: loading snapshots, validating requests, finding stored games.
"""


class GameError(Exception):
    """Top-level exception for anything going wrong around a game."""


class InvalidSnapshotError(GameError):
    """A stored / transported game snapshot does not describe a valid game."""


class InvalidRequestError(GameError):
    """Request data that cannot be interpreted."""


class UnknownActionError(GameError):
    """Dispatching an action type that has no transition attached to it."""


class RepositoryError(GameError):
    """Problems finding / storing a game record."""
