"""Exceptions raised by the championship ledger."""


class LedgerError(Exception):
    """Base exception for ledger errors."""


class DataSourceError(LedgerError):
    """An external collaborator (database, market data) call failed."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ChampionshipNotFoundError(LedgerError):
    """Championship does not exist."""

    def __init__(self, championship_id: str):
        super().__init__(f"Championship not found: {championship_id}")
        self.championship_id = championship_id


class ProfileNotFoundError(LedgerError):
    """A roster entry has no resolvable profile."""

    def __init__(self, user_email: str):
        super().__init__(f"Profile not found: {user_email}")
        self.user_email = user_email


class LeaderboardComputationError(LedgerError):
    """
    A participant's standing could not be computed.

    The message is the upstream failure message, unchanged, so it can be
    shown to the user as is.
    """

    def __init__(self, message: str, user_email: str | None = None):
        super().__init__(message)
        self.user_email = user_email
