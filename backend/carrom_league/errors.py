class TournamentError(Exception):
    pass


class NotFoundError(TournamentError, LookupError):
    pass


class InvalidArgumentError(TournamentError, ValueError):
    pass


class ConflictError(TournamentError):
    pass


class PermissionDeniedError(TournamentError):
    pass


# Raised after the optimistic snapshot has been reverted.
class PersistenceError(TournamentError):
    pass
