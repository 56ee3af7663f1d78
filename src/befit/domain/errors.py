"""Domain exceptions."""


class AuthenticationError(Exception):
    """Raised when credentials or a session token are not valid."""


class DuplicateAccountError(Exception):
    """Raised when registering an email that already has an account."""


class StoreUnavailableError(Exception):
    """Raised when the remote store cannot be reached."""


class MealAnalysisError(Exception):
    """Raised when a meal could not be analyzed by the model."""
