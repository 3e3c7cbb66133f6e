"""Infrastructure layer errors."""


class AdapterError(Exception):
    """Base infrastructure error."""

    pass


class RecommenderUnavailableError(AdapterError):
    """The recommender backend could not be reached or answered badly."""

    pass
