class InvalidCoordinates(ValueError):
    """A pickup/dropoff coordinate or the distance derived from it is not finite."""


class DispatchInvariantError(AssertionError):
    """Entity store references something that does not exist (a programming bug)."""
