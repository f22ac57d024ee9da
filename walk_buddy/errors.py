class ValidationError(ValueError):
    """Caller-fixable input problem. Views map it to HTTP 400."""


class ConfigurationError(RuntimeError):
    """A required collaborator is missing or does not expose the expected interface."""


class ProviderError(RuntimeError):
    """The external routing service could not produce a route."""


class NotFoundError(LookupError):
    """A record addressed by id does not exist. Views map it to HTTP 404."""
