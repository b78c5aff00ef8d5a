# errors.py


class UserServiceError(Exception):
    """Base class for errors raised by the users service"""


class ConfigurationError(UserServiceError):
    """A required setting is missing or malformed"""

    def __init__(self, message, variable=None):
        super().__init__(message)
        self.variable = variable


class QueryError(UserServiceError):
    """A read round trip to Cosmos DB failed"""


class WriteError(UserServiceError):
    """A create, delete or setup round trip to Cosmos DB failed"""


class NotFound(UserServiceError):
    """The requested document does not exist"""


class DeserializationError(UserServiceError):
    """A stored document does not have the shape of a User"""
