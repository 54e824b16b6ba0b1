"""
Errors raised by nildb itself.

Backend driver and ORM errors are never wrapped; only the conditions this
layer detects on its own get a dedicated type.
"""


class NilDbError(Exception):
    """Base class for every error originated by nildb"""


class ConfigurationError(NilDbError, ValueError):
    """Backend configuration is invalid or incomplete"""


class UnsupportedBackendError(ConfigurationError):
    """No builder is registered for the requested backend kind"""

    def __init__(self, datastore_type):
        self.datastore_type = datastore_type
        super().__init__(f"Unsupported Backend: {datastore_type}")


class InvariantViolationError(NilDbError, RuntimeError):
    """A persistence call returned nothing where an instance is mandatory"""


class ModelValidationError(NilDbError, ValueError):
    """Instance data does not satisfy its model definition"""

    def __init__(self, model_name: str, errors):
        self.model_name = model_name
        self.errors = errors
        super().__init__(f"Invalid {model_name}: {errors}")
