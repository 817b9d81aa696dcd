"""Exception types raised by the spgateway codec and clients."""


class SpgatewayError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(SpgatewayError):
    """The client configuration is unusable."""


class MissingOptionError(ConfigurationError):
    def __init__(self, option):
        self.option = option
        super().__init__(f'option "{option}" is required.')


class InvalidModeError(ConfigurationError):
    def __init__(self, mode):
        self.mode = mode
        super().__init__(f"option mode is either test or production, got {mode!r}")


class InvalidCredentialError(ConfigurationError):
    """HashKey or HashIV does not fit the cipher's key or IV size."""


class MissingFieldError(SpgatewayError, KeyError):
    """A required field is absent from a parameter map."""

    def __init__(self, field, message=None):
        self.field = field
        self.message = message or f'param "{field}" is required.'
        super().__init__(self.message)

    def __str__(self):
        return self.message


class UnsupportedProfileError(SpgatewayError):
    def __init__(self, name):
        self.name = name
        super().__init__(f"Unsupported API type: {name!r}")


class UnsupportedTypeError(UnsupportedProfileError):
    """A client was asked for an endpoint it has no URL for."""


class CodecError(SpgatewayError):
    """Malformed hex, bad block alignment or a cipher failure."""


class DecodeError(SpgatewayError):
    """The gateway replied with a body that cannot be parsed."""
