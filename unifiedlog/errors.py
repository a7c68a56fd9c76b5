"""Exceptions raised while decoding unified log structures."""


class ParseError(ValueError):
    """Raised when binary log data is truncated or malformed."""