class InvalidArgumentError(ValueError):
    """Raised for an unknown method or auth scheme, or a body on a bodyless method."""


class InvalidStateError(RuntimeError):
    """Raised when an object's state forbids the operation, e.g. appending to a sealed multipart body."""


class UnsupportedPartTypeError(TypeError):
    def __init__(self, part: object):
        self.message = f"non-supported part type: {type(part).__name__}"
        super().__init__(self.message)


class ParseError(ValueError):
    def __init__(self, message: str, body: bytes = b""):
        self.message = message
        self.body = body
        super().__init__(self.message)
