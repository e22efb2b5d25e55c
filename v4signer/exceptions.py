class SigV4Error(Exception):
    """Base class for errors raised while signing a request."""


class BodyReadError(SigV4Error, OSError):
    """The request body could not be fully read and rewound for hashing."""
