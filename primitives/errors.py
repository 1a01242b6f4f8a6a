"""Errors raised by the proving backend."""


class BackendError(RuntimeError):
    """Failure inside the proving backend (domain, commitment or quotient computation).

    Raised by primitives and propagated to callers unchanged.
    """
