"""
Error kinds raised by the certificate generator and parser.

Every error derives from ValueError so callers that already guard certificate
handling with ``except ValueError`` keep working.
"""


class X509Error(ValueError):
    """Base class for all X.509 toolkit errors."""


class InvalidInputShape(X509Error):
    """The caller supplied an input value of the wrong structural type."""


class InvalidSubjectAltName(X509Error):
    """A subject alternative name does not parse as a supported name form."""

    def __init__(self, name: str, reason: str):
        self.name = name
        self.reason = reason
        super().__init__(f"invalid subject alternative name {name!r}: {reason}")


class SigningFailed(X509Error):
    """The signing primitive rejected the assembled certificate parameters."""


class MalformedCertificate(X509Error):
    """The byte buffer is not a well-formed certificate structure."""


class TimestampConversionFailed(X509Error):
    """A timestamp cannot be represented in the target time type."""
