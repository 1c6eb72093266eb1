"""
Certificates Package

Self-signed certificate generation and X.509 certificate parsing.
"""

from .errors import (
    InvalidInputShape,
    InvalidSubjectAltName,
    MalformedCertificate,
    SigningFailed,
    TimestampConversionFailed,
    X509Error,
)
from .generator import CertificateGenerator, generate_self_signed
from .parser import CertificateParser, parse_certificates
from .types import (
    AuthorityKeyIdentifierValue,
    BasicConstraintsValue,
    CertificateRequest,
    ExtendedKeyUsageValue,
    ExtensionRecord,
    KeyUsageFlag,
    KeyUsageValue,
    OtherExtensionValue,
    ParsedCertificate,
    SignedCertificateArtifact,
    SubjectAlternativeNameValue,
    SubjectKeyIdentifierValue,
)

__all__ = [
    # Operations
    "CertificateGenerator",
    "CertificateParser",
    "generate_self_signed",
    "parse_certificates",
    # Types
    "CertificateRequest",
    "KeyUsageFlag",
    "SignedCertificateArtifact",
    "ParsedCertificate",
    "ExtensionRecord",
    "BasicConstraintsValue",
    "KeyUsageValue",
    "ExtendedKeyUsageValue",
    "SubjectAlternativeNameValue",
    "AuthorityKeyIdentifierValue",
    "SubjectKeyIdentifierValue",
    "OtherExtensionValue",
    # Errors
    "X509Error",
    "InvalidInputShape",
    "InvalidSubjectAltName",
    "SigningFailed",
    "MalformedCertificate",
    "TimestampConversionFailed",
]
