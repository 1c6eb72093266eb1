"""
X.509 Core Types

Defines the request/record value objects exchanged by the certificate generator
and parser, plus the closed set of typed extension payloads.

All objects are request-scoped and immutable; none of them is retained by the
generator or the parser after a call returns.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, ClassVar, Dict, FrozenSet, List, Optional, Tuple, Union

from config.x509_config import X509_DEFAULTS


# ============================================================================
# ENUMERATIONS
# ============================================================================


class KeyUsageFlag(Enum):
    """
    Key usage bits (RFC 5280 Section 4.2.1.3)

    Values are the selector tokens accepted by ``parse_selector``.
    """

    DIGITAL_SIGNATURE = "digital_signature"
    CONTENT_COMMITMENT = "content_commitment"
    KEY_ENCIPHERMENT = "key_encipherment"
    DATA_ENCIPHERMENT = "data_encipherment"
    KEY_AGREEMENT = "key_agreement"
    KEY_CERT_SIGN = "key_cert_sign"
    CRL_SIGN = "crl_sign"
    ENCIPHER_ONLY = "encipher_only"
    DECIPHER_ONLY = "decipher_only"

    @classmethod
    def parse_selector(cls, selector: Optional[str]) -> FrozenSet["KeyUsageFlag"]:
        """
        Parses a comma-separated key usage selector.

        Tokens are whitespace-trimmed and matched case-sensitively; unknown
        tokens are dropped without error.

        Example:
            >>> KeyUsageFlag.parse_selector("digital_signature, bogus")
            frozenset({<KeyUsageFlag.DIGITAL_SIGNATURE: 'digital_signature'>})
        """
        if not selector:
            return frozenset()
        known = {flag.value: flag for flag in cls}
        tokens = (token.strip() for token in selector.split(","))
        return frozenset(known[token] for token in tokens if token in known)


# ============================================================================
# GENERATION
# ============================================================================


@dataclass(frozen=True)
class CertificateRequest:
    """
    Policy inputs for a self-signed certificate.

    ca_constraint: -1 (or any negative value) = end-entity, 0 = CA without
    path length constraint, >0 = CA with path length = value.
    """

    subject_alt_names: Tuple[str, ...] = ()
    common_name: str = X509_DEFAULTS.COMMON_NAME
    not_before: datetime = X509_DEFAULTS.NOT_BEFORE
    not_after: datetime = X509_DEFAULTS.NOT_AFTER
    ca_constraint: int = X509_DEFAULTS.NOT_A_CA
    key_usages: FrozenSet[KeyUsageFlag] = frozenset()

    def __post_init__(self):
        object.__setattr__(self, "subject_alt_names", tuple(self.subject_alt_names))
        object.__setattr__(self, "key_usages", frozenset(self.key_usages))

    @property
    def is_ca(self) -> bool:
        return self.ca_constraint >= 0

    @property
    def path_length(self) -> Optional[int]:
        """Path length constraint, None when unconstrained or not a CA."""
        if self.ca_constraint > 0:
            return self.ca_constraint & X509_DEFAULTS.MAX_PATH_LENGTH
        return None


@dataclass(frozen=True)
class SignedCertificateArtifact:
    """PEM certificate and PEM private key produced by one generation call."""

    certificate_pem: str
    private_key_pem: str = field(repr=False)

    def to_dict(self) -> Dict[str, str]:
        return {"crt": self.certificate_pem, "key": self.private_key_pem}


# ============================================================================
# EXTENSION PAYLOADS (closed variant set)
# ============================================================================


@dataclass(frozen=True)
class BasicConstraintsValue:
    TYPE_NAME: ClassVar[str] = "BasicConstraints"

    ca: bool
    path_len_constraint: int = 0

    def to_value(self) -> Dict[str, Any]:
        return {"ca": self.ca, "path_len_constraint": self.path_len_constraint}


@dataclass(frozen=True)
class KeyUsageValue:
    TYPE_NAME: ClassVar[str] = "KeyUsage"

    flags: FrozenSet[KeyUsageFlag] = frozenset()

    def __post_init__(self):
        object.__setattr__(self, "flags", frozenset(self.flags))

    def is_set(self, flag: KeyUsageFlag) -> bool:
        return flag in self.flags

    def to_value(self) -> Dict[str, bool]:
        return {flag.value: flag in self.flags for flag in KeyUsageFlag}


@dataclass(frozen=True)
class ExtendedKeyUsageValue:
    """
    Extended key usage purposes.

    The field is spelled ``ocscp_signing`` in the host record; the attribute
    keeps that name so the two never drift apart.
    """

    TYPE_NAME: ClassVar[str] = "ExtendedKeyUsage"

    server_auth: bool = False
    client_auth: bool = False
    code_signing: bool = False
    email_protection: bool = False
    time_stamping: bool = False
    ocscp_signing: bool = False
    any: bool = False
    other: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "other", tuple(self.other))

    def to_value(self) -> Dict[str, Any]:
        return {
            "server_auth": self.server_auth,
            "client_auth": self.client_auth,
            "code_signing": self.code_signing,
            "email_protection": self.email_protection,
            "time_stamping": self.time_stamping,
            "ocscp_signing": self.ocscp_signing,
            "any": self.any,
            "other": list(self.other),
        }


@dataclass(frozen=True)
class SubjectAlternativeNameValue:
    TYPE_NAME: ClassVar[str] = "SubjectAlternativeName"

    general_names: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "general_names", tuple(self.general_names))

    def to_value(self) -> List[str]:
        return list(self.general_names)


@dataclass(frozen=True)
class AuthorityKeyIdentifierValue:
    TYPE_NAME: ClassVar[str] = "AuthorityKeyIdentifier"

    key_identifier: str = ""
    authority_cert_issuer: Tuple[str, ...] = ()
    authority_cert_serial: str = ""

    def __post_init__(self):
        object.__setattr__(self, "authority_cert_issuer", tuple(self.authority_cert_issuer))

    def to_value(self) -> Dict[str, Any]:
        return {
            "key_identifier": self.key_identifier,
            "authority_cert_issuer": list(self.authority_cert_issuer),
            "authority_cert_serial": self.authority_cert_serial,
        }


@dataclass(frozen=True)
class SubjectKeyIdentifierValue:
    TYPE_NAME: ClassVar[str] = "SubjectKeyIdentifier"

    key_identifier: str

    def to_value(self) -> str:
        return self.key_identifier


@dataclass(frozen=True)
class OtherExtensionValue:
    """Fallback payload: structural dump of an extension with no typed decoder."""

    TYPE_NAME: ClassVar[str] = "Other"

    dump: str

    def to_value(self) -> str:
        return self.dump


ExtensionValue = Union[
    BasicConstraintsValue,
    KeyUsageValue,
    ExtendedKeyUsageValue,
    SubjectAlternativeNameValue,
    AuthorityKeyIdentifierValue,
    SubjectKeyIdentifierValue,
    OtherExtensionValue,
]


# ============================================================================
# PARSED RECORDS
# ============================================================================


@dataclass(frozen=True)
class ExtensionRecord:
    oid: str
    critical: bool
    value: ExtensionValue

    @property
    def name(self) -> str:
        return self.value.TYPE_NAME

    def to_dict(self) -> Dict[str, Any]:
        return {
            "oid": self.oid,
            "name": self.name,
            "critical": self.critical,
            "value": self.value.to_value(),
        }


@dataclass(frozen=True)
class ParsedCertificate:
    """
    Field-complete description of one decoded certificate.

    subject_public_key and signature_value are colon-grouped hex blocks
    (16 pairs per line); serial is compact lowercase hex.
    """

    version: int
    serial: str
    issuer: str
    subject: str
    not_before: datetime
    not_after: datetime
    subject_public_key_algorithm: str
    subject_public_key: str
    extensions: Tuple[ExtensionRecord, ...]
    signature_algorithm: str
    signature_value: str

    def __post_init__(self):
        object.__setattr__(self, "extensions", tuple(self.extensions))

    def get_extension(self, name: str) -> Optional[ExtensionRecord]:
        """First extension with the given type name, or None."""
        for extension in self.extensions:
            if extension.name == name:
                return extension
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "serial": self.serial,
            "issuer": self.issuer,
            "validity": {
                "not_before": self.not_before,
                "not_after": self.not_after,
            },
            "subject": self.subject,
            "subject_pki": {
                "subject_public_key": self.subject_public_key_algorithm,
                "subject_public_key_value": self.subject_public_key,
            },
            "extensions": [extension.to_dict() for extension in self.extensions],
            "signature_algorithm": self.signature_algorithm,
            "signature_value": self.signature_value,
        }
