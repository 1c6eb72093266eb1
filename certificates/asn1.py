"""
DER traversal and encoding of X.509 structures via a compiled ASN.1 schema.

The schema (x509.asn, RFC 5280 subset) is compiled once at import time and is
read-only afterwards, so it is safe to use from any number of threads.
"""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Tuple

import asn1tools

from certificates.errors import MalformedCertificate

ASN1_SCHEMA = Path(__file__).parent / "x509.asn"

asn1_compiler = asn1tools.compile_files([str(ASN1_SCHEMA)], codec="der")

UTC_TIME_FIRST_YEAR = 1950
UTC_TIME_LAST_YEAR = 2049


@dataclass(frozen=True)
class RawExtension:
    """An extension as stored in the certificate: OID, flag, undecoded payload."""

    oid: str
    critical: bool
    value: bytes


@dataclass(frozen=True)
class CertificateStructure:
    """Fields the parser needs that are only reachable through DER traversal."""

    public_key_algorithm_oid: str
    public_key: bytes
    signature_algorithm_oid: str
    signature_value: bytes
    extensions: Tuple[RawExtension, ...]


def bit_string_bytes(value: Any) -> bytes:
    """Content bytes of a decoded BIT STRING (asn1tools yields (bytes, bit_count))."""
    data, _ = value
    return bytes(data)


def decode_certificate(der: bytes) -> CertificateStructure:
    """
    Walks the outer certificate structure.

    Args:
        der: DER encoded certificate

    Returns:
        CertificateStructure with raw key/signature bytes and raw extensions

    Raises:
        MalformedCertificate: If the bytes do not follow the certificate grammar
    """
    try:
        certificate = asn1_compiler.decode("Certificate", der)
    except asn1tools.Error as e:
        raise MalformedCertificate(f"invalid certificate structure: {e}") from e

    tbs = certificate["tbsCertificate"]
    spki = tbs["subjectPublicKeyInfo"]
    extensions = tuple(
        RawExtension(
            oid=ext["extnID"],
            critical=bool(ext.get("critical", False)),
            value=bytes(ext["extnValue"]),
        )
        for ext in tbs.get("extensions", [])
    )

    return CertificateStructure(
        public_key_algorithm_oid=spki["algorithm"]["algorithm"],
        public_key=bit_string_bytes(spki["subjectPublicKey"]),
        signature_algorithm_oid=certificate["signatureAlgorithm"]["algorithm"],
        signature_value=bit_string_bytes(certificate["signatureValue"]),
        extensions=extensions,
    )


def decode(type_name: str, der: bytes) -> Any:
    """Decodes ``der`` as the named schema type; raises asn1tools.Error on failure."""
    return asn1_compiler.decode(type_name, der)


def decode_directory_string(der: bytes) -> str:
    """Text of a DER encoded DirectoryString (attribute value of a Name)."""
    _, text = asn1_compiler.decode("DirectoryString", der)
    return text


def encode(type_name: str, value: Any) -> bytes:
    """DER encoding of ``value`` as the named schema type."""
    return bytes(asn1_compiler.encode(type_name, value))


def leading_element(data: bytes) -> bytes:
    """
    The first DER element of ``data``, trailing bytes dropped.

    Returns ``data`` unchanged when no complete element length can be read.
    """
    try:
        length = asn1_compiler.decode_length(data)
    except asn1tools.Error:
        return data
    if length is None or length > len(data):
        return data
    return data[:length]


def _time_choice(value: datetime) -> Tuple[str, datetime]:
    # RFC 5280 4.1.2.5: UTCTime through 2049, GeneralizedTime otherwise
    if UTC_TIME_FIRST_YEAR <= value.year <= UTC_TIME_LAST_YEAR:
        return "utcTime", value
    return "generalTime", value


def encode_validity(not_before: datetime, not_after: datetime) -> bytes:
    """DER Validity SEQUENCE for two UTC-aware datetimes, in the given order."""
    return encode("Validity", {
        "notBefore": _time_choice(not_before),
        "notAfter": _time_choice(not_after),
    })


def with_validity(tbs_der: bytes, validity_der: bytes) -> Dict[str, Any]:
    """
    Decodes a TBSCertificate and swaps in another Validity.

    Every other field is carried over as decoded, so re-encoding yields the
    same bytes apart from the validity.
    """
    try:
        tbs = asn1_compiler.decode("TBSCertificate", tbs_der)
    except asn1tools.Error as e:
        raise MalformedCertificate(f"invalid TBSCertificate: {e}") from e
    tbs["validity"] = validity_der
    return tbs


def encode_certificate(tbs: Dict[str, Any], signature: bytes) -> bytes:
    """Assembles a signed certificate; the outer algorithm repeats tbs["signature"]."""
    return encode("Certificate", {
        "tbsCertificate": tbs,
        "signatureAlgorithm": tbs["signature"],
        "signatureValue": (signature, len(signature) * 8),
    })
