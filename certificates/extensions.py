"""
Extension Decoding - OID-keyed dispatch table (plus the KeyUsage encoder)

Each supported extension OID maps to a decoder producing one typed payload
variant. Extensions without a decoder, or whose payload does not decode as
the expected type, become an "Other" payload holding a structural dump; one
bad extension never fails the whole certificate.

Standards Reference:
- RFC 5280 Section 4.2.1 - Standard Extensions
"""

from ipaddress import ip_address
from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping, Optional, Tuple

import asn1tools
from cryptography import x509
from cryptography.x509.oid import ExtendedKeyUsageOID, ExtensionOID, ObjectIdentifier

from certificates import asn1
from certificates.asn1 import RawExtension
from certificates.types import (
    AuthorityKeyIdentifierValue,
    BasicConstraintsValue,
    ExtendedKeyUsageValue,
    ExtensionRecord,
    ExtensionValue,
    KeyUsageFlag,
    KeyUsageValue,
    OtherExtensionValue,
    SubjectAlternativeNameValue,
    SubjectKeyIdentifierValue,
)
from utils.hex_format import format_hex, format_integer_bytes
from utils.logger import X509Logger

logger = X509Logger.get_logger("ExtensionDecoder")

DECODE_ERRORS = (asn1tools.Error, ValueError, TypeError, KeyError, IndexError)

# KeyUsage ::= BIT STRING, bit 0 = digitalSignature ... bit 8 = decipherOnly
KEY_USAGE_BITS = (
    KeyUsageFlag.DIGITAL_SIGNATURE,
    KeyUsageFlag.CONTENT_COMMITMENT,
    KeyUsageFlag.KEY_ENCIPHERMENT,
    KeyUsageFlag.DATA_ENCIPHERMENT,
    KeyUsageFlag.KEY_AGREEMENT,
    KeyUsageFlag.KEY_CERT_SIGN,
    KeyUsageFlag.CRL_SIGN,
    KeyUsageFlag.ENCIPHER_ONLY,
    KeyUsageFlag.DECIPHER_ONLY,
)

EXTENDED_KEY_USAGE_FIELDS = MappingProxyType({
    ExtendedKeyUsageOID.SERVER_AUTH.dotted_string: "server_auth",
    ExtendedKeyUsageOID.CLIENT_AUTH.dotted_string: "client_auth",
    ExtendedKeyUsageOID.CODE_SIGNING.dotted_string: "code_signing",
    ExtendedKeyUsageOID.EMAIL_PROTECTION.dotted_string: "email_protection",
    ExtendedKeyUsageOID.TIME_STAMPING.dotted_string: "time_stamping",
    ExtendedKeyUsageOID.OCSP_SIGNING.dotted_string: "ocscp_signing",
    ExtendedKeyUsageOID.ANY_EXTENDED_KEY_USAGE.dotted_string: "any",
})


# ============================================================================
# GENERAL NAMES
# ============================================================================


def _directory_name(rdn_sequence: Any) -> x509.Name:
    _, rdns = rdn_sequence
    return x509.Name([
        x509.RelativeDistinguishedName([
            x509.NameAttribute(ObjectIdentifier(atv["type"]), asn1.decode_directory_string(atv["value"]))
            for atv in rdn
        ])
        for rdn in rdns
    ])


def to_general_name(choice: Tuple[str, Any]) -> x509.GeneralName:
    """
    Converts a decoded GeneralName CHOICE into a cryptography general name.

    Raises:
        ValueError: For name forms without a typed representation
            (x400Address, ediPartyName) or invalid content
    """
    kind, value = choice
    if kind == "dNSName":
        return x509.DNSName(value)
    if kind == "rfc822Name":
        return x509.RFC822Name(value)
    if kind == "uniformResourceIdentifier":
        return x509.UniformResourceIdentifier(value)
    if kind == "iPAddress":
        return x509.IPAddress(ip_address(bytes(value)))
    if kind == "registeredID":
        return x509.RegisteredID(ObjectIdentifier(value))
    if kind == "directoryName":
        return x509.DirectoryName(_directory_name(value))
    if kind == "otherName":
        return x509.OtherName(ObjectIdentifier(value["type-id"]), bytes(value["value"]))
    raise ValueError(f"unsupported general name type: {kind}")


def render_general_names(names: Any) -> Tuple[str, ...]:
    """Debug-form rendering, e.g. "<DNSName(value='example.com')>"."""
    return tuple(repr(to_general_name(choice)) for choice in names)


# ============================================================================
# TYPED DECODERS
# ============================================================================


def decode_basic_constraints(der: bytes) -> BasicConstraintsValue:
    value = asn1.decode("BasicConstraints", der)
    return BasicConstraintsValue(
        ca=bool(value.get("cA", False)),
        path_len_constraint=int(value.get("pathLenConstraint", 0)),
    )


def decode_key_usage(der: bytes) -> KeyUsageValue:
    data, bit_count = asn1.decode("KeyUsage", der)
    flags = set()
    for bit, flag in enumerate(KEY_USAGE_BITS):
        if bit < bit_count and data[bit // 8] & (0x80 >> (bit % 8)):
            flags.add(flag)
    return KeyUsageValue(flags=frozenset(flags))


def encode_key_usage(flags: Iterable[KeyUsageFlag]) -> bytes:
    """
    DER KeyUsage BIT STRING for a non-empty flag set.

    Trailing zero bits are dropped (X.690 11.2.2).
    """
    selected = frozenset(flags)
    bits = [bit for bit, flag in enumerate(KEY_USAGE_BITS) if flag in selected]
    if not bits:
        raise ValueError("KeyUsage requires at least one flag")

    bit_count = bits[-1] + 1
    data = bytearray((bit_count + 7) // 8)
    for bit in bits:
        data[bit // 8] |= 0x80 >> (bit % 8)
    return asn1.encode("KeyUsage", (bytes(data), bit_count))


def decode_extended_key_usage(der: bytes) -> ExtendedKeyUsageValue:
    purposes = asn1.decode("ExtKeyUsageSyntax", der)
    known = {}
    other = []
    for oid in purposes:
        field_name = EXTENDED_KEY_USAGE_FIELDS.get(oid)
        if field_name is None:
            other.append(oid)
        else:
            known[field_name] = True
    return ExtendedKeyUsageValue(other=tuple(other), **known)


def decode_subject_alternative_name(der: bytes) -> SubjectAlternativeNameValue:
    names = asn1.decode("SubjectAltName", der)
    return SubjectAlternativeNameValue(general_names=render_general_names(names))


def decode_authority_key_identifier(der: bytes) -> AuthorityKeyIdentifierValue:
    value = asn1.decode("AuthorityKeyIdentifier", der)
    serial = value.get("authorityCertSerialNumber")
    return AuthorityKeyIdentifierValue(
        key_identifier=format_hex(value.get("keyIdentifier")),
        authority_cert_issuer=render_general_names(value.get("authorityCertIssuer", [])),
        authority_cert_serial="" if serial is None else format_integer_bytes(serial),
    )


def decode_subject_key_identifier(der: bytes) -> SubjectKeyIdentifierValue:
    return SubjectKeyIdentifierValue(key_identifier=format_hex(asn1.decode("SubjectKeyIdentifier", der)))


EXTENSION_DECODERS: Mapping[str, Callable[[bytes], ExtensionValue]] = MappingProxyType({
    ExtensionOID.BASIC_CONSTRAINTS.dotted_string: decode_basic_constraints,
    ExtensionOID.KEY_USAGE.dotted_string: decode_key_usage,
    ExtensionOID.EXTENDED_KEY_USAGE.dotted_string: decode_extended_key_usage,
    ExtensionOID.SUBJECT_ALTERNATIVE_NAME.dotted_string: decode_subject_alternative_name,
    ExtensionOID.AUTHORITY_KEY_IDENTIFIER.dotted_string: decode_authority_key_identifier,
    ExtensionOID.SUBJECT_KEY_IDENTIFIER.dotted_string: decode_subject_key_identifier,
})


# ============================================================================
# DISPATCH
# ============================================================================


def structural_dump(raw: RawExtension, parsed: Optional[x509.ExtensionType] = None) -> str:
    """
    repr() of the extension as understood by cryptography, or of an
    UnrecognizedExtension carrying the raw payload.
    """
    if parsed is None:
        parsed = x509.UnrecognizedExtension(ObjectIdentifier(raw.oid), raw.value)
    return repr(parsed)


def decode_extension(raw: RawExtension, parsed: Optional[x509.ExtensionType] = None) -> ExtensionRecord:
    """
    Decodes one extension through the dispatch table.

    Args:
        raw: Extension as read from the certificate
        parsed: Same extension as decoded by cryptography, when available;
            only used for the "Other" structural dump

    Returns:
        ExtensionRecord with a typed payload, or an "Other" payload
    """
    value = None
    decoder = EXTENSION_DECODERS.get(raw.oid)
    if decoder is not None:
        try:
            value = decoder(raw.value)
        except DECODE_ERRORS as e:
            logger.warning(f"Extension {raw.oid} does not decode as expected type, using fallback: {e}")

    if value is None:
        value = OtherExtensionValue(dump=structural_dump(raw, parsed))

    return ExtensionRecord(oid=raw.oid, critical=raw.critical, value=value)
