"""
Certificate parsing.

Detects the input encoding (PEM blocks or raw DER), decodes every certificate
found and describes it as a ParsedCertificate, extensions included.
"""

from typing import Dict, List

from cryptography import x509

from certificates import asn1
from certificates.errors import InvalidInputShape, MalformedCertificate
from certificates.extensions import decode_extension
from certificates.oid_registry import algorithm_name
from certificates.pem import iter_pem_blocks
from certificates.types import ParsedCertificate
from utils.hex_format import format_hex_block, format_serial
from utils.logger import X509Logger


def render_name(name: x509.Name) -> str:
    """
    RDNs in certificate order, joined by ", " (e.g. "C=US, O=Org, CN=host").

    Attributes of a multi-valued RDN are joined by "+".
    """
    return ", ".join(rdn.rfc4514_string() for rdn in name.rdns)


def load_certificate(der: bytes) -> x509.Certificate:
    """
    Loads one DER certificate.

    Raises:
        MalformedCertificate: If the bytes are not a well-formed certificate
    """
    try:
        return x509.load_der_x509_certificate(der)
    except (ValueError, x509.InvalidVersion) as e:
        raise MalformedCertificate(f"invalid DER certificate: {e}") from e


class CertificateParser:
    """
    Decodes byte buffers holding one or more X.509 certificates.

    Stateless and deterministic: the same buffer always yields equal records.
    """

    def __init__(self):
        self.logger = X509Logger.get_logger("CertificateParser")

    def split_certificates(self, data: bytes) -> List[bytes]:
        """
        Extracts the DER payload of every certificate in the buffer.

        PEM blocks that do not hold a loadable certificate are skipped. When no
        PEM block yields a certificate, the buffer is taken as raw DER: only its
        first element is parsed and any trailing bytes are ignored.
        """
        ders = []
        for label, der in iter_pem_blocks(data):
            try:
                load_certificate(der)
            except MalformedCertificate:
                self.logger.debug(f"Skipping PEM block {label!r}: not a certificate")
                continue
            ders.append(der)

        if not ders:
            self.logger.debug("No PEM certificate found, treating input as raw DER")
            der = asn1.leading_element(data)
            if len(der) < len(data):
                self.logger.debug(f"Ignoring {len(data) - len(der)} byte(s) after the DER certificate")
            return [der]

        self.logger.debug(f"Found {len(ders)} PEM certificate(s)")
        return ders

    def _parsed_extensions(self, certificate: x509.Certificate) -> Dict[str, x509.ExtensionType]:
        # cryptography decodes all extensions at once and fails as a whole
        try:
            return {ext.oid.dotted_string: ext.value for ext in certificate.extensions}
        except (ValueError, x509.DuplicateExtension, x509.UnsupportedGeneralNameType) as e:
            self.logger.debug(f"cryptography cannot decode extensions: {e}")
            return {}

    def parse_der(self, der: bytes) -> ParsedCertificate:
        """
        Decodes a single DER certificate.

        Raises:
            MalformedCertificate: If the outer structure is invalid
        """
        certificate = load_certificate(der)
        structure = asn1.decode_certificate(der)
        parsed_extensions = self._parsed_extensions(certificate)

        extensions = [
            decode_extension(raw, parsed_extensions.get(raw.oid))
            for raw in structure.extensions
        ]

        try:
            version = certificate.version.value
            issuer = render_name(certificate.issuer)
            subject = render_name(certificate.subject)
            not_before = certificate.not_valid_before_utc
            not_after = certificate.not_valid_after_utc
        except (ValueError, x509.InvalidVersion) as e:
            raise MalformedCertificate(f"invalid certificate field: {e}") from e

        return ParsedCertificate(
            version=version,
            serial=format_serial(certificate.serial_number),
            issuer=issuer,
            subject=subject,
            not_before=not_before,
            not_after=not_after,
            subject_public_key_algorithm=algorithm_name(structure.public_key_algorithm_oid),
            subject_public_key=format_hex_block(structure.public_key),
            extensions=extensions,
            signature_algorithm=algorithm_name(structure.signature_algorithm_oid),
            signature_value=format_hex_block(structure.signature_value),
        )

    def parse(self, data: bytes) -> List[ParsedCertificate]:
        """
        Decodes every certificate in a PEM or DER buffer, in input order.

        Args:
            data: PEM text (one or more blocks) or raw DER bytes

        Returns:
            List of ParsedCertificate, one per certificate found

        Raises:
            InvalidInputShape: If data is not bytes-like
            MalformedCertificate: If a certificate cannot be decoded
        """
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise InvalidInputShape(f"requires binary input, got {type(data).__name__}")
        data = bytes(data)

        certificates = [self.parse_der(der) for der in self.split_certificates(data)]
        self.logger.debug(f"Parsed {len(certificates)} certificate(s)")
        return certificates


def parse_certificates(data: bytes) -> List[ParsedCertificate]:
    """Convenience wrapper around CertificateParser().parse()."""
    return CertificateParser().parse(data)
