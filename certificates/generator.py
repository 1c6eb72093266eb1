"""
Self-signed certificate generation.

Provides a fluent builder that turns policy inputs into X.509 parameters and a
generator that signs them with a fresh key pair and serializes both to PEM.
"""

from datetime import datetime, timezone
from ipaddress import ip_address
from typing import Iterable, List, Optional

import asn1tools
from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import ExtensionOID, NameOID

from certificates import asn1
from certificates.errors import InvalidSubjectAltName, SigningFailed
from certificates.extensions import encode_key_usage
from certificates.timestamps import to_utc_datetime
from certificates.types import CertificateRequest, KeyUsageFlag, SignedCertificateArtifact
from utils.logger import X509Logger

# x509.CertificateBuilder refuses earlier dates
EARLIEST_BUILDER_TIME = datetime(1950, 1, 1, tzinfo=timezone.utc)


def parse_subject_alt_name(name: str) -> x509.GeneralName:
    """
    Converts one subject alternative name string into a general name.

    Plain entries are IP addresses when they parse as one, DNS names
    otherwise. The prefixes "DNS:", "IP:", "email:" and "URI:" (any case)
    select the form explicitly.

    Raises:
        InvalidSubjectAltName: If the entry is not a supported name form
    """
    if not isinstance(name, str):
        raise InvalidSubjectAltName(repr(name), "not a string")

    prefix, sep, rest = name.partition(":")
    kind = prefix.upper() if sep else ""

    try:
        if kind == "DNS":
            return _dns_name(rest)
        if kind == "IP":
            return x509.IPAddress(ip_address(rest))
        if kind == "EMAIL":
            _require_ia5(rest)
            return x509.RFC822Name(rest)
        if kind == "URI":
            _require_ia5(rest)
            return x509.UniformResourceIdentifier(rest)
        try:
            return x509.IPAddress(ip_address(name))
        except ValueError:
            return _dns_name(name)
    except (ValueError, TypeError) as e:
        raise InvalidSubjectAltName(name, str(e)) from e


def _require_ia5(value: str):
    if not value:
        raise ValueError("empty name")
    if not value.isascii():
        raise ValueError("name must be ASCII (IA5String)")
    if any(c.isspace() or not c.isprintable() for c in value):
        raise ValueError("name must not contain whitespace or control characters")


def _dns_name(value: str) -> x509.DNSName:
    _require_ia5(value)
    return x509.DNSName(value)


class CertificateBuilder:
    """
    Fluent builder for self-signed X.509 certificates.
    """

    def __init__(self):
        self._common_name = None
        self._subject_alt_names: List[x509.GeneralName] = []
        self._not_before = None
        self._not_after = None
        self._is_ca = False
        self._path_length = None
        self._key_usages = frozenset()

    def with_common_name(self, cn: str) -> "CertificateBuilder":
        """Sets the single Common Name attribute of subject and issuer"""
        self._common_name = cn
        return self

    def with_subject_alt_names(self, names: Iterable[str]) -> "CertificateBuilder":
        """Adds subject alternative names (validated immediately)"""
        self._subject_alt_names.extend(parse_subject_alt_name(name) for name in names)
        return self

    def with_validity_period(self, not_before: datetime, not_after: datetime) -> "CertificateBuilder":
        """
        Sets the validity window verbatim.

        No ordering check: an inverted or empty window is passed through.
        """
        self._not_before = to_utc_datetime(not_before)
        self._not_after = to_utc_datetime(not_after)
        return self

    def with_ca_constraint(self, is_ca: bool, path_length: Optional[int] = None) -> "CertificateBuilder":
        """Marks the certificate as CA (path_length None = unconstrained)"""
        self._is_ca = is_ca
        self._path_length = path_length if is_ca else None
        return self

    def with_key_usages(self, usages: Iterable[KeyUsageFlag]) -> "CertificateBuilder":
        self._key_usages = frozenset(usages)
        return self

    def _key_usage_extension(self) -> x509.UnrecognizedExtension:
        # x509.KeyUsage refuses encipher_only/decipher_only without key_agreement
        return x509.UnrecognizedExtension(ExtensionOID.KEY_USAGE, encode_key_usage(self._key_usages))

    def _validity_fits_builder(self) -> bool:
        return self._not_before >= EARLIEST_BUILDER_TIME and self._not_after >= self._not_before

    def _resign_with_validity(self, certificate: x509.Certificate, private_key) -> x509.Certificate:
        """
        Sostituisce la validity segnaposto con quella richiesta e rifirma il
        TBSCertificate (finestre invertite o anteriori al 1950).
        """
        if not isinstance(private_key, ec.EllipticCurvePrivateKey):
            raise TypeError("validity outside the builder range requires an EC signing key")

        tbs = asn1.with_validity(
            certificate.tbs_certificate_bytes,
            asn1.encode_validity(self._not_before, self._not_after),
        )
        signature = private_key.sign(asn1.encode("TBSCertificate", tbs), ec.ECDSA(hashes.SHA256()))
        return x509.load_der_x509_certificate(asn1.encode_certificate(tbs, signature))

    def build_and_sign(self, private_key) -> x509.Certificate:
        """
        Costruisce e firma il certificato con la sua stessa chiave.

        La validity e' scritta cosi' come richiesta, anche se invertita o
        anteriore al 1950.

        Args:
            private_key: Chiave privata per firmare (la pubblica viene derivata)

        Returns:
            Certificato X.509 self-signed

        Raises:
            SigningFailed: Se la libreria rifiuta i parametri
        """
        fits_builder = self._validity_fits_builder()
        if fits_builder:
            not_before, not_after = self._not_before, self._not_after
        else:
            not_before = not_after = EARLIEST_BUILDER_TIME

        try:
            name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, self._common_name)])
            public_key = private_key.public_key()

            cert_builder = x509.CertificateBuilder()
            cert_builder = cert_builder.subject_name(name)
            cert_builder = cert_builder.issuer_name(name)
            cert_builder = cert_builder.public_key(public_key)
            cert_builder = cert_builder.serial_number(x509.random_serial_number())
            cert_builder = cert_builder.not_valid_before(not_before)
            cert_builder = cert_builder.not_valid_after(not_after)

            if self._subject_alt_names:
                cert_builder = cert_builder.add_extension(
                    x509.SubjectAlternativeName(self._subject_alt_names), critical=False
                )
            if self._key_usages:
                cert_builder = cert_builder.add_extension(self._key_usage_extension(), critical=True)
            if self._is_ca:
                cert_builder = cert_builder.add_extension(
                    x509.SubjectKeyIdentifier.from_public_key(public_key), critical=False
                )
                cert_builder = cert_builder.add_extension(
                    x509.BasicConstraints(ca=True, path_length=self._path_length), critical=True
                )

            certificate = cert_builder.sign(private_key, hashes.SHA256())
            if not fits_builder:
                certificate = self._resign_with_validity(certificate, private_key)
            return certificate
        except (ValueError, TypeError, UnsupportedAlgorithm, asn1tools.Error) as e:
            raise SigningFailed(f"failed to sign certificate: {e}") from e


class CertificateGenerator:
    """
    Produces self-signed certificates from CertificateRequest policy inputs.

    Stateless: every call generates its own key pair, nothing is retained.
    """

    def __init__(self):
        self.logger = X509Logger.get_logger("CertificateGenerator")

    def generate_key(self) -> ec.EllipticCurvePrivateKey:
        """Fresh ECDSA P-256 key from the OS CSPRNG."""
        return ec.generate_private_key(ec.SECP256R1())

    def generate(self, request: CertificateRequest) -> SignedCertificateArtifact:
        """
        Genera certificato self-signed e chiave privata in formato PEM.

        Args:
            request: Policy inputs (SAN, CN, validity, CA constraint, key usages)

        Returns:
            SignedCertificateArtifact with PEM certificate and PKCS#8 PEM key

        Raises:
            InvalidSubjectAltName: If a SAN entry is not a supported name form
            TimestampConversionFailed: If a validity bound cannot be represented
            SigningFailed: If the signing primitive rejects the parameters
        """
        self.logger.info(
            f"Generating self-signed certificate CN={request.common_name!r} "
            f"({len(request.subject_alt_names)} SAN)"
        )

        not_before = to_utc_datetime(request.not_before)
        not_after = to_utc_datetime(request.not_after)

        builder = (
            CertificateBuilder()
            .with_common_name(request.common_name)
            .with_subject_alt_names(request.subject_alt_names)
            .with_validity_period(not_before, not_after)
            .with_ca_constraint(request.is_ca, request.path_length)
            .with_key_usages(request.key_usages)
        )

        if not_after <= not_before:
            self.logger.warning(
                f"Validity window is empty or inverted: {not_before} -> {not_after}"
            )
        if request.is_ca:
            constraint = "unconstrained" if request.path_length is None else f"path_len={request.path_length}"
            self.logger.info(f"CA certificate ({constraint})")
        if request.key_usages:
            usages = sorted(flag.value for flag in request.key_usages)
            self.logger.info(f"Key usages: {', '.join(usages)}")

        private_key = self.generate_key()
        certificate = builder.build_and_sign(private_key)

        certificate_pem = certificate.public_bytes(serialization.Encoding.PEM).decode("ascii")
        private_key_pem = private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        ).decode("ascii")

        self.logger.info(f"Certificate generated (serial {certificate.serial_number:x})")
        return SignedCertificateArtifact(certificate_pem=certificate_pem, private_key_pem=private_key_pem)


def generate_self_signed(request: CertificateRequest) -> SignedCertificateArtifact:
    """Convenience wrapper around CertificateGenerator().generate()."""
    return CertificateGenerator().generate(request)
