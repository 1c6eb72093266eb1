"""
Pytest Configuration and Shared Fixtures

Fornisce fixture condivise per tutti i test:
- Generatore e parser
- Certificati self-signed generati (end-entity e CA)
- Certificato RSA con set completo di estensioni (costruito con cryptography)
- Certificato con un'estensione BasicConstraints volutamente malformata
"""

import os
import sys
from datetime import datetime, timedelta, timezone
from ipaddress import ip_address

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import ExtendedKeyUsageOID, ExtensionOID, NameOID

from certificates.generator import CertificateGenerator
from certificates.parser import CertificateParser
from certificates.types import CertificateRequest, KeyUsageFlag

AUTHORITY_KEY_ID = bytes(range(1, 21))
UNKNOWN_EXTENSION_OID = "1.2.3.4.5"
CUSTOM_PURPOSE_OID = "1.2.3.4.6"


@pytest.fixture
def generator():
    return CertificateGenerator()


@pytest.fixture
def parser():
    return CertificateParser()


@pytest.fixture(scope="session")
def default_artifact():
    """Certificato end-entity con tutti i default."""
    return CertificateGenerator().generate(CertificateRequest(["localhost", "127.0.0.1"]))


@pytest.fixture(scope="session")
def ca_artifact():
    """Certificato CA con path length 3 e key usage da CA."""
    request = CertificateRequest(
        ["ca.example.com"],
        common_name="Test CA",
        ca_constraint=3,
        key_usages=KeyUsageFlag.parse_selector("key_cert_sign,crl_sign"),
    )
    return CertificateGenerator().generate(request)


def _rsa_builder(common_name: str):
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
    now = datetime.now(timezone.utc).replace(microsecond=0)
    builder = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "Test Issuer")]))
        .public_key(key.public_key())
        .serial_number(0x80)
        .not_valid_before(now - timedelta(minutes=1))
        .not_valid_after(now + timedelta(days=30))
    )
    return key, builder


@pytest.fixture(scope="session")
def rsa_certificate():
    """
    Certificato RSA firmato da un issuer fittizio con:
    SAN, EKU (con purpose sconosciuto), AKI completo, SKI, CRL DP
    ed un'estensione non riconosciuta.
    """
    key, builder = _rsa_builder("rsa.example.com")
    builder = (
        builder
        .add_extension(
            x509.SubjectAlternativeName([
                x509.DNSName("rsa.example.com"),
                x509.IPAddress(ip_address("10.0.0.1")),
                x509.RFC822Name("admin@example.com"),
            ]),
            critical=False,
        )
        .add_extension(
            x509.ExtendedKeyUsage([
                ExtendedKeyUsageOID.SERVER_AUTH,
                ExtendedKeyUsageOID.CLIENT_AUTH,
                ExtendedKeyUsageOID.OCSP_SIGNING,
                x509.ObjectIdentifier(CUSTOM_PURPOSE_OID),
            ]),
            critical=False,
        )
        .add_extension(
            x509.AuthorityKeyIdentifier(
                key_identifier=AUTHORITY_KEY_ID,
                authority_cert_issuer=[
                    x509.DirectoryName(x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "Test Issuer")]))
                ],
                authority_cert_serial_number=0x80,
            ),
            critical=False,
        )
        .add_extension(x509.SubjectKeyIdentifier.from_public_key(key.public_key()), critical=False)
        .add_extension(
            x509.CRLDistributionPoints([
                x509.DistributionPoint(
                    full_name=[x509.UniformResourceIdentifier("http://crl.example.com/test.crl")],
                    relative_name=None,
                    reasons=None,
                    crl_issuer=None,
                )
            ]),
            critical=False,
        )
        .add_extension(
            x509.UnrecognizedExtension(x509.ObjectIdentifier(UNKNOWN_EXTENSION_OID), b"hello"),
            critical=True,
        )
    )
    return builder.sign(key, hashes.SHA256())


@pytest.fixture(scope="session")
def rsa_certificate_pem(rsa_certificate):
    return rsa_certificate.public_bytes(serialization.Encoding.PEM)


@pytest.fixture(scope="session")
def broken_extension_der():
    """Certificato con BasicConstraints che contiene un NULL invece di una SEQUENCE."""
    key, builder = _rsa_builder("broken.example.com")
    builder = (
        builder
        .add_extension(
            x509.UnrecognizedExtension(ExtensionOID.BASIC_CONSTRAINTS, b"\x05\x00"),
            critical=True,
        )
        .add_extension(x509.SubjectAlternativeName([x509.DNSName("broken.example.com")]), critical=False)
    )
    return builder.sign(key, hashes.SHA256()).public_bytes(serialization.Encoding.DER)
