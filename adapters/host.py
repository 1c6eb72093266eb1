"""
Host boundary adapter.

Translates host values (lists, strings, datetimes, byte buffers or streams)
into core requests and core records back into plain dicts, so the generator
and the parser never see host representations.

Usage:
    from adapters.host import to_x509, from_x509

    record = to_x509(["example.com"], ca_constraint=0, key_usage="key_cert_sign")
    certificates = from_x509(record["crt"])
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from certificates.errors import InvalidInputShape
from certificates.generator import CertificateGenerator
from certificates.parser import CertificateParser
from certificates.types import CertificateRequest, KeyUsageFlag
from config.x509_config import X509_DEFAULTS


def request_from_host(
    values: Any,
    name: Any = None,
    begin_date: Any = None,
    end_date: Any = None,
    ca_constraint: Any = None,
    key_usage: Any = None,
) -> CertificateRequest:
    """
    Builds a CertificateRequest from host values.

    Options of the wrong type fall back to their defaults, the same as
    omitted ones.

    Raises:
        InvalidInputShape: If values is not a list of strings
    """
    if not isinstance(values, (list, tuple)):
        raise InvalidInputShape(f"requires list input, got {type(values).__name__}")
    for value in values:
        if not isinstance(value, str):
            raise InvalidInputShape(f"requires list of strings, got element {type(value).__name__}")

    return CertificateRequest(
        subject_alt_names=tuple(values),
        common_name=name if isinstance(name, str) else X509_DEFAULTS.COMMON_NAME,
        not_before=begin_date if isinstance(begin_date, datetime) else X509_DEFAULTS.NOT_BEFORE,
        not_after=end_date if isinstance(end_date, datetime) else X509_DEFAULTS.NOT_AFTER,
        ca_constraint=(
            ca_constraint
            if isinstance(ca_constraint, int) and not isinstance(ca_constraint, bool)
            else X509_DEFAULTS.NOT_A_CA
        ),
        key_usages=KeyUsageFlag.parse_selector(key_usage if isinstance(key_usage, str) else ""),
    )


def to_x509(
    values: Any,
    name: Optional[str] = None,
    begin_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    ca_constraint: Optional[int] = None,
    key_usage: Optional[str] = None,
) -> Dict[str, str]:
    """
    Generates a self-signed certificate from host values.

    Returns:
        {"crt": PEM certificate, "key": PEM private key}
    """
    request = request_from_host(values, name, begin_date, end_date, ca_constraint, key_usage)
    return CertificateGenerator().generate(request).to_dict()


def read_host_bytes(source: Any) -> bytes:
    """
    Collects a host input into one byte buffer.

    Accepts bytes-like values, strings (UTF-8 encoded), readable streams
    and iterables of byte chunks.

    Raises:
        InvalidInputShape: For any other input
    """
    if isinstance(source, (bytes, bytearray, memoryview)):
        return bytes(source)
    if isinstance(source, str):
        return source.encode("utf-8")

    if hasattr(source, "read"):
        data = source.read()
        if isinstance(data, str):
            return data.encode("utf-8")
        if isinstance(data, (bytes, bytearray)):
            return bytes(data)
        raise InvalidInputShape(f"stream yielded {type(data).__name__}, expected bytes")

    if hasattr(source, "__iter__") and not isinstance(source, dict):
        chunks = []
        for chunk in source:
            if not isinstance(chunk, (bytes, bytearray, memoryview)):
                raise InvalidInputShape(f"byte stream yielded {type(chunk).__name__}")
            chunks.append(bytes(chunk))
        return b"".join(chunks)

    raise InvalidInputShape(f"requires binary|string input, got {type(source).__name__}")


def from_x509(source: Any) -> List[Dict[str, Any]]:
    """
    Parses every certificate in a host input.

    Returns:
        One dict per certificate, in input order
    """
    data = read_host_bytes(source)
    return [certificate.to_dict() for certificate in CertificateParser().parse(data)]
