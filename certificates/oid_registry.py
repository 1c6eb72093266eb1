"""
Read-only OID -> short name registry for key and signature algorithms.

Names follow the OpenSSL short-name registry (e.g. "rsaEncryption",
"ecdsa-with-SHA256"). Lookups of unknown OIDs yield "Unknown".
"""

from types import MappingProxyType

from cryptography.x509.oid import ObjectIdentifier, PublicKeyAlgorithmOID, SignatureAlgorithmOID

UNKNOWN_ALGORITHM = "Unknown"

OID_NAMES = MappingProxyType({
    # Public key algorithms
    PublicKeyAlgorithmOID.RSAES_PKCS1_v1_5.dotted_string: "rsaEncryption",
    PublicKeyAlgorithmOID.RSASSA_PSS.dotted_string: "RSASSA-PSS",
    PublicKeyAlgorithmOID.DSA.dotted_string: "dsaEncryption",
    PublicKeyAlgorithmOID.EC_PUBLIC_KEY.dotted_string: "id-ecPublicKey",
    PublicKeyAlgorithmOID.X25519.dotted_string: "X25519",
    PublicKeyAlgorithmOID.X448.dotted_string: "X448",
    PublicKeyAlgorithmOID.ED25519.dotted_string: "ED25519",
    PublicKeyAlgorithmOID.ED448.dotted_string: "ED448",
    "1.2.840.10046.2.1": "dhpublicnumber",
    # Signature algorithms
    SignatureAlgorithmOID.RSA_WITH_MD5.dotted_string: "md5WithRSAEncryption",
    SignatureAlgorithmOID.RSA_WITH_SHA1.dotted_string: "sha1WithRSAEncryption",
    SignatureAlgorithmOID.RSA_WITH_SHA224.dotted_string: "sha224WithRSAEncryption",
    SignatureAlgorithmOID.RSA_WITH_SHA256.dotted_string: "sha256WithRSAEncryption",
    SignatureAlgorithmOID.RSA_WITH_SHA384.dotted_string: "sha384WithRSAEncryption",
    SignatureAlgorithmOID.RSA_WITH_SHA512.dotted_string: "sha512WithRSAEncryption",
    SignatureAlgorithmOID.ECDSA_WITH_SHA1.dotted_string: "ecdsa-with-SHA1",
    SignatureAlgorithmOID.ECDSA_WITH_SHA224.dotted_string: "ecdsa-with-SHA224",
    SignatureAlgorithmOID.ECDSA_WITH_SHA256.dotted_string: "ecdsa-with-SHA256",
    SignatureAlgorithmOID.ECDSA_WITH_SHA384.dotted_string: "ecdsa-with-SHA384",
    SignatureAlgorithmOID.ECDSA_WITH_SHA512.dotted_string: "ecdsa-with-SHA512",
    SignatureAlgorithmOID.DSA_WITH_SHA1.dotted_string: "dsaWithSHA1",
    SignatureAlgorithmOID.DSA_WITH_SHA224.dotted_string: "dsa_with_SHA224",
    SignatureAlgorithmOID.DSA_WITH_SHA256.dotted_string: "dsa_with_SHA256",
})


def algorithm_name(oid) -> str:
    """
    Resolves an algorithm OID to its short name.

    Args:
        oid: Dotted-decimal string or cryptography ObjectIdentifier

    Returns:
        Short name, or "Unknown" when the OID is not registered
    """
    if isinstance(oid, ObjectIdentifier):
        oid = oid.dotted_string
    return OID_NAMES.get(oid, UNKNOWN_ALGORITHM)
