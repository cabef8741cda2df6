"""
Minimal DER builder for RSA SubjectPublicKeyInfo.

Nodes are either primitive (raw content) or constructed (child nodes).
Lengths are computed bottom-up when a node is serialized.
"""

from dataclasses import dataclass, field
from typing import List, Optional

TAG_INTEGER = 0x02
TAG_BIT_STRING = 0x03
TAG_NULL = 0x05
TAG_OBJECT_IDENTIFIER = 0x06
TAG_SEQUENCE = 0x30

# 1.2.840.113549.1.1.1
RSA_ENCRYPTION_OID = bytes([0x2a, 0x86, 0x48, 0x86, 0xf7, 0x0d, 0x01, 0x01, 0x01])


def encode_length(length: int) -> bytes:
    """
    DER definite-length encoding.

    Short form below 0x80, otherwise 0x80 | n followed by n big-endian bytes.
    """
    if length < 0:
        raise ValueError("Length must be non-negative")
    if length < 0x80:
        return bytes([length])
    size = (length.bit_length() + 7) // 8
    return bytes([0x80 | size]) + length.to_bytes(size, "big")


def integer_content(value: bytes, force_unsigned: bool = True) -> bytes:
    """
    Content octets of a DER INTEGER for a big-endian unsigned magnitude.

    Leading zero bytes are stripped; an all-zero or empty magnitude encodes
    as a single zero byte. With force_unsigned, a 0x00 is prepended when the
    high bit of the first remaining byte is set.
    """
    stripped = value.lstrip(b"\x00")
    if not stripped:
        return b"\x00"
    if force_unsigned and stripped[0] > 0x7f:
        return b"\x00" + stripped
    return stripped


@dataclass
class DerNode:
    tag: int
    content: bytes = b""
    children: Optional[List["DerNode"]] = field(default=None)

    def serialize(self) -> bytes:
        if self.children is not None:
            body = b"".join(child.serialize() for child in self.children)
        else:
            body = self.content
        return bytes([self.tag]) + encode_length(len(body)) + body


def sequence(*children: DerNode) -> DerNode:
    return DerNode(TAG_SEQUENCE, children=list(children))


def integer(value: bytes, force_unsigned: bool = True) -> DerNode:
    return DerNode(TAG_INTEGER, integer_content(value, force_unsigned))


def object_identifier(encoded_oid: bytes) -> DerNode:
    return DerNode(TAG_OBJECT_IDENTIFIER, encoded_oid)


def null() -> DerNode:
    return DerNode(TAG_NULL)


def bit_string(payload: bytes, unused_bits: int = 0) -> DerNode:
    return DerNode(TAG_BIT_STRING, bytes([unused_bits]) + payload)


def encode_integer(value: bytes, force_unsigned: bool = True) -> bytes:
    """Full TLV of a DER INTEGER."""
    return integer(value, force_unsigned).serialize()


def rsa_subject_public_key_info(modulus: bytes, exponent: bytes) -> bytes:
    """
    SubjectPublicKeyInfo ::= SEQUENCE {
        algorithm         AlgorithmIdentifier (rsaEncryption, NULL),
        subjectPublicKey  BIT STRING (RSAPublicKey) }
    """
    algorithm = sequence(object_identifier(RSA_ENCRYPTION_OID), null())
    rsa_public_key = sequence(integer(modulus), integer(exponent))
    return sequence(algorithm, bit_string(rsa_public_key.serialize())).serialize()
