import base64
import pytest
from unittest.mock import AsyncMock
from cryptography.hazmat.primitives import serialization

from lti_trust.modules.keys.adapters.static import material_from_public_key
from lti_trust.modules.keys.domain.exporter import DerPemKeyExporter, export_public_key
from lti_trust.modules.keys.domain.ports import KeyMaterialSource, RsaPublicKeyMaterial
from lti_trust.shared.core.exceptions import KeySourceUnavailableError

HEADER = "-----BEGIN PUBLIC KEY-----"
FOOTER = "-----END PUBLIC KEY-----"


def read_tlv(data: bytes, offset: int = 0):
    """Returns (tag, content, next_offset) for the TLV at offset."""
    tag = data[offset]
    length = data[offset + 1]
    offset += 2
    if length & 0x80:
        size = length & 0x7f
        length = int.from_bytes(data[offset:offset + size], "big")
        offset += size
    return tag, data[offset:offset + length], offset + length


def read_children(content: bytes):
    children = []
    offset = 0
    while offset < len(content):
        tag, child, offset = read_tlv(content, offset)
        children.append((tag, child))
    return children


def decode_oid(content: bytes) -> str:
    first, rest = content[0], content[1:]
    arcs = [first // 40, first % 40]
    value = 0
    for byte in rest:
        value = (value << 7) | (byte & 0x7f)
        if not byte & 0x80:
            arcs.append(value)
            value = 0
    return ".".join(str(a) for a in arcs)


def pem_body(pem: str) -> list[str]:
    lines = pem.split("\n")
    assert lines[0] == HEADER
    assert lines[-2] == FOOTER
    assert lines[-1] == ""
    return lines[1:-2]


def test_minimal_key_round_trip():
    pem = export_public_key(b"\x01", b"\x01\x00\x01")
    der = base64.b64decode("".join(pem_body(pem)))

    tag, spki, end = read_tlv(der)
    assert tag == 0x30
    assert end == len(der)

    children = read_children(spki)
    assert [c[0] for c in children] == [0x30, 0x03]

    algorithm = read_children(children[0][1])
    assert algorithm[0][0] == 0x06
    assert decode_oid(algorithm[0][1]) == "1.2.840.113549.1.1.1"
    assert algorithm[1] == (0x05, b"")

    bit_string = children[1][1]
    assert bit_string[0] == 0x00
    _, rsa_public_key, _ = read_tlv(bit_string[1:])
    integers = read_children(rsa_public_key)
    assert [int.from_bytes(v, "big") for _, v in integers] == [1, 65537]


def test_export_is_deterministic():
    modulus = bytes(range(1, 200))
    assert export_public_key(modulus, b"\x03") == export_public_key(modulus, b"\x03")


def test_lines_wrap_at_64_characters():
    pem = export_public_key(b"\xc5" * 512, b"\x01\x00\x01")
    body = pem_body(pem)
    assert len(body) > 1
    assert all(len(line) == 64 for line in body[:-1])
    assert 0 < len(body[-1]) <= 64


def test_matches_cryptography_serialization(rsa_private_key):
    public_key = rsa_private_key.public_key()
    material = material_from_public_key(public_key)
    expected = public_key.public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode("ascii")

    pem = export_public_key(material.modulus, material.exponent)

    assert pem == expected
    loaded = serialization.load_pem_public_key(pem.encode("ascii"))
    assert loaded.public_numbers() == public_key.public_numbers()


def test_leading_zero_modulus_bytes_are_ignored(rsa_private_key):
    material = material_from_public_key(rsa_private_key.public_key())
    assert export_public_key(b"\x00\x00" + material.modulus, material.exponent) == \
        export_public_key(material.modulus, material.exponent)


@pytest.mark.asyncio
async def test_resolve_and_export_fetches_once():
    source = AsyncMock(spec=KeyMaterialSource)
    source.get_key.return_value = RsaPublicKeyMaterial(modulus=b"\x01", exponent=b"\x01\x00\x01")
    exporter = DerPemKeyExporter(source)

    pem = await exporter.resolve_and_export("key-1")

    source.get_key.assert_awaited_once_with("key-1")
    assert pem == export_public_key(b"\x01", b"\x01\x00\x01")


@pytest.mark.asyncio
async def test_resolve_and_export_propagates_source_error():
    source = AsyncMock(spec=KeyMaterialSource)
    error = KeySourceUnavailableError("vault down")
    source.get_key.side_effect = error
    exporter = DerPemKeyExporter(source)

    with pytest.raises(KeySourceUnavailableError) as exc:
        await exporter.resolve_and_export("key-1")
    assert exc.value is error
    assert source.get_key.await_count == 1
