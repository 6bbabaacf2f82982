import pytest

from hls_tags.errors import InvalidInput
from hls_tags.models import ByteRange, DecryptionKey, EncryptionMethod
from hls_tags.version import ProtocolVersion


def test_byte_range_parse_and_render():
    r = ByteRange.parse("3@5")
    assert r == ByteRange(length=3, start=5)
    assert str(r) == "3@5"

    r = ByteRange.parse("3")
    assert r.start is None
    assert str(r) == "3"


@pytest.mark.parametrize("text", ["", "3@", "@5", "-1", "a", "3@5@6"])
def test_byte_range_rejects(text):
    with pytest.raises(InvalidInput):
        ByteRange.parse(text)


def test_byte_range_constructor_checks_values():
    with pytest.raises(InvalidInput):
        ByteRange(length=-1)
    with pytest.raises(InvalidInput):
        ByteRange(length=True)
    with pytest.raises(InvalidInput):
        ByteRange(length=1, start="2")


def test_encryption_method():
    assert EncryptionMethod.parse("SAMPLE-AES") is EncryptionMethod.SAMPLE_AES
    assert str(EncryptionMethod.AES_128) == "AES-128"
    with pytest.raises(InvalidInput):
        EncryptionMethod.parse("NONE")


def test_decryption_key_parse_render():
    text = 'METHOD=AES-128,URI="foo",IV=0x000102,KEYFORMAT="baz"'
    key = DecryptionKey.parse(text)
    assert key.method is EncryptionMethod.AES_128
    assert key.uri == "foo"
    assert key.iv == b"\x00\x01\x02"
    assert key.key_format == "baz"
    assert key.key_format_versions is None
    assert str(key) == text


def test_decryption_key_requires_method_and_uri():
    with pytest.raises(InvalidInput) as exc:
        DecryptionKey.parse('URI="foo"')
    assert exc.value.field == "METHOD"
    with pytest.raises(InvalidInput) as exc:
        DecryptionKey.parse("METHOD=AES-128")
    assert exc.value.field == "URI"


def test_decryption_key_ignores_unknown_attributes():
    assert DecryptionKey.parse('METHOD=AES-128,URI="k",FUTURE=1') == DecryptionKey(
        method=EncryptionMethod.AES_128, uri="k"
    )


def test_decryption_key_constructor():
    key = DecryptionKey(method="SAMPLE-AES", uri="k", iv=bytearray(b"\x01"))
    assert key.method is EncryptionMethod.SAMPLE_AES
    assert key.iv == b"\x01"
    with pytest.raises(InvalidInput):
        DecryptionKey(method=EncryptionMethod.AES_128, uri="k", iv=b"")
    with pytest.raises(InvalidInput):
        DecryptionKey(method=EncryptionMethod.AES_128, uri='say "hi"')


def test_decryption_key_versions():
    base = DecryptionKey(method=EncryptionMethod.AES_128, uri="k")
    assert base.requires_version() == ProtocolVersion.V1
    with_iv = DecryptionKey(method=EncryptionMethod.AES_128, uri="k", iv=b"\x01")
    assert with_iv.requires_version() == ProtocolVersion.V2
    versions_only = DecryptionKey(
        method=EncryptionMethod.AES_128, uri="k", key_format_versions="1/2"
    )
    assert versions_only.requires_version() == ProtocolVersion.V5


def test_protocol_version():
    assert str(ProtocolVersion.V7) == "7"
    assert ProtocolVersion.V1 < ProtocolVersion.V7
    assert max(ProtocolVersion) is ProtocolVersion.V7
