"""Shared fixtures and payload builders."""

import pytest

from backend.app import create_app

SAMPLE_MIGRATION_URI = (
    "otpauth-migration://offline?data=CkQKEC03tXOBXp54TLSHLBeG4fUSCFMxNTIwOTU4Ggth"
    "bmdlbG9uZS5pbiABKAEwAkITYTYyMDRlMTc2NTEyNjkzMDIzNxACGAEgAA%3D%3D"
)
SAMPLE_MIGRATION_SECRET = "FU33K44BL2PHQTFUQ4WBPBXB6U======"


def varint(value: int) -> bytes:
    out = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


def length_delimited(field_number: int, payload: bytes) -> bytes:
    return bytes([(field_number << 3) | 2]) + varint(len(payload)) + payload


def varint_field(field_number: int, value: int) -> bytes:
    return bytes([field_number << 3]) + varint(value)


def otp_parameter(secret: bytes = b"Hello!", name: str = "bob@example.com", issuer: str = None) -> bytes:
    """Build one OtpParameters sub-message the way Google Authenticator lays it out."""
    data = b""
    if secret is not None:
        data += length_delimited(1, secret)
    if name is not None:
        data += length_delimited(2, name.encode("utf-8"))
    if issuer is not None:
        data += length_delimited(3, issuer.encode("utf-8"))
    # algorithm=SHA1, digits=SIX, type=TOTP
    data += varint_field(4, 1) + varint_field(5, 1) + varint_field(6, 2)
    return data


def migration_payload(*params: bytes) -> bytes:
    body = b"".join(length_delimited(1, p) for p in params)
    # version, batch_size, batch_index, batch_id
    return body + varint_field(2, 1) + varint_field(3, 1) + varint_field(4, 0) + varint_field(5, 123456)


@pytest.fixture
def app(tmp_path):
    return create_app({
        "TESTING": True,
        "SECRET_KEY": "test",
        "DATABASE_FILE": str(tmp_path / "test.db"),
    })


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_client(client):
    client.post("/api/register", json={"username": "alice", "password": "pw"})
    resp = client.post("/api/login", json={"username": "alice", "password": "pw"})
    assert resp.status_code == 200
    return client
