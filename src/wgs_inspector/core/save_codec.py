"""Codec for Hollow Knight / Silksong ``shared.dat`` style save payloads.

The game stores its JSON save state as a .NET BinaryFormatter string record:

    22 bytes    fixed BinaryFormatter header
    1-5 bytes   7-bit encoded length of the following string
    N bytes     base64 text of the AES-256-ECB (PKCS#7) encrypted JSON
    1 byte      0x0B message end marker

The AES key is fixed by the game engine.
"""

import base64
import binascii

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from ..logging_config import get_logger

logger = get_logger("save_codec")

MAGIC_HEADER = bytes([0, 1, 0, 0, 0, 255, 255, 255, 255, 1, 0, 0, 0, 0, 0, 0, 0, 6, 1, 0, 0, 0])
TRAILER_BYTE = 0x0B
AES_KEY = b"UKu52ePUBwetZ9wNX88o54dnfKRu0T1l"

MAX_LENGTH_GROUPS = 4
MAX_ENCODED_LENGTH = (1 << (7 * MAX_LENGTH_GROUPS)) - 1
_MAX_PREFIX_BYTES = 5


class SaveCodecError(Exception):
    """Exception raised when a save envelope cannot be decoded or encoded"""
    pass


def is_encoded(data: bytes) -> bool:
    """Check whether a buffer is already wrapped in the save envelope.

    Args:
        data: Raw file contents

    Returns:
        True if the buffer starts with the envelope magic header
    """
    return len(data) > len(MAGIC_HEADER) and data[:len(MAGIC_HEADER)] == MAGIC_HEADER


def encode_length_prefix(length: int) -> bytes:
    """Encode a string length as 7-bit groups, least significant first.

    Lengths beyond what four groups can hold are capped.
    """
    remaining = min(max(length, 0), MAX_ENCODED_LENGTH)
    groups = bytearray()
    for _ in range(MAX_LENGTH_GROUPS):
        if remaining >> 7:
            groups.append((remaining & 0x7F) | 0x80)
            remaining >>= 7
        else:
            groups.append(remaining & 0x7F)
            break
    return bytes(groups)


def decode_length_prefix(data: bytes) -> tuple[int, int]:
    """Decode a 7-bit group length prefix.

    Args:
        data: Bytes starting at the prefix

    Returns:
        Tuple of (decoded length, number of prefix bytes)

    Raises:
        SaveCodecError: If the data ends before the prefix does
    """
    value = 0
    consumed = 0
    for i in range(_MAX_PREFIX_BYTES):
        if i >= len(data):
            raise SaveCodecError("Save envelope truncated inside length prefix")
        byte = data[i]
        value |= (byte & 0x7F) << (7 * i)
        consumed += 1
        if not byte & 0x80:
            break
    return value, consumed


def _cipher() -> Cipher:
    return Cipher(algorithms.AES(AES_KEY), modes.ECB())


def encrypt_payload(plaintext: bytes) -> bytes:
    padder = padding.PKCS7(algorithms.AES.block_size).padder()
    padded = padder.update(plaintext) + padder.finalize()
    encryptor = _cipher().encryptor()
    return encryptor.update(padded) + encryptor.finalize()


def decrypt_payload(ciphertext: bytes) -> bytes:
    """AES-256-ECB decrypt and strip PKCS#7 padding.

    Raises:
        SaveCodecError: If the ciphertext or its padding is invalid
    """
    block_bytes = algorithms.AES.block_size // 8
    if not ciphertext or len(ciphertext) % block_bytes:
        raise SaveCodecError(f"Ciphertext length {len(ciphertext)} is not a multiple of {block_bytes}")

    decryptor = _cipher().decryptor()
    padded = decryptor.update(ciphertext) + decryptor.finalize()

    unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
    try:
        return unpadder.update(padded) + unpadder.finalize()
    except ValueError as e:
        raise SaveCodecError(f"Invalid padding after decryption: {e}") from e


def strip_envelope(data: bytes) -> bytes:
    """Remove header, length prefix and trailer, returning the base64 text.

    The length prefix is read to find where the text starts, but the text
    is taken as everything up to the trailer byte. Files written with a
    mismatched prefix still decode.
    """
    if not is_encoded(data):
        raise SaveCodecError("Missing save envelope header")

    body = data[len(MAGIC_HEADER):-1]
    declared_length, prefix_size = decode_length_prefix(body)
    text = body[prefix_size:]

    if data[-1] != TRAILER_BYTE:
        logger.debug("Unexpected envelope trailer 0x%02x", data[-1])
    if declared_length != len(text):
        logger.debug("Envelope length prefix %d differs from payload size %d", declared_length, len(text))

    return text


def wrap_envelope(text: bytes) -> bytes:
    """Add header, length prefix and trailer around base64 text."""
    return MAGIC_HEADER + encode_length_prefix(len(text)) + text + bytes([TRAILER_BYTE])


def decode_save(data: bytes) -> str:
    """Decode an encrypted save envelope to its plaintext.

    Args:
        data: Raw encrypted file contents

    Returns:
        Decrypted UTF-8 text (the game's JSON save state)

    Raises:
        SaveCodecError: If the envelope, base64, encryption or text is malformed
    """
    text = strip_envelope(data)
    try:
        ciphertext = base64.b64decode(text)
    except (binascii.Error, ValueError) as e:
        raise SaveCodecError(f"Invalid base64 payload: {e}") from e

    plaintext = decrypt_payload(ciphertext)
    try:
        return plaintext.decode("utf-8")
    except UnicodeDecodeError as e:
        raise SaveCodecError(f"Decrypted payload is not UTF-8: {e}") from e


def encode_save(plaintext: str) -> bytes:
    """Encrypt plaintext and wrap it in the save envelope.

    Args:
        plaintext: JSON save state

    Returns:
        Bytes ready to be written as the game's save file
    """
    ciphertext = encrypt_payload(plaintext.encode("utf-8"))
    return wrap_envelope(base64.b64encode(ciphertext))
