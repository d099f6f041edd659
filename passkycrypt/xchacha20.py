"""
PasskyCrypt - XChaCha20 Stream Cipher Engine

This file contains the cipher used to protect password record fields before
they leave the client, and to recover them after they come back.

Layers (bottom to top):
    1. Core permutation: quarter round + double round over a 16-word state
    2. Block functions: ChaCha20 block (64 bytes of key-stream) and
       HChaCha20 (32-byte sub-key from key + 16-byte nonce prefix)
    3. Stream cipher: XOR data with as many key-stream blocks as it needs
    4. Envelope: sub-key + reduced nonce, nonce appended, text-safe encoding

Envelope format:
    base64( utf8( latin1( ciphertext || nonce[24] ) ) )

Limits:
    - Confidentiality only. There is no authentication tag, so a modified
      envelope decrypts to wrong plaintext without any error.
    - Text arguments follow a Latin-1 contract: one character is one byte.
"""

import os
import base64
from typing import List, Optional


# =============================================================================
# Configuration
# =============================================================================

KEY_SIZE = 32            # 256-bit key
NONCE_SIZE = 24          # 192-bit XChaCha20 nonce
CHACHA_NONCE_SIZE = 12   # 96-bit ChaCha20 (IETF) nonce
HCHACHA_NONCE_SIZE = 16
BLOCK_SIZE = 64

MASK32 = 0xffffffff

# "expand 32-byte k" as little-endian words
CONSTANTS = (0x61707865, 0x3320646e, 0x79622d32, 0x6b206574)

# Column round followed by diagonal round
DOUBLE_ROUND = (
    (0, 4, 8, 12),
    (1, 5, 9, 13),
    (2, 6, 10, 14),
    (3, 7, 11, 15),
    (0, 5, 10, 15),
    (1, 6, 11, 12),
    (2, 7, 8, 13),
    (3, 4, 9, 14),
)


# =============================================================================
# Core Permutation
# =============================================================================

def rotl32(value: int, shift: int) -> int:
    return ((value << shift) & MASK32) | (value >> (32 - shift))


def quarter_round(state: List[int], a: int, b: int, c: int, d: int) -> None:
    """
    ChaCha quarter round, applied in place to four words of the state.

    a += b; d ^= a; d <<<= 16
    c += d; b ^= c; b <<<= 12
    a += b; d ^= a; d <<<= 8
    c += d; b ^= c; b <<<= 7
    """
    state[a] = (state[a] + state[b]) & MASK32
    state[d] = rotl32(state[d] ^ state[a], 16)

    state[c] = (state[c] + state[d]) & MASK32
    state[b] = rotl32(state[b] ^ state[c], 12)

    state[a] = (state[a] + state[b]) & MASK32
    state[d] = rotl32(state[d] ^ state[a], 8)

    state[c] = (state[c] + state[d]) & MASK32
    state[b] = rotl32(state[b] ^ state[c], 7)


def inner_block(state: List[int]) -> None:
    """One double round (4 column rounds, then 4 diagonal rounds)."""
    for a, b, c, d in DOUBLE_ROUND:
        quarter_round(state, a, b, c, d)


def _permute(state: List[int]) -> List[int]:
    # 20 rounds, always
    working = list(state)
    for _ in range(10):
        inner_block(working)
    return working


# =============================================================================
# Block Functions
# =============================================================================

def _words(data: bytes) -> List[int]:
    return [int.from_bytes(data[i:i + 4], 'little') for i in range(0, len(data), 4)]


def _serialize(words: List[int]) -> bytes:
    return b''.join(word.to_bytes(4, 'little') for word in words)


def chacha20_block(key: bytes, counter: int, nonce: bytes) -> bytes:
    """
    ChaCha20 block function (RFC 8439, section 2.3).

    State layout:
        words 0-3   constants
        words 4-11  key
        word  12    block counter
        words 13-15 nonce

    The permuted copy is added back into the initial state before
    serialization.

    Args:
        key: 32-byte key
        counter: 32-bit block counter
        nonce: 12-byte nonce

    Returns:
        64 bytes of key-stream
    """
    if len(key) != KEY_SIZE:
        raise ValueError(f"Key must be {KEY_SIZE} bytes, got {len(key)}")
    if len(nonce) != CHACHA_NONCE_SIZE:
        raise ValueError(f"Nonce must be {CHACHA_NONCE_SIZE} bytes, got {len(nonce)}")
    if not 0 <= counter <= MASK32:
        raise ValueError("Block counter must fit in 32 bits")

    state = list(CONSTANTS) + _words(key) + [counter] + _words(nonce)
    working = _permute(state)
    return _serialize([(s + w) & MASK32 for s, w in zip(state, working)])


def hchacha20(key: bytes, nonce: bytes) -> bytes:
    """
    HChaCha20 sub-key derivation.

    Same state as the block function except words 12-15 hold the 16-byte
    nonce. The permuted state is NOT added back, and only words 0-3 and
    12-15 are kept.

    Args:
        key: 32-byte key
        nonce: first 16 bytes of the XChaCha20 nonce

    Returns:
        32-byte sub-key
    """
    if len(key) != KEY_SIZE:
        raise ValueError(f"Key must be {KEY_SIZE} bytes, got {len(key)}")
    if len(nonce) != HCHACHA_NONCE_SIZE:
        raise ValueError(f"Nonce must be {HCHACHA_NONCE_SIZE} bytes, got {len(nonce)}")

    state = list(CONSTANTS) + _words(key) + _words(nonce)
    working = _permute(state)
    return _serialize(working[0:4] + working[12:16])


# =============================================================================
# Stream Cipher
# =============================================================================

def chacha20_encrypt(key: bytes, counter: int, nonce: bytes, plaintext: bytes) -> bytes:
    """
    XOR plaintext with the ChaCha20 key-stream.

    Generates ceil(len / 64) blocks, starting at `counter`. The unused tail of
    the last block is dropped, so output length == input length.

    Args:
        key: 32-byte key
        counter: Counter of the first block (0 for envelopes)
        nonce: 12-byte nonce
        plaintext: Data to encrypt (any length)

    Returns:
        Ciphertext bytes
    """
    out = bytearray(len(plaintext))
    for offset in range(0, len(plaintext), BLOCK_SIZE):
        keystream = chacha20_block(key, counter + offset // BLOCK_SIZE, nonce)
        chunk = plaintext[offset:offset + BLOCK_SIZE]
        for i, byte in enumerate(chunk):
            out[offset + i] = byte ^ keystream[i]
    return bytes(out)


def chacha20_decrypt(key: bytes, counter: int, nonce: bytes, ciphertext: bytes) -> bytes:
    """Inverse of chacha20_encrypt (the same XOR)."""
    return chacha20_encrypt(key, counter, nonce, ciphertext)


# =============================================================================
# XChaCha20
# =============================================================================

def random_nonce() -> bytes:
    """24 random bytes from the OS CSPRNG. NEVER reuse one with the same key."""
    return os.urandom(NONCE_SIZE)


def _extended_nonce(nonce: bytes) -> bytes:
    # 4 zero bytes + last 8 bytes of the 24-byte nonce
    return b'\x00' * 4 + nonce[16:24]


def xchacha20_encrypt(key: bytes, nonce: bytes, plaintext: bytes) -> bytes:
    """
    XChaCha20 encryption.

    1. sub_key = HChaCha20(key, nonce[0:16])
    2. chacha_nonce = 0x00000000 || nonce[16:24]
    3. ChaCha20(sub_key, counter=0, chacha_nonce) XOR plaintext
    """
    if len(nonce) != NONCE_SIZE:
        raise ValueError(f"Nonce must be {NONCE_SIZE} bytes, got {len(nonce)}")
    sub_key = hchacha20(key, nonce[:16])
    return chacha20_encrypt(sub_key, 0, _extended_nonce(nonce), plaintext)


def xchacha20_decrypt(key: bytes, nonce: bytes, ciphertext: bytes) -> bytes:
    if len(nonce) != NONCE_SIZE:
        raise ValueError(f"Nonce must be {NONCE_SIZE} bytes, got {len(nonce)}")
    sub_key = hchacha20(key, nonce[:16])
    return chacha20_decrypt(sub_key, 0, _extended_nonce(nonce), ciphertext)


# =============================================================================
# Envelope
# =============================================================================

def encrypt_bytes(plaintext: bytes, key: bytes, nonce: Optional[bytes] = None) -> bytes:
    """
    Encrypt and append the nonce.

    Args:
        plaintext: Data to encrypt
        key: 32-byte key
        nonce: 24-byte nonce. Leave as None in normal use; a fresh random
            nonce is generated. Passing one is for known-answer tests.

    Returns:
        ciphertext || nonce (len(plaintext) + 24 bytes)
    """
    if nonce is None:
        nonce = random_nonce()
    return xchacha20_encrypt(key, nonce, plaintext) + nonce


def decrypt_bytes(envelope: bytes, key: bytes) -> bytes:
    """
    Split off the trailing nonce and decrypt the rest.

    Raises:
        ValueError: If the envelope is shorter than a nonce
    """
    if len(envelope) < NONCE_SIZE:
        raise ValueError(
            f"Invalid encrypted data: {len(envelope)} bytes is shorter than the {NONCE_SIZE}-byte nonce"
        )
    ciphertext, nonce = envelope[:-NONCE_SIZE], envelope[-NONCE_SIZE:]
    return xchacha20_decrypt(key, nonce, ciphertext)


def encode_envelope(data: bytes) -> str:
    """
    Bytes -> transport text.

    Every byte is read as one Latin-1 character, the characters are UTF-8
    encoded, and the result is base64'd. Bytes >= 0x80 therefore take two
    bytes before base64. This matches what the service already stores.
    """
    return base64.b64encode(data.decode('latin-1').encode('utf-8')).decode('ascii')


def decode_envelope(text: str) -> bytes:
    """
    Transport text -> bytes (inverse of encode_envelope).

    Whitespace (line breaks from wrapped base64) is ignored.

    Raises:
        ValueError: If the text is not valid base64, the decoded bytes are not
            valid UTF-8, or a character falls outside the Latin-1 range
    """
    try:
        raw = base64.b64decode("".join(text.split()), validate=True)
        return raw.decode('utf-8').encode('latin-1')
    except ValueError as e:
        raise ValueError(f"Invalid encrypted data: {e}")


# =============================================================================
# Text API
# =============================================================================

def to_bytes(text: str) -> bytes:
    """
    Text -> bytes, one byte per character (Latin-1 contract).

    Raises:
        ValueError: If a character is above U+00FF
    """
    try:
        return text.encode('latin-1')
    except UnicodeEncodeError as e:
        raise ValueError(f"Text must be Latin-1 (one byte per character): {e}")


def cipher_key(secret_key: str) -> bytes:
    """
    Cipher key from the caller's secret (usually the 128-char encryption hash).

    Only the first 32 characters are used. Shorter secrets are padded with
    zero bytes.
    """
    return to_bytes(secret_key)[:KEY_SIZE].ljust(KEY_SIZE, b'\x00')


def encrypt(message: str, secret_key: str) -> str:
    """
    Encrypt a text field for transport.

    Args:
        message: Field value (Latin-1 text)
        secret_key: Encryption hash of the account

    Returns:
        Base64 envelope text (a new random nonce every call)
    """
    envelope = encrypt_bytes(to_bytes(message), cipher_key(secret_key))
    return encode_envelope(envelope)


def decrypt(encoded: str, secret_key: str) -> str:
    """
    Decrypt a text field received from the service.

    A single trailing NUL is stripped if present. Older clients left one
    behind; a message that really ends in NUL loses it.

    Raises:
        ValueError: If `encoded` is not a valid envelope
    """
    plaintext = decrypt_bytes(decode_envelope(encoded), cipher_key(secret_key))
    text = plaintext.decode('latin-1')
    if text.endswith('\0'):
        text = text[:-1]
    return text
