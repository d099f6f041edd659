"""
PasskyCrypt - Key Derivation Module

Turns (username, master password) into the two hashes the Passky service
works with:

    1. Authentication hash: sent to the server to obtain a token
    2. Encryption hash: never leaves the client, keys the XChaCha20 engine

Derivation (both hashes):
    message = BLAKE2b-512 hex of a salted, labelled string
    salt    = BLAKE2b-512 hex of the username-only variant
    hash    = Argon2id(message, salt) -> 64 bytes -> 128 hex characters

The two hashes use different labels, so knowing the authentication hash
(what the server sees) tells nothing about the encryption hash.

Why Argon2id?
    - Memory-hard: each guess costs 16 MiB of RAM, expensive on GPUs
    - Deterministic for the same inputs, so any client can rebuild the keys
"""

import hashlib

from cryptography.hazmat.primitives.kdf.argon2 import Argon2id


# =============================================================================
# Configuration
# =============================================================================

HASH_LABEL = "passky2020"

# Argon2id parameters (must match every other client of the service)
ARGON2_LANES = 4
ARGON2_MEMORY_COST = 16 * 1024   # KiB (16 MiB)
ARGON2_ITERATIONS = 3
ARGON2_LENGTH = 64               # bytes -> 128 hex characters

HASH_HEX_LENGTH = ARGON2_LENGTH * 2


# =============================================================================
# Hashing
# =============================================================================

def blake2b_hex(text: str) -> str:
    """BLAKE2b-512 hex digest of UTF-8 text."""
    return hashlib.blake2b(text.encode('utf-8')).hexdigest()


def argon2id_hex(message: str, salt: str) -> str:
    """
    Stretch `message` with Argon2id.

    Args:
        message: Pre-hashed secret (hex string)
        salt: Pre-hashed salt (hex string, used as its UTF-8 bytes)

    Returns:
        128 lowercase hex characters
    """
    kdf = Argon2id(
        salt=salt.encode('utf-8'),
        length=ARGON2_LENGTH,
        iterations=ARGON2_ITERATIONS,
        lanes=ARGON2_LANES,
        memory_cost=ARGON2_MEMORY_COST,
    )
    return kdf.derive(message.encode('utf-8')).hex()


# =============================================================================
# Key Derivation
# =============================================================================

def generate_authentication_hash(username: str, password: str) -> str:
    """
    Derive the hash used to authenticate against the server.

    Args:
        username: Account username
        password: Master password

    Returns:
        128-character hex hash
    """
    auth_hash = blake2b_hex(f"{HASH_LABEL}-{password}-{username}")
    auth_salt = blake2b_hex(f"{HASH_LABEL}-{username}")
    return argon2id_hex(auth_hash, auth_salt)


def generate_encryption_hash(username: str, password: str) -> str:
    """
    Derive the hash used as the XChaCha20 secret key.

    This value must stay on the client. Only its first 32 characters feed
    the cipher (see xchacha20.cipher_key).

    Returns:
        128-character hex hash
    """
    enc_hash = blake2b_hex(f"{username}-{password}-{HASH_LABEL}")
    enc_salt = blake2b_hex(f"{username}-{HASH_LABEL}")
    return argon2id_hex(enc_hash, enc_salt)


def is_valid_hash(value: str) -> bool:
    """A derived hash is exactly 128 characters long."""
    return isinstance(value, str) and len(value) == HASH_HEX_LENGTH
