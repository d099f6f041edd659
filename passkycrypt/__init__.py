"""
PasskyCrypt - Client-Side Encryption for the Passky Password Manager

Encrypts password record fields on the client before they are sent to a
Passky server, and decrypts them after they come back. The server only ever
stores ciphertext.

Key Features:
- XChaCha20 stream cipher (pure Python, 24-byte random nonce per field)
- Argon2id + BLAKE2b account key derivation
- Text envelope compatible with the service's stored data
- No authentication tag: confidentiality only

Components:
- xchacha20.py: The cipher engine (block functions, stream, envelope)
- crypto.py: Authentication / encryption hash derivation
- records.py: Password record encryption + Session

Usage:
    python passky_main.py          # Interactive menu
    python demo.py                 # Guided walkthrough
    python attack_demo.py          # What the cipher does NOT protect against
"""

__version__ = "0.1.0"
__author__ = "PasskyCrypt Team"
