"""
PasskyCrypt - Password Records Module

This file handles:
- Field limits for password records (before and after encryption)
- Encrypting records before save / edit / import requests
- Decrypting records after they are fetched
- Session: username + master password -> derived hashes

Record format (same as the service's JSON):
    {"id": 42, "website": "...", "username": "...", "password": "...", "message": "..."}

`id` is only present on stored records. The four text fields are always
encrypted together with the same encryption hash.
"""

from typing import Optional, List, Dict, Tuple

from . import crypto
from . import xchacha20


# =============================================================================
# FIELD LIMITS
# =============================================================================

FIELDS = ('website', 'username', 'password', 'message')

# Plaintext (min, max) lengths
PLAINTEXT_LIMITS = {
    'website': (2, 100),
    'username': (2, 100),
    'password': (2, 100),
    'message': (0, 5000),
}

# Max lengths of the encrypted (base64) values accepted by the server
ENCRYPTED_LIMITS = {
    'website': 255,
    'username': 255,
    'password': 255,
    'message': 10000,
}

# Same minimum the service enforces on sign-up
MASTER_PASSWORD_MIN_LENGTH = 8


def validate_password_data(data: Dict) -> None:
    """
    Check plaintext field lengths.

    Raises:
        ValueError: Naming the first field that is missing or out of range
    """
    for field in FIELDS:
        value = data.get(field)
        if not isinstance(value, str):
            raise ValueError(f"Field '{field}' is required")
        low, high = PLAINTEXT_LIMITS[field]
        if not low <= len(value) <= high:
            raise ValueError(f"Field '{field}' must be {low}-{high} characters long")


def _oversize_field(encrypted: Dict) -> Optional[str]:
    for field in FIELDS:
        if len(encrypted[field]) > ENCRYPTED_LIMITS[field]:
            return field
    return None


def _require_hash(encryption_hash: str) -> None:
    if not crypto.is_valid_hash(encryption_hash):
        raise ValueError("Invalid encryption hash")


def _copy_with_fields(data: Dict, transform) -> Dict:
    result = {}
    if 'id' in data:
        result['id'] = data['id']
    for field in FIELDS:
        result[field] = transform(data[field])
    return result


# =============================================================================
# ENCRYPTION (save / edit / import)
# =============================================================================

def encrypt_password_data(data: Dict, encryption_hash: str) -> Dict:
    """
    Encrypt the four fields of a record.

    Args:
        data: Plaintext record (with or without `id`)
        encryption_hash: From crypto.generate_encryption_hash()

    Returns:
        New dict with encrypted fields (input is not modified)

    Raises:
        ValueError: Invalid hash, invalid plaintext field, or an encrypted
            field larger than the server accepts
    """
    _require_hash(encryption_hash)
    validate_password_data(data)

    encrypted = _copy_with_fields(
        data, lambda value: xchacha20.encrypt(value, encryption_hash)
    )

    field = _oversize_field(encrypted)
    if field:
        raise ValueError(f"Field '{field}' is too long once encrypted")
    return encrypted


def prepare_import(passwords: List[Dict], encryption_hash: str) -> Tuple[List[Dict], int]:
    """
    Encrypt a batch of records for import.

    Records whose encrypted fields are too large are dropped, not raised.

    Returns:
        (accepted records, number of rejected records)
    """
    _require_hash(encryption_hash)

    accepted = []
    for data in passwords:
        encrypted = _copy_with_fields(
            data, lambda value: xchacha20.encrypt(value, encryption_hash)
        )
        if _oversize_field(encrypted):
            continue
        accepted.append(encrypted)

    return accepted, len(passwords) - len(accepted)


# =============================================================================
# DECRYPTION (get / fetch)
# =============================================================================

def decrypt_password(data: Dict, encryption_hash: str) -> Dict:
    """
    Decrypt one fetched record.

    Raises:
        ValueError: If a field is not a valid envelope
    """
    return _copy_with_fields(
        data, lambda value: xchacha20.decrypt(value, encryption_hash)
    )


def decrypt_passwords(passwords: List[Dict], encryption_hash: str) -> List[Dict]:
    """Decrypt a list of fetched records (order preserved)."""
    return [decrypt_password(data, encryption_hash) for data in passwords]


# =============================================================================
# SESSION
# =============================================================================

class Session:
    """
    Account session - derives and holds the account hashes.

    Usage:
        session = Session("alice", "master_password")
        session.unlock()

        encrypted = session.encrypt_password_data({
            "website": "github.com", "username": "alice",
            "password": "hunter22", "message": "",
        })
        plain = session.decrypt_password(encrypted)

        session.lock()
    """

    def __init__(self, username: str, password: str):
        """
        Create a session (doesn't derive anything yet).

        Args:
            username: Account username
            password: Master password
        """
        self.username = username
        self.password = password

        # Hashes (only present when unlocked)
        self.authentication_hash: Optional[str] = None
        self.encryption_hash: Optional[str] = None

    @property
    def unlocked(self) -> bool:
        return self.encryption_hash is not None

    def unlock(self) -> None:
        """
        Derive both hashes (two Argon2id runs).

        Raises:
            ValueError: If username is empty or the master password is shorter
                than MASTER_PASSWORD_MIN_LENGTH
        """
        if not self.username or not self.username.strip():
            raise ValueError("Username is required")
        if not self.password or len(self.password) < MASTER_PASSWORD_MIN_LENGTH:
            raise ValueError(
                f"Master password must be at least {MASTER_PASSWORD_MIN_LENGTH} characters"
            )

        self.authentication_hash = crypto.generate_authentication_hash(self.username, self.password)
        self.encryption_hash = crypto.generate_encryption_hash(self.username, self.password)

    def lock(self) -> None:
        """Clear derived hashes from the session."""
        self.authentication_hash = None
        self.encryption_hash = None

    def encrypt_password_data(self, data: Dict) -> Dict:
        self._require_unlocked()
        return encrypt_password_data(data, self.encryption_hash)

    def prepare_import(self, passwords: List[Dict]) -> Tuple[List[Dict], int]:
        self._require_unlocked()
        return prepare_import(passwords, self.encryption_hash)

    def decrypt_password(self, data: Dict) -> Dict:
        self._require_unlocked()
        return decrypt_password(data, self.encryption_hash)

    def decrypt_passwords(self, passwords: List[Dict]) -> List[Dict]:
        self._require_unlocked()
        return decrypt_passwords(passwords, self.encryption_hash)

    # =========================================================================
    # INTERNAL HELPERS
    # =========================================================================

    def _require_unlocked(self) -> None:
        """Check that the session is unlocked."""
        if not self.unlocked:
            raise Exception("Session is locked. Call unlock() first.")
