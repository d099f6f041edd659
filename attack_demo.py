"""
PasskyCrypt - Attack Demonstration

Run: python attack_demo.py

What it shows (and where the cipher stops protecting you):
1) Wrong encryption hash does not recover the plaintext.
2) Equal plaintexts give unrelated envelopes (fresh nonce each time).
3) Bit flips in the ciphertext are NOT detected (no authentication tag).
4) Truncated / malformed envelopes fail to decode.
5) Reusing a nonce leaks the XOR of two plaintexts.
"""

from passkycrypt import crypto, xchacha20


LINE = "=" * 70


def section(title: str):
    print(f"\n{LINE}\n{title}\n{LINE}")


def main():
    print("Deriving encryption hashes (Argon2id)...")
    key = crypto.generate_encryption_hash("alice", "CorrectHorseBatteryStaple!")
    wrong_key = crypto.generate_encryption_hash("alice", "wrong_password")
    secret = "super_secret_password"
    encrypted = xchacha20.encrypt(secret, key)

    # 1) Wrong key
    section("Attack 1: Wrong master password")
    garbage = xchacha20.decrypt(encrypted, wrong_key)
    if garbage == secret:
        print("Unexpected: wrong key recovered the plaintext")
    else:
        print(f"Expected: wrong key gives unreadable output ({garbage.encode('latin-1').hex()[:32]}...)")

    # 2) Equal plaintexts
    section("Attack 2: Spotting equal passwords")
    other = xchacha20.encrypt(secret, key)
    if other == encrypted:
        print("Unexpected: identical envelopes for identical plaintexts")
    else:
        print("Expected: same password, different envelopes (random 24-byte nonce)")

    # 3) Bit flip
    section("Attack 3: Ciphertext tampering (no authentication)")
    envelope = bytearray(xchacha20.decode_envelope(encrypted))
    envelope[0] ^= ord("s") ^ ord("S")
    tampered = xchacha20.encode_envelope(bytes(envelope))
    result = xchacha20.decrypt(tampered, key)
    print(f"Tampered envelope decrypts WITHOUT error to: {result!r}")
    print("Limitation: XChaCha20 alone is malleable. Layer a MAC outside this engine if integrity matters.")

    # 4) Malformed envelope
    section("Attack 4: Truncated / malformed envelope")
    for label, bad in [
        ("too short", xchacha20.encode_envelope(b"\x00" * 10)),
        ("not base64", "!!not-base64!!"),
    ]:
        try:
            xchacha20.decrypt(bad, key)
            print(f"Unexpected: {label} envelope decrypted")
        except ValueError as e:
            print(f"Expected failure ({label}): {e}")

    # 5) Nonce reuse
    section("Attack 5: Nonce reuse (why nonces are random)")
    cipher_key = xchacha20.cipher_key(key)
    nonce = xchacha20.random_nonce()
    a = xchacha20.encrypt_bytes(b"password-one", cipher_key, nonce)[:-xchacha20.NONCE_SIZE]
    b = xchacha20.encrypt_bytes(b"password-two", cipher_key, nonce)[:-xchacha20.NONCE_SIZE]
    leaked = bytes(x ^ y for x, y in zip(a, b))
    print(f"C1 XOR C2 = P1 XOR P2 = {leaked.hex()}")
    print("encrypt() never does this: it draws a new nonce for every field.")

    print("\nDemo complete.")


if __name__ == "__main__":
    main()
