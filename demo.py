"""
PasskyCrypt - Guided Journey (single run, no user input)

Run: python demo.py

This script simulates what a user would see in the interactive menu
(`passky_main.py`) and explains what happens under the hood. It walks through:
 - Unlocking a session (Argon2id key derivation)
 - Encrypting and decrypting a single field
 - The envelope layout (ciphertext + nonce, base64)
 - Encrypting a full password record for save/edit
 - Preparing an import batch (oversize records dropped)
 - Decrypting a passwords export
 - Locking the session

All steps print the UI-style output plus a short “behind the scenes” note.
"""

import os
import json
import tempfile
from textwrap import indent

from passkycrypt import xchacha20
from passkycrypt.records import Session


LINE = "=" * 70


def step(title: str, menu_option: str, code_path: str):
    print(f"\n{LINE}\n{title}  (menu option {menu_option}, code: {code_path})\n{LINE}")


def explain(title: str, body: str):
    print(f"\n[Behind the scenes] {title}")
    print(indent(body.strip(), "  "))


def menu_snapshot():
    print("PasskyCrypt - Interactive Menu (snapshot from passky_main.py)")
    print(LINE)
    print(" 1) Unlock session")
    print(" 2) Show derived hashes")
    print(" 3) Encrypt field")
    print(" 4) Decrypt field")
    print(" 5) Encrypt password record")
    print(" 6) Decrypt passwords export")
    print(" 7) Quick copy (decrypt to clipboard)")
    print(" 8) Lock session")
    print(" 0) Exit")


def main():
    step("PasskyCrypt - Guided Journey", "-", "passky_main.py")
    menu_snapshot()

    session = None
    export_path = None

    try:
        # 1) Unlock (option 1)
        step("Unlock session", "1", "passkycrypt/records.py:Session.unlock")
        print("Prompts: username=alice, master password typed")
        session = Session("alice", "CorrectHorseBatteryStaple!")
        session.unlock()
        print("Output: Session unlocked.")
        explain(
            "Key derivation",
            "BLAKE2b pre-hashes a labelled username/password string and a username-only salt; "
            "Argon2id (4 lanes, 16 MiB, 3 iterations) stretches them to 64 bytes. "
            "Two different labels give the authentication hash (sent to the server) and the "
            "encryption hash (kept on the client).",
        )

        # 2) Show hashes (option 2)
        step("Show derived hashes", "2", "passkycrypt/crypto.py")
        print(f"  Authentication hash: {session.authentication_hash[:32]}...")
        print(f"  Encryption hash:     {session.encryption_hash[:32]}...")

        # 3) Encrypt a field (option 3)
        step("Encrypt field", "3", "passkycrypt/xchacha20.py:encrypt")
        value = "hunter22"
        encrypted = xchacha20.encrypt(value, session.encryption_hash)
        print(f"Prompt: Value -> {value}")
        print(f"Output: {encrypted}")
        envelope = xchacha20.decode_envelope(encrypted)
        print(f"Decoded envelope: {len(envelope)} bytes = {len(value)} ciphertext + {xchacha20.NONCE_SIZE} nonce")
        explain(
            "XChaCha20",
            "A fresh 24-byte nonce comes from os.urandom. HChaCha20(key, nonce[0:16]) gives a sub-key; "
            "ChaCha20(sub-key, counter 0, 0x00000000 || nonce[16:24]) produces the key-stream that is "
            "XORed with the value. The nonce is appended and the whole envelope is base64'd.",
        )

        # 3b) Same value, different output
        again = xchacha20.encrypt(value, session.encryption_hash)
        print(f"Same value again: {again}")
        print(f"Identical? {again == encrypted}")

        # 4) Decrypt a field (option 4)
        step("Decrypt field", "4", "passkycrypt/xchacha20.py:decrypt")
        print(f"Output: {xchacha20.decrypt(encrypted, session.encryption_hash)}")

        # 5) Encrypt a record (option 5)
        step("Encrypt password record", "5", "passkycrypt/records.py:encrypt_password_data")
        record = {
            "website": "github.com",
            "username": "alice@example.com",
            "password": "ghp_super_secret_token",
            "message": "2FA codes in the drawer",
        }
        stored = session.encrypt_password_data(record)
        stored["id"] = 1
        print(json.dumps(stored, indent=2))
        explain(
            "Field limits",
            "Plaintext fields are checked first (website/username/password 2-100 chars, message up to 5000). "
            "After encryption the server limits apply (255 chars, 10000 for the message).",
        )

        # 5b) Import batch
        step("Prepare import", "-", "passkycrypt/records.py:prepare_import")
        batch = [
            {"website": "mail.example.com", "username": "alice", "password": "pw-123456", "message": ""},
            {"website": "x" * 300, "username": "alice", "password": "pw-654321", "message": ""},
        ]
        accepted, rejected = session.prepare_import(batch)
        print(f"Output: {len(accepted)} accepted, {rejected} rejected (encrypted website too long)")

        # 6) Decrypt an export (option 6)
        step("Decrypt passwords export", "6", "passkycrypt/records.py:decrypt_passwords")
        tmp = tempfile.NamedTemporaryFile("w", suffix=".json", delete=False)
        export_path = tmp.name
        json.dump({"error": 0, "info": "success", "passwords": [stored]}, tmp)
        tmp.close()
        print(f"Prompt: JSON file -> {export_path}")
        with open(export_path, "r", encoding="utf-8") as f:
            passwords = json.load(f)["passwords"]
        for p in session.decrypt_passwords(passwords):
            print(f"  {p['id']}  {p['website']}  {p['username']}  {p['password']}  ({p['message']})")

        # 7) Lock and exit (option 8 then 0)
        step("Lock and exit", "8 / 0", "passkycrypt/records.py:Session.lock")
        session.lock()
        print("Output: Locked (hashes cleared)")
        print("User chooses: 0) Exit")
        print("Goodbye!")

    finally:
        if session:
            session.lock()
        if export_path and os.path.exists(export_path):
            os.unlink(export_path)
            print(f"\nCleaned up temporary export at {export_path}")


if __name__ == "__main__":
    main()
