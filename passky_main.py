"""
PasskyCrypt - Interactive Menu

Main user interface for the client-side crypto layer.
Features:
- Unlock a session (derive authentication + encryption hashes)
- Encrypt / decrypt a single field
- Encrypt a whole password record (ready for save/edit)
- Decrypt a passwords export (JSON from the server)
- Quick copy a decrypted password to clipboard
"""

import os
import sys
import json
import getpass
from passkycrypt.records import Session
from passkycrypt import xchacha20


def clear_screen():
    try:
        os.system("cls" if os.name == "nt" else "clear")
    except OSError:
        pass

def pause():
    input("\nPress Enter to continue...")

def unlock_flow():
    username = input("\nUsername: ").strip()
    if not username:
        print("Username required.")
        pause()
        return None
    password = getpass.getpass("Master password: ")
    session = Session(username, password)
    print("\nDeriving keys (Argon2id)...")
    try:
        session.unlock()
        print("\n✓ Session unlocked.")
        pause()
        return session
    except Exception as e:
        print(f"\nERROR: Failed to unlock session ({e}).")
        pause()
        return None

def require_unlocked(session):
    return session if session else unlock_flow()

def cmd_unlock(session):
    clear_screen()
    print("=== Unlock Session ===\n")
    if session:
        session.lock()
    return unlock_flow()

def cmd_show_hashes(session):
    clear_screen()
    print("=== Show Derived Hashes ===\n")
    session = require_unlocked(session)
    if not session:
        return None
    print(f"Authentication hash (sent to server):\n  {session.authentication_hash}")
    show = input("\nAlso show encryption hash? It must stay secret. [y/N]: ").strip().lower()
    if show in ('y', 'yes'):
        print(f"\nEncryption hash (client only):\n  {session.encryption_hash}")
    pause()
    return session

def cmd_encrypt_field(session):
    clear_screen()
    print("=== Encrypt Field ===\n")
    session = require_unlocked(session)
    if not session:
        return None
    value = input("Value: ")
    try:
        print(f"\nEncrypted:\n  {xchacha20.encrypt(value, session.encryption_hash)}")
    except Exception as e:
        print(f"ERROR: {e}")
    pause()
    return session

def cmd_decrypt_field(session):
    clear_screen()
    print("=== Decrypt Field ===\n")
    session = require_unlocked(session)
    if not session:
        return None
    value = input("Encrypted value: ").strip()
    if not value:
        pause()
        return session
    try:
        print(f"\nDecrypted:\n  {xchacha20.decrypt(value, session.encryption_hash)}")
    except Exception as e:
        print(f"ERROR: {e}")
    pause()
    return session

def cmd_encrypt_record(session):
    clear_screen()
    print("=== Encrypt Password Record ===\n")
    session = require_unlocked(session)
    if not session:
        return None
    data = {
        'website': input("Website: ").strip(),
        'username': input("Username: ").strip(),
        'password': getpass.getpass("Password: "),
        'message': input("Message (optional): "),
    }
    try:
        encrypted = session.encrypt_password_data(data)
        print("\n✓ Encrypted record (ready for savePassword):\n")
        print(json.dumps(encrypted, indent=2))
    except Exception as e:
        print(f"ERROR: {e}")
    pause()
    return session

def load_passwords(path):
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    # Accept either the raw list or a getPasswords response
    if isinstance(data, dict):
        data = data.get('passwords') or []
    return data

def cmd_decrypt_export(session):
    clear_screen()
    print("=== Decrypt Passwords Export ===\n")
    session = require_unlocked(session)
    if not session:
        return None
    path = input("JSON file (list or getPasswords response): ").strip()
    if not path:
        pause()
        return session
    try:
        passwords = session.decrypt_passwords(load_passwords(path))
        if not passwords:
            print("No passwords.")
        else:
            print(f"\n{'ID':<6}  {'Website':<25}  {'Username':<25}")
            print("-" * 60)
            for p in passwords:
                print(f"{str(p.get('id', '-')):<6}  {p['website']:<25}  {p['username']:<25}")
    except Exception as e:
        print(f"ERROR: {e}")
    pause()
    return session

def cmd_quick_copy(session):
    """Copy a decrypted password to clipboard without displaying it."""
    clear_screen()
    print("=== Quick Copy ===\n")
    session = require_unlocked(session)
    if not session:
        return None
    value = input("Encrypted password field: ").strip()
    if not value:
        pause()
        return session
    try:
        secret = xchacha20.decrypt(value, session.encryption_hash)
        try:
            import pyperclip
            pyperclip.copy(secret)
            print("\n✓ Copied to clipboard!")
        except ImportError:
            print("\nERROR: pyperclip not installed. Run: pip install pyperclip")
    except Exception as e:
        print(f"ERROR: {e}")
    pause()
    return session

def cmd_lock(session):
    clear_screen()
    print("=== Lock Session ===\n")
    if session:
        session.lock()
        print("✓ Locked.")
    else:
        print("Not unlocked.")
    pause()

def printMenu(session):
    print("PasskyCrypt - Interactive Menu")
    print("=" * 40)
    if session:
        print(f"User: {session.username}")
    print(f"Status: {'UNLOCKED' if session else 'LOCKED'}")
    print("\n 1) Unlock session")
    print(" 2) Show derived hashes")
    print(" 3) Encrypt field")
    print(" 4) Decrypt field")
    print(" 5) Encrypt password record")
    print(" 6) Decrypt passwords export")
    print(" 7) Quick copy (decrypt to clipboard)")
    print(" 8) Lock session")
    print(" 0) Exit")

def main_menu():
    session = None
    while True:
        clear_screen()
        printMenu(session)
        c = input("\n> ").strip()
        if c == '1':
            session = cmd_unlock(session)
        elif c == '2':
            session = cmd_show_hashes(session)
        elif c == '3':
            session = cmd_encrypt_field(session)
        elif c == '4':
            session = cmd_decrypt_field(session)
        elif c == '5':
            session = cmd_encrypt_record(session)
        elif c == '6':
            session = cmd_decrypt_export(session)
        elif c == '7':
            session = cmd_quick_copy(session)
        elif c == '8':
            cmd_lock(session)
            session = None
        elif c == '0':
            if session:
                session.lock()
            print("\nGoodbye!")
            break

if __name__ == "__main__":
    try:
        main_menu()
    except KeyboardInterrupt:
        print("\nExiting...")
        sys.exit(0)
