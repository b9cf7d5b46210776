# hash_admin_password.py (prints the ADMIN_PASSWORD_HASH line for .env)
import argparse
import getpass

from werkzeug.security import generate_password_hash


def main():
    parser = argparse.ArgumentParser(
        description="Hash the staff password for ADMIN_PASSWORD_HASH")
    parser.add_argument("--password", help="password (prompted if omitted)")
    args = parser.parse_args()

    password = args.password or getpass.getpass("Mot de passe staff : ")
    if not password:
        parser.error("empty password")

    print(f"ADMIN_PASSWORD_HASH={generate_password_hash(password)}")


if __name__ == "__main__":
    main()
