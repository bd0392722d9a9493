"""Create a back-office admin, or reset an existing user's password and promote them."""
import argparse
import getpass

from edumate.core.database import SessionLocal
from edumate.core.security import hash_password
from edumate.models import User, UserRole


def upsert_admin(db, email: str, password: str, full_name: str | None = None) -> User:
    email = email.strip().lower()
    user = db.query(User).filter(User.email == email).first()
    if not user:
        user = User(email=email, full_name=full_name)
        db.add(user)
    elif full_name:
        user.full_name = full_name
    user.hashed_password = hash_password(password)
    user.role = UserRole.ADMIN
    user.is_active = True
    db.commit()
    db.refresh(user)
    return user


def main():
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("email")
    parser.add_argument("--name", default=None)
    args = parser.parse_args()

    password = getpass.getpass("Password: ")
    if len(password.encode("utf-8")) > 72:
        raise SystemExit("Password too long (max 72 bytes)")
    if password != getpass.getpass("Confirm password: "):
        raise SystemExit("Passwords do not match")

    db = SessionLocal()
    try:
        user = upsert_admin(db, args.email, password, args.name)
        print(f"Admin ready: {user.email} ({user.id})")
    finally:
        db.close()


if __name__ == "__main__":
    main()
