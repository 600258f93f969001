"""Seed an administrator user."""

from app import create_app, get_user_repository
from models.user import STATUS_ACTIVE, User
from repositories import INSERT_FAILED, UserRepository
from utils.passwords import hash_password

ADMIN_ROLE = "admin"


def ensure_admin(
    repository: UserRepository, email: str, username: str, password: str
) -> str:
    """Create the admin account, or promote an existing one with that email."""

    admin = repository.get_by_email(email)
    if admin is None:
        admin = User(
            username=username,
            email=email,
            password=hash_password(password),
            role=ADMIN_ROLE,
            status=STATUS_ACTIVE,
            verified=True,
        )
        if repository.insert(admin) == INSERT_FAILED:
            raise RuntimeError(f"Could not create admin user {email}")
        return "created"

    admin.role = ADMIN_ROLE
    admin.status = STATUS_ACTIVE
    admin.verified = True
    admin.password = hash_password(password)
    if not repository.update(admin):
        raise RuntimeError(f"Could not update admin user {email}")
    return "updated"


def main() -> None:
    app = create_app()
    with app.app_context():
        action = ensure_admin(
            get_user_repository(),
            app.config["ADMIN_EMAIL"],
            app.config["ADMIN_USERNAME"],
            app.config["ADMIN_PASSWORD"],
        )
        print(f"Admin user {action}: {app.config['ADMIN_EMAIL']}")


if __name__ == "__main__":
    main()
