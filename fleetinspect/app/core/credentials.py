"""
Fixed account table.

Fleet Inspect has no user registration; the demo accounts below are the
whole user base.
"""

import secrets
from dataclasses import dataclass
from typing import Optional

from fleetinspect.app.models.enums import UserRole


@dataclass(frozen=True)
class Account:
    user_id: str
    username: str
    name: str
    role: UserRole
    password: str

    def token_claims(self) -> dict:
        return {
            "sub": self.username,
            "user_id": self.user_id,
            "name": self.name,
            "role": self.role.value,
        }


ACCOUNTS: dict[str, Account] = {
    "driver1": Account("1", "driver1", "John Driver", UserRole.DRIVER, "driver123"),
    "driver2": Account("2", "driver2", "Jane Driver", UserRole.DRIVER, "driver123"),
    "admin": Account("3", "admin", "Admin User", UserRole.ADMIN, "admin123"),
}


def authenticate(username: str, password: str) -> Optional[Account]:
    account = ACCOUNTS.get(username.strip().lower())
    if account is None:
        return None
    if not secrets.compare_digest(account.password.encode("utf-8"), password.encode("utf-8")):
        return None
    return account
