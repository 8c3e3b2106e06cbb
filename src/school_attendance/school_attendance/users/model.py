from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: a school account (admin, teacher or student).

    Accounts are provisioned elsewhere; this side only reads them.
    """

    user_id: str
    name: str
    email: str
    role: Role
