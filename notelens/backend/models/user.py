"""
User Record.
"""

from dataclasses import dataclass


@dataclass
class User:
    """
    A registered user.

    `password` holds a bcrypt hash when one was supplied at registration.
    Users are created once and never mutated or deleted.
    """

    id: str
    username: str
    password: str | None = None

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username!r})>"
