"""User model"""

from pydantic import BaseModel

from postbox.core.security import verify_password


class User(BaseModel):
    """Registered account; ``password_digest`` is a bcrypt hash, never plaintext"""

    id: int
    email: str
    password_digest: str
    is_upgraded: bool = False

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', is_upgraded={self.is_upgraded})>"

    def check_password(self, candidate: str) -> bool:
        return verify_password(candidate, self.password_digest)
