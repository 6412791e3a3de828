"""SQLAlchemy ORM models.

All models are exported from this module for convenient imports:
    from app.models import Account, VerificationToken

- account.py: Account, AccountStatus
- verification_token.py: VerificationToken (FK -> accounts, cascade delete)
"""

from app.models.account import Account, AccountStatus
from app.models.base import Base
from app.models.verification_token import VerificationToken

__all__ = [
    "Base",
    "Account",
    "AccountStatus",
    "VerificationToken",
]
