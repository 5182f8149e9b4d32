from bodymetrics.repositories.accounts import Account, AccountRepository
from bodymetrics.repositories.metrics import MetricRepository
from bodymetrics.repositories.reset_tokens import PasswordResetToken, ResetTokenRepository
from bodymetrics.repositories.users import UserRepository

__all__ = [
    "Account",
    "AccountRepository",
    "MetricRepository",
    "PasswordResetToken",
    "ResetTokenRepository",
    "UserRepository",
]
