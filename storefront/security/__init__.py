"""
Security Module
"""
from .passwords import hash_password, verify_password
from .tokens import sign, decode, issue_session_token, issue_confirmation_token

__all__ = [
    "hash_password",
    "verify_password",
    "sign",
    "decode",
    "issue_session_token",
    "issue_confirmation_token",
]
