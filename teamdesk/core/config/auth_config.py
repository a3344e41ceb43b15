#!/usr/bin/env python3
"""Authentication configuration"""
import os
from dataclasses import dataclass


def _int(val: str, default: int) -> int:
    try:
        return int(val) if val else default
    except ValueError:
        return default


@dataclass
class AuthConfig:
    """Local auth provider settings"""
    # bcrypt work factor
    bcrypt_rounds: int = 12
    min_password_length: int = 6

    @classmethod
    def from_env(cls) -> 'AuthConfig':
        return cls(
            bcrypt_rounds=_int(os.getenv("BCRYPT_ROUNDS", "12"), 12),
            min_password_length=_int(os.getenv("MIN_PASSWORD_LENGTH", "6"), 6),
        )
