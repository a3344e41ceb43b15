#!/usr/bin/env python3
"""Top-level teamdesk configuration"""
import os
from dataclasses import dataclass, field

from .auth_config import AuthConfig
from .logging_config import LoggingConfig
from .membership_config import MembershipConfig
from .store_config import StoreConfig


@dataclass
class TeamdeskConfig:
    """Main configuration with all sub-configs"""

    environment: str = "development"

    logging: LoggingConfig = field(default_factory=LoggingConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    auth: AuthConfig = field(default_factory=AuthConfig)
    membership: MembershipConfig = field(default_factory=MembershipConfig)

    @classmethod
    def from_env(cls) -> 'TeamdeskConfig':
        """Load complete configuration from environment"""
        return cls(
            environment=os.getenv("ENV") or os.getenv("ENVIRONMENT", "development"),
            logging=LoggingConfig.from_env(),
            store=StoreConfig.from_env(),
            auth=AuthConfig.from_env(),
            membership=MembershipConfig.from_env(),
        )
