#!/usr/bin/env python3
"""Modular configuration system for teamdesk

Configuration hierarchy:
- logging_config: Logging configuration
- store_config: Document store backend (memory / PostgreSQL)
- auth_config: Local auth provider settings
- membership_config: Membership workflow switches
"""
import os
from dotenv import load_dotenv
from .auth_config import AuthConfig
from .logging_config import LoggingConfig, setup_logging
from .membership_config import MembershipConfig
from .store_config import StoreConfig
from .teamdesk_config import TeamdeskConfig

# Load environment file based on ENV
env = os.getenv("ENV") or os.getenv("ENVIRONMENT", "development")
env_files = {
    "development": "deployment/environments/dev.env",
    "dev": "deployment/environments/dev.env",
    "testing": "deployment/environments/test.env",
    "test": "deployment/environments/test.env",
    "staging": "deployment/environments/staging.env",
    "production": "deployment/environments/production.env",
}
env_file = env_files.get(env, "deployment/environments/dev.env")
load_dotenv(env_file, override=False)

# Create global settings instance
settings = TeamdeskConfig.from_env()

def get_settings() -> TeamdeskConfig:
    """Get global settings instance"""
    return settings

def reload_settings() -> TeamdeskConfig:
    """Reload settings from environment"""
    global settings
    settings = TeamdeskConfig.from_env()
    return settings

__all__ = [
    # Main config
    'TeamdeskConfig',
    'get_settings',
    'reload_settings',
    'settings',
    'setup_logging',
    # Sub-configs
    'LoggingConfig',
    'StoreConfig',
    'AuthConfig',
    'MembershipConfig',
]
