"""
Validation rule engine and configuration management.
"""

from .rule_config import RuleConfigBuilder, RuleConfigLoader, default_client_rules
from .rule_engine import RowValidator, RuleEngine

__all__ = [
    "RowValidator",
    "RuleEngine",
    "RuleConfigLoader",
    "RuleConfigBuilder",
    "default_client_rules",
]
