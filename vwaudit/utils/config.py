"""
VW-AUDIT Configuration Module

Centralized configuration management for the audit harness.
"""

import os
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class Config:
    """VW-AUDIT Configuration"""
    
    # Paths
    base_dir: Path = field(default_factory=lambda: Path(__file__).parent.parent.parent)
    data_dir: Path = field(default_factory=lambda: Path(__file__).parent.parent.parent / "data")
    reports_dir: Optional[Path] = None  # Defaults to data_dir / "reports"
    
    # Report Settings
    report_title: str = "Verified Wallet - Comprehensive Vulnerability Report"
    default_report_format: str = "markdown"
    
    # Web API Settings
    api_host: str = "127.0.0.1"
    api_port: int = 8000
    
    # Logging
    log_level: str = "INFO"
    log_file: Optional[Path] = None
    
    def __post_init__(self):
        """Apply environment overrides"""
        if env_data := os.getenv("VWAUDIT_DATA_DIR"):
            self.data_dir = Path(env_data)
        if env_reports := os.getenv("VWAUDIT_REPORTS_DIR"):
            self.reports_dir = Path(env_reports)
        if env_log := os.getenv("VWAUDIT_LOG_LEVEL"):
            self.log_level = env_log
        if env_log_file := os.getenv("VWAUDIT_LOG_FILE"):
            self.log_file = Path(env_log_file)
        if env_host := os.getenv("VWAUDIT_API_HOST"):
            self.api_host = env_host
        if env_port := os.getenv("VWAUDIT_API_PORT"):
            self.api_port = int(env_port)
        
        if self.reports_dir is None:
            self.reports_dir = self.data_dir / "reports"


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create global config instance"""
    global _config
    if _config is None:
        _config = Config()
    return _config


def reset_config():
    """Drop the cached config so the next get_config() re-reads the environment"""
    global _config
    _config = None
