"""
Configuration management for the LimeLight Reporting client.
Handles .env-based configuration (python-decouple), plain dictionaries and
YAML config files.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from decouple import config as env_config

logger = logging.getLogger(__name__)


DEFAULT_PROXY = 'http://soap.llnw.net/ReportingService/Service.asmx'
DEFAULT_URI = 'http://www.llnw.com/Reporting'
DEFAULT_TYPES_NAMESPACE = 'http://www.llnw.com/Reporting/encodedTypes'

# Top-level section read by from_yaml()
YAML_SECTION = 'limelight'


@dataclass
class ReportingConfig:
    """
    Reporting Service client configuration.
    Manages endpoint, authentication and HTTP transport settings.
    """
    username: str
    password: str
    proxy: str = DEFAULT_PROXY  # Endpoint that receives SOAP requests
    uri: str = DEFAULT_URI  # Method namespace and SOAP action base
    types_namespace: str = DEFAULT_TYPES_NAMESPACE
    timeout: int = 60
    retries: int = 3
    pool_connections: int = 10
    pool_maxsize: int = 20
    debug: bool = False

    def __post_init__(self):
        if not self.username or not str(self.username).strip():
            raise ValueError("username must not be blank")
        if not self.password:
            raise ValueError("password must not be blank")
        if not self.proxy or not self.proxy.strip():
            raise ValueError("proxy must not be blank")
        if self.timeout <= 0:
            raise ValueError("timeout must be > 0")
        if self.retries < 0:
            raise ValueError("retries must be >= 0")

    def __repr__(self) -> str:
        """Safe representation without password"""
        return (f"ReportingConfig(proxy={self.proxy}, uri={self.uri}, "
                f"username={self.username}, timeout={self.timeout})")

    @classmethod
    def from_env(cls) -> 'ReportingConfig':
        """
        Load configuration from environment variables (.env file).

        Required:
            LIMELIGHT_USERNAME, LIMELIGHT_PASSWORD

        Optional:
            LIMELIGHT_REPORTING_URL, LIMELIGHT_REPORTING_URI,
            LIMELIGHT_TIMEOUT, LIMELIGHT_RETRIES, LIMELIGHT_DEBUG

        Returns:
            ReportingConfig: Configuration loaded from environment

        Raises:
            ValueError: If credentials are missing
        """
        username = env_config('LIMELIGHT_USERNAME', default='')
        password = env_config('LIMELIGHT_PASSWORD', default='')
        if not username or not password:
            raise ValueError(
                "LimeLight credentials not found. Set LIMELIGHT_USERNAME and LIMELIGHT_PASSWORD."
            )

        return cls(
            username=username,
            password=password,
            proxy=env_config('LIMELIGHT_REPORTING_URL', default=DEFAULT_PROXY),
            uri=env_config('LIMELIGHT_REPORTING_URI', default=DEFAULT_URI),
            timeout=env_config('LIMELIGHT_TIMEOUT', default=60, cast=int),
            retries=env_config('LIMELIGHT_RETRIES', default=3, cast=int),
            debug=env_config('LIMELIGHT_DEBUG', default=False, cast=bool),
        )

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'ReportingConfig':
        """
        Load configuration from dictionary.

        Args:
            config_dict: Dictionary with configuration values

        Returns:
            ReportingConfig: Configuration loaded from dictionary

        Raises:
            ValueError: If credentials are missing
        """
        if not config_dict.get('username') or not config_dict.get('password'):
            raise ValueError("LimeLight configuration requires 'username' and 'password'")

        return cls(
            username=config_dict['username'],
            password=config_dict['password'],
            proxy=config_dict.get('proxy', DEFAULT_PROXY),
            uri=config_dict.get('uri', DEFAULT_URI),
            types_namespace=config_dict.get('types_namespace', DEFAULT_TYPES_NAMESPACE),
            timeout=int(config_dict.get('timeout', 60)),
            retries=int(config_dict.get('retries', 3)),
            pool_connections=int(config_dict.get('pool_connections', 10)),
            pool_maxsize=int(config_dict.get('pool_maxsize', 20)),
            debug=bool(config_dict.get('debug', False)),
        )

    @classmethod
    def from_yaml(cls, path: Union[str, Path], section: Optional[str] = YAML_SECTION) -> 'ReportingConfig':
        """
        Load configuration from a YAML file.

        Example file:
            limelight:
              username: luxuser
              password: luxpass
              timeout: 120

        Args:
            path: Path to the YAML file
            section: Top-level key holding the settings (None to read the document root)

        Returns:
            ReportingConfig: Configuration loaded from the file

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the section is missing or credentials are missing
        """
        config_path = Path(path)
        with config_path.open('r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}

        if section:
            data = data.get(section)
            if not isinstance(data, dict):
                raise ValueError(f"Section '{section}' not found in {config_path}")

        logger.debug(f"Loaded reporting configuration from {config_path}")
        return cls.from_dict(data)
