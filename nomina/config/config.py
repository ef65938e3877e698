"""
Config classes that read the process environment, optionally seeded from a .env file.
"""
import os
import logging
from abc import abstractmethod
from dataclasses import dataclass
from dotenv import load_dotenv

from nomina.errors import ConfigurationError

logger = logging.getLogger(__name__)

SURREALDB_ENV_VARS = {
    'url': 'SURREALDB_URL',
    'namespace': 'SURREALDB_NAMESPACE',
    'database': 'SURREALDB_DATABASE',
    'username': 'SURREALDB_USERNAME',
    'password': 'SURREALDB_PASSWORD',
}


@dataclass(frozen=True)
class SurrealConfig:
    """Connection settings for the SurrealDB store, built once at startup."""

    url: str
    namespace: str
    database: str
    username: str
    password: str

    def __repr__(self) -> str:
        return (f"SurrealConfig(url={self.url!r}, namespace={self.namespace!r}, "
                f"database={self.database!r}, username={self.username!r}, password='***')")


class BaseConfig():
    """
    Config class that snapshots the environment, loading a .env file first.
    """
    def __init__(self, dotenv_path: str = None):
        load_dotenv(dotenv_path)
        # Get all environment variables and store them in a dictionary
        self.env_vars = {key: os.getenv(key) for key in os.environ}

    def get_env_vars(self) -> dict:
        """
        Return the dictionary containing all environment variables
        """
        return self.env_vars

    def get_env_var(self, var_name: str, default: str = None):
        """
        Retrieve the value of the specified environment variable
        Args:
            var_name (str) : Name of the env var to fetch
            default (str) : Value returned when the var is not set
        """
        if var_name in self.env_vars.keys():
            return self.env_vars[var_name]
        if default is None:
            logger.warning("Variable %s not found.", var_name)
        return default

    @abstractmethod
    def validate_env_vars(self):
        """
        Abstract method for validation of the env vars.
        """


class NominaConfig(BaseConfig):
    """Process configuration for a nomina deployment backed by SurrealDB."""

    def validate_env_vars(self):
        missing = [name for name in SURREALDB_ENV_VARS.values() if not self.env_vars.get(name)]
        if missing:
            raise ConfigurationError(", ".join(f"missing `{name}` environment variable" for name in missing))

    def surreal_config(self) -> SurrealConfig:
        self.validate_env_vars()
        return SurrealConfig(**{attr: self.env_vars[name] for attr, name in SURREALDB_ENV_VARS.items()})
