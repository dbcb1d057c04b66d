"""
Database configuration for SCHEMALOG storage context.

Handles loading credentials from environment and creating connection configurations.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Backend name -> SQLAlchemy driver prefix
DRIVERS = {
    "postgres": "postgresql+psycopg2",
    "mysql": "mysql+pymysql",
    "sqlite": "sqlite",
}
DEFAULT_PORTS = {"postgres": 5432, "mysql": 3306}


@dataclass
class DatabaseConfig:
    """Generic database connection configuration."""

    backend: str
    name: str
    host: Optional[str] = None
    port: Optional[int] = None
    user: Optional[str] = None
    password: Optional[str] = None

    def __post_init__(self):
        self.backend = self.backend.lower()
        if self.backend not in DRIVERS:
            raise ValueError(
                f"Unsupported database backend: '{self.backend}'. "
                f"Supported backends: {', '.join(DRIVERS)}"
            )
        if not self.name:
            raise ValueError("Database name is required")
        if self.port is not None:
            self.port = int(self.port)

    @classmethod
    def from_env(cls, name: Optional[str] = None, backend: Optional[str] = None):
        """
        Create DatabaseConfig from environment variables.

        Reads DATABASE_BACKEND and DATABASE_NAME, then the <BACKEND>_HOST, _PORT,
        _USER and _PASSWORD settings of that backend (e.g. POSTGRES_HOST).

        Args:
            name: Database name (default: DATABASE_NAME env var)
            backend: Backend name (default: DATABASE_BACKEND env var)

        Raises:
            EnvironmentError: If the backend or database name cannot be determined
        """
        backend = backend or os.getenv("DATABASE_BACKEND")
        name = name or os.getenv("DATABASE_NAME")
        if not backend:
            raise EnvironmentError(
                "DATABASE_BACKEND environment variable not set. "
                f"Set it in your .env file to one of: {', '.join(DRIVERS)}"
            )
        if not name:
            raise EnvironmentError(
                "Required environment variable 'DATABASE_NAME' not found. "
                "Ensure .env file exists and contains DATABASE_NAME."
            )

        db_env_setting_keys = ["host", "port", "user", "password"]
        prefix = backend.upper()
        db_settings = {setting: os.getenv(f"{prefix}_{setting.upper()}") for setting in db_env_setting_keys}

        return cls(backend=backend, name=name, **db_settings)

    @property
    def connection_string(self) -> str:
        """Generate the SQLAlchemy connection URL for the configured backend."""
        driver = DRIVERS[self.backend]
        if self.backend == "sqlite":
            return f"{driver}:///{self.name}"

        port = self.port or DEFAULT_PORTS[self.backend]
        return f"{driver}://{self.user}:{self.password}@{self.host}:{port}/{self.name}"
