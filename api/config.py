"""
Configuration constants for MongoFlow Studio
"""
from dataclasses import dataclass

# Logical collection every playground operation runs against
COLLECTION_NAME = "demo_collection"

@dataclass
class DatabaseConfig:
    """MongoDB connection configuration.

    The connection string and database name come from the environment;
    the collection name is fixed so users can never target another one.
    """
    uri: str = ""
    name: str = "mongoflow_demo"
    collection: str = COLLECTION_NAME
    timeout_ms: int = 5000  # serverSelectionTimeoutMS

    @property
    def is_configured(self) -> bool:
        return bool(self.uri)

@dataclass
class LimitsConfig:
    """Per-operation payload and result limits"""
    find_limit: int = 100
    bulk_insert_max: int = 100

@dataclass
class PerformanceConfig:
    """Performance log configuration"""
    log_size: int = 50

@dataclass
class AnalyzerConfig:
    """GitHub repository analyzer configuration"""
    github_token: str = ""
    max_files: int = 30
    max_workers: int = 10
    timeout: float = 10.0
    api_base: str = "https://api.github.com"
    raw_base: str = "https://raw.githubusercontent.com"
    user_agent: str = "MongoFlow-Studio"

@dataclass
class LoggingConfig:
    level: str = "INFO"

@dataclass
class Config:
    """Main configuration container"""
    database: DatabaseConfig
    limits: LimitsConfig
    performance: PerformanceConfig
    analyzer: AnalyzerConfig
    logging: LoggingConfig

    @classmethod
    def from_env(cls) -> 'Config':
        """Create config from environment - delegates to EnvironmentConfigLoader"""
        from environment_config_loader import EnvironmentConfigLoader
        return EnvironmentConfigLoader().load()

# Default instance
default_config = Config.from_env()
