"""
Configuration management for lincat
"""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
import yaml


DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)


@dataclass
class LLMConfig:
    """Text-generation model configuration"""
    provider: str = "litellm"
    model: str = "groq/llama-3.1-8b-instant"
    api_key_env: str = "GROQ_API_KEY"
    temperature: float = 0.3
    max_tokens: int = 150
    timeout: float = 30.0


@dataclass
class ExtractorConfig:
    """Page metadata extraction configuration"""
    timeout: float = 10.0
    user_agent: str = DEFAULT_USER_AGENT
    title_max_length: int = 100
    description_max_length: int = 500
    paragraph_max_length: int = 200


@dataclass
class StorageConfig:
    """Storage backend configuration"""
    backend: str = "sqlite"
    sqlite_path: str = "lincat.db"
    json_path: str = "lincat.json"


@dataclass
class ClassificationConfig:
    """Classification-related configuration"""
    use_heuristics: bool = True
    category_word_count: int = 2


@dataclass
class LoggingConfig:
    """Log output configuration"""
    level: str = "WARNING"
    file: Optional[str] = "lincat.log"


@dataclass
class Config:
    """Main configuration class for lincat"""
    llm: LLMConfig = field(default_factory=LLMConfig)
    extractor: ExtractorConfig = field(default_factory=ExtractorConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    classification: ClassificationConfig = field(default_factory=ClassificationConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    default_owner: str = "local"

    _instance: Optional["Config"] = field(default=None, init=False, repr=False)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Config":
        """Load configuration from YAML file or use defaults.

        Environment overrides are applied after the file is read.

        Args:
            config_path: Path to config file. Defaults to config.yaml in the working directory.

        Returns:
            Config instance with loaded or default settings.
        """
        if config_path is None:
            config_path = Path("config.yaml")

        data = {}
        if config_path.exists():
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}

        config = cls._from_dict(data)
        config._apply_env()
        return config

    @classmethod
    def _from_dict(cls, data: dict) -> "Config":
        """Create Config from dictionary."""
        config = cls()

        sections = {
            "llm": config.llm,
            "extractor": config.extractor,
            "storage": config.storage,
            "classification": config.classification,
            "logging": config.logging,
        }
        for name, section in sections.items():
            section_data = data.get(name) or {}
            for key, value in section_data.items():
                if not hasattr(section, key):
                    raise ValueError(f"Unknown {name} setting: {key}")
                setattr(section, key, value)

        if "default_owner" in data:
            config.default_owner = str(data["default_owner"])

        if config.storage.backend not in ("sqlite", "json"):
            raise ValueError(f"Invalid storage backend: {config.storage.backend}")

        return config

    def _apply_env(self) -> None:
        """Apply LINCAT_* / LLM_* environment overrides."""
        if backend := os.getenv("LINCAT_STORAGE_BACKEND"):
            if backend not in ("sqlite", "json"):
                raise ValueError(f"Invalid storage backend in LINCAT_STORAGE_BACKEND: {backend}")
            self.storage.backend = backend
        if owner := os.getenv("LINCAT_OWNER"):
            self.default_owner = owner
        if provider := os.getenv("LLM_PROVIDER"):
            self.llm.provider = provider.lower()
        if model := os.getenv("LLM_MODEL"):
            self.llm.model = model

    @classmethod
    def get_instance(cls, config_path: Optional[Path] = None) -> "Config":
        """Get singleton instance of Config.

        Args:
            config_path: Path to config file (only used on first call).

        Returns:
            Singleton Config instance.
        """
        if cls._instance is None:
            cls._instance = cls.load(config_path)
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Reset singleton instance (useful for testing)."""
        cls._instance = None


def get_config(config_path: Optional[Path] = None) -> Config:
    """Convenience function to get config singleton."""
    return Config.get_instance(config_path)
