"""
Runtime configuration for the resume gap analyzer.
Values come from environment variables, optionally loaded from a .env file.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

_DEFAULT_TAG_CACHE_TTL = 300
_DEFAULT_API_PORT = 8000
_LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s: %(message)s'


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('true', '1', 'yes')


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


@dataclass
class Settings:
    """Application settings read from the environment"""
    use_llm: bool = False
    llm_provider: str = 'openai'
    perplexity_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    anthropic_api_key: Optional[str] = None
    tag_cache_ttl: int = _DEFAULT_TAG_CACHE_TTL
    log_level: str = 'INFO'
    api_host: str = '0.0.0.0'
    api_port: int = _DEFAULT_API_PORT

    @property
    def llm_api_key(self) -> Optional[str]:
        """Key for the configured provider, falling back to any key that is set."""
        by_provider = {
            'perplexity': self.perplexity_api_key,
            'openai': self.openai_api_key,
            'anthropic': self.anthropic_api_key,
        }
        return (by_provider.get(self.llm_provider)
                or self.perplexity_api_key or self.openai_api_key or self.anthropic_api_key)


def load_settings() -> Settings:
    """Build Settings from the current environment with safe defaults."""
    return Settings(
        use_llm=_env_flag('USE_LLM'),
        llm_provider=os.getenv('LLM_PROVIDER', 'openai').strip().lower(),
        perplexity_api_key=os.getenv('PERPLEXITY_API_KEY'),
        openai_api_key=os.getenv('OPENAI_API_KEY'),
        anthropic_api_key=os.getenv('ANTHROPIC_API_KEY'),
        tag_cache_ttl=max(0, _env_int('TAG_CACHE_TTL', _DEFAULT_TAG_CACHE_TTL)),
        log_level=os.getenv('LOG_LEVEL', 'INFO').strip().upper(),
        api_host=os.getenv('API_HOST', '0.0.0.0'),
        api_port=_env_int('API_PORT', _DEFAULT_API_PORT),
    )


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging once for the CLI and API entry points."""
    level_name = (level or load_settings().log_level).upper()
    logging.basicConfig(level=getattr(logging, level_name, logging.INFO), format=_LOG_FORMAT)
