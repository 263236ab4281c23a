"""
Configuration management for FREE LIV TV.

Handles loading, validation, and access to application configuration.
"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field

# Global configuration instance
_config: Optional["FreeLivTVConfig"] = None

DEFAULT_PLAYLIST_URL = (
    "https://raw.githubusercontent.com/Jash-k/m3u/refs/heads/main/starshare.m3u"
)


class ServerConfig(BaseModel):
    """Server configuration."""
    host: str = "0.0.0.0"
    port: int = 7000
    debug: bool = False
    log_level: str = "INFO"
    public_url: Optional[str] = None  # External URL, used for keep-alive and install links


class AddonConfig(BaseModel):
    """Addon identity and catalog presentation."""
    id: str = "org.freelivtv.tamil"
    name: str = "FREE LIV TV"
    version: str = "2.1.0"
    description: str = (
        "Tamil Live TV - 200+ Channels | Cricket | Movies | News | Optimized for Samsung TV"
    )
    logo: str = "https://i.ibb.co/p4knk5y/images-4.png"
    id_prefix: str = "tamil"
    enable_logos: bool = True
    page_size: int = Field(default=100, gt=0)


class PlaylistConfig(BaseModel):
    """Upstream M3U playlist settings."""
    url: str = DEFAULT_PLAYLIST_URL
    max_channels: int = Field(default=1000, gt=0)
    timeout: float = Field(default=15.0, gt=0)
    user_agent: str = "Mozilla/5.0 (compatible; StremioAddon/2.0)"


class ResolverConfig(BaseModel):
    """HLS manifest resolver settings."""
    timeout: float = Field(default=10.0, gt=0)
    user_agent: str = "Mozilla/5.0 (SMART-TV; Linux; Tizen 5.0) AppleWebKit/537.36"
    referer: str = "https://freelivtvstrshare.vvishwas042.workers.dev/"


class CacheSettings(BaseModel):
    """Cache sizes and lifetimes (seconds)."""
    channel_ttl: int = Field(default=3600, gt=0)
    stream_ttl: int = Field(default=300, gt=0)
    meta_ttl: int = Field(default=3600, gt=0)
    max_entries: int = Field(default=1000, gt=0)
    sweep_interval: int = Field(default=600, gt=0)


class KeepAliveConfig(BaseModel):
    """Self-ping settings for hosts that idle out inactive services."""
    enabled: bool = False
    url: Optional[str] = None
    interval: int = Field(default=840, gt=0)
    initial_delay: int = Field(default=30, ge=0)
    timeout: float = 10.0


class RateLimitSettings(BaseModel):
    """Per-client request rate limiting."""
    enabled: bool = False
    requests_per_minute: int = 120
    burst_size: int = 30


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = "INFO"
    file: str = "logs/freelivtv.log"
    max_size: str = "10MB"
    backup_count: int = 5
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class FreeLivTVConfig(BaseModel):
    """Main FREE LIV TV configuration."""
    server: ServerConfig = Field(default_factory=ServerConfig)
    addon: AddonConfig = Field(default_factory=AddonConfig)
    playlist: PlaylistConfig = Field(default_factory=PlaylistConfig)
    resolver: ResolverConfig = Field(default_factory=ResolverConfig)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    keepalive: KeepAliveConfig = Field(default_factory=KeepAliveConfig)
    rate_limit: RateLimitSettings = Field(default_factory=RateLimitSettings)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_config(config_path: Optional[str] = None) -> FreeLivTVConfig:
    """
    Load configuration from file.

    Args:
        config_path: Path to config file. Defaults to config.yaml in project root.

    Returns:
        Loaded and validated configuration.
    """
    global _config

    if config_path is None:
        possible_paths = [
            Path("config.yaml"),
            Path(__file__).parent.parent / "config.yaml",
        ]
        for path in possible_paths:
            if path.exists():
                config_path = str(path)
                break

    config_data: dict[str, Any] = {}

    if config_path and Path(config_path).exists():
        with open(config_path) as f:
            config_data = yaml.safe_load(f) or {}

    # Apply environment variable overrides
    env_overrides = _get_env_overrides()
    _deep_merge(config_data, env_overrides)

    _config = FreeLivTVConfig(**config_data)
    return _config


def get_config() -> FreeLivTVConfig:
    """
    Get the current configuration.

    Returns:
        Current configuration (loads default if not yet loaded).
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config() -> FreeLivTVConfig:
    """Drop the loaded configuration and read it again from disk."""
    global _config
    _config = None
    return load_config()


def _get_env_overrides() -> dict[str, Any]:
    """Get configuration overrides from environment variables."""
    overrides: dict[str, Any] = {}

    env_map = {
        "FREELIVTV_HOST": ("server", "host"),
        "FREELIVTV_PORT": ("server", "port"),
        "FREELIVTV_DEBUG": ("server", "debug"),
        "FREELIVTV_PUBLIC_URL": ("server", "public_url"),
        "FREELIVTV_PLAYLIST_URL": ("playlist", "url"),
        "FREELIVTV_MAX_CHANNELS": ("playlist", "max_channels"),
        "FREELIVTV_CHANNEL_CACHE_TTL": ("cache", "channel_ttl"),
        "FREELIVTV_STREAM_CACHE_TTL": ("cache", "stream_ttl"),
        "FREELIVTV_MAX_CACHE_ENTRIES": ("cache", "max_entries"),
        "FREELIVTV_ENABLE_LOGOS": ("addon", "enable_logos"),
        "FREELIVTV_KEEP_ALIVE_ENABLED": ("keepalive", "enabled"),
        "FREELIVTV_KEEP_ALIVE_URL": ("keepalive", "url"),
        "FREELIVTV_KEEP_ALIVE_INTERVAL": ("keepalive", "interval"),
        "FREELIVTV_LOG_LEVEL": ("logging", "level"),
    }

    for env_var, path in env_map.items():
        value = os.environ.get(env_var)
        if value is not None:
            _set_nested(overrides, path, _parse_env_value(value))

    return overrides


def _parse_env_value(value: str) -> Any:
    """Parse environment variable value to appropriate type."""
    if value.lower() in ("true", "yes"):
        return True
    if value.lower() in ("false", "no"):
        return False

    try:
        return int(value)
    except ValueError:
        pass

    try:
        return float(value)
    except ValueError:
        pass

    return value


def _set_nested(d: dict[str, Any], path: tuple[str, ...], value: Any) -> None:
    """Set a nested dictionary value from a path tuple."""
    for key in path[:-1]:
        d = d.setdefault(key, {})
    d[path[-1]] = value


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> None:
    """Deep merge override into base dictionary."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value


class _ConfigProxy:
    """
    Proxy object that provides lazy access to configuration.

    Allows modules to import `config` directly and access it like:
        from freelivtv.config import config
        config.server.port
    """

    def __getattr__(self, name: str) -> Any:
        return getattr(get_config(), name)

    def __repr__(self) -> str:
        return f"<ConfigProxy for {get_config()}>"


config = _ConfigProxy()
