"""Configuration model for music reconciler."""

import json
from dataclasses import dataclass, field, fields, is_dataclass, asdict
from pathlib import Path
from typing import Any, Dict

from . import __version__
from .exceptions import ConfigurationError

DEFAULT_USER_AGENT = f"music-reconciler/{__version__} (https://github.com/music-reconciler/music-reconciler)"


@dataclass
class CatalogSettings:
    """Configuration for the remote catalog."""
    base_url: str = "https://musicbrainz.org/ws/2"
    user_agent: str = DEFAULT_USER_AGENT
    count: int = 50  # candidates requested per search
    timeout: float = 10.0


@dataclass
class Settings:
    """Main configuration model."""
    library: Path
    database: Path
    release_name: str = "{release.artist}/{release.title}"
    track_name: str = "{track.disc} - {track.number} - {track.title}"
    catalog: CatalogSettings = field(default_factory=CatalogSettings)

    @classmethod
    def default(cls) -> "Settings":
        """Create a default configuration rooted in the user's music folder."""
        library = Path.home() / "Music"
        return cls(library=library, database=library / "library.db")


def _dataclass_to_dict(obj: Any) -> Any:
    """Convert dataclass to dict recursively."""
    if is_dataclass(obj):
        return {key: _dataclass_to_dict(value) for key, value in asdict(obj).items()}
    elif isinstance(obj, Path):
        return str(obj)
    elif isinstance(obj, dict):
        return {key: _dataclass_to_dict(value) for key, value in obj.items()}
    elif isinstance(obj, list):
        return [_dataclass_to_dict(item) for item in obj]
    else:
        return obj


_NESTED = {"catalog": CatalogSettings}
_PATHS = {"library", "database"}


def _dict_to_dataclass(data: Dict[str, Any], dataclass_type: type) -> Any:
    """Convert dict to dataclass recursively."""
    if not isinstance(data, dict):
        raise ConfigurationError(f"Expected an object for {dataclass_type.__name__}, got {type(data).__name__}")

    known = {f.name for f in fields(dataclass_type)}
    unknown = set(data) - known
    if unknown:
        raise ConfigurationError(f"Unknown {dataclass_type.__name__} keys: {', '.join(sorted(unknown))}")

    kwargs = {}
    for name, value in data.items():
        if name in _NESTED and dataclass_type is Settings:
            kwargs[name] = _dict_to_dataclass(value, _NESTED[name])
        elif name in _PATHS:
            kwargs[name] = Path(value).expanduser()
        else:
            kwargs[name] = value

    try:
        return dataclass_type(**kwargs)
    except TypeError as e:
        raise ConfigurationError(f"Invalid {dataclass_type.__name__}: {e}") from e


def load_settings(config_path: Path) -> Settings:
    """Load configuration from JSON file."""
    try:
        with open(config_path, 'r') as f:
            config_data = json.load(f)
    except OSError as e:
        raise ConfigurationError(f"Could not read settings from {config_path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Settings file {config_path} is not valid JSON: {e}") from e

    return _dict_to_dataclass(config_data, Settings)


def save_settings(settings: Settings, config_path: Path) -> None:
    """Save configuration to JSON file."""
    config_dict = _dataclass_to_dict(settings)

    with open(config_path, 'w') as f:
        json.dump(config_dict, f, indent=2)
