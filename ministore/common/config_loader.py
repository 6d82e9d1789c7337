"""
Configuration Loader

Loads the YAML settings file (image profiles, rasterizer, pricing, remote
endpoints, storefront options) and merges secrets from the environment.
A local .env file is read with python-dotenv when present.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

SETTINGS_FILE = 'settings.yaml'


@dataclass(frozen=True)
class ImageProfile:
    """Size/quality bound for normalized images."""
    max_dimension: int
    quality: float


@dataclass(frozen=True)
class RasterSettings:
    scale: float = 0.5
    quality: float = 0.8


@dataclass(frozen=True)
class UploaderSettings:
    endpoint: str = "https://api.imgbb.com/1/upload"
    api_key: str = ""
    timeout: float = 60.0


@dataclass(frozen=True)
class FirestoreSettings:
    project_id: str = ""
    database: str = "(default)"
    api_key: str = ""
    id_token: str = ""
    timeout: float = 30.0


@dataclass(frozen=True)
class StorefrontSettings:
    new_badge_days: int = 7
    currency_symbol: str = "₹"
    default_theme_color: str = "#6366f1"
    public_base_url: str = "https://ministore.com/s/"


@dataclass(frozen=True)
class Settings:
    """Fully resolved application settings."""
    product_profile: ImageProfile = ImageProfile(800, 0.7)
    logo_profile: ImageProfile = ImageProfile(400, 0.8)
    raster: RasterSettings = field(default_factory=RasterSettings)
    price_boost_amount: float = 50.0
    uploader: UploaderSettings = field(default_factory=UploaderSettings)
    firestore: FirestoreSettings = field(default_factory=FirestoreSettings)
    storefront: StorefrontSettings = field(default_factory=StorefrontSettings)


def _get_config_dir() -> Path:
    """Get the config directory path."""
    override = os.environ.get('MINISTORE_CONFIG_DIR')
    if override:
        return Path(override)

    # Try relative to this file first
    module_dir = Path(__file__).parent.parent.parent
    config_dir = module_dir / 'config'

    if config_dir.exists():
        return config_dir

    # Try current working directory
    cwd_config = Path.cwd() / 'config'
    if cwd_config.exists():
        return cwd_config

    raise FileNotFoundError(
        f"Config directory not found. Tried: {config_dir}, {cwd_config}"
    )


def load_config(filename: str) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        filename: Name of the config file (e.g., 'settings.yaml')

    Returns:
        Parsed YAML content as dictionary (empty dict for an empty file)

    Raises:
        FileNotFoundError: If config file doesn't exist
    """
    config_path = _get_config_dir() / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


def _profile(raw: Optional[Dict[str, Any]], default: ImageProfile) -> ImageProfile:
    if not raw:
        return default
    return ImageProfile(
        max_dimension=int(raw.get('max_dimension', default.max_dimension)),
        quality=float(raw.get('quality', default.quality)),
    )


def build_settings(config: Dict[str, Any], env: Optional[Dict[str, str]] = None) -> Settings:
    """
    Build Settings from a parsed config dict and an environment mapping.

    Environment values win over the file for secrets and the project id.

    Args:
        config: Parsed settings.yaml content
        env: Environment mapping (defaults to os.environ)

    Returns:
        Resolved Settings
    """
    if env is None:
        env = dict(os.environ)

    defaults = Settings()
    imaging = config.get('imaging', {})
    raster = config.get('rasterizer', {})
    pricing = config.get('pricing', {})
    hosting = config.get('hosting', {})
    firestore = config.get('firestore', {})
    storefront = config.get('storefront', {})

    return Settings(
        product_profile=_profile(imaging.get('product'), defaults.product_profile),
        logo_profile=_profile(imaging.get('logo'), defaults.logo_profile),
        raster=RasterSettings(
            scale=float(raster.get('scale', defaults.raster.scale)),
            quality=float(raster.get('quality', defaults.raster.quality)),
        ),
        price_boost_amount=float(pricing.get('auto_boost_amount', defaults.price_boost_amount)),
        uploader=UploaderSettings(
            endpoint=hosting.get('endpoint', defaults.uploader.endpoint),
            api_key=env.get('IMGBB_API_KEY', ''),
            timeout=float(hosting.get('timeout', defaults.uploader.timeout)),
        ),
        firestore=FirestoreSettings(
            project_id=env.get('FIRESTORE_PROJECT_ID') or firestore.get('project_id', ''),
            database=firestore.get('database', defaults.firestore.database),
            api_key=env.get('FIRESTORE_API_KEY', ''),
            id_token=env.get('FIRESTORE_ID_TOKEN', ''),
            timeout=float(firestore.get('timeout', defaults.firestore.timeout)),
        ),
        storefront=StorefrontSettings(
            new_badge_days=int(storefront.get('new_badge_days', defaults.storefront.new_badge_days)),
            currency_symbol=storefront.get('currency_symbol', defaults.storefront.currency_symbol),
            default_theme_color=storefront.get(
                'default_theme_color', defaults.storefront.default_theme_color),
            public_base_url=storefront.get('public_base_url', defaults.storefront.public_base_url),
        ),
    )


def load_settings(dotenv_path: Optional[str] = None) -> Settings:
    """
    Load settings.yaml and merge environment secrets.

    Args:
        dotenv_path: Explicit .env path (default: search upwards from cwd)

    Returns:
        Resolved Settings
    """
    load_dotenv(dotenv_path)
    return build_settings(load_config(SETTINGS_FILE))
