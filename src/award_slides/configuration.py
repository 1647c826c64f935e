from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from omegaconf import DictConfig, OmegaConf

_HERE = Path(__file__).resolve()
CONFIG_PATH = _HERE.parent / "config" / "config.yaml"

# Environment variable -> (config key, converter)
ENV_OVERRIDES = {
    "AWARDS_API_TOKEN": ("api_token", str),
    "AWARDS_DB_PATH": ("db_path", str),
    "AWARDS_BUCKET_NAME": ("bucket_name", str),
    "AWARDS_SIGNED_URL_EXPIRY": ("signed_url_expiry", int),
    "AWARDS_S3_ENDPOINT_URL": ("s3_endpoint_url", str),
    "AWARDS_S3_REGION": ("s3_region", str),
    "AWARDS_LOG_LEVEL": ("log_level", str),
    "AWARDS_MAX_UPLOAD_BYTES": ("max_upload_bytes", int),
}


@dataclass(frozen=True)
class Settings:
    api_token: str
    db_path: Path
    bucket_name: str
    signed_url_expiry: int
    s3_endpoint_url: Optional[str]
    s3_region: str
    cors_origins: List[str]
    key_prefix: str
    categories_key: str
    log_level: str
    max_upload_bytes: int


@lru_cache(maxsize=1)
def _load_default_config() -> DictConfig:
    if not CONFIG_PATH.exists():
        raise FileNotFoundError(f"Default config not found at {CONFIG_PATH}")
    return OmegaConf.load(CONFIG_PATH)


def get_default_config_container() -> Dict[str, Any]:
    return OmegaConf.to_container(_load_default_config(), resolve=True)  # type: ignore[return-value]


def _env_overrides(environ: Dict[str, str]) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    for env_name, (key, convert) in ENV_OVERRIDES.items():
        raw = environ.get(env_name)
        if raw is None:
            continue
        overrides[key] = convert(raw)

    origins = environ.get("AWARDS_CORS_ORIGINS")
    if origins:
        overrides["cors_origins"] = [origin.strip() for origin in origins.split(",") if origin.strip()]
    return overrides


def make_runtime_config(overrides: Dict[str, Any]) -> DictConfig:
    """Merge overrides onto the packaged defaults; unknown keys are rejected."""
    base = OmegaConf.create(get_default_config_container())
    OmegaConf.set_struct(base, True)
    merged = OmegaConf.merge(base, OmegaConf.create(overrides))
    return merged  # type: ignore[return-value]


def build_settings(overrides: Optional[Dict[str, Any]] = None) -> Settings:
    config = make_runtime_config(overrides or {})
    data = OmegaConf.to_container(config, resolve=True)
    return Settings(
        api_token=str(data["api_token"] or ""),
        db_path=Path(data["db_path"]),
        bucket_name=str(data["bucket_name"]),
        signed_url_expiry=int(data["signed_url_expiry"]),
        s3_endpoint_url=data["s3_endpoint_url"] or None,
        s3_region=str(data["s3_region"]),
        cors_origins=list(data["cors_origins"]),
        key_prefix=str(data["key_prefix"]),
        categories_key=str(data["categories_key"]),
        log_level=str(data["log_level"]).upper(),
        max_upload_bytes=int(data["max_upload_bytes"]),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    load_dotenv()
    return build_settings(_env_overrides(dict(os.environ)))
