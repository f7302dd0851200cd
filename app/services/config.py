# services/config.py

"""
Konfigurasi aplikasi Si Pak-E.

Konfigurasi dibaca dari `configs/app.yaml` (PyYAML). Jika file tidak ada,
dipakai nilai default. Beberapa nilai bisa ditimpa lewat environment
variable (dibaca juga dari file `.env` melalui python-dotenv):

- SIPAKE_CONFIG   : path file YAML alternatif
- SIPAKE_API_URL  : base URL backend (fallback: NEXT_PUBLIC_API_URL)
- SIPAKE_LOG_DIR  : direktori file log
"""

import copy
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

load_dotenv()

CONFIG_PATH = Path("configs/app.yaml")
DEFAULT_API_URL = "http://127.0.0.1:5000"

DEFAULT_CONFIG: Dict[str, Any] = {
    "app": {"name": "Si Pak-E", "subtitle": "Sistem Pakar Diagnosa BMW E36"},
    "api": {"base_url": DEFAULT_API_URL, "timeout": 15.0, "page_size": 10},
    "auth": {"cookie_name": "token"},
    "modules": {
        "engine": {
            "label": "Engine",
            "admin_base": "/admin/engine",
            "consultation_base": "/engine/consultations",
        },
        "suspension": {
            "label": "Suspension",
            "admin_base": "/admin/suspension",
            "consultation_base": "/suspension/consultations",
        },
    },
    "logging": {"dir": "logs", "level": "INFO"},
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Gabungkan dict secara rekursif; nilai di `override` menang."""
    merged = copy.deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load konfigurasi YAML + override dari environment.

    Args:
        path: Path file YAML. Default: SIPAKE_CONFIG atau configs/app.yaml.

    Returns:
        Dictionary konfigurasi lengkap (default sudah digabung).
    """
    config_path = Path(path or os.getenv("SIPAKE_CONFIG") or CONFIG_PATH)
    file_config: Dict[str, Any] = {}
    if config_path.exists():
        with open(config_path, "r", encoding="utf-8") as f:
            file_config = yaml.safe_load(f) or {}

    config = _merge(DEFAULT_CONFIG, file_config)

    api_url = os.getenv("SIPAKE_API_URL") or os.getenv("NEXT_PUBLIC_API_URL")
    if api_url:
        config["api"]["base_url"] = api_url
    log_dir = os.getenv("SIPAKE_LOG_DIR")
    if log_dir:
        config["logging"]["dir"] = log_dir

    return config


def module_config(config: Dict[str, Any], module: str) -> Dict[str, Any]:
    """Ambil konfigurasi satu modul diagnosa (engine / suspension)."""
    modules = config.get("modules", {})
    if module not in modules:
        raise KeyError(f"Modul '{module}' tidak dikenal. Pilihan: {', '.join(modules)}")
    return modules[module]


def asset_url(base_url: str, path: str) -> str:
    """Bangun URL lengkap untuk aset backend (gambar problem/gejala/profil)."""
    clean_path = path.replace("\\", "/").lstrip("/")
    return f"{base_url.rstrip('/')}/{clean_path}"
