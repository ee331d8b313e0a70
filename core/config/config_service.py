"""Typed, layered configuration loader with precedence handling.

Layers, lowest to highest precedence:

    0. embedded defaults (``_DEFAULTS``)
    1. ``core/config/defaults.ini``
    2. environment variables ``FIRMAS_<SECTION>__<KEY>``
    3. machine config ``core/config/config.ini``
    4. user config (``%APPDATA%/Firmas/config.ini`` or
       ``$XDG_CONFIG_HOME/firmas/config.ini``)
"""
from __future__ import annotations

import os
import configparser
from dataclasses import dataclass, fields
from pathlib import Path
from threading import RLock
from typing import Any, Callable, Dict, Tuple

# --------------------------------------------------------------------------- #
#  Paths & default definitions
# --------------------------------------------------------------------------- #

def _find_project_root() -> Path:
    here = Path(__file__).resolve()
    for parent in here.parents:
        if (parent / "core").is_dir():
            return parent
    return here.parent

PROJECT_ROOT = _find_project_root()
CONFIG_DIR = PROJECT_ROOT / "core" / "config"
DEFAULTS_INI = CONFIG_DIR / "defaults.ini"
MACHINE_INI = CONFIG_DIR / "config.ini"

ENV_PREFIX = "FIRMAS_"


_DEFAULTS: Dict[str, Dict[str, Any]] = {
    "General": {
        "app_name": "Cuadro de Firmas",
        "version": "1.0.0",
    },
    "Logging": {
        "audit_db": (PROJECT_ROOT / "databases" / "audit.db").as_posix(),
    },
    "Signature": {
        "max_bytes": str(2 * 1024 * 1024),
        "max_width": "800",
        "max_height": "400",
        "min_aspect": "2.0",
        "max_aspect": "8.0",
        "min_ink": "0.003",
        "max_ink": "0.2",
        "max_pixels": "16000000",
        "data_dir": (PROJECT_ROOT / "data" / "signatures").as_posix(),
        "key_file": (PROJECT_ROOT / "data" / "signatures" / "keyring.txt").as_posix(),
    },
    "Responsibilities": {
        "revisa": "1",
        "aprueba": "2",
        "enterado": "3",
        "elabora": "4",
    },
}


# --------------------------------------------------------------------------- #
#  Datamodels
# --------------------------------------------------------------------------- #

@dataclass
class GeneralConfig:
    app_name: str = ""
    version: str = ""


@dataclass
class LoggingConfig:
    audit_db: Path


@dataclass
class SignatureSection:
    max_bytes: int
    max_width: int
    max_height: int
    min_aspect: float
    max_aspect: float
    min_ink: float
    max_ink: float
    max_pixels: int
    data_dir: Path
    key_file: Path


@dataclass
class ResponsibilitiesSection:
    revisa: int = 1
    aprueba: int = 2
    enterado: int = 3
    elabora: int = 4


@dataclass
class AppConfig:
    general: GeneralConfig
    logging: LoggingConfig
    signature: SignatureSection
    responsibilities: ResponsibilitiesSection


# --------------------------------------------------------------------------- #
#  Helpers
# --------------------------------------------------------------------------- #

_TYPES: Dict[str, type] = {"Path": Path, "bool": bool, "int": int, "float": float, "str": str}


def _cp_to_dict(cp: configparser.ConfigParser) -> Dict[str, Dict[str, Any]]:
    data: Dict[str, Dict[str, Any]] = {}
    for section in cp.sections():
        data[section] = {k: v for k, v in cp.items(section)}
    return data


def _read_ini(path: Path) -> Dict[str, Dict[str, Any]]:
    cp = configparser.ConfigParser()
    cp.read(path, encoding="utf-8")
    return _cp_to_dict(cp)


def _apply(target: Dict[str, Dict[str, Any]], source: Dict[str, Dict[str, Any]],
           layer: str, origin: str,
           sources: Dict[Tuple[str, str], Dict[str, str]]) -> None:
    for section, items in source.items():
        sec = target.setdefault(section, {})
        for key, value in items.items():
            sec[key] = value
            sources[(section, key)] = {"layer": layer, "source": origin}


def _cast(value: Any, typ: Any) -> Any:
    # dataclass annotations are strings under ``from __future__ import annotations``
    if isinstance(typ, str):
        typ = _TYPES.get(typ, str)
    if typ is Path:
        return Path(str(value)).expanduser()
    if typ is bool:
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() in {"1", "true", "yes", "on"}
    if typ is int:
        return int(str(value).strip())
    if typ is float:
        return float(str(value).strip())
    return typ(value)


def _build_dataclass(cls: type, data: Dict[str, Any]) -> Any:
    kwargs = {}
    for field in fields(cls):
        val = data.get(field.name, field.default)
        kwargs[field.name] = _cast(val, field.type)
    return cls(**kwargs)


def _env_overlays(environ: Dict[str, str] | None = None) -> Dict[str, Dict[str, Any]]:
    result: Dict[str, Dict[str, Any]] = {}
    for env_key, value in (environ if environ is not None else os.environ).items():
        if not env_key.startswith(ENV_PREFIX):
            continue
        remainder = env_key[len(ENV_PREFIX):]
        parts = remainder.split("__", 1)
        if len(parts) != 2:
            continue
        section, key = parts
        section = section.title()
        key = key.lower()
        result.setdefault(section, {})[key] = value
    return result


def _user_config_path() -> Path:
    if os.name == "nt":
        appdata = os.environ.get("APPDATA") or (Path.home() / "AppData" / "Roaming")
        return Path(appdata) / "Firmas" / "config.ini"
    return Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")) / "firmas" / "config.ini"


# --------------------------------------------------------------------------- #
#  ConfigService
# --------------------------------------------------------------------------- #


class ConfigService:
    """Facade merging layered configuration with type safety."""

    def __init__(
        self,
        *,
        defaults_ini: Path | None = None,
        machine_ini: Path | None = None,
        user_ini: Path | None = None,
        environ: Dict[str, str] | None = None,
    ) -> None:
        self._lock = RLock()
        self._defaults_ini = defaults_ini or DEFAULTS_INI
        self._machine_ini = machine_ini or MACHINE_INI
        self._user_ini = user_ini
        self._environ = environ
        self.reload()

    # ------------------------------------------------------------------ #
    def reload(self) -> None:
        with self._lock:
            merged: Dict[str, Dict[str, Any]] = {}
            sources: Dict[Tuple[str, str], Dict[str, str]] = {}

            # Layer 0: embedded defaults
            _apply(merged, _DEFAULTS, "code", "embedded", sources)

            # Layer 1: defaults.ini
            if self._defaults_ini.exists():
                _apply(merged, _read_ini(self._defaults_ini), "defaults.ini",
                       str(self._defaults_ini), sources)

            # Layer 2: environment variables
            _apply(merged, _env_overlays(self._environ), "env", "os.environ", sources)

            # Layer 3: machine config
            if self._machine_ini.exists():
                _apply(merged, _read_ini(self._machine_ini), "machine",
                       str(self._machine_ini), sources)

            # Layer 4: user overrides
            user_ini = self._user_ini or _user_config_path()
            if user_ini.exists():
                _apply(merged, _read_ini(user_ini), "user", str(user_ini), sources)

            self._merged = merged
            self._sources = sources

            self.general = _build_dataclass(GeneralConfig, merged.get("General", {}))
            self.logging = _build_dataclass(LoggingConfig, merged.get("Logging", {}))
            self.signature = _build_dataclass(SignatureSection, merged.get("Signature", {}))
            self.responsibilities = _build_dataclass(
                ResponsibilitiesSection, merged.get("Responsibilities", {})
            )

    def snapshot(self) -> AppConfig:
        with self._lock:
            return AppConfig(
                general=self.general,
                logging=self.logging,
                signature=self.signature,
                responsibilities=self.responsibilities,
            )

    # ------------------------------------------------------------------ #
    def get(self, section: str, key: str, *, cast: Callable[[Any], Any] | type = str) -> Any:
        val = self._merged.get(section, {}).get(key)
        if val is None:
            return None
        if isinstance(cast, type):
            return _cast(val, cast)
        return cast(val)

    def meta_source(self, section: str, key: str) -> Dict[str, str] | None:
        return self._sources.get((section, key))


# Global singleton
config_service = ConfigService()
