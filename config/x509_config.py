"""
X.509 Configuration - Default e impostazioni centralizzate

Questo file centralizza i valori di default usati dal generatore e dal parser.
Modificando qui i valori, si applicano automaticamente a tutto il sistema.

Usage:
    from config.x509_config import X509_DEFAULTS

    request = CertificateRequest(["example.com"], common_name=X509_DEFAULTS.COMMON_NAME)
"""

import logging
import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class X509Defaults:
    """
    Valori di default per la generazione di certificati self-signed.

    Attributi:
        COMMON_NAME: CN usato quando il chiamante non fornisce un nome
        NOT_BEFORE: Inizio validità di default
        NOT_AFTER: Fine validità di default
        NOT_A_CA: Sentinella per ca_constraint (certificato end-entity)
        MAX_PATH_LENGTH: Path length massimo rappresentabile (u8)
        HEX_GROUPS_PER_LINE: Coppie esadecimali per riga nei dump di chiavi/firme
    """
    COMMON_NAME: str = "nu_plugin_x509 self signed crt"
    NOT_BEFORE: datetime = datetime(1975, 1, 1, tzinfo=timezone.utc)
    NOT_AFTER: datetime = datetime(4096, 1, 1, tzinfo=timezone.utc)
    NOT_A_CA: int = -1
    MAX_PATH_LENGTH: int = 0xFF
    HEX_GROUPS_PER_LINE: int = 16


# Istanza singleton globale
X509_DEFAULTS = X509Defaults()


def _env_log_level() -> int:
    name = os.environ.get("X509_LOG_LEVEL", "INFO").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def _env_log_dir() -> Optional[Path]:
    value = os.environ.get("X509_LOG_DIR")
    return Path(value) if value else None


@dataclass(frozen=True)
class X509Settings:
    """
    Impostazioni runtime lette dall'ambiente al momento dell'import.

    Attributi:
        LOG_LEVEL: Livello di log (env X509_LOG_LEVEL, default INFO)
        LOG_DIR: Directory per i file di log (env X509_LOG_DIR, opzionale)
    """
    LOG_LEVEL: int = field(default_factory=_env_log_level)
    LOG_DIR: Optional[Path] = field(default_factory=_env_log_dir)


X509_SETTINGS = X509Settings()
