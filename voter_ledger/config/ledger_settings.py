"""
Ledger Settings — Environment Configuration & Startup Validation

Environment variables:
  VOTER_LEDGER_MAX_REGISTRATIONS  initial capacity        (default 1000000, > 0)
  VOTER_LEDGER_REGISTRATION_FEE   initial fee             (default 100, >= 0)
  VOTER_LEDGER_LOG_LEVEL          logging level name      (default INFO)
  VOTER_LEDGER_HOST / _PORT       server bind address     (default 127.0.0.1:8000)
  VOTER_LEDGER_JURISDICTIONS      comma list              (default USA,EU)
  VOTER_LEDGER_ADMINS             comma list of principals
  VOTER_LEDGER_IDENTITIES         comma list of principal=identity_hash

Invalid values never abort startup. They are reported by
validate_settings() and replaced by the default with a warning.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

logger = logging.getLogger("voter_ledger.config")

DEFAULT_MAX_REGISTRATIONS = 1_000_000
DEFAULT_REGISTRATION_FEE = 100
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000
DEFAULT_JURISDICTIONS = ("USA", "EU")

_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class LedgerSettings:
    max_registrations: int = DEFAULT_MAX_REGISTRATIONS
    registration_fee: int = DEFAULT_REGISTRATION_FEE
    log_level: str = DEFAULT_LOG_LEVEL
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    jurisdictions: Tuple[str, ...] = DEFAULT_JURISDICTIONS
    admins: Tuple[str, ...] = ()
    identities: Dict[str, str] = field(default_factory=dict)


# =============================================================================
# VALIDATION
# =============================================================================

def _check_int(name: str, minimum: int) -> Tuple[bool, str, Optional[int]]:
    """Check an optional integer env var. Unset is OK (default applies)."""
    raw = os.environ.get(name, "").strip()
    if not raw:
        return True, f"{name} not set, using default", None
    try:
        value = int(raw)
    except ValueError:
        return False, f"{name} is not an integer: {raw!r}", None
    if value < minimum:
        return False, f"{name} must be >= {minimum}, got {value}", None
    return True, f"{name} = {value}", value


def _check_log_level() -> Tuple[bool, str, Optional[str]]:
    raw = os.environ.get("VOTER_LEDGER_LOG_LEVEL", "").strip().upper()
    if not raw:
        return True, "VOTER_LEDGER_LOG_LEVEL not set, using default", None
    if raw not in _VALID_LOG_LEVELS:
        return False, f"VOTER_LEDGER_LOG_LEVEL unknown: {raw!r}", None
    return True, f"VOTER_LEDGER_LOG_LEVEL = {raw}", raw


def _split_list(name: str) -> Tuple[str, ...]:
    raw = os.environ.get(name, "")
    return tuple(item.strip() for item in raw.split(",") if item.strip())


def _parse_identities() -> Tuple[bool, str, Dict[str, str]]:
    bindings: Dict[str, str] = {}
    bad: List[str] = []
    for item in _split_list("VOTER_LEDGER_IDENTITIES"):
        principal, sep, identity_hash = item.partition("=")
        if not sep or not principal.strip() or not identity_hash.strip():
            bad.append(item)
            continue
        bindings[principal.strip()] = identity_hash.strip()
    if bad:
        return False, f"VOTER_LEDGER_IDENTITIES malformed entries: {bad}", bindings
    return True, f"VOTER_LEDGER_IDENTITIES {len(bindings)} binding(s)", bindings


def validate_settings() -> List[Tuple[bool, str]]:
    """Run every environment check. Returns (ok, message) per check."""
    checks = [
        _check_int("VOTER_LEDGER_MAX_REGISTRATIONS", 1),
        _check_int("VOTER_LEDGER_REGISTRATION_FEE", 0),
        _check_int("VOTER_LEDGER_PORT", 1),
        _check_log_level(),
        _parse_identities(),
    ]
    return [(ok, msg) for ok, msg, _ in checks]


# =============================================================================
# LOADING
# =============================================================================

def load_settings() -> LedgerSettings:
    """Build LedgerSettings from the environment, falling back per field."""
    values = {}

    for key, name, minimum in (
        ("max_registrations", "VOTER_LEDGER_MAX_REGISTRATIONS", 1),
        ("registration_fee", "VOTER_LEDGER_REGISTRATION_FEE", 0),
        ("port", "VOTER_LEDGER_PORT", 1),
    ):
        ok, msg, value = _check_int(name, minimum)
        if not ok:
            logger.warning("[CONFIG] %s, default applied", msg)
        elif value is not None:
            values[key] = value

    ok, msg, level = _check_log_level()
    if not ok:
        logger.warning("[CONFIG] %s, default applied", msg)
    elif level is not None:
        values["log_level"] = level

    ok, msg, identities = _parse_identities()
    if not ok:
        logger.warning("[CONFIG] %s, skipped", msg)
    values["identities"] = identities

    host = os.environ.get("VOTER_LEDGER_HOST", "").strip()
    if host:
        values["host"] = host

    jurisdictions = _split_list("VOTER_LEDGER_JURISDICTIONS")
    if jurisdictions:
        values["jurisdictions"] = jurisdictions
    values["admins"] = _split_list("VOTER_LEDGER_ADMINS")

    return LedgerSettings(**values)


def configure_logging(settings: Optional[LedgerSettings] = None) -> None:
    settings = settings or load_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
