"""
Runtime configuration and billing constants.

The per-set bonus differs between call sites on purpose: entry creation
and editing screens price a set at $5, summary and reporting views at $20.
Both values are kept here so every caller names the one it uses.
"""

import os
from pathlib import Path

# Hour-log formula bonuses
PER_SET_BONUS_ENTRY_CREATION = 5.0
PER_SET_BONUS_SUMMARY = 20.0

# Work-record formula bonus
WORK_RECORD_SET_BONUS = 20.0

# Moe's summary view
MOES_HOURLY_RATE = 2.0
MOES_SET_BONUS = 5.0

# Candidates whose hours count towards the admin stats tab
STATS_CANDIDATE_STATUSES = ("Training", "Probation")

DEFAULT_DB_PATH = Path("data/ledger.db")
DEFAULT_LOG_DIR = Path("logs")
DEFAULT_LOG_LEVEL = "INFO"


def get_db_path() -> Path:
    return Path(os.getenv("TALENTLEDGER_DB_PATH", str(DEFAULT_DB_PATH)))


def get_log_dir() -> Path:
    return Path(os.getenv("TALENTLEDGER_LOG_DIR", str(DEFAULT_LOG_DIR)))


def get_log_level() -> str:
    return os.getenv("TALENTLEDGER_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
