"""
Storm Impact - Centralized Path Configuration
=============================================

This module provides centralized path management for the storm impact project.
Import it wherever a script reads or writes project files.

Usage:
    from stormimpact.config_paths import RAW_DATA_DIR, FIGURES_DIR, REPORTS_DIR

    df = pd.read_csv(RAW_DATA_DIR / 'StormData.csv.bz2')
    save_chart(fig, FIGURES_DIR / 'health_impact.html')
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

# ==============================================================================
# PROJECT ROOT DETECTION
# ==============================================================================

ROOT_ENV_VAR = "STORMIMPACT_ROOT"
ROOT_INDICATORS = ("pyproject.toml", "README.md", ".git")


def find_project_root() -> Path:
    """
    Find project root by looking for key indicators.
    Searches upward from current file location unless STORMIMPACT_ROOT is set.
    """
    override = os.environ.get(ROOT_ENV_VAR)
    if override:
        return Path(override).expanduser().resolve()

    current = Path(__file__).resolve().parent

    for candidate in (current, *current.parents[:3]):
        for indicator in ROOT_INDICATORS:
            if (candidate / indicator).exists():
                return candidate

    # Fallback: package lives directly under the project root
    return current.parent


PROJECT_ROOT = find_project_root()

# ==============================================================================
# DIRECTORY PATHS
# ==============================================================================

CONFIG_DIR = PROJECT_ROOT / 'config'

DATA_DIR = PROJECT_ROOT / 'data'
RAW_DATA_DIR = DATA_DIR / 'raw'

RESULTS_DIR = PROJECT_ROOT / 'results'
FIGURES_DIR = RESULTS_DIR / 'figures'
REPORTS_DIR = RESULTS_DIR / 'reports'

LOGS_DIR = PROJECT_ROOT / 'logs'

# ==============================================================================
# DIRECTORY CREATION
# ==============================================================================


def ensure_directories() -> None:
    """Create all output directories if they don't exist."""
    directories = [
        CONFIG_DIR,
        RAW_DATA_DIR,
        FIGURES_DIR,
        REPORTS_DIR,
        LOGS_DIR,
    ]

    for directory in directories:
        directory.mkdir(parents=True, exist_ok=True)


# ==============================================================================
# UTF-8 ENCODING (Windows PowerShell fix)
# ==============================================================================

if sys.platform == 'win32':
    try:
        sys.stdout.reconfigure(encoding='utf-8')
        sys.stderr.reconfigure(encoding='utf-8')
    except AttributeError:
        pass

# ==============================================================================
# VERIFICATION
# ==============================================================================

if __name__ == "__main__":
    from rich.console import Console
    from rich.table import Table

    ensure_directories()
    console = Console()
    table = Table(title="Storm Impact Path Configuration", show_header=True)
    table.add_column("Variable", style="cyan", no_wrap=True)
    table.add_column("Path", style="green")
    table.add_column("Exists?", style="yellow")

    paths = {
        'PROJECT_ROOT': PROJECT_ROOT,
        'CONFIG_DIR': CONFIG_DIR,
        'DATA_DIR': DATA_DIR,
        'RAW_DATA_DIR': RAW_DATA_DIR,
        'RESULTS_DIR': RESULTS_DIR,
        'FIGURES_DIR': FIGURES_DIR,
        'REPORTS_DIR': REPORTS_DIR,
        'LOGS_DIR': LOGS_DIR,
    }

    for name, path in paths.items():
        exists = "✓" if path.exists() else "✗"
        table.add_row(name, str(path), exists)

    console.print(table)
    console.print("\n[bold green]All paths verified![/bold green]")
