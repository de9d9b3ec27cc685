#!/usr/bin/env python3
"""
Happiness Dashboard - Main CLI Entry Point
==========================================

Single command-line entry point for the dashboard.

Modes:
    (default)       Launch the Streamlit dashboard (dashboard.py) as a managed
                    subprocess.  The data directory is handed to the app via
                    the HAPPINESS_DATA_DIR environment variable.
    --summary       Load the CSVs, apply a year range and print the median
                    summary, per-series row counts, the ridgeline peaks and
                    the Ukraine rows of the range without starting the GUI.
    --health-check  Verify Python version, required packages and data files.

Usage:
    python run.py                                Launch the dashboard
    python run.py --port 8502 --no-browser       Custom port, no browser
    python run.py --summary --min-year 2019      Text summary of 2019-2024
    python run.py --data-dir ./data --health-check
"""

import os
import sys
import logging
import subprocess
import argparse
import webbrowser
from pathlib import Path
import time
import atexit
import socket
import math

# Ensure the package is importable when run from a checkout.
sys.path.insert(0, str(Path(__file__).parent))


def validate_data_dir(path: str, must_exist: bool = True) -> Path:
    """
    Resolve a user-supplied data directory.

    Args:
        path: Raw directory path from the --data-dir flag.
        must_exist: When True, raise ValueError if the directory is missing.

    Returns:
        The fully-resolved directory.

    Raises:
        ValueError: If the path is missing (when required) or is a file.
    """
    resolved = Path(path).expanduser().resolve()
    if must_exist and not resolved.exists():
        raise ValueError(f"Data directory not found: {path}")
    if resolved.exists() and not resolved.is_dir():
        raise ValueError(f"Not a directory: {path}")
    return resolved


def setup_logging(verbose: bool = False):
    """
    Configure the root logger with file and console handlers.

    Every run produces a dedicated log file under logs/ with a timestamp in
    the filename.  The file handler captures DEBUG messages; the console
    handler shows only warnings (or info in verbose mode).

    Returns:
        Path: Absolute path to the newly created log file.
    """
    log_dir = Path(__file__).parent / "logs"
    log_dir.mkdir(exist_ok=True)

    timestamp = time.strftime('%Y%m%d_%H%M%S')
    log_file = log_dir / f"happiness_dashboard_{timestamp}.log"

    file_formatter = logging.Formatter(
        '%(asctime)s | %(name)s | %(levelname)s | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    console_formatter = logging.Formatter(
        '%(asctime)s | %(levelname)s | %(message)s',
        datefmt='%H:%M:%S'
    )

    file_handler = logging.FileHandler(log_file)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(file_formatter)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO if verbose else logging.WARNING)
    console_handler.setFormatter(console_formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # setup_logging runs twice with --verbose; drop the first handlers.
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    if verbose:
        print(f"\U0001f4dd Verbose logging enabled. Log file: {log_file}")

    return log_file


_default_log_file = setup_logging(verbose=False)

logger = logging.getLogger(__name__)


# ==========================================
# HEALTH CHECK UTILITIES
# ==========================================

def check_required_packages():
    """
    Verify that the runtime packages are importable.

    Returns:
        Tuple of (all_installed: bool, missing_packages: list[str]) with pip
        install names.
    """
    required = {
        'pandas': 'pandas',
        'numpy': 'numpy',
        'plotly': 'plotly',
        'streamlit': 'streamlit',
    }

    missing = []
    for import_name, package_name in required.items():
        try:
            __import__(import_name)
        except ImportError:
            missing.append(package_name)

    return len(missing) == 0, missing


def check_data_files(data_dir=None):
    """
    Check which input CSVs exist.

    Returns:
        Tuple of (all_present: bool, missing_files: list[str]).
    """
    from happiness_dashboard.core.data_loader import SERIES_FILES, AVERAGE_FILES, get_data_dir

    base = get_data_dir(data_dir)
    names = list(SERIES_FILES.values()) + list(AVERAGE_FILES.values())
    missing = [name for name in names if not (base / name).is_file()]
    return len(missing) == 0, missing


def health_check(data_dir=None):
    """
    Run a diagnostic check and print a human-readable report.

    Returns:
        bool: True if the Python version, packages and data files are all OK.
    """
    print()
    print("=" * 60)
    print("  \U0001f3e5 HAPPINESS DASHBOARD - HEALTH CHECK")
    print("=" * 60)
    print()

    python_version = sys.version_info
    python_ok = python_version >= (3, 9)
    status = "✅" if python_ok else "❌"
    print(f"{status} Python Version: {python_version.major}.{python_version.minor}.{python_version.micro}")
    if not python_ok:
        print(f"   Required: Python 3.9+")

    packages_ok, missing = check_required_packages()
    status = "✅" if packages_ok else "❌"
    print(f"{status} Required Packages: {'All installed' if packages_ok else f'{len(missing)} missing'}")
    if missing:
        print(f"   Missing: {', '.join(missing)}")
        print(f"   Install with: pip install {' '.join(missing)}")

    files_ok, missing_files = check_data_files(data_dir)
    status = "✅" if files_ok else "❌"
    print(f"{status} Data Files: {'All present' if files_ok else f'{len(missing_files)} missing'}")
    for name in missing_files:
        print(f"   Missing: {name}")

    print()
    print("=" * 60)
    all_ok = python_ok and packages_ok and files_ok
    if all_ok:
        print("  ✅ All checks passed!")
    else:
        print("  ❌ Some checks failed. Please fix the issues above.")
    print("=" * 60)
    print()

    return all_ok


# ==========================================
# SUMMARY MODE
# ==========================================

def print_summary(data_dir=None, min_year=None, max_year=None):
    """
    Print the digest of one year range without starting the GUI.

    The requested bounds go through the same broadcaster as the slider, so
    out-of-range years are clamped and a malformed request keeps the default
    span.

    Returns:
        bool: False when no data could be loaded.
    """
    from happiness_dashboard.core.config import HAPPINESS, SERIES_ORDER
    from happiness_dashboard.core.data_loader import load_dataset
    from happiness_dashboard.analysis.summary import describe_range, format_score
    from happiness_dashboard.selection import SelectionBroadcaster

    dataset = load_dataset(data_dir)
    for filename, message in dataset.errors.items():
        print(f"⚠️  {filename}: {message}")
    if dataset.is_empty:
        print("❌ No happiness data found.")
        return False

    broadcaster = SelectionBroadcaster()
    current = broadcaster.get_current_range()
    broadcaster.set_range((current.min if min_year is None else min_year,
                           current.max if max_year is None else max_year))
    digest = describe_range(dataset, broadcaster.get_current_range())

    print()
    print("=" * 60)
    print(f"  \U0001f4ca HAPPINESS SUMMARY  {digest['range'].label()}")
    print("=" * 60)
    for series in SERIES_ORDER:
        print(f"  {series:<8} rows: {digest['rows'][series]:>3}   "
              f"mean happiness: {format_score(digest['mean_happiness'][series])}")
    print("-" * 60)
    print("  Median happiness")
    for item in digest['medians']:
        print(f"  {item['title']:<14} {format_score(item['value'])}")
    print("-" * 60)
    print("  Ridgeline peaks (Ukraine, normalized)")
    for label, peak in digest['peaks'].items():
        text = "no data" if peak is None else f"x={peak[0]:.2f}  density={peak[1]:.3f}"
        print(f"  {label:<16} {text}")
    print("-" * 60)
    print("  Ukraine by year")
    if not digest['ukraine']:
        print("  no data")
    for obs in digest['ukraine']:
        rank = "N/A" if math.isnan(obs.ranking) else f"{obs.ranking:.0f}"
        population = "N/A" if math.isnan(obs.population) else f"{obs.population:,.0f}"
        print(f"  {obs.year}  rank {rank:>4}   happiness {format_score(obs.value(HAPPINESS))}"
              f"   population {population}")
    print("=" * 60)
    print()
    return True


def parse_args(argv=None):
    """
    Parse and return command-line arguments.

    Returns:
        argparse.Namespace with the parsed flags.
    """
    parser = argparse.ArgumentParser(
        description='Happiness Dashboard - Ukraine vs the World',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run.py                          Launch the dashboard
  python run.py --port 8502              Use custom port for dashboard
  python run.py --summary --min-year 2019 --max-year 2022
  python run.py --health-check           Check packages and data files
        """
    )

    parser.add_argument(
        '--data-dir', '-d',
        type=str,
        help='Directory holding the CSV files (default: ./data or $HAPPINESS_DATA_DIR)'
    )

    parser.add_argument(
        '--summary',
        action='store_true',
        help='Print a text summary for the selected years and exit'
    )

    parser.add_argument(
        '--min-year',
        type=int,
        help='First year of the summary range'
    )

    parser.add_argument(
        '--max-year',
        type=int,
        help='Last year of the summary range'
    )

    parser.add_argument(
        '--port',
        type=int,
        default=8501,
        help='Port for Streamlit dashboard (default: 8501)'
    )

    parser.add_argument(
        '--no-browser',
        action='store_true',
        help='Do not automatically open browser'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Show detailed logging output'
    )

    parser.add_argument(
        '--health-check',
        action='store_true',
        help='Run system health check and exit'
    )

    return parser.parse_args(argv)


def port_in_use(port: int) -> bool:
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        return sock.connect_ex(('localhost', port)) == 0
    finally:
        sock.close()


def build_streamlit_command(port: int):
    dashboard_path = Path(__file__).parent / "dashboard.py"
    return [
        sys.executable, "-m", "streamlit", "run",
        str(dashboard_path),
        "--server.port", str(port),
        "--server.headless", "true",
        "--browser.gatherUsageStats", "false",
        "--theme.base", "dark",
        "--theme.primaryColor", "#FFD700",
        "--theme.backgroundColor", "#0a1929",
        "--theme.secondaryBackgroundColor", "#001e3c",
        "--theme.textColor", "#E0E0E0"
    ]


def launch_dashboard(port: int = 8501, open_browser: bool = True, data_dir=None):
    """
    Launch the Streamlit dashboard as a managed subprocess.

    An atexit handler terminates the subprocess on exit so no orphaned
    server keeps the port.

    Returns:
        bool: True if the dashboard ran and exited cleanly (including Ctrl+C),
              False on errors (missing entry point, busy port, launch failure).
    """
    print()
    print("=" * 60)
    print("  \U0001f310 Launching Happiness Dashboard")
    print("=" * 60)
    print()

    dashboard_path = Path(__file__).parent / "dashboard.py"
    if not dashboard_path.exists():
        print(f"❌ Error: Dashboard not found at {dashboard_path}")
        return False

    try:
        if port_in_use(port):
            print(f"⚠️  Port {port} is already in use")
            print("   Please use a different port with --port flag")
            return False
    except OSError as e:
        logger.warning(f"Could not check port status: {e}")

    print(f"  \U0001f4ca Starting Streamlit server on port {port}...")
    print(f"  \U0001f517 URL: http://localhost:{port}")
    print()
    print("  Press Ctrl+C to stop the dashboard")
    print("-" * 60)
    sys.stdout.flush()

    env = dict(os.environ)
    if data_dir:
        env['HAPPINESS_DATA_DIR'] = str(data_dir)

    streamlit_process = None

    def cleanup():
        """Terminate the Streamlit subprocess: SIGTERM, then SIGKILL after 5 s."""
        nonlocal streamlit_process
        if streamlit_process and streamlit_process.poll() is None:
            print("\n\U0001f9f9 Cleaning up dashboard process...")
            streamlit_process.terminate()
            try:
                streamlit_process.wait(timeout=5)
            except subprocess.TimeoutExpired:
                print("   Force killing process...")
                streamlit_process.kill()

    atexit.register(cleanup)

    try:
        if open_browser:
            def open_browser_delayed():
                time.sleep(3)
                try:
                    webbrowser.open(f"http://localhost:{port}")
                except webbrowser.Error as e:
                    logger.warning(f"Failed to open browser: {e}")

            import threading
            browser_thread = threading.Thread(target=open_browser_delayed, daemon=True)
            browser_thread.start()

        streamlit_process = subprocess.Popen(
            build_streamlit_command(port),
            env=env,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True
        )
        streamlit_process.wait()
        return True

    except KeyboardInterrupt:
        print("\n\n✅ Dashboard stopped by user.")
        cleanup()
        return True
    except FileNotFoundError:
        print("\n❌ Streamlit not found. Install with: pip install streamlit plotly")
        return False
    except OSError as e:
        print(f"\n❌ Error launching dashboard: {e}")
        logger.error("Dashboard launch failed", exc_info=True)
        cleanup()
        return False


def main(argv=None):
    """
    Parse CLI args and dispatch to the requested mode.

    Returns:
        int: Process exit code.
    """
    args = parse_args(argv)

    if args.verbose:
        setup_logging(verbose=True)

    data_dir = None
    if args.data_dir:
        try:
            data_dir = validate_data_dir(args.data_dir)
        except ValueError as e:
            print(f"❌ {e}")
            return 2

    if args.health_check:
        return 0 if health_check(data_dir) else 1

    if args.summary:
        return 0 if print_summary(data_dir, args.min_year, args.max_year) else 1

    try:
        return 0 if launch_dashboard(port=args.port, open_browser=not args.no_browser,
                                     data_dir=data_dir) else 1
    except KeyboardInterrupt:
        print("\n\n\U0001f44b Cancelled by user.")
        return 0


if __name__ == "__main__":
    sys.exit(main())
