"""
Unit tests for run.py

Tests all major functions in the run.py entry point script including:
- Data directory validation
- Health checks
- Argument parsing
- Summary mode
- Dashboard launch
"""

import unittest
from unittest.mock import patch, MagicMock
from pathlib import Path
import io
import sys
import tempfile
import shutil

# Add parent directory to path to import run module
sys.path.insert(0, str(Path(__file__).parent.parent))

import run
from tests.fixtures.sample_data import write_sample_csvs


class TestPathValidation(unittest.TestCase):
    """Test suite for data directory validation."""

    def setUp(self):
        """Set up test fixtures."""
        self.test_dir = Path(tempfile.mkdtemp())
        self.test_file = self.test_dir / "bestranking.csv"
        self.test_file.write_text("YEAR,Country\n")

    def tearDown(self):
        """Clean up test fixtures."""
        if self.test_dir.exists():
            shutil.rmtree(self.test_dir)

    def test_validate_existing_dir(self):
        """Test validation of an existing directory."""
        result = run.validate_data_dir(str(self.test_dir))
        self.assertIsInstance(result, Path)
        self.assertTrue(result.is_absolute())
        self.assertTrue(result.is_dir())

    def test_validate_missing_dir_without_requirement(self):
        """Test validation of a missing directory when existence not required."""
        result = run.validate_data_dir(str(self.test_dir / "later"), must_exist=False)
        self.assertIsInstance(result, Path)

    def test_validate_missing_dir_with_requirement(self):
        """Test validation fails for a missing directory when existence required."""
        with self.assertRaises(ValueError) as context:
            run.validate_data_dir(str(self.test_dir / "missing"))
        self.assertIn("Data directory not found", str(context.exception))

    def test_validate_file_rejected(self):
        """Test a file is not accepted as data directory."""
        with self.assertRaises(ValueError) as context:
            run.validate_data_dir(str(self.test_file))
        self.assertIn("Not a directory", str(context.exception))


class TestHealthCheck(unittest.TestCase):
    """Test suite for health check functionality."""

    @patch('run.check_data_files')
    @patch('run.check_required_packages')
    def test_health_check_all_pass(self, mock_packages, mock_files):
        """Test health check when all checks pass."""
        mock_packages.return_value = (True, [])
        mock_files.return_value = (True, [])

        with patch('sys.stdout', new_callable=io.StringIO):
            result = run.health_check()

        self.assertTrue(result)

    @patch('run.check_data_files')
    @patch('run.check_required_packages')
    def test_health_check_missing_packages(self, mock_packages, mock_files):
        """Test health check when packages are missing."""
        mock_packages.return_value = (False, ['plotly', 'streamlit'])
        mock_files.return_value = (True, [])

        with patch('sys.stdout', new_callable=io.StringIO) as out:
            result = run.health_check()

        self.assertFalse(result)
        self.assertIn("pip install plotly streamlit", out.getvalue())

    @patch('run.check_data_files')
    @patch('run.check_required_packages')
    def test_health_check_missing_data(self, mock_packages, mock_files):
        """Test health check when CSV files are missing."""
        mock_packages.return_value = (True, [])
        mock_files.return_value = (False, ['bestranking.csv'])

        with patch('sys.stdout', new_callable=io.StringIO):
            result = run.health_check()

        self.assertFalse(result)

    def test_check_required_packages_all_installed(self):
        """Test package check returns the expected shape."""
        all_installed, missing = run.check_required_packages()

        self.assertIsInstance(all_installed, bool)
        self.assertIsInstance(missing, list)

    @patch('builtins.__import__')
    def test_check_required_packages_missing(self, mock_import):
        """Test package check when packages are missing."""
        def import_side_effect(name, *args, **kwargs):
            if name in ['plotly', 'streamlit']:
                raise ImportError(f"No module named '{name}'")
            return MagicMock()

        mock_import.side_effect = import_side_effect

        all_installed, missing = run.check_required_packages()

        self.assertFalse(all_installed)
        self.assertEqual(missing, ['plotly', 'streamlit'])


class TestDataFiles(unittest.TestCase):
    """Test suite for the data file check."""

    def setUp(self):
        self.test_dir = Path(tempfile.mkdtemp())

    def tearDown(self):
        if self.test_dir.exists():
            shutil.rmtree(self.test_dir)

    def test_all_files_present(self):
        write_sample_csvs(self.test_dir)
        ok, missing = run.check_data_files(self.test_dir)
        self.assertTrue(ok)
        self.assertEqual(missing, [])

    def test_empty_directory(self):
        ok, missing = run.check_data_files(self.test_dir)
        self.assertFalse(ok)
        self.assertEqual(len(missing), 6)
        self.assertIn('dataset-ukrain.csv', missing)


class TestArgumentParsing(unittest.TestCase):
    """Test suite for command-line argument parsing."""

    def test_parse_args_defaults(self):
        """Test argument parsing with default values."""
        with patch('sys.argv', ['run.py']):
            args = run.parse_args()

            self.assertEqual(args.port, 8501)
            self.assertIsNone(args.data_dir)
            self.assertIsNone(args.min_year)
            self.assertIsNone(args.max_year)
            self.assertFalse(args.summary)
            self.assertFalse(args.no_browser)
            self.assertFalse(args.verbose)
            self.assertFalse(args.health_check)

    def test_parse_args_verbose(self):
        """Test argument parsing with verbose flag."""
        args = run.parse_args(['-v'])
        self.assertTrue(args.verbose)

    def test_parse_args_custom_port(self):
        """Test argument parsing with custom port."""
        args = run.parse_args(['--port', '8502', '--no-browser'])
        self.assertEqual(args.port, 8502)
        self.assertTrue(args.no_browser)

    def test_parse_args_summary_range(self):
        """Test argument parsing of the summary flags."""
        args = run.parse_args(['--summary', '--min-year', '2019', '--max-year', '2022', '-d', 'data'])
        self.assertTrue(args.summary)
        self.assertEqual(args.min_year, 2019)
        self.assertEqual(args.max_year, 2022)
        self.assertEqual(args.data_dir, 'data')


class TestMain(unittest.TestCase):
    """Test suite for the CLI dispatch."""

    def setUp(self):
        self.test_dir = Path(tempfile.mkdtemp())
        write_sample_csvs(self.test_dir)

    def tearDown(self):
        if self.test_dir.exists():
            shutil.rmtree(self.test_dir)

    def test_summary_mode(self):
        """Test --summary prints the digest and exits 0."""
        with patch('sys.stdout', new_callable=io.StringIO) as out:
            code = run.main(['--summary', '-d', str(self.test_dir), '--min-year', '2019'])

        self.assertEqual(code, 0)
        text = out.getvalue()
        self.assertIn("2019-2024", text)
        self.assertIn("Ukraine", text)
        self.assertIn("Ukraine by year", text)
        self.assertIn("2019  rank  133", text)
        self.assertIn("population 44,386,203", text)
        self.assertNotIn("2018  rank", text)

    def test_summary_range_is_clamped(self):
        """Test out-of-bounds years are clamped like the slider."""
        with patch('sys.stdout', new_callable=io.StringIO) as out:
            code = run.main(['--summary', '-d', str(self.test_dir),
                             '--min-year', '2000', '--max-year', '2050'])

        self.assertEqual(code, 0)
        self.assertIn("2015-2024", out.getvalue())

    def test_summary_without_data(self):
        """Test --summary on an empty directory exits 1."""
        empty = Path(tempfile.mkdtemp())
        try:
            with patch('sys.stdout', new_callable=io.StringIO):
                code = run.main(['--summary', '-d', str(empty)])
        finally:
            shutil.rmtree(empty)
        self.assertEqual(code, 1)

    def test_bad_data_dir(self):
        """Test a missing --data-dir exits 2."""
        with patch('sys.stdout', new_callable=io.StringIO):
            code = run.main(['-d', str(self.test_dir / 'missing')])
        self.assertEqual(code, 2)

    @patch('run.check_required_packages')
    def test_health_check_mode(self, mock_packages):
        """Test --health-check exit code follows the checks."""
        mock_packages.return_value = (True, [])
        with patch('sys.stdout', new_callable=io.StringIO):
            code = run.main(['--health-check', '-d', str(self.test_dir)])
        self.assertEqual(code, 0)

    @patch('run.launch_dashboard')
    def test_default_mode_launches(self, mock_launch):
        """Test the default mode launches the dashboard."""
        mock_launch.return_value = True
        code = run.main(['--port', '8600', '--no-browser', '-d', str(self.test_dir)])

        self.assertEqual(code, 0)
        mock_launch.assert_called_once_with(port=8600, open_browser=False,
                                            data_dir=self.test_dir.resolve())


class TestLaunchDashboard(unittest.TestCase):
    """Test suite for the Streamlit subprocess launch."""

    @patch('run.port_in_use', return_value=True)
    def test_busy_port(self, mock_port):
        """Test launch refuses a port already in use."""
        with patch('sys.stdout', new_callable=io.StringIO):
            result = run.launch_dashboard(port=8501, open_browser=False)
        self.assertFalse(result)

    @patch('run.atexit.register')
    @patch('run.subprocess.Popen')
    @patch('run.port_in_use', return_value=False)
    def test_launch_passes_data_dir(self, mock_port, mock_popen, mock_register):
        """Test launch runs streamlit with HAPPINESS_DATA_DIR set."""
        process = MagicMock()
        process.wait.return_value = 0
        mock_popen.return_value = process

        with patch('sys.stdout', new_callable=io.StringIO):
            result = run.launch_dashboard(port=8502, open_browser=False, data_dir='/tmp/data')

        self.assertTrue(result)
        command = mock_popen.call_args[0][0]
        self.assertIn('streamlit', command)
        self.assertIn('8502', command)
        self.assertEqual(mock_popen.call_args[1]['env']['HAPPINESS_DATA_DIR'], '/tmp/data')
        mock_register.assert_called_once()

    def test_build_streamlit_command(self):
        command = run.build_streamlit_command(9000)
        self.assertEqual(command[:4], [sys.executable, '-m', 'streamlit', 'run'])
        self.assertTrue(command[4].endswith('dashboard.py'))
        self.assertEqual(command[command.index('--server.port') + 1], '9000')


class TestLogging(unittest.TestCase):
    """Test suite for logging configuration."""

    def test_setup_logging_returns_log_file(self):
        """Test that logging setup returns the log file under logs/."""
        log_file = run.setup_logging(verbose=False)

        self.assertIsInstance(log_file, Path)
        self.assertEqual(log_file.parent.name, 'logs')
        self.assertTrue(log_file.name.startswith('happiness_dashboard_'))

    def test_setup_logging_verbose_mode(self):
        """Test logging setup in verbose mode."""
        import logging

        with patch('sys.stdout', new_callable=io.StringIO):
            run.setup_logging(verbose=True)

        root_logger = logging.getLogger()
        self.assertEqual(root_logger.level, logging.DEBUG)
        self.assertGreaterEqual(len(root_logger.handlers), 2)


if __name__ == '__main__':
    unittest.main()
