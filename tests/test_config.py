"""
Tests for configuration, timeouts and error formatting
"""

import json
import os
import shutil
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from bgp_status.utils.config import (
    BirdConfig, ConfigManager, GoBGPConfig, get_config_manager, reset_config_manager
)
from bgp_status.utils.error_handling import (
    BackendError, ErrorFormatter, ErrorSeverity, PrivilegeError, handle_errors
)
from bgp_status.utils.timeout_config import TimeoutType, get_timeout, validate_timeouts


class TestConfigManager(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self.config_file = Path(self.tmpdir) / "config.json"

    def tearDown(self):
        shutil.rmtree(self.tmpdir, ignore_errors=True)
        reset_config_manager()

    def write_config(self, data):
        self.config_file.write_text(json.dumps(data))

    @patch.dict(os.environ, {}, clear=True)
    def test_defaults(self):
        with patch.object(ConfigManager, 'DEFAULT_CONFIG_PATHS', []):
            config = ConfigManager().get_config()

        self.assertEqual(config.bird.socket_paths(),
                         ["/var/run/calico/bird.ctl", "/var/run/bird/bird.ctl"])
        self.assertEqual(config.bird.socket_paths("6"),
                         ["/var/run/calico/bird6.ctl", "/var/run/bird/bird6.ctl"])
        self.assertEqual(config.bird.command, "show protocols")
        self.assertEqual(config.gobgp.binary, "gobgp")
        self.assertEqual(config.web.port, 8080)

    @patch.dict(os.environ, {}, clear=True)
    def test_load_from_file(self):
        self.write_config({
            "bird": {"socket_dir": "/run/calico"},
            "gobgp": {"host": "127.0.0.1", "port": 50051},
            "web": {"port": 9099},
        })

        config = ConfigManager(self.config_file).get_config()

        self.assertEqual(config.bird.socket_dir, "/run/calico")
        self.assertEqual(config.bird.fallback_socket_dir, "/var/run/bird")
        self.assertEqual(config.gobgp.host, "127.0.0.1")
        self.assertEqual(config.gobgp.port, 50051)
        self.assertEqual(config.web.port, 9099)

    @patch.dict(os.environ, {}, clear=True)
    def test_unknown_keys_keep_defaults(self):
        self.write_config({"bird": {"no_such_option": True}})

        config = ConfigManager(self.config_file).get_config()

        self.assertEqual(config.bird.socket_dir, "/var/run/calico")

    @patch.dict(os.environ, {"BGP_STATUS_BIRD_SOCKET_DIR": "/env/calico",
                             "BGP_STATUS_WEB_PORT": "9100"}, clear=True)
    def test_environment_overrides_file(self):
        self.write_config({"bird": {"socket_dir": "/run/calico"}})

        config = ConfigManager(self.config_file).get_config()

        self.assertEqual(config.bird.socket_dir, "/env/calico")
        self.assertEqual(config.web.port, 9100)

    @patch.dict(os.environ, {}, clear=True)
    def test_validate_config(self):
        self.write_config({
            "bird": {"socket_dir": "relative/dir", "command": " "},
            "gobgp": {"port": 70000},
            "logging": {"level": "LOUD"},
        })

        issues = ConfigManager(self.config_file).validate_config()

        self.assertEqual(len(issues), 4)
        self.assertTrue(any("relative/dir" in issue for issue in issues))
        self.assertTrue(any("GoBGP port" in issue for issue in issues))

    @patch.dict(os.environ, {}, clear=True)
    def test_global_manager_honours_first_path(self):
        reset_config_manager()
        self.write_config({"web": {"port": 9200}})

        manager = get_config_manager(self.config_file)

        self.assertIs(get_config_manager(), manager)
        self.assertEqual(manager.get_config().web.port, 9200)

    @patch.dict(os.environ, {"BGP_STATUS_GOBGP_PORT": "not-a-port"}, clear=True)
    def test_invalid_env_port_ignored(self):
        self.assertIsNone(GoBGPConfig().port)

    def test_explicit_values(self):
        bird = BirdConfig(socket_dir="/a", fallback_socket_dir="/b")

        self.assertEqual(bird.socket_paths("6"), ["/a/bird6.ctl", "/b/bird6.ctl"])


class TestTimeouts(unittest.TestCase):

    @patch.dict(os.environ, {}, clear=True)
    def test_defaults(self):
        self.assertEqual(get_timeout(TimeoutType.BIRD_READ), 2.0)
        self.assertEqual(get_timeout(TimeoutType.BIRD_CONNECT), 2.0)
        self.assertEqual(get_timeout(TimeoutType.GOBGP_COMMAND), 10.0)

    @patch.dict(os.environ, {"BGP_STATUS_BIRD_READ_TIMEOUT": "5"}, clear=True)
    def test_env_override(self):
        self.assertEqual(get_timeout(TimeoutType.BIRD_READ), 5.0)

    @patch.dict(os.environ, {"BGP_STATUS_BIRD_READ_TIMEOUT": "0.001"}, clear=True)
    def test_clamped_to_minimum(self):
        self.assertEqual(get_timeout(TimeoutType.BIRD_READ), 0.1)

    @patch.dict(os.environ, {"BGP_STATUS_BIRD_READ_TIMEOUT": "soon"}, clear=True)
    def test_invalid_value(self):
        self.assertEqual(get_timeout(TimeoutType.BIRD_READ), 2.0)

        results = validate_timeouts()
        self.assertFalse(results["valid"])
        self.assertEqual(len(results["errors"]), 1)

    @patch.dict(os.environ, {"BGP_STATUS_GOBGP_TIMEOUT": "500"}, clear=True)
    def test_out_of_range_warning(self):
        results = validate_timeouts()

        self.assertTrue(results["valid"])
        self.assertEqual(len(results["warnings"]), 1)
        self.assertEqual(results["timeouts"]["gobgp_command"]["actual_value"], 120.0)


class TestErrorFormatter(unittest.TestCase):

    def test_status_error(self):
        formatted = ErrorFormatter.format_error(BackendError("gobgp exited with code 1", guidance="Check gobgpd"))

        self.assertEqual(formatted, "✗ gobgp exited with code 1\n  Suggestion: Check gobgpd")

    def test_fatal(self):
        formatted = ErrorFormatter.format_error(PrivilegeError())

        self.assertTrue(formatted.startswith("✗ Fatal: Need super user privileges"))

    def test_technical_details(self):
        error = BackendError("bad output", technical_details="line 3")

        self.assertNotIn("line 3", ErrorFormatter.format_error(error))
        self.assertIn("Technical: line 3", ErrorFormatter.format_error(error, hide_technical=False))

    def test_unexpected_error_hidden(self):
        formatted = ErrorFormatter.format_error(RuntimeError("boom"))

        self.assertEqual(formatted.splitlines()[0], "✗ Unexpected error occurred")

    def test_info_message(self):
        self.assertEqual(ErrorFormatter.format_message("done", ErrorSeverity.INFO), "✓ done")


class TestHandleErrors(unittest.TestCase):

    @patch('builtins.print')
    def test_exit_codes(self, _):
        @handle_errors('test')
        def fatal():
            raise PrivilegeError()

        @handle_errors('test')
        def failing():
            raise BackendError("down")

        @handle_errors('test')
        def unexpected():
            raise RuntimeError("boom")

        @handle_errors('test')
        def ok():
            return 0

        self.assertEqual(fatal(), 2)
        self.assertEqual(failing(), 1)
        self.assertEqual(unexpected(), 1)
        self.assertEqual(ok(), 0)


if __name__ == '__main__':
    unittest.main()
