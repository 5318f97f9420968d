#!/usr/bin/env python3
"""
Tests for the per-address reachability probe
"""

import errno
import socket
import subprocess
import unittest
from unittest.mock import MagicMock, patch

from lan_discovery.discovery_components.reachability_probe import (
    ECHO_PORT,
    PING_GRACE_SECONDS,
    ProbeStatus,
    ReachabilityProbe,
    build_ping_command,
    interpret_ping_result,
)


class TestIcmpProbe(unittest.TestCase):
    """Test the ping-based probe"""

    def setUp(self):
        """Set up test fixtures"""
        self.probe = ReachabilityProbe("10.0.0.5", timeout=2)
        system_patcher = patch('platform.system', return_value="Linux")
        system_patcher.start()
        self.addCleanup(system_patcher.stop)

    @patch('subprocess.run')
    @patch('socket.gethostbyname', return_value="10.0.0.5")
    def test_reachable(self, mock_resolve, mock_run):
        """Test exit status 0 means reachable"""
        mock_run.return_value = subprocess.CompletedProcess(args=[], returncode=0, stdout="", stderr="")

        outcome = self.probe()

        self.assertEqual(outcome.status, ProbeStatus.REACHABLE)
        self.assertTrue(outcome.is_reachable)
        self.assertEqual(outcome.address, "10.0.0.5")
        self.assertEqual(outcome.resolved, "10.0.0.5")
        self.assertIsNone(outcome.error)
        self.assertGreaterEqual(outcome.elapsed, 0.0)
        mock_resolve.assert_called_once_with("10.0.0.5")

    @patch('subprocess.run')
    @patch('socket.gethostbyname', return_value="10.0.0.5")
    def test_unreachable(self, mock_resolve, mock_run):
        """Test exit status 1 (no reply) means unreachable"""
        mock_run.return_value = subprocess.CompletedProcess(args=[], returncode=1, stdout="", stderr="")

        outcome = self.probe()

        self.assertEqual(outcome.status, ProbeStatus.UNREACHABLE)
        self.assertFalse(outcome.is_reachable)
        self.assertIsNone(outcome.error)

    @patch('subprocess.run')
    @patch('socket.gethostbyname', return_value="10.0.0.5")
    def test_timeout_is_unreachable(self, mock_resolve, mock_run):
        """Test a ping that outlives its deadline counts as unreachable, not failed"""
        mock_run.side_effect = subprocess.TimeoutExpired(cmd="ping", timeout=3)

        outcome = self.probe()

        self.assertEqual(outcome.status, ProbeStatus.UNREACHABLE)

    @patch('subprocess.run')
    @patch('socket.gethostbyname', return_value="10.0.0.5")
    def test_subprocess_deadline(self, mock_resolve, mock_run):
        """Test the ping process is bounded by timeout plus grace"""
        mock_run.return_value = subprocess.CompletedProcess(args=[], returncode=1, stdout="", stderr="")

        self.probe()

        _, kwargs = mock_run.call_args
        self.assertEqual(kwargs['timeout'], 2 + PING_GRACE_SECONDS)

    @patch('subprocess.run')
    @patch('socket.gethostbyname', return_value="10.0.0.5")
    def test_missing_ping_binary_fails(self, mock_resolve, mock_run):
        """Test an OSError launching ping is a FAILED outcome"""
        mock_run.side_effect = FileNotFoundError(2, "No such file or directory", "ping")

        outcome = self.probe()

        self.assertEqual(outcome.status, ProbeStatus.FAILED)
        self.assertIsInstance(outcome.error, FileNotFoundError)
        self.assertEqual(outcome.resolved, "10.0.0.5")

    @patch('subprocess.run')
    @patch('socket.gethostbyname')
    def test_resolution_failure(self, mock_resolve, mock_run):
        """Test a resolution error is a FAILED outcome and no check is run"""
        mock_resolve.side_effect = socket.gaierror(-2, "Name or service not known")

        outcome = self.probe()

        self.assertEqual(outcome.status, ProbeStatus.FAILED)
        self.assertIsInstance(outcome.error, socket.gaierror)
        self.assertIsNone(outcome.resolved)
        mock_run.assert_not_called()

    @patch('subprocess.run')
    @patch('socket.gethostbyname', return_value="10.0.0.5")
    def test_unexpected_error_propagates(self, mock_resolve, mock_run):
        """Test a non-I/O error escapes the probe"""
        mock_run.side_effect = ValueError("bad argument")

        with self.assertRaises(ValueError):
            self.probe()

    @patch('subprocess.run')
    @patch('socket.gethostbyname', return_value="10.0.0.5")
    def test_ping_error_status_fails(self, mock_resolve, mock_run):
        """Test exit status 2 (ping could not send) is a FAILED outcome, not unreachable"""
        mock_run.return_value = subprocess.CompletedProcess(
            args=[], returncode=2, stdout="", stderr="ping: socket: Operation not permitted\n")

        outcome = self.probe()

        self.assertEqual(outcome.status, ProbeStatus.FAILED)
        self.assertIsInstance(outcome.error, OSError)
        self.assertEqual(outcome.error.errno, errno.EIO)
        self.assertIn("Operation not permitted", str(outcome.error))


class TestTcpProbe(unittest.TestCase):
    """Test the echo-port connection probe"""

    def setUp(self):
        """Set up test fixtures"""
        self.probe = ReachabilityProbe("10.0.0.9", timeout=1.5, method="tcp")

    @patch('socket.create_connection')
    @patch('socket.gethostbyname', return_value="10.0.0.9")
    def test_connected(self, mock_resolve, mock_connect):
        """Test an accepted connection means reachable"""
        mock_connect.return_value = MagicMock()

        outcome = self.probe()

        self.assertEqual(outcome.status, ProbeStatus.REACHABLE)
        mock_connect.assert_called_once_with(("10.0.0.9", ECHO_PORT), timeout=1.5)

    @patch('socket.create_connection')
    @patch('socket.gethostbyname', return_value="10.0.0.9")
    def test_refused_means_reachable(self, mock_resolve, mock_connect):
        """Test a refused connection still proves the host answered"""
        mock_connect.side_effect = ConnectionRefusedError(111, "Connection refused")

        outcome = self.probe()

        self.assertEqual(outcome.status, ProbeStatus.REACHABLE)

    @patch('socket.create_connection')
    @patch('socket.gethostbyname', return_value="10.0.0.9")
    def test_timeout_means_unreachable(self, mock_resolve, mock_connect):
        """Test a connect timeout means unreachable"""
        mock_connect.side_effect = socket.timeout("timed out")

        outcome = self.probe()

        self.assertEqual(outcome.status, ProbeStatus.UNREACHABLE)

    @patch('socket.create_connection')
    @patch('socket.gethostbyname', return_value="10.0.0.9")
    def test_no_route_means_unreachable(self, mock_resolve, mock_connect):
        """Test other socket errors mean unreachable"""
        mock_connect.side_effect = OSError(113, "No route to host")

        outcome = self.probe()

        self.assertEqual(outcome.status, ProbeStatus.UNREACHABLE)


class TestProbeConstruction(unittest.TestCase):
    """Test probe arguments and ping command building"""

    def test_unknown_method(self):
        """Test an unknown method is rejected"""
        with self.assertRaises(ValueError):
            ReachabilityProbe("10.0.0.1", method="arp")

    def test_empty_address(self):
        """Test an empty address is rejected"""
        with self.assertRaises(ValueError):
            ReachabilityProbe("")

    def test_default_timeout(self):
        """Test the default timeout is ten seconds"""
        self.assertEqual(ReachabilityProbe("10.0.0.1").timeout, 10.0)

    def test_linux_command(self):
        """Test Linux takes the deadline in seconds"""
        self.assertEqual(build_ping_command("10.0.0.1", 10, system="Linux"),
                         ["ping", "-c", "1", "-W", "10", "10.0.0.1"])

    def test_linux_command_minimum_one_second(self):
        """Test sub-second timeouts round up to one second on Linux"""
        self.assertEqual(build_ping_command("10.0.0.1", 0.2, system="Linux")[4], "1")

    def test_darwin_command(self):
        """Test macOS takes the deadline in milliseconds"""
        self.assertEqual(build_ping_command("10.0.0.1", 2.5, system="Darwin"),
                         ["ping", "-c", "1", "-W", "2500", "10.0.0.1"])

    def test_windows_command(self):
        """Test Windows uses -n and -w in milliseconds"""
        self.assertEqual(build_ping_command("10.0.0.1", 10, system="Windows"),
                         ["ping", "-n", "1", "-w", "10000", "10.0.0.1"])


class TestInterpretPingResult(unittest.TestCase):
    """Test exit status and output handling per platform"""

    def test_linux_statuses(self):
        """Test iputils: 0 reply, 1 no reply, 2 error"""
        self.assertTrue(interpret_ping_result(0, "", "", system="Linux"))
        self.assertFalse(interpret_ping_result(1, "", "", system="Linux"))
        with self.assertRaises(OSError):
            interpret_ping_result(2, "", "connect: Network is unreachable", system="Linux")

    def test_darwin_statuses(self):
        """Test BSD ping: 2 means no reply, 64 and up are errors"""
        self.assertFalse(interpret_ping_result(2, "", "", system="Darwin"))
        with self.assertRaises(OSError):
            interpret_ping_result(68, "", "ping: cannot resolve", system="Darwin")

    def test_error_message_falls_back_to_status(self):
        """Test an error without output still names the exit status"""
        with self.assertRaises(OSError) as ctx:
            interpret_ping_result(2, "", "", system="Linux")
        self.assertIn("status 2", str(ctx.exception))

    def test_windows_requires_ttl(self):
        """Test a gateway "Destination host unreachable" reply is not a live host"""
        gateway_reply = "Reply from 10.0.0.254: Destination host unreachable.\n"
        host_reply = "Reply from 10.0.0.5: bytes=32 time<1ms TTL=64\n"
        self.assertFalse(interpret_ping_result(0, gateway_reply, "", system="Windows"))
        self.assertTrue(interpret_ping_result(0, host_reply, "", system="Windows"))
        self.assertFalse(interpret_ping_result(1, "Request timed out.\n", "", system="Windows"))


if __name__ == "__main__":
    unittest.main(verbosity=2)
