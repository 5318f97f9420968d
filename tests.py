#!/usr/bin/env python3
"""
Basic tests for LAN Discovery address generation and package surface
"""

import unittest

import lan_discovery
from lan_discovery.discovery_components.address_space import (
    FIRST_HOST,
    LAST_HOST,
    candidate_addresses,
    validate_subnet,
)


class TestCandidateAddresses(unittest.TestCase):
    """Test candidate address generation"""

    def test_count_and_order(self):
        """Test 254 addresses from .1 to .254 in order"""
        addresses = candidate_addresses("10.0.0")
        self.assertEqual(len(addresses), 254)
        self.assertEqual(addresses[0], "10.0.0.1")
        self.assertEqual(addresses[-1], "10.0.0.254")
        self.assertEqual(addresses, tuple(f"10.0.0.{host}" for host in range(1, 255)))

    def test_distinct_and_prefixed(self):
        """Test every address is unique and carries the prefix"""
        addresses = candidate_addresses("192.168.7")
        self.assertEqual(len(set(addresses)), 254)
        for address in addresses:
            self.assertTrue(address.startswith("192.168.7."))
            host = int(address.rsplit('.', 1)[1])
            self.assertTrue(FIRST_HOST <= host <= LAST_HOST)

    def test_network_and_broadcast_excluded(self):
        """Test .0 and .255 are never candidates"""
        addresses = candidate_addresses("172.16.1")
        self.assertNotIn("172.16.1.0", addresses)
        self.assertNotIn("172.16.1.255", addresses)

    def test_deterministic(self):
        """Test repeated calls give identical results"""
        self.assertEqual(candidate_addresses("10.1.2"), candidate_addresses("10.1.2"))

    def test_invalid_prefix_rejected(self):
        """Test malformed prefixes raise ValueError"""
        for subnet in ["10.0", "10.0.0.0", "10.0.x", "10.256.0", "", "10..0", " 10.0.0", "10.-1.0"]:
            with self.subTest(subnet=subnet):
                with self.assertRaises(ValueError):
                    candidate_addresses(subnet)

    def test_non_string_prefix_rejected(self):
        """Test a non-string prefix raises ValueError"""
        with self.assertRaises(ValueError):
            validate_subnet(10)

    def test_boundary_octets_accepted(self):
        """Test octets 0 and 255 are valid"""
        self.assertEqual(validate_subnet("0.255.0"), "0.255.0")


class TestPackage(unittest.TestCase):
    """Test the public package surface"""

    def test_exports(self):
        """Test the documented names are importable from the package"""
        for name in lan_discovery.__all__:
            self.assertTrue(hasattr(lan_discovery, name), name)

    def test_io_error_is_os_error(self):
        """Test DiscoveryIOError is an OSError"""
        error = lan_discovery.DiscoveryIOError("boom", address="10.0.0.1")
        self.assertIsInstance(error, OSError)
        self.assertEqual(error.address, "10.0.0.1")
        self.assertEqual(str(error), "boom")

    def test_fault_error_is_runtime_error(self):
        """Test ProbeFaultError is a RuntimeError"""
        self.assertTrue(issubclass(lan_discovery.ProbeFaultError, RuntimeError))
        self.assertTrue(issubclass(lan_discovery.ConfigError, ValueError))


if __name__ == "__main__":
    # Run the tests
    unittest.main(verbosity=2)
