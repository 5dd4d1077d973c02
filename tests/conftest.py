"""
Pytest configuration for D30 printer tests.

Provides fixtures and command-line options for hardware tests.
"""

import pytest


def pytest_addoption(parser):
    """Add command-line options for hardware tests."""
    parser.addoption(
        "--address",
        action="store",
        default=None,
        help="Bluetooth address of the printer for hardware tests",
    )


@pytest.fixture
def printer_address(request):
    """Get the printer address from command line."""
    address = request.config.getoption("--address")
    if address is None:
        pytest.skip("No printer address provided (use --address=XX:XX:XX:XX:XX:XX)")
    return address
