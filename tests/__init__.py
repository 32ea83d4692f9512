"""Test suite for TickerPulse.

This package contains hermetic tests following the pytest framework.
Tests mirror the tickerpulse package layout for discoverability.

Testing Philosophy:
    - Use pytest-mock and httpx.MockTransport for network isolation
    - Use hypothesis for properties of the ticker check and price reading
    - Avoid external dependencies - all I/O should be mocked
"""
