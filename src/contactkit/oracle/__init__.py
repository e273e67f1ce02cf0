"""Transport address oracles."""

from contactkit.oracle.base import AddressOracle
from contactkit.oracle.config import HTTPOracleConfig
from contactkit.oracle.http import HTTPAddressOracle
from contactkit.oracle.mock import MockAddressOracle

__all__ = ["AddressOracle", "HTTPAddressOracle", "HTTPOracleConfig", "MockAddressOracle"]
