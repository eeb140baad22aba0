"""Informational notices attached to adapters on platforms with known issues."""

import sys
from typing import Dict, Optional, Tuple

OSX_FIX_URL = "www.nordicsemi.com/nRFConnectOSXfix"

DEFAULT_ADVISORIES = {
    ('darwin', 'MBED'): "This adapter with mbed CMSIS firmware is currently not supported on OS X. "
                        "Please visit %s for further instructions." % OSX_FIX_URL,
    ('darwin', 'SEGGER'): "Note: Adapters with Segger JLink debug probe requires MSD to be disabled "
                          "to function properly on OSX. Please visit %s for further instructions." % OSX_FIX_URL
}


class PlatformAdvisories:
    """Look up the advisory, if any, for an adapter's manufacturer on this platform.

    Args:
        table: Maps (platform, manufacturer) to a message.  Platform names
            are ``sys.platform`` values.
        platform: The platform to look up, defaults to ``sys.platform``.
    """

    def __init__(self, table: Optional[Dict[Tuple[str, str], str]] = None, platform: Optional[str] = None):
        if table is None:
            table = DEFAULT_ADVISORIES

        if platform is None:
            platform = sys.platform

        self._table = dict(table)
        self.platform = platform

    def lookup(self, manufacturer: Optional[str]) -> Optional[str]:
        if manufacturer is None:
            return None

        return self._table.get((self.platform, manufacturer))
