"""
                WhatsDish Gateway

Backend gateway for the WhatsDish client app: SMS one-time-code login,
bearer-token passthrough to the WhatsDish API, and read-only menu and
restaurant listings from Supabase.

Version: 1.0.0
License: MIT
"""

__version__ = "1.0.0"
