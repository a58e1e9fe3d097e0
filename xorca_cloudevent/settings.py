"""
Environment-driven settings for the logging setup.

Event construction itself reads no environment variables.
"""

import os

SERVICE_NAME = os.getenv("XORCA_SERVICE_NAME", "xorca-cloudevent")
LOG_LEVEL = os.getenv("XORCA_LOG_LEVEL", "INFO")
LOG_JSON = os.getenv("XORCA_LOG_JSON", "true").lower() == "true"
