"""
CLI configuration.

Module-level settings read by the API client. The root command callback
overrides them from command line options or environment variables.
"""

MASTER_ADDRESS: str = "127.0.0.1"
MASTER_PORT: int = 8080
OUTPUT_FORMAT: str = "table"
REQUEST_TIMEOUT: float = 10.0
