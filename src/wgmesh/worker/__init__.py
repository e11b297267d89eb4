"""Worker agent: local WireGuard interface management over HTTP."""
