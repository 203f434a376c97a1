"""Resource failover demo server."""
