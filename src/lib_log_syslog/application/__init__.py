"""Application layer: ports and use cases for the syslog device."""
