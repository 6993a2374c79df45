"""Application layer: command and query orchestration."""
