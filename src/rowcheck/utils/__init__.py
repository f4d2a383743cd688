"""
Utility modules for rowcheck

Provides:
- logging: structured logging setup
- tracing: OpenTelemetry spans around checks and storage queries
- metrics: Prometheus metrics for check outcomes
- vault_client: HashiCorp Vault integration for backend credentials
- sql_safety: identifier validation and quoting
"""

__all__ = ["logging", "tracing", "metrics", "vault_client", "sql_safety"]
