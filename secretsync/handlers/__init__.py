from secretsync.handlers import namespaces, probes, secrets

__all__ = ["namespaces", "probes", "secrets"]
