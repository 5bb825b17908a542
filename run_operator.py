#!/usr/bin/env python3
"""
Wrapper script to run the secretsync-operator with Kopf.

Launches Kopf's CLI with all standard arguments. The operator watches
namespaces cluster-wide, so ``--all-namespaces`` is added unless a namespace
was given explicitly.

Usage:
    python run_operator.py [any kopf run arguments]

Examples:
    python run_operator.py --verbose
    python run_operator.py --log-format=json --liveness=http://0.0.0.0:8080/healthz
"""

import sys

_NAMESPACE_FLAGS = ("-n", "--namespace", "-A", "--all-namespaces")


if __name__ == '__main__':
    import kopf.cli

    # Import the operator module (which registers handlers via decorators)
    import secretsync.app  # noqa: F401

    args = sys.argv[1:]
    if not any(arg.split("=")[0] in _NAMESPACE_FLAGS for arg in args):
        args.append("--all-namespaces")

    # Behave as if the user called: kopf run <args>
    sys.argv[1:] = ["run", *args]

    sys.exit(kopf.cli.main(prog_name="kopf"))
