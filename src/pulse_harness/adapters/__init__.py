"""Adapters – concrete transports behind the kernel ports.

Each adapter imports its client library lazily so the core package works
without the optional extras installed.
"""
