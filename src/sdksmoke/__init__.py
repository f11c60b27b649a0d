"""Smoke-test harness for Couchbase cluster subsystems."""

__version__ = "0.1.0"
