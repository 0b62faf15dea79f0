"""Shared infrastructure: configuration, logging, exceptions and text helpers."""
