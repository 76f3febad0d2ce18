"""Shared utilities: external tool discovery."""
