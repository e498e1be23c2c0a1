"""Manifest bodies shipped with the installer."""
