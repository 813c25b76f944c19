"""Outer service layer (command-line interface) built on the aegis core."""
