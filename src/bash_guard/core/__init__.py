"""Core types, errors, configuration and host interfaces for bash-guard."""
