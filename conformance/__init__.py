"""bash-guard conformance suite."""
