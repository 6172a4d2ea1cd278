"""Bundled reference data: license rules, lifecycle records and vendor signatures."""
