"""Bundled Jinja2 report templates."""
