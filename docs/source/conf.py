import os
import sys

sys.path.insert(0, os.path.abspath("../.."))

project = "Pinboard Bookings"
copyright = "2026, Pinboard Bookings contributors"
author = "Pinboard Bookings contributors"
release = "1.0.0"

extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.napoleon",
    "sphinx.ext.viewcode",
]
autodoc_member_order = "bysource"

templates_path = ["_templates"]
exclude_patterns: list[str] = []

html_theme = "sphinx_rtd_theme"
html_static_path = ["_static"]
