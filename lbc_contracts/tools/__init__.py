# -*- coding: utf-8 -*-
"""Command-line tooling for the LBC swap (``lbc-swap`` console script)."""
