# Copyright (c) 2024 Platguard Contributors
# MIT License

"""Platguard release metadata."""

from __future__ import annotations

__version__ = "0.3.0"
__author__ = "Platguard Contributors"
__codename__ = "Gatekeeper"
