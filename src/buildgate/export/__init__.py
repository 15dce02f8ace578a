# src/buildgate/export/__init__.py
"""Exportação da política para o formato de configuração nativo da toolchain."""

from .cargo_config import render_cargo_config

__all__ = ["render_cargo_config"]
