"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

import os
from pathlib import Path

from dealcart.application.clock import Clock, utc_now
from dealcart.infrastructure.persistence.json_cart_repository import (
    JsonCartRepository,
)
from dealcart.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)

DATA_DIR_ENV = "DEALCART_DATA_DIR"
SESSION_ENV = "DEALCART_SESSION"
DEFAULT_SESSION = "default"

# Resolve data directory relative to the project root.
# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"


def data_dir() -> Path:
    override = os.environ.get(DATA_DIR_ENV)
    return Path(override) if override else _DEFAULT_DATA_DIR


def default_session() -> str:
    return os.environ.get(SESSION_ENV) or DEFAULT_SESSION


def product_repository() -> JsonProductRepository:
    root = data_dir()
    return JsonProductRepository(root / "products.json", root / "deals.json", clock())


def cart_repository() -> JsonCartRepository:
    return JsonCartRepository(data_dir() / "carts.json")


def clock() -> Clock:
    return utc_now
