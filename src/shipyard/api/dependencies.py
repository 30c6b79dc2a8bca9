"""FastAPI dependencies for dependency injection."""

from __future__ import annotations

from collections.abc import Generator  # noqa: TC003
from typing import Annotated

from fastapi import Depends

from shipyard.engine import ShipyardEngine

# Global engine instance (initialized on app startup)
_engine: ShipyardEngine | None = None


def init_engine(engine: ShipyardEngine) -> ShipyardEngine:
    """Install the global ShipyardEngine instance."""
    global _engine  # noqa: PLW0603
    _engine = engine
    return _engine


async def close_engine() -> None:
    """Close and forget the global ShipyardEngine instance."""
    global _engine  # noqa: PLW0603
    if _engine is not None:
        await _engine.close()
        _engine = None


def get_engine() -> Generator[ShipyardEngine, None, None]:
    """Dependency that provides the ShipyardEngine instance."""
    if _engine is None:
        raise RuntimeError("ShipyardEngine not initialized. Call init_engine() first.")
    yield _engine


# Type alias for dependency injection
EngineDep = Annotated[ShipyardEngine, Depends(get_engine)]
