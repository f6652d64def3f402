from .service_factory import (
    create_engine,
    create_store,
    run_benchmark,
)

__all__ = [
    "create_engine",
    "create_store",
    "run_benchmark",
]
