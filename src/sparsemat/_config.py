"""
sparsemat Config - Global Configuration System

Provides default numeric types, solver defaults and parallel dispatch
settings. Values can be changed globally or overridden locally (per thread)
with a context manager, without modifying function signatures.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Callable, Dict, Any, List
from enum import IntEnum
import threading


# =============================================================================
# Strategy Enumerations
# =============================================================================

class ParallelStrategy(IntEnum):
    """
    Strategy for block-parallel execution.
    """
    AUTO = 0           # Thread pool sized by num_workers (0 = one per block)
    SEQUENTIAL = 1     # Process blocks one after another
    PARALLEL = 2       # Force a thread pool even for a single block


# =============================================================================
# Configuration Classes
# =============================================================================

@dataclass
class TypeConfig:
    """Default index and value types for new matrices and vectors."""
    index_type: str = "uint32"
    value_type: str = "float64"


@dataclass
class SolverConfig:
    """Defaults for iterative solvers."""
    tol: float = 1e-12
    max_iter: int = 10_000


@dataclass
class ParallelConfig:
    """Configuration for block-parallel execution."""
    strategy: ParallelStrategy = ParallelStrategy.AUTO
    num_workers: int = 0           # 0 = one worker per block


# =============================================================================
# Global Configuration Manager
# =============================================================================

class SparseConfig:
    """
    Global configuration manager for sparsemat.

    Provides thread-local configuration with context manager support.
    Configuration can be set globally or locally within a context.

    Example:
        # Global configuration
        sparsemat.config.solver = SolverConfig(tol=1e-8)

        # Local configuration (context manager)
        with sparsemat.config.local(types=TypeConfig(value_type="float32")):
            mat = IndexListMatrix()   # float32 values here
        # Back to global config
    """

    _SECTIONS = ("types", "solver", "parallel")

    def __init__(self):
        self._global_types = TypeConfig()
        self._global_solver = SolverConfig()
        self._global_parallel = ParallelConfig()

        # Thread-local storage for context overrides
        self._local = threading.local()

        # Callbacks for config changes
        self._callbacks: Dict[str, List[Callable]] = {
            name: [] for name in self._SECTIONS
        }

    # -------------------------------------------------------------------------
    # Property Accessors (with thread-local override support)
    # -------------------------------------------------------------------------

    @property
    def types(self) -> TypeConfig:
        """Get type configuration."""
        local = getattr(self._local, "types", None)
        return local if local is not None else self._global_types

    @types.setter
    def types(self, value: TypeConfig):
        """Set global type configuration."""
        self._global_types = value
        self._notify("types", value)

    @property
    def solver(self) -> SolverConfig:
        """Get solver configuration."""
        local = getattr(self._local, "solver", None)
        return local if local is not None else self._global_solver

    @solver.setter
    def solver(self, value: SolverConfig):
        """Set global solver configuration."""
        self._global_solver = value
        self._notify("solver", value)

    @property
    def parallel(self) -> ParallelConfig:
        """Get parallel configuration."""
        local = getattr(self._local, "parallel", None)
        return local if local is not None else self._global_parallel

    @parallel.setter
    def parallel(self, value: ParallelConfig):
        """Set global parallel configuration."""
        self._global_parallel = value
        self._notify("parallel", value)

    # -------------------------------------------------------------------------
    # Convenience Properties
    # -------------------------------------------------------------------------

    @property
    def index_type(self) -> str:
        """Default index type name."""
        return self.types.index_type

    @property
    def value_type(self) -> str:
        """Default value type name."""
        return self.types.value_type

    @property
    def num_workers(self) -> int:
        """Number of workers for block-parallel execution."""
        return self.parallel.num_workers

    @num_workers.setter
    def num_workers(self, value: int):
        self._global_parallel.num_workers = value

    # -------------------------------------------------------------------------
    # Context Manager Support
    # -------------------------------------------------------------------------

    def local(self, **kwargs) -> "_LocalConfigContext":
        """
        Create a local configuration context.

        Args:
            **kwargs: Configuration overrides (types, solver, parallel)

        Returns:
            Context manager
        """
        unknown = set(kwargs) - set(self._SECTIONS)
        if unknown:
            raise ValueError(f"Unknown config sections: {sorted(unknown)}")
        return _LocalConfigContext(self, **kwargs)

    def _set_local(self, **kwargs):
        """Set thread-local configuration."""
        for key, value in kwargs.items():
            if value is not None:
                setattr(self._local, key, value)

    def _get_local(self, keys: List[str]) -> Dict[str, Any]:
        """Current thread-local overrides (None where unset)."""
        return {key: getattr(self._local, key, None) for key in keys}

    def _restore_local(self, saved: Dict[str, Any]):
        """Put back thread-local overrides saved by _get_local."""
        for key, value in saved.items():
            setattr(self._local, key, value)

    # -------------------------------------------------------------------------
    # Callback Registration
    # -------------------------------------------------------------------------

    def on_change(self, config_name: str, callback: Callable):
        """
        Register callback for configuration changes.

        Args:
            config_name: Name of config ("types", "solver", "parallel")
            callback: Function to call when config changes
        """
        if config_name not in self._callbacks:
            raise ValueError(f"Unknown config section: {config_name}")
        self._callbacks[config_name].append(callback)

    def _notify(self, config_name: str, value: Any):
        """Notify callbacks of configuration change."""
        for callback in self._callbacks.get(config_name, []):
            callback(value)

    # -------------------------------------------------------------------------
    # Reset
    # -------------------------------------------------------------------------

    def reset(self):
        """Reset all configurations to defaults."""
        self._global_types = TypeConfig()
        self._global_solver = SolverConfig()
        self._global_parallel = ParallelConfig()

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Export configuration as dictionary."""
        return {
            "types": {
                "index_type": self.types.index_type,
                "value_type": self.types.value_type,
            },
            "solver": {
                "tol": self.solver.tol,
                "max_iter": self.solver.max_iter,
            },
            "parallel": {
                "strategy": self.parallel.strategy.name,
                "num_workers": self.parallel.num_workers,
            },
        }

    def __repr__(self) -> str:
        return f"SparseConfig({self.to_dict()})"


class _LocalConfigContext:
    """Context manager for local configuration override."""

    def __init__(self, config: SparseConfig, **kwargs):
        self._config = config
        self._kwargs = kwargs
        self._keys = list(kwargs.keys())
        self._saved: Dict[str, Any] = {}

    def __enter__(self):
        self._saved = self._config._get_local(self._keys)
        self._config._set_local(**self._kwargs)
        return self._config

    def __exit__(self, exc_type, exc_val, exc_tb):
        self._config._restore_local(self._saved)
        return False


# =============================================================================
# Global Instance
# =============================================================================

config = SparseConfig()


# =============================================================================
# Convenience Functions
# =============================================================================

def get_config() -> SparseConfig:
    """Get the global configuration instance."""
    return config


def set_default_types(index_type: Optional[str] = None, value_type: Optional[str] = None):
    """
    Change the default index/value types for new matrices.

    Args:
        index_type: e.g. 'uint16', 'uint32', 'uint64'
        value_type: e.g. 'float32', 'float64'
    """
    current = config.types
    config.types = TypeConfig(
        index_type=index_type or current.index_type,
        value_type=value_type or current.value_type,
    )


def set_solver(tol: float = 1e-12, max_iter: int = 10_000):
    """
    Configure iterative solver defaults.

    Args:
        tol: Absolute residual tolerance
        max_iter: Iteration cap
    """
    if tol <= 0:
        raise ValueError(f"tol must be positive, got {tol}")
    if max_iter < 0:
        raise ValueError(f"max_iter must be non-negative, got {max_iter}")
    config.solver = SolverConfig(tol=tol, max_iter=max_iter)


def set_parallel(num_workers: int = 0, strategy: ParallelStrategy = ParallelStrategy.AUTO):
    """
    Configure block-parallel execution.

    Args:
        num_workers: Number of workers (0 = one per block)
        strategy: Parallel strategy
    """
    config.parallel = ParallelConfig(
        strategy=strategy,
        num_workers=num_workers,
    )


__all__ = [
    "ParallelStrategy",
    "TypeConfig",
    "SolverConfig",
    "ParallelConfig",
    "SparseConfig",
    "config",
    "get_config",
    "set_default_types",
    "set_solver",
    "set_parallel",
]
