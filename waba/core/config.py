"""
waba/core/config.py
===================
Global configuration for WABA-Core.
All tunables in one place — validated at startup.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class SupportConfig:
    max_passes: Optional[int] = None   # None → rules + atoms + pass_slack
    pass_slack: int = 1
    cache_size: int = 512              # support maps kept per search branch (LRU)


@dataclass
class AlgebraConfig:
    lukasiewicz_scale: float = 100.0   # K in max(0, a + b − K)


@dataclass
class SearchConfig:
    workers:      int            = 1       # >1 → thread pool over outer branches
    split_depth:  Optional[int]  = None    # assumptions fixed per branch; None → derived from workers
    projection:   bool           = False   # keep one extension per `in` set
    deadline_s:   Optional[float] = None   # wall-clock budget for one solve
    max_nodes:    Optional[int]  = None    # backtracking node budget
    progress_every: int          = 50_000  # log a progress line every N nodes


@dataclass
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 8000
    max_assumptions: int = 18              # reject larger frameworks over HTTP
    default_deadline_s: float = 60.0
    cors_origins: List[str] = field(default_factory=lambda: ["*"])


@dataclass
class WabaConfig:
    profile: str          = "default"
    support: SupportConfig = field(default_factory=SupportConfig)
    algebra: AlgebraConfig = field(default_factory=AlgebraConfig)
    search:  SearchConfig  = field(default_factory=SearchConfig)
    server:  ServerConfig  = field(default_factory=ServerConfig)

    def __post_init__(self):
        if self.search.workers < 1:
            raise ValueError("search.workers must be >= 1")
        if self.algebra.lukasiewicz_scale <= 0:
            raise ValueError("algebra.lukasiewicz_scale must be positive")
        if self.support.pass_slack < 0:
            raise ValueError("support.pass_slack must be >= 0")
        if self.support.cache_size < 1:
            raise ValueError("support.cache_size must be >= 1")

    @classmethod
    def for_profile(cls, profile: str) -> "WabaConfig":
        """Pre-tuned configs per usage profile."""
        cfg = cls(profile=profile)
        if profile == "interactive":
            cfg.search.deadline_s = 60.0        # playground default timeout
            cfg.search.projection = True
        elif profile == "parallel":
            cfg.search.workers = 4
        elif profile == "exhaustive":
            cfg.support.pass_slack = 8
        return cfg


# Singleton default config
DEFAULT_CONFIG = WabaConfig()
