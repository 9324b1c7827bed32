"""musegraph — fused performer/work/collection graph with structural queries."""

__version__ = "0.3.0"
