"""Performance benchmarks for Simplex Lab.

This package contains microbenchmarks for the hot paths of the engine: dense
tableau pivoting in the primal simplex and node throughput of branch-and-bound.
"""
