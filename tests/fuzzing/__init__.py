"""Fuzz testing suite for Bread."""

from .fuzz import Fuzzer, FuzzRunner, pick_weighted, run_suite

__all__ = ["Fuzzer", "FuzzRunner", "pick_weighted", "run_suite"]
