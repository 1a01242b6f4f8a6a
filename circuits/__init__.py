"""Circuits - The two-chip circuit and its proving pipeline."""

from circuits.two_chips import TwoChipCircuit, TwoChipConfig
from circuits.pipeline import PipelineConfig, generate_keys, prove, verify

__all__ = [
    "TwoChipCircuit",
    "TwoChipConfig",
    "PipelineConfig",
    "generate_keys",
    "prove",
    "verify",
]
