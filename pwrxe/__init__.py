"""PowerPC instruction decoding, CPU register state and a TLB-backed memory system."""

__version__ = "0.1.0"
__all__ = ["cli", "cpu", "instruction", "memory"]