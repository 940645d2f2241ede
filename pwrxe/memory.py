"""Guest memory with a direct-mapped TLB for address translation."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

MEMORY_SIZE = 256 * 1024 * 1024
PAGE_SIZE = 4096
PAGE_MASK = PAGE_SIZE - 1
PAGE_SHIFT = 12

TLB_SIZE = 64
TLB_MASK = TLB_SIZE - 1

_IDENTITY_PAGES = 16


class MemoryAccess(enum.IntFlag):
    """Protection flags carried by a TLB entry."""

    READ = 1 << 0
    WRITE = 1 << 1
    EXEC = 1 << 2


def tlb_index(vaddr: int) -> int:
    """Return the TLB slot that a virtual address maps to."""
    return (vaddr >> PAGE_SHIFT) & TLB_MASK


@dataclass
class TlbEntry:
    """A single translation from a virtual page to a physical page."""

    vaddr: int = 0
    paddr: int = 0
    flags: MemoryAccess = MemoryAccess(0)
    valid: bool = False


@dataclass
class Tlb:
    """A direct-mapped translation lookaside buffer."""

    entries: list[TlbEntry] = field(
        default_factory=lambda: [TlbEntry() for _ in range(TLB_SIZE)]
    )

    def lookup(self, vaddr: int) -> int | None:
        """Return the physical address for ``vaddr``, or None on a miss."""
        entry = self.entries[tlb_index(vaddr)]
        if entry.valid and entry.vaddr == vaddr & ~PAGE_MASK:
            return entry.paddr | (vaddr & PAGE_MASK)
        return None

    def insert(self, vaddr: int, paddr: int, flags: MemoryAccess) -> None:
        """Map the page holding ``vaddr`` to the page holding ``paddr``."""
        self.entries[tlb_index(vaddr)] = TlbEntry(
            vaddr=vaddr & ~PAGE_MASK,
            paddr=paddr & ~PAGE_MASK,
            flags=MemoryAccess(flags),
            valid=True,
        )

    def invalidate(self) -> None:
        """Mark every entry invalid."""
        for entry in self.entries:
            entry.valid = False


class MemorySystem:
    """Zero-filled big-endian RAM reached through instruction and data TLBs.

    Accesses that fall outside RAM read as zero and writes to them are
    dropped.
    """

    def __init__(self, size: int = MEMORY_SIZE) -> None:
        if size < 0:
            raise ValueError(f"memory size must not be negative: {size}")
        self.ram = bytearray(size)
        self.itlb = Tlb()
        self.dtlb = Tlb()
        for page in range(_IDENTITY_PAGES):
            addr = page * PAGE_SIZE
            self.itlb.insert(addr, addr, MemoryAccess.READ | MemoryAccess.EXEC)
            self.dtlb.insert(addr, addr, MemoryAccess.READ | MemoryAccess.WRITE)
        self.tlb_hits = 0
        self.tlb_misses = 0

    @property
    def ram_size(self) -> int:
        return len(self.ram)

    def translate(self, vaddr: int, is_instruction: bool = False) -> int:
        """Translate a virtual address, filling the TLB with an identity map on a miss."""
        tlb = self.itlb if is_instruction else self.dtlb
        paddr = tlb.lookup(vaddr)
        if paddr is not None:
            self.tlb_hits += 1
            return paddr
        self.tlb_misses += 1
        tlb.insert(
            vaddr, vaddr, MemoryAccess.READ | MemoryAccess.WRITE | MemoryAccess.EXEC
        )
        return vaddr

    def flush_tlb(self) -> None:
        """Invalidate both TLBs."""
        self.itlb.invalidate()
        self.dtlb.invalidate()

    def _read(self, addr: int, width: int) -> int:
        paddr = self.translate(addr)
        if paddr + width > len(self.ram):
            return 0
        return int.from_bytes(self.ram[paddr:paddr + width], "big")

    def _write(self, addr: int, width: int, value: int) -> None:
        paddr = self.translate(addr)
        if paddr + width <= len(self.ram):
            value &= (1 << (8 * width)) - 1
            self.ram[paddr:paddr + width] = value.to_bytes(width, "big")

    def read8(self, addr: int) -> int:
        return self._read(addr, 1)

    def read16(self, addr: int) -> int:
        return self._read(addr, 2)

    def read32(self, addr: int) -> int:
        return self._read(addr, 4)

    def read64(self, addr: int) -> int:
        return self._read(addr, 8)

    def write8(self, addr: int, value: int) -> None:
        self._write(addr, 1, value)

    def write16(self, addr: int, value: int) -> None:
        self._write(addr, 2, value)

    def write32(self, addr: int, value: int) -> None:
        self._write(addr, 4, value)

    def write64(self, addr: int, value: int) -> None:
        self._write(addr, 8, value)