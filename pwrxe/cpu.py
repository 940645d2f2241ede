"""PowerPC register file and condition-register helpers."""

from __future__ import annotations

from dataclasses import dataclass, field

XER_SO = 1 << 31
XER_OV = 1 << 30
XER_CA = 1 << 29

MSR_SF = 1 << 63
MSR_EE = 1 << 48
MSR_PR = 1 << 49
MSR_IR = 1 << 58
MSR_DR = 1 << 59


@dataclass
class ExecState:
    """Execution state kept alongside the registers."""

    reservation_valid: bool = False
    reservation_addr: int = 0
    fpscr: int = 0


@dataclass
class CpuState:
    """The architected registers of a 64-bit PowerPC processor."""

    gpr: list[int] = field(default_factory=lambda: [0] * 32)
    fpr: list[float] = field(default_factory=lambda: [0.0] * 32)
    pc: int = 0
    lr: int = 0
    ctr: int = 0
    cr: int = 0
    xer: int = 0
    msr: int = 0
    vrsave: int = 0
    fpscr: float = 0.0
    dar: int = 0
    dsisr: int = 0
    exec_state: ExecState = field(default_factory=ExecState)


def cr_field(cr: int, field: int) -> int:
    """Return the 4-bit condition-register field numbered 0..7."""
    if not 0 <= field <= 7:
        raise ValueError(f"condition register field out of range: {field}")
    return (cr >> (28 - field * 4)) & 0xF


def cr_lt(cr: int, field: int) -> bool:
    return bool(cr_field(cr, field) & 8)


def cr_gt(cr: int, field: int) -> bool:
    return bool(cr_field(cr, field) & 4)


def cr_eq(cr: int, field: int) -> bool:
    return bool(cr_field(cr, field) & 2)


def cr_so(cr: int, field: int) -> bool:
    return bool(cr_field(cr, field) & 1)