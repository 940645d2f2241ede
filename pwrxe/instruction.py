"""Decoding of 32-bit PowerPC instruction words."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class Format(enum.IntEnum):
    """PowerPC instruction encoding formats."""

    I = 0  # noqa: E741  branch
    B = 1  # conditional branch
    SC = 2  # system call
    D = 3  # load/store, arithmetic with immediate
    DS = 4  # 64-bit load/store
    X = 5  # register-register operations
    XL = 6  # condition register logical
    XFX = 7  # move to/from special registers
    XFL = 8  # floating point status/control
    A = 9  # floating point arithmetic
    M = 10  # rotate and mask
    MD = 11  # 64-bit rotate and mask
    MDS = 12  # 64-bit rotate and mask, variable shift
    UNKNOWN = 13


@dataclass(frozen=True)
class DecodeEntry:
    """One row of a decode table: a word matches when ``raw & mask == match``."""

    mask: int
    match: int
    format: Format
    mnemonic: str

    def matches(self, raw: int) -> bool:
        return raw & self.mask == self.match


@dataclass(frozen=True)
class Instruction:
    """A decoded instruction word and its operand fields.

    ``addr`` holds the sign-extended branch displacement as an unsigned
    32-bit two's-complement value.
    """

    raw: int
    format: Format = Format.I
    opcode: int = 0
    extended_op: int = 0
    rt: int = 0
    ra: int = 0
    rb: int = 0
    bt: int = 0
    ba: int = 0
    bb: int = 0
    frt: int = 0
    fra: int = 0
    frb: int = 0
    frc: int = 0
    imm: int = 0
    simm: int = 0
    addr: int = 0
    spr: int = 0
    sh: int = 0
    mb: int = 0
    me: int = 0
    rc: bool = False
    oe: bool = False
    lk: bool = False
    aa: bool = False


def _table(fmt: Format, rows: list[tuple[int, int, str]]) -> tuple[DecodeEntry, ...]:
    return tuple(DecodeEntry(mask, match, fmt, name) for mask, match, name in rows)


_PRIMARY_MASK = 0xFC000000
_EXT_MASK = 0xFC0007FE
_A_MASK = 0xFC00003E

PRIMARY_TABLE: tuple[DecodeEntry, ...] = (
    *_table(Format.D, [
        (_PRIMARY_MASK, 0x0C000000, "twi"),
        (_PRIMARY_MASK, 0x1C000000, "mulli"),
        (_PRIMARY_MASK, 0x20000000, "subfic"),
        (_PRIMARY_MASK, 0x28000000, "cmpli"),
        (_PRIMARY_MASK, 0x2C000000, "cmpi"),
        (_PRIMARY_MASK, 0x30000000, "addic"),
        (_PRIMARY_MASK, 0x34000000, "addic."),
        (_PRIMARY_MASK, 0x38000000, "addi"),
        (_PRIMARY_MASK, 0x3C000000, "addis"),
    ]),
    DecodeEntry(_PRIMARY_MASK, 0x40000000, Format.B, "bc"),
    DecodeEntry(_PRIMARY_MASK, 0x44000000, Format.SC, "sc"),
    DecodeEntry(_PRIMARY_MASK, 0x48000000, Format.I, "b"),
    *_table(Format.M, [
        (_PRIMARY_MASK, 0x50000000, "rlwimi"),
        (_PRIMARY_MASK, 0x54000000, "rlwinm"),
        (_PRIMARY_MASK, 0x5C000000, "rlwnm"),
    ]),
    *_table(Format.D, [
        (_PRIMARY_MASK, 0x60000000, "ori"),
        (_PRIMARY_MASK, 0x64000000, "oris"),
        (_PRIMARY_MASK, 0x68000000, "xori"),
        (_PRIMARY_MASK, 0x6C000000, "xoris"),
        (_PRIMARY_MASK, 0x70000000, "andi."),
        (_PRIMARY_MASK, 0x74000000, "andis."),
        (_PRIMARY_MASK, 0x80000000, "lwz"),
        (_PRIMARY_MASK, 0x84000000, "lwzu"),
        (_PRIMARY_MASK, 0x88000000, "lbz"),
        (_PRIMARY_MASK, 0x8C000000, "lbzu"),
        (_PRIMARY_MASK, 0x90000000, "stw"),
        (_PRIMARY_MASK, 0x94000000, "stwu"),
        (_PRIMARY_MASK, 0x98000000, "stb"),
        (_PRIMARY_MASK, 0x9C000000, "stbu"),
        (_PRIMARY_MASK, 0xA0000000, "lhz"),
        (_PRIMARY_MASK, 0xA4000000, "lhzu"),
        (_PRIMARY_MASK, 0xA8000000, "lha"),
        (_PRIMARY_MASK, 0xAC000000, "lhau"),
        (_PRIMARY_MASK, 0xB0000000, "sth"),
        (_PRIMARY_MASK, 0xB4000000, "sthu"),
        (_PRIMARY_MASK, 0xB8000000, "lmw"),
        (_PRIMARY_MASK, 0xBC000000, "stmw"),
        (_PRIMARY_MASK, 0xC0000000, "lfs"),
        (_PRIMARY_MASK, 0xC4000000, "lfsu"),
        (_PRIMARY_MASK, 0xC8000000, "lfd"),
        (_PRIMARY_MASK, 0xCC000000, "lfdu"),
        (_PRIMARY_MASK, 0xD0000000, "stfs"),
        (_PRIMARY_MASK, 0xD4000000, "stfsu"),
        (_PRIMARY_MASK, 0xD8000000, "stfd"),
        (_PRIMARY_MASK, 0xDC000000, "stfdu"),
    ]),
)

X_TABLE: tuple[DecodeEntry, ...] = _table(Format.X, [
    (_EXT_MASK, 0x7C000214, "add"),
    (_EXT_MASK, 0x7C000014, "addc"),
    (_EXT_MASK, 0x7C000114, "adde"),
    (_EXT_MASK, 0x7C000194, "addze"),
    (_EXT_MASK, 0x7C0001D4, "addme"),
    (_EXT_MASK, 0x7C000050, "subf"),
    (_EXT_MASK, 0x7C000010, "subfc"),
    (_EXT_MASK, 0x7C000110, "subfe"),
    (_EXT_MASK, 0x7C000190, "subfze"),
    (_EXT_MASK, 0x7C0001D0, "subfme"),
    (_EXT_MASK, 0x7C000034, "cntlzw"),
    (_EXT_MASK, 0x7C000038, "and"),
    (_EXT_MASK, 0x7C000078, "andc"),
    (_EXT_MASK, 0x7C000378, "or"),
    (_EXT_MASK, 0x7C000338, "orc"),
    (_EXT_MASK, 0x7C000278, "xor"),
    (_EXT_MASK, 0x7C0000F8, "nor"),
    (_EXT_MASK, 0x7C000238, "eqv"),
    (_EXT_MASK, 0x7C0003B8, "nand"),
    (_EXT_MASK, 0x7C000030, "slw"),
    (_EXT_MASK, 0x7C000430, "srw"),
    (_EXT_MASK, 0x7C000630, "sraw"),
    (_EXT_MASK, 0x7C000670, "srawi"),
    (_EXT_MASK, 0x7C0002D6, "mulhw"),
    (_EXT_MASK, 0x7C000296, "mulhwu"),
    (_EXT_MASK, 0x7C0001D6, "mullw"),
    (_EXT_MASK, 0x7C0003D6, "divw"),
    (_EXT_MASK, 0x7C000396, "divwu"),
    (_EXT_MASK, 0x7C000000, "cmp"),
    (_EXT_MASK, 0x7C000040, "cmpl"),
    (_EXT_MASK, 0x7C00002E, "lwzx"),
    (_EXT_MASK, 0x7C00006E, "lwzux"),
    (_EXT_MASK, 0x7C0000AE, "lbzx"),
    (_EXT_MASK, 0x7C0000EE, "lbzux"),
    (_EXT_MASK, 0x7C00012E, "stwx"),
    (_EXT_MASK, 0x7C00016E, "stwux"),
    (_EXT_MASK, 0x7C0001AE, "stbx"),
    (_EXT_MASK, 0x7C0001EE, "stbux"),
    (_EXT_MASK, 0x7C00022E, "lhzx"),
    (_EXT_MASK, 0x7C00026E, "lhzux"),
    (_EXT_MASK, 0x7C0002AE, "lhax"),
    (_EXT_MASK, 0x7C0002EE, "lhaux"),
    (_EXT_MASK, 0x7C00032E, "sthx"),
    (_EXT_MASK, 0x7C00036E, "sthux"),
    (_EXT_MASK, 0x7C0004AC, "sync"),
    (_EXT_MASK, 0x7C0000A6, "mfmsr"),
    (_EXT_MASK, 0x7C000124, "mtmsr"),
])

XL_TABLE: tuple[DecodeEntry, ...] = _table(Format.XL, [
    (_EXT_MASK, 0x4C000020, "bclr"),
    (_EXT_MASK, 0x4C000420, "bcctr"),
    (_EXT_MASK, 0x4C000202, "crand"),
    (_EXT_MASK, 0x4C000102, "crandc"),
    (_EXT_MASK, 0x4C000242, "creqv"),
    (_EXT_MASK, 0x4C0001C2, "crnand"),
    (_EXT_MASK, 0x4C000042, "crnor"),
    (_EXT_MASK, 0x4C000382, "cror"),
    (_EXT_MASK, 0x4C000342, "crorc"),
    (_EXT_MASK, 0x4C000282, "crxor"),
    (_EXT_MASK, 0x4C000000, "mcrf"),
])

XFX_TABLE: tuple[DecodeEntry, ...] = _table(Format.XFX, [
    (_EXT_MASK, 0x7C0002A6, "mfspr"),
    (_EXT_MASK, 0x7C0003A6, "mtspr"),
    (_EXT_MASK, 0x7C000026, "mfcr"),
    (_EXT_MASK, 0x7C000120, "mtcrf"),
])

A_TABLE: tuple[DecodeEntry, ...] = _table(Format.A, [
    (_A_MASK, 0xFC00002A, "fadd"),
    (_A_MASK, 0xFC000028, "fsub"),
    (_A_MASK, 0xFC000032, "fmul"),
    (_A_MASK, 0xFC000024, "fdiv"),
    (_A_MASK, 0xFC00002E, "fsel"),
    (_A_MASK, 0xFC00003A, "fmadd"),
    (_A_MASK, 0xFC000038, "fmsub"),
    (_A_MASK, 0xFC00003E, "fnmadd"),
    (_A_MASK, 0xFC00003C, "fnmsub"),
])


def _find(tables: tuple[tuple[DecodeEntry, ...], ...], raw: int) -> DecodeEntry | None:
    return next(
        (entry for table in tables for entry in table if entry.matches(raw)),
        None,
    )


def _sign16(value: int) -> int:
    return value - 0x10000 if value & 0x8000 else value


def _field(raw: int, shift: int) -> int:
    return (raw >> shift) & 0x1F


def _li(raw: int) -> int:
    value = raw & 0x3FFFFFC
    if value & 0x2000000:
        value -= 0x4000000
    return value & 0xFFFFFFFF


def _bd(raw: int) -> int:
    return _sign16(raw & 0xFFFC) & 0xFFFFFFFF


def _format_fields(fmt: Format, raw: int) -> dict:
    lk = bool(raw & 1)
    aa = bool((raw >> 1) & 1)
    if fmt is Format.I:
        return {"addr": _li(raw), "lk": lk, "aa": aa}
    if fmt is Format.B:
        return {
            "addr": _bd(raw), "lk": lk, "aa": aa,
            "bt": _field(raw, 21), "ba": _field(raw, 16), "bb": _field(raw, 11),
        }
    if fmt is Format.DS:
        return {"simm": _sign16(raw & 0xFFFC)}
    if fmt is Format.X:
        return {"oe": bool((raw >> 10) & 1)}
    if fmt is Format.XL:
        return {
            "bt": _field(raw, 21), "ba": _field(raw, 16), "bb": _field(raw, 11),
            "lk": lk,
        }
    if fmt is Format.XFX:
        return {"spr": _field(raw, 16) | (_field(raw, 11) << 5)}
    if fmt is Format.A:
        return {
            "frt": _field(raw, 21), "fra": _field(raw, 16),
            "frb": _field(raw, 11), "frc": _field(raw, 6),
        }
    if fmt is Format.M:
        return {"sh": _field(raw, 11), "mb": _field(raw, 6), "me": _field(raw, 1)}
    return {}


def decode_instruction(raw: int) -> Instruction:
    """Decode a 32-bit instruction word.

    A word that no table entry matches keeps the zero format, ``Format.I``.
    """
    if not 0 <= raw <= 0xFFFFFFFF:
        raise ValueError(f"instruction word out of 32-bit range: {raw:#x}")

    opcode = (raw >> 26) & 0x3F
    extended_op = 0
    fmt = Format.I

    entry = _find((PRIMARY_TABLE,), raw)
    if entry is not None:
        fmt = entry.format

    extended: DecodeEntry | None = None
    if opcode == 19:
        extended_op = (raw >> 1) & 0x3FF
        extended = _find((XL_TABLE,), raw)
    elif opcode == 31:
        extended_op = (raw >> 1) & 0x3FF
        extended = _find((X_TABLE,), raw)
    elif opcode in (59, 63):
        extended = _find((A_TABLE,), raw)
    if extended is not None:
        fmt = extended.format

    imm = raw & 0xFFFF
    fields = {
        "rt": _field(raw, 21),
        "ra": _field(raw, 16),
        "rb": _field(raw, 11),
        "rc": bool(raw & 1),
        "simm": _sign16(imm),
        "imm": imm,
    }
    fields.update(_format_fields(fmt, raw))
    return Instruction(
        raw=raw, format=fmt, opcode=opcode, extended_op=extended_op, **fields
    )


def get_instruction_name(inst: Instruction) -> str:
    """Return the mnemonic of a decoded instruction, or ``"unknown"``."""
    if opcode_31 := inst.opcode == 31:
        tables: tuple[tuple[DecodeEntry, ...], ...] = (PRIMARY_TABLE, X_TABLE, XFX_TABLE)
    elif inst.opcode == 19:
        tables = (PRIMARY_TABLE, XL_TABLE)
    elif inst.opcode in (59, 63):
        tables = (PRIMARY_TABLE, A_TABLE)
    else:
        tables = (PRIMARY_TABLE,)
    del opcode_31
    entry = _find(tables, inst.raw)
    return entry.mnemonic if entry is not None else "unknown"