import dataclasses

import pytest

from pwrxe.instruction import (
    DecodeEntry,
    Format,
    Instruction,
    decode_instruction,
    get_instruction_name,
)


@pytest.mark.parametrize(
    "raw, name, fmt, fmt_number",
    [
        (0x38600005, "addi", Format.D, 3),
        (0x7C601A14, "add", Format.X, 5),
        (0x48000000, "b", Format.I, 0),
    ],
)
def test_sample_program(raw, name, fmt, fmt_number):
    inst = decode_instruction(raw)
    assert inst.raw == raw
    assert get_instruction_name(inst) == name
    assert inst.format is fmt
    assert int(inst.format) == fmt_number


def test_addi_fields():
    inst = decode_instruction(0x38600005)
    assert inst.opcode == 14
    assert (inst.rt, inst.ra, inst.simm, inst.imm) == (3, 0, 5, 5)


def test_add_fields():
    inst = decode_instruction(0x7C601A14)
    assert inst.opcode == 31
    assert (inst.rt, inst.ra, inst.rb) == (3, 0, 3)
    assert inst.rc is False
    assert inst.oe is False


@pytest.mark.parametrize(
    "match, name",
    [
        (0x0C000000, "twi"), (0x1C000000, "mulli"), (0x20000000, "subfic"),
        (0x28000000, "cmpli"), (0x2C000000, "cmpi"), (0x30000000, "addic"),
        (0x34000000, "addic."), (0x38000000, "addi"), (0x3C000000, "addis"),
        (0x40000000, "bc"), (0x44000000, "sc"), (0x48000000, "b"),
        (0x50000000, "rlwimi"), (0x54000000, "rlwinm"), (0x5C000000, "rlwnm"),
        (0x60000000, "ori"), (0x64000000, "oris"), (0x68000000, "xori"),
        (0x6C000000, "xoris"), (0x70000000, "andi."), (0x74000000, "andis."),
        (0x80000000, "lwz"), (0x84000000, "lwzu"), (0x88000000, "lbz"),
        (0x8C000000, "lbzu"), (0x90000000, "stw"), (0x94000000, "stwu"),
        (0x98000000, "stb"), (0x9C000000, "stbu"), (0xA0000000, "lhz"),
        (0xA4000000, "lhzu"), (0xA8000000, "lha"), (0xAC000000, "lhau"),
        (0xB0000000, "sth"), (0xB4000000, "sthu"), (0xB8000000, "lmw"),
        (0xBC000000, "stmw"), (0xC0000000, "lfs"), (0xC4000000, "lfsu"),
        (0xC8000000, "lfd"), (0xCC000000, "lfdu"), (0xD0000000, "stfs"),
        (0xD4000000, "stfsu"), (0xD8000000, "stfd"), (0xDC000000, "stfdu"),
    ],
)
def test_primary_mnemonics(match, name):
    inst = decode_instruction(match | 0x00ABCDEF)
    assert get_instruction_name(inst) == name
    assert inst.opcode == match >> 26


@pytest.mark.parametrize("rt, ra, imm", [(1, 2, 0x7FFF), (31, 31, 0x8000), (5, 0, 0xFFFF)])
def test_d_form_immediates(rt, ra, imm):
    raw = 0x80000000 | (rt << 21) | (ra << 16) | imm
    inst = decode_instruction(raw)
    assert inst.format is Format.D
    assert (inst.rt, inst.ra, inst.imm) == (rt, ra, imm)
    assert inst.simm & 0xFFFF == imm
    assert -0x8000 <= inst.simm < 0x8000
    assert (inst.simm < 0) == bool(imm & 0x8000)


@pytest.mark.parametrize("displacement", [0, 4, 0x1FFFFFC, -4, -0x2000000])
@pytest.mark.parametrize("aa, lk", [(0, 0), (1, 0), (0, 1), (1, 1)])
def test_i_form_branch(displacement, aa, lk):
    raw = 0x48000000 | (displacement & 0x3FFFFFC) | (aa << 1) | lk
    inst = decode_instruction(raw)
    assert inst.format is Format.I
    assert get_instruction_name(inst) == "b"
    assert inst.addr == displacement & 0xFFFFFFFF
    assert inst.aa is bool(aa)
    assert inst.lk is bool(lk)


@pytest.mark.parametrize("bo, bi, bd", [(12, 2, 8), (4, 0, -8), (20, 31, 0x7FFC)])
def test_b_form_branch(bo, bi, bd):
    raw = 0x40000000 | (bo << 21) | (bi << 16) | (bd & 0xFFFC) | 1
    inst = decode_instruction(raw)
    assert inst.format is Format.B
    assert get_instruction_name(inst) == "bc"
    assert inst.bt == bo
    assert inst.ba == bi
    assert inst.addr == bd & 0xFFFFFFFF
    assert inst.lk is True
    assert inst.aa is False


def test_xl_form_bclr():
    raw = 0x4C000020 | (20 << 21) | 1
    inst = decode_instruction(raw)
    assert inst.format is Format.XL
    assert get_instruction_name(inst) == "bclr"
    assert inst.extended_op == 16
    assert inst.bt == 20
    assert inst.lk is True


@pytest.mark.parametrize(
    "match, name",
    [
        (0x4C000420, "bcctr"), (0x4C000202, "crand"), (0x4C000102, "crandc"),
        (0x4C000242, "creqv"), (0x4C0001C2, "crnand"), (0x4C000042, "crnor"),
        (0x4C000382, "cror"), (0x4C000342, "crorc"), (0x4C000282, "crxor"),
        (0x4C000000, "mcrf"),
    ],
)
def test_xl_mnemonics(match, name):
    inst = decode_instruction(match | (7 << 21) | (9 << 16) | (11 << 11))
    assert get_instruction_name(inst) == name
    assert inst.format is Format.XL
    assert (inst.bt, inst.ba, inst.bb) == (7, 9, 11)
    assert inst.extended_op == (match >> 1) & 0x3FF


@pytest.mark.parametrize(
    "match, name",
    [
        (0x7C000038, "and"), (0x7C000378, "or"), (0x7C000278, "xor"),
        (0x7C000030, "slw"), (0x7C0001D6, "mullw"), (0x7C0003D6, "divw"),
        (0x7C000000, "cmp"), (0x7C000040, "cmpl"), (0x7C00002E, "lwzx"),
        (0x7C0004AC, "sync"), (0x7C0000A6, "mfmsr"), (0x7C000124, "mtmsr"),
    ],
)
def test_x_mnemonics(match, name):
    inst = decode_instruction(match)
    assert get_instruction_name(inst) == name
    assert inst.format is Format.X


def test_x_form_record_bit():
    inst = decode_instruction(0x7C601A14 | 1)
    assert get_instruction_name(inst) == "add"
    assert inst.rc is True


def test_overflow_enable_bit_is_part_of_extended_opcode():
    inst = decode_instruction(0x7C601A14 | 0x400)
    assert get_instruction_name(inst) == "unknown"
    assert inst.format is Format.I


@pytest.mark.parametrize(
    "match, name",
    [(0x7C0002A6, "mfspr"), (0x7C0003A6, "mtspr"), (0x7C000026, "mfcr"), (0x7C000120, "mtcrf")],
)
def test_xfx_names_keep_default_format(match, name):
    inst = decode_instruction(match)
    assert get_instruction_name(inst) == name
    assert inst.format is Format.I


@pytest.mark.parametrize("frt, fra, frb, frc", [(1, 2, 3, 0), (31, 0, 17, 9)])
def test_a_form_fields(frt, fra, frb, frc):
    raw = 0xFC00002A | (frt << 21) | (fra << 16) | (frb << 11) | (frc << 6) | 1
    inst = decode_instruction(raw)
    assert inst.format is Format.A
    assert get_instruction_name(inst) == "fadd"
    assert (inst.frt, inst.fra, inst.frb, inst.frc) == (frt, fra, frb, frc)
    assert inst.rc is True


@pytest.mark.parametrize(
    "match, name",
    [
        (0xFC000028, "fsub"), (0xFC000032, "fmul"), (0xFC000024, "fdiv"),
        (0xFC00002E, "fsel"), (0xFC00003A, "fmadd"), (0xFC000038, "fmsub"),
        (0xFC00003E, "fnmadd"), (0xFC00003C, "fnmsub"),
    ],
)
def test_a_mnemonics(match, name):
    inst = decode_instruction(match)
    assert get_instruction_name(inst) == name
    assert inst.format is Format.A


def test_single_precision_opcode_has_no_table_match():
    inst = decode_instruction(0xEC00002A)
    assert inst.opcode == 59
    assert get_instruction_name(inst) == "unknown"
    assert inst.format is Format.I


@pytest.mark.parametrize("sh, mb, me", [(0, 0, 31), (31, 16, 16), (5, 31, 0)])
def test_m_form_fields(sh, mb, me):
    raw = 0x54000000 | (3 << 21) | (4 << 16) | (sh << 11) | (mb << 6) | (me << 1)
    inst = decode_instruction(raw)
    assert inst.format is Format.M
    assert get_instruction_name(inst) == "rlwinm"
    assert (inst.sh, inst.mb, inst.me) == (sh, mb, me)
    assert inst.rc is False


def test_reserved_opcode_is_unknown():
    inst = decode_instruction(0x00000000)
    assert get_instruction_name(inst) == "unknown"
    assert inst.format is Format.I
    assert inst.addr == 0


@pytest.mark.parametrize("raw", [-1, 0x100000000])
def test_out_of_range_word_rejected(raw):
    with pytest.raises(ValueError):
        decode_instruction(raw)


def test_instruction_is_immutable():
    inst = decode_instruction(0x38600005)
    with pytest.raises(dataclasses.FrozenInstanceError):
        inst.rt = 4
    assert inst.rt == 3
    assert get_instruction_name(inst) == "addi"


def test_decode_entry_matches():
    entry = DecodeEntry(0xFC000000, 0x38000000, Format.D, "addi")
    assert entry.matches(0x38600005) is True
    assert entry.matches(0x7C601A14) is False


def test_name_depends_on_raw_word():
    inst = Instruction(raw=0x38600005, opcode=14)
    assert get_instruction_name(inst) == "addi"