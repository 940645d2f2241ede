# pwrxe

Building blocks for a PowerPC emulator:

- `pwrxe.instruction` decodes 32-bit PowerPC instruction words. For each word it
  finds the encoding format (`Format.I`, `Format.B`, `Format.SC`, `Format.D`,
  `Format.X`, `Format.XL`, `Format.XFX`, `Format.A`, `Format.M`, ...), the mnemonic
  and the operand fields.
- `pwrxe.memory` models zero-filled, big-endian RAM. Addresses go through separate
  instruction and data TLBs. Each TLB is direct-mapped, with 64 entries and 4 KiB pages.
- `pwrxe.cpu` holds the PowerPC register file (`CpuState`, `ExecState`) and helpers
  that read condition-register fields.

## Installation

```
pip install .
```

To also install the test dependencies:

```
pip install .[test]
```

## Command line

```
pwrxe
```

The command decodes three built-in sample words (`addi`, `add` and `b`). For each
one it prints the raw word, the mnemonic and the format number:

```
0x38600005: addi (fmt=3)
0x7C601A14: add (fmt=5)
0x48000000: b (fmt=0)
```

The command takes no arguments apart from `--help`.

## Decoding instructions

```python
from pwrxe.instruction import Format, decode_instruction, get_instruction_name

inst = decode_instruction(0x38600005)
assert get_instruction_name(inst) == "addi"
assert inst.format is Format.D
assert (inst.rt, inst.ra, inst.simm) == (3, 0, 5)
```

`decode_instruction` returns a frozen `Instruction` dataclass. Its fields are:

- `raw`, `format`, `opcode` and `extended_op`
- the register fields `rt`, `ra` and `rb`
- the condition-register bit fields `bt`, `ba` and `bb`
- the floating-point register fields `frt`, `fra`, `frb` and `frc`
- the immediates `imm` and `simm`
- the branch displacement `addr`
- the special register number `spr`
- the rotate fields `sh`, `mb` and `me`
- the flags `rc`, `oe`, `lk` and `aa`

Not every field means something for every format.

Some details of decoding:

- `addr` holds the sign-extended branch displacement as an unsigned 32-bit
  two's-complement value.
- A word that no decode table matches keeps the format `Format.I`.
  `get_instruction_name` returns `"unknown"` for such a word.
- A word outside the 32-bit range raises `ValueError`.

The decode tables are public as `PRIMARY_TABLE`, `X_TABLE`, `XL_TABLE`, `XFX_TABLE`
and `A_TABLE`. They are tuples of `DecodeEntry(mask, match, format, mnemonic)`.

## Memory

```python
from pwrxe.memory import MemorySystem

mem = MemorySystem(1 << 20)
mem.write32(0x100, 0xDEADBEEF)
assert mem.read32(0x100) == 0xDEADBEEF
assert mem.read8(0x100) == 0xDE
```

`MemorySystem(size)` behaves as follows:

- The default size is 256 MiB, and a negative size raises `ValueError`.
- Both TLBs start with identity mappings for the first 16 pages.
- `read8/16/32/64` and `write8/16/32/64` access the RAM big-endian. A write keeps
  only the low bits of the value that fit the width.
- A read that runs past the end of RAM returns 0. A write that runs past the end
  is ignored.
- `translate(vaddr, is_instruction=False)` counts TLB hits and misses in
  `tlb_hits` and `tlb_misses`. On a miss it maps the address to itself and adds
  that mapping to the TLB.
- `flush_tlb()` invalidates both TLBs.

`Tlb` has `lookup`, `insert` and `invalidate`. `lookup` returns `None` on a miss.
The `tlb_index(vaddr)` function gives the slot that an address maps to.
`MemoryAccess` is an `IntFlag` with the values `READ`, `WRITE` and `EXEC`.

## CPU state

```python
from pwrxe.cpu import CpuState, cr_eq

cpu = CpuState()
cpu.cr = 0x20000000
assert cr_eq(cpu.cr, 0)
```

`cr_field(cr, field)` returns the 4-bit field numbered 0 to 7, and any other field
number raises `ValueError`. `cr_lt`, `cr_gt`, `cr_eq` and `cr_so` test the bits of
that field. The XER and MSR bit masks are available as constants, such as `XER_CA`
and `MSR_SF`.

## What the package does not do

The package decodes instructions but does not execute them. It has no interpreter
loop that ties `CpuState`, `MemorySystem` and the decoder together. It also has no
loader for guest programs, and nothing to reset or print the CPU state.