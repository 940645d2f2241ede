"""Command that decodes a fixed set of sample instruction words."""

from __future__ import annotations

import argparse

from pwrxe.instruction import decode_instruction, get_instruction_name

SAMPLE_INSTRUCTIONS = (
    0x38600005,  # addi r3, r0, 5
    0x7C601A14,  # add r3, r0, r3
    0x48000000,  # b 0
)


def main(argv: list[str] | None = None) -> int:
    """Decode the sample words and print one line for each."""
    parser = argparse.ArgumentParser(
        prog="pwrxe", description="Decode sample PowerPC instruction words."
    )
    parser.parse_args(argv)
    for raw in SAMPLE_INSTRUCTIONS:
        inst = decode_instruction(raw)
        print(f"0x{inst.raw:08X}: {get_instruction_name(inst)} (fmt={int(inst.format)})")
    return 0