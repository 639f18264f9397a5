"""
Decoding of 16-bit Chip 8 instruction words into tagged instructions.

The top nibble of a word selects the instruction family. Families 0x0, 0x8,
0xE and 0xF overload their low bits for distinct operations, so those are
looked up a second time in their own sub-table:

   Bits:  15-12     11-8      7-4       3-0
          family     x         y         n
                               kk (7-0)
                     nnn (11-0)
"""
from collections import namedtuple

FAMILY_MASK = 0xF000
X_MASK = 0x0F00
Y_MASK = 0x00F0
N_MASK = 0x000F
KK_MASK = 0x00FF
NNN_MASK = 0x0FFF

# Tag for any word not present in the decode tables
UNKNOWN = 'UNKNOWN'

Instruction = namedtuple('Instruction', ['mnemonic', 'operand', 'x', 'y', 'n', 'kk', 'nnn'])

# Families that decode on the top nibble alone
FAMILY_LOOKUP = {
    0x1: 'JUMP',        # 1nnn - JUMP nnn
    0x2: 'CALL',        # 2nnn - CALL nnn
    0x3: 'SKE_VAL',     # 3xkk - SKE  Vx, kk
    0x4: 'SKNE_VAL',    # 4xkk - SKNE Vx, kk
    0x5: 'SKE_REG',     # 5xy0 - SKE  Vx, Vy
    0x6: 'LOAD_VAL',    # 6xkk - LOAD Vx, kk
    0x7: 'ADD_VAL',     # 7xkk - ADD  Vx, kk
    0x9: 'SKNE_REG',    # 9xy0 - SKNE Vx, Vy
    0xA: 'LOAD_INDEX',  # Annn - LOAD I, nnn
    0xB: 'JUMP_V0',     # Bnnn - JUMP V0 + nnn
    0xC: 'RAND',        # Cxkk - RAND Vx, kk
    0xD: 'DRAW',        # Dxyn - DRAW Vx, Vy, n
}

# Family 0x0, keyed on the low byte. Any other 0nnn (SYS nnn) is ignored.
CLEAR_RETURN_LOOKUP = {
    0xE0: 'CLS',        # 00E0 - CLS
    0xEE: 'RET',        # 00EE - RET
}

# Family 0x8, keyed on the low nibble
LOGICAL_LOOKUP = {
    0x0: 'LOAD_REG',    # 8xy0 - LOAD Vx, Vy
    0x1: 'OR',          # 8xy1 - OR   Vx, Vy
    0x2: 'AND',         # 8xy2 - AND  Vx, Vy
    0x3: 'XOR',         # 8xy3 - XOR  Vx, Vy
    0x4: 'ADD_REG',     # 8xy4 - ADD  Vx, Vy
    0x5: 'SUB',         # 8xy5 - SUB  Vx, Vy
    0x6: 'SHR',         # 8xy6 - SHR  Vx
    0x7: 'SUBN',        # 8xy7 - SUBN Vx, Vy
    0xE: 'SHL',         # 8xyE - SHL  Vx
}

# Family 0xE, keyed on the low byte
KEYBOARD_LOOKUP = {
    0x9E: 'SKPR',       # Ex9E - SKPR Vx
    0xA1: 'SKUP',       # ExA1 - SKUP Vx
}

# Family 0xF, keyed on the low byte
MISC_LOOKUP = {
    0x07: 'LOAD_DELAY',  # Fx07 - LOAD Vx, DELAY
    0x0A: 'KEYD',        # Fx0A - KEYD Vx
    0x15: 'SET_DELAY',   # Fx15 - LOAD DELAY, Vx
    0x18: 'SET_SOUND',   # Fx18 - LOAD SOUND, Vx
    0x1E: 'ADD_INDEX',   # Fx1E - ADD  I, Vx
    0x29: 'LOAD_FONT',   # Fx29 - LOAD I, FONT Vx
    0x33: 'BCD',         # Fx33 - BCD  Vx
    0x55: 'STOR',        # Fx55 - STOR [I], V0..Vx
    0x65: 'READ',        # Fx65 - READ V0..Vx, [I]
}

# Assembly-style rendering of each instruction, used for tracing
MNEMONIC_FORMATS = {
    'CLS': 'CLS',
    'RET': 'RET',
    'JUMP': 'JUMP {nnn:03X}',
    'CALL': 'CALL {nnn:03X}',
    'SKE_VAL': 'SKE V{x:X}, {kk:02X}',
    'SKNE_VAL': 'SKNE V{x:X}, {kk:02X}',
    'SKE_REG': 'SKE V{x:X}, V{y:X}',
    'LOAD_VAL': 'LOAD V{x:X}, {kk:02X}',
    'ADD_VAL': 'ADD V{x:X}, {kk:02X}',
    'LOAD_REG': 'LOAD V{x:X}, V{y:X}',
    'OR': 'OR V{x:X}, V{y:X}',
    'AND': 'AND V{x:X}, V{y:X}',
    'XOR': 'XOR V{x:X}, V{y:X}',
    'ADD_REG': 'ADD V{x:X}, V{y:X}',
    'SUB': 'SUB V{x:X}, V{y:X}',
    'SHR': 'SHR V{x:X}',
    'SUBN': 'SUBN V{x:X}, V{y:X}',
    'SHL': 'SHL V{x:X}',
    'SKNE_REG': 'SKNE V{x:X}, V{y:X}',
    'LOAD_INDEX': 'LOAD I, {nnn:03X}',
    'JUMP_V0': 'JUMP V0, {nnn:03X}',
    'RAND': 'RAND V{x:X}, {kk:02X}',
    'DRAW': 'DRAW V{x:X}, V{y:X}, {n:X}',
    'SKPR': 'SKPR V{x:X}',
    'SKUP': 'SKUP V{x:X}',
    'LOAD_DELAY': 'LOAD V{x:X}, DELAY',
    'KEYD': 'KEYD V{x:X}',
    'SET_DELAY': 'LOAD DELAY, V{x:X}',
    'SET_SOUND': 'LOAD SOUND, V{x:X}',
    'ADD_INDEX': 'ADD I, V{x:X}',
    'LOAD_FONT': 'LOAD I, FONT V{x:X}',
    'BCD': 'BCD V{x:X}',
    'STOR': 'STOR [I], V{x:X}',
    'READ': 'READ V{x:X}, [I]',
    UNKNOWN: 'DATA {operand:04X}',
}


def decode_mnemonic(operand):
    """
    Work out which instruction the operand encodes.

    :param operand: the 16-bit instruction word
    :return: the instruction tag, or UNKNOWN
    """
    family = (operand & FAMILY_MASK) >> 12
    if family == 0x0:
        if operand & X_MASK:
            return UNKNOWN
        return CLEAR_RETURN_LOOKUP.get(operand & KK_MASK, UNKNOWN)
    if family == 0x8:
        return LOGICAL_LOOKUP.get(operand & N_MASK, UNKNOWN)
    if family == 0xE:
        return KEYBOARD_LOOKUP.get(operand & KK_MASK, UNKNOWN)
    if family == 0xF:
        return MISC_LOOKUP.get(operand & KK_MASK, UNKNOWN)
    return FAMILY_LOOKUP[family]


def decode(operand):
    """
    Split a 16-bit instruction word into its tag and operand fields.

    :param operand: the 16-bit instruction word
    :return: an Instruction
    """
    return Instruction(
        mnemonic=decode_mnemonic(operand),
        operand=operand,
        x=(operand & X_MASK) >> 8,
        y=(operand & Y_MASK) >> 4,
        n=operand & N_MASK,
        kk=operand & KK_MASK,
        nnn=operand & NNN_MASK,
    )


def disassemble(operand):
    """
    Render the instruction word in assembly form, e.g. 0x8124 -> 'ADD V1, V2'.
    """
    instruction = decode(operand)
    return MNEMONIC_FORMATS[instruction.mnemonic].format(**instruction._asdict())
