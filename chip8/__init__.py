from chip8.cpu import CPU, step
from chip8.decode import Instruction, decode, disassemble
from chip8.exception import (
    AddressOutOfRange, Chip8Exception, InvalidKeyIndex, ProgramTooLarge,
    StackOverflow, StackUnderflow,
)
from chip8.framebuffer import Framebuffer
from chip8.machine import Machine

__version__ = '1.0.0'
