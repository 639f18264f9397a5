class Chip8Exception(Exception):
    """
    Base class for all errors raised by the Chip 8 core.
    """


class ProgramTooLarge(Chip8Exception):
    """
    A class to raise when a program does not fit in program memory.
    """
    def __init__(self, program_size, max_size):
        Chip8Exception.__init__(
            self, "Program of {} bytes exceeds {} bytes".format(program_size, max_size))
        self.program_size = program_size
        self.max_size = max_size


class InvalidKeyIndex(Chip8Exception):
    """
    A class to raise when a keypad index is outside of 0x0 - 0xF.
    """
    def __init__(self, key_index):
        Chip8Exception.__init__(self, "Invalid key index: {}".format(key_index))
        self.key_index = key_index


class AddressOutOfRange(Chip8Exception):
    """
    A class to raise when an instruction fetch runs past the end of memory.
    """
    def __init__(self, address):
        Chip8Exception.__init__(self, "Address out of range: {:X}".format(address))
        self.address = address


class StackOverflow(Chip8Exception):
    """
    A class to raise when a subroutine call is made with a full stack.
    """
    def __init__(self, address):
        Chip8Exception.__init__(self, "Stack overflow at: {:X}".format(address))
        self.address = address


class StackUnderflow(Chip8Exception):
    """
    A class to raise when a subroutine return is made with an empty stack.
    """
    def __init__(self, address):
        Chip8Exception.__init__(self, "Stack underflow at: {:X}".format(address))
        self.address = address
