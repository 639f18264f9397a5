"""
The complete mutable state of a Chip 8 virtual machine.
"""
from random import Random

from chip8.exception import InvalidKeyIndex, ProgramTooLarge
from chip8.framebuffer import Framebuffer

# The total amount of memory to allocate for the emulator
MAX_MEMORY = 4096

# Where the program counter should originally point
PROGRAM_COUNTER_START = 0x200

# The largest program that fits between the program start and end of memory
MAX_PROGRAM_SIZE = MAX_MEMORY - PROGRAM_COUNTER_START

# Where the built-in font lives in memory
FONT_START = 0x50

# The number of bytes in each font character
FONT_CHARACTER_SIZE = 5

# The built-in hex digit font, 0 through F
FONT = bytes((
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
))

# The total number of registers in the Chip 8 CPU
NUM_REGISTERS = 0x10

# The number of return addresses the call stack holds
STACK_DEPTH = 16

# The number of keys on the keypad
NUM_KEYS = 0x10


class Machine(object):
    """
    A class to hold the state of a Chip 8 machine. To summarize, the Chip 8
    has:

        * 16 x 8-bit general purpose registers (V0 - VF**)
        * 1 x 16-bit index register (I)
        * 1 x 16-bit program counter (PC)
        * 16 x 16-bit call stack entries with a stack pointer (SP)
        * 1 x 8-bit delay timer (DT)
        * 1 x 8-bit sound timer (ST)
        * 4096 bytes of memory, a 16 key keypad and a 64 x 32 screen

    ** VF is written by arithmetic, shift and draw instructions as a flag,
    but is otherwise an ordinary register.

    The state is only ever mutated by the CPU step, the timer tick and the
    keypad update. Each machine owns its own copy of the font, so any
    number of machines can run side by side.
    """
    def __init__(self, seed=None):
        """
        Initialize the machine and reset it to its power-on state.

        :param seed: seed for the random number source, None for system entropy
        """
        self.seed = seed
        self.random = Random(seed)

        # There are two timer registers, one for sound and one that is general
        # purpose known as the delay timer. The timers are loaded with a value
        # and then decremented 60 times per second.
        self.timers = {
            'delay': 0,
            'sound': 0,
        }

        # Defines the general purpose, index, stack pointer and program
        # counter registers.
        self.registers = {
            'v': [],
            'index': 0,
            'sp': 0,
            'pc': 0,
        }
        self.stack = []
        self.keypad = []
        self.memory = bytearray(MAX_MEMORY)
        self.framebuffer = Framebuffer()
        self.reset()

    def __str__(self):
        val = 'PC: {:4X}  SP: {:2X}  I: {:4X}\n'.format(
            self.registers['pc'], self.registers['sp'], self.registers['index'])
        for index in range(NUM_REGISTERS):
            val += 'V{:X}: {:2X}\n'.format(index, self.registers['v'][index])
        val += 'DT: {:2X}  ST: {:2X}'.format(self.timers['delay'], self.timers['sound'])
        return val

    def reset(self):
        """
        Reset the machine by blanking out all registers, memory, the stack,
        the timers, the keypad and the screen. The font is reloaded and the
        program counter is set to its starting value. The random source is
        re-seeded, so a seeded machine replays the same numbers after a reset.
        """
        self.registers['v'] = [0] * NUM_REGISTERS
        self.registers['pc'] = PROGRAM_COUNTER_START
        self.registers['sp'] = 0
        self.registers['index'] = 0
        self.stack = [0] * STACK_DEPTH
        self.keypad = [False] * NUM_KEYS
        self.timers['delay'] = 0
        self.timers['sound'] = 0
        self.memory[:] = bytes(MAX_MEMORY)
        self.memory[FONT_START:FONT_START + len(FONT)] = FONT
        self.framebuffer.clear()
        self.random.seed(self.seed)

    def load_program(self, program):
        """
        Copy the program bytes into memory starting at the program counter
        start address. The contents are not validated.

        :param program: the raw ROM bytes
        :raises ProgramTooLarge: if the program does not fit in memory
        """
        if len(program) > MAX_PROGRAM_SIZE:
            raise ProgramTooLarge(len(program), MAX_PROGRAM_SIZE)
        self.memory[PROGRAM_COUNTER_START:PROGRAM_COUNTER_START + len(program)] = program

    def set_key(self, key_index, pressed):
        """
        Record the state of a single key on the keypad.

        :param key_index: the key to update, 0x0 - 0xF
        :param pressed: True if the key is held down
        :raises InvalidKeyIndex: if the key index is out of range
        """
        if not 0 <= key_index < NUM_KEYS:
            raise InvalidKeyIndex(key_index)
        self.keypad[key_index] = bool(pressed)

    def tick_timers(self):
        """
        Decrement both the sound and delay timer.
        """
        if self.timers['delay'] != 0:
            self.timers['delay'] -= 1

        if self.timers['sound'] != 0:
            self.timers['sound'] -= 1

    def random_byte(self):
        """
        :return: the next value from the random source, 0 - 255
        """
        return self.random.randint(0, 255)

    @property
    def sound_active(self):
        """
        :return: True while the sound timer is non-zero
        """
        return self.timers['sound'] > 0
