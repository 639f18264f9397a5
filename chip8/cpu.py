"""
The Chip 8 instruction engine. There are several good resources out on the
web that describe the internals of the Chip 8 CPU. For example:

    http://devernay.free.fr/hacks/chip8/C8TECH10.HTM
    http://michael.toren.net/mirrors/chip8/chip8def.htm
"""
import logging

from chip8.decode import decode
from chip8.exception import AddressOutOfRange, StackOverflow, StackUnderflow
from chip8.machine import FONT_CHARACTER_SIZE, FONT_START, MAX_MEMORY, NUM_KEYS, STACK_DEPTH

logger = logging.getLogger(__name__)

# The number of pixels in one row of a sprite
SPRITE_WIDTH = 8


class CPU(object):
    """
    A class to execute Chip 8 instructions against a Machine. The CPU keeps
    no state of its own between steps: everything it reads and writes lives
    on the machine it was given.
    """
    def __init__(self, machine):
        """
        :param machine: the Machine to execute against
        """
        self.machine = machine

    @property
    def registers(self):
        return self.machine.registers

    @property
    def v(self):
        return self.machine.registers['v']

    def step(self):
        """
        Fetch, decode and execute the instruction pointed to by the program
        counter. The program counter is advanced by 2 before the instruction
        runs, and control flow instructions adjust it from there. If the
        instruction fails the program counter is put back, so the machine is
        left exactly as it was before the step.

        :return: the Instruction executed
        :raises AddressOutOfRange: if the program counter is outside memory
        :raises StackOverflow: if a call is made with a full stack
        :raises StackUnderflow: if a return is made with an empty stack
        """
        pc = self.registers['pc']
        if not 0 <= pc <= MAX_MEMORY - 2:
            raise AddressOutOfRange(pc)
        operand = (self.machine.memory[pc] << 8) | self.machine.memory[pc + 1]
        return self.execute_instruction(operand)

    def execute_instruction(self, operand):
        """
        Execute an instruction word as if it had been fetched from the
        current program counter. The program counter is advanced by 2 first,
        and put back if the instruction fails.

        :param operand: the 16-bit instruction word
        :return: the Instruction executed
        :raises StackOverflow: if a call is made with a full stack
        :raises StackUnderflow: if a return is made with an empty stack
        """
        instruction = decode(operand)
        pc = self.registers['pc']
        self.registers['pc'] = pc + 2
        try:
            self.execute(instruction)
        except (StackOverflow, StackUnderflow):
            self.registers['pc'] = pc
            raise
        return instruction

    def execute(self, instruction):
        """
        Run the state transition for a single decoded instruction.

        :param instruction: the Instruction to execute
        """
        match instruction.mnemonic:
            case 'CLS':
                self.machine.framebuffer.clear()
            case 'RET':
                self.return_from_subroutine()
            case 'JUMP':
                self.registers['pc'] = instruction.nnn
            case 'CALL':
                self.jump_to_subroutine(instruction)
            case 'SKE_VAL':
                self.skip_if(self.v[instruction.x] == instruction.kk)
            case 'SKNE_VAL':
                self.skip_if(self.v[instruction.x] != instruction.kk)
            case 'SKE_REG':
                self.skip_if(self.v[instruction.x] == self.v[instruction.y])
            case 'SKNE_REG':
                self.skip_if(self.v[instruction.x] != self.v[instruction.y])
            case 'LOAD_VAL':
                self.v[instruction.x] = instruction.kk
            case 'ADD_VAL':
                self.v[instruction.x] = (self.v[instruction.x] + instruction.kk) & 0xFF
            case 'LOAD_REG':
                self.v[instruction.x] = self.v[instruction.y]
            case 'OR':
                self.v[instruction.x] |= self.v[instruction.y]
            case 'AND':
                self.v[instruction.x] &= self.v[instruction.y]
            case 'XOR':
                self.v[instruction.x] ^= self.v[instruction.y]
            case 'ADD_REG':
                self.add_reg_to_reg(instruction)
            case 'SUB':
                self.subtract_reg_from_reg(instruction)
            case 'SHR':
                self.right_shift_reg(instruction)
            case 'SUBN':
                self.subtract_reg_from_reg1(instruction)
            case 'SHL':
                self.left_shift_reg(instruction)
            case 'LOAD_INDEX':
                self.registers['index'] = instruction.nnn
            case 'JUMP_V0':
                self.registers['pc'] = self.v[0] + instruction.nnn
            case 'RAND':
                self.v[instruction.x] = self.machine.random_byte() & instruction.kk
            case 'DRAW':
                self.draw_sprite(instruction)
            case 'SKPR':
                self.skip_if(self.machine.keypad[self.v[instruction.x] % NUM_KEYS])
            case 'SKUP':
                self.skip_if(not self.machine.keypad[self.v[instruction.x] % NUM_KEYS])
            case 'LOAD_DELAY':
                self.v[instruction.x] = self.machine.timers['delay']
            case 'KEYD':
                self.wait_for_keypress(instruction)
            case 'SET_DELAY':
                self.machine.timers['delay'] = self.v[instruction.x]
            case 'SET_SOUND':
                self.machine.timers['sound'] = self.v[instruction.x]
            case 'ADD_INDEX':
                self.registers['index'] = (self.registers['index'] + self.v[instruction.x]) & 0xFFFF
            case 'LOAD_FONT':
                self.registers['index'] = FONT_START + FONT_CHARACTER_SIZE * self.v[instruction.x]
            case 'BCD':
                self.store_bcd_in_memory(instruction)
            case 'STOR':
                self.store_regs_in_memory(instruction)
            case 'READ':
                self.read_regs_from_memory(instruction)
            case 'UNKNOWN':
                logger.debug('Ignoring unknown op-code: %04X', instruction.operand)
            case _:
                raise ValueError('No handler for {}'.format(instruction.mnemonic))

    def skip_if(self, condition):
        """
        Skip the next instruction by advancing the program counter by a
        further 2 bytes when the condition holds.
        """
        if condition:
            self.registers['pc'] += 2

    def return_from_subroutine(self):
        """
        00EE - RET

        Return from subroutine. Pop the return address saved by the matching
        CALL off the stack and load it into the program counter.
        """
        if self.registers['sp'] == 0:
            raise StackUnderflow(self.registers['pc'] - 2)
        self.registers['sp'] -= 1
        self.registers['pc'] = self.machine.stack[self.registers['sp']]

    def jump_to_subroutine(self, instruction):
        """
        2nnn - CALL nnn

        Jump to subroutine. The program counter has already been advanced
        past the CALL, so the saved return address is the instruction that
        follows it:

           Bits:  15-12    11-8      7-4      3-0
                  unused  address  address  address
        """
        if self.registers['sp'] == STACK_DEPTH:
            raise StackOverflow(self.registers['pc'] - 2)
        self.machine.stack[self.registers['sp']] = self.registers['pc']
        self.registers['sp'] += 1
        self.registers['pc'] = instruction.nnn

    def add_reg_to_reg(self, instruction):
        """
        8xy4 - ADD  Vx, Vy

        Add the value in the source register to the value in the target
        register, and store the result in the target register. The register
        calculations are as follows:

           Bits:  15-12     11-8      7-4       3-0
                  unused   target    source      4

        If the sum does not fit in 8 bits, set a carry flag in register VF.
        """
        total = self.v[instruction.x] + self.v[instruction.y]
        self.v[instruction.x] = total & 0xFF
        self.v[0xF] = 1 if total > 0xFF else 0

    def subtract_reg_from_reg(self, instruction):
        """
        8xy5 - SUB  Vx, Vy

        Subtract the value in the source register from the value in the
        target register, and store the result in the target register.

           Bits:  15-12     11-8      7-4       3-0
                  unused   target    source      5

        If a borrow is NOT generated, set a carry flag in register VF.
        """
        target_reg = self.v[instruction.x]
        source_reg = self.v[instruction.y]
        self.v[instruction.x] = (target_reg - source_reg) & 0xFF
        self.v[0xF] = 1 if target_reg >= source_reg else 0

    def right_shift_reg(self, instruction):
        """
        8x06 - SHR  Vx

        Shift the bits in the specified register 1 bit to the right. Bit
        0 will be shifted into register VF.
        """
        bit_zero = self.v[instruction.x] & 0x1
        self.v[instruction.x] >>= 1
        self.v[0xF] = bit_zero

    def subtract_reg_from_reg1(self, instruction):
        """
        8xy7 - SUBN Vx, Vy

        Subtract the value in the target register from the value in the
        source register, and store the result in the target register.

           Bits:  15-12     11-8      7-4       3-0
                  unused   target    source      7

        If a borrow is NOT generated, set a carry flag in register VF.
        """
        target_reg = self.v[instruction.x]
        source_reg = self.v[instruction.y]
        self.v[instruction.x] = (source_reg - target_reg) & 0xFF
        self.v[0xF] = 1 if source_reg >= target_reg else 0

    def left_shift_reg(self, instruction):
        """
        8x0E - SHL  Vx

        Shift the bits in the specified register 1 bit to the left. Bit
        7 will be shifted into register VF.
        """
        bit_seven = (self.v[instruction.x] & 0x80) >> 7
        self.v[instruction.x] = (self.v[instruction.x] << 1) & 0xFF
        self.v[0xF] = bit_seven

    def draw_sprite(self, instruction):
        """
        Dxyn - DRAW Vx, Vy, n

        Draws the sprite pointed to in the index register at the coordinates
        held in Vx and Vy. Drawing is done via an XOR routine, meaning that
        if the target pixel is already turned on, and a pixel is set to be
        turned on at that same location via the draw, then the pixel is turned
        off. Each sprite is 8 bits (1 byte) wide. The n parameter sets how
        tall the sprite is. Consecutive bytes in the memory pointed to by the
        index register make up the rows of the sprite, most significant bit
        leftmost. For example, assume that the index register pointed to the
        following 7 bytes:

                       bit 7 6 5 4 3 2 1 0

           byte 0          0 1 1 1 1 1 0 0
           byte 1          0 1 0 0 0 0 0 0
           byte 2          0 1 0 0 0 0 0 0
           byte 3          0 1 1 1 1 1 0 0
           byte 4          0 1 0 0 0 0 0 0
           byte 5          0 1 0 0 0 0 0 0
           byte 6          0 1 1 1 1 1 0 0

        This would draw a character on the screen that looks like an 'E'.
        The starting coordinates wrap around the screen. Rows that run off
        the bottom wrap back to the top, but pixels that run off the right
        hand edge are not drawn. If drawing causes any pixel to be turned
        off, VF is set to 1, otherwise it is set to 0.

           Bits:  15-12     11-8      7-4       3-0
                  unused    x_source  y_source  num_bytes
        """
        framebuffer = self.machine.framebuffer
        x_pos = self.v[instruction.x] % framebuffer.width
        y_pos = self.v[instruction.y] % framebuffer.height
        collision = False

        for y_index in range(instruction.n):
            address = (self.registers['index'] + y_index) % MAX_MEMORY
            sprite_byte = self.machine.memory[address]
            y_coord = (y_pos + y_index) % framebuffer.height

            for x_index in range(SPRITE_WIDTH):
                x_coord = x_pos + x_index
                if x_coord >= framebuffer.width:
                    break
                if sprite_byte & (0x80 >> x_index):
                    if framebuffer.toggle_pixel(x_coord, y_coord):
                        collision = True

        self.v[0xF] = 1 if collision else 0

    def wait_for_keypress(self, instruction):
        """
        Fx0A - KEYD Vx

        Move the value of the lowest numbered key being held into the target
        register. If no key is held, the program counter is wound back so
        that this instruction runs again on the next step.
        """
        for key_index, pressed in enumerate(self.machine.keypad):
            if pressed:
                self.v[instruction.x] = key_index
                return
        self.registers['pc'] -= 2

    def store_bcd_in_memory(self, instruction):
        """
        Fx33 - BCD

        Take the value stored in Vx and place the digits in the following
        locations:

            hundreds   -> self.memory[index]
            tens       -> self.memory[index + 1]
            ones       -> self.memory[index + 2]

        For example, if the value is 123, then the following values will be
        placed at the specified locations:

             1 -> self.memory[index]
             2 -> self.memory[index + 1]
             3 -> self.memory[index + 2]
        """
        value = self.v[instruction.x]
        index = self.registers['index']
        for offset, digit in enumerate((value // 100, (value // 10) % 10, value % 10)):
            self.machine.memory[(index + offset) % MAX_MEMORY] = digit

    def store_regs_in_memory(self, instruction):
        """
        Fx55 - STOR [I], Vx

        Store registers V0 through Vx, inclusive, in the memory pointed to
        by the index register. The index register is left unchanged.
        """
        index = self.registers['index']
        for counter in range(instruction.x + 1):
            self.machine.memory[(index + counter) % MAX_MEMORY] = self.v[counter]

    def read_regs_from_memory(self, instruction):
        """
        Fx65 - READ Vx, [I]

        Read registers V0 through Vx, inclusive, from the memory pointed to
        by the index register. The index register is left unchanged.
        """
        index = self.registers['index']
        for counter in range(instruction.x + 1):
            self.v[counter] = self.machine.memory[(index + counter) % MAX_MEMORY]


def step(machine):
    """
    Execute one instruction on the machine.

    :param machine: the Machine to step
    :return: the Instruction executed
    """
    return CPU(machine).step()
