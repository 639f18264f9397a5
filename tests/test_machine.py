import unittest

from chip8.exception import InvalidKeyIndex, ProgramTooLarge
from chip8.machine import (
    FONT, FONT_START, MAX_MEMORY, MAX_PROGRAM_SIZE, Machine, PROGRAM_COUNTER_START,
)


class TestMachine(unittest.TestCase):
    def setUp(self):
        self.machine = Machine(seed=1234)

    def test_initial_state(self):
        self.assertEqual(PROGRAM_COUNTER_START, self.machine.registers['pc'])
        self.assertEqual([0] * 16, self.machine.registers['v'])
        self.assertEqual(0, self.machine.registers['index'])
        self.assertEqual(0, self.machine.registers['sp'])
        self.assertEqual([0] * 16, self.machine.stack)
        self.assertEqual([False] * 16, self.machine.keypad)
        self.assertEqual({'delay': 0, 'sound': 0}, self.machine.timers)
        self.assertTrue(self.machine.framebuffer.is_clear())

    def test_font_loaded_at_font_start(self):
        self.assertEqual(80, len(FONT))
        self.assertEqual(FONT, bytes(self.machine.memory[FONT_START:FONT_START + 80]))
        self.assertEqual(bytes(FONT_START), bytes(self.machine.memory[:FONT_START]))
        self.assertEqual(bytes(MAX_MEMORY - FONT_START - 80),
                         bytes(self.machine.memory[FONT_START + 80:]))

    def test_reset_clears_everything(self):
        self.machine.load_program(b'\x12\x34\x56')
        self.machine.registers['v'][3] = 9
        self.machine.registers['index'] = 0x300
        self.machine.registers['pc'] = 0x400
        self.machine.registers['sp'] = 2
        self.machine.stack[0] = 0x202
        self.machine.timers['delay'] = 10
        self.machine.timers['sound'] = 4
        self.machine.set_key(7, True)
        self.machine.memory[FONT_START] = 0
        self.machine.framebuffer.toggle_pixel(3, 3)
        self.machine.reset()
        fresh = Machine(seed=1234)
        self.assertEqual(fresh.registers, self.machine.registers)
        self.assertEqual(fresh.memory, self.machine.memory)
        self.assertEqual(fresh.stack, self.machine.stack)
        self.assertEqual(fresh.timers, self.machine.timers)
        self.assertEqual(fresh.keypad, self.machine.keypad)
        self.assertEqual(fresh.framebuffer, self.machine.framebuffer)

    def test_reset_is_idempotent(self):
        self.machine.reset()
        first = (bytes(self.machine.memory), str(self.machine))
        self.machine.reset()
        self.assertEqual(first, (bytes(self.machine.memory), str(self.machine)))

    def test_reset_replays_random_sequence(self):
        first = [self.machine.random_byte() for _ in range(10)]
        self.machine.reset()
        self.assertEqual(first, [self.machine.random_byte() for _ in range(10)])

    def test_seeded_machines_agree(self):
        other = Machine(seed=1234)
        self.assertEqual([self.machine.random_byte() for _ in range(20)],
                         [other.random_byte() for _ in range(20)])

    def test_random_byte_in_range(self):
        for _ in range(200):
            self.assertTrue(0 <= self.machine.random_byte() <= 255)

    def test_load_program_places_bytes(self):
        program = bytes(range(256)) * 3
        self.machine.load_program(program)
        self.assertEqual(program, bytes(self.machine.memory[0x200:0x200 + len(program)]))
        self.assertEqual(bytes(MAX_MEMORY - 0x200 - len(program)),
                         bytes(self.machine.memory[0x200 + len(program):]))
        self.assertEqual(FONT, bytes(self.machine.memory[FONT_START:FONT_START + 80]))

    def test_load_program_maximum_size(self):
        program = b'\xAB' * MAX_PROGRAM_SIZE
        self.machine.load_program(program)
        self.assertEqual(3584, MAX_PROGRAM_SIZE)
        self.assertEqual(0xAB, self.machine.memory[MAX_MEMORY - 1])

    def test_load_program_too_large_leaves_memory_unchanged(self):
        before = bytes(self.machine.memory)
        with self.assertRaises(ProgramTooLarge) as context:
            self.machine.load_program(b'\x01' * (MAX_PROGRAM_SIZE + 1))
        self.assertEqual(MAX_PROGRAM_SIZE + 1, context.exception.program_size)
        self.assertEqual(before, bytes(self.machine.memory))

    def test_set_key(self):
        self.machine.set_key(0xF, True)
        self.assertTrue(self.machine.keypad[0xF])
        self.machine.set_key(0xF, False)
        self.assertFalse(self.machine.keypad[0xF])

    def test_set_key_invalid_index(self):
        for key_index in (-1, 16, 100):
            with self.assertRaises(InvalidKeyIndex):
                self.machine.set_key(key_index, True)
        self.assertEqual([False] * 16, self.machine.keypad)

    def test_tick_timers_decrements(self):
        self.machine.timers['delay'] = 2
        self.machine.timers['sound'] = 1
        self.machine.tick_timers()
        self.assertEqual({'delay': 1, 'sound': 0}, self.machine.timers)
        self.machine.tick_timers()
        self.assertEqual({'delay': 0, 'sound': 0}, self.machine.timers)

    def test_tick_timers_stops_at_zero(self):
        self.machine.tick_timers()
        self.assertEqual({'delay': 0, 'sound': 0}, self.machine.timers)

    def test_sound_active(self):
        self.assertFalse(self.machine.sound_active)
        self.machine.timers['sound'] = 3
        self.assertTrue(self.machine.sound_active)

    def test_str_shows_registers(self):
        self.machine.registers['v'][0xA] = 0x3C
        dump = str(self.machine)
        self.assertIn('PC:  200', dump)
        self.assertIn('VA: 3C', dump)
