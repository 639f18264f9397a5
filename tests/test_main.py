import os
import tempfile
import unittest

import pygame

from chip8.machine import MAX_PROGRAM_SIZE, Machine
from chip8.main import KEY_MAPPINGS, TIMER, handle_event, load_rom, parse_arguments, run


class TestArguments(unittest.TestCase):
    def test_defaults(self):
        args = parse_arguments(['game.ch8'])
        self.assertEqual('game.ch8', args.rom)
        self.assertEqual(10, args.scale)
        self.assertEqual(700, args.rate)
        self.assertIsNone(args.seed)
        self.assertFalse(args.trace)
        self.assertFalse(args.verbose)

    def test_options(self):
        args = parse_arguments(['game.ch8', '-s', '4', '--rate', '500', '--seed', '9', '-t'])
        self.assertEqual(4, args.scale)
        self.assertEqual(500, args.rate)
        self.assertEqual(9, args.seed)
        self.assertTrue(args.trace)


class TestEvents(unittest.TestCase):
    def setUp(self):
        self.machine = Machine()

    def test_key_mappings_cover_keypad(self):
        self.assertEqual(set(range(16)), set(KEY_MAPPINGS.values()))

    def test_key_down_and_up(self):
        self.assertTrue(handle_event(self.machine, pygame.event.Event(pygame.KEYDOWN, key=pygame.K_v)))
        self.assertTrue(self.machine.keypad[0xF])
        self.assertTrue(handle_event(self.machine, pygame.event.Event(pygame.KEYUP, key=pygame.K_v)))
        self.assertFalse(self.machine.keypad[0xF])

    def test_unmapped_key_is_ignored(self):
        self.assertTrue(handle_event(self.machine, pygame.event.Event(pygame.KEYDOWN, key=pygame.K_p)))
        self.assertEqual([False] * 16, self.machine.keypad)

    def test_timer_event_ticks(self):
        self.machine.timers['delay'] = 5
        handle_event(self.machine, pygame.event.Event(TIMER))
        self.assertEqual(4, self.machine.timers['delay'])

    def test_quit_events(self):
        self.assertFalse(handle_event(self.machine, pygame.event.Event(pygame.QUIT)))
        self.assertFalse(handle_event(self.machine, pygame.event.Event(pygame.KEYDOWN, key=pygame.K_ESCAPE)))


class TestRun(unittest.TestCase):
    def test_load_rom(self):
        with tempfile.TemporaryDirectory() as directory:
            filename = os.path.join(directory, 'test.ch8')
            with open(filename, 'wb') as rom:
                rom.write(b'\x00\xE0')
            self.assertEqual(b'\x00\xE0', load_rom(filename))

    def test_missing_rom(self):
        with tempfile.TemporaryDirectory() as directory:
            args = parse_arguments([os.path.join(directory, 'missing.ch8')])
            self.assertEqual(1, run(args))

    def test_rom_too_large(self):
        with tempfile.TemporaryDirectory() as directory:
            filename = os.path.join(directory, 'big.ch8')
            with open(filename, 'wb') as rom:
                rom.write(b'\x00' * (MAX_PROGRAM_SIZE + 1))
            self.assertEqual(1, run(parse_arguments([filename])))
