"""
Command line driver that wires a Chip 8 machine to a pygame window and
keyboard, and runs it in real time.
"""
import argparse
import logging
import sys
from pathlib import Path

import pygame

from chip8.cpu import CPU
from chip8.decode import disassemble
from chip8.exception import Chip8Exception
from chip8.machine import Machine
from chip8.screen import Screen

logger = logging.getLogger(__name__)

# A simple timer event used for the delay and sound timers
TIMER = pygame.USEREVENT + 1

# Delay timer decrement interval (in ms), roughly 60 times per second
DELAY_INTERVAL = 17

# Sets which keys on the keyboard map to the Chip 8 keys. The hex keypad
#
#     1 2 3 C
#     4 5 6 D
#     7 8 9 E
#     A 0 B F
#
# is laid over the left hand block of a QWERTY keyboard.
KEY_MAPPINGS = {
    pygame.K_1: 0x1,
    pygame.K_2: 0x2,
    pygame.K_3: 0x3,
    pygame.K_4: 0xC,
    pygame.K_q: 0x4,
    pygame.K_w: 0x5,
    pygame.K_e: 0x6,
    pygame.K_r: 0xD,
    pygame.K_a: 0x7,
    pygame.K_s: 0x8,
    pygame.K_d: 0x9,
    pygame.K_f: 0xE,
    pygame.K_z: 0xA,
    pygame.K_x: 0x0,
    pygame.K_c: 0xB,
    pygame.K_v: 0xF,
}

# Instructions after which the screen needs repainting
SCREEN_MNEMONICS = ('CLS', 'DRAW')


def load_rom(filename):
    """
    Read the raw bytes of a ROM file.

    :param filename: the name of the file to load
    :return: the file contents
    """
    logger.info('Loading ROM %s', filename)
    return Path(filename).read_bytes()


def handle_event(machine, event):
    """
    Apply a single pygame event to the machine.

    :param machine: the Machine to update
    :param event: the pygame event
    :return: False if the event asks the emulator to quit
    """
    if event.type == pygame.QUIT:
        return False
    if event.type == TIMER:
        machine.tick_timers()
    elif event.type in (pygame.KEYDOWN, pygame.KEYUP):
        if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
            return False
        if event.key in KEY_MAPPINGS:
            machine.set_key(KEY_MAPPINGS[event.key], event.type == pygame.KEYDOWN)
    return True


def run(args):
    """
    Runs the main emulator loop with the specified arguments.

    :param args: the parsed command-line arguments
    :return: the process exit status
    """
    machine = Machine(seed=args.seed)
    try:
        machine.load_program(load_rom(args.rom))
    except (OSError, Chip8Exception) as error:
        logger.error('Could not load %s: %s', args.rom, error)
        return 1

    pygame.init()
    screen = Screen(scale_factor=args.scale)
    screen.init_display()
    cpu = CPU(machine)
    clock = pygame.time.Clock()
    pygame.time.set_timer(TIMER, DELAY_INTERVAL)
    running = True

    try:
        while running:
            clock.tick(args.rate)
            pc = machine.registers['pc']
            try:
                instruction = cpu.step()
            except Chip8Exception as error:
                logger.error('Halted at %04X: %s', pc, error)
                logger.debug('Machine state:\n%s', machine)
                return 1

            if args.trace:
                logger.debug('%04X  %04X  %s', pc, instruction.operand,
                             disassemble(instruction.operand))
            if instruction.mnemonic in SCREEN_MNEMONICS:
                screen.render(machine.framebuffer)

            for event in pygame.event.get():
                if not handle_event(machine, event):
                    running = False

            if machine.sound_active != screen.sound_on:
                logger.debug('Sound %s', 'on' if machine.sound_active else 'off')
                screen.set_sound(machine.sound_active)
    finally:
        pygame.quit()
    return 0


def parse_arguments(argv=None):
    parser = argparse.ArgumentParser(
        description="Starts a simple Chip 8 emulator."
    )
    parser.add_argument(
        "rom", help="the ROM file to load on startup")
    parser.add_argument(
        "-s", "--scale", help="the scale factor to apply to the display "
                              "(default is 10)", type=int, default=10, dest="scale")
    parser.add_argument(
        "-r", "--rate", help="the number of instructions to execute per second "
                             "(default is 700)", type=int, default=700, dest="rate")
    parser.add_argument(
        "--seed", help="seed for the random number generator", type=int, default=None)
    parser.add_argument(
        "-t", "--trace", help="log every instruction executed", action="store_true")
    parser.add_argument(
        "-v", "--verbose", help="enable debug logging", action="store_true")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_arguments(argv)
    logging.basicConfig(
        level=logging.DEBUG if (args.verbose or args.trace) else logging.INFO,
        format="[%(levelname)s]:  %(message)s",
        stream=sys.stdout)
    return run(args)


if __name__ == "__main__":
    sys.exit(main())
