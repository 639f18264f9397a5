import unittest

from chip8.framebuffer import Framebuffer, SCREEN_HEIGHT, SCREEN_WIDTH


class TestFramebuffer(unittest.TestCase):
    def setUp(self):
        self.framebuffer = Framebuffer()

    def test_dimensions(self):
        self.assertEqual(64, SCREEN_WIDTH)
        self.assertEqual(32, SCREEN_HEIGHT)
        rows = self.framebuffer.rows()
        self.assertEqual(32, len(rows))
        self.assertTrue(all(len(row) == 64 for row in rows))

    def test_toggle_pixel(self):
        self.assertFalse(self.framebuffer.toggle_pixel(63, 31))
        self.assertEqual(1, self.framebuffer.get_pixel(63, 31))
        self.assertTrue(self.framebuffer.toggle_pixel(63, 31))
        self.assertEqual(0, self.framebuffer.get_pixel(63, 31))

    def test_clear(self):
        self.framebuffer.toggle_pixel(1, 2)
        self.assertFalse(self.framebuffer.is_clear())
        self.framebuffer.clear()
        self.assertTrue(self.framebuffer.is_clear())

    def test_rows_and_str(self):
        self.framebuffer.toggle_pixel(2, 1)
        self.assertEqual(1, self.framebuffer.rows()[1][2])
        lines = str(self.framebuffer).split('\n')
        self.assertEqual('..#', lines[1][:3])

    def test_equality(self):
        other = Framebuffer()
        self.assertEqual(other, self.framebuffer)
        other.toggle_pixel(0, 0)
        self.assertNotEqual(other, self.framebuffer)
