"""
The monochrome pixel grid drawn into by the Chip 8 sprite instruction.
"""

# The width of the screen in pixels
SCREEN_WIDTH = 64

# The height of the screen in pixels
SCREEN_HEIGHT = 32


class Framebuffer(object):
    """
    A class to hold the Chip 8 display memory. The original Chip 8 screen was
    64 x 32 with 2 colors, stored here as 0 (off) and 1 (on). Pixels are
    never set directly by the CPU, only toggled, so the only mutators are
    toggle_pixel and clear.
    """
    def __init__(self, width=SCREEN_WIDTH, height=SCREEN_HEIGHT):
        """
        Initialize a blank framebuffer.

        :param width: the width of the screen in pixels
        :param height: the height of the screen in pixels
        """
        self.width = width
        self.height = height
        self.pixels = bytearray(width * height)

    def __eq__(self, other):
        if not isinstance(other, Framebuffer):
            return NotImplemented
        return (self.width, self.height, self.pixels) == \
            (other.width, other.height, other.pixels)

    def __str__(self):
        return '\n'.join(
            ''.join('#' if pixel else '.' for pixel in row) for row in self.rows())

    def get_pixel(self, x_pos, y_pos):
        """
        Returns whether the pixel is on (1) or off (0) at the specified
        location. The coordinate system starts with (0, 0) being in the top
        left of the screen.

        :param x_pos: the x coordinate to check
        :param y_pos: the y coordinate to check
        :return: the color of the specified pixel (0 or 1)
        """
        return self.pixels[y_pos * self.width + x_pos]

    def toggle_pixel(self, x_pos, y_pos):
        """
        Flip the pixel at the specified location.

        :param x_pos: the x coordinate of the pixel
        :param y_pos: the y coordinate of the pixel
        :return: True if the pixel was turned from on to off
        """
        offset = y_pos * self.width + x_pos
        self.pixels[offset] ^= 1
        return self.pixels[offset] == 0

    def clear(self):
        """
        Turns off all the pixels on the screen.
        """
        self.pixels[:] = bytes(len(self.pixels))

    def is_clear(self):
        return not any(self.pixels)

    def rows(self):
        """
        Returns the screen contents as a list of rows, each row a list of
        0 / 1 pixel values. This is what display sinks read.
        """
        return [list(self.pixels[y_pos * self.width:(y_pos + 1) * self.width])
                for y_pos in range(self.height)]
