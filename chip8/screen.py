from pygame import display, HWSURFACE, DOUBLEBUF, Color, draw

from chip8.framebuffer import SCREEN_WIDTH, SCREEN_HEIGHT

SCREEN_NAME = 'CHIP8 Emulator'

# Appended to the window caption while the sound timer is running
SOUND_INDICATOR = ' [BEEP]'

# The depth of the screen is the number of bits used to represent the color
# of a pixel.
SCREEN_DEPTH = 8

# The colors of the pixels to draw. The Chip 8 supports two colors: 0 (off)
# and 1 (on). The format of the colors is in RGBA format.
PIXEL_COLORS = {
    0: Color(0, 0, 0, 255),
    1: Color(250, 250, 250, 255)
}


class Screen(object):
    """
    A class to show a Chip 8 framebuffer in a pygame window. The original
    resolution of the Chip 8 was 64 x 32, which is quite small, so each
    pixel is drawn as a square of scale_factor x scale_factor.
    """
    def __init__(self, scale_factor, screen_height=SCREEN_HEIGHT, screen_width=SCREEN_WIDTH):
        """
        :param scale_factor: the scaling factor to apply to the screen
        :param screen_height: the height of the screen in Chip 8 pixels
        :param screen_width: the width of the screen in Chip 8 pixels
        """
        self.screen_height = screen_height
        self.screen_width = screen_width
        self.scale_factor = scale_factor
        self.surface = None
        self.sound_on = False

    def init_display(self):
        """
        Attempts to initialize a screen with the specified height and width.
        The screen will by default be of depth SCREEN_DEPTH, and will be
        double-buffered in hardware (if possible).
        """
        display.init()
        self.surface = display.set_mode(
            ((self.screen_width * self.scale_factor),
             (self.screen_height * self.scale_factor)),
            HWSURFACE | DOUBLEBUF,
            SCREEN_DEPTH)
        display.set_caption(SCREEN_NAME)
        self.surface.fill(PIXEL_COLORS[0])
        display.flip()

    def draw_pixel(self, x_pos, y_pos, pixel_color):
        """
        Paint a single Chip 8 pixel onto the back buffer. The coordinate
        system starts with (0, 0) being in the top left of the screen.

        :param x_pos: the x coordinate to place the pixel
        :param y_pos: the y coordinate to place the pixel
        :param pixel_color: the color of the pixel to draw
        """
        draw.rect(self.surface,
                  PIXEL_COLORS[pixel_color],
                  (x_pos * self.scale_factor, y_pos * self.scale_factor,
                   self.scale_factor, self.scale_factor))

    def get_pixel(self, x_pos, y_pos):
        """
        Returns whether the pixel is on (1) or off (0) on the surface at the
        specified location.
        """
        pixel_color = self.surface.get_at((x_pos * self.scale_factor, y_pos * self.scale_factor))
        return 0 if pixel_color == PIXEL_COLORS[0] else 1

    def render(self, framebuffer):
        """
        Paint every pixel of the framebuffer and flip the display.

        :param framebuffer: the Framebuffer to show
        """
        for y_pos, row in enumerate(framebuffer.rows()):
            for x_pos, pixel_color in enumerate(row):
                self.draw_pixel(x_pos, y_pos, pixel_color)
        display.flip()

    def set_sound(self, sound_on):
        """
        Show or hide the sound indicator in the window caption.
        """
        if sound_on == self.sound_on:
            return
        self.sound_on = sound_on
        display.set_caption(SCREEN_NAME + (SOUND_INDICATOR if sound_on else ''))
