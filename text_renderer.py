import numpy as np
import pyglet
from pyglet.math import Mat4

from draw import TextRenderer, LAYER_NORMAL
from util import scaling

# pyglet lays glyphs out with y up; the overlay's text space has y down.
FLIP_Y = scaling(1.0, -1.0, 1.0)
# Shadow sits one text pixel behind the label to avoid z-fighting.
SHADOW_DEPTH = -1.0


def to_mat4(matrix):
    """ numpy row-major 4x4 -> pyglet column-major Mat4. """
    return Mat4(*np.asarray(matrix, dtype=float).T.ravel().tolist())


def argb_to_rgba(color):
    return ((color >> 16) & 0xFF, (color >> 8) & 0xFF, color & 0xFF, (color >> 24) & 0xFF)


def shadow_color(color):
    return (color & 0xFF000000) | ((color & 0xFCFCFC) >> 2)


class PygletTextRenderer(TextRenderer):

    def __init__(self, window, font_name='Arial', font_size=9):
        self.window = window
        self.font_name = font_name
        self.font_size = font_size
        font = pyglet.font.load(font_name, font_size)
        self.font_height = font.ascent - font.descent
        self._labels = {}
        self._widths = {}

    def _label(self, text, color):
        key = (text, color)
        label = self._labels.get(key)
        if label is None:
            label = pyglet.text.Label(
                text,
                font_name=self.font_name,
                font_size=self.font_size,
                color=argb_to_rgba(color),
                anchor_x='left',
                anchor_y='bottom',
            )
            self._labels[key] = label
        return label

    def width(self, text):
        w = self._widths.get(text)
        if w is None:
            w = self._label(text, 0xFFFFFFFF).content_width
            self._widths[text] = w
        return w

    def _draw_label(self, text, x, y, z, color, view):
        label = self._label(text, color)
        # Top edge at text-space y, i.e. bottom edge at -(y + height) after the flip.
        label.position = (x, -(y + self.font_height), z)
        self.window.view = view
        label.draw()

    def draw(self, text, x, y, color, shadow, matrix, layer=LAYER_NORMAL):
        view = to_mat4(np.asarray(matrix) @ FLIP_Y)
        if shadow:
            self._draw_label(text, x + 1, y + 1, SHADOW_DEPTH, shadow_color(color), view)
        self._draw_label(text, x, y, 0.0, color, view)
