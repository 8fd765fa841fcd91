"""Per-frame drawing of cached light level labels.

Each label is a billboard: moved to its block, turned to face the camera
and scaled from font pixels down to world units. Text space has y growing
downwards, hence the negative y scale.
"""
from util import scaling, translation

LAYER_NORMAL = 'normal'


class TextRenderer(object):
    """ Places text in the world through a 4x4 model-view matrix.

    Defaults to monospace metrics; real renderers measure their font.

    """
    glyph_width = 6
    font_height = 9

    def width(self, text):
        return len(text) * self.glyph_width

    def draw(self, text, x, y, color, shadow, matrix, layer=LAYER_NORMAL):
        """ Draw `text` with its top-left corner at (`x`, `y`) in text space.

        `color` is 32-bit ARGB; with `shadow` a darker copy is drawn one
        pixel down and to the right first.

        """
        raise NotImplementedError


def camera_base_matrix(camera):
    cx, cy, cz = camera.position
    return camera.view_matrix() @ translation(-cx, -cy, -cz)


def placement_matrix(target, rotation, base):
    x, y, z = target.position
    s = target.scale
    return (base
            @ translation(x + 0.5, y + target.offset_y, z + 0.5)
            @ rotation
            @ scaling(s, -s, s))


def draw_targets(targets, camera, renderer):
    """ Emit one centered, shadowed label per target; returns the count. """
    base = camera_base_matrix(camera)
    rotation = camera.rotation_matrix()
    count = 0
    for target in targets:
        matrix = placement_matrix(target, rotation, base)
        text_width = renderer.width(target.label)
        renderer.draw(
            target.label,
            -text_width / 2.0,
            -renderer.font_height / 2.0,
            target.color,
            True,
            matrix,
            LAYER_NORMAL,
        )
        count += 1
    return count
