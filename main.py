import time
import sys

# pyglet imports
import pyglet
from pyglet.window import key, mouse
import pyglet.gl as gl
from pyglet.math import Mat4

# standard lib imports
import numpy as np

# local module imports
import config
import logutil
from blocks import BLOCK_OPAQUE
from camera import Camera
from demo_world import build_world
from oracle import OVERWORLD, THE_NETHER, THE_END
from overlay import FrameContext, LightOverlay
from settings import Settings
from text_renderer import PygletTextRenderer, to_mat4
from util import translation
from config import TICKS_PER_SEC, FLYING_SPEED, WALKING_SPEED, PLAYER_EYE_HEIGHT

DIMENSIONS = (OVERWORLD, THE_NETHER, THE_END)
OUTLINE_COLOR = (40, 40, 40, 255)


def top_outline_vertices(world):
    """ Line segments around the top face of every opaque block that has
    open space above it.

    """
    opaque = BLOCK_OPAQUE[world.blocks]
    covered = np.zeros_like(opaque)
    covered[:, :-1, :] = opaque[:, 1:, :]
    cells = np.argwhere(opaque & ~covered) + np.array(world.origin)
    x = cells[:, 0:1].astype(np.float32)
    y = cells[:, 1:2].astype(np.float32) + 1.0 + 1e-3
    z = cells[:, 2:3].astype(np.float32)
    corners = [(0, 0), (1, 0), (1, 0), (1, 1), (1, 1), (0, 1), (0, 1), (0, 0)]
    verts = np.concatenate([np.concatenate([x + cx, y, z + cz], axis=1) for cx, cz in corners], axis=1)
    return verts.ravel()


class Window(pyglet.window.Window):

    def __init__(self, world, overlay, *args, **kwargs):
        super(Window, self).__init__(*args, **kwargs)

        # Whether or not the window exclusively captures the mouse.
        self.exclusive = False

        # First element is -1 when moving forward, 1 when moving back, and 0
        # otherwise. The second element is -1 when moving left, 1 when moving
        # right, and 0 otherwise.
        self.strafe = [0, 0]
        self.fly_climb = 0
        # No gravity or collision in the demo; flying only changes the speed.
        self.flying = True

        self.world = world
        self.overlay = overlay
        # Mirrors the host's debug screen: both light values are shown.
        self.debug = False

        cx = world.origin[0] + world.shape[0] // 2
        cz = world.origin[2] + world.shape[2] // 2
        ground = world.surface_y(cx, cz) or world.origin[1] + world.shape[1] // 2
        # Feet position, y is the vertical axis.
        self.position = (cx + 0.5, float(ground), cz + 0.5)
        # (yaw, pitch) in degrees.
        self.rotation = (0.0, -20.0)

        self.frame_id = 0
        self.last_draw_ms = 0.0
        self.labels_drawn = 0

        self.shader = pyglet.graphics.get_default_shader()
        self.batch = pyglet.graphics.Batch()
        verts = top_outline_vertices(world)
        count = len(verts) // 3
        self.outlines = self.shader.vertex_list(
            count,
            gl.GL_LINES,
            batch=self.batch,
            position=('f', verts),
            colors=('Bn', OUTLINE_COLOR * count),
        )
        logutil.log("MAIN", f"outline segments={count // 2}")

        self.text_renderer = PygletTextRenderer(self)
        self.label = pyglet.text.Label('', font_name='Arial', font_size=14,
            x=10, y=self.height - 10, anchor_x='left', anchor_y='top',
            color=(0, 0, 0, 255))

        pyglet.clock.schedule_interval(self.update, 1.0 / TICKS_PER_SEC)

    def set_exclusive_mouse(self, exclusive):
        """ If `exclusive` is True, the game will capture the mouse, if False
        the game will ignore the mouse.

        """
        super(Window, self).set_exclusive_mouse(exclusive)
        self.exclusive = exclusive

    def get_camera(self):
        x, y, z = self.position
        yaw, pitch = self.rotation
        return Camera((x, y + PLAYER_EYE_HEIGHT, z), yaw, pitch)

    def get_motion_vector(self):
        """ Returns the current motion vector indicating the velocity of the
        camera.

        """
        dx, dy, dz = self.get_camera().get_motion_vector(self.strafe, self.flying)
        if self.fly_climb != 0:
            dy = self.fly_climb
        return (dx, dy, dz)

    def update(self, dt):
        """ Scheduled by the pyglet clock TICKS_PER_SEC times a second. """
        self.overlay.on_input_tick()
        dt = min(dt, 0.2)
        dx, dy, dz = self.get_motion_vector()
        x, y, z = self.position
        speed = FLYING_SPEED if self.flying else WALKING_SPEED
        d = dt * speed
        self.position = (x + dx * d, y + dy * d, z + dz * d)

    def on_mouse_press(self, x, y, button, modifiers):
        if not self.exclusive and button == mouse.LEFT:
            self.set_exclusive_mouse(True)

    def on_mouse_motion(self, x, y, dx, dy):
        if self.exclusive:
            m = config.MOUSE_SENSITIVITY
            x, y = self.rotation
            x = x + dx * m
            y = max(-config.MAX_PITCH, min(config.MAX_PITCH, y + dy * m))
            self.rotation = (x, y)

    def on_key_press(self, symbol, modifiers):
        if symbol == key.W:
            self.strafe[0] -= 1
        elif symbol == key.S:
            self.strafe[0] += 1
        elif symbol == key.A:
            self.strafe[1] -= 1
        elif symbol == key.D:
            self.strafe[1] += 1
        elif symbol == key.SPACE:
            self.fly_climb += 1
        elif symbol == key.LSHIFT:
            self.fly_climb -= 1
        elif symbol == key.TAB:
            self.flying = not self.flying
        elif symbol == key.ESCAPE:
            self.set_exclusive_mouse(False)
        elif symbol == key.F9:
            self.overlay.request_toggle()
        elif symbol == key.F3:
            self.debug = not self.debug
            logutil.log("MAIN", f"debug labels {'on' if self.debug else 'off'}")

    def on_key_release(self, symbol, modifiers):
        if symbol == key.W:
            self.strafe[0] += 1
        elif symbol == key.S:
            self.strafe[0] -= 1
        elif symbol == key.A:
            self.strafe[1] += 1
        elif symbol == key.D:
            self.strafe[1] -= 1
        elif symbol in (key.SPACE, key.LSHIFT):
            self.fly_climb = 0

    def on_resize(self, width, height):
        self.label.y = height - 10
        return super(Window, self).on_resize(width, height)

    def set_2d(self):
        width, height = self.get_framebuffer_size()
        gl.glDisable(gl.GL_DEPTH_TEST)
        gl.glViewport(0, 0, width, height)
        self.projection = Mat4.orthogonal_projection(0, self.width, 0, self.height, -255, 255)
        self.view = Mat4()

    def set_3d(self, camera):
        width, height = self.get_framebuffer_size()
        gl.glEnable(gl.GL_DEPTH_TEST)
        gl.glViewport(0, 0, width, height)
        self.projection = to_mat4(camera.projection_matrix(self.aspect()))
        cx, cy, cz = camera.position
        self.view = to_mat4(camera.view_matrix() @ translation(-cx, -cy, -cz))

    def aspect(self):
        return self.width / float(max(self.height, 1))

    def on_draw(self):
        frame_start = time.perf_counter()
        self.frame_id += 1
        logutil.set_frame(self.frame_id)
        logutil.log("FRAME", "start")
        self.clear()
        camera = self.get_camera()
        self.set_3d(camera)
        self.batch.draw()

        t0 = time.perf_counter()
        context = FrameContext(
            world=self.world,
            player_position=self.position,
            camera=camera,
            text_renderer=self.text_renderer,
            debug=self.debug,
            frustum=camera.frustum(self.aspect()),
        )
        self.labels_drawn = self.overlay.on_render_frame(context)
        overlay_ms = (time.perf_counter() - t0) * 1000.0

        self.set_2d()
        self.draw_label()
        self.last_draw_ms = (time.perf_counter() - frame_start) * 1000.0
        logutil.log("MAINLOOP", f"draw overlay_ms={overlay_ms:.2f} total_ms={self.last_draw_ms:.2f}")

    def draw_label(self):
        """ Draw the label in the top left of the screen. """
        x, y, z = self.position
        state = 'on' if self.overlay.enabled else 'off'
        self.label.text = (
            f'{self.world.dimension} ({x:.1f}, {y:.1f}, {z:.1f}) '
            f'light levels {state} [F9] labels={self.labels_drawn} '
            f'rebuild_ms={self.overlay.cache.last_rebuild_ms:.1f}'
        )
        self.label.draw()


def setup():
    """ Basic OpenGL configuration. """
    gl.glClearColor(0.5, 0.69, 1.0, 1)
    gl.glEnable(gl.GL_BLEND)
    gl.glBlendFunc(gl.GL_SRC_ALPHA, gl.GL_ONE_MINUS_SRC_ALPHA)


def main():
    dimension = OVERWORLD
    if len(sys.argv) > 1:
        dimension = sys.argv[1]
        if dimension not in DIMENSIONS:
            logutil.log("MAIN", f"unknown dimension {dimension!r}, labels will be neutral", level="WARN")
    world = build_world(dimension=dimension)
    overlay = LightOverlay(Settings.from_config(), enabled=True)
    window = Window(world, overlay, width=960, height=600, caption='Light levels', resizable=True, vsync=True)
    setup()
    pyglet.app.run()


if __name__ == '__main__':
    main()
