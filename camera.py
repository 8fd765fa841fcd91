import math

import numpy as np

import config
from frustum import Frustum
from util import rotation_x, rotation_y


def perspective(aspect, fov, near, far):
    """ OpenGL style perspective projection, `fov` is vertical in degrees. """
    f = 1.0 / math.tan(math.radians(fov) / 2.0)
    m = np.zeros((4, 4))
    m[0, 0] = f / aspect
    m[1, 1] = f
    m[2, 2] = (far + near) / (near - far)
    m[2, 3] = 2.0 * far * near / (near - far)
    m[3, 2] = -1.0
    return m


class Camera(object):
    """ Eye position plus yaw/pitch in degrees.

    Yaw 0 looks down -z and grows towards +x; pitch grows looking up.

    """

    def __init__(self, position, yaw=0.0, pitch=0.0):
        self.position = tuple(float(p) for p in position)
        self.yaw = yaw
        self.pitch = pitch

    def get_sight_vector(self):
        """ Returns the current line of sight vector indicating the direction
        the camera is looking.

        """
        x, y = self.yaw, self.pitch
        # m is 1 when looking ahead parallel to the ground and 0 when looking
        # straight up or down.
        m = math.cos(math.radians(y))
        dy = math.sin(math.radians(y))
        dx = math.cos(math.radians(x - 90)) * m
        dz = math.sin(math.radians(x - 90)) * m
        return (dx, dy, dz)

    def get_motion_vector(self, strafe, flying=False):
        """ Unit direction for the movement keys.

        `strafe` is (forward/back, left/right) with -1 for forward and left,
        1 for back and right. Flying straight ahead or back follows the line
        of sight; anything else stays level.

        """
        if not any(strafe):
            return (0.0, 0.0, 0.0)
        if flying and strafe[1] == 0:
            sign = -strafe[0]
            dx, dy, dz = self.get_sight_vector()
            return (dx * sign, dy * sign, dz * sign)
        angle = math.radians(self.yaw + math.degrees(math.atan2(*strafe)))
        return (math.cos(angle), 0.0, math.sin(angle))

    def rotation_matrix(self):
        """ Camera orientation in world space; turns a quad facing +z into
        one facing the camera.

        """
        return rotation_y(math.radians(-self.yaw)) @ rotation_x(math.radians(self.pitch))

    def view_matrix(self):
        # View is camera-relative: the camera sits at the origin.
        return self.rotation_matrix().T

    def projection_matrix(self, aspect, fov=None, near=None, far=None):
        return perspective(
            aspect,
            config.FOV if fov is None else fov,
            config.NEAR_PLANE if near is None else near,
            config.FAR_PLANE if far is None else far,
        )

    def frustum(self, aspect, fov=None, near=None, far=None):
        view_projection = self.projection_matrix(aspect, fov, near, far) @ self.view_matrix()
        return Frustum.from_matrix(view_projection, self.position)
