import numpy as np


class Frustum(object):
    """ Six clip planes pulled out of a view-projection matrix.

    The view is camera-relative (camera at the origin), so boxes are shifted
    by `origin` before testing. Planes point inwards: a point p is inside
    when n.p + d >= 0 for every plane.

    """

    def __init__(self, planes, origin=(0.0, 0.0, 0.0)):
        self.planes = np.asarray(planes, dtype=float).reshape(6, 4)
        self.origin = np.asarray(origin, dtype=float)

    @classmethod
    def from_matrix(cls, view_projection, origin=(0.0, 0.0, 0.0)):
        m = np.asarray(view_projection, dtype=float).reshape(4, 4)
        r0, r1, r2, r3 = m
        planes = np.array([
            r3 + r0,  # left
            r3 - r0,  # right
            r3 + r1,  # bottom
            r3 - r1,  # top
            r3 + r2,  # near
            r3 - r2,  # far
        ])
        norms = np.linalg.norm(planes[:, :3], axis=1)
        norms[norms == 0] = 1.0
        return cls(planes / norms[:, np.newaxis], origin)

    def is_visible(self, box):
        """ Conservative AABB test: False only when `box` lies entirely
        outside one of the planes.

        """
        lo = np.array(box[:3], dtype=float) - self.origin
        hi = np.array(box[3:], dtype=float) - self.origin
        normals = self.planes[:, :3]
        # Corner of the box furthest along each plane normal.
        p = np.where(normals >= 0, hi, lo)
        dist = np.einsum('ij,ij->i', normals, p) + self.planes[:, 3]
        return bool(np.all(dist >= 0))
