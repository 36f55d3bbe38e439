#-------------------------------------------------------------------------------
# Planar convex geometry used by the twist algorithm.
#
# Polygons are arrays of shape (n, 2) whose rows are vertices in
# counter-clockwise order. A single point (n = 1) and a segment (n = 2) are
# legal polygons. Polygon is the mutable version used for the sets that are
# built one vertex at a time.
#-------------------------------------------------------------------------------

import math
import numpy as np

from .errors import NumericalDegenerateError


__all__ = ['convex_hull', 'minkowski_sum', 'clip', 'extreme_index', 'is_convex', 'hausdorffnorm',
           'polygon_distance', 'polygon_hausdorff', 'Polygon']


def _cross(o, a, b):
    return (a[0] - o[0])*(b[1] - o[1]) - (a[1] - o[1])*(b[0] - o[0])


def _dist(a, b):
    return math.hypot(a[0] - b[0], a[1] - b[1])


def _segment_dist(p, a, b):
    ab0, ab1 = b[0] - a[0], b[1] - a[1]
    L2 = ab0*ab0 + ab1*ab1
    if L2 == 0:
        return _dist(p, a)
    t = min(max(((p[0] - a[0])*ab0 + (p[1] - a[1])*ab1)/L2, 0.0), 1.0)
    return math.hypot(p[0] - a[0] - t*ab0, p[1] - a[1] - t*ab1)


def _flat(a, p, b, tol):
    # p is within tol of the chord ab and projects strictly inside it, so
    # dropping p moves the boundary by at most tol
    if _cross(a, p, b) > tol*_dist(a, b):
        return False
    return ((p[0] - a[0])*(b[0] - a[0]) + (p[1] - a[1])*(b[1] - a[1]) > 0 and
            (p[0] - b[0])*(a[0] - b[0]) + (p[1] - b[1])*(a[1] - b[1]) > 0)


def _dedupe(vertices, tol):
    out = []
    for p in vertices:
        if not out or _dist(out[-1], p) > tol:
            out.append(p)
    while len(out) > 1 and _dist(out[0], out[-1]) <= tol:
        out.pop()
    return out


def _simplify(vertices, tol):
    out = list(vertices)
    k = 0
    while len(out) > 2 and k < len(out):
        if _flat(out[k - 1], out[k], out[(k + 1) % len(out)], tol):
            del out[k]
            k = max(k - 1, 0)
        else:
            k += 1
    return out


def convex_hull(points, tol=0.0):
    '''
    Convex hull of a set of points (Andrew's monotone chain).
    INPUTS:
    points: array-like of shape (n, 2)
    tol:    vertices within tol of each other, and vertices within tol of
            the chord joining their neighbours, are dropped. float.
    OUTPUTS:
    hull:   array (k, 2) of counter-clockwise vertices
    The chains are built with exact turn tests; tol only enters the pruning
    that follows, so every dropped vertex lies within tol of the hull kept.
    '''
    points = np.asarray(points, dtype=float).reshape(-1, 2)
    if len(points) == 0:
        return np.zeros((0, 2))

    pts = sorted(set(map(tuple, points.tolist())))
    if len(pts) == 1:
        return np.array(pts)

    def _chain(seq):
        chain = []
        for p in seq:
            while len(chain) >= 2 and _cross(chain[-2], chain[-1], p) <= 0:
                chain.pop()
            chain.append(p)
        return chain

    lower = _chain(pts)
    upper = _chain(reversed(pts))
    hull = _simplify(_dedupe(lower[:-1] + upper[:-1], tol), tol)
    return np.array(hull)


def minkowski_sum(polygons, weights, tol=0.0):
    '''
    Weighted Minkowski sum sum_k weights[k]*polygons[k] of convex polygons.
    Polygons with zero weight are skipped.
    '''
    total = None
    for poly, w in zip(polygons, weights):
        if w <= 0:
            continue
        scaled = w*np.asarray(poly, dtype=float)
        if total is None:
            total = scaled
        else:
            total = (total[:, None, :] + scaled[None, :, :]).reshape(-1, 2)
        total = convex_hull(total, tol)

    if total is None:
        raise ValueError("weights must contain a positive entry")
    return total


def clip(vertices, normal, offset, tol=0.0):
    '''
    Intersects a convex polygon with the half-plane {x : normal.x >= offset - tol}.
    Returns an empty (0, 2) array when the intersection is empty.
    '''
    vertices = np.asarray(vertices, dtype=float)
    if len(vertices) == 0:
        return vertices

    vals = np.dot(vertices, normal) - offset
    keep = vals >= -tol
    if keep.all():
        return vertices
    if not keep.any():
        return np.zeros((0, 2))

    n = len(vertices)
    out = []
    for i in range(n):
        j = (i + 1) % n
        if keep[i]:
            out.append(vertices[i])
        if keep[i] != keep[j]:
            t = min(max(vals[i]/(vals[i] - vals[j]), 0.0), 1.0)
            out.append(vertices[i] + t*(vertices[j] - vertices[i]))

    return convex_hull(out, tol)


def extreme_index(vertices, direction, tol=0.0, start=0):
    '''
    Index of the vertex of a convex polygon that is extreme in direction.
    Walks from vertex start while the value improves, which is enough because
    the values along a convex polygon are unimodal. Among vertices within tol
    of the maximum, the walk moves on to the one furthest counter-clockwise.
    '''
    n = len(vertices)
    vals = np.dot(vertices, direction)
    tang = np.dot(vertices, (-direction[1], direction[0]))

    i = start % n
    for step in (1, -1):
        for _ in range(n):
            j = (i + step) % n
            if vals[j] > vals[i]:
                i = j
            else:
                break

    vmax = vals[i]
    for _ in range(n):
        j = (i + 1) % n
        if vals[j] >= vmax - tol and tang[j] > tang[i]:
            i = j
        else:
            break
    return i


def is_convex(vertices, tol=1e-9):
    '''
    True if vertices are a convex polygon in counter-clockwise order: every
    turn is a left turn (up to tol in the sine of the turning angle) and the
    turns add up to one full revolution.
    '''
    vertices = np.asarray(vertices, dtype=float)
    if len(vertices) <= 2:
        return True

    e = np.roll(vertices, -1, axis=0) - vertices
    f = np.roll(e, -1, axis=0)
    cross = e[:, 0]*f[:, 1] - e[:, 1]*f[:, 0]
    dot = e[:, 0]*f[:, 0] + e[:, 1]*f[:, 1]
    scale = np.hypot(e[:, 0], e[:, 1])*np.hypot(f[:, 0], f[:, 1])

    if np.any(cross < -tol*scale):
        return False
    return abs(np.sum(np.arctan2(cross, dot)) - 2*np.pi) < 1e-6


def hausdorffnorm(A, B):
    '''
    Finds the hausdorff norm between two sets of points A and B.
    INPUTS:
    A: numpy array (n, 2)
    B: numpy array (m, 2)
    OUTPUTS:
    Hausdorff norm between the point sets A and B
    '''
    A = np.atleast_2d(np.asarray(A, dtype=float))
    B = np.atleast_2d(np.asarray(B, dtype=float))

    D = np.sqrt(np.sum((A[:, None, :] - B[None, :, :])**2, axis=2))
    return max(np.max(np.min(D, axis=1)), np.max(np.min(D, axis=0)))


def polygon_distance(points, vertices):
    '''
    Distance from each of points to the convex polygon vertices, zero for
    points inside it.
    INPUTS:
    points:     numpy array (m, 2)
    vertices:   counter-clockwise polygon, numpy array (n, 2). Points and
                segments are allowed.
    OUTPUTS:
    numpy array (m,)
    '''
    P = np.atleast_2d(np.asarray(points, dtype=float))
    V = np.atleast_2d(np.asarray(vertices, dtype=float))

    E = np.roll(V, -1, axis=0) - V
    L2 = np.sum(E**2, axis=1)
    AP = P[:, None, :] - V[None, :, :]
    t = np.divide(np.sum(AP*E, axis=2), L2, out=np.zeros((len(P), len(V))), where=L2 > 0)
    t = np.clip(t, 0.0, 1.0)
    gap = AP - t[:, :, None]*E
    dist = np.min(np.sqrt(np.sum(gap**2, axis=2)), axis=1)

    if len(V) >= 3:
        cross = E[None, :, 0]*AP[:, :, 1] - E[None, :, 1]*AP[:, :, 0]
        dist[np.all(cross >= 0, axis=1)] = 0.0
    return dist


def polygon_hausdorff(A, B):
    '''
    Hausdorff distance between two convex polygons. The largest distance
    from one convex polygon to another is attained at a vertex, so only the
    vertices of each are measured against the other.
    '''
    return max(np.max(polygon_distance(A, B)), np.max(polygon_distance(B, A)))


class Polygon(object):
    '''
    A convex polygon that grows one vertex at a time.
    Vertices live in an arena and are addressed by index; _next and _prev link
    them counter-clockwise. Removing a vertex returns its slot to a free list,
    so insertions never move existing vertices.
    tol:    points within tol of a vertex, or of the boundary, do not change the
            polygon, and vertices within tol of the chord of their neighbours
            are dropped. float.
    '''

    def __init__(self, tol=0.0):
        self.tol = tol
        self._xy = []
        self._next = []
        self._prev = []
        self._alive = []
        self._free = []
        self._head = -1
        self._size = 0

    @classmethod
    def from_points(cls, points, tol=0.0):
        '''Polygon spanned by the convex hull of points.'''
        poly = cls(tol)
        k = -1
        for p in convex_hull(points, tol):
            k = poly._link_after(k, p)
        return poly

    def __len__(self):
        return self._size

    def copy(self):
        other = Polygon(self.tol)
        k = -1
        for p in self.vertices():
            k = other._link_after(k, p)
        return other

    def _link_after(self, i, point):
        point = (float(point[0]), float(point[1]))
        if self._free:
            k = self._free.pop()
            self._xy[k] = point
            self._alive[k] = True
        else:
            k = len(self._xy)
            self._xy.append(point)
            self._next.append(k)
            self._prev.append(k)
            self._alive.append(True)

        if i < 0:
            self._next[k] = self._prev[k] = k
            self._head = k
        else:
            j = self._next[i]
            self._next[i] = k
            self._prev[k] = i
            self._next[k] = j
            self._prev[j] = k
        self._size += 1
        return k

    def _unlink(self, k):
        i, j = self._prev[k], self._next[k]
        self._next[i] = j
        self._prev[j] = i
        if self._head == k:
            self._head = j if j != k else -1
        self._alive[k] = False
        self._free.append(k)
        self._size -= 1

    def _reset(self, points):
        self.__init__(self.tol)
        k = -1
        for p in points:
            k = self._link_after(k, p)

    def indices(self):
        k = self._head
        for _ in range(self._size):
            yield k
            k = self._next[k]

    def vertices(self):
        '''Vertices as an array (n, 2), counter-clockwise from the head vertex.'''
        if self._size == 0:
            return np.zeros((0, 2))
        return np.array([self._xy[k] for k in self.indices()])

    def insert(self, point):
        '''
        Adds point to the polygon and discards the vertices it renders interior.
        Returns True if the polygon changed.
        '''
        p = (float(point[0]), float(point[1]))
        tol = self.tol

        if self._size == 0:
            self._link_after(-1, p)
            return True
        for k in self.indices():
            if _dist(self._xy[k], p) <= tol:
                return False
        if self._size == 1:
            self._link_after(self._head, p)
            return True

        if self._size == 2:
            a = self._head
            b = self._next[a]
            A, B = self._xy[a], self._xy[b]
            c = _cross(A, B, p)
            if abs(c) <= tol*_dist(A, B):
                # collinear: keep the two points furthest apart
                pairs = [(A, B), (A, p), (B, p)]
                u, v = max(pairs, key=lambda uv: _dist(*uv))
                self._reset([u, v])
                return (u, v) != (A, B)
            if c > 0:
                self._link_after(b, p)
            else:
                self._link_after(a, p)
            return True

        # edges k -> next[k] that have p strictly on their outer side
        visible = {}
        for k in self.indices():
            j = self._next[k]
            visible[k] = _cross(self._xy[k], self._xy[j], p) < -tol*_dist(self._xy[k], self._xy[j])

        if not any(visible.values()):
            # within tol of every edge line, but possibly far beyond a sharp vertex
            for k in self.indices():
                visible[k] = _cross(self._xy[k], self._xy[self._next[k]], p) < 0
            if not any(visible.values()):
                return False
            if min(_segment_dist(p, self._xy[k], self._xy[self._next[k]]) for k in self.indices()) <= tol:
                return False

        first = None
        for k in self.indices():
            if visible[k] and not visible[self._prev[k]]:
                first = k
                break
        if first is None:
            raise NumericalDegenerateError("every edge of the polygon is visible from a new vertex")

        last = first
        while visible[self._next[last]]:
            last = self._next[last]
        end = self._next[last]

        k = self._next[first]
        while k != end:
            nxt = self._next[k]
            self._unlink(k)
            k = nxt

        new = self._link_after(first, p)
        for k in (first, end, new):
            self._prune(k)
        return True

    def _prune(self, k):
        if self._size < 3 or not self._alive[k]:
            return
        if _flat(self._xy[self._prev[k]], self._xy[k], self._xy[self._next[k]], self.tol):
            self._unlink(k)

    def extreme(self, direction, hint=None):
        '''
        Returns (index, point) for the vertex that is extreme in direction,
        walking along the links from hint. Ties within tol go to the vertex
        furthest counter-clockwise.
        '''
        if self._size == 0:
            raise ValueError("empty polygon")

        d0, d1 = direction[0], direction[1]
        xy = self._xy

        def val(i):
            return xy[i][0]*d0 + xy[i][1]*d1

        def tan(i):
            return -xy[i][0]*d1 + xy[i][1]*d0

        k = hint if hint is not None and 0 <= hint < len(xy) and self._alive[hint] else self._head
        for link in (self._next, self._prev):
            for _ in range(self._size):
                j = link[k]
                if val(j) > val(k):
                    k = j
                else:
                    break

        vmax = val(k)
        for _ in range(self._size):
            j = self._next[k]
            if val(j) >= vmax - self.tol and tan(j) > tan(k):
                k = j
            else:
                break
        return k, np.array(xy[k])

    def is_convex(self, tol=1e-9):
        return is_convex(self.vertices(), tol)
