import math

# ============================================================================
# Vector and Math Utilities
# ============================================================================

def norm(v):
    """Compute the L2 norm of a vector of any length."""
    return math.sqrt(sum(c * c for c in v))

def dot(v1, v2):
    """Dot product of two vectors (can be 3D or 4D for quaternions)."""
    return sum(a * b for a, b in zip(v1, v2))

def sq_distance(v1, v2):
    """Squared Euclidean distance between two vectors of equal length."""
    return sum((a - b) * (a - b) for a, b in zip(v1, v2))

def rad2deg(rad):
    """Convert radians to degrees."""
    return rad * 180.0 / math.pi

def clamp01(x):
    """Clamp a value to [0, 1]."""
    return max(0.0, min(1.0, x))

def is_finite_vector(v):
    """True when every component is a finite number."""
    return all(math.isfinite(c) for c in v)

# ============================================================================
# Quaternion Utilities
#
# Quaternions are [w, x, y, z] sequences.
# ============================================================================

def neg4(q):
    """Negate a quaternion."""
    return [-q[0], -q[1], -q[2], -q[3]]

def quat_normalize(q):
    """Normalize a quaternion. Degenerate input yields the identity."""
    n = norm(q)
    if n > 1e-10:
        return [q[0]/n, q[1]/n, q[2]/n, q[3]/n]
    return [1.0, 0.0, 0.0, 0.0]

def quat_from_axis_angle(axis, angle_rad):
    """Build a unit quaternion rotating by angle_rad around axis."""
    n = norm(axis)
    if n < 1e-10:
        return [1.0, 0.0, 0.0, 0.0]
    s = math.sin(0.5 * angle_rad) / n
    return [math.cos(0.5 * angle_rad), axis[0] * s, axis[1] * s, axis[2] * s]

def quat_angle_between(q1, q2):
    """
    Angle in degrees of the rotation taking q1 to q2.

    Both inputs are expected to be unit quaternions. q and -q are treated as
    the same rotation, so the result lies in [0, 180].
    """
    d = min(abs(dot(q1, q2)), 1.0)
    return rad2deg(2.0 * math.acos(d))

def slerp(q1, q2, t):
    """
    Spherical linear interpolation between two unit quaternions.
    t: interpolation parameter [0, 1]
    Returns a unit quaternion on the shorter arc.
    """
    if t <= 0.0:
        return list(q1)

    # Ensure shortest path
    dot_q = dot(q1, q2)
    if dot_q < 0:
        q2 = neg4(q2)
        dot_q = -dot_q

    if t >= 1.0:
        return quat_normalize(q2)

    # Clamp for numerical stability
    dot_q = min(1.0, dot_q)

    theta = math.acos(dot_q)
    if abs(theta) < 1e-6:
        # Quaternions are very close, use linear interpolation
        return quat_normalize([q1[i] + t * (q2[i] - q1[i]) for i in range(4)])

    sin_theta = math.sin(theta)
    w1 = math.sin((1 - t) * theta) / sin_theta
    w2 = math.sin(t * theta) / sin_theta

    return quat_normalize([w1 * q1[i] + w2 * q2[i] for i in range(4)])

def fix_quat_hemisphere(qs):
    """Flip signs so consecutive quaternions in a series share a hemisphere."""
    if len(qs) == 0:
        return []
    out = [list(qs[0])]
    for t in range(1, len(qs)):
        out.append(list(qs[t]) if dot(out[t-1], qs[t]) >= 0 else neg4(qs[t]))
    return out
