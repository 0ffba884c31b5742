## matrix transformation operations for 3D homogeneous coordinates
## in gmodel

## Copyright (c) 2025 Richard W. DeVaul
## Copyright (c) 2025 yapCAD contributors
## All rights reserved

# Permission is hereby granted, free of charge, to any person
# obtaining a copy of this software and associated documentation files
# (the "Software"), to deal in the Software without restriction,
# including without limitation the rights to use, copy, modify, merge,
# publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so,
# subject to the following conditions:
#
# The above copyright notice and this permission notice shall be
# included in all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
# MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND
# NONINFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS
# BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN
# ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN
# CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

from math import cos, sin

import gmodel.geom as geom

## a matrix is represented as a list of four four vectors, which are
## rows.  Since vectors are plain lists, M.mul(x) always treats x as a
## column vector.  Linear maps used by transform_closure() only need
## the upper-left 3x3 block; the last column carries a translation
## when one is present.


class Matrix:
    """4x4 transformation matrix class for transforming homogeneous 3D coordinates"""

    def __init__(self, a=False):
        self.m = [[1, 0, 0, 0],
                  [0, 1, 0, 0],
                  [0, 0, 1, 0],
                  [0, 0, 0, 1]]

        if isinstance(a, Matrix):
            for i in range(4):
                self.m[i] = list(a.getrow(i))

        elif isinstance(a, (tuple, list)):
            if len(a) == 4 and all(isinstance(r, (tuple, list)) and len(r) == 4
                                   for r in a):
                for i in range(4):
                    for j in range(4):
                        self.set(i, j, a[i][j])
            elif len(a) == 16:
                for i in range(4):
                    for j in range(4):
                        self.set(i, j, a[i*4+j])
            else:
                raise ValueError('bad thing used in attempt to initialize matrix: {}'.format(a))
        elif a is not False:
            raise ValueError('bad thing used in attempt to initialize matrix: {}'.format(a))

    def __repr__(self):
        return "Matrix({},{},{},{})".format(self.m[0], self.m[1],
                                            self.m[2], self.m[3])

    def __eq__(self, other):
        return isinstance(other, Matrix) and self.m == other.m

    def get(self, i, j):
        if i < 0 or i > 3 or j < 0 or j > 3:
            raise ValueError('bad index passed to get: {},{}'.format(i, j))
        return self.m[i][j]

    def set(self, i, j, x):
        if i < 0 or i > 3 or j < 0 or j > 3:
            raise ValueError('bad index passed to set: {},{}'.format(i, j))
        if not geom.isgoodnum(x):
            raise ValueError('bad value passed to set: {}'.format(x))
        self.m[i][j] = x

    def getrow(self, i):
        if i < 0 or i > 3:
            raise ValueError('bad row passed to getrow: {}'.format(i))
        return self.m[i]

    def getcol(self, j):
        if j < 0 or j > 3:
            raise ValueError('bad column passed to getcol: {}'.format(j))
        return [self.m[0][j], self.m[1][j], self.m[2][j], self.m[3][j]]

    # matrix multiply.  If x is a matrix, compute MX.  If x is a
    # vector, compute Mx.  If x is a scalar, compute xM.
    def mul(self, x):
        if isinstance(x, Matrix):
            result = Matrix()
            for i in range(4):
                for j in range(4):
                    result.set(i, j, _dot4(self.getrow(i), x.getcol(j)))
            return result
        elif geom.isvect(x):
            return [_dot4(self.getrow(i), x) for i in range(4)]
        elif geom.isgoodnum(x):
            return Matrix([[v * x for v in row] for row in self.m])

        raise ValueError('bad thing passed to mul(): {}'.format(x))


def _dot4(a, b):
    return a[0]*b[0] + a[1]*b[1] + a[2]*b[2] + a[3]*b[3]


def Linear(x, y, z):
    """Build the linear map whose columns are the images of the three
    coordinate axes."""
    return Matrix([[x[0], y[0], z[0], 0],
                   [x[1], y[1], z[1], 0],
                   [x[2], y[2], z[2], 0],
                   [0, 0, 0, 1]])


# return the generalized 4x4 arbitrary axis rotation matrix, angle in
# degrees
def Rotation(axis, angle, inverse=False):
    m = geom.mag(axis)
    u = axis
    if m < geom.epsilon:
        raise ValueError('zero-length rotation axis not allowed')
    if not geom.close(m, 1.0):
        u = geom.scale3(axis, 1.0/m)

    if inverse:
        angle *= -1.0
    rad = (angle % 360.0)*geom.pi2/360.0

    ux = u[0]
    uy = u[1]
    uz = u[2]

    cang = cos(rad)
    cmin = 1.0-cang
    sang = sin(rad)

    # see http://www.opengl-tutorial.org/assets/faq_quaternions/index.html#Q38
    R = [[cang + ux*ux*cmin, ux*uy*cmin-uz*sang, ux*uz*cmin+uy*sang, 0],
         [uy*ux*cmin+uz*sang, cang + uy*uy*cmin, uy*uz*cmin - ux*sang, 0],
         [uz*ux*cmin-uy*sang, uz*uy*cmin+ux*sang, cang+uz*uz*cmin, 0],
         [0, 0, 0, 1]]

    return Matrix(R)


def Translation(delta, inverse=False):
    if inverse:
        delta = geom.scale3(delta, -1.0)
    T = [[1, 0, 0, delta[0]],
         [0, 1, 0, delta[1]],
         [0, 0, 1, delta[2]],
         [0, 0, 0, 1]]
    return Matrix(T)

