"""
msseg - Mean Shift Color Image Segmentation.

This package segments color images by shifting every pixel toward the
local density mode of a joint spatial + Lab color feature space, producing
a piecewise-flattened image.
"""
