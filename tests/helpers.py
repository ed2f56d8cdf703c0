import numpy as np


def quadrant_array(width, height, alpha=False):
    """Four solid quadrants (red, green, blue, white) so turns and mirrors are visible"""
    channels = 4 if alpha else 3
    arr = np.zeros((height, width, channels), dtype=np.uint8)
    hw, hh = width // 2, height // 2
    arr[:hh, :hw, :3] = (255, 0, 0)
    arr[:hh, hw:, :3] = (0, 255, 0)
    arr[hh:, :hw, :3] = (0, 0, 255)
    arr[hh:, hw:, :3] = (255, 255, 255)
    if alpha:
        arr[:, :, 3] = 255
    return arr
