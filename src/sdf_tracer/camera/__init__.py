"""Camera module for primary ray generation.

Components:
    pinhole: Fixed pinhole camera at the origin looking down -z

One ray is generated through the center of every pixel; there is no
jitter and no multi-sampling.

Note: pinhole allocates a Taichi field, so import it after ti.init().
"""
