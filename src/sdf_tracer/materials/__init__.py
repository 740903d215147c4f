"""Materials module for surface response parameters.

This module provides the single material model used by the Whitted shader:

Components:
    material: Material record (refractive index, albedo weights, diffuse
        color, specular exponent) and its Taichi field registry

Each primitive owns one material, referenced by index. The marcher copies
the material into the hit record; the shader reads it to weight the diffuse,
specular, reflected, and refracted terms.

Note: the registry allocates Taichi fields, so import it after ti.init().
"""
