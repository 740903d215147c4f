"""Scene module for scene storage and construction.

This module handles scene representation and distance-field queries:

Components:
    field: Primitive storage and the scene distance field (nearest
        non-negative primitive distance, kind-tagged dispatch)
    lights: Point light storage
    manager: Owning scene builder with input validation
    four_spheres: The standard four-sphere, three-light scene

Scene data is organized for Taichi kernels:
    - Structure-of-Arrays layout per primitive kind
    - Material indices stored per primitive
    - Brute-force linear scan, no acceleration structure

Note: these modules allocate Taichi fields, so import them after ti.init().
"""
