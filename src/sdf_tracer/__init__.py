"""Taichi implementation of a sphere-tracing SDF renderer.

This package renders scenes described by signed distance fields using
sphere tracing and recursive Whitted-style shading:
- Ray marching through a brute-force scene distance field
- Fresnel-gated reflection and refraction with bounded recursion
- Point lights with marched shadow rays
- Checkerboard ground plane fallback

Subpackages:
    core: Constants, ray utilities, marcher, integrator, and renderer
    geometry: SDF primitives and the ground plane
    materials: Material record and registry
    scene: Primitive and light storage, scene manager, built-in scene
    camera: Pinhole camera ray generation
    preview: Tone mapping and PPM export
"""

__version__ = "0.1.0"
