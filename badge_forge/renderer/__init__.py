"""Rendering subpackage.

Turns catalog masks and palette colors into encoded badge files:

* :mod:`~badge_forge.renderer.preprocess` scales raw bitmaps into alpha masks.
* :mod:`~badge_forge.renderer.compositor` stacks tinted masks on a canvas.
* :mod:`~badge_forge.renderer.quantize` maps the canvas to a tiny palette.
* :mod:`~badge_forge.renderer.encoder` writes the indexed PNG.

:mod:`~badge_forge.renderer.badge` wires these together for one job.
"""
