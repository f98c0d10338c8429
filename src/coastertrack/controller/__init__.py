"""
The CONTROLLER layer turns model objects into geometry: frames along the
curve, extruded triangle batches, and the assembled mesh buffers.
"""
