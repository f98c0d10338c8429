"""
The VIEW layer adapts built meshes to PyVista for display and export.
It is never imported by the model or controller layers.
"""
