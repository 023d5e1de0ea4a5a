"""
The VIEW layer renders and exports grids (matplotlib, PyVista).
"""
