"""
The MODEL layer contains the grid data structures and algorithms.
It has NO knowledge of plotting or visualization libraries.
"""
