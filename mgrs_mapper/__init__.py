"""MGRS Coordinate Mapper.

Draw, name, persist and exchange polygonal Areas of Interest, each
annotated with the MGRS grid reference of its centroid.
"""

__version__ = "0.1.0"
