"""
Repository Hierarchy - Archival repositories and their sources as a finding aid.

This package reads genealogical records, groups the sources held by a
repository into a call number hierarchy and exports that hierarchy as an
EAD/XML finding aid.
"""

__version__ = "0.1.0"
__author__ = "Repository Hierarchy Contributors"
