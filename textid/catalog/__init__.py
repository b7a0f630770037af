"""textid catalog package.

Turns the bundled catalog JSON into compiled, priority-ordered pattern tables:
boundary.py (anchor stripping), loader.py (record parsing) and registry.py
(re2 compilation and the lazily built default catalog).
"""
