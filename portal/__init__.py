"""
SKY Solutions portal: the web tier between browsers and the SKY Solutions
backend API.
"""

__version__ = "1.0.0"
